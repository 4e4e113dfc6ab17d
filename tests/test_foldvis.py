import sys
import os

sys.path.append(os.path.dirname(os.path.realpath(__file__)) + "/..")

import unittest
from FoldVis import FoldVis
from ZCalc import ZCalc
from Tokenizer import LineReader
import io


class TestFoldVis(unittest.TestCase):
    def run_calc(self, code: str) -> FoldVis:
        vis = FoldVis()
        calc = ZCalc(LineReader(io.StringIO(code)), out=io.StringIO(),
                     vis=vis)
        calc.run()
        return vis

    def test_folds(self):
        source = self.run_calc("2 + 3 * 4\n").source()

        self.assertIn("subgraph cluster_1", source)
        self.assertIn("{*|12}", source)
        self.assertIn("{+|14}", source)
        self.assertIn("line 1 = 14", source)
        # 3 pushed values, 2 folds
        self.assertIn("l1n5", source)
        self.assertNotIn("l1n6", source)
        self.assertIn("l1n3 -> l1n4", source)
        self.assertIn("l1n4 -> l1n5", source)

    def test_leading_sign(self):
        source = self.run_calc("-5\n").source()
        self.assertIn("{-|-5}", source)

    def test_empty_and_error_lines(self):
        source = self.run_calc("1\n\n3 +\n4 $\n").source()

        self.assertIn("subgraph cluster_1", source)
        self.assertNotIn("cluster_2", source)
        self.assertIn("subgraph cluster_3", source)
        self.assertIn("line 3: syntax error: missing operand", source)
        self.assertIn("subgraph cluster_4", source)
        self.assertIn("line 4: lexical error: invalid token", source)

    def test_direct_calls(self):
        vis = FoldVis(filename="graph/test.dot")
        vis.begin_line(1)
        vis.push(6.0)
        vis.push(2.0)
        vis.fold("/", 3.0)
        vis.end_line(3.0)

        source = vis.source()
        self.assertIn("{/|3}", source)
        self.assertIn("l1n1 -> l1n3", source)
        self.assertIn("l1n2 -> l1n3", source)


if __name__ == "__main__":
    unittest.main()
