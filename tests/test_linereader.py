import sys
import os

sys.path.append(os.path.dirname(os.path.realpath(__file__)) + "/..")

import unittest
from Tokenizer import LineReader
import io
import tempfile


class TestLineReader(unittest.TestCase):
    def test_linereader(self):
        reader = LineReader(io.StringIO("i - 5"))
        self.assertEqual(reader.name, "<stdin>")

        self.assertEqual(reader.getNext(), "i")
        self.assertEqual(reader.getNext(), " ")
        self.assertEqual(reader.getNext(), "-")
        self.assertEqual(reader.getNext(), " ")
        self.assertEqual(reader.getNext(), "5")
        self.assertFalse(reader.end())

        self.assertEqual(reader.getNext(), LineReader.EOF)
        self.assertTrue(reader.end())
        self.assertEqual(reader.getNext(), LineReader.EOF)
        self.assertTrue(reader.end())

    def test_linereader_lines(self):
        reader = LineReader(io.StringIO("1\n2\n"), name="exprs")
        self.assertEqual(reader.name, "exprs")

        self.assertEqual(reader.getNext(), "1")
        self.assertEqual(reader.getNext(), "\n")
        self.assertEqual(reader.getNext(), "2")
        self.assertEqual(reader.getNext(), "\n")
        self.assertFalse(reader.end())
        self.assertEqual(reader.getNext(), LineReader.EOF)
        self.assertTrue(reader.end())

    def test_linereader_undecodable(self):
        stream = io.TextIOWrapper(io.BytesIO(b"1\xff2"), encoding="utf-8")
        reader = LineReader(stream)

        self.assertEqual(reader.getNext(), "1")
        self.assertEqual(reader.getNext(), "\ufffd")
        self.assertEqual(reader.getNext(), "2")
        self.assertEqual(reader.getNext(), LineReader.EOF)

    def test_linereader_open(self):
        with tempfile.NamedTemporaryFile() as tmp:
            with open(tmp.name, "wb") as f:
                f.write(b"7\xfe\n")
            with LineReader.open(tmp.name) as reader:
                self.assertEqual(reader.name, tmp.name)
                self.assertEqual(reader.getNext(), "7")
                self.assertEqual(reader.getNext(), "\ufffd")
            self.assertTrue(reader.stream.closed)

    def test_linereader_open_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            missing = os.path.join(tmpdir, "missing.txt")

            sys.stderr = io.StringIO()
            try:
                reader = LineReader.open(missing)
                msg = sys.stderr.getvalue()
            finally:
                sys.stderr = sys.__stderr__

        self.assertIsNone(reader)
        self.assertTrue(msg.startswith(
            f"LineReader error <{missing}> Fail to open file"))


if __name__ == "__main__":
    unittest.main()
