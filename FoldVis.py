from graphviz import Digraph
from Tokenizer import format_number
from typing import List, Optional


class FoldVis:
    _graph: Digraph
    _line: Optional[Digraph]
    _nodes: List[str]

    value_color = "#00BFFF"
    fold_color = "#D2691E"
    error_color = "#FF69B4"

    def __init__(self, filename: str = "graph/out.dot") -> None:
        self._graph = Digraph('folds', filename=filename,
                              node_attr={'shape': 'record'})
        self._line = None
        self._lineno = 0
        self._cnt = 0
        # Graph nodes mirroring the operand stack
        self._nodes = []

    def _node_name(self) -> str:
        self._cnt += 1
        return f"l{self._lineno}n{self._cnt}"

    def begin_line(self, lineno: int) -> None:
        self._lineno = lineno
        self._cnt = 0
        self._nodes = []
        self._line = Digraph(name=f"cluster_{lineno}")

    def push(self, value: float) -> None:
        name = self._node_name()
        self._line.node(name, format_number(value),
                        color=FoldVis.value_color)
        self._nodes.append(name)

    def fold(self, op: str, value: float) -> None:
        assert len(self._nodes) >= 2
        rhs = self._nodes.pop()
        lhs = self._nodes.pop()
        name = self._node_name()
        self._line.node(name, f"{{{op}|{format_number(value)}}}",
                        color=FoldVis.fold_color)
        self._line.edge(lhs, name)
        self._line.edge(rhs, name)
        self._nodes.append(name)

    def end_line(self, result: Optional[float],
                 failure: Optional[str] = None) -> None:
        # Empty lines are left out of the graph
        if result is None and failure is None:
            self._line = None
            return

        if failure:
            self._line.attr(label=f"line {self._lineno}: {failure}",
                            color=FoldVis.error_color,
                            fontcolor=FoldVis.error_color, style="dashed")
        else:
            self._line.attr(label=f"line {self._lineno} = "
                            f"{format_number(result)}")
        self._graph.subgraph(self._line)
        self._line = None

    def source(self) -> str:
        return self._graph.source

    def render(self):
        self._graph.render()
