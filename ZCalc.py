from Tokenizer import (LineReader, Tokenizer, Token, diagnostic,
                       format_number)
from typing import Callable, List, Optional, TextIO
from functools import wraps
from FoldVis import FoldVis
import math
import operator
import sys


class ZCalcDebug:
    """Trace of every evaluated line.

    Each line is a node named after its input position. Under it the parser
    records the non-terminals it entered, the tokens it consumed and every
    operand stack change, and finally the outcome of the line.
    """

    class NT:
        def __init__(self, name: str):
            self.name = name
            self.components = []
            # Set when a syntax error unwound through this non-terminal
            self.unwound = False

        def __str__(self) -> str:
            return f"NT:{self.name}" + (" (unwound)" if self.unwound else "")

    class Line(NT):
        def __str__(self) -> str:
            return f"line {self.name}"

    class StackOp:
        # A value pushed (op is None) or two values folded by op
        def __init__(self, op: Optional[str], value: float, depth: int):
            self.op = op
            self.value = value
            self.depth = depth

        def __str__(self) -> str:
            if self.op is None:
                action = f"push {format_number(self.value)}"
            else:
                action = f"fold {self.op} -> {format_number(self.value)}"
            return f"{action} (depth {self.depth})"

    def __init__(self, file: str = None):
        self.root = []
        self.current = self.root
        self.stack = []
        self.file = file

    def add(self, item):
        self.current.append(item)

    def _open(self, node: NT) -> NT:
        self.add(node)
        self.stack.append(self.current)
        self.current = node.components
        return node

    def begin_line(self, position: str) -> Line:
        self.current = self.root
        self.stack = []
        return self._open(self.Line(position))

    def end_line(self, outcome: str) -> None:
        self.add(outcome)
        self.current = self.root
        self.stack = []

    def push(self, func_name: str) -> NT:
        return self._open(self.NT(func_name))

    def pop(self):
        self.current = self.stack.pop()

    def stack_op(self, op: Optional[str], value: float, depth: int):
        self.add(self.StackOp(op, value, depth))

    def toStr(self, node: List, indent: int = 0) -> str:
        string = ""
        prefix = '| ' * indent

        for item in node:
            if isinstance(item, self.NT):
                string += f"{prefix}{item}\n"
                string += self.toStr(indent=indent+1, node=item.components)
            elif isinstance(item, Token):
                string += f"{prefix}{item!r}\n"
            elif isinstance(item, self.StackOp):
                string += f"{prefix}{item}\n"
            elif isinstance(item, str):
                string += f"{prefix}= {item}\n"
            else:
                raise Exception("Internal error: debug node of unexpected "
                                f"type {type(item)}")

        return string

    def dump(self):
        if self.file:
            with open(self.file, "w+") as f:
                f.write(self.toStr(self.root))
        else:
            print(self.toStr(self.root), end="")


class CalcSyntaxError(Exception):
    def __init__(self, detail: str, col: int):
        super().__init__(detail)
        self.detail = detail
        self.col = col


def divide(lhs: float, rhs: float) -> float:
    # IEEE semantics instead of ZeroDivisionError
    if rhs == 0:
        if lhs == 0 or math.isnan(lhs):
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)
    return lhs / rhs


OPERATIONS = {
    Token.ADD: operator.add,
    Token.SUB: operator.sub,
    Token.MUL: operator.mul,
    Token.DIV: divide,
}


class ZCalc:
    tokenizer: Tokenizer
    token: Token
    nums: List[float]
    out: TextIO
    lineno: int

    def __init__(self, reader: LineReader, out: TextIO = None,
                 debug: ZCalcDebug = None, vis: FoldVis = None):
        self.out = out if out else sys.stdout
        self.debug = debug
        self.vis = vis
        self.tokenizer = Tokenizer(reader, out=self.out)
        self.token = None
        self.nums = []
        self.lineno = 0

    def _next(self) -> None:
        if self.debug and self.token and self.token.type != Token.END:
            self.debug.add(self.token)
        self.token = self.tokenizer.getNext()

    def error(self, msg: str) -> None:
        raise CalcSyntaxError(msg, self.token.col)

    def _push(self, value: float) -> None:
        self.nums.append(value)
        if self.debug:
            self.debug.stack_op(None, value, len(self.nums))
        if self.vis:
            self.vis.push(value)

    def _fold(self, op: int) -> None:
        assert len(self.nums) >= 2, "Internal error: folding a stack of " \
            f"depth {len(self.nums)}"
        rhs = self.nums.pop()
        self.nums[-1] = OPERATIONS[op](self.nums[-1], rhs)
        if self.debug:
            self.debug.stack_op(Token.TokenText[op], self.nums[-1],
                                len(self.nums))
        if self.vis:
            self.vis.fold(Token.TokenText[op], self.nums[-1])

    def _nonterminal(func: Callable):
        @wraps(func)
        def wrapNT(self, *args, **kargs):
            if not self.debug:
                return func(self, *args, **kargs)

            nt = self.debug.push(func.__name__)
            try:
                return func(self, *args, **kargs)

            except CalcSyntaxError:
                nt.unwound = True
                raise

            finally:
                self.debug.pop()

        return wrapNT

    @_nonterminal
    def expr(self) -> None:
        # expr = [item] exprtail

        if not self.item():
            if self.token.type in [Token.ADD, Token.SUB]:
                # A leading sign reads as 0 +/- item
                self._push(0.0)
            elif self.token.type == Token.END:
                return
            else:
                self.error("missing expr")

        self.exprtail()

    @_nonterminal
    def exprtail(self) -> None:
        # exprtail = ("+" | "-") item exprtail | <empty>

        while self.token.type in [Token.ADD, Token.SUB]:
            op = self.token.type
            self._next()
            if self.token.type == Token.END:
                self.error("missing operand")
            if not self.item():
                self.error(f"redundant operator '{self.token}'")
            self._fold(op)

        if self.token.type not in [Token.RPAREN, Token.END]:
            self.error("missing operator")

    @_nonterminal
    def item(self) -> bool:
        # item = factor itemtail

        if not self.factor():
            return False
        self.itemtail()
        return True

    @_nonterminal
    def itemtail(self) -> None:
        # itemtail = ("*" | "/") factor itemtail | <empty>

        while self.token.type in [Token.MUL, Token.DIV]:
            op = self.token.type
            self._next()
            if self.token.type == Token.END:
                self.error("missing operand")
            if not self.factor():
                self.error(f"redundant operator '{self.token}'")
            self._fold(op)

        if self.token.type not in [Token.ADD, Token.SUB, Token.RPAREN,
                                   Token.END]:
            self.error("missing operator")

    @_nonterminal
    def factor(self) -> bool:
        # factor = "(" expr ")" | number

        if self.token.type == Token.LPAREN:
            self._next()
            if self.token.type == Token.END:
                self.error("missing ')'")
            self.expr()
            if self.token.type != Token.RPAREN:
                self.error("missing ')'")
            self._next()
            return True

        elif self.token.type == Token.NUMBER:
            self._push(self.token.value)
            self._next()
            return True

        return False

    def eval(self) -> None:
        self.nums.clear()
        self.lineno += 1
        if self.debug:
            self.debug.begin_line(
                f"{self.tokenizer.reader.name}:{self.lineno}")
        if self.vis:
            self.vis.begin_line(self.lineno)

        # END left over from the previous line
        if self.token is None or self.token.type == Token.END:
            self._next()

        result = None
        failure = None
        try:
            self.expr()
            if self.token.type != Token.END:
                self.error("unmatched ')'")

        except CalcSyntaxError as e:
            failure = f"syntax error: {e.detail}"
            # The lexical error for this line has been reported already
            if not self.tokenizer.lex_error:
                print(diagnostic(e.col, failure), file=self.out)
            if self.token.type != Token.END:
                self.token = self.tokenizer.abort()

        else:
            assert len(self.nums) <= 1, "Internal error: operand stack " \
                f"holds {len(self.nums)} values at the end of a line"
            if self.nums:
                result = self.nums.pop()

        if self.tokenizer.lex_error:
            failure = f"lexical error: {self.tokenizer.lex_error.detail}"
            result = None
        elif result is not None:
            print(format_number(result), file=self.out)

        if self.debug:
            if failure:
                self.debug.end_line(failure)
            elif result is not None:
                self.debug.end_line(format_number(result))
            else:
                self.debug.end_line("empty")
        if self.vis:
            self.vis.end_line(result, failure)

        self.nums.clear()
        self.tokenizer.reset_line()

    def run(self) -> None:
        while not self.tokenizer.end():
            self.eval()
