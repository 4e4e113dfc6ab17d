#! /bin/env python3

from decimal import Decimal, DecimalException
import math
import sys
from typing import Optional, TextIO


class LineReader:
    EOF = ""

    def __init__(self, stream: TextIO, name: str = "<stdin>"):
        self.stream = stream
        self.name = name
        self.is_eof = False

        # Undecodable bytes reach the tokenizer as U+FFFD, an invalid token
        if hasattr(stream, "reconfigure"):
            stream.reconfigure(errors="replace")

    def __enter__(self) -> "LineReader":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @classmethod
    def open(cls, file: str) -> Optional["LineReader"]:
        try:
            return cls(open(file, encoding="utf-8", errors="replace"),
                       name=file)
        except OSError as e:
            print(f"LineReader error <{file}> Fail to open file: {e}",
                  file=sys.stderr)
            return None

    def close(self) -> None:
        self.stream.close()

    def end(self) -> bool:
        return self.is_eof

    def getNext(self) -> str:
        if self.is_eof:
            return self.EOF
        sym = self.stream.read(1)
        if sym == self.EOF:
            self.is_eof = True
        return sym


class Token:
    END = 0  # end of line or end of input
    NUMBER = 1  # number
    ADD = 11  # +
    SUB = 12  # -
    MUL = 21  # *
    DIV = 22  # /
    LPAREN = 30  # (
    RPAREN = 31  # )

    TokenName = {
        END: "END",
        NUMBER: "NUMBER",
        ADD: "ADD",
        SUB: "SUB",
        MUL: "MUL",
        DIV: "DIV",
        LPAREN: "LPAREN",
        RPAREN: "RPAREN",
    }

    SYMBOLS = {
        "+": ADD,
        "-": SUB,
        "*": MUL,
        "/": DIV,
        "(": LPAREN,
        ")": RPAREN,
    }

    TokenText = {v: k for k, v in SYMBOLS.items()}

    type: int
    col: int
    value: float

    def __init__(self, type: int, col: int, value: float = 0.0):
        assert type in self.TokenName, f"Unknown token type {type}"
        self.type = type
        self.col = col
        self.value = value

    def __str__(self) -> str:
        if self.type == Token.NUMBER:
            return format_number(self.value)
        elif self.type == Token.END:
            return "end"
        else:
            return self.TokenText[self.type]

    def __repr__(self) -> str:
        return f'"{self.__str__()}" ({self.TokenName[self.type]}) ' + \
            f'col {self.col}'


def format_number(value: float) -> str:
    # Same text as a default-configured C++ ostream: 14, 0.5, 1e+20, inf
    return f"{value:g}"


def diagnostic(col: int, msg: str) -> str:
    return f"{' ' * col}^\n{msg}"


class LexError(Exception):
    def __init__(self, detail: str, col: int):
        super().__init__(detail)
        self.detail = detail
        self.col = col


class Tokenizer:
    # Column of the lookahead before the first character of a line is read
    COL_SENTINEL = -1

    reader: LineReader
    out: TextIO
    inputSym: str
    col: int
    token: Optional[Token]
    lex_error: Optional[LexError]

    def __init__(self, reader: LineReader, out: TextIO = None):
        self.reader = reader
        self.out = out if out else sys.stdout

        # States
        self.inputSym = None
        self.col = self.COL_SENTINEL
        self.token = None
        self.lex_error = None

        self.next()  # Read the first char

    def end(self) -> bool:
        return self.inputSym == LineReader.EOF

    def next(self) -> None:
        self.inputSym = self.reader.getNext()
        self.col += 1

    def reset_line(self) -> None:
        self.col = self.COL_SENTINEL
        self.lex_error = None

    def is_white_space(self) -> bool:
        return self.inputSym in [" ", "\t", "\r", "\f", "\v"]

    def is_digit(self) -> bool:
        return self.inputSym != LineReader.EOF and \
            ord(self.inputSym) >= ord("0") and ord(self.inputSym) <= ord("9")

    def clear_white_space(self) -> None:
        while self.is_white_space():
            self.next()

    def digits(self) -> str:
        # The digit run at the lookahead
        run = ""
        while self.is_digit():
            run += self.inputSym
            self.next()
        return run

    def number(self) -> Token:
        col = self.col
        frac, exponent = "", "0"

        whole = self.digits()

        if self.inputSym == ".":
            self.next()
            if not self.is_digit():
                raise LexError("missing value after decimal dot", self.col)
            frac = self.digits()

        if self.inputSym in ["e", "E"]:
            self.next()
            sign = ""
            if self.inputSym in ["+", "-"]:
                sign = self.inputSym
                self.next()
            if not self.is_digit():
                raise LexError("missing value after scientific notation E",
                               self.col)
            exponent = sign + self.digits()

        return Token(Token.NUMBER, col, self.scale(whole, frac, exponent))

    @staticmethod
    def scale(whole: str, frac: str, exponent: str) -> float:
        # (whole + frac * 10^-len(frac)) * 10^exponent, computed exactly and
        # rounded once; out-of-range values become inf or 0.0
        try:
            return float(Decimal(f"{whole or '0'}.{frac or '0'}e{exponent}"))
        except DecimalException:
            # Exponent outside the decimal module's range; no mantissa that
            # fits on a line can bring it back
            if not (whole + frac).strip("0"):
                return 0.0
            return 0.0 if exponent.startswith("-") else math.inf

    def operator(self) -> Token:
        sym = self.inputSym
        if sym not in Token.SYMBOLS:
            raise LexError(f"invalid token '{sym}' (code {ord(sym)})",
                           self.col)
        token = Token(Token.SYMBOLS[sym], self.col)
        self.next()
        return token

    def match(self) -> Token:
        self.clear_white_space()

        if self.inputSym == "\n":
            # The newline stays unread; a space keeps retries from looping
            self.inputSym = " "
            return Token(Token.END, self.col)
        elif self.inputSym == LineReader.EOF:
            return Token(Token.END, self.col)
        elif self.is_digit() or self.inputSym == ".":
            return self.number()
        else:
            return self.operator()

    def getNext(self) -> Token:
        try:
            self.token = self.match()
        except LexError as e:
            self.lex_error = e
            print(diagnostic(e.col, f"lexical error: {e.detail}"),
                  file=self.out)
            return self.abort()
        return self.token

    def abort(self) -> Token:
        # Drop the rest of the line, newline included
        while self.inputSym not in ["\n", LineReader.EOF]:
            self.next()
        if self.inputSym == "\n":
            self.inputSym = " "
        self.token = Token(Token.END, self.col)
        return self.token
