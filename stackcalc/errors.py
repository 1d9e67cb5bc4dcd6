import enum
from dataclasses import dataclass, field
from typing import Optional

from stackcalc.utils import PrintableEnum


class ErrorKind(PrintableEnum):
    # lexical, raised by the tokenizer
    MALFORMED_DECIMAL = enum.auto()
    UNMATCHED_CLOSE_PAREN = enum.auto()
    UNCLOSED_PAREN = enum.auto()
    MISPLACED_OPERATOR = enum.auto()
    INVALID_CHARACTER = enum.auto()
    MISSING_OPERATOR = enum.auto()
    EMPTY_PARENTHESES = enum.auto()
    # structural, only reachable with token sequences the tokenizer never produces
    UNSUPPORTED_OPERATOR = enum.auto()
    STACK_UNDERFLOW = enum.auto()
    MALFORMED_EXPRESSION = enum.auto()


@dataclass
class CalculatorError(Exception):
    """Base of every failure ``tokenize`` and ``evaluate`` raise.

    Carries the error kind plus whatever context subclasses add; the human
    readable text is derived on demand from those fields, so callers can
    branch on ``kind`` and produce their own messages.
    """

    kind: ErrorKind
    symbol: Optional[str] = field(default=None, kw_only=True)

    @property
    def errmsg(self) -> str:
        symbol = self.symbol
        if self.kind is ErrorKind.MALFORMED_DECIMAL:
            return "Malformed decimal number"
        elif self.kind is ErrorKind.UNMATCHED_CLOSE_PAREN:
            return "Closing parenthesis without a matching opening one"
        elif self.kind is ErrorKind.UNCLOSED_PAREN:
            return "Opening parenthesis is never closed"
        elif self.kind is ErrorKind.MISPLACED_OPERATOR:
            if symbol is None:
                return "Empty expression"
            return f"Misplaced operator {symbol!r}"
        elif self.kind is ErrorKind.INVALID_CHARACTER:
            return f"Invalid character {symbol!r}"
        elif self.kind is ErrorKind.MISSING_OPERATOR:
            return "Operator expected between operands"
        elif self.kind is ErrorKind.EMPTY_PARENTHESES:
            return "Empty parentheses"
        elif self.kind is ErrorKind.UNSUPPORTED_OPERATOR:
            return f"Unsupported operator {symbol!r}"
        elif self.kind is ErrorKind.STACK_UNDERFLOW:
            return "Not enough operands or operators on the stack"
        elif self.kind is ErrorKind.MALFORMED_EXPRESSION:
            if symbol is not None:
                return f"Malformed expression near {symbol!r}"
            return "Malformed expression"
        else:
            raise RuntimeError(f"Unexpected error kind: {self.kind}")

    def __str__(self) -> str:
        return self.errmsg
