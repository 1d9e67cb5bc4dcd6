import enum
import logging
import re
import string
from dataclasses import dataclass
from typing import Optional

from stackcalc.errors import CalculatorError, ErrorKind
from stackcalc.operators import SYMBOLS, Operator
from stackcalc.utils import PrintableEnum, point_at

logger = logging.getLogger(__name__)


@dataclass
class LexicalError(CalculatorError):
    code: str
    error_char_idx: int

    def __str__(self) -> str:
        return "\n".join([f"[Tokenizer error] {self.errmsg}", point_at(self.code, self.error_char_idx)])


class TokenType(PrintableEnum):
    NUMBER = enum.auto()
    OPERATOR = enum.auto()
    BRACKET_OPEN = enum.auto()
    BRACKET_CLOSE = enum.auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    position: int = -1

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"


NUMBER_RE = re.compile(r"-?([0-9]+\.?[0-9]*|\.[0-9]+)")


def _is_digit(s: str) -> bool:
    return s in string.digits


@dataclass
class _OpenParen:
    idx: int
    negated: bool


def tokenize(code: str) -> list[Token]:
    """Split ``code`` into numbers, operators and parentheses.

    Whitespace is ignored everywhere, including inside a number literal. A
    ``-`` with no operand before it starts a negative literal; directly in
    front of ``(`` it negates the whole group, which comes out as
    ``( -1 * ( ... ) )``.

    Raises LexicalError on the first problem found.
    """
    tokens: list[Token] = []
    open_parens: list[_OpenParen] = []

    number = ""
    number_start_idx = -1
    has_decimal = False
    last_char: Optional[str] = None
    last_char_idx = -1

    def error(kind: ErrorKind, idx: int, symbol: Optional[str] = None) -> LexicalError:
        return LexicalError(kind, code=code, error_char_idx=idx, symbol=symbol)

    def flush_number() -> None:
        nonlocal number, has_decimal
        if NUMBER_RE.fullmatch(number) is None:
            if has_decimal:
                raise error(ErrorKind.MALFORMED_DECIMAL, number_start_idx)
            raise error(ErrorKind.MISPLACED_OPERATOR, number_start_idx, symbol=number)
        tokens.append(Token(type=TokenType.NUMBER, lexeme=number, position=number_start_idx))
        number = ""
        has_decimal = False

    for i, c in enumerate(code):
        if c.isspace():
            continue

        if _is_digit(c):
            if not number:
                if last_char == ")":
                    raise error(ErrorKind.MISSING_OPERATOR, i)
                number_start_idx = i
            number += c
        elif c == ".":
            if has_decimal or not number:
                raise error(ErrorKind.MALFORMED_DECIMAL, i)
            number += c
            has_decimal = True
        elif c == "(":
            negated = False
            if number == "-":
                negated = True
                tokens.append(Token(type=TokenType.BRACKET_OPEN, lexeme="(", position=number_start_idx))
                tokens.append(Token(type=TokenType.NUMBER, lexeme="-1", position=number_start_idx))
                tokens.append(Token(type=TokenType.OPERATOR, lexeme=Operator.MUL.symbol, position=number_start_idx))
                number = ""
            elif number:
                if NUMBER_RE.fullmatch(number) is None:
                    raise error(ErrorKind.MALFORMED_DECIMAL, number_start_idx)
                raise error(ErrorKind.MISSING_OPERATOR, i)
            elif last_char == ")":
                raise error(ErrorKind.MISSING_OPERATOR, i)
            open_parens.append(_OpenParen(idx=i, negated=negated))
            tokens.append(Token(type=TokenType.BRACKET_OPEN, lexeme=c, position=i))
        elif c == ")":
            if not open_parens:
                raise error(ErrorKind.UNMATCHED_CLOSE_PAREN, i)
            if number:
                flush_number()
            elif last_char == "(":
                raise error(ErrorKind.EMPTY_PARENTHESES, last_char_idx)
            elif last_char in SYMBOLS:
                raise error(ErrorKind.MISPLACED_OPERATOR, last_char_idx, symbol=last_char)
            paren = open_parens.pop()
            tokens.append(Token(type=TokenType.BRACKET_CLOSE, lexeme=c, position=i))
            if paren.negated:
                tokens.append(Token(type=TokenType.BRACKET_CLOSE, lexeme=c, position=i))
        elif c in SYMBOLS:
            starts_operand = last_char is None or last_char in SYMBOLS or last_char == "("
            if not number and c == Operator.SUB.symbol and starts_operand:
                number = c
                number_start_idx = i
            else:
                if number:
                    flush_number()
                elif last_char != ")":
                    raise error(ErrorKind.MISPLACED_OPERATOR, i, symbol=c)
                tokens.append(Token(type=TokenType.OPERATOR, lexeme=c, position=i))
        else:
            raise error(ErrorKind.INVALID_CHARACTER, i, symbol=c)

        last_char = c
        last_char_idx = i

    if not number and (last_char is None or last_char in SYMBOLS):
        raise error(ErrorKind.MISPLACED_OPERATOR, max(last_char_idx, 0), symbol=last_char)

    if open_parens:
        raise error(ErrorKind.UNCLOSED_PAREN, open_parens[-1].idx)

    if number:
        flush_number()

    logger.debug("Tokenized %r into %s", code, " ".join(str(t) for t in tokens))
    return tokens


def untokenize(tokens: list[Token]) -> str:
    result = " ".join(t.lexeme for t in tokens)

    # ( 1 + 2 ) => (1 + 2)
    result = re.sub(r"\(\s+", "(", result)
    result = re.sub(r"\s+\)", ")", result)
    return result
