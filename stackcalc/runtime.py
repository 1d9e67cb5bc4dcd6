import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from stackcalc.errors import CalculatorError, ErrorKind
from stackcalc.operators import Operator
from stackcalc.tokenizer import NUMBER_RE, Token, TokenType, tokenize, untokenize

logger = logging.getLogger(__name__)


@dataclass
class EvaluationError(CalculatorError):
    tokens: Sequence[Token]
    error_token_idx: int

    def __str__(self) -> str:
        parsed_tokens = list(self.tokens[: self.error_token_idx])
        filler_whitespace = " " * len(untokenize(parsed_tokens)) + (" " if parsed_tokens else "")
        return "\n".join(
            [f"[Evaluation error] {self.errmsg}", untokenize(list(self.tokens)), filler_whitespace + "^"]
        )


# marks an open parenthesis on the operator stack
_BRACKET_MARKER = None

OperatorStackEntry = Optional[Operator]


def evaluate(code: str) -> float:
    return evaluate_tokens(tokenize(code))


def evaluate_tokens(tokens: Sequence[Token]) -> float:
    """Reduce an infix token sequence to a number with a value stack and an operator stack.

    Works on any sequence of ``Token``, not only on what ``tokenize`` returns,
    and raises EvaluationError when the sequence does not describe a valid
    expression. All state lives in this call.
    """
    values: list[float] = []
    operators: list[tuple[OperatorStackEntry, int]] = []

    def error(kind: ErrorKind, idx: int, symbol: Optional[str] = None) -> EvaluationError:
        return EvaluationError(kind, tokens=tokens, error_token_idx=idx, symbol=symbol)

    def reduce() -> None:
        operator, operator_idx = operators.pop()
        if len(values) < 2:
            raise error(ErrorKind.STACK_UNDERFLOW, operator_idx, symbol=operator.symbol)
        second = values.pop()
        first = values.pop()
        result = operator.apply(first, second)
        logger.debug("%s %s %s = %s", first, operator.symbol, second, result)
        values.append(result)

    for i, token in enumerate(tokens):
        if token.type is TokenType.BRACKET_OPEN:
            operators.append((_BRACKET_MARKER, i))
        elif token.type is TokenType.BRACKET_CLOSE:
            while True:
                if not operators:
                    raise error(ErrorKind.UNMATCHED_CLOSE_PAREN, i)
                if operators[-1][0] is _BRACKET_MARKER:
                    break
                reduce()
            operators.pop()
        elif token.type is TokenType.OPERATOR:
            operator = Operator.from_symbol(token.lexeme)
            if operator is None:
                raise error(ErrorKind.UNSUPPORTED_OPERATOR, i, symbol=token.lexeme)
            while operators:
                top, _ = operators[-1]
                if top is _BRACKET_MARKER or top.priority < operator.priority:
                    break
                reduce()
            operators.append((operator, i))
        elif token.type is TokenType.NUMBER:
            if NUMBER_RE.fullmatch(token.lexeme) is None:
                raise error(ErrorKind.MALFORMED_EXPRESSION, i, symbol=token.lexeme)
            values.append(float(token.lexeme))
        else:
            raise error(ErrorKind.MALFORMED_EXPRESSION, i, symbol=token.lexeme)

    while operators:
        top, top_idx = operators[-1]
        if top is _BRACKET_MARKER:
            raise error(ErrorKind.UNCLOSED_PAREN, top_idx)
        reduce()

    if len(values) != 1:
        raise error(ErrorKind.MALFORMED_EXPRESSION, len(tokens))

    return values[0]
