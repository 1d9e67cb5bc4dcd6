import math
from typing import Callable, Optional

from stackcalc.utils import PrintableEnum

BinaryOperationImpl = Callable[[float, float], float]


class Operator(PrintableEnum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def priority(self) -> int:
        return _PRIORITIES[self]

    def apply(self, a: float, b: float) -> float:
        return _IMPLS[self](a, b)

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["Operator"]:
        try:
            return cls(symbol)
        except ValueError:
            return None


def _ieee_div(a: float, b: float) -> float:
    # float division raises on zero divisor, IEEE 754 does not
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


_PRIORITIES: dict[Operator, int] = {
    Operator.ADD: 1,
    Operator.SUB: 1,
    Operator.MUL: 2,
    Operator.DIV: 2,
}

_IMPLS: dict[Operator, BinaryOperationImpl] = {
    Operator.ADD: lambda a, b: a + b,
    Operator.SUB: lambda a, b: a - b,
    Operator.MUL: lambda a, b: a * b,
    Operator.DIV: _ieee_div,
}

SYMBOLS = frozenset(op.symbol for op in Operator)
