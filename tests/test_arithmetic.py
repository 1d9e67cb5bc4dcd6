import math
import struct
from concurrent.futures import ThreadPoolExecutor

import pytest

from repl import eval_line
from stackcalc.errors import CalculatorError, ErrorKind
from stackcalc.runtime import evaluate
from stackcalc.tokenizer import LexicalError


@pytest.mark.parametrize(
    "code, expected_ret_val",
    [
        pytest.param("1", 1.0),
        pytest.param("-1", -1.0),
        pytest.param("1+2", 3.0),
        pytest.param("(1+2)", 3.0),
        pytest.param("(((1)))", 1.0),
        pytest.param("1+2*3", 7.0),
        pytest.param("(1+2)*3", 9.0),
        pytest.param("1 * 4 + 5", 9.0),
        pytest.param("1 + 4 * 5", 21.0),
        pytest.param("10 - 4 - 3", 3.0),
        pytest.param("10 / 5 / 2 / 2", 0.5),
        pytest.param("2 * 3 - 4 / 2", 4.0),
        pytest.param("10 + 2 * (5 + 3 - 1)", 24.0),
        pytest.param("((2 + 3) * (4 - 1)) / 5", 3.0),
        # decimals
        pytest.param("1.5+2.5", 4.0),
        pytest.param("5.", 5.0),
        pytest.param("-.5 * 4", -2.0),
        # unary minus
        pytest.param("-5+3", -2.0),
        pytest.param("3--5", 8.0),
        pytest.param("3*-2", -6.0),
        pytest.param("(-3)*2", -6.0),
        pytest.param("-(2+3)", -5.0),
        pytest.param("-(1+2)", -3.0),
        pytest.param("2/-(4)", -0.5),
        pytest.param("3--(2)", 5.0),
        pytest.param("-(-(1))", 1.0),
        pytest.param("-(2+3)*2", -10.0),
    ],
)
def test_eval_arithmetic(code: str, expected_ret_val: float) -> None:
    assert evaluate(code) == expected_ret_val


@pytest.mark.parametrize(
    "code, expected_ret_val",
    [
        pytest.param("1/0", math.inf),
        pytest.param("-1/0", -math.inf),
        pytest.param("1/-0", -math.inf),
        pytest.param("2/(1-1)", math.inf),
    ],
)
def test_division_by_zero_is_infinite(code: str, expected_ret_val: float) -> None:
    assert evaluate(code) == expected_ret_val


def test_zero_over_zero_is_nan() -> None:
    assert math.isnan(evaluate("0/0"))
    assert math.isnan(evaluate("(1/0) * 0 / 0"))


@pytest.mark.parametrize("code", ["1/3 + 2/7", "0.1 * 3 - -0.7", "1/0 - 1/0"])
def test_evaluation_is_deterministic(code: str) -> None:
    first = struct.pack("<d", evaluate(code))
    second = struct.pack("<d", evaluate(code))
    assert first == second


def test_whitespace_is_irrelevant() -> None:
    assert evaluate("1 + 2") == evaluate("1+2")
    assert evaluate(" ( 1 +\t2 ) *\n3 ") == evaluate("(1+2)*3")
    assert evaluate("1 2 + 3") == 15.0


@pytest.mark.parametrize(
    "code, kind",
    [
        pytest.param("3.5.2", ErrorKind.MALFORMED_DECIMAL),
        pytest.param(")1+2", ErrorKind.UNMATCHED_CLOSE_PAREN),
        pytest.param("(1+2", ErrorKind.UNCLOSED_PAREN),
        pytest.param("1+", ErrorKind.MISPLACED_OPERATOR),
        pytest.param("1+2)", ErrorKind.UNMATCHED_CLOSE_PAREN),
        pytest.param("1 $ 2", ErrorKind.INVALID_CHARACTER),
        pytest.param("--5", ErrorKind.MISPLACED_OPERATOR),
        pytest.param("2(3)", ErrorKind.MISSING_OPERATOR),
        pytest.param("()", ErrorKind.EMPTY_PARENTHESES),
    ],
)
def test_malformed_input_is_rejected(code: str, kind: ErrorKind) -> None:
    with pytest.raises(LexicalError) as exc_info:
        evaluate(code)
    assert exc_info.value.kind is kind


def test_errors_share_a_base_class() -> None:
    with pytest.raises(CalculatorError):
        evaluate("1+")


@pytest.mark.parametrize(
    "code, expected_output",
    [
        pytest.param("1+2", "3.0"),
        pytest.param("1/0", "inf"),
        pytest.param("1 $ 2", "[Tokenizer error] Invalid character '$'\n1 $ 2\n  ^"),
        pytest.param("1+", "[Tokenizer error] Misplaced operator '+'\n1+\n ^"),
    ],
)
def test_repl_output(code: str, expected_output: str) -> None:
    assert eval_line(code) == expected_output


def test_concurrent_evaluations_do_not_interfere() -> None:
    cases = {
        "1+2*3": 7.0,
        "(1+2)*3": 9.0,
        "-(2+3)": -5.0,
        "10 / 5 / 2 / 2": 0.5,
        "3--5": 8.0,
        "1.5+2.5": 4.0,
        "((2 + 3) * (4 - 1)) / 5": 3.0,
        "2/-(4)": -0.5,
    }
    codes = list(cases) * 50
    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(evaluate, codes))
    assert results == [cases[code] for code in codes]


@pytest.mark.parametrize(
    "kind, symbol, expected_errmsg",
    [
        pytest.param(ErrorKind.INVALID_CHARACTER, "$", "Invalid character '$'"),
        pytest.param(ErrorKind.MISPLACED_OPERATOR, None, "Empty expression"),
        pytest.param(ErrorKind.MALFORMED_EXPRESSION, "x", "Malformed expression near 'x'"),
    ],
)
def test_errmsg_uses_symbol(kind: ErrorKind, symbol: str | None, expected_errmsg: str) -> None:
    assert CalculatorError(kind, symbol=symbol).errmsg == expected_errmsg
    assert str(CalculatorError(kind, symbol=symbol)) == expected_errmsg
