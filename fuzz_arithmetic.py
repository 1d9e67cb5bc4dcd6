import argparse
import math
import random
import re
import string
import warnings

from stackcalc.errors import CalculatorError
from stackcalc.runtime import evaluate

warnings.filterwarnings("ignore")

ALPHABET = string.digits + ".()+-*/ "


def eval_py(code: str) -> float | str:
    try:
        return eval(code)
    except Exception as e:
        return str(e)


def eval_my(code: str) -> float | str:
    try:
        return evaluate(code)
    except CalculatorError as e:
        return e.errmsg


def is_comparable(code: str) -> bool:
    if re.findall(r"\*\s*\*", code):
        return False  # avoid generating powers (10**4)
    if re.findall(r"/\s*/", code):
        return False  # avoid generating int division (10 // 3)
    if re.findall(r"\d\s+[\d.]|\.\s+\d", code):
        return False  # whitespace inside a literal is dropped here, python rejects it
    if re.findall(r"[-+]\s*[-+]\s*[-+(\d.]", code) or re.findall(r"(^|[(*/])\s*\+", code):
        return False  # python accepts unary plus and stacked signs
    return True


def agrees(res_py: float | str, res_my: float | str) -> bool:
    if isinstance(res_py, (int, float)) and isinstance(res_my, float):
        return math.isclose(float(res_py), res_my) or (math.isnan(res_py) and math.isnan(res_my))
    if isinstance(res_py, str) and isinstance(res_my, str):
        return True
    if isinstance(res_py, str) and res_py.startswith("leading zeros in decimal integer literals are not permitted"):
        return True
    if isinstance(res_py, str) and "division by zero" in res_py and isinstance(res_my, float):
        return math.isinf(res_my) or math.isnan(res_my)
    return False


if __name__ == "__main__":
    arg_parser = argparse.ArgumentParser(description="Compare stackcalc against python's eval on random input")
    arg_parser.add_argument("--length", type=int, default=10)
    arg_parser.add_argument("--iterations", type=int, default=None, help="run forever if omitted")
    arg_parser.add_argument("--seed", type=int, default=None)
    args = arg_parser.parse_args()

    rng = random.Random(args.seed)

    def generate(length: int) -> str:
        return "".join(rng.choices(ALPHABET, k=length))

    done = 0
    while args.iterations is None or done < args.iterations:
        code = generate(args.length)
        if not is_comparable(code):
            continue
        done += 1

        res_py = eval_py(code)
        res_my = eval_my(code)
        if agrees(res_py, res_my):
            continue
        print(f"{code!r}\npy: {res_py}\nmy: {res_my}\n\n")
