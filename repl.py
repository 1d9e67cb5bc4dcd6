import argparse
import logging

from stackcalc.errors import CalculatorError
from stackcalc.runtime import evaluate


def eval_line(code: str) -> str:
    try:
        return str(evaluate(code))
    except CalculatorError as e:
        return str(e)


if __name__ == "__main__":
    arg_parser = argparse.ArgumentParser(description="Evaluate arithmetic expressions interactively")
    arg_parser.add_argument("-v", "--verbose", action="store_true", help="log tokens and reductions")
    args = arg_parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(name)s: %(message)s")

    while True:
        try:
            code = input("> ")
        except EOFError:
            break

        if not code.strip():
            continue

        print(eval_line(code))
