"""Evaluate arithmetic expressions: postfix evaluation and a command line front end.

Examples:

>>> calculate("2 + 3 * 4")
14.0
>>> format_result(calculate("(2 + 3) * 4"))
'20'
>>> calculate("5 / 0")
Traceback (most recent call last):
...
calc_parser.DivisionByZero: division by zero
"""
import argparse
import logging
import math
import os
import sys
from decimal import Decimal

from calc_parser import (
    OPS,
    CalcError,
    DivisionByZero,
    InsufficientOperands,
    InvalidExpression,
    NumberParseError,
    tokenize,
    to_postfix,
)

logger = logging.getLogger(__name__)


def parse_num(text):
    # float() would also take other Unicode digits.
    if not text.isascii():
        raise NumberParseError(text)
    try:
        val = float(text)
    except ValueError:
        raise NumberParseError(text) from None
    # The tokenizer only lets digits through, so inf means overflow.
    if math.isinf(val):
        raise NumberParseError(text, "number out of range")
    return val


def evaluate(postfix):
    """Evaluate a postfix token list with an operand stack.

    >>> evaluate(to_postfix(tokenize("16 / 4 / 2")))
    2.0
    >>> evaluate(to_postfix(tokenize("1 2")))
    Traceback (most recent call last):
    ...
    calc_parser.InvalidExpression: invalid expression
    """
    stack = []
    for tok in postfix:
        if tok.kind == "num":
            stack.append(parse_num(tok.text))
            continue
        if tok.unary or len(stack) < 2:
            raise InsufficientOperands(tok.text)
        b = stack.pop()
        a = stack.pop()
        if tok.text == "/" and b == 0:
            raise DivisionByZero()
        stack.append(OPS[tok.text](a, b))
    if len(stack) != 1:
        raise InvalidExpression()
    (ans,) = stack
    logger.debug("result: %r", ans)
    return ans


def calculate(s):
    return evaluate(to_postfix(tokenize(s)))


def format_result(num):
    """Format `num` the way results are printed.

    Shortest round-trip digits, in exponent form when the decimal exponent
    is below -4 or at least 6.

    >>> [format_result(x) for x in (3.0, 0.1 + 0.2, 1e6, 1234567.0, 1e-05)]
    ['3', '0.30000000000000004', '1e+06', '1.234567e+06', '1e-05']
    >>> [format_result(x) for x in (-0.0, -math.inf, math.nan)]
    ['-0', '-Inf', 'NaN']
    """
    if math.isnan(num):
        return "NaN"
    if math.isinf(num):
        return "+Inf" if num > 0 else "-Inf"
    if num == 0:
        return "-0" if math.copysign(1, num) < 0 else "0"
    sign, digits, exponent = Decimal(repr(num)).normalize().as_tuple()
    exp = len(digits) + exponent - 1
    if -4 <= exp < 6:
        s = repr(num)
        return s[:-2] if s.endswith(".0") else s
    mantissa = "".join(map(str, digits))
    if len(mantissa) > 1:
        mantissa = f"{mantissa[0]}.{mantissa[1:]}"
    return f"{'-' * sign}{mantissa}e{exp:+03d}"


def run(s):
    """Print the result of evaluating `s`; return whether it succeeded."""
    try:
        ans = calculate(s)
    except CalcError as e:
        logger.debug("evaluation of %r failed", s, exc_info=True)
        print(f"Error: {e}")
        return False
    print(f"Result = {format_result(ans)}")
    return True


def read_line(prompt):
    try:
        return input(prompt)
    except EOFError:
        return None


def main(argv=None):
    parser = argparse.ArgumentParser(description="Evaluate arithmetic expressions.")
    parser.add_argument("expression", nargs="?", help="expression to evaluate")
    parser.add_argument(
        "-i", "--interactive", action="store_true", help="read expressions until EOF"
    )
    parser.add_argument(
        "--debug", action="store_true", default=bool(os.getenv("DEBUG", False))
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.expression is not None:
        return 0 if run(args.expression) else 1

    if args.interactive:
        ok = True
        while (inp := read_line(" ~ ")) is not None:
            ok = run(inp)
        return 0 if ok else 1

    print("Enter a math expression:")
    inp = read_line("")
    return 0 if run(inp or "") else 1


if __name__ == "__main__":
    sys.exit(main())
