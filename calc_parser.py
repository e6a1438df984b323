"""Tokenizer and infix-to-postfix conversion for arithmetic expressions.

>>> [tok.text for tok in to_postfix(tokenize("3 + (8 - 7.5) * 10"))]
['3', '8', '7.5', '-', '10', '*', '+']
"""
import logging
import operator
import re
from typing import Callable, Literal, NamedTuple

logger = logging.getLogger(__name__)


class CalcError(Exception): ...


class ParsingError(CalcError): ...


class EvaluationError(CalcError): ...


class InvalidCharacter(ParsingError):
    def __init__(self, char):
        super().__init__(f"invalid character: {char}")
        self.char = char


class MismatchedParentheses(ParsingError):
    def __init__(self):
        super().__init__("mismatched parentheses")


class NumberParseError(EvaluationError):
    def __init__(self, text, reason="invalid number"):
        super().__init__(f"{reason}: {text!r}")
        self.text = text


class InsufficientOperands(EvaluationError):
    def __init__(self, op):
        super().__init__(f"not enough operands for operator {op}")
        self.op = op


class DivisionByZero(EvaluationError):
    def __init__(self):
        super().__init__("division by zero")


class InvalidExpression(EvaluationError):
    def __init__(self):
        super().__init__("invalid expression")


class Token(NamedTuple):
    kind: Literal["num", "op", "(", ")"]
    text: str
    # Set by `to_postfix` on operators with nothing to their left.
    unary: bool = False

    def __repr__(self):
        return f"tok({self.text!r:})"


class Op(NamedTuple):
    op: str
    prec: int
    fun: Callable

    def __call__(self, *args):
        return self.fun(*args)

    def __repr__(self):
        return f"op({self.op!r:})"

    def left_first(self, other):
        # Everything is left-associative, so equal precedence pops too.
        return self.prec >= other.prec


OP_GROUPS = """
add+ sub-
mul* truediv/
""".strip()
OPS = {
    o: Op(o, prec, getattr(operator, fun))
    for prec, op_groups in enumerate(OP_GROUPS.split("\n"), start=1)
    for [(fun, o)] in map(re.compile(r"^(\w+)(\W)$").findall, op_groups.split())
}


# Information separators count as spaces for str.isspace() only.
NOT_SPACE = "\x1c\x1d\x1e\x1f"


def tokenize(s):
    """Split `s` into a list of tokens.

    Numbers are kept as unparsed text; nothing but the characters is checked.

    >>> tokenize("1.5*(2 -3)")
    [tok('1.5'), tok('*'), tok('('), tok('2'), tok('-'), tok('3'), tok(')')]
    >>> tokenize("++")
    [tok('+'), tok('+')]
    >>> tokenize("2 + a")
    Traceback (most recent call last):
    ...
    calc_parser.InvalidCharacter: invalid character: a
    """
    tokens = []
    num = ""

    def flush():
        nonlocal num
        if num:
            tokens.append(Token("num", num))
            num = ""

    for char in s:
        if char.isdecimal() or char == ".":
            num += char
        elif char in OPS:
            flush()
            tokens.append(Token("op", char))
        elif char in "()":
            flush()
            tokens.append(Token(char, char))
        elif char.isspace() and char not in NOT_SPACE:
            flush()
        else:
            raise InvalidCharacter(char)
    flush()
    logger.debug("tokens: %s", tokens)
    return tokens


def to_postfix(tokens):
    """Reorder infix `tokens` into postfix (RPN) order (shunting-yard).

    Operators in prefix position (at the start, after "(" or after another
    operator) are marked `unary`; there are no unary operators, so
    `evaluate` rejects them.

    >>> to_postfix(tokenize("8 - 3 - 2"))
    [tok('8'), tok('3'), tok('-'), tok('2'), tok('-')]
    >>> [tok.unary for tok in to_postfix(tokenize("+ 1 2"))]
    [False, False, True]
    >>> to_postfix(tokenize("1 + 2)"))
    Traceback (most recent call last):
    ...
    calc_parser.MismatchedParentheses: mismatched parentheses
    """
    out = []
    ops = []
    last_was_op = True
    for tok in tokens:
        if tok.kind == "num":
            out.append(tok)
            last_was_op = False
        elif tok.kind == "op":
            if last_was_op:
                tok = tok._replace(unary=True)
            o = OPS[tok.text]
            while ops and ops[-1].kind == "op" and OPS[ops[-1].text].left_first(o):
                out.append(ops.pop())
            ops.append(tok)
            last_was_op = True
        elif tok.kind == "(":
            ops.append(tok)
            last_was_op = True
        else:
            last_was_op = False
            while ops and ops[-1].kind != "(":
                out.append(ops.pop())
            if not ops:
                raise MismatchedParentheses()
            ops.pop()
    while ops:
        if (tok := ops.pop()).kind == "(":
            raise MismatchedParentheses()
        out.append(tok)
    logger.debug("postfix: %s", out)
    return out
