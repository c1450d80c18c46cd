"""Expression Evaluator for user-typed math.

A small recursive-descent parser compiles text such as ``Math.sin(x)*2`` or
``t^2 - 1`` into a closure tree.  Only arithmetic, bound variables and an
allow-listed math library are reachable; nothing else can be named.

``evaluate`` never raises: parse errors, unknown names, domain errors and
non-finite results all come back as ``0.0`` so a bad formula draws a flat
plot instead of stopping the canvas.
"""

import math
import re
from functools import lru_cache
from typing import Callable, Mapping


class ExpressionError(ValueError):
    pass


def _sign(v):
    return (v > 0) - (v < 0)


def _round(v):
    # JavaScript rounding: halves go up.
    return math.floor(v + 0.5)


FUNCTIONS = {
    "sin": math.sin, "cos": math.cos, "tan": math.tan,
    "asin": math.asin, "acos": math.acos, "atan": math.atan,
    "atan2": math.atan2,
    "sinh": math.sinh, "cosh": math.cosh, "tanh": math.tanh,
    "exp": math.exp, "log": math.log, "log2": math.log2, "log10": math.log10,
    "sqrt": math.sqrt, "cbrt": lambda v: math.copysign(abs(v) ** (1 / 3), v),
    "abs": abs, "floor": math.floor, "ceil": math.ceil, "round": _round,
    "trunc": math.trunc, "sign": _sign,
    "pow": math.pow, "hypot": math.hypot,
    "min": min, "max": max,
}

CONSTANTS = {
    "PI": math.pi, "pi": math.pi,
    "E": math.e, "e": math.e,
    "TAU": math.tau, "tau": math.tau,
    "LN2": math.log(2), "LN10": math.log(10),
    "LOG2E": 1 / math.log(2), "LOG10E": 1 / math.log(10),
    "SQRT2": math.sqrt(2), "SQRT1_2": math.sqrt(0.5),
}

_TOKEN_RE = re.compile(r"""
    \s*(?:
        (?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
      | (?P<name>[A-Za-z_][A-Za-z_0-9]*(?:\.[A-Za-z_][A-Za-z_0-9]*)*)
      | (?P<op>\*\*|\|\||[-+*/%^(),])
    )""", re.VERBOSE)

Node = Callable[[Mapping[str, float]], float]


def _tokenize(text: str) -> list[tuple[str, str]]:
    tokens = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None or m.end() == pos:
            raise ExpressionError(f"Unexpected character at {pos}: {text[pos:pos + 10]!r}")
        kind = m.lastgroup
        tokens.append((kind, m.group(kind)))
        pos = m.end()
    return tokens


def _strip_namespace(name: str) -> str:
    if name.startswith("Math."):
        name = name[len("Math."):]
    if "." in name:
        raise ExpressionError(f"Unknown name: {name}")
    return name


class _Parser:
    """Grammar, loosest binding first::

        expr    := additive ('||' additive)*
        additive:= term (('+' | '-') term)*
        term    := unary (('*' | '/' | '%') unary)*
        unary   := ('-' | '+') unary | power
        power   := primary (('^' | '**') unary)?
        primary := NUMBER | NAME | NAME '(' args ')' | '(' expr ')'
    """

    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0

    def peek(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return (None, None)

    def take(self, value=None):
        kind, tok = self.peek()
        if kind is None or (value is not None and tok != value):
            raise ExpressionError(f"Expected {value or 'token'}, got {tok!r}")
        self.pos += 1
        return kind, tok

    def parse(self) -> Node:
        node = self.expr()
        if self.pos != len(self.tokens):
            raise ExpressionError(f"Unexpected token {self.peek()[1]!r}")
        return node

    def expr(self) -> Node:
        node = self.additive()
        while self.peek() == ("op", "||"):
            self.take()
            node = _or(node, self.additive())
        return node

    def additive(self) -> Node:
        node = self.term()
        while self.peek() in (("op", "+"), ("op", "-")):
            _, op = self.take()
            rhs = self.term()
            if op == "+":
                node = (lambda a, b: lambda env: a(env) + b(env))(node, rhs)
            else:
                node = (lambda a, b: lambda env: a(env) - b(env))(node, rhs)
        return node

    def term(self) -> Node:
        node = self.unary()
        while self.peek() in (("op", "*"), ("op", "/"), ("op", "%")):
            _, op = self.take()
            rhs = self.unary()
            if op == "*":
                node = (lambda a, b: lambda env: a(env) * b(env))(node, rhs)
            elif op == "/":
                node = (lambda a, b: lambda env: a(env) / b(env))(node, rhs)
            else:
                node = (lambda a, b: lambda env: math.fmod(a(env), b(env)))(node, rhs)
        return node

    def unary(self) -> Node:
        if self.peek() == ("op", "-"):
            self.take()
            operand = self.unary()
            return lambda env: -operand(env)
        if self.peek() == ("op", "+"):
            self.take()
            return self.unary()
        return self.power()

    def power(self) -> Node:
        base = self.primary()
        if self.peek() in (("op", "^"), ("op", "**")):
            self.take()
            exponent = self.unary()
            return lambda env: math.pow(base(env), exponent(env))
        return base

    def primary(self) -> Node:
        kind, tok = self.take()
        if kind == "number":
            value = float(tok)
            return lambda env: value
        if kind == "name":
            name = _strip_namespace(tok)
            if self.peek() == ("op", "("):
                return self.call(name)
            return _lookup(name)
        if tok == "(":
            node = self.expr()
            self.take(")")
            return node
        raise ExpressionError(f"Unexpected token {tok!r}")

    def call(self, name: str) -> Node:
        func = FUNCTIONS.get(name)
        if func is None:
            raise ExpressionError(f"Unknown function: {name}")
        self.take("(")
        args = []
        if self.peek() != ("op", ")"):
            args.append(self.expr())
            while self.peek() == ("op", ","):
                self.take()
                args.append(self.expr())
        self.take(")")
        return lambda env: func(*(a(env) for a in args))


def _or(a: Node, b: Node) -> Node:
    def node(env):
        left = a(env)
        if left == 0 or math.isnan(left):
            return b(env)
        return left
    return node


def _lookup(name: str) -> Node:
    const = CONSTANTS.get(name)

    def node(env):
        if name in env:
            return env[name]
        if const is not None:
            return const
        raise ExpressionError(f"Unknown name: {name}")
    return node


@lru_cache(maxsize=256)
def compile_expression(text: str) -> Node:
    """Compile ``text`` into a callable taking a name->number mapping.

    Raises ExpressionError on syntax errors or unknown functions.
    """
    tokens = _tokenize(text)
    if not tokens:
        raise ExpressionError("Empty expression")
    return _Parser(tokens).parse()


def evaluate(text: str, bindings: Mapping[str, float] | None = None) -> float:
    try:
        result = float(compile_expression(text)(bindings or {}))
    except (ArithmeticError, ValueError, TypeError, RecursionError):
        return 0.0
    if not math.isfinite(result):
        return 0.0
    return result


def split_components(text: str) -> list[str]:
    """Split ``"x(t), y(t)"`` on top-level commas only."""
    parts, depth, current = [], 0, []
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    parts.append("".join(current).strip())
    return parts
