"""
Numeric policy for CALC values.

CALC has two value kinds. An Integer is an exact, arbitrary-size Python `int`.
A Float is a `decimal.Decimal` held to a fixed number of significant digits
(the working precision, 50 by default) with round-half-even. A binary
operation yields an Integer only if both operands are Integers; otherwise the
Integer side is promoted and the result is a Float.

Transcendental functions and `pi` are computed with mpmath at the working
precision plus a few guard digits and rounded back into the decimal context.

Every failure of the underlying libraries (decimal signals, division by zero,
results outside a function's real domain) surfaces as
`CalcError(INVALID_OPERAND)`; the type checks of individual operators raise
their own kinds.

Importing this module lifts the interpreter-wide limit on int/str conversion
(`sys.set_int_max_str_digits(0)`). Integers are unbounded, and both
rendering a result and reading a stored value back go through `str`/`int`,
so the limit cannot stay at its default for any code sharing the process.

Example:
    >>> ctx = NumericContext(precision=20)
    >>> ctx.arithmetic("+", 3, Decimal("4.0"))
    Decimal('7.0')
    >>> ctx.format_float(Decimal("7"))
    '7.0'
"""

from __future__ import annotations

import math
import random
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from decimal import (
    ROUND_CEILING,
    ROUND_FLOOR,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from functools import lru_cache

import mpmath

from calc.calc_config import Settings, get_settings
from calc.calc_constants import (
    OP_AND,
    OP_DIV,
    OP_MINUS,
    OP_MOD,
    OP_MULT,
    OP_OR,
    OP_PLUS,
    OP_POW,
    OP_SHL,
    OP_SHR,
    OP_XOR,
)
from calc.calc_errors import CalcError, ErrorKind
from calc.calc_token import Token, TokenKind

# Process-wide: see the module docstring
if hasattr(sys, "set_int_max_str_digits"):
    sys.set_int_max_str_digits(0)

Number = int | Decimal

GUARD_DIGITS = 10


@contextmanager
def numeric_errors() -> Iterator[None]:
    """Converts library arithmetic failures into `CalcError(INVALID_OPERAND)`."""
    try:
        yield
    except (ArithmeticError, ValueError) as exc:
        raise CalcError(ErrorKind.INVALID_OPERAND, detail=type(exc).__name__) from exc


def fibonacci(n: int) -> int:
    """Returns the nth Fibonacci number by fast doubling (fib(0) = 0)."""
    a, b = 0, 1
    for bit in bin(n)[2:]:
        c = a * (2 * b - a)
        d = a * a + b * b
        a, b = (d, c + d) if bit == "1" else (c, d)
    return a


def _require_integers(a: Number, b: Number) -> tuple[int, int]:
    if not isinstance(a, int) or not isinstance(b, int):
        raise CalcError(ErrorKind.EXPECTING_INTEGER_OPERAND)
    return a, b


def _require_natural(value: Number) -> int:
    if not isinstance(value, int):
        raise CalcError(ErrorKind.EXPECTING_INTEGER_OPERAND)
    if value < 0:
        raise CalcError(ErrorKind.EXPECTING_POSITIVE_INTEGER_OPERAND)
    return value


class NumericContext:
    """
    Working precision, rounding and random source for one calculator session.

    Attributes:
        precision (int): Significant decimal digits kept by Float results.
        decimal (Context): Decimal context used for every Float operation.
        rng (random.Random): Generator behind the `rand` constant.
    """

    def __init__(self, precision: int = 50, seed: int | None = None) -> None:
        self.precision = precision
        self.decimal = Context(
            prec=precision,
            rounding=ROUND_HALF_EVEN,
            traps=[InvalidOperation, DivisionByZero, Overflow],
        )
        self.rng = random.Random(seed)

    @classmethod
    def from_settings(cls, settings: Settings) -> NumericContext:
        return cls(precision=settings.precision, seed=settings.seed)

    # Conversion

    def parse_value(self, token: Token) -> Number:
        """Reads the value of an Integer or Float token."""
        if token.kind is TokenKind.INTEGER:
            return int(token.text)
        if token.kind is TokenKind.FLOAT:
            with numeric_errors():
                return self.decimal.create_decimal(token.text)
        raise CalcError(ErrorKind.INVALID_OPERAND, detail=token.kind.name)

    def to_token(self, value: Number) -> Token:
        if isinstance(value, int):
            return Token(TokenKind.INTEGER, str(value))
        return Token(TokenKind.FLOAT, self.format_float(value))

    def to_decimal(self, value: Number) -> Decimal:
        if isinstance(value, Decimal):
            return value
        return self.decimal.create_decimal(value)

    def format_float(self, value: Decimal) -> str:
        """Renders a Float in fixed-point form that always contains a decimal point.

        Trailing fractional zeros are trimmed down to one digit: `7.0`, `0.5`,
        `-0.001`. Zero never carries a sign.
        """
        if not value.is_finite():
            raise CalcError(ErrorKind.INVALID_OPERAND, detail=str(value))
        if value.is_zero():
            value = value.copy_abs()
        text = format(value, "f")
        if "." not in text:
            return f"{text}.0"
        text = text.rstrip("0")
        return f"{text}0" if text.endswith(".") else text

    def canonical(self, token: Token) -> Token:
        """Returns the canonical rendering of a numeric literal (`007` -> `7`)."""
        return self.to_token(self.parse_value(token))

    # Operators

    def arithmetic(self, op: str, a: Number, b: Number) -> Number:
        """Applies one of `+ - * / % ^` with Integer/Float promotion."""
        if op not in (OP_PLUS, OP_MINUS, OP_MULT, OP_DIV, OP_MOD, OP_POW):
            raise CalcError(ErrorKind.INVALID_ARITHMETIC_OPERATOR, detail=op)
        with numeric_errors():
            if isinstance(a, int) and isinstance(b, int):
                return self._integer_arithmetic(op, a, b)
            if op == OP_MOD:
                raise CalcError(ErrorKind.EXPECTING_INTEGER_OPERAND)
            return self._float_arithmetic(op, self.to_decimal(a), self.to_decimal(b))

    def _integer_arithmetic(self, op: str, a: int, b: int) -> int:
        if op == OP_PLUS:
            return a + b
        if op == OP_MINUS:
            return a - b
        if op == OP_MULT:
            return a * b
        if op == OP_DIV:
            return a // b
        if op == OP_MOD:
            return a % abs(b)
        if b < 0:
            raise CalcError(ErrorKind.EXPECTING_POSITIVE_INTEGER_OPERAND)
        return a**b

    def _float_arithmetic(self, op: str, a: Decimal, b: Decimal) -> Decimal:
        ctx = self.decimal
        if op == OP_PLUS:
            return ctx.add(a, b)
        if op == OP_MINUS:
            return ctx.subtract(a, b)
        if op == OP_MULT:
            return ctx.multiply(a, b)
        if op == OP_DIV:
            return ctx.divide(a, b)
        return ctx.power(a, b)

    def bitwise(self, op: str, a: Number, b: Number) -> int:
        """Applies `&`, `|` or `$` (exclusive or) to two Integers."""
        if op not in (OP_AND, OP_OR, OP_XOR):
            raise CalcError(ErrorKind.INVALID_BINARY_OPERATOR, detail=op)
        a, b = _require_integers(a, b)
        if op == OP_AND:
            return a & b
        if op == OP_OR:
            return a | b
        return a ^ b

    def shift(self, op: str, a: Number, b: Number) -> int:
        """Shifts an Integer left or right; `>>` truncates toward zero."""
        if op not in (OP_SHL, OP_SHR):
            raise CalcError(ErrorKind.INVALID_LOGICAL_OPERATOR, detail=op)
        a, b = _require_integers(a, b)
        if b < 0:
            raise CalcError(ErrorKind.EXPECTING_POSITIVE_INTEGER_OPERAND)
        with numeric_errors():
            if op == OP_SHL:
                return a << b
            return a >> b if a >= 0 else -((-a) >> b)

    # Functions

    def apply_function(self, name: str, value: Number) -> Number:
        """Looks up `fn_<name>` and applies it to `value`.

        Raises:
            CalcError: INVALID_FUNCTION for unknown names, or the kind raised by
                the function itself.
        """
        handler: Callable[[Number], Number] | None = getattr(self, f"fn_{name}", None)
        if handler is None:
            raise CalcError(ErrorKind.INVALID_FUNCTION, detail=name)
        with numeric_errors():
            return handler(value)

    def _to_mpf(self, value: Number) -> mpmath.mpf:
        if isinstance(value, int):
            return mpmath.mpf(value)
        return mpmath.mpf(str(value))

    def _from_mpf(self, result: object) -> Decimal:
        # Complex or infinite results fall outside the real domain
        if not isinstance(result, mpmath.mpf) or not mpmath.isfinite(result):
            raise CalcError(ErrorKind.INVALID_OPERAND)
        return self.decimal.create_decimal(mpmath.nstr(result, self.precision + GUARD_DIGITS))

    def transcendental(self, func: Callable[..., object], value: Number) -> Decimal:
        with mpmath.workdps(self.precision + GUARD_DIGITS):
            return self._from_mpf(func(self._to_mpf(value)))

    def fn_abs(self, value: Number) -> Number:
        return abs(value) if isinstance(value, int) else self.decimal.abs(value)

    def fn_acos(self, value: Number) -> Number:
        return self.transcendental(mpmath.acos, value)

    def fn_asin(self, value: Number) -> Number:
        return self.transcendental(mpmath.asin, value)

    def fn_atan(self, value: Number) -> Number:
        return self.transcendental(mpmath.atan, value)

    def fn_ceiling(self, value: Number) -> Number:
        if isinstance(value, int):
            return value
        return value.to_integral_value(rounding=ROUND_CEILING)

    def fn_cos(self, value: Number) -> Number:
        return self.transcendental(mpmath.cos, value)

    def fn_cosh(self, value: Number) -> Number:
        return self.transcendental(mpmath.cosh, value)

    def fn_fact(self, value: Number) -> Number:
        return math.factorial(_require_natural(value))

    def fn_fib(self, value: Number) -> Number:
        return fibonacci(_require_natural(value))

    def fn_float(self, value: Number) -> Number:
        return self.decimal.plus(self.to_decimal(value))

    def fn_floor(self, value: Number) -> Number:
        if isinstance(value, int):
            return value
        return value.to_integral_value(rounding=ROUND_FLOOR)

    def fn_int(self, value: Number) -> Number:
        return int(value)

    def fn_ln(self, value: Number) -> Number:
        return self.transcendental(mpmath.ln, value)

    def fn_log2(self, value: Number) -> Number:
        return self.transcendental(lambda x: mpmath.log(x, 2), value)

    def fn_log10(self, value: Number) -> Number:
        return self.transcendental(mpmath.log10, value)

    def fn_round(self, value: Number) -> Number:
        if isinstance(value, int):
            return value
        return value.to_integral_value(rounding=ROUND_HALF_UP)

    def fn_sin(self, value: Number) -> Number:
        return self.transcendental(mpmath.sin, value)

    def fn_sinh(self, value: Number) -> Number:
        return self.transcendental(mpmath.sinh, value)

    def fn_sqr(self, value: Number) -> Number:
        if isinstance(value, int):
            return value * value
        return self.decimal.multiply(value, value)

    def fn_sqrt(self, value: Number) -> Number:
        return self.transcendental(mpmath.sqrt, value)

    def fn_tan(self, value: Number) -> Number:
        return self.transcendental(mpmath.tan, value)

    def fn_tanh(self, value: Number) -> Number:
        return self.transcendental(mpmath.tanh, value)

    # Constants

    def constant(self, name: str) -> Decimal:
        """Returns `e`, `pi` or a fresh `rand` draw in [0, 1)."""
        if name == "e":
            return self.decimal.exp(Decimal(1))
        if name == "pi":
            with mpmath.workdps(self.precision + GUARD_DIGITS):
                return self._from_mpf(+mpmath.pi)
        if name == "rand":
            return self.random()
        raise CalcError(ErrorKind.INVALID_CONSTANT, detail=name)

    def random(self) -> Decimal:
        bits = math.ceil(self.precision * math.log2(10))
        draw = self.decimal.divide(Decimal(self.rng.getrandbits(bits)), Decimal(2**bits))
        return min(draw, self.decimal.next_minus(Decimal(1)))

    def __repr__(self) -> str:
        return f"NumericContext(precision={self.precision})"


@lru_cache
def default_context() -> NumericContext:
    """Process-wide context built from the cached settings."""
    return NumericContext.from_settings(get_settings())


__all__ = ["Number", "NumericContext", "default_context", "fibonacci", "numeric_errors"]
