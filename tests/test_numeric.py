from decimal import Decimal

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from calc.calc_config import get_settings
from calc.calc_errors import CalcError, ErrorKind
from calc.calc_numeric import NumericContext, default_context, fibonacci
from calc.calc_token import Token, TokenKind


def kind_of(excinfo: pytest.ExceptionInfo[CalcError]) -> ErrorKind:
    return excinfo.value.kind


@pytest.mark.parametrize(
    "value, expected",
    [
        (Decimal("7"), "7.0"),
        (Decimal("7.000"), "7.0"),
        (Decimal("0.5"), "0.5"),
        (Decimal("-0.00100"), "-0.001"),
        (Decimal("1E+3"), "1000.0"),
        (Decimal("-0"), "0.0"),
        (Decimal("-0.000"), "0.0"),
        (Decimal("123.456"), "123.456"),
    ],
)
def test_format_float(numeric: NumericContext, value: Decimal, expected: str) -> None:
    assert numeric.format_float(value) == expected


@pytest.mark.parametrize("value", [Decimal("Infinity"), Decimal("-Infinity"), Decimal("NaN")])
def test_format_float_rejects_non_finite(numeric: NumericContext, value: Decimal) -> None:
    with pytest.raises(CalcError) as exc:
        numeric.format_float(value)
    assert kind_of(exc) is ErrorKind.INVALID_OPERAND


def test_parse_value(numeric: NumericContext) -> None:
    assert numeric.parse_value(Token(TokenKind.INTEGER, "007")) == 7
    assert numeric.parse_value(Token(TokenKind.FLOAT, "3.")) == Decimal("3")
    with pytest.raises(CalcError) as exc:
        numeric.parse_value(Token(TokenKind.STRING, "x"))
    assert kind_of(exc) is ErrorKind.INVALID_OPERAND


def test_canonical(numeric: NumericContext) -> None:
    assert numeric.canonical(Token(TokenKind.INTEGER, "007")) == Token(TokenKind.INTEGER, "7")
    assert numeric.canonical(Token(TokenKind.FLOAT, "3.")) == Token(TokenKind.FLOAT, "3.0")
    assert numeric.canonical(Token(TokenKind.FLOAT, "0.50")) == Token(TokenKind.FLOAT, "0.5")


def test_to_token(numeric: NumericContext) -> None:
    assert numeric.to_token(-12) == Token(TokenKind.INTEGER, "-12")
    assert numeric.to_token(Decimal("2.50")) == Token(TokenKind.FLOAT, "2.5")


def test_integer_arithmetic(numeric: NumericContext) -> None:
    assert numeric.arithmetic("+", 3, 4) == 7
    assert numeric.arithmetic("-", 3, 4) == -1
    assert numeric.arithmetic("*", 3, 4) == 12
    assert numeric.arithmetic("/", 7, 2) == 3
    assert numeric.arithmetic("/", -7, 2) == -4
    assert numeric.arithmetic("%", -7, 3) == 2
    assert numeric.arithmetic("%", 7, -3) == 1
    assert numeric.arithmetic("^", 2, 10) == 1024


def test_promotion(numeric: NumericContext) -> None:
    result = numeric.arithmetic("+", 3, Decimal("4.0"))
    assert isinstance(result, Decimal)
    assert numeric.format_float(result) == "7.0"


def test_float_division_rounds_to_precision() -> None:
    ctx = NumericContext(precision=5)
    assert ctx.format_float(ctx.arithmetic("/", 1, Decimal("3.0"))) == "0.33333"
    assert ctx.format_float(ctx.arithmetic("/", Decimal("2.0"), 3)) == "0.66667"


def test_float_power(numeric: NumericContext) -> None:
    assert numeric.format_float(numeric.arithmetic("^", Decimal("2.0"), 2)) == "4.0"
    assert numeric.format_float(numeric.arithmetic("^", Decimal("0.5"), -1)) == "2.0"


@pytest.mark.parametrize(
    "op, a, b, kind",
    [
        ("/", 1, 0, ErrorKind.INVALID_OPERAND),
        ("%", 1, 0, ErrorKind.INVALID_OPERAND),
        ("/", Decimal("1.0"), 0, ErrorKind.INVALID_OPERAND),
        ("/", Decimal("0.0"), 0, ErrorKind.INVALID_OPERAND),
        ("%", Decimal("3.0"), 2, ErrorKind.EXPECTING_INTEGER_OPERAND),
        ("^", 2, -1, ErrorKind.EXPECTING_POSITIVE_INTEGER_OPERAND),
        ("^", Decimal("-8.0"), Decimal("0.5"), ErrorKind.INVALID_OPERAND),
        ("^", Decimal("10.0"), 10**7, ErrorKind.INVALID_OPERAND),
        ("?", 1, 2, ErrorKind.INVALID_ARITHMETIC_OPERATOR),
    ],
)
def test_arithmetic_errors(
    numeric: NumericContext, op: str, a: int | Decimal, b: int | Decimal, kind: ErrorKind
) -> None:
    with pytest.raises(CalcError) as exc:
        numeric.arithmetic(op, a, b)
    assert kind_of(exc) is kind


def test_bitwise(numeric: NumericContext) -> None:
    assert numeric.bitwise("&", 12, 10) == 8
    assert numeric.bitwise("|", 12, 10) == 14
    assert numeric.bitwise("$", 12, 10) == 6


def test_bitwise_errors(numeric: NumericContext) -> None:
    with pytest.raises(CalcError) as exc:
        numeric.bitwise("&", Decimal("1.5"), 1)
    assert kind_of(exc) is ErrorKind.EXPECTING_INTEGER_OPERAND
    with pytest.raises(CalcError) as exc:
        numeric.shift("<<", 1, Decimal("2.0"))
    assert kind_of(exc) is ErrorKind.EXPECTING_INTEGER_OPERAND
    with pytest.raises(CalcError) as exc:
        numeric.bitwise("+", 1, 1)
    assert kind_of(exc) is ErrorKind.INVALID_BINARY_OPERATOR


def test_shift(numeric: NumericContext) -> None:
    assert numeric.shift("<<", 1, 4) == 16
    assert numeric.shift(">>", 256, 4) == 16
    assert numeric.shift(">>", -7, 1) == -3
    assert numeric.shift(">>", -1, 5) == 0


def test_shift_errors(numeric: NumericContext) -> None:
    with pytest.raises(CalcError) as exc:
        numeric.shift("<<", 1, -1)
    assert kind_of(exc) is ErrorKind.EXPECTING_POSITIVE_INTEGER_OPERAND
    with pytest.raises(CalcError) as exc:
        numeric.shift(">>", Decimal("8.0"), 1)
    assert kind_of(exc) is ErrorKind.EXPECTING_INTEGER_OPERAND
    with pytest.raises(CalcError) as exc:
        numeric.shift("<>", 1, 1)
    assert kind_of(exc) is ErrorKind.INVALID_LOGICAL_OPERATOR


@pytest.mark.parametrize(
    "name, value, expected",
    [
        ("abs", -5, "5"),
        ("abs", Decimal("-2.5"), "2.5"),
        ("ceiling", Decimal("2.1"), "3.0"),
        ("ceiling", Decimal("-2.1"), "-2.0"),
        ("floor", Decimal("2.7"), "2.0"),
        ("floor", Decimal("-2.1"), "-3.0"),
        ("floor", 7, "7"),
        ("round", Decimal("2.5"), "3.0"),
        ("round", Decimal("-2.5"), "-3.0"),
        ("round", Decimal("2.4"), "2.0"),
        ("round", 4, "4"),
        ("int", Decimal("-2.7"), "-2"),
        ("int", 9, "9"),
        ("float", 3, "3.0"),
        ("sqr", 3, "9"),
        ("sqr", Decimal("1.5"), "2.25"),
        ("fact", 0, "1"),
        ("fact", 5, "120"),
        ("fib", 0, "0"),
        ("fib", 1, "1"),
        ("fib", 10, "55"),
        ("sqrt", 4, "2.0"),
        ("sin", 0, "0.0"),
        ("cos", 0, "1.0"),
        ("tan", 0, "0.0"),
        ("sinh", 0, "0.0"),
        ("cosh", 0, "1.0"),
        ("tanh", 0, "0.0"),
        ("acos", 1, "0.0"),
        ("ln", 1, "0.0"),
        ("log2", 8, "3.0"),
        ("log10", 1000, "3.0"),
    ],
)
def test_functions(numeric: NumericContext, name: str, value: int | Decimal, expected: str) -> None:
    assert numeric.to_token(numeric.apply_function(name, value)).text == expected


def test_sqrt_two(numeric: NumericContext) -> None:
    text = numeric.to_token(numeric.apply_function("sqrt", 2)).text
    assert text.startswith("1.41421356237309504880168872420969807856967187537")
    assert len(text.replace(".", "")) <= 50


@pytest.mark.parametrize(
    "name, value, prefix",
    [
        ("atan", 1, "0.7853981633974483096"),
        ("asin", 1, "1.5707963267948966192"),
        ("tan", 1, "1.5574077246549022305"),
        ("sinh", 1, "1.1752011936438014568"),
        ("cosh", 1, "1.5430806348152437784"),
        ("tanh", 1, "0.7615941559557648881"),
        ("acos", 0, "1.5707963267948966192"),
    ],
)
def test_transcendental_values(numeric: NumericContext, name: str, value: int, prefix: str) -> None:
    text = numeric.to_token(numeric.apply_function(name, value)).text
    assert text.startswith(prefix)


@pytest.mark.parametrize(
    "name, value, kind",
    [
        ("sqrt", -1, ErrorKind.INVALID_OPERAND),
        ("ln", 0, ErrorKind.INVALID_OPERAND),
        ("ln", -1, ErrorKind.INVALID_OPERAND),
        ("acos", 2, ErrorKind.INVALID_OPERAND),
        ("asin", Decimal("1.5"), ErrorKind.INVALID_OPERAND),
        ("fact", -1, ErrorKind.EXPECTING_POSITIVE_INTEGER_OPERAND),
        ("fact", Decimal("2.0"), ErrorKind.EXPECTING_INTEGER_OPERAND),
        ("fib", -3, ErrorKind.EXPECTING_POSITIVE_INTEGER_OPERAND),
        ("fib", Decimal("0.5"), ErrorKind.EXPECTING_INTEGER_OPERAND),
        ("nope", 1, ErrorKind.INVALID_FUNCTION),
    ],
)
def test_function_errors(numeric: NumericContext, name: str, value: int | Decimal, kind: ErrorKind) -> None:
    with pytest.raises(CalcError) as exc:
        numeric.apply_function(name, value)
    assert kind_of(exc) is kind


def test_constants(numeric: NumericContext) -> None:
    assert numeric.format_float(numeric.constant("e")).startswith("2.71828182845904523536")
    assert numeric.format_float(numeric.constant("pi")).startswith("3.14159265358979323846")


def test_unknown_constant(numeric: NumericContext) -> None:
    with pytest.raises(CalcError) as exc:
        numeric.constant("tau")
    assert kind_of(exc) is ErrorKind.INVALID_CONSTANT


def test_rand_is_seeded() -> None:
    first = NumericContext(seed=7)
    second = NumericContext(seed=7)
    draws = [first.constant("rand") for _ in range(5)]
    assert draws == [second.constant("rand") for _ in range(5)]
    assert all(Decimal(0) <= draw < Decimal(1) for draw in draws)


def test_default_context_follows_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CALC_PRECISION", "12")
    get_settings.cache_clear()
    default_context.cache_clear()
    ctx = default_context()
    assert ctx.precision == 12
    assert ctx is default_context()


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(st.integers(min_value=0, max_value=500))
def test_fibonacci_recurrence(n: int) -> None:
    assert fibonacci(n + 2) == fibonacci(n + 1) + fibonacci(n)


def test_integers_render_past_default_digit_limit(numeric: NumericContext) -> None:
    text = numeric.to_token(numeric.apply_function("fact", 2000)).text
    assert len(text) == 5736
    assert numeric.parse_value(Token(TokenKind.INTEGER, text)) == numeric.apply_function("fact", 2000)
