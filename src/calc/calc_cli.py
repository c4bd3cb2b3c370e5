"""
CALC CLI Entrypoint.

This module provides the command-line interface for the calculator.

Features:
    - Evaluate expressions given as arguments, in order, sharing one variable store.
    - Launch the interactive REPL when no expression is given (or with `--repl`).
    - Override the environment configuration (`CALC_*`) with flags.

Example usage:
    calc "2 ^ 3 ^ 2"
    calc "make r 2" "pi * sqr r"
    calc --precision 100 "sqrt 2"
    calc --repl

Functions:
    run_calc(expressions: list[str], store: SymbolTable | None = None,
             numeric: NumericContext | None = None) -> int:
        Evaluates each expression and returns the error code of the last one.

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments and runs the expressions or the REPL.
"""

import argparse
import logging
import sys

from pydantic import ValidationError

from calc.calc_config import Settings, get_settings
from calc.calc_constants import COPYRIGHT, VERSION, WARRANTY
from calc.calc_errors import ErrorKind
from calc.calc_numeric import NumericContext
from calc.calc_repl import check_input, start_repl
from calc.calc_store import SymbolTable


def run_calc(
    expressions: list[str],
    store: SymbolTable | None = None,
    numeric: NumericContext | None = None,
) -> int:
    """
    Evaluate each expression as one line of input.

    Args:
        expressions (list[str]): Input lines, evaluated in order.
        store (SymbolTable | None): Variable store shared by all lines. Defaults to a fresh one.
        numeric (NumericContext | None): Numeric context. Defaults to the process-wide one.

    Returns:
        int: The error code of the last line (0 on success). An `exit` line stops
            the run and counts as success.
    """
    store = store if store is not None else SymbolTable()
    code: int = ErrorKind.SUCCESS
    for expression in expressions:
        code = check_input(expression, store, numeric)
        if code == ErrorKind.EXIT:
            return ErrorKind.SUCCESS
    return code


def build_settings(args: argparse.Namespace) -> Settings:
    """Merges command-line overrides into the environment settings."""
    overrides = {
        field: value
        for field, value in (
            ("precision", args.precision),
            ("seed", args.seed),
            ("log_level", args.log_level),
        )
        if value is not None
    }
    if not overrides:
        return get_settings()
    return Settings(**{**get_settings().model_dump(), **overrides})


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the CALC CLI.

    Starts the REPL if no expression is passed or `--repl` is specified (the two
    cannot be combined);
    otherwise evaluates the expressions and returns the last error code.

    Supported flags:
        - `--version`: Print version and warranty information.
        - `--repl`: Launch the interactive REPL (no expressions allowed).
        - `--precision N`: Significant digits kept by Float results.
        - `--seed N`: Seed for the `rand` constant.
        - `--log-level LEVEL`: Logging level (DEBUG shows parse trees and reductions).
    """
    parser = argparse.ArgumentParser(
        prog="calc",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="Arbitrary-precision command-line calculator.",
        epilog="If no input is given, start in interactive mode, otherwise "
        "expressions are evaluated in the order they appear.",
    )
    parser.add_argument("expressions", nargs="*", help="Expressions or commands to evaluate")
    parser.add_argument(
        "--version",
        action="version",
        version=f"{VERSION} -- {COPYRIGHT}\n{WARRANTY}",
    )
    parser.add_argument("--repl", action="store_true", help="Launch the interactive REPL")
    parser.add_argument("--precision", type=int, help="Significant digits for Float results")
    parser.add_argument("--seed", type=int, help="Seed for the rand constant")
    parser.add_argument("--log-level", dest="log_level", help="Logging level (default: WARNING)")

    args = parser.parse_args(argv)

    try:
        settings = build_settings(args)
    except ValidationError as e:
        parser.error(str(e))

    if args.repl and args.expressions:
        parser.error("--repl does not take expressions")

    logging.basicConfig(level=settings.log_level)
    numeric = NumericContext.from_settings(settings)

    if args.repl or not args.expressions:
        start_repl(settings=settings, numeric=numeric)
        return ErrorKind.SUCCESS
    return run_calc(args.expressions, numeric=numeric)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    sys.exit(main())
