"""
Interactive CALC session.

Reads one line at a time, runs built-in commands (`about`, `exit`, `help`,
`reset`, `state`) and evaluates everything else against one `SymbolTable`
that lives for the whole session. Failures are reported on stderr as

    Exception (<code>): <line with [ ] at the error position> (<message>)

and never end the session; only `exit`, end of input or Ctrl-C do.
"""

import logging
import sys

from calc.calc_config import Settings, get_settings
from calc.calc_constants import (
    CMD_ABOUT,
    CMD_EXIT,
    CMD_HELP,
    CMD_RESET,
    CMD_STATE,
    COMMANDS,
    COPYRIGHT,
    HELP_ENTRIES,
    NOTIFICATION,
    VERSION,
    WARRANTY,
)
from calc.calc_errors import CalcError, ErrorKind
from calc.calc_eval import evaluate_line
from calc.calc_numeric import NumericContext
from calc.calc_store import SymbolTable

logger = logging.getLogger("calc.repl")


def print_error(err: CalcError, line: str) -> None:
    print(f"Exception ({err.code}): {err.annotate(line)} ({err.message})", file=sys.stderr)


def handle_command(command: str, store: SymbolTable) -> int:
    """Runs a built-in command.

    Args:
        command: One of `about`, `exit`, `help`, `reset`, `state`.
        store: The session's variable store.

    Returns:
        int: `ErrorKind.EXIT` for `exit`, `ErrorKind.SUCCESS` otherwise.
    """
    if command == CMD_ABOUT:
        print(f"{VERSION} -- {COPYRIGHT}\n{WARRANTY}")
    elif command == CMD_EXIT:
        return ErrorKind.EXIT
    elif command == CMD_HELP:
        print("\n".join(HELP_ENTRIES))
    elif command == CMD_RESET:
        store.clear()
    elif command == CMD_STATE:
        rendered = store.render()
        if rendered:
            print(rendered)
    else:
        print(f"Unknown command: {command}", file=sys.stderr)
    return ErrorKind.SUCCESS


def check_input(line: str, store: SymbolTable, numeric: NumericContext | None = None) -> int:
    """Runs one line of input: a built-in command or CALC statements.

    The first word of the line decides whether it is a command. Values are
    printed to stdout, errors to stderr.

    Returns:
        int: The error code of the line (0 on success, `ErrorKind.EXIT` for `exit`).
    """
    words = line.split()
    if not words:
        return ErrorKind.SUCCESS
    if words[0] in COMMANDS:
        return handle_command(words[0], store)

    try:
        output = evaluate_line(line, store, numeric)
    except CalcError as err:
        logger.debug("evaluation failed: %r", err)
        for text in err.output:
            print(text)
        print_error(err, line)
        return err.code

    if output:
        print(output)
    return ErrorKind.SUCCESS


def start_repl(
    store: SymbolTable | None = None,
    settings: Settings | None = None,
    numeric: NumericContext | None = None,
) -> int:
    """Runs the interactive loop until `exit`, end of input or Ctrl-C.

    Args:
        store: Variable store; a fresh one when omitted.
        settings: Prompt and numeric configuration; the cached settings when omitted.
        numeric: Numeric context; built from `settings` when omitted.

    Returns:
        int: `ErrorKind.EXIT` after `exit` or Ctrl-C, `ErrorKind.STDIN_EOF` at end of input.
    """
    settings = settings or get_settings()
    store = store if store is not None else SymbolTable()
    numeric = numeric or NumericContext.from_settings(settings)

    print(f"{VERSION} -- {COPYRIGHT}\n{NOTIFICATION}")
    while True:
        try:
            line = input(settings.prompt)
        except EOFError:
            print()
            return ErrorKind.STDIN_EOF
        except KeyboardInterrupt:
            print()
            return ErrorKind.EXIT

        if check_input(line, store, numeric) == ErrorKind.EXIT:
            return ErrorKind.EXIT


__all__ = ["check_input", "handle_command", "print_error", "start_repl"]
