"""
Error taxonomy for CALC.

All parse-time and evaluation-time failures are reported through a single
exception type, `CalcError`, tagged with one member of the closed `ErrorKind`
enumeration. Each kind carries a stable integer code and a fixed message so
front ends can print them without inspecting the failure further.

Example:
    >>> err = CalcError(ErrorKind.EXPECTING_CLOSE_PAREN, position=7)
    >>> err.annotate("(1 + 2")
    '(1 + 2[ ]'
"""

from enum import IntEnum


class ErrorKind(IntEnum):
    """Closed set of failure kinds; the value is the numeric error code."""

    # General
    SUCCESS = 0
    MEM_FAILURE = 1
    EXIT = 2
    STDIN_EOF = 3

    # Parser
    EXPECTING_IDENTIFIER = 4
    EXPECTING_CLOSE_PAREN = 5
    EXPECTING_CLOSE_BRACKET = 6

    # Evaluator
    INVALID_OPERATOR = 7
    INVALID_OPERAND = 8
    EXPECTING_INTEGER_OPERAND = 9
    INVALID_BINARY_OPERATOR = 10
    INVALID_LOGICAL_OPERATOR = 11
    INVALID_ARITHMETIC_OPERATOR = 12
    INVALID_EXPRESSION = 13
    INVALID_CONSTANT = 14
    INVALID_FUNCTION = 15
    INVALID_STATEMENT = 16
    INVALID_ASSIGNMENT_STATEMENT = 17
    EXPECTING_STRING_IDENTIFIER = 18
    UNDEFINED_IDENTIFIER = 19
    EXPECTING_POSITIVE_INTEGER_OPERAND = 20
    INVALID_UNARY_OPERATOR = 21

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.SUCCESS: "Success",
    ErrorKind.MEM_FAILURE: "Failed to allocate memory",
    ErrorKind.EXIT: "Exit",
    ErrorKind.STDIN_EOF: "EOF",
    ErrorKind.EXPECTING_IDENTIFIER: "Expecting identifier",
    ErrorKind.EXPECTING_CLOSE_PAREN: "Expecting close parenthesis",
    ErrorKind.EXPECTING_CLOSE_BRACKET: "Expecting close bracket",
    ErrorKind.INVALID_OPERATOR: "Invalid operator",
    ErrorKind.INVALID_OPERAND: "Invalid operand",
    ErrorKind.EXPECTING_INTEGER_OPERAND: "Expecting integer operands",
    ErrorKind.INVALID_BINARY_OPERATOR: "Invalid binary operator",
    ErrorKind.INVALID_LOGICAL_OPERATOR: "Invalid logical operator",
    ErrorKind.INVALID_ARITHMETIC_OPERATOR: "Invalid arithmetic operator",
    ErrorKind.INVALID_EXPRESSION: "Invalid expression",
    ErrorKind.INVALID_CONSTANT: "Invalid constant",
    ErrorKind.INVALID_FUNCTION: "Invalid function",
    ErrorKind.INVALID_STATEMENT: "Invalid statement",
    ErrorKind.INVALID_ASSIGNMENT_STATEMENT: "Invalid assignment statement",
    ErrorKind.EXPECTING_STRING_IDENTIFIER: "Expecting alpha-numeric identifier",
    ErrorKind.UNDEFINED_IDENTIFIER: "Undefined identifier",
    ErrorKind.EXPECTING_POSITIVE_INTEGER_OPERAND: "Expecting positive integer operands",
    ErrorKind.INVALID_UNARY_OPERATOR: "Invalid unary operator",
}


class CalcError(Exception):
    """Raised when a statement cannot be parsed or evaluated.

    Attributes:
        kind (ErrorKind): The failure kind.
        position (int): 1-based input offset where parsing stopped (0 if unknown).
        output (list[str]): Display lines produced by earlier statements of the
            same input line before the failure.
    """

    def __init__(self, kind: ErrorKind, position: int = 0, detail: str | None = None):
        super().__init__(kind.message if detail is None else f"{kind.message}: {detail}")
        self.kind = kind
        self.position = position
        self.detail = detail
        self.output: list[str] = []

    @property
    def code(self) -> int:
        return int(self.kind)

    @property
    def message(self) -> str:
        return self.kind.message

    def annotate(self, line: str) -> str:
        """Returns `line` with a `[ ]` marker inserted at the error position."""
        index = min(max(self.position - 1, 0), len(line))
        return f"{line[:index]}[ ]{line[index:]}"

    def __repr__(self) -> str:
        return f"CalcError({self.kind.name}, position={self.position})"


__all__ = ["CalcError", "ErrorKind"]
