"""
Keyword and symbol tables shared by the CALC lexer, parser and evaluator.

Every table is ordered the way the help text lists it. Lookups go through the
frozensets; the tuples keep the canonical order for reports.
"""

ASSIGN_KEYWORD = "make"

CONSTANT_NAMES: tuple[str, ...] = ("e", "pi", "rand")

FUNCTION_NAMES: tuple[str, ...] = (
    "abs",
    "acos",
    "asin",
    "atan",
    "ceiling",
    "cos",
    "cosh",
    "fact",
    "fib",
    "float",
    "floor",
    "int",
    "ln",
    "log2",
    "log10",
    "round",
    "sin",
    "sinh",
    "sqr",
    "sqrt",
    "tan",
    "tanh",
)

# Arithmetic operators, in the order the lexer reports them
OP_PLUS = "+"
OP_MINUS = "-"
OP_MULT = "*"
OP_DIV = "/"
OP_MOD = "%"
OP_POW = "^"
ARITHMETIC_OPERATORS: tuple[str, ...] = (
    OP_PLUS,
    OP_MINUS,
    OP_MULT,
    OP_DIV,
    OP_MOD,
    OP_POW,
)

# Bitwise AND / OR / XOR
OP_AND = "&"
OP_OR = "|"
OP_XOR = "$"
BINARY_OPERATORS: tuple[str, ...] = (OP_AND, OP_OR, OP_XOR)

OP_SHL = "<<"
OP_SHR = ">>"
LOGICAL_OPERATORS: tuple[str, ...] = (OP_SHL, OP_SHR)

OP_NOT = "~"
UNARY_OPERATORS: tuple[str, ...] = (OP_NOT,)

OPEN_PAREN = "("
CLOSE_PAREN = ")"
DECIMAL_POINT = "."

constant_set = frozenset(CONSTANT_NAMES)
function_set = frozenset(FUNCTION_NAMES)
arithmetic_set = frozenset(ARITHMETIC_OPERATORS)
binary_set = frozenset(BINARY_OPERATORS)
logical_set = frozenset(LOGICAL_OPERATORS)
unary_set = frozenset(UNARY_OPERATORS)

# REPL metadata
VERSION = "Cli-Calculator 0.1.2"
COPYRIGHT = "Copyright (C) 2012 David Jolly"
WARRANTY = "This is free software. There is NO warranty."
NOTIFICATION = "Type 'help' or 'about' for more information"

CMD_ABOUT = "about"
CMD_EXIT = "exit"
CMD_HELP = "help"
CMD_RESET = "reset"
CMD_STATE = "state"
COMMANDS: tuple[str, ...] = (CMD_ABOUT, CMD_EXIT, CMD_HELP, CMD_RESET, CMD_STATE)

HELP_ENTRIES: tuple[str, ...] = (
    "about -- print credits",
    "abs -- absolute value",
    "acos -- arc cosine",
    "asin -- arc sine",
    "atan -- arc tangent",
    "ceiling -- ceiling (maintains type)",
    "constants: e, pi",
    "cos -- cosine",
    "cosh -- hyperbolic cosine",
    "exit -- leave interactive mode",
    "fact [n] -- factorial",
    "fib [n] -- fibonacci sequence",
    "float -- cast to floating-point",
    "floor -- floor (maintains type)",
    "int -- cast to integer",
    "ln -- natural log (log-base-e)",
    "log2 -- log-base-2",
    "log10 -- log-base-10",
    "make -- assign an id to an expression",
    "rand -- normalized random numbers (0-1)",
    "reset -- resets the global state",
    "round -- round to nearest integer (maintains type)",
    "sin -- sine",
    "sinh -- hyperbolic sine",
    "sqr -- square",
    "sqrt -- square root",
    "state -- prints the global state",
    "tan -- tangent",
    "tanh -- hyperbolic tangent",
    "operators: + - * / % ^ (arithmetic), & | $ (and/or/xor), << >> (shift), ~ (negate)",
)

__all__ = [
    "ASSIGN_KEYWORD",
    "CONSTANT_NAMES",
    "FUNCTION_NAMES",
    "ARITHMETIC_OPERATORS",
    "BINARY_OPERATORS",
    "LOGICAL_OPERATORS",
    "UNARY_OPERATORS",
    "COMMANDS",
    "HELP_ENTRIES",
]
