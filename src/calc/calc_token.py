"""
Defines the token structure shared by every stage of CALC.

Classes:
    TokenKind:
        The closed set of token kinds produced by the lexer, arranged into trees
        by the parser, and folded into values by the evaluator.

    Token:
        The universal node. The lexer emits detached tokens, the syntax tree stores
        them in its arena (linking them through integer `parent`/`children`
        indices), and the evaluator overwrites `kind`/`text` in place when it
        reduces a subtree to a value.

    TokenDict:
        TypedDict representation for serializing Token instances to plain Python
        dictionaries, suitable for JSON output or debugging.

Example:
    tok = Token(TokenKind.INTEGER, "42")
"""

from enum import Enum
from typing import Any, TypedDict


class TokenKind(Enum):
    """Token kinds. The value is the label used by diagnostic dumps."""

    UNDEFINED = "UNDEFINED"
    ASSIGNMENT = "ASSIGNMENT"
    BEGIN = "BEGIN"
    BINARY_OP = "BINARY OPERATOR"
    CLOSING_PAREN = "CLOSE PARENTHESIS"
    CONSTANT = "CONSTANT"
    END = "END"
    EXPRESSION = "EXPRESSION"
    FLOAT = "FLOAT"
    FUNCTION = "FUNCTION"
    INTEGER = "INTEGER"
    LOGICAL_OP = "LOGICAL OPERATOR"
    OP = "OPERATOR"
    OPENING_PAREN = "OPEN PARENTHESIS"
    STRING = "STRING"
    UNARY_OP = "UNARY OPERATOR"


NUMERIC_KINDS = frozenset({TokenKind.INTEGER, TokenKind.FLOAT})
OPERATOR_KINDS = frozenset({TokenKind.BINARY_OP, TokenKind.LOGICAL_OP, TokenKind.OP})


class TokenDict(TypedDict):
    """
    TypedDict representation of a Token used for serialization.

    Fields:
        kind (str): The token kind name (e.g., "INTEGER", "OP").
        text (str): The lexeme or computed value.
        children (list[TokenDict]): Child tokens, filled in by `SyntaxTree.to_dict`.
    """

    kind: str
    text: str
    children: list["TokenDict"]


class Token:
    """
    A typed unit of lexical/syntactic meaning.

    Args:
        kind (TokenKind): The token kind.
        text (str): Raw lexeme, or a canonical decimal string once evaluated.
        parent (int | None): Arena index of the owning token, None for roots and
            detached tokens.
        children (list[int] | None): Arena indices of the owned child tokens.

    Attributes:
        kind (TokenKind): Kind of the token.
        text (str): Lexeme or value text.
        parent (int | None): Parent index inside the owning SyntaxTree.
        children (list[int]): Child indices inside the owning SyntaxTree.
    """

    def __init__(
        self,
        kind: TokenKind = TokenKind.UNDEFINED,
        text: str = "",
        parent: int | None = None,
        children: list[int] | None = None,
    ):
        self.kind = kind
        self.text = text
        self.parent = parent
        self.children: list[int] = children or []

    @property
    def is_numeric(self) -> bool:
        return self.kind in NUMERIC_KINDS

    def detach(self) -> "Token":
        """Returns a copy of this token's contents without tree linkage."""
        return Token(self.kind, self.text)

    def negate(self) -> bool:
        """Flips the sign of an Integer or Float token in place.

        Canonical numeric text is negated textually, so no precision is lost.

        Returns:
            bool: True if the token was numeric and has been negated.
        """
        if not self.is_numeric:
            return False
        if self.text.startswith("-"):
            self.text = self.text[1:]
        elif self.text.strip("0.") != "":
            self.text = f"-{self.text}"
        return True

    def describe(self) -> str:
        """Returns the `[KIND: text] (n)` form used by tree dumps."""
        label = f"[{self.kind.value}: {self.text}]" if self.text else f"[{self.kind.value}]"
        return f"{label} ({len(self.children)})"

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.kind == other.kind
            and self.text == other.text
            and self.parent == other.parent
            and self.children == other.children
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.text, self.parent))

    def to_dict(self) -> TokenDict:
        return {"kind": self.kind.name, "text": self.text, "children": []}


__all__ = ["NUMERIC_KINDS", "OPERATOR_KINDS", "Token", "TokenDict", "TokenKind"]
