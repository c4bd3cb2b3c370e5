"""
Provides the `SymbolTable` class holding CALC variables.

Assignments (`make x 42`) bind a name to a terminal value and identifiers
read it back. The table lives for the whole session and is emptied by the
REPL's `reset` command.

Classes:
    - SymbolTable: Maps variable names to Integer/Float value tokens.

Usage:
    >>> store = SymbolTable()
    >>> store.set("x", Token(TokenKind.INTEGER, "42"))
    >>> store.get("x")
    Token(INTEGER, 42)
"""

import logging

from calc.calc_token import Token

logger = logging.getLogger("calc.store")


class SymbolTable:
    """Variable store for one CALC session.

    Values are detached copies: the table never shares a token with a syntax
    tree, so later reductions of that tree cannot change a stored value.

    Attributes:
        symbols (dict[str, Token]): Maps variable names to Integer/Float tokens.
    """

    def __init__(self) -> None:
        self.symbols: dict[str, Token] = {}

    def get(self, name: str) -> Token | None:
        """Resolves a variable to a copy of its value.

        Args:
            name: The variable name.

        Returns:
            A detached value `Token` if the name is bound, else `None`.
        """
        value = self.symbols.get(name)
        return value.detach() if value is not None else None

    def set(self, name: str, value: Token) -> None:
        """Binds `name` to the kind and text of `value`, replacing any old binding.

        Raises:
            ValueError: If `value` is not an Integer or Float token.
        """
        if not value.is_numeric:
            raise ValueError(f"Cannot store non-terminal value {value!r} as '{name}'")
        self.symbols[name] = value.detach()
        logger.debug("bound %s --> %s", name, value.text)

    def contains(self, name: str) -> bool:
        return name in self.symbols

    def clear(self) -> None:
        logger.debug("cleared %d symbol(s)", len(self.symbols))
        self.symbols.clear()

    def render(self) -> str:
        """Returns one `name --> value` line per binding, sorted by name."""
        return "\n".join(f"{name} --> {value.text}" for name, value in sorted(self.symbols.items()))

    def summary(self) -> dict[str, str]:
        """Returns a plain mapping of names to value texts."""
        return {name: value.text for name, value in self.symbols.items()}

    def __contains__(self, name: object) -> bool:
        return name in self.symbols

    def __len__(self) -> int:
        return len(self.symbols)

    def __repr__(self) -> str:
        return f"SymbolTable({len(self.symbols)} symbol(s))"


__all__ = ["SymbolTable"]
