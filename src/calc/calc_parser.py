"""
CALC Parser

Parses one line of CALC input into syntax trees, one tree per statement.

The parser pulls tokens from a `Lexer` and builds each tree through the tree's
cursor: it appends nodes under the cursor, descends into them, and uses the
cursor save stack to come back to the node it started from.

Grammar
-------
    statement   := ASSIGN STRING expression | expression
    expression  := e1 e0p
    e0p         := BinaryOp e1 e0p | ε              (& | $, lowest precedence)
    e1          := e2 e1p
    e1p         := LogicalOp e2 e1p | ε              (<< >>)
    e2          := e3 e2p
    e2p         := '-' e3 e2p | ε
    e3          := e4 e3p
    e3p         := '+' e4 e3p | ε
    e4          := e5 e4p
    e4p         := ('/' | '%') e5 e4p | ε
    e5          := e6 e5p
    e5p         := '*' e6 e5p | ε
    e6          := e7 e6p
    e6p         := '^' e7 e6p | ε
    e7          := '(' expression ')' | Constant | Function expression
                 | '~' expression | '-' e7 | Integer | Float | String

Tree shape
----------
Every operator is stored as a node whose single child is an Expression holding
its right operand. Operators of one precedence level are appended side by side
under the Expression that holds their left operand, so the evaluator folds
them left to right: `2 ^ 3 ^ 2` is `(2 ^ 3) ^ 2`.

    EXPRESSION
    ├── INTEGER 2
    ├── OPERATOR ^ ── EXPRESSION ── INTEGER 3
    └── OPERATOR ^ ── EXPRESSION ── INTEGER 2

Raises
------
CalcError
    EXPECTING_CLOSE_PAREN, EXPECTING_IDENTIFIER or EXPECTING_STRING_IDENTIFIER,
    positioned at the token where parsing stopped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from calc.calc_constants import OP_DIV, OP_MINUS, OP_MOD, OP_MULT, OP_NOT, OP_PLUS, OP_POW
from calc.calc_errors import CalcError, ErrorKind
from calc.calc_lexer import Lexer
from calc.calc_token import TokenKind
from calc.calc_tree import SyntaxTree

logger = logging.getLogger("calc.parser")

Rule = Callable[[SyntaxTree], None]


class Parser:
    """
    CALC Parser Class

    Attributes
    ----------
    lexer : Lexer
        The token source; its current token is the parser's lookahead.
    trees : list[SyntaxTree]
        Statement trees produced by the last `parse()` call.

    Methods
    -------
    parse() -> list[SyntaxTree]
        Parse the whole input into statement trees.
    statement(tree)
        Parse an assignment or an expression into `tree`.
    expression(tree)
        Parse an expression under the cursor of `tree`.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.trees: list[SyntaxTree] = []

    @classmethod
    def from_source(cls, source: str) -> Parser:
        return cls(Lexer.from_source(source))

    @property
    def position(self) -> int:
        """1-based input offset of the token where parsing stopped."""
        return self.lexer.position

    def fail(self, kind: ErrorKind) -> CalcError:
        logger.debug("parse error %s at %d (%r)", kind.name, self.position, self.lexer.text)
        return CalcError(kind, self.position)

    def at_op(self, *texts: str) -> bool:
        return self.lexer.kind is TokenKind.OP and self.lexer.text in texts

    def parse(self) -> list[SyntaxTree]:
        """Parse the full input and return one tree per statement."""
        self.lexer.reset()
        self.trees = []
        while self.lexer.has_next():
            tree = SyntaxTree()
            self.statement(tree)
            tree.advance_root()
            self.trees.append(tree)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("parsed statement %d:\n%s", len(self.trees), tree.render())
        return self.trees

    def statement(self, tree: SyntaxTree) -> None:
        """Parse `make NAME expression` or a bare expression."""
        if self.lexer.kind is TokenKind.ASSIGNMENT:
            tree.add_token(self.lexer.token())
            self.lexer.next()
            if self.lexer.kind is not TokenKind.STRING:
                raise self.fail(ErrorKind.EXPECTING_STRING_IDENTIFIER)
            tree.add_token(self.lexer.token())
            self.lexer.next()
        self.expression(tree)

    def expression(self, tree: SyntaxTree) -> None:
        """Open a new Expression node under the cursor and parse into it."""
        tree.push_cache()
        tree.add_child(TokenKind.EXPRESSION)
        tree.advance_forward(tree.size - 1)
        self.e1(tree)
        self.e0p(tree)
        tree.pop_cache()

    def add_symbol(self, tree: SyntaxTree) -> None:
        """Append the current operator with an empty operand Expression, and enter it."""
        tree.add_token(self.lexer.token())
        tree.advance_forward(tree.size - 1)
        tree.add_child(TokenKind.EXPRESSION)
        tree.advance_forward(0)
        self.lexer.next()

    def operand(self, tree: SyntaxTree, rule: Rule) -> None:
        """Parse the right operand of the current operator with `rule`."""
        tree.push_cache()
        self.add_symbol(tree)
        rule(tree)
        tree.pop_cache()

    def e0p(self, tree: SyntaxTree) -> None:
        while self.lexer.kind is TokenKind.BINARY_OP:
            self.operand(tree, self.e1)

    def e1(self, tree: SyntaxTree) -> None:
        self.e2(tree)
        self.e1p(tree)

    def e1p(self, tree: SyntaxTree) -> None:
        while self.lexer.kind is TokenKind.LOGICAL_OP:
            self.operand(tree, self.e2)

    def e2(self, tree: SyntaxTree) -> None:
        self.e3(tree)
        self.e2p(tree)

    def e2p(self, tree: SyntaxTree) -> None:
        while self.at_op(OP_MINUS):
            self.operand(tree, self.e3)

    def e3(self, tree: SyntaxTree) -> None:
        self.e4(tree)
        self.e3p(tree)

    def e3p(self, tree: SyntaxTree) -> None:
        while self.at_op(OP_PLUS):
            self.operand(tree, self.e4)

    def e4(self, tree: SyntaxTree) -> None:
        self.e5(tree)
        self.e4p(tree)

    def e4p(self, tree: SyntaxTree) -> None:
        while self.at_op(OP_DIV, OP_MOD):
            self.operand(tree, self.e5)

    def e5(self, tree: SyntaxTree) -> None:
        self.e6(tree)
        self.e5p(tree)

    def e5p(self, tree: SyntaxTree) -> None:
        while self.at_op(OP_MULT):
            self.operand(tree, self.e6)

    def e6(self, tree: SyntaxTree) -> None:
        self.e7(tree)
        self.e6p(tree)

    def e6p(self, tree: SyntaxTree) -> None:
        while self.at_op(OP_POW):
            self.operand(tree, self.e7)

    def e7(self, tree: SyntaxTree) -> None:
        """Parse a primary: group, constant, function, negation or literal."""
        kind = self.lexer.kind

        if kind is TokenKind.OPENING_PAREN:
            self.lexer.next()
            self.expression(tree)
            if self.lexer.kind is not TokenKind.CLOSING_PAREN:
                raise self.fail(ErrorKind.EXPECTING_CLOSE_PAREN)
            self.lexer.next()

        elif kind is TokenKind.CONSTANT:
            tree.add_token(self.lexer.token())
            self.lexer.next()

        elif kind is TokenKind.FUNCTION or (
            kind is TokenKind.UNARY_OP and self.lexer.text == OP_NOT
        ):
            # Functions and `~` apply to the whole expression that follows
            tree.push_cache()
            tree.add_token(self.lexer.token())
            tree.advance_forward(tree.size - 1)
            self.lexer.next()
            self.expression(tree)
            tree.pop_cache()

        elif self.at_op(OP_MINUS):
            # Prefix minus negates the next primary only
            tree.push_cache()
            tree.add_child(TokenKind.UNARY_OP, OP_NOT)
            tree.advance_forward(tree.size - 1)
            tree.add_child(TokenKind.EXPRESSION)
            tree.advance_forward(0)
            self.lexer.next()
            self.e7(tree)
            tree.pop_cache()

        else:
            self.identifier(tree)

    def identifier(self, tree: SyntaxTree) -> None:
        """Parse a literal or a variable name."""
        if self.lexer.kind not in (TokenKind.INTEGER, TokenKind.FLOAT, TokenKind.STRING):
            raise self.fail(ErrorKind.EXPECTING_IDENTIFIER)
        tree.add_token(self.lexer.token())
        self.lexer.next()

    def render(self) -> str:
        """Returns a breadth-first dump of every parsed tree."""
        if not self.trees:
            return "Empty"
        return "\n\n".join(tree.render() for tree in self.trees)


__all__ = ["Parser"]
