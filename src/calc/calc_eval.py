"""
Provides the `Evaluator` class and `evaluate_line` for running CALC statements.

The evaluator walks a parsed `SyntaxTree` with the tree's own cursor and
reduces it in place: every Constant, Function, Expression and operator node
is overwritten by its Integer/Float value and loses its children. Once the
root has been reduced, its text is the statement's display value.

Classes and Features:
    - Evaluator: Reduces statement trees against a `SymbolTable`.
        * Assignment: binds the value of the expression to the name
        * Expression: folds its children left to right into an accumulator
        * The leading child of an Expression is dispatched to `eval_<kind>`
    - evaluate_line: Parses one input line and evaluates each statement.

Example:
    >>> store = SymbolTable()
    >>> evaluate_line("make x 5 x + 1", store)
    '6'

Raises:
    CalcError: For every parse or evaluation failure. `evaluate_line` attaches
        the input position and the output of statements that already ran.
"""

import logging

from calc.calc_constants import OP_NOT
from calc.calc_errors import CalcError, ErrorKind
from calc.calc_numeric import NumericContext, default_context
from calc.calc_parser import Parser
from calc.calc_store import SymbolTable
from calc.calc_token import OPERATOR_KINDS, Token, TokenKind
from calc.calc_tree import SyntaxTree

logger = logging.getLogger("calc.eval")

# Kinds allowed as the first child of an Expression
LEADING_KINDS = frozenset(
    {
        TokenKind.CONSTANT,
        TokenKind.EXPRESSION,
        TokenKind.FLOAT,
        TokenKind.FUNCTION,
        TokenKind.INTEGER,
        TokenKind.STRING,
        TokenKind.UNARY_OP,
    }
)


class Evaluator:
    """Reduces CALC syntax trees to values.

    Attributes:
        store (SymbolTable): Variables read by identifiers and written by assignments.
        numeric (NumericContext): Precision, rounding and random source for Float math.
    """

    def __init__(self, store: SymbolTable, numeric: NumericContext | None = None) -> None:
        self.store = store
        self.numeric = numeric or default_context()

    def evaluate(self, tree: SyntaxTree) -> Token | None:
        """Evaluates one statement tree.

        Args:
            tree: A tree produced by `Parser.parse()`.

        Returns:
            The value of an expression statement, or `None` for an assignment.

        Raises:
            CalcError: If the tree cannot be reduced.
        """
        tree.advance_root()
        kind = tree.contents().kind
        if kind is TokenKind.ASSIGNMENT:
            self.eval_assignment(tree)
            return None
        if kind is TokenKind.EXPRESSION:
            return self.eval_expression(tree)
        raise CalcError(ErrorKind.INVALID_EXPRESSION, detail=kind.name)

    def eval_assignment(self, tree: SyntaxTree) -> None:
        node = tree.contents()
        if tree.size != 2:
            raise CalcError(ErrorKind.INVALID_ASSIGNMENT_STATEMENT)
        name = tree.child(0)
        if name.kind is not TokenKind.STRING or tree.child(1).kind is not TokenKind.EXPRESSION:
            raise CalcError(ErrorKind.INVALID_ASSIGNMENT_STATEMENT)

        tree.push_cache()
        tree.advance_forward(1)
        value = self.eval_expression(tree)
        tree.pop_cache()

        if not value.is_numeric:
            raise CalcError(ErrorKind.INVALID_ASSIGNMENT_STATEMENT)
        self.store.set(name.text, value)
        logger.debug("%s %s --> %s", node.text, name.text, value.text)

    def eval_expression(self, tree: SyntaxTree) -> Token:
        """Reduces the Expression under the cursor and returns its value.

        The first child seeds the accumulator; each later child must be an
        operator node holding its right operand, and is folded into the
        accumulator in order.
        """
        node = tree.contents()
        if node.kind is not TokenKind.EXPRESSION:
            raise CalcError(ErrorKind.INVALID_EXPRESSION, detail=node.kind.name)

        accum: Token | None = None
        for index in range(tree.size):
            tree.push_cache()
            tree.advance_forward(index)
            if accum is None:
                accum = self._visit(tree)
            else:
                child = tree.contents()
                if child.kind not in OPERATOR_KINDS or tree.size != 1:
                    raise CalcError(ErrorKind.INVALID_EXPRESSION, detail=child.kind.name)
                accum = self.eval_operator(tree, accum)
            tree.pop_cache()

        if accum is None:
            return node.detach()
        tree.reduce(accum)
        return accum

    def _visit(self, tree: SyntaxTree) -> Token:
        """Dispatches the leading child of an Expression to its `eval_<kind>` method."""
        kind = tree.contents().kind
        if kind not in LEADING_KINDS:
            raise CalcError(ErrorKind.INVALID_EXPRESSION, detail=kind.name)
        handler = getattr(self, f"eval_{kind.name.lower()}")
        value: Token = handler(tree)
        return value

    def eval_constant(self, tree: SyntaxTree) -> Token:
        node = tree.contents()
        if node.kind is not TokenKind.CONSTANT:
            raise CalcError(ErrorKind.INVALID_CONSTANT, detail=node.kind.name)
        value = self.numeric.to_token(self.numeric.constant(node.text))
        tree.reduce(value)
        return value

    def eval_function(self, tree: SyntaxTree) -> Token:
        node = tree.contents()
        if node.kind is not TokenKind.FUNCTION or tree.size != 1:
            raise CalcError(ErrorKind.INVALID_FUNCTION, detail=node.text)
        name = node.text

        tree.push_cache()
        tree.advance_forward(0)
        argument = self.eval_expression(tree)
        tree.pop_cache()

        if not argument.is_numeric:
            raise CalcError(ErrorKind.INVALID_FUNCTION, detail=name)
        result = self.numeric.apply_function(name, self.numeric.parse_value(argument))
        value = self.numeric.to_token(result)
        logger.debug("%s(%s) = %s", name, argument.text, value.text)
        tree.reduce(value)
        return value

    def eval_string(self, tree: SyntaxTree) -> Token:
        name = tree.contents().text
        value = self.store.get(name)
        if value is None:
            raise CalcError(ErrorKind.UNDEFINED_IDENTIFIER, detail=name)
        tree.reduce(value)
        return value

    def eval_unary_op(self, tree: SyntaxTree) -> Token:
        node = tree.contents()
        if node.text != OP_NOT:
            raise CalcError(ErrorKind.INVALID_UNARY_OPERATOR, detail=node.text)
        if tree.size != 1:
            raise CalcError(ErrorKind.INVALID_EXPRESSION)

        tree.push_cache()
        tree.advance_forward(0)
        value = self.eval_expression(tree).detach()
        tree.pop_cache()

        if not value.negate():
            raise CalcError(ErrorKind.INVALID_OPERAND, detail=value.kind.name)
        tree.reduce(value)
        return value

    def eval_integer(self, tree: SyntaxTree) -> Token:
        value = self.numeric.canonical(tree.contents())
        tree.reduce(value)
        return value

    eval_float = eval_integer

    def eval_operator(self, tree: SyntaxTree, accum: Token) -> Token:
        """Applies the operator under the cursor to `accum` and its right operand.

        Args:
            tree: Tree whose cursor is on an operator node with one Expression child.
            accum: The left operand.

        Returns:
            The result token; Integer only if both operands are Integers.
        """
        node = tree.contents()
        op = node.text

        tree.push_cache()
        tree.advance_forward(0)
        right = self.eval_expression(tree)
        tree.pop_cache()

        if not (accum.is_numeric and right.is_numeric):
            raise CalcError(ErrorKind.INVALID_OPERAND)
        a = self.numeric.parse_value(accum)
        b = self.numeric.parse_value(right)

        if node.kind is TokenKind.OP:
            result = self.numeric.arithmetic(op, a, b)
        elif node.kind is TokenKind.BINARY_OP:
            result = self.numeric.bitwise(op, a, b)
        elif node.kind is TokenKind.LOGICAL_OP:
            result = self.numeric.shift(op, a, b)
        else:
            raise CalcError(ErrorKind.INVALID_OPERATOR, detail=node.kind.name)

        value = self.numeric.to_token(result)
        tree.reduce(value)
        return value


def evaluate_line(
    line: str, store: SymbolTable, numeric: NumericContext | None = None
) -> str:
    """Parses and evaluates one line of input.

    Args:
        line: The input text; may hold several statements.
        store: Variable store shared across lines.
        numeric: Numeric context; the process-wide default when omitted.

    Returns:
        The values of the expression statements, one per line. Assignments
        contribute nothing.

    Raises:
        CalcError: On the first failing statement. Its `position` is the
            1-based input offset where parsing stopped and its `output` holds
            the values of the statements evaluated before the failure.
    """
    parser = Parser.from_source(line)
    evaluator = Evaluator(store, numeric)
    output: list[str] = []
    try:
        for tree in parser.parse():
            value = evaluator.evaluate(tree)
            if value is not None and value.text:
                output.append(value.text)
    except CalcError as err:
        if not err.position:
            err.position = parser.position
        err.output = output
        logger.debug("%r in %r", err, line)
        raise
    except (MemoryError, RecursionError) as exc:
        err = CalcError(ErrorKind.MEM_FAILURE, parser.position, detail=type(exc).__name__)
        err.output = output
        raise err from exc
    return "\n".join(output)


__all__ = ["Evaluator", "evaluate_line"]
