"""
Mutable syntax tree with a single cursor.

A `SyntaxTree` owns its tokens in an arena (a plain list); tokens reference
their parent and children by index, so ownership never aliases. One cursor,
`current`, moves to a child, to the parent, or to the root. `push_cache` and
`pop_cache` save and restore cursor positions so the parser and evaluator can
descend into a subtree and later come back to the exact node they left.

The evaluator folds a subtree into its value with `reduce`, which overwrites
the node's payload and drops its children; nodes are never rebuilt.

Example:
    tree = SyntaxTree()
    tree.add_child(TokenKind.EXPRESSION)
    tree.add_child(TokenKind.INTEGER, "42")
    tree.advance_forward(0)
    tree.reduce(Token(TokenKind.INTEGER, "43"))
"""

from collections import deque

from calc.calc_token import Token, TokenDict, TokenKind


class SyntaxTree:
    """
    Arena of tokens forming one statement tree.

    Attributes:
        nodes (list[Token]): Token arena; indices are stable for the tree's lifetime.
        root (int | None): Index of the root token, None while the tree is empty.
        current (int | None): Index of the cursor token.
    """

    def __init__(self) -> None:
        self.nodes: list[Token] = []
        self.root: int | None = None
        self.current: int | None = None
        self._cache: list[int | None] = []

    # Construction

    def add_child(self, kind: TokenKind, text: str = "") -> int:
        """Appends a new token under the cursor.

        The first token added to an empty tree becomes the root and the cursor.

        Returns:
            int: Arena index of the new token.
        """
        index = len(self.nodes)
        if self.current is None:
            self.nodes.append(Token(kind, text))
            self.root = self.current = index
        else:
            self.nodes.append(Token(kind, text, parent=self.current))
            self.nodes[self.current].children.append(index)
        return index

    def add_token(self, token: Token) -> int:
        return self.add_child(token.kind, token.text)

    # Navigation

    @property
    def size(self) -> int:
        """Number of children under the cursor."""
        if self.current is None:
            return 0
        return len(self.nodes[self.current].children)

    def advance_forward(self, index: int) -> bool:
        """Moves the cursor to its child at `index`."""
        if self.current is None or not 0 <= index < self.size:
            return False
        self.current = self.nodes[self.current].children[index]
        return True

    def advance_back(self) -> bool:
        """Moves the cursor to its parent."""
        if self.current is None or self.current == self.root:
            return False
        self.current = self.nodes[self.current].parent
        return True

    def advance_root(self) -> bool:
        if self.current == self.root:
            return False
        self.current = self.root
        return True

    def push_cache(self) -> None:
        self._cache.append(self.current)

    def pop_cache(self) -> bool:
        if not self._cache:
            return False
        self.current = self._cache.pop()
        return True

    # Access

    def contents(self) -> Token:
        """Returns the token under the cursor (the live arena entry)."""
        if self.current is None:
            raise IndexError("syntax tree is empty")
        return self.nodes[self.current]

    def value(self) -> Token:
        """Returns a detached copy of the token under the cursor."""
        return self.contents().detach()

    def child(self, index: int) -> Token:
        return self.nodes[self.contents().children[index]]

    def get_root(self) -> Token:
        if self.root is None:
            raise IndexError("syntax tree is empty")
        return self.nodes[self.root]

    # Mutation

    def set_contents(self, token: Token) -> None:
        node = self.contents()
        node.kind = token.kind
        node.text = token.text

    def reduce(self, value: Token, index: int | None = None) -> None:
        """Replaces a node's subtree with a terminal value.

        Args:
            value: Token whose kind/text become the node's payload.
            index: Arena index of the node; defaults to the cursor.
        """
        target = self.current if index is None else index
        if target is None:
            raise IndexError("syntax tree is empty")
        node = self.nodes[target]
        for child in node.children:
            self.nodes[child].parent = None
        node.children = []
        node.kind = value.kind
        node.text = value.text

    def remove_child(self, index: int) -> bool:
        if not 0 <= index < self.size:
            return False
        removed = self.contents().children.pop(index)
        self.nodes[removed].parent = None
        return True

    def remove_children(self) -> None:
        while self.remove_child(0):
            pass

    def negate(self) -> bool:
        return self.contents().negate()

    # Diagnostics

    def walk(self) -> list[Token]:
        """Returns the tree's tokens in breadth-first order."""
        if self.root is None:
            return []
        order: list[Token] = []
        queue = deque([self.root])
        while queue:
            node = self.nodes[queue.popleft()]
            order.append(node)
            queue.extend(node.children)
        return order

    def render(self) -> str:
        return "\n".join(token.describe() for token in self.walk())

    def to_dict(self, index: int | None = None) -> TokenDict:
        """Converts the subtree at `index` (default: root) into nested dicts."""
        target = self.root if index is None else index
        if target is None:
            raise IndexError("syntax tree is empty")
        node = self.nodes[target]
        data = node.to_dict()
        data["children"] = [self.to_dict(child) for child in node.children]
        return data

    def __len__(self) -> int:
        return len(self.walk())

    def __repr__(self) -> str:
        return f"SyntaxTree(root={self.root}, current={self.current}, cache={len(self._cache)})"


__all__ = ["SyntaxTree"]
