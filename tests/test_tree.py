import pytest

from calc.calc_token import Token, TokenKind
from calc.calc_tree import SyntaxTree


def sample() -> SyntaxTree:
    # EXPRESSION[INTEGER 1, OP +[EXPRESSION[INTEGER 2]]]
    tree = SyntaxTree()
    tree.add_child(TokenKind.EXPRESSION)
    tree.add_child(TokenKind.INTEGER, "1")
    tree.add_child(TokenKind.OP, "+")
    tree.advance_forward(1)
    tree.add_child(TokenKind.EXPRESSION)
    tree.advance_forward(0)
    tree.add_child(TokenKind.INTEGER, "2")
    tree.advance_root()
    return tree


def test_empty_tree() -> None:
    tree = SyntaxTree()
    assert tree.root is None
    assert tree.size == 0
    assert len(tree) == 0
    assert tree.walk() == []
    with pytest.raises(IndexError):
        tree.contents()
    with pytest.raises(IndexError):
        tree.get_root()
    with pytest.raises(IndexError):
        tree.to_dict()


def test_first_child_becomes_root() -> None:
    tree = SyntaxTree()
    index = tree.add_child(TokenKind.EXPRESSION)
    assert index == 0
    assert tree.root == 0
    assert tree.current == 0
    assert tree.get_root().kind is TokenKind.EXPRESSION


def test_children_link_to_parent() -> None:
    tree = sample()
    assert tree.size == 2
    assert tree.child(0) == Token(TokenKind.INTEGER, "1", parent=0)
    assert tree.child(1).text == "+"


def test_cursor_moves() -> None:
    tree = sample()
    assert tree.advance_forward(1)
    assert tree.contents().text == "+"
    assert tree.advance_forward(0)
    assert tree.contents().kind is TokenKind.EXPRESSION
    assert tree.advance_back()
    assert tree.contents().text == "+"
    assert tree.advance_root()
    assert tree.current == tree.root
    assert not tree.advance_root()
    assert not tree.advance_back()


def test_advance_forward_out_of_range() -> None:
    tree = sample()
    assert not tree.advance_forward(2)
    assert not tree.advance_forward(-1)
    assert tree.current == tree.root


def test_cache_restores_cursor() -> None:
    tree = sample()
    tree.push_cache()
    tree.advance_forward(1)
    tree.advance_forward(0)
    assert tree.pop_cache()
    assert tree.current == tree.root
    assert not tree.pop_cache()


def test_value_is_detached() -> None:
    tree = sample()
    value = tree.value()
    value.text = "changed"
    assert tree.contents().text == ""
    assert value.children == []


def test_set_contents_keeps_children() -> None:
    tree = sample()
    tree.set_contents(Token(TokenKind.INTEGER, "3"))
    assert tree.contents().kind is TokenKind.INTEGER
    assert tree.size == 2


def test_reduce_replaces_subtree() -> None:
    tree = sample()
    tree.reduce(Token(TokenKind.INTEGER, "3"))
    assert tree.get_root() == Token(TokenKind.INTEGER, "3")
    assert tree.size == 0
    assert tree.walk() == [Token(TokenKind.INTEGER, "3")]


def test_reduce_by_index() -> None:
    tree = sample()
    tree.reduce(Token(TokenKind.INTEGER, "2"), index=2)
    assert tree.child(1).kind is TokenKind.INTEGER
    assert tree.child(1).children == []
    assert tree.current == tree.root


def test_remove_children() -> None:
    tree = sample()
    assert tree.remove_child(1)
    assert tree.size == 1
    assert not tree.remove_child(1)
    tree.remove_children()
    assert tree.size == 0


def test_negate_cursor() -> None:
    tree = sample()
    tree.advance_forward(0)
    assert tree.negate()
    assert tree.contents().text == "-1"


def test_walk_is_breadth_first() -> None:
    tree = sample()
    assert [tok.kind for tok in tree.walk()] == [
        TokenKind.EXPRESSION,
        TokenKind.INTEGER,
        TokenKind.OP,
        TokenKind.EXPRESSION,
        TokenKind.INTEGER,
    ]
    assert len(tree) == 5


def test_render() -> None:
    assert sample().render() == "\n".join(
        [
            "[EXPRESSION] (2)",
            "[INTEGER: 1] (0)",
            "[OPERATOR: +] (1)",
            "[EXPRESSION] (1)",
            "[INTEGER: 2] (0)",
        ]
    )


def test_to_dict() -> None:
    assert sample().to_dict() == {
        "kind": "EXPRESSION",
        "text": "",
        "children": [
            {"kind": "INTEGER", "text": "1", "children": []},
            {
                "kind": "OP",
                "text": "+",
                "children": [
                    {
                        "kind": "EXPRESSION",
                        "text": "",
                        "children": [{"kind": "INTEGER", "text": "2", "children": []}],
                    }
                ],
            },
        ],
    }


def test_repr() -> None:
    assert repr(sample()) == "SyntaxTree(root=0, current=0, cache=0)"
