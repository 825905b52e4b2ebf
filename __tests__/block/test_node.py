"""Tests for BlockNode records."""
import pytest
from pydantic import ValidationError
from blocktree.block import BlockNode, CharacterMetadata, PreconditionError


class TestBlockNodeCreation:
    """Tests for BlockNode defaults."""

    def test_defaults(self):
        node = BlockNode(key="a")
        assert node.text == ""
        assert node.type == "unstyled"
        assert node.depth == 0
        assert node.parent is None
        assert node.prev_sibling is None
        assert node.next_sibling is None
        assert node.children == ()

    def test_children_list_is_stored_as_tuple(self):
        node = BlockNode(key="p", children=["a", "b"])
        assert node.children == ("a", "b")

    def test_is_frozen(self):
        node = BlockNode(key="a")
        with pytest.raises(ValidationError):
            node.text = "changed"

    def test_container_and_leaf(self):
        assert BlockNode(key="a").is_container
        assert not BlockNode(key="a", text="hi").is_container
        assert BlockNode(key="a").is_leaf
        assert not BlockNode(key="a", children=("b",)).is_leaf


class TestBlockNodeMerge:
    """Tests for copy-with-changes."""

    def test_merge_keeps_unspecified_fields(self):
        node = BlockNode(key="a", text="hello", type="header-two", depth=2, parent="p")
        moved = node.merge(parent="q", next_sibling="b")

        assert moved.parent == "q"
        assert moved.next_sibling == "b"
        assert moved.text == "hello"
        assert moved.type == "header-two"
        assert moved.depth == 2

    def test_merge_does_not_touch_original(self):
        node = BlockNode(key="a", parent="p")
        node.merge(parent=None)
        assert node.parent == "p"

    def test_merge_normalises_children(self):
        node = BlockNode(key="p").merge(children=["x", "y"])
        assert node.children == ("x", "y")

    def test_merge_rejects_unknown_fields(self):
        with pytest.raises(PreconditionError, match="unknown block fields"):
            BlockNode(key="a").merge(colour="red")

    def test_merge_validates_field_types(self):
        with pytest.raises(PreconditionError, match="invalid block fields for a"):
            BlockNode(key="a").merge(parent=123)

    def test_merge_cannot_change_key(self):
        with pytest.raises(PreconditionError, match="key cannot be changed"):
            BlockNode(key="a").merge(key="b")

    def test_merge_with_same_key_is_allowed(self):
        assert BlockNode(key="a").merge(key="a", text="x").text == "x"

    def test_value_equality(self):
        assert BlockNode(key="a", text="x") == BlockNode(key="a", text="x")
        assert BlockNode(key="a", text="x") != BlockNode(key="a", text="y")

    def test_character_list_is_carried(self):
        bold = CharacterMetadata.create(style=("BOLD",))
        node = BlockNode(key="a", text="hi", character_list=(bold, bold))
        assert node.merge(parent="p").character_list == (bold, bold)
