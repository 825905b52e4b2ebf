"""Tests for tree validity predicates."""
import pytest
from blocktree.block import (
    BlockMap,
    BlockNode,
    PreconditionError,
    find_broken_links,
    invariant,
    is_connected_tree,
    is_ordered_tree,
    is_valid_block,
    is_valid_tree,
)


class TestInvariantHelper:

    def test_passes_silently(self):
        invariant(True, "never raised")

    def test_raises_precondition_error(self):
        with pytest.raises(PreconditionError, match="broken"):
            invariant(False, "broken")


class TestIsValidTree:
    """Tests for whole-tree validity."""

    def test_built_outline_is_valid(self, outline):
        assert is_valid_tree(outline)
        assert find_broken_links(outline) == []

    def test_empty_map_is_valid(self):
        assert is_valid_tree(BlockMap())

    def test_single_block_is_valid(self):
        assert is_valid_tree(BlockMap([BlockNode(key="a", text="x")]))

    def test_two_first_blocks_are_not_connected(self):
        block_map = BlockMap([BlockNode(key="a"), BlockNode(key="b")])
        assert not is_connected_tree(block_map)
        assert not is_valid_tree(block_map)

    def test_out_of_order_child_is_not_ordered(self, outline):
        # move "g1" after "footer" without touching any links
        is_g1 = lambda b: b.key == "g1"
        reordered = outline.take_until(is_g1).concat(
            outline.skip_until(is_g1).slice(1),
            BlockMap([outline["g1"]]),
        )
        assert is_connected_tree(reordered)
        assert not is_ordered_tree(reordered)
        assert not is_valid_tree(reordered)

    def test_parent_after_child_is_not_ordered(self):
        block_map = BlockMap([
            BlockNode(key="c", text="c", parent="p"),
            BlockNode(key="p", children=("c",)),
        ])
        assert not is_valid_tree(block_map)

    def test_sibling_cycle_is_rejected(self):
        block_map = BlockMap([
            BlockNode(key="a", next_sibling="b"),
            BlockNode(key="b", prev_sibling="a", next_sibling="a"),
        ])
        assert not is_valid_tree(block_map)


class TestIsValidBlock:
    """Tests for per-block consistency."""

    def test_missing_parent_pointer(self, outline):
        broken = outline.set("a", outline["a"].merge(parent="title"))
        assert not is_valid_block(broken["a"], broken)

    def test_missing_child_pointer(self, outline):
        broken = outline.set("g1", outline["g1"].merge(parent="section"))
        assert not is_valid_block(broken["group"], broken)

    def test_missing_sibling_pointer(self, outline):
        broken = outline.set("b", outline["b"].merge(prev_sibling=None))
        assert not is_valid_block(broken["group"], broken)

    def test_dangling_reference(self, outline):
        broken = outline.set("a", outline["a"].merge(prev_sibling="ghost"))
        assert not is_valid_block(broken["a"], broken)

    def test_text_block_with_children(self, outline):
        broken = outline.set("group", outline["group"].merge(text="not a container"))
        assert not is_valid_block(broken["group"], broken)

    def test_duplicate_children(self, outline):
        broken = outline.set("group", outline["group"].merge(children=("g1", "g1", "g2")))
        assert not is_valid_block(broken["group"], broken)

    def test_children_out_of_sibling_order(self, outline):
        broken = outline.set("group", outline["group"].merge(children=("g2", "g1")))
        assert not is_valid_block(broken["group"], broken)


class TestFindBrokenLinks:
    """Tests for the link symmetry report."""

    def test_reports_one_sided_sibling_link(self):
        block_map = BlockMap([
            BlockNode(key="a", next_sibling="b"),
            BlockNode(key="b"),
        ])
        assert find_broken_links(block_map) == ["a.next_sibling -> b does not point back"]

    def test_reports_dangling_child(self):
        block_map = BlockMap([BlockNode(key="p", children=("ghost",))])
        assert find_broken_links(block_map) == ["p.children -> missing ghost"]
