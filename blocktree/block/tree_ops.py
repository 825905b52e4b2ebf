"""
Tree operations - Structural surgery on block maps.

Every function takes a BlockMap and returns a new one; the input is never
modified, so a failed call leaves the caller's map exactly as it was.

Primitives (the result may not be a valid tree on its own):
- link_parent_child: insert a child into a parent's children at a position
- link_siblings: point two blocks at each other as prev/next siblings
- replace_child: swap one child key for another in a parent's children

Composite operations (expect and return a valid tree):
- wrap_in_new_parent: give a block a fresh empty parent in its place
- adopt_by_sibling: move a block under its previous or next sibling

Usage:
    ops = TreeOperations(strict=True)
    block_map = ops.wrap_in_new_parent(block_map, "a")
    block_map = ops.adopt_by_sibling(block_map, "b", "previous")
"""

from __future__ import annotations
import logging
from typing import Callable, Container, Literal

from ..utils.env_utils import dev_checks_enabled
from .block_map import BlockMap
from .invariants import PreconditionError, invariant, is_valid_tree
from .keys import generate_random_key
from .node import BlockNode


logger = logging.getLogger(__name__)

SiblingSide = Literal["previous", "next"]
KeyGenerator = Callable[[Container[str]], str]


def verify_tree(block_map: BlockMap, strict: bool | None = None) -> None:
    """Raise PreconditionError if checks are enabled and the tree is invalid."""
    if strict is None:
        strict = dev_checks_enabled()
    if not strict:
        return
    if not is_valid_tree(block_map):
        logger.error(f"Tree validity check failed for {block_map!r}")
        raise PreconditionError("The tree is not valid")


# =========================================================================
# Primitives
# =========================================================================

def link_parent_child(block_map: BlockMap, parent_key: str, child_key: str, position: int) -> BlockMap:
    """
    Insert `child_key` into `parent_key`'s children at `position`.

    The child's parent and sibling fields are overwritten to match its new
    slot, and the neighbours on either side are pointed at it. Document
    order is not changed.
    """
    parent = block_map.get(parent_key)
    child = block_map.get(child_key)
    invariant(parent is not None and child is not None, "parent & child should exist in the block map")
    existing_children = parent.children
    invariant(child_key != parent_key, "a block cannot be its own child")
    invariant(child_key not in existing_children, f"{child_key} is already a child of {parent_key}")
    invariant(
        0 <= position <= len(existing_children),
        "position is not valid for the number of children",
    )

    new_blocks: dict[str, BlockNode] = {
        parent_key: parent.merge(
            children=existing_children[:position] + (child_key,) + existing_children[position:],
        ),
    }

    prev_sibling_key = None
    next_sibling_key = None
    if position > 0:
        prev_sibling_key = existing_children[position - 1]
        new_blocks[prev_sibling_key] = _require(block_map, prev_sibling_key).merge(next_sibling=child_key)
    if position < len(existing_children):
        next_sibling_key = existing_children[position]
        new_blocks[next_sibling_key] = _require(block_map, next_sibling_key).merge(prev_sibling=child_key)

    new_blocks[child_key] = child.merge(
        parent=parent_key,
        prev_sibling=prev_sibling_key,
        next_sibling=next_sibling_key,
    )
    return block_map.merge(new_blocks)


def link_siblings(block_map: BlockMap, prev_key: str, next_key: str) -> BlockMap:
    """
    Make `next_key` the next sibling of `prev_key` and vice versa.

    Former neighbours of either block are not updated.
    """
    prev_sibling = block_map.get(prev_key)
    next_sibling = block_map.get(next_key)
    invariant(prev_sibling is not None and next_sibling is not None, "siblings should exist in the block map")
    invariant(prev_key != next_key, "a block cannot be its own sibling")
    return block_map.merge({
        prev_key: prev_sibling.merge(next_sibling=next_key),
        next_key: next_sibling.merge(prev_sibling=prev_key),
    })


def replace_child(block_map: BlockMap, parent_key: str, old_child_key: str, new_child_key: str) -> BlockMap:
    """
    Put `new_child_key` in the slot `old_child_key` holds in the parent.

    Sibling links are left alone, and the old child keeps its parent field.
    """
    parent = block_map.get(parent_key)
    new_child = block_map.get(new_child_key)
    invariant(parent is not None and new_child is not None, "parent & child should exist in the block map")
    invariant(old_child_key in parent.children, f"{old_child_key} is not a child of {parent_key}")
    invariant(
        new_child_key == old_child_key or new_child_key not in parent.children,
        f"{new_child_key} is already a child of {parent_key}",
    )
    invariant(new_child_key != parent_key, "a block cannot be its own child")
    children = list(parent.children)
    children[children.index(old_child_key)] = new_child_key
    return block_map.merge({
        parent_key: parent.merge(children=children),
        new_child_key: new_child.merge(parent=parent_key),
    })


# =========================================================================
# Composite operations
# =========================================================================

def wrap_in_new_parent(
    block_map: BlockMap,
    key: str,
    *,
    strict: bool | None = None,
    key_generator: KeyGenerator = generate_random_key,
) -> BlockMap:
    """
    Create a new empty parent for `key` that takes over its place in the tree.

    The new parent sits directly before `key` in document order, inherits
    its parent and siblings, and has `key` as its only child.
    """
    verify_tree(block_map, strict)
    block = block_map.get(key)
    invariant(block is not None, "block must exist in block map")

    new_parent = BlockNode(
        key=key_generator(block_map),
        text="",
        depth=block.depth,
        type=block.type,
        children=(),
    )
    is_target: Callable[[BlockNode], bool] = lambda b: b.key == key
    new_block_map = (
        block_map.take_until(is_target)
        .concat(BlockMap([new_parent]), block_map.skip_until(is_target))
    )

    # the child's own links must be rewritten before they are moved onto the new parent
    new_block_map = link_parent_child(new_block_map, new_parent.key, key, 0)
    if block.prev_sibling is not None:
        new_block_map = link_siblings(new_block_map, block.prev_sibling, new_parent.key)
    if block.next_sibling is not None:
        new_block_map = link_siblings(new_block_map, new_parent.key, block.next_sibling)
    if block.parent is not None:
        new_block_map = replace_child(new_block_map, block.parent, key, new_parent.key)

    logger.debug(f"Wrapped {key} in new parent {new_parent.key}")
    verify_tree(new_block_map, strict)
    return new_block_map


def adopt_by_sibling(
    block_map: BlockMap,
    key: str,
    side: SiblingSide,
    *,
    strict: bool | None = None,
) -> BlockMap:
    """
    Move `key` under its previous or next sibling.

    - "previous": appended as the sibling's last child
    - "next": inserted as the sibling's first child; the sibling is moved
      ahead of `key` in document order so the parent precedes its child

    The sibling must be a container (empty text). `key` is removed from its
    former parent's children.
    """
    verify_tree(block_map, strict)
    invariant(side in ("previous", "next"), f"side must be 'previous' or 'next', got {side!r}")
    block = block_map.get(key)
    invariant(block is not None, "block must exist in block map")
    new_parent_key = block.prev_sibling if side == "previous" else block.next_sibling
    invariant(new_parent_key is not None, "sibling is null")
    new_parent = block_map.get(new_parent_key)
    invariant(new_parent is not None and new_parent.text == "", "parent must be a valid node")

    new_block_map = block_map
    if side == "next":
        new_block_map = link_parent_child(new_block_map, new_parent_key, key, 0)
        if block.prev_sibling is not None:
            new_block_map = link_siblings(new_block_map, block.prev_sibling, new_parent_key)
        else:
            new_block_map = new_block_map.set(
                new_parent_key,
                new_block_map[new_parent_key].merge(prev_sibling=None),
            )
        new_block_map = _move_before(new_block_map, new_parent_key, key)
    else:
        new_block_map = link_parent_child(new_block_map, new_parent_key, key, len(new_parent.children))
        if block.next_sibling is not None:
            new_block_map = link_siblings(new_block_map, new_parent_key, block.next_sibling)
        else:
            new_block_map = new_block_map.set(
                new_parent_key,
                new_block_map[new_parent_key].merge(next_sibling=None),
            )

    if block.parent is not None:
        former_parent = _require(new_block_map, block.parent)
        new_block_map = new_block_map.set(
            block.parent,
            former_parent.merge(children=[k for k in former_parent.children if k != key]),
        )

    logger.debug(f"Moved {key} under its {side} sibling {new_parent_key}")
    verify_tree(new_block_map, strict)
    return new_block_map


def _move_before(block_map: BlockMap, moved_key: str, anchor_key: str) -> BlockMap:
    """
    Move `moved_key` to just before `anchor_key` in document order.

    `moved_key` must come after `anchor_key`. The blocks between them (the
    anchor's descendants) keep following the anchor.
    """
    is_anchor: Callable[[BlockNode], bool] = lambda b: b.key == anchor_key
    is_moved: Callable[[BlockNode], bool] = lambda b: b.key == moved_key
    from_anchor = block_map.skip_until(is_anchor)
    return block_map.take_until(is_anchor).concat(
        BlockMap([block_map[moved_key], block_map[anchor_key]]),
        from_anchor.slice(1).take_until(is_moved),
        from_anchor.skip_until(is_moved).slice(1),
    )


def _require(block_map: BlockMap, key: str) -> BlockNode:
    block = block_map.get(key)
    invariant(block is not None, f"block {key} should exist in the block map")
    return block


# =========================================================================
# Component
# =========================================================================

class TreeOperations:
    """
    Tree operations bound to a validity-check mode and key generator.

    Args:
        strict: Verify the whole tree around composite operations. None
            reads the BLOCKTREE_DEV_CHECKS setting once, at construction.
        key_generator: Produces a key absent from the given container.
    """

    def __init__(self, strict: bool | None = None, key_generator: KeyGenerator = generate_random_key):
        self.strict = dev_checks_enabled() if strict is None else strict
        self.key_generator = key_generator

    def verify_tree(self, block_map: BlockMap) -> None:
        verify_tree(block_map, self.strict)

    def link_parent_child(self, block_map: BlockMap, parent_key: str, child_key: str, position: int) -> BlockMap:
        return link_parent_child(block_map, parent_key, child_key, position)

    def link_siblings(self, block_map: BlockMap, prev_key: str, next_key: str) -> BlockMap:
        return link_siblings(block_map, prev_key, next_key)

    def replace_child(self, block_map: BlockMap, parent_key: str, old_child_key: str, new_child_key: str) -> BlockMap:
        return replace_child(block_map, parent_key, old_child_key, new_child_key)

    def wrap_in_new_parent(self, block_map: BlockMap, key: str) -> BlockMap:
        return wrap_in_new_parent(block_map, key, strict=self.strict, key_generator=self.key_generator)

    def adopt_by_sibling(self, block_map: BlockMap, key: str, side: SiblingSide) -> BlockMap:
        return adopt_by_sibling(block_map, key, side, strict=self.strict)

    def __repr__(self) -> str:
        return f"TreeOperations(strict={self.strict})"
