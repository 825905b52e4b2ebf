"""
Tree invariants for block maps.

A block map is a valid tree when:
1. Every block agrees with its neighbours (parent <-> child, prev <-> next)
2. All blocks hang off a single first top-level block (connected)
3. Map iteration order is the depth-first order of the tree (ordered)

The predicates here never raise; `invariant()` turns a failed condition into
a PreconditionError for callers that treat it as a contract violation.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .block_map import BlockMap
    from .node import BlockNode


logger = logging.getLogger(__name__)


class PreconditionError(Exception):
    """A tree operation was called in a state its contract does not allow."""
    pass


def invariant(condition: bool, message: str) -> None:
    if not condition:
        raise PreconditionError(message)


def is_valid_block(block: BlockNode, block_map: BlockMap) -> bool:
    """Check that a block's links are mirrored by the blocks it references."""
    key = block.key

    if block.parent is not None:
        parent = block_map.get(block.parent)
        if parent is None or key not in parent.children:
            logger.warning(f"Tree is missing parent -> child pointer on {key}")
            return False

    if len(set(block.children)) != len(block.children):
        logger.warning(f"Tree has duplicate children on {key}")
        return False
    for index, child_key in enumerate(block.children):
        child = block_map.get(child_key)
        if child is None or child.parent != key:
            logger.warning(f"Tree is missing child -> parent pointer on {key}")
            return False
        expected_prev = block.children[index - 1] if index > 0 else None
        expected_next = block.children[index + 1] if index + 1 < len(block.children) else None
        if child.prev_sibling != expected_prev or child.next_sibling != expected_next:
            logger.warning(f"Tree children of {key} disagree with their sibling links")
            return False

    if block.prev_sibling is not None:
        prev_sibling = block_map.get(block.prev_sibling)
        if prev_sibling is None or prev_sibling.next_sibling != key:
            logger.warning(f"Tree is missing nextSibling pointer on {key}'s prevSibling")
            return False

    if block.next_sibling is not None:
        next_sibling = block_map.get(block.next_sibling)
        if next_sibling is None or next_sibling.prev_sibling != key:
            logger.warning(f"Tree is missing prevSibling pointer on {key}'s nextSibling")
            return False

    if block.prev_sibling is not None and block.prev_sibling == block.next_sibling:
        logger.warning(f"Tree has a two-node cycle at {key}")
        return False

    if block.text != "" and block.children:
        logger.warning(f"Leaf block {key} has both text and children")
        return False

    return True


def find_broken_links(block_map: BlockMap) -> list[str]:
    """
    List every reference that is dangling or not mirrored by its target.

    Unlike is_valid_tree this ignores connectivity and document order, so it
    also applies to the intermediate results of the relinking primitives.
    """
    problems: list[str] = []
    for key, block in block_map.items():
        for field, target_key in (("parent", block.parent), ("prev_sibling", block.prev_sibling), ("next_sibling", block.next_sibling)):
            if target_key is not None and target_key not in block_map:
                problems.append(f"{key}.{field} -> missing {target_key}")
        if block.parent is not None and block.parent in block_map and block_map[block.parent].children.count(key) != 1:
            problems.append(f"{key}.parent -> {block.parent} does not list it exactly once")
        if block.next_sibling in block_map and block_map[block.next_sibling].prev_sibling != key:
            problems.append(f"{key}.next_sibling -> {block.next_sibling} does not point back")
        if block.prev_sibling in block_map and block_map[block.prev_sibling].next_sibling != key:
            problems.append(f"{key}.prev_sibling -> {block.prev_sibling} does not point back")
        for child_key in block.children:
            child = block_map.get(child_key)
            if child is None:
                problems.append(f"{key}.children -> missing {child_key}")
            elif child.parent != key:
                problems.append(f"{key}.children -> {child_key} has parent {child.parent}")
    return problems


def _walk_tree(block_map: BlockMap) -> list[str] | None:
    """
    Depth-first walk from the single first top-level block.

    Returns the visited keys in order, or None if the structure cannot be
    walked (no unique start, missing first child, cycles, dangling keys).
    """
    first_blocks = [b for b in block_map.values() if b.parent is None and b.prev_sibling is None]
    if len(first_blocks) != 1:
        return None

    visited: list[str] = []
    seen: set[str] = set()
    pending: list[str] = []
    current: str | None = first_blocks[0].key
    while current is not None:
        block = block_map.get(current)
        if block is None or current in seen:
            return None
        seen.add(current)
        visited.append(current)

        if block.children:
            if block.next_sibling is not None:
                pending.append(block.next_sibling)
            first_child = next(
                (k for k in block.children if block_map.get(k) is not None and block_map[k].prev_sibling is None),
                None,
            )
            if first_child is None:
                return None
            current = first_child
        elif block.next_sibling is not None:
            current = block.next_sibling
        else:
            current = pending.pop() if pending else None

    return visited


def is_connected_tree(block_map: BlockMap) -> bool:
    """Check that every block is reachable exactly once from the first block."""
    visited = _walk_tree(block_map)
    return visited is not None and len(visited) == len(block_map)


def is_ordered_tree(block_map: BlockMap) -> bool:
    """Check that map iteration order matches depth-first tree order."""
    visited = _walk_tree(block_map)
    return visited is not None and visited == list(block_map.keys())


def is_valid_tree(block_map: BlockMap) -> bool:
    if len(block_map) == 0:
        return True
    if not all(is_valid_block(block, block_map) for block in block_map.values()):
        return False
    # ordered implies connected: the walk covered every key exactly once
    return is_ordered_tree(block_map)
