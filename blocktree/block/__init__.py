"""
Block tree - immutable block documents and structural tree operations.

This module provides:
- BlockNode: Immutable block record linked to its neighbours by key
- BlockMap: Ordered, immutable key -> block mapping in document order
- CharacterMetadata: Pooled per-character style/entity record
- TreeBuilder: Context-manager DSL for building valid block maps
- TreeOperations: Tree surgery bound to a validity-check mode
- link_parent_child, link_siblings, replace_child: relinking primitives
- wrap_in_new_parent, adopt_by_sibling: tree-preserving composite operations
- is_valid_tree: Whole-tree consistency check
"""

from .character import CharacterMetadata
from .invariants import (
    PreconditionError,
    find_broken_links,
    invariant,
    is_connected_tree,
    is_ordered_tree,
    is_valid_block,
    is_valid_tree,
)
from .node import BlockNode
from .block_map import BlockMap
from .keys import generate_random_key
from .builder import TreeBuilder
from .tree_ops import (
    TreeOperations,
    adopt_by_sibling,
    link_parent_child,
    link_siblings,
    replace_child,
    verify_tree,
    wrap_in_new_parent,
)

__all__ = [
    "BlockMap",
    "BlockNode",
    "CharacterMetadata",
    "PreconditionError",
    "TreeBuilder",
    "TreeOperations",
    "adopt_by_sibling",
    "find_broken_links",
    "generate_random_key",
    "invariant",
    "is_connected_tree",
    "is_ordered_tree",
    "is_valid_block",
    "is_valid_tree",
    "link_parent_child",
    "link_siblings",
    "replace_child",
    "verify_tree",
    "wrap_in_new_parent",
]
