"""
blocktree - structural tree surgery for block-based rich-text documents.
"""

from .block import (
    BlockMap,
    BlockNode,
    CharacterMetadata,
    PreconditionError,
    TreeBuilder,
    TreeOperations,
    adopt_by_sibling,
    link_parent_child,
    link_siblings,
    replace_child,
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
    "link_parent_child",
    "link_siblings",
    "replace_child",
    "wrap_in_new_parent",
]
