"""
BlockNode - Immutable node of a block document tree.

Nodes reference each other by key only. The owning BlockMap resolves keys,
so a node can be shared between many document versions unchanged.
"""

from __future__ import annotations
from typing import Any
from pydantic import BaseModel, ValidationError

from .character import CharacterMetadata
from .invariants import PreconditionError, invariant


class BlockNode(BaseModel):
    """
    A single block in the document tree.

    Attributes:
        key: Unique key within the document version
        text: Text content; empty for container blocks
        type: Block type (e.g. "unstyled", "header-one")
        depth: Indentation depth carried through tree operations
        parent: Key of the parent block, None for top-level blocks
        prev_sibling: Key of the previous sibling, if any
        next_sibling: Key of the next sibling, if any
        children: Ordered child keys
        character_list: Per-character metadata for `text`
    """
    model_config = {"frozen": True}

    key: str
    text: str = ""
    type: str = "unstyled"
    depth: int = 0
    parent: str | None = None
    prev_sibling: str | None = None
    next_sibling: str | None = None
    children: tuple[str, ...] = ()
    character_list: tuple[CharacterMetadata, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def is_container(self) -> bool:
        """Container blocks carry no text and exist only to hold children."""
        return self.text == ""

    def merge(self, **changes: Any) -> BlockNode:
        """
        Return a validated copy with `changes` applied, keeping every other field.

        The key identifies the block inside its map and cannot be changed.

        Usage:
            moved = node.merge(parent="p1", prev_sibling=None)
        """
        unknown = set(changes) - set(type(self).model_fields)
        invariant(not unknown, f"unknown block fields: {sorted(unknown)}")
        invariant("key" not in changes or changes["key"] == self.key, "a block's key cannot be changed")
        try:
            return type(self).model_validate({**dict(self), **changes})
        except ValidationError as e:
            raise PreconditionError(f"invalid block fields for {self.key}: {e}") from e

    def __repr__(self) -> str:
        parts = [f"key={self.key!r}"]
        if self.text:
            parts.append(f"text={self.text[:20]!r}")
        if self.parent is not None:
            parts.append(f"parent={self.parent!r}")
        if self.children:
            parts.append(f"children={list(self.children)!r}")
        return f"BlockNode({', '.join(parts)})"
