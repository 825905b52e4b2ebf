"""
TreeBuilder - Build valid block maps with nested context managers.

Usage:
    with TreeBuilder() as tree:
        tree("Title", key="title", type="header-one")
        with tree(key="list") as items:
            items("Buy groceries", key="a")
            items("Call the bank", key="b")

    block_map = tree.build()
    # document order: title, list, a, b
"""

from __future__ import annotations
from typing import Iterator, Self

from .block_map import BlockMap
from .invariants import invariant
from .keys import generate_random_key
from .node import BlockNode


class BlockBuilder:
    """A pending block and its pending children."""

    def __init__(
        self,
        text: str = "",
        *,
        key: str | None = None,
        type: str = "unstyled",
        depth: int | None = None,
        parent: BlockBuilder | None = None,
    ):
        self.text = text
        self.key = key
        self.type = type
        self.parent = parent
        self.level = parent.level + 1 if parent is not None else -1
        self.depth = self.level if depth is None else depth
        self.children: list[BlockBuilder] = []

    def __call__(
        self,
        text: str = "",
        *,
        key: str | None = None,
        type: str = "unstyled",
        depth: int | None = None,
    ) -> BlockBuilder:
        """
        Create and append a child block.

        Usage:
            with parent(key="section") as section:
                section("Nested")
        """
        child = BlockBuilder(text, key=key, type=type, depth=depth, parent=self)
        self.children.append(child)
        return child

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        pass

    def iter_depth_first(self, children_only: bool = False) -> Iterator[BlockBuilder]:
        if not children_only:
            yield self
        for child in self.children:
            yield from child.iter_depth_first()


class TreeBuilder(BlockBuilder):
    """
    Root of a block tree under construction.

    The root itself is not a block: its children become the top-level
    blocks of the document.
    """

    def build(self) -> BlockMap:
        """Flatten the pending tree into a BlockMap in depth-first order."""
        pending = list(self.iter_depth_first(children_only=True))
        used = {b.key for b in pending if b.key is not None}
        seen: set[str] = set()
        keys: dict[int, str] = {}
        for builder in pending:
            builder_key = builder.key
            if builder_key is None:
                builder_key = generate_random_key(used)
                used.add(builder_key)
            invariant(builder_key not in seen, f"duplicate block key {builder_key!r}")
            seen.add(builder_key)
            keys[id(builder)] = builder_key

        blocks: list[BlockNode] = []
        for builder in pending:
            siblings = [keys[id(s)] for s in builder.parent.children]
            index = siblings.index(keys[id(builder)])
            blocks.append(BlockNode(
                key=siblings[index],
                text=builder.text,
                type=builder.type,
                depth=builder.depth,
                parent=None if builder.parent is self else keys[id(builder.parent)],
                prev_sibling=siblings[index - 1] if index > 0 else None,
                next_sibling=siblings[index + 1] if index + 1 < len(siblings) else None,
                children=tuple(keys[id(child)] for child in builder.children),
            ))
        return BlockMap(blocks)
