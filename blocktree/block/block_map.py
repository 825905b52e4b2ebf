"""
BlockMap - Ordered, immutable mapping of block keys to blocks.

Iteration order is document order. Every "mutating" method returns a new
BlockMap and leaves the receiver untouched; blocks that an operation does
not replace are shared between the old and new map.

Usage:
    block_map = BlockMap([BlockNode(key="a"), BlockNode(key="b")])
    block_map = block_map.set("a", block_map["a"].merge(text="hello"))

    head = block_map.take_until(lambda b: b.key == "b")   # ["a"]
    tail = block_map.skip_until(lambda b: b.key == "b")   # ["b"]
    assert head.concat(tail) == block_map
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Callable, Iterable, Iterator

from .invariants import invariant
from .node import BlockNode


BlockPredicate = Callable[[BlockNode], bool]


class BlockMap(Mapping[str, BlockNode]):
    __slots__ = ("_blocks",)

    def __init__(self, blocks: Iterable[BlockNode] | None = None):
        self._blocks: dict[str, BlockNode] = {}
        for block in blocks or ():
            self._blocks[block.key] = block

    @classmethod
    def from_items(cls, items: Iterable[tuple[str, BlockNode]]) -> BlockMap:
        blocks = dict(items)
        for key, block in blocks.items():
            invariant(block.key == key, f"block {block.key!r} cannot be stored under key {key!r}")
        return cls._wrap(blocks)

    @classmethod
    def _wrap(cls, blocks: dict[str, BlockNode]) -> BlockMap:
        # Takes ownership of `blocks`; callers must not touch it afterwards.
        block_map = cls.__new__(cls)
        block_map._blocks = blocks
        return block_map

    # -------------------------------------------------------------------------
    # Mapping protocol
    # -------------------------------------------------------------------------

    def __getitem__(self, key: str) -> BlockNode:
        return self._blocks[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def __contains__(self, key: object) -> bool:
        return key in self._blocks

    def __eq__(self, other: object) -> bool:
        """Order-sensitive: two maps are equal only with the same document order."""
        if not isinstance(other, BlockMap):
            return NotImplemented
        return list(self._blocks.items()) == list(other._blocks.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"BlockMap({list(self._blocks)!r})"

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    def merge(self, blocks: Mapping[str, BlockNode] | Iterable[BlockNode]) -> BlockMap:
        """
        Overlay blocks onto this map.

        Keys already present keep their position; new keys are appended.
        """
        merged = dict(self._blocks)
        if isinstance(blocks, Mapping):
            for key, block in blocks.items():
                invariant(block.key == key, f"block {block.key!r} cannot be stored under key {key!r}")
            merged.update(blocks)
        else:
            merged.update((block.key, block) for block in blocks)
        return BlockMap._wrap(merged)

    def set(self, key: str, block: BlockNode) -> BlockMap:
        return self.merge({key: block})

    # -------------------------------------------------------------------------
    # Positional operations
    # -------------------------------------------------------------------------

    def take_until(self, predicate: BlockPredicate) -> BlockMap:
        """Blocks before the first one matching `predicate`."""
        taken: dict[str, BlockNode] = {}
        for key, block in self._blocks.items():
            if predicate(block):
                break
            taken[key] = block
        return BlockMap._wrap(taken)

    def skip_until(self, predicate: BlockPredicate) -> BlockMap:
        """Blocks from the first one matching `predicate` onwards."""
        items = list(self._blocks.items())
        for index, (_, block) in enumerate(items):
            if predicate(block):
                return BlockMap._wrap(dict(items[index:]))
        return BlockMap()

    def slice(self, start: int, end: int | None = None) -> BlockMap:
        return BlockMap._wrap(dict(list(self._blocks.items())[start:end]))

    def concat(self, *others: BlockMap) -> BlockMap:
        combined = dict(self._blocks)
        for other in others:
            combined.update(other._blocks)
        return BlockMap._wrap(combined)

    def index_of(self, key: str) -> int:
        """Position of `key` in document order, or -1 if absent."""
        for index, existing in enumerate(self._blocks):
            if existing == key:
                return index
        return -1

    # -------------------------------------------------------------------------
    # Tree helpers
    # -------------------------------------------------------------------------

    def children_of(self, key: str) -> list[BlockNode]:
        block = self._blocks.get(key)
        if block is None:
            return []
        return [self._blocks[child_key] for child_key in block.children if child_key in self._blocks]

    def top_level(self) -> list[BlockNode]:
        return [block for block in self._blocks.values() if block.parent is None]
