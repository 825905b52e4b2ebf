"""
CharacterMetadata - Per-character style and entity information.

Most documents use only a handful of style/entity combinations, so instances
are pooled: `CharacterMetadata.create(...)` returns the same object for
equal configurations and the transform methods never build duplicates.

Usage:
    bold = CharacterMetadata.create(style=("BOLD",))
    bold_link = bold.apply_entity("link-1")
    assert bold_link.remove_style("BOLD").entity == "link-1"
"""

from __future__ import annotations
from typing import ClassVar
from pydantic import BaseModel


class CharacterMetadata(BaseModel):
    """
    Immutable style/entity record for a single character.

    Attributes:
        style: Ordered inline style names, without duplicates
        entity: Entity key the character belongs to, if any
    """
    model_config = {"frozen": True}

    style: tuple[str, ...] = ()
    entity: str | None = None

    EMPTY: ClassVar[CharacterMetadata]

    def has_style(self, style: str) -> bool:
        return style in self.style

    def apply_style(self, style: str) -> CharacterMetadata:
        if self.has_style(style):
            return self
        return CharacterMetadata.create(style=self.style + (style,), entity=self.entity)

    def remove_style(self, style: str) -> CharacterMetadata:
        if not self.has_style(style):
            return self
        return CharacterMetadata.create(
            style=tuple(s for s in self.style if s != style),
            entity=self.entity,
        )

    def apply_entity(self, entity_key: str | None) -> CharacterMetadata:
        return CharacterMetadata.create(style=self.style, entity=entity_key)

    @classmethod
    def create(cls, style: tuple[str, ...] | list[str] = (), entity: str | None = None) -> CharacterMetadata:
        """
        Get the pooled instance for a style/entity configuration.

        Use this instead of the constructor so equal configurations share
        one object.
        """
        style = tuple(dict.fromkeys(style))
        config = (style, entity)
        existing = _pool.get(config)
        if existing is not None:
            return existing
        character = cls(style=style, entity=entity)
        _pool[config] = character
        return character


CharacterMetadata.EMPTY = CharacterMetadata()

# Append-only; values are immutable so sharing them is safe.
_pool: dict[tuple[tuple[str, ...], str | None], CharacterMetadata] = {
    ((), None): CharacterMetadata.EMPTY,
}
