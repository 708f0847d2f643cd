"""Typed input model for bloques.

A content state is a flat, ordered sequence of content blocks plus an
entity map. Nesting is not encoded structurally: list items carry a
``depth`` and the dispatcher rebuilds grouping and numbering from it.

All input types are frozen dataclasses with slots, so a content state can be
shared across threads and rendered any number of times.

Block types:
    unstyled, paragraph, header-one .. header-six, code-block  -> text leaf
    blockquote                                                 -> quote leaf
    atomic                                                     -> atomic handler
    unordered-list-item, ordered-list-item                     -> list leaf
    anything else                                              -> custom handler

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class BlockType(StrEnum):
    """Closed set of block types the dispatcher knows how to render.

    Unknown type strings are not coerced into this enum; ``parse()`` returns
    None for them and the dispatcher routes the block to the custom handler.
    """

    UNSTYLED = "unstyled"
    PARAGRAPH = "paragraph"
    HEADER_ONE = "header-one"
    HEADER_TWO = "header-two"
    HEADER_THREE = "header-three"
    HEADER_FOUR = "header-four"
    HEADER_FIVE = "header-five"
    HEADER_SIX = "header-six"
    CODE_BLOCK = "code-block"
    ATOMIC = "atomic"
    BLOCKQUOTE = "blockquote"
    UNORDERED_LIST_ITEM = "unordered-list-item"
    ORDERED_LIST_ITEM = "ordered-list-item"

    @classmethod
    def parse(cls, value: str | BlockType | None) -> BlockType | None:
        """Return the matching member, or None for unrecognized types."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def is_list(self) -> bool:
        return self in LIST_BLOCK_TYPES

    @property
    def heading_level(self) -> int | None:
        """Heading level 1-6 for header types, None otherwise."""
        return _HEADING_LEVELS.get(self)


TEXT_BLOCK_TYPES: frozenset[BlockType] = frozenset(
    {
        BlockType.UNSTYLED,
        BlockType.PARAGRAPH,
        BlockType.HEADER_ONE,
        BlockType.HEADER_TWO,
        BlockType.HEADER_THREE,
        BlockType.HEADER_FOUR,
        BlockType.HEADER_FIVE,
        BlockType.HEADER_SIX,
        BlockType.CODE_BLOCK,
    }
)

LIST_BLOCK_TYPES: frozenset[BlockType] = frozenset(
    {BlockType.UNORDERED_LIST_ITEM, BlockType.ORDERED_LIST_ITEM}
)

_HEADING_LEVELS: dict[BlockType, int] = {
    BlockType.HEADER_ONE: 1,
    BlockType.HEADER_TWO: 2,
    BlockType.HEADER_THREE: 3,
    BlockType.HEADER_FOUR: 4,
    BlockType.HEADER_FIVE: 5,
    BlockType.HEADER_SIX: 6,
}


@dataclass(frozen=True, slots=True)
class StyleRange:
    """Inline style applied to ``text[offset:offset + length]``.

    ``style`` is a name such as BOLD, ITALIC, UNDERLINE, STRIKETHROUGH, CODE
    or any application-defined style.
    """

    offset: int
    length: int
    style: str


@dataclass(frozen=True, slots=True)
class EntityRange:
    """Entity reference attached to ``text[offset:offset + length]``."""

    offset: int
    length: int
    key: int | str


@dataclass(frozen=True, slots=True)
class Entity:
    """Entity descriptor resolved through the entity map.

    Opaque to the dispatcher. The default leaf renderer understands LINK
    (``data["url"]``) and output renderers understand IMAGE (``data["src"]``).
    """

    type: str
    mutability: str = "MUTABLE"
    data: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ContentBlock:
    """One unit of rich text.

    ``type`` keeps the original string so that custom block types survive
    untouched; use ``kind`` for the classified value.
    """

    key: str
    type: str
    text: str = ""
    depth: int = 0
    data: Mapping[str, Any] = field(default_factory=dict)
    inline_style_ranges: tuple[StyleRange, ...] = ()
    entity_ranges: tuple[EntityRange, ...] = ()

    @property
    def kind(self) -> BlockType | None:
        """Classified block type, or None for custom types."""
        return BlockType.parse(self.type)

    @property
    def nested(self) -> bool:
        """True for items below the outermost list level."""
        return self.depth >= 1


@dataclass(frozen=True, slots=True)
class ContentState:
    """Blocks plus the entity map they reference.

    ``blocks`` is None when the source had nothing to render; that is a
    valid state, not an error.
    """

    blocks: tuple[ContentBlock, ...] | None
    entity_map: Mapping[str, Entity] = field(default_factory=dict)

    def entity(self, key: int | str) -> Entity | None:
        """Look up an entity by range key (int and str keys resolve alike)."""
        return lookup_entity(self.entity_map, key)


def lookup_entity(entity_map: Mapping[str, Entity] | None, key: int | str) -> Entity | None:
    """Resolve an entity-range key against an entity map."""
    if not entity_map:
        return None
    return entity_map.get(str(key))


__all__ = [
    "LIST_BLOCK_TYPES",
    "TEXT_BLOCK_TYPES",
    "BlockType",
    "ContentBlock",
    "ContentState",
    "Entity",
    "EntityRange",
    "StyleRange",
    "lookup_entity",
]
