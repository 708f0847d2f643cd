"""Typed render nodes produced by bloques.

All render nodes are frozen dataclasses with slots for:
- Type safety: IDE autocomplete, catch errors at dev time
- Immutability: Safe sharing across threads
- Pattern matching: output renderers dispatch with match statements

The dispatcher never inspects leaf content. It only positions nodes, wraps
them in a View, and optionally puts a Spacer in front.

Node Hierarchy:
Node (base, carries key)
├── View           container (column or row)
├── Spacer         separator that closes a list run
├── TextBlock      paragraph / header / code leaf
├── Quote          blockquote leaf
├── ListItem       ordered or unordered list leaf
└── ListIndicator  bullet or numeral in front of an atomic embed

Span is not a node: it is a run of text inside a leaf.

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from bloques.blocks import Entity

Direction = Literal["column", "row"]


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all render nodes.

    ``key`` is distinct within a tree and never reused across render calls.

    """

    key: str


@dataclass(frozen=True, slots=True)
class Span:
    """Run of text sharing one style set and at most one entity."""

    text: str
    styles: frozenset[str] = frozenset()
    entity: Entity | None = None

    @property
    def url(self) -> str | None:
        """Target URL when the span is covered by a LINK entity."""
        if self.entity is not None and self.entity.type.upper() == "LINK":
            url = self.entity.data.get("url") or self.entity.data.get("href")
            return str(url) if url else None
        return None


@dataclass(frozen=True, slots=True)
class View(Node):
    """Container node.

    One View wraps each input block: its children are an optional Spacer
    followed by the content node. Children of a View produced for a raw
    pass-through or a custom handler may be arbitrary objects.

    """

    children: tuple[Any, ...] = ()
    style: Mapping[str, Any] = field(default_factory=dict)
    direction: Direction = "column"


@dataclass(frozen=True, slots=True)
class Spacer(Node):
    """Separator inserted before content that follows a list run."""

    style: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TextBlock(Node):
    """Text leaf for unstyled, paragraph, header and code blocks.

    ``navigate`` is the caller's link callback; it is excluded from equality
    and serialization.

    """

    block_type: str
    spans: tuple[Span, ...] = ()
    style: Mapping[str, Any] = field(default_factory=dict)
    text_props: Mapping[str, Any] = field(default_factory=dict)
    navigate: Callable[[str], Any] | None = field(default=None, compare=False, repr=False)

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)


@dataclass(frozen=True, slots=True)
class Quote(Node):
    """Blockquote leaf."""

    spans: tuple[Span, ...] = ()
    style: Mapping[str, Any] = field(default_factory=dict)
    text_style: Mapping[str, Any] = field(default_factory=dict)
    text_props: Mapping[str, Any] = field(default_factory=dict)
    navigate: Callable[[str], Any] | None = field(default=None, compare=False, repr=False)

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)


@dataclass(frozen=True, slots=True)
class ListItem(Node):
    """List leaf.

    ``number`` is the displayed ordinal (also computed for unordered items,
    where it is informational). ``marker`` is the rendered prefix: the bullet
    for unordered items, number plus separator for ordered ones.

    """

    ordered: bool
    depth: int
    number: int
    marker: str
    margin_left: float
    spans: tuple[Span, ...] = ()
    style: Mapping[str, Any] = field(default_factory=dict)
    marker_style: Mapping[str, Any] = field(default_factory=dict)
    text_props: Mapping[str, Any] = field(default_factory=dict)
    navigate: Callable[[str], Any] | None = field(default=None, compare=False, repr=False)

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)


@dataclass(frozen=True, slots=True)
class ListIndicator(Node):
    """Bullet or numeral placed in front of an atomic embed."""

    ordered: bool
    marker: str
    number: int | None = None
    style: Mapping[str, Any] = field(default_factory=dict)


__all__ = [
    "Direction",
    "ListIndicator",
    "ListItem",
    "Node",
    "Quote",
    "Spacer",
    "Span",
    "TextBlock",
    "View",
]
