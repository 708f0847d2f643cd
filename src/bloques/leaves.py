"""Leaf renderers: one block in, one content node out.

The dispatcher decides *where* a block goes (and whether a Spacer precedes
it); a LeafRenderer decides *what* the block looks like. The default
implementation produces TextBlock, Quote and ListItem nodes with spans from
split_spans() and styles from ``custom_styles``.

Replace it through ``RenderConfig.leaf_renderer`` to build nodes for another
toolkit. Any object with the three methods below works.

Thread Safety:
    DefaultLeafRenderer is stateless. Safe to share.

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from bloques.blocks import ContentBlock, Entity
from bloques.inline import split_spans
from bloques.nodes import ListItem, Quote, TextBlock
from bloques.utils.keys import generate_key
from bloques.utils.text import lookup_style


@dataclass(frozen=True, slots=True)
class LeafProps:
    """Per-block props handed to a leaf renderer.

    ``text_props`` already contains ``block_key``.
    """

    entity_map: Mapping[str, Entity] = field(default_factory=dict)
    custom_styles: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    navigate: Callable[[str], Any] | None = None
    text_props: Mapping[str, Any] = field(default_factory=dict)

    def style(self, name: str) -> Mapping[str, Any]:
        return lookup_style(self.custom_styles, name)


@dataclass(frozen=True, slots=True)
class ListMarker:
    """Numbering decision for one list item.

    Attributes:
        ordered: Ordered (numeral) or unordered (bullet)
        number: Position within its level (1-based)
        text: Marker text, e.g. "3." or "•"
        depth_margin: Default left margin unit
    """

    ordered: bool
    number: int
    text: str
    depth_margin: float = 8


@runtime_checkable
class LeafRenderer(Protocol):
    """Protocol for leaf renderers."""

    def render_text(self, block: ContentBlock, props: LeafProps) -> Any:
        """Render unstyled, paragraph, header and code blocks."""
        ...

    def render_quote(self, block: ContentBlock, props: LeafProps) -> Any:
        """Render a blockquote block."""
        ...

    def render_list_item(self, block: ContentBlock, props: LeafProps, marker: ListMarker) -> Any:
        """Render an ordered or unordered list item."""
        ...


def list_margin(depth: int, unit: float, marker_style: Mapping[str, Any] | None = None) -> float:
    """Left margin for a list item at ``depth``.

    The marker style's own ``margin_left`` (or ``marginLeft``) replaces the
    default unit when set.

    Examples:
        >>> list_margin(0, 8)
        8
        >>> list_margin(2, 8, {"margin_left": 10})
        30
    """
    override = None
    if marker_style:
        override = marker_style.get("margin_left") or marker_style.get("marginLeft")
    return (depth + 1) * (override or unit)


class DefaultLeafRenderer:
    """Build bloques render nodes for text, quote and list leaves."""

    __slots__ = ()

    def render_text(self, block: ContentBlock, props: LeafProps) -> TextBlock:
        return TextBlock(
            key=generate_key(block.key),
            block_type=block.type,
            spans=self._spans(block, props),
            style=props.style(block.type),
            text_props=props.text_props,
            navigate=props.navigate,
        )

    def render_quote(self, block: ContentBlock, props: LeafProps) -> Quote:
        return Quote(
            key=generate_key(block.key),
            spans=self._spans(block, props),
            style=props.style("blockquote_container"),
            text_style=props.style("blockquote_text"),
            text_props=props.text_props,
            navigate=props.navigate,
        )

    def render_list_item(self, block: ContentBlock, props: LeafProps, marker: ListMarker) -> ListItem:
        prefix = "ordered" if marker.ordered else "unordered"
        marker_style = props.style(
            "ordered_list_item_number" if marker.ordered else "unordered_list_item_bullet"
        )
        return ListItem(
            key=generate_key(block.key),
            ordered=marker.ordered,
            depth=block.depth,
            number=marker.number,
            marker=marker.text,
            margin_left=list_margin(block.depth, marker.depth_margin, marker_style),
            spans=self._spans(block, props),
            style=props.style(f"{prefix}_list_item_container"),
            marker_style=marker_style,
            text_props=props.text_props,
            navigate=props.navigate,
        )

    @staticmethod
    def _spans(block: ContentBlock, props: LeafProps):
        return split_spans(block.text, block.inline_style_ranges, block.entity_ranges, props.entity_map)


__all__ = ["DefaultLeafRenderer", "LeafProps", "LeafRenderer", "ListMarker", "list_margin"]
