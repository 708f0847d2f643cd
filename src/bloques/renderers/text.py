"""Plain-text renderer for terminals, logs and previews.

Outputs markdown-like plain text. No HTML. One line per leaf.

    Spacer         blank line
    TextBlock      text (headers get "#" prefixes, code is kept verbatim)
    Quote          "> " before every line
    ListItem       two spaces per depth, then the marker ("•", "3.")
    row View       children joined by a space (indicator + embed)
    ContentBlock   skipped

Example:
    >>> TextRenderer().render(render_blocks(state))
    '# Title\\n1. first\\n2. second\\n\\nAfter the list\\n'
"""

from collections.abc import Sequence
from typing import Any

from bloques.blocks import BlockType, ContentBlock
from bloques.nodes import ListIndicator, ListItem, Quote, Spacer, Span, TextBlock, View
from bloques.stringbuilder import StringBuilder


class TextRenderer:
    """Render dispatcher output to structured plain text."""

    __slots__ = ("_indent",)

    def __init__(self, *, indent: str = "  ") -> None:
        self._indent = indent

    def render(self, nodes: Sequence[Any] | None) -> str:
        """Render nodes to plain text ("" for None)."""
        if not nodes:
            return ""
        sb = StringBuilder()
        for node in nodes:
            self._render_node(node, sb)
        return sb.build()

    def _render_node(self, node: Any, sb: StringBuilder) -> None:
        match node:
            case View(direction="row"):
                parts = [self._inline(child) for child in node.children]
                sb.append_line(" ".join(part for part in parts if part))
            case View():
                for child in node.children:
                    self._render_node(child, sb)
            case Spacer():
                sb.append_line()
            case TextBlock():
                kind = BlockType.parse(node.block_type)
                prefix = "#" * kind.heading_level + " " if kind and kind.heading_level else ""
                if kind is BlockType.CODE_BLOCK:
                    sb.append_line(node.text)
                else:
                    sb.append_line(prefix + self._spans(node.spans))
            case Quote():
                for line in self._spans(node.spans).split("\n"):
                    sb.append_line(f"> {line}")
            case ListItem():
                sb.append_line(f"{self._indent * node.depth}{node.marker} {self._spans(node.spans)}")
            case ContentBlock() | None:
                pass
            case _:
                sb.append_line(self._inline(node))

    def _inline(self, node: Any) -> str:
        """Single-line text for a row child."""
        match node:
            case ListIndicator():
                return node.marker
            case TextBlock() | Quote() | ListItem():
                return self._spans(node.spans)
            case View():
                return " ".join(filter(None, (self._inline(child) for child in node.children)))
            case Spacer() | ContentBlock() | None:
                return ""
            case _:
                return str(node)

    @staticmethod
    def _spans(spans: tuple[Span, ...]) -> str:
        parts: list[str] = []
        for span in spans:
            parts.append(span.text)
            url = span.url
            if url:
                parts.append(f" ({url})")
        return "".join(parts)
