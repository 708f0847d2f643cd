"""HTML renderer using StringBuilder pattern.

Renders the dispatcher output (a tuple of render nodes) to HTML.

Mapping:
    View           <div> (row views get display: flex; flex-direction: row)
    Spacer         <div class="bloques-spacer"></div>
    TextBlock      <p>, <h1>..<h6>, or <pre><code> for code blocks
    Quote          <blockquote><p>...</p></blockquote>
    ListItem       <div class="bloques-list-item"> with a marker <span>
    ListIndicator  <span class="bloques-marker">
    ContentBlock   nothing (atomic block passed through without a handler)
    anything else  __html__() when available, otherwise escaped str()

Thread Safety:
All per-render state lives in a StringBuilder local to each render() call.
Multiple threads can safely share a single HtmlRenderer instance.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from bloques.blocks import BlockType, ContentBlock
from bloques.errors import RenderError
from bloques.nodes import ListIndicator, ListItem, Quote, Spacer, Span, TextBlock, View
from bloques.stringbuilder import StringBuilder
from bloques.utils.logger import get_logger
from bloques.utils.text import css_declarations, escape_html

logger = get_logger(__name__)

# Inline style name -> tag, outermost first
_STYLE_TAGS: dict[str, str] = {
    "BOLD": "strong",
    "ITALIC": "em",
    "UNDERLINE": "u",
    "STRIKETHROUGH": "del",
    "CODE": "code",
}


def _attrs(*, css_class: str | None = None, style: Mapping[str, Any] | None = None, **extra: Any) -> str:
    """Build an attribute string; empty values are omitted."""
    parts: list[str] = []
    if css_class:
        parts.append(f' class="{escape_html(css_class)}"')
    declarations = css_declarations(style)
    if declarations:
        parts.append(f' style="{escape_html(declarations)}"')
    for name, value in extra.items():
        if value is None or value == "":
            continue
        parts.append(f' {name.replace("_", "-")}="{escape_html(str(value))}"')
    return "".join(parts)


class HtmlRenderer:
    """Render dispatcher output to HTML.

    Usage:
        >>> nodes = render_blocks(state)
        >>> html = HtmlRenderer().render(nodes)

    Thread Safety:
        Stateless apart from constructor options.
    """

    __slots__ = ("_class_prefix", "_strict")

    def __init__(self, *, class_prefix: str = "bloques", strict: bool = False) -> None:
        """Initialize renderer.

        Args:
            class_prefix: Prefix for generated CSS class names
            strict: Raise RenderError for objects that are neither render
                nodes nor provide __html__(), instead of escaping str()
        """
        self._class_prefix = class_prefix
        self._strict = strict

    def render(self, nodes: Sequence[Any] | None) -> str:
        """Render nodes to an HTML string ("" for None)."""
        if not nodes:
            return ""
        sb = StringBuilder()
        for node in nodes:
            self._render_node(node, sb)
        return sb.build()

    # =========================================================================
    # Block rendering
    # =========================================================================

    def _render_node(self, node: Any, sb: StringBuilder) -> None:
        match node:
            case View():
                self._render_view(node, sb)
            case Spacer():
                sb.append(f"<div{_attrs(css_class=self._cls('spacer'), style=node.style)}></div>\n")
            case TextBlock():
                self._render_text_block(node, sb)
            case Quote():
                sb.append(f"<blockquote{_attrs(style=node.style)}>")
                sb.append(f"<p{_attrs(style=node.text_style)}>")
                self._render_spans(node.spans, sb)
                sb.append("</p></blockquote>\n")
            case ListItem():
                self._render_list_item(node, sb)
            case ListIndicator():
                sb.append(f"<span{_attrs(css_class=self._cls('marker'), style=node.style)}>")
                sb.append(escape_html(node.marker))
                sb.append("</span>")
            case ContentBlock():
                logger.debug("Skipping unrendered %r block %r", node.type, node.key)
            case None:
                pass
            case _ if hasattr(node, "__html__"):
                sb.append(node.__html__())
            case _:
                if self._strict:
                    msg = f"Cannot render {type(node).__name__} as HTML"
                    raise RenderError(msg)
                sb.append(escape_html(str(node)))

    def _render_view(self, view: View, sb: StringBuilder) -> None:
        style: Mapping[str, Any] = view.style
        if view.direction == "row":
            style = {"display": "flex", "flex_direction": "row", **view.style}
        sb.append(f"<div{_attrs(style=style)}>")
        if view.children:
            if view.direction == "column":
                sb.append("\n")
            for child in view.children:
                self._render_node(child, sb)
        sb.append("</div>\n")

    def _render_text_block(self, node: TextBlock, sb: StringBuilder) -> None:
        kind = BlockType.parse(node.block_type)
        block_key = node.text_props.get("block_key")
        attrs = _attrs(style=node.style, data_block_key=block_key)

        if kind is BlockType.CODE_BLOCK:
            sb.append(f"<pre{attrs}><code>")
            sb.append(escape_html(node.text))
            sb.append("</code></pre>\n")
            return

        level = kind.heading_level if kind is not None else None
        tag = f"h{level}" if level else "p"
        sb.append(f"<{tag}{attrs}>")
        self._render_spans(node.spans, sb)
        sb.append(f"</{tag}>\n")

    def _render_list_item(self, item: ListItem, sb: StringBuilder) -> None:
        kind = "ordered" if item.ordered else "unordered"
        css_class = f"{self._cls('list-item')} {self._cls(kind)}"
        marker_style = {**item.marker_style, "margin_left": item.margin_left}
        marker_style.pop("marginLeft", None)

        sb.append(f"<div{_attrs(css_class=css_class, style=item.style, data_depth=item.depth)}>")
        sb.append(f"<span{_attrs(css_class=self._cls('marker'), style=marker_style)}>")
        sb.append(escape_html(item.marker))
        sb.append("</span> ")
        self._render_spans(item.spans, sb)
        sb.append("</div>\n")

    # =========================================================================
    # Inline rendering
    # =========================================================================

    def _render_spans(self, spans: tuple[Span, ...], sb: StringBuilder) -> None:
        for span in spans:
            self._render_span(span, sb)

    def _render_span(self, span: Span, sb: StringBuilder) -> None:
        entity = span.entity
        if entity is not None and entity.type.upper() == "IMAGE":
            src = entity.data.get("src") or entity.data.get("url") or ""
            sb.append(f'<img src="{escape_html(str(src))}" alt="{escape_html(span.text.strip())}" />')
            return

        url = span.url
        if url:
            sb.append(f'<a href="{escape_html(url)}">')

        known = [name for name in _STYLE_TAGS if name in span.styles]
        custom = sorted(span.styles.difference(_STYLE_TAGS))
        for name in custom:
            sb.append(f'<span class="style-{escape_html(name.lower())}">')
        for name in known:
            sb.append(f"<{_STYLE_TAGS[name]}>")

        sb.append(escape_html(span.text).replace("\n", "<br />\n"))

        for name in reversed(known):
            sb.append(f"</{_STYLE_TAGS[name]}>")
        for _ in custom:
            sb.append("</span>")

        if url:
            sb.append("</a>")

    def _cls(self, name: str) -> str:
        return f"{self._class_prefix}-{name}"
