"""bloques output renderers.

Renderers convert render-node trees into output formats.

Available Renderers:
- HtmlRenderer: Renders nodes to HTML using StringBuilder pattern
- TextRenderer: Renders nodes to indented plain text

Thread Safety:
All renderers use a StringBuilder local to each render() call.
Safe for concurrent use from multiple threads.

"""

from bloques.renderers.html import HtmlRenderer
from bloques.renderers.protocol import NodeRenderer
from bloques.renderers.text import TextRenderer

__all__ = ["HtmlRenderer", "NodeRenderer", "TextRenderer"]
