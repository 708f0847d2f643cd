"""NodeRenderer protocol: stable interface for output renderers.

Any renderer that implements ``render(nodes) -> str`` conforms to this
protocol. ``HtmlRenderer`` and ``TextRenderer`` are the built-in
implementations.

Example:
    from bloques.renderers.protocol import NodeRenderer

    def publish(renderer: NodeRenderer, state: ContentState) -> str:
        return renderer.render(render_blocks(state))

"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class NodeRenderer(Protocol):
    """Protocol for output renderers.

    Implementations accept the dispatcher output (possibly None) and return
    a rendered string.

    """

    def render(self, nodes: Sequence[Any] | None) -> str:
        """Render dispatcher output to a string.

        Args:
            nodes: Render nodes, one per block, or None.

        Returns:
            Rendered string output ("" for None).

        """
        ...
