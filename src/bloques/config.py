"""ContextVar-based render configuration for bloques.

Provides thread-local configuration using Python's ContextVars (PEP 567).
An explicit config passed to ``render_blocks``/``BlockRenderer`` always
wins; the ambient config is used when none is given.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # Explicit
    nodes = render_blocks(state, RenderConfig(ordered_list_separator=")"))

    # Ambient, for a whole block of code
    with render_config_context(RenderConfig(depth_margin=12)):
        nodes = render_blocks(state)

    # From a host framework's option dict (camelCase accepted)
    config = RenderConfig.from_dict({"orderedListSeparator": ")", "unknown": 1})

"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from bloques.errors import ConfigurationError
from bloques.utils.text import lookup_style, snake_case

if TYPE_CHECKING:
    from bloques.handlers.protocol import AtomicHandler, CustomBlockHandler
    from bloques.leaves import LeafRenderer


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable render configuration.

    Attributes:
        custom_styles: Style overrides keyed by block type (e.g. "header-one")
            or by element name (view_after_list, blockquote_container,
            blockquote_text, ordered_list_item_container,
            ordered_list_item_number, unordered_list_item_container,
            unordered_list_item_bullet; the camelCase spellings such as
            viewAfterList are accepted too)
        navigate: Callback forwarded to leaves for link interaction
        ordered_list_separator: Text after an ordered item's number
        unordered_list_bullet: Marker text for unordered items
        depth_margin: Left margin unit, multiplied by ``depth + 1``
        atomic_handler: Renders atomic blocks; absent means pass-through
        custom_block_handler: Renders unrecognized block types
        text_props: Pass-through props merged with ``{"block_key": key}``
        leaf_renderer: Override for the default leaf renderer
        strict_atomic: Raise ConfigurationError for atomic blocks without a handler
        strict_handlers: Raise HandlerError instead of degrading failed blocks

    """

    custom_styles: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    navigate: Callable[[str], Any] | None = None
    ordered_list_separator: str = "."
    unordered_list_bullet: str = "•"
    depth_margin: float = 8
    atomic_handler: AtomicHandler | None = None
    custom_block_handler: CustomBlockHandler | None = None
    text_props: Mapping[str, Any] = field(default_factory=dict)
    leaf_renderer: LeafRenderer | None = None
    strict_atomic: bool = False
    strict_handlers: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.ordered_list_separator, str):
            msg = f"ordered_list_separator must be a string, got {type(self.ordered_list_separator).__name__}"
            raise ConfigurationError(msg)
        if not isinstance(self.unordered_list_bullet, str):
            msg = f"unordered_list_bullet must be a string, got {type(self.unordered_list_bullet).__name__}"
            raise ConfigurationError(msg)
        if isinstance(self.depth_margin, bool) or not isinstance(self.depth_margin, (int, float)):
            msg = f"depth_margin must be a number, got {type(self.depth_margin).__name__}"
            raise ConfigurationError(msg)
        if self.depth_margin < 0:
            msg = f"depth_margin must not be negative, got {self.depth_margin}"
            raise ConfigurationError(msg)
        for name in ("navigate", "atomic_handler", "custom_block_handler"):
            value = getattr(self, name)
            if value is not None and not (callable(value) or hasattr(value, "render")):
                msg = f"{name} must be callable or provide render(), got {type(value).__name__}"
                raise ConfigurationError(msg)

    def style(self, name: str) -> Mapping[str, Any]:
        """Style override for ``name`` (snake_case or camelCase key); empty mapping when absent."""
        return lookup_style(self.custom_styles, name)

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> RenderConfig:
        """Create RenderConfig from dictionary.

        Useful for framework integration where options come from external
        sources (JSON, YAML, a JavaScript-style props object). camelCase keys
        are normalised to snake_case; unknown keys are silently ignored.
        Style names inside ``customStyles`` may stay camelCase; style()
        resolves both spellings.

        Args:
            config_dict: Dictionary with config values.

        Returns:
            New RenderConfig instance with values from dict.

        Example:
            >>> config = RenderConfig.from_dict({
            ...     "orderedListSeparator": ")",
            ...     "depth_margin": 12,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.ordered_list_separator
            ')'

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered: dict[str, Any] = {}
        for key, value in config_dict.items():
            name = snake_case(key)
            if name in valid_fields:
                filtered[name] = value
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: RenderConfig = RenderConfig()

_render_config: ContextVar[RenderConfig] = ContextVar(
    "render_config",
    default=_DEFAULT_CONFIG,
)


def get_render_config() -> RenderConfig:
    """Get current render configuration (thread-local)."""
    return _render_config.get()


def set_render_config(config: RenderConfig) -> None:
    """Set render configuration for current context.

    Args:
        config: RenderConfig instance to use for this context.

    """
    _render_config.set(config)


def reset_render_config() -> None:
    """Reset to default configuration."""
    _render_config.set(_DEFAULT_CONFIG)


@contextmanager
def render_config_context(config: RenderConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: RenderConfig to use within the context.

    Example:
        >>> with render_config_context(RenderConfig(ordered_list_separator=")")):
        ...     get_render_config().ordered_list_separator
        ')'
        >>> get_render_config().ordered_list_separator
        '.'

    Thread Safety:
        Only affects the current thread's context. Properly restores previous
        config even if an exception is raised.

    """
    token = _render_config.set(config)
    try:
        yield
    finally:
        _render_config.reset(token)


__all__ = [
    "RenderConfig",
    "get_render_config",
    "reset_render_config",
    "render_config_context",
    "set_render_config",
]
