"""Exception classes for bloques.

Provides standardized exceptions for error handling throughout bloques.
Expected conditions (no blocks, unknown block types, missing optional
handlers) never raise; these exceptions cover malformed input and
misconfiguration.
"""

from __future__ import annotations


class BloquesError(Exception):
    """Base exception for all bloques errors.

    Subclass this for specific error categories.
    """

    pass


class ContentStateError(BloquesError):
    """Error while loading a raw content state.

    Raised when a raw mapping does not have the shape of a content state
    (missing block key/type, non-mapping payload, bad entity map).
    """

    def __init__(self, message: str, index: int | None = None) -> None:
        """Initialize content state error with optional block position.

        Args:
            message: Error description
            index: Position of the offending block in the raw ``blocks`` list
        """
        self.message = message
        self.index = index

        location = f"block {index}: " if index is not None else ""
        super().__init__(f"{location}{message}")


class ConfigurationError(BloquesError):
    """Error in render configuration.

    Raised for invalid option values, and for atomic blocks encountered
    without a handler when ``strict_atomic`` is enabled.
    """

    pass


class HandlerError(BloquesError):
    """Error raised by an atomic or custom block handler.

    Only surfaces when ``strict_handlers`` is enabled; otherwise the
    failing block is logged and replaced by a placeholder.
    """

    def __init__(self, block_key: str, block_type: str, message: str) -> None:
        """Initialize handler error.

        Args:
            block_key: Key of the block being rendered
            block_type: Declared type of the block
            message: Description of the failure
        """
        self.block_key = block_key
        self.block_type = block_type
        super().__init__(f"Handler for '{block_type}' block {block_key!r}: {message}")


class RenderError(BloquesError):
    """Error during output rendering.

    Raised when an output renderer encounters a node it cannot render.
    """

    pass
