"""Utility modules for bloques.

Provides:
- keys: generate_key for render node identity
- text: escape_html, css_declarations for output renderers
- logger: get_logger for logging
"""

from bloques.utils.keys import generate_key
from bloques.utils.logger import get_logger
from bloques.utils.text import (
    camel_case,
    css_declarations,
    css_property,
    escape_html,
    lookup_style,
    snake_case,
)

__all__ = [
    "camel_case",
    "css_declarations",
    "css_property",
    "escape_html",
    "generate_key",
    "get_logger",
    "lookup_style",
    "snake_case",
]
