"""Text and style helpers for bloques renderers.

Example:
    >>> from bloques.utils.text import css_declarations
    >>> css_declarations({"marginLeft": 16, "font_weight": "bold"})
    'margin-left: 16px; font-weight: bold'
"""

from __future__ import annotations

import html as html_module
import re
from collections.abc import Mapping
from typing import Any

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")

# Unitless CSS properties; numbers for anything else get "px"
_UNITLESS = frozenset({"flex", "flex-grow", "flex-shrink", "font-weight", "line-height", "opacity", "z-index"})


def escape_html(text: str) -> str:
    """Escape HTML special characters for text and attribute values.

    Examples:
        >>> escape_html('<a href="x">')
        '&lt;a href=&quot;x&quot;&gt;'
    """
    if not text:
        return ""
    return html_module.escape(text, quote=True).replace("&#x27;", "'")


def snake_case(name: str) -> str:
    """Convert a camelCase option or style name to snake_case.

    Examples:
        >>> snake_case("orderedListSeparator")
        'ordered_list_separator'
        >>> snake_case("depth_margin")
        'depth_margin'
    """
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def camel_case(name: str) -> str:
    """Convert a snake_case style name to camelCase.

    Examples:
        >>> camel_case("view_after_list")
        'viewAfterList'
        >>> camel_case("header-one")
        'header-one'
    """
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def lookup_style(custom_styles: Mapping[str, Any] | None, name: str) -> Mapping[str, Any]:
    """Style override for ``name``, also found under its camelCase spelling.

    Examples:
        >>> lookup_style({"viewAfterList": {"height": 8}}, "view_after_list")
        {'height': 8}
        >>> lookup_style(None, "header-one")
        {}
    """
    if not custom_styles:
        return {}
    style = custom_styles.get(name)
    if style is None:
        style = custom_styles.get(camel_case(name))
    return style or {}


def css_property(name: str) -> str:
    """Convert a style key (snake_case or camelCase) to a CSS property name.

    Examples:
        >>> css_property("marginLeft")
        'margin-left'
        >>> css_property("flex_direction")
        'flex-direction'
    """
    return snake_case(name).replace("_", "-")


def css_declarations(style: Mapping[str, Any] | None) -> str:
    """Render a style mapping as CSS declarations.

    None values are dropped. Numbers get a ``px`` unit unless the property
    is unitless.
    """
    if not style:
        return ""
    parts: list[str] = []
    for key, value in style.items():
        if value is None:
            continue
        prop = css_property(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool) and prop not in _UNITLESS:
            value = f"{value}px"
        parts.append(f"{prop}: {value}")
    return "; ".join(parts)
