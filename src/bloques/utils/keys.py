"""Identity keys for render nodes.

Every node emitted by the dispatcher carries a key that is distinct within
its tree and never reused by a later render call in the same process.

Thread Safety:
    The sequence is guarded by a lock, so concurrent renders never observe
    the same value.
"""

from __future__ import annotations

import itertools
import threading

_sequence = itertools.count(1)
_lock = threading.Lock()

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits)) or "0"


def generate_key(prefix: str = "") -> str:
    """Return a fresh node key.

    Args:
        prefix: Optional prefix, typically the source block key

    Returns:
        Key string such as ``"a1b2-k3f"`` (or ``"k3f"`` without prefix)

    Example:
        >>> generate_key("intro") != generate_key("intro")
        True
    """
    with _lock:
        value = next(_sequence)
    key = f"k{_base36(value)}"
    return f"{prefix}-{key}" if prefix else key
