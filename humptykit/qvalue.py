"""Textual form of HTTP quality values stored as thousandths."""

from __future__ import annotations

QVALUE_MAX = 1000


def qvalue_to_str(value: int) -> str:
    """Render a quality value given in thousandths (0 to 1000) as text."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"quality value must be an int, not {type(value).__name__}")
    if not 0 <= value <= QVALUE_MAX:
        raise ValueError(f"quality value {value} is outside 0..{QVALUE_MAX}")
    if value == 0:
        return "0.0"
    if value == QVALUE_MAX:
        return "1.0"
    return repr(value / 1000.0)