"""Human-readable byte sizes for the clean and clone commands."""

from __future__ import annotations

from .result import Err, Ok, Result

__all__ = ["format_size", "parse_size"]

_UNIT = 1024
_SUFFIXES = (("GB", _UNIT**3), ("MB", _UNIT**2), ("KB", _UNIT), ("B", 1))


def format_size(size: int) -> str:
    """Format a byte count: 512 -> "512 B", 1536 -> "1.5 KB"."""
    if size < _UNIT:
        return f"{size} B"
    div, exp = _UNIT, 0
    n = size // _UNIT
    while n >= _UNIT:
        div *= _UNIT
        exp += 1
        n //= _UNIT
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def parse_size(text: str) -> Result[int, str]:
    """Parse "100MB", "1.5kb", "2048" into a byte count."""
    raw = text.strip().upper()
    for suffix, multiplier in _SUFFIXES:
        if raw.endswith(suffix):
            number = raw[: -len(suffix)].strip()
            try:
                return Ok(int(float(number) * multiplier))
            except (ValueError, OverflowError):
                return Err(f"invalid size format: {text}")
    try:
        return Ok(int(raw))
    except ValueError:
        return Err(f"invalid size format: {text}")
