"""Tests for githelper.core.sizes module."""

import pytest

from githelper.core.result import Err, Ok
from githelper.core.sizes import format_size, parse_size


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (0, "0 B"),
        (512, "512 B"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1.0 MB"),
        (5 * 1024**3, "5.0 GB"),
    ],
)
def test_format_size(size: int, expected: str) -> None:
    assert format_size(size) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("2048", 2048),
        ("500KB", 500 * 1024),
        ("1.5kb", 1536),
        ("100MB", 100 * 1024**2),
        ("1 GB", 1024**3),
        ("10B", 10),
    ],
)
def test_parse_size(text: str, expected: int) -> None:
    assert parse_size(text) == Ok(expected)


@pytest.mark.parametrize("text", ["", "huge", "MB", "12XB", "infMB", "1e400KB", "nanGB", "²"])
def test_parse_size_rejects_garbage(text: str) -> None:
    result = parse_size(text)
    assert isinstance(result, Err)
    assert "invalid size format" in result.error
