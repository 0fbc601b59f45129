#!/usr/bin/env python

"""Utility functions."""

from urllib.parse import quote

from .specs import SIZE_UNITS


def human_size(size: int) -> str:
    """
    Formats a byte count using decimal units.

    Args:
        size: The number of bytes.

    Returns:
        The size with one decimal place and a unit suffix, e.g. "1.5 MB".
    """
    value = float(size)
    index = 0
    while value >= 1000.0 and index < len(SIZE_UNITS) - 1:
        value /= 1000.0
        index += 1
    return f"{value:.1f} {SIZE_UNITS[index]}"


def quote_path(segment: str) -> str:
    """
    Percent-escapes a repository name or reference for use in a URL path.

    Args:
        segment: The path segment to be escaped; "/" separates repository namespaces and is preserved.

    Returns:
        The escaped path segment.
    """
    return quote(str(segment), safe="/")

