"""Utility functions for page selection and rotation."""

from typing import List, Optional


def _parse_page_number(text: str) -> Optional[int]:
    text = text.strip()
    if not text.isdecimal():
        return None
    return int(text)


def parse_page_range(range_expression: str, max_page: int) -> List[int]:
    """
    Parse a page range string into sorted zero-based page indices.

    Args:
        range_expression: Page range string (e.g., "1-3, 5, 7-9").
                          Pages are 1-indexed and spans are inclusive.
        max_page: Number of pages in the document.

    Returns:
        Sorted list of distinct page indices (0-indexed), each in
        [0, max_page - 1]. Malformed, reversed and out-of-range tokens
        are dropped, so the result may be empty.
    """
    indices = set()
    if not range_expression or max_page <= 0:
        return []

    for part in range_expression.split(','):
        if '-' in part:
            start_text, end_text = part.split('-', 1)
            start = _parse_page_number(start_text)
            end = _parse_page_number(end_text)
            if start is None or end is None:
                continue
            indices.update(
                page - 1 for page in range(max(start, 1), min(end, max_page) + 1)
            )
        else:
            page = _parse_page_number(part)
            if page is not None and 1 <= page <= max_page:
                indices.add(page - 1)

    return sorted(indices)


def normalize_rotation(current: int, delta: int) -> int:
    """Apply a relative rotation in degrees, wrapped into [0, 360)."""
    return (current + delta) % 360
