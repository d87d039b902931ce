"""Deduplication and ordering of extracted path lists"""

from collections.abc import Iterable
from typing import Literal

SortOrder = Literal["asc", "desc", "length-asc", "length-desc"]
SORT_ORDERS: tuple[str, ...] = ("asc", "desc", "length-asc", "length-desc")


def dedupe_paths(values: Iterable[str]) -> list[str]:
    """Trim, drop empties and keep the first occurrence of each value"""
    seen: set[str] = set()
    result = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


def sort_paths(values: Iterable[str], order: SortOrder = "asc") -> list[str]:
    """Sort paths lexically or by length; ties keep their input order"""
    if order == "asc":
        return sorted(values)
    if order == "desc":
        return sorted(values, reverse=True)
    if order == "length-asc":
        return sorted(values, key=len)
    if order == "length-desc":
        return sorted(values, key=len, reverse=True)
    raise ValueError(f"Unknown sort order: {order!r}. Expected one of {SORT_ORDERS}")


def split_lines(text: str) -> list[str]:
    """Split text into lines, tolerating Windows line endings"""
    return text.splitlines()
