from __future__ import annotations

import functools
import re
from typing import Iterable

from ._core_base import WILDCARD

_SEGMENT_RE = re.compile(r"[+-]?[0-9]+")


def split_version(value: str) -> list[int]:
    """Split a dotted version into integers.

    A segment which is not a plain decimal integer becomes 0. This mirrors how
    the firmware versions have always been compared and is intentionally not
    reported as an error.
    """
    segments: list[int] = []
    for part in value.split("."):
        segments.append(int(part) if _SEGMENT_RE.fullmatch(part) else 0)
    return segments


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1. The wildcard compares equal to anything."""
    if a == WILDCARD or b == WILDCARD:
        return 0
    a_parts, b_parts = split_version(a), split_version(b)
    for index in range(max(len(a_parts), len(b_parts))):
        if index == len(b_parts):
            return 1
        if index == len(a_parts):
            return -1
        if a_parts[index] > b_parts[index]:
            return 1
        if b_parts[index] > a_parts[index]:
            return -1
    return 0


version_key = functools.cmp_to_key(compare_versions)


def sort_versions(values: Iterable[str]) -> list[str]:
    return sorted(values, key=version_key)


def in_range(version: str, start: str, end: str) -> bool:
    return compare_versions(start, version) <= 0 and compare_versions(version, end) <= 0


def is_base_of(spec: str, version: str) -> bool:
    # "4.6" is a base of "4.6.9960" but not of "4.60.1".
    return spec == WILDCARD or (version + ".").startswith(spec + ".")
