"""Discovery of symbol checks embedded in source comments.

An annotation is the marker followed by whitespace separated fields::

    //libnickel <start_version> <end_version|*> <symbol>...

The scanner only looks for the literal marker text on each line; it does not
know anything about comment syntax. Parsing of the fields is done by
:func:`parse_annotation`, which can be reused by other front-ends.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator

from ._core_base import WILDCARD, AnnotationError, SourceLocation, SourceReadError


@dataclass(frozen=True)
class SymbolCheck:
    location: SourceLocation
    library: str
    start_version: str
    end_version: str
    symbols: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.symbols:
            raise AnnotationError(self.location, "at least one symbol is required")

    def format_symbols(self) -> str:
        return "[" + " ".join(self.symbols) + "]"

    def as_dict(self) -> dict[str, Any]:
        return {
            "location": str(self.location),
            "library": self.library,
            "start_version": self.start_version,
            "end_version": self.end_version,
            "symbols": list(self.symbols),
        }


def annotation_format(marker: str) -> str:
    return f"{marker} <start_version> <end_version|*> <sym>..."


def parse_annotation(text: str, location: SourceLocation, library: str, marker: str) -> SymbolCheck:
    fields = text.strip().split()
    if len(fields) < 3 or fields[0] == WILDCARD:
        raise AnnotationError(location, f"expected comment to be in the format '{annotation_format(marker)}'")
    return SymbolCheck(
        location=location,
        library=library,
        start_version=fields[0],
        end_version=fields[1],
        symbols=tuple(fields[2:]),
    )


def iter_source_files(root: Path, extensions: Iterable[str]) -> Iterator[Path]:
    """Yield regular files below root in lexical walk order."""
    allowed = set(extensions)
    try:
        entries = sorted(os.scandir(root), key=lambda entry: entry.name)
    except OSError as exc:
        raise SourceReadError(f"walk {str(root)!r}: {exc}") from exc

    for entry in entries:
        path = root / entry.name
        if entry.is_dir(follow_symlinks=False):
            yield from iter_source_files(path, allowed)
        elif entry.is_file(follow_symlinks=False) and path.suffix in allowed:
            yield path


def scan_file(path: Path, marker: str, library: str) -> list[SymbolCheck]:
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise SourceReadError(f"read {str(path)!r}: {exc}") from exc

    needle = marker.encode("utf-8")
    checks: list[SymbolCheck] = []
    for line_no, line in enumerate(raw.split(b"\n"), start=1):
        col = line.find(needle)
        if col == -1:
            continue
        rest = line[col + len(needle):].rstrip(b"\r").decode("utf-8", errors="replace")
        location = SourceLocation(path=str(path), line=line_no, column=col + 1)
        checks.append(parse_annotation(rest, location, library, marker))
    return checks


def scan_tree(root: Path, marker: str, library: str, extensions: Iterable[str]) -> list[SymbolCheck]:
    checks: list[SymbolCheck] = []
    for path in iter_source_files(root, extensions):
        checks.extend(scan_file(path, marker, library))
    return checks
