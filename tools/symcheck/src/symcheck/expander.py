from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from ._core_base import WILDCARD, SourceLocation
from .annotations import SymbolCheck
from .catalog import ReleaseCatalog
from .versions import in_range, version_key


@dataclass(frozen=True)
class RangeWarning:
    location: SourceLocation
    specifier: str

    def __str__(self) -> str:
        return f'{self.location}: no exact match for the base version in specifier "{self.specifier}"'


class CheckMatrix:
    """Checks grouped by (release, library), each group in scan order."""

    def __init__(self) -> None:
        self._groups: dict[tuple[str, str], list[SymbolCheck]] = {}

    def add(self, release: str, check: SymbolCheck) -> None:
        self._groups.setdefault((release, check.library), []).append(check)

    def get(self, release: str, library: str) -> tuple[SymbolCheck, ...]:
        return tuple(self._groups.get((release, library), ()))

    def releases(self) -> list[str]:
        return sorted({release for release, _ in self._groups}, key=version_key)

    def libraries(self, release: str) -> list[str]:
        return sorted(library for rel, library in self._groups if rel == release)

    def groups(self) -> Iterator[tuple[str, str, tuple[SymbolCheck, ...]]]:
        for release in self.releases():
            for library in self.libraries(release):
                yield release, library, self.get(release, library)

    def total_checks(self) -> int:
        return sum(len(checks) for checks in self._groups.values())

    def __len__(self) -> int:
        return len(self._groups)

    def __bool__(self) -> bool:
        return bool(self._groups)


def endpoint_warnings(check: SymbolCheck, catalog: ReleaseCatalog) -> list[RangeWarning]:
    warnings: list[RangeWarning] = []
    for specifier in (check.start_version, check.end_version):
        if specifier != WILDCARD and not catalog.has_exact_match(specifier):
            warnings.append(RangeWarning(location=check.location, specifier=specifier))
    return warnings


def expand_checks(checks: Iterable[SymbolCheck], catalog: ReleaseCatalog) -> tuple[CheckMatrix, list[RangeWarning]]:
    matrix = CheckMatrix()
    warnings: list[RangeWarning] = []
    for check in checks:
        for release in catalog:
            if in_range(release, check.start_version, check.end_version):
                matrix.add(release, check)
        warnings.extend(endpoint_warnings(check, catalog))
    return matrix, warnings
