from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from ._core_base import SymbolNotFound
from .annotations import SymbolCheck
from .expander import CheckMatrix
from .provider import BinaryProvider
from .resolver import SymbolTable, load_symbols


@dataclass(frozen=True)
class SymbolResolution:
    name: str
    offset: int | None

    @property
    def found(self) -> bool:
        return self.offset is not None


@dataclass(frozen=True)
class CheckOutcome:
    check: SymbolCheck
    release: str
    library: str
    resolutions: tuple[SymbolResolution, ...]

    @property
    def passed(self) -> bool:
        return any(resolution.found for resolution in self.resolutions)

    def failure_message(self) -> str:
        return f"one of symbols {self.check.format_symbols()} not found in {self.library}@{self.release}"

    def __str__(self) -> str:
        return f"{self.check.location}: one of {self.check.format_symbols()} not found in {self.library}@{self.release}"

    def as_dict(self) -> dict[str, Any]:
        return {
            "location": str(self.check.location),
            "release": self.release,
            "library": self.library,
            "passed": self.passed,
            "symbols": {
                resolution.name: (None if resolution.offset is None else hex(resolution.offset))
                for resolution in self.resolutions
            },
        }


@dataclass
class ValidationResult:
    outcomes: list[CheckOutcome] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)

    @property
    def failures(self) -> list[CheckOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.passed]

    @property
    def passed(self) -> bool:
        return not self.failures


class ValidationObserver:
    """Receives validation progress. All hooks are optional."""

    def group_started(self, release: str, library: str) -> None:
        pass

    def group_skipped(self, release: str, library: str) -> None:
        pass

    def check_evaluated(self, outcome: CheckOutcome) -> None:
        pass

    def finished(self, result: ValidationResult) -> None:
        pass


def evaluate_check(check: SymbolCheck, table: SymbolTable, release: str, library: str) -> CheckOutcome:
    resolutions: list[SymbolResolution] = []
    for name in check.symbols:
        try:
            offset: int | None = table.resolve(name)
        except SymbolNotFound:
            offset = None
        resolutions.append(SymbolResolution(name=name, offset=offset))
    return CheckOutcome(check=check, release=release, library=library, resolutions=tuple(resolutions))


def validate(
    matrix: CheckMatrix,
    provider: BinaryProvider,
    observers: Iterable[ValidationObserver] = (),
    loader: Callable[[bytes], SymbolTable] = load_symbols,
) -> ValidationResult:
    """Resolve every grouped check against the binary of its release.

    Each (release, library) group fetches and loads its binary once. Groups
    with no available binary are skipped. Fatal errors from the provider or
    loader propagate to the caller.
    """
    observers = list(observers)
    result = ValidationResult()

    for release, library, checks in matrix.groups():
        if not checks:
            continue
        for observer in observers:
            observer.group_started(release, library)

        image = provider.fetch(release, library)
        if image is None:
            result.skipped.append((release, library))
            for observer in observers:
                observer.group_skipped(release, library)
            continue

        table = loader(image)
        for check in checks:
            outcome = evaluate_check(check, table, release, library)
            result.outcomes.append(outcome)
            for observer in observers:
                observer.check_evaluated(outcome)

    for observer in observers:
        observer.finished(result)
    return result
