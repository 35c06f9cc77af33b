from __future__ import annotations

from typing import Iterable, Iterator

from ._core_base import WILDCARD, ConfigError
from .versions import in_range, is_base_of, sort_versions

# Appending a release here is all that is needed to cover new firmware.
DEFAULT_RELEASES: tuple[str, ...] = (
    "4.6.9960", "4.6.9995", "4.7.10075", "4.7.10364", "4.7.10413",
    "4.8.10956", "4.8.11073", "4.8.11090", "4.9.11311", "4.9.11314",
    "4.10.11591", "4.10.11655", "4.11.11911", "4.11.11976", "4.11.11980",
    "4.11.11982", "4.11.12019", "4.12.12111", "4.13.12638", "4.14.12777",
    "4.15.12920", "4.16.13162", "4.17.13651", "4.17.13694", "4.18.13737",
    "4.19.14123", "4.20.14601", "4.20.14617", "4.20.14622", "4.21.15015",
    "4.22.15190", "4.22.15268", "4.23.15505", "4.24.15672", "4.24.15676",
    "4.25.15875", "4.26.16704", "4.28.17623", "4.28.17820", "4.28.17826",
    "4.28.17925", "4.28.18220", "4.29.18730", "4.30.18838", "4.31.19086",
    "4.32.19501", "4.33.19608", "4.33.19611", "4.33.19759", "4.34.20097",
    "4.35.20400", "4.36.21095",
)


class ReleaseCatalog:
    """Immutable, ordered set of known firmware releases."""

    def __init__(self, releases: Iterable[str]) -> None:
        values = tuple(releases)
        if not values:
            raise ConfigError("release catalog must not be empty")
        seen: set[str] = set()
        for value in values:
            if not isinstance(value, str) or not value:
                raise ConfigError(f"release catalog entries must be non-empty strings, got {value!r}")
            if value == WILDCARD:
                raise ConfigError("release catalog must not contain the wildcard '*'")
            if value in seen:
                raise ConfigError(f"release catalog contains duplicate entry '{value}'")
            seen.add(value)
        self._releases = tuple(sort_versions(values))

    @classmethod
    def default(cls) -> "ReleaseCatalog":
        return cls(DEFAULT_RELEASES)

    def __iter__(self) -> Iterator[str]:
        return iter(self._releases)

    def __len__(self) -> int:
        return len(self._releases)

    def __contains__(self, value: object) -> bool:
        return value in self._releases

    def __repr__(self) -> str:
        return f"ReleaseCatalog({list(self._releases)!r})"

    @property
    def releases(self) -> tuple[str, ...]:
        return self._releases

    def matching(self, start: str, end: str) -> list[str]:
        return [release for release in self._releases if in_range(release, start, end)]

    def exact_match_count(self, spec: str) -> int:
        return sum(1 for release in self._releases if is_base_of(spec, release))

    def has_exact_match(self, spec: str) -> bool:
        return self.exact_match_count(spec) > 0
