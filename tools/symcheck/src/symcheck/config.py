from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ._core_base import ConfigError, load_json
from .catalog import DEFAULT_RELEASES, ReleaseCatalog

DEFAULT_MARKER = "//libnickel"
DEFAULT_LIBRARY = "libnickel.so.1.0.0"
DEFAULT_EXTENSIONS: tuple[str, ...] = (".c", ".cc", ".cpp", ".h")
DEFAULT_ARCHIVE_URL = "https://github.com/pgaskin/kobopatch-testdata/raw/v1/{version}.tar.xz"
DEFAULT_TIMEOUT = 120.0

CONFIG_KEYS = {"marker", "library", "extensions", "archive_url", "timeout", "releases"}


@dataclass(frozen=True)
class Settings:
    marker: str = DEFAULT_MARKER
    library: str = DEFAULT_LIBRARY
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    archive_url: str = DEFAULT_ARCHIVE_URL
    timeout: float = DEFAULT_TIMEOUT
    releases: tuple[str, ...] = field(default=DEFAULT_RELEASES)

    def catalog(self) -> ReleaseCatalog:
        return ReleaseCatalog(self.releases)

    def with_overrides(self, **overrides: Any) -> "Settings":
        values = validate_config_payload({key: value for key, value in overrides.items() if value is not None})
        if not values:
            return self
        return dataclasses.replace(self, **values)


def require_non_empty_str(payload: dict[str, Any], key: str) -> str:
    value = payload[key]
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"config.{key} must be a non-empty string")
    return value


def require_str_list(payload: dict[str, Any], key: str) -> tuple[str, ...]:
    value = payload[key]
    if not isinstance(value, list) or not value:
        raise ConfigError(f"config.{key} must be a non-empty array")
    for idx, item in enumerate(value):
        if not isinstance(item, str) or not item:
            raise ConfigError(f"config.{key}[{idx}] must be a non-empty string")
    return tuple(value)


def format_archive_url(template: str, version: str) -> str:
    try:
        return template.format(version=version)
    except (KeyError, IndexError, ValueError) as exc:
        raise ConfigError(f"archive URL template {template!r} cannot be formatted: {exc!r}") from exc


def check_archive_url(template: str) -> None:
    if "{version}" not in template:
        raise ConfigError("config.archive_url must contain the '{version}' placeholder")
    try:
        format_archive_url(template, "0")
    except ConfigError as exc:
        raise ConfigError(f"config.archive_url: {exc}") from exc


def validate_config_payload(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ConfigError("config root must be an object")
    unknown = sorted(set(payload.keys()) - CONFIG_KEYS)
    if unknown:
        raise ConfigError(f"config has unknown keys: {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for key in ("marker", "library", "archive_url"):
        if key in payload:
            values[key] = require_non_empty_str(payload, key)
    if "archive_url" in values:
        check_archive_url(values["archive_url"])

    if "extensions" in payload:
        extensions = require_str_list(payload, "extensions")
        for idx, ext in enumerate(extensions):
            if not ext.startswith("."):
                raise ConfigError(f"config.extensions[{idx}] must start with '.'")
        values["extensions"] = extensions

    if "timeout" in payload:
        timeout = payload["timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or not 0 < timeout < math.inf:
            raise ConfigError("config.timeout must be a positive number")
        values["timeout"] = float(timeout)

    if "releases" in payload:
        releases = require_str_list(payload, "releases")
        # Validates wildcard/duplicate entries up front.
        ReleaseCatalog(releases)
        values["releases"] = releases

    return values


def load_settings(path: Path | None = None) -> Settings:
    if path is None:
        return Settings()
    return Settings(**validate_config_payload(load_json(path)))
