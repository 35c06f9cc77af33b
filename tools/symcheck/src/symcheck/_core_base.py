from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

TOOL_NAME = "symcheck"
TOOL_VERSION = "1.0.0"
WILDCARD = "*"


@dataclass(frozen=True)
class SourceLocation:
    path: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"

    def as_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "line": self.line,
            "column": self.column,
        }


class SymcheckError(Exception):
    pass


class ConfigError(SymcheckError):
    pass


class SourceReadError(SymcheckError):
    pass


class AnnotationError(SymcheckError):
    def __init__(self, location: SourceLocation, message: str) -> None:
        super().__init__(f"parse {location.path!r}: line {location.line}, col {location.column}: {message}")
        self.location = location


class FetchError(SymcheckError):
    pass


class BinaryFormatError(SymcheckError):
    pass


class SymbolNotFound(LookupError):
    pass


def load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Unable to read JSON file '{path}': {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in '{path}': {exc}") from exc


def write_json(path: Path, value: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(value, indent=2, sort_keys=True) + "\n", encoding="utf-8")
