from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Mapping, TextIO

from ._core_base import TOOL_NAME, TOOL_VERSION, write_json
from .driver import CheckOutcome, ValidationObserver, ValidationResult
from .expander import RangeWarning

DETAIL_INDENT = " " * 10


def github_actions_enabled(environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return env.get("GITHUB_ACTIONS") == "true"


def print_range_warnings(warnings: list[RangeWarning], stream: TextIO | None = None) -> None:
    out = stream or sys.stdout
    for warning in warnings:
        print(f"[WRN] {warning}", file=out)


class ConsoleReporter(ValidationObserver):
    """Streams progress as groups and checks are processed."""

    def __init__(self, stream: TextIO | None = None, verbose: bool = True) -> None:
        self.stream = stream or sys.stdout
        self.verbose = verbose

    def _print(self, line: str) -> None:
        print(line, file=self.stream)

    def group_started(self, release: str, library: str) -> None:
        self._print(f"[INF] checking {library}@{release}")

    def group_skipped(self, release: str, library: str) -> None:
        self._print("[WRN] no data available, skipping")

    def check_evaluated(self, outcome: CheckOutcome) -> None:
        if self.verbose:
            self._print(f"[INF] {outcome.check.location}:")
            self._print(f"        checking for one of {outcome.check.format_symbols()}")
            for resolution in outcome.resolutions:
                if resolution.offset is None:
                    self._print(f"{DETAIL_INDENT}{resolution.name} not found")
                else:
                    self._print(f"{DETAIL_INDENT}{resolution.name} found at {resolution.offset:#x}")
        if not outcome.passed:
            self._print(f"[ERR] {outcome}")

    def finished(self, result: ValidationResult) -> None:
        failures = result.failures
        if not failures:
            return
        self._print("[FTL] check failed")
        for failure in failures:
            self._print(f"        {failure}")


def escape_annotation_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_annotation_property(value: str) -> str:
    return escape_annotation_data(value).replace(":", "%3A").replace(",", "%2C")


class GitHubAnnotationReporter(ValidationObserver):
    """Emits one ::error workflow command per failing source location."""

    def __init__(self, stream: TextIO | None = None, enabled: bool | None = None) -> None:
        self.stream = stream or sys.stdout
        self.enabled = github_actions_enabled() if enabled is None else enabled
        self.messages: dict[str, list[str]] = {}

    def check_evaluated(self, outcome: CheckOutcome) -> None:
        if outcome.passed:
            return
        location = outcome.check.location
        key = (
            f"file={escape_annotation_property(location.path)},"
            f"line={location.line},col={location.column}"
        )
        self.messages.setdefault(key, []).append(escape_annotation_data(outcome.failure_message()))

    def annotations(self) -> list[str]:
        return [f"::error {key}::{'%0A'.join(self.messages[key])}" for key in sorted(self.messages)]

    def finished(self, result: ValidationResult) -> None:
        if not self.enabled or result.passed:
            return
        for line in self.annotations():
            print(line, file=self.stream)


def build_json_report(result: ValidationResult, warnings: list[RangeWarning]) -> dict[str, Any]:
    failures = result.failures
    return {
        "tool": {
            "name": TOOL_NAME,
            "version": TOOL_VERSION,
        },
        "status": "pass" if not failures else "fail",
        "checked": len(result.outcomes),
        "failed": len(failures),
        "failures": [outcome.as_dict() for outcome in failures],
        "skipped": [{"release": release, "library": library} for release, library in result.skipped],
        "warnings": [str(warning) for warning in warnings],
    }


def write_json_report(path: Path, result: ValidationResult, warnings: list[RangeWarning]) -> None:
    write_json(path, build_json_report(result, warnings))


def build_sarif_results(result: ValidationResult, warnings: list[RangeWarning]) -> list[dict[str, Any]]:
    results: list[dict[str, Any]] = []
    for outcome in result.failures:
        location = outcome.check.location
        results.append(
            {
                "ruleId": "SYM001",
                "level": "error",
                "message": {
                    "text": outcome.failure_message(),
                },
                "locations": [
                    {
                        "physicalLocation": {
                            "artifactLocation": {
                                "uri": Path(location.path).as_posix(),
                            },
                            "region": {
                                "startLine": location.line,
                                "startColumn": location.column,
                            },
                        }
                    }
                ],
            }
        )

    for warning in warnings:
        results.append(
            {
                "ruleId": "SYM002",
                "level": "warning",
                "message": {
                    "text": f'no exact match for the base version in specifier "{warning.specifier}"',
                },
                "locations": [
                    {
                        "physicalLocation": {
                            "artifactLocation": {
                                "uri": Path(warning.location.path).as_posix(),
                            },
                            "region": {
                                "startLine": warning.location.line,
                                "startColumn": warning.location.column,
                            },
                        }
                    }
                ],
            }
        )
    return results


def write_sarif_report(path: Path, results: list[dict[str, Any]]) -> None:
    payload = {
        "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
        "version": "2.1.0",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": TOOL_NAME,
                        "version": TOOL_VERSION,
                        "rules": [
                            {
                                "id": "SYM001",
                                "name": "MissingSymbol",
                                "shortDescription": {
                                    "text": "None of the candidate symbols exist in the target binary",
                                },
                                "defaultConfiguration": {
                                    "level": "error",
                                },
                            },
                            {
                                "id": "SYM002",
                                "name": "InexactVersion",
                                "shortDescription": {
                                    "text": "Version specifier does not match a known release",
                                },
                                "defaultConfiguration": {
                                    "level": "warning",
                                },
                            },
                        ],
                    }
                },
                "results": results,
            }
        ],
    }
    write_json(path, payload)
