from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from ._core_base import WILDCARD, SymcheckError, write_json
from .annotations import SymbolCheck, scan_tree
from .config import Settings, load_settings
from .driver import validate
from .expander import expand_checks
from .provider import BinaryProvider, DirectoryArchiveProvider, HttpArchiveProvider
from .reporting import (
    ConsoleReporter,
    GitHubAnnotationReporter,
    build_sarif_results,
    print_range_warnings,
    write_json_report,
    write_sarif_report,
)


def resolve_settings(args: argparse.Namespace) -> Settings:
    settings = load_settings(Path(args.config).resolve() if args.config else None)
    return settings.with_overrides(
        marker=getattr(args, "marker", None),
        library=getattr(args, "library", None),
        archive_url=getattr(args, "archive_url", None),
        timeout=getattr(args, "timeout", None),
    )


def scan_checks(args: argparse.Namespace, settings: Settings) -> list[SymbolCheck]:
    return scan_tree(
        root=Path(args.root),
        marker=settings.marker,
        library=settings.library,
        extensions=settings.extensions,
    )


def make_provider(args: argparse.Namespace, settings: Settings) -> BinaryProvider:
    if args.archive_dir:
        return DirectoryArchiveProvider(Path(args.archive_dir).resolve())
    return HttpArchiveProvider(url_template=settings.archive_url, timeout=settings.timeout)


def command_check(args: argparse.Namespace) -> int:
    settings = resolve_settings(args)
    catalog = settings.catalog()
    checks = scan_checks(args, settings)

    matrix, warnings = expand_checks(checks, catalog)
    print_range_warnings(warnings)

    observers = [
        ConsoleReporter(verbose=not args.quiet),
        GitHubAnnotationReporter(enabled=args.github_annotations),
    ]
    with make_provider(args, settings) as provider:
        result = validate(matrix, provider, observers=observers)

    if args.report:
        write_json_report(Path(args.report).resolve(), result, warnings)
    if args.sarif_report:
        write_sarif_report(Path(args.sarif_report).resolve(), build_sarif_results(result, warnings))

    return 0 if result.passed else 1


def command_scan(args: argparse.Namespace) -> int:
    settings = resolve_settings(args)
    checks = scan_checks(args, settings)
    _, warnings = expand_checks(checks, settings.catalog())

    if args.output:
        write_json(Path(args.output).resolve(), [check.as_dict() for check in checks])
    elif args.json:
        print(json.dumps([check.as_dict() for check in checks], indent=2))
        return 0

    for check in checks:
        print(f"{check.location}: {check.library} {check.start_version}..{check.end_version} {check.format_symbols()}")
    print_range_warnings(warnings)
    print(f"Found {len(checks)} symbol checks.", file=sys.stderr)
    return 0


def command_releases(args: argparse.Namespace) -> int:
    settings = resolve_settings(args)
    for release in settings.catalog().matching(args.start, args.end):
        print(release)
    return 0


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="Path to symcheck config JSON.")


def add_scan_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help="Source tree to scan for annotations (default: current directory).",
    )
    parser.add_argument("--marker", help="Override the annotation marker.")
    parser.add_argument("--library", help="Override the library the annotations refer to.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="symcheck",
        description="Verify that annotated symbols exist in every firmware release they claim to support.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Validate all annotations against release binaries.")
    add_common_arguments(check)
    add_scan_arguments(check)
    check.add_argument("--archive-url", help="Archive URL template containing '{version}'.")
    check.add_argument("--archive-dir", help="Read <release>.tar.xz archives from a local directory.")
    check.add_argument("--timeout", type=float, help="HTTP timeout in seconds.")
    check.add_argument(
        "--github-annotations",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Emit GitHub workflow annotations (default: when GITHUB_ACTIONS=true).",
    )
    check.add_argument("--report", help="Write run report JSON to path.")
    check.add_argument("--sarif-report", help="Write failures as SARIF (for CI/code scanning).")
    check.add_argument("--quiet", action="store_true", help="Do not print per-symbol details.")
    check.set_defaults(func=command_check)

    scan = sub.add_parser("scan", help="List annotations found in the source tree.")
    add_common_arguments(scan)
    add_scan_arguments(scan)
    scan.add_argument("--json", action="store_true", help="Print checks as JSON.")
    scan.add_argument("--output", help="Write checks JSON to path.")
    scan.set_defaults(func=command_scan)

    releases = sub.add_parser("releases", help="List known releases.")
    add_common_arguments(releases)
    releases.add_argument("--start", default=WILDCARD, help="Lowest release to list (default: *).")
    releases.add_argument("--end", default=WILDCARD, help="Highest release to list (default: *).")
    releases.set_defaults(func=command_releases)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.func(args))
    except SymcheckError as exc:
        print(f"[FTL] {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
