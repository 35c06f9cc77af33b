from ._core_base import (
    TOOL_VERSION,
    WILDCARD,
    AnnotationError,
    BinaryFormatError,
    ConfigError,
    FetchError,
    SourceLocation,
    SourceReadError,
    SymbolNotFound,
    SymcheckError,
)
from .annotations import SymbolCheck, parse_annotation, scan_file, scan_tree
from .catalog import DEFAULT_RELEASES, ReleaseCatalog
from .config import Settings, load_settings
from .driver import CheckOutcome, SymbolResolution, ValidationObserver, ValidationResult, validate
from .expander import CheckMatrix, RangeWarning, expand_checks
from .provider import BinaryProvider, DirectoryArchiveProvider, HttpArchiveProvider, extract_member
from .resolver import SymbolTable, load_symbols
from .versions import compare_versions, sort_versions

__all__ = [
    "AnnotationError",
    "BinaryFormatError",
    "BinaryProvider",
    "CheckMatrix",
    "CheckOutcome",
    "ConfigError",
    "DEFAULT_RELEASES",
    "DirectoryArchiveProvider",
    "FetchError",
    "HttpArchiveProvider",
    "RangeWarning",
    "ReleaseCatalog",
    "Settings",
    "SourceLocation",
    "SourceReadError",
    "SymbolCheck",
    "SymbolNotFound",
    "SymbolResolution",
    "SymbolTable",
    "SymcheckError",
    "TOOL_VERSION",
    "ValidationObserver",
    "ValidationResult",
    "WILDCARD",
    "compare_versions",
    "expand_checks",
    "extract_member",
    "load_settings",
    "load_symbols",
    "parse_annotation",
    "scan_file",
    "scan_tree",
    "sort_versions",
    "validate",
]
