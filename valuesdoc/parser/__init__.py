"""Parsers for the two passes over a values file: tag comments and actual values."""

from .comments import (
    CommentTagScanner,
    ScanState,
    TagPatterns,
    YamlLine,
    parse_metadata_comments,
    parse_yaml_line,
    scan_metadata,
)
from .values import (
    NIL,
    ValuesParseError,
    build_values_parameters,
    create_values_object,
    load_values,
)

__all__ = [
    "CommentTagScanner",
    "ScanState",
    "TagPatterns",
    "YamlLine",
    "parse_metadata_comments",
    "parse_yaml_line",
    "scan_metadata",
    "NIL",
    "ValuesParseError",
    "build_values_parameters",
    "create_values_object",
    "load_values",
]
