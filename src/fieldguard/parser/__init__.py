"""Annotation parsing, type introspection and raw input loading."""

from fieldguard.parser.annotation import parse_tag, tokenize
from fieldguard.parser.loader import InputLoader, SourceMap
from fieldguard.parser.types import inspect_record, is_record_type, resolve_type

__all__ = [
    "InputLoader",
    "SourceMap",
    "inspect_record",
    "is_record_type",
    "parse_tag",
    "resolve_type",
    "tokenize",
]
