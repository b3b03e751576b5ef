"""Heuristic source parsing into an immutable structural model."""

from .source import (
    FunctionInfo,
    ModifierInfo,
    StructuralModel,
    VariableInfo,
    count_lines_of_code,
    extract_compiler_version,
    find_matching_brace,
    looks_like_supported_source,
    parse,
    source_fingerprint,
)

__all__ = [
    "FunctionInfo",
    "ModifierInfo",
    "StructuralModel",
    "VariableInfo",
    "count_lines_of_code",
    "extract_compiler_version",
    "find_matching_brace",
    "looks_like_supported_source",
    "parse",
    "source_fingerprint",
]
