"""Detector protocol and shared finding-construction helpers.

Every detector is a stateless pass over a StructuralModel that returns a
list of findings. Findings are always built through create_finding, which
looks severity and weight up from the fixed type table.

Provides:
- Detector protocol for a consistent detector interface
- create_finding: Build a RiskFinding with a cleaned snippet
- Snippet helpers: extract_code_snippet, clean_code_snippet
- Lookup helpers over the structural model (functions, variables,
  modifiers, inheritance markers)
"""

import re
from typing import Iterable, Protocol, runtime_checkable

from riskscan.core.output import MAX_SNIPPET_LENGTH, RiskFinding
from riskscan.core.severity import RiskType
from riskscan.parser.source import FunctionInfo, StructuralModel

OWNER_MODIFIERS = ("onlyOwner", "onlyRole", "onlyAdmin")

FUND_TRANSFER_RE = re.compile(
    r"\.transfer\(|\.send\(|\.call\{\s*value\s*:|\.call\.value\(|_transfer\(|safeTransfer|payable\("
)


@runtime_checkable
class Detector(Protocol):
    """Protocol for risk detectors."""
    name: str
    pattern_count: int

    def detect(self, model: StructuralModel) -> list[RiskFinding]:
        """Return the findings for one parsed contract."""
        ...


def clean_code_snippet(snippet: str) -> str:
    """Strip every line, drop blank lines and cap the length at 500."""
    lines = (line.strip() for line in snippet.split("\n"))
    return "\n".join(line for line in lines if line)[:MAX_SNIPPET_LENGTH]


def extract_code_snippet(lines: tuple[str, ...], line_index: int, context_lines: int = 1) -> str:
    """Extract a source excerpt around a line.

    Args:
        lines: Source lines
        line_index: 0-based index of the line of interest
        context_lines: Lines of context on each side (default: 1)

    Returns:
        Trimmed excerpt, empty when line_index is out of range
    """
    if line_index < 0 or line_index >= len(lines):
        return ""
    start = max(0, line_index - context_lines)
    end = min(len(lines), line_index + context_lines + 1)
    return "\n".join(lines[start:end]).strip()


def create_finding(
    risk_type: RiskType,
    code_snippet: str,
    line_number: int,
    machine_reason: str,
    function_name: str | None = None,
    modifier_name: str | None = None,
) -> RiskFinding:
    """Create a finding; severity and weight come from the type table.

    Args:
        risk_type: Type of the detected risk
        code_snippet: Raw snippet (cleaned and capped here)
        line_number: 1-indexed line, 0 when unknown
        machine_reason: Reason string for downstream consumers
        function_name: Function involved, if any
        modifier_name: Modifiers involved, if any

    Returns:
        Immutable RiskFinding
    """
    return RiskFinding(
        type=risk_type,
        code_snippet=clean_code_snippet(code_snippet),
        line_number=max(0, line_number),
        machine_reason=machine_reason,
        function_name=function_name or None,
        modifier_name=modifier_name or None,
    )


def modifier_list(func: FunctionInfo) -> str | None:
    """Comma-separated modifiers of a function, None when it has none."""
    return ", ".join(func.modifiers) or None


def has_modifier(func: FunctionInfo, modifier_name: str) -> bool:
    """Check if any modifier on func contains modifier_name (case-insensitive)."""
    needle = modifier_name.lower()
    return any(needle in modifier.lower() for modifier in func.modifiers)


def has_any_modifier(func: FunctionInfo, modifier_names: Iterable[str]) -> bool:
    return any(has_modifier(func, name) for name in modifier_names)


def is_owner_gated(func: FunctionInfo) -> bool:
    """Check for an owner/role-style access modifier."""
    return has_any_modifier(func, OWNER_MODIFIERS)


def transfers_funds(func: FunctionInfo) -> bool:
    """Check if the function body sends ether or tokens."""
    return FUND_TRANSFER_RE.search(func.body) is not None


def find_function(model: StructuralModel, name: str) -> FunctionInfo | None:
    """First function whose name equals name (case-insensitive)."""
    lowered = name.lower()
    return next((f for f in model.functions if f.name.lower() == lowered), None)


def find_functions_matching(model: StructuralModel, pattern: re.Pattern) -> list[FunctionInfo]:
    """All functions whose name matches pattern, in source order."""
    return [f for f in model.functions if pattern.search(f.name)]


def has_variable(model: StructuralModel, name: str) -> bool:
    lowered = name.lower()
    return any(v.name.lower() == lowered for v in model.variables)


def has_constant(model: StructuralModel, name: str) -> bool:
    lowered = name.lower()
    return any(v.name.lower() == lowered and v.is_constant for v in model.variables)


def has_modifier_declared(model: StructuralModel, name: str) -> bool:
    return any(m.name == name for m in model.modifiers)


def inherits_matching(model: StructuralModel, base_pattern: str) -> bool:
    """Check for a base in a `contract X is ...` clause matching base_pattern.

    Args:
        model: Parsed contract
        base_pattern: Regex for one whole base name, e.g. r"\\w*Pausable\\w*"

    Returns:
        True if any inheritance clause lists a matching base
    """
    pattern = (
        r"\b(?:contract|library|interface)\s+\w+\s+is\s+[^{;]*\b(?:"
        + base_pattern
        + r")\b"
    )
    return re.search(pattern, model.source) is not None


def inherits_from(model: StructuralModel, base_name: str) -> bool:
    """Check for `contract X is ..., <base_name>` in the source."""
    return inherits_matching(model, re.escape(base_name))


def find_line_in_function(model: StructuralModel, func: FunctionInfo, needle: str) -> int:
    """0-based index of the first line inside func containing needle, or -1."""
    first = max(0, func.start_line - 1)
    last = min(len(model.lines), func.end_line)
    for index in range(first, last):
        if needle in model.lines[index]:
            return index
    return -1
