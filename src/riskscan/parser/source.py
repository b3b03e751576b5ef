"""Heuristic Solidity source parser.

Turns raw contract source into an immutable structural model: functions,
modifiers and state variables with their line spans. The parser is
deliberately regex and brace-depth based. It never raises on malformed
input; unterminated bodies run to end-of-text and unmatched declarations
are simply skipped.

Brace counting has no awareness of string literals or comments, so a
brace inside a string or comment can shift a body boundary. This is a
known limitation of the heuristic and is kept as-is. Signature tails may
carry comments and modifier arguments nested one level deep, as in
`onlyRole(keccak256("MINTER_ROLE"))`.

Provides:
- FunctionInfo, ModifierInfo, VariableInfo: Extracted declarations
- StructuralModel: Immutable parse result shared by all detectors
- parse: Build a StructuralModel from source text
- looks_like_supported_source: Advisory check for Solidity-looking input
- extract_compiler_version: Version constraint from the pragma line
- count_lines_of_code: Non-blank, non-comment line count
- source_fingerprint: Short SHA-256 digest used as a cache key
"""

import hashlib
import re
from bisect import bisect_right
from dataclasses import dataclass

SUPPORTED_SOURCE_MARKERS = (
    "pragma solidity",
    "contract ",
    "interface ",
    "library ",
)

VISIBILITIES = frozenset({"public", "external", "internal", "private"})
MUTABILITIES = frozenset({"view", "pure", "payable", "constant"})
# Signature words that are not modifiers
RESERVED_TOKENS = frozenset({"returns", "return", "virtual", "override"})

SPECIAL_FUNCTIONS = ("constructor", "fallback", "receive")

_FUNCTION_RE = re.compile(
    r"(?<![.\w])(?:function\s+(?P<name>\w+)|(?P<special>constructor|fallback|receive))"
    r"\s*\((?P<params>[^)]*)\)"
    r"(?P<tail>(?:[\w\s,]|\((?:[^()]|\([^()]*\))*\)|//[^\n]*|/\*(?:[^*]|\*(?!/))*\*/)*?)"
    r"\{",
    re.IGNORECASE,
)

_SIGNATURE_TOKEN_RE = re.compile(r"(\w+)\s*(\((?:[^()]|\([^()]*\))*\))?")

_COMMENT_RE = re.compile(r"//[^\n]*|/\*(?:[^*]|\*(?!/))*\*/")

_MODIFIER_RE = re.compile(
    r"(?<![.\w])modifier\s+(?P<name>\w+)\s*(?:\([^)]*\))?\s*"
    r"(?:(?:virtual|override)\s*)*\{",
    re.IGNORECASE,
)

_SCALAR_VARIABLE_RE = re.compile(
    r"^[ \t]*(?P<type>uint\d*|int\d*|address(?:[ \t]+payable)?|bool|string|bytes\d*)[ \t]+"
    r"(?:(?P<visibility>public|private|internal)[ \t]+)?"
    r"(?:(?P<constant>constant)[ \t]+)?"
    r"(?:immutable[ \t]+)?"
    r"(?P<name>\w+)[ \t]*(?:=|;)",
    re.IGNORECASE | re.MULTILINE,
)

_MAPPING_VARIABLE_RE = re.compile(
    r"^[ \t]*mapping\s*\((?:[^()]|\((?:[^()]|\([^()]*\))*\))*\)\s*"
    r"(?:(?P<visibility>public|private|internal)\s+)?"
    r"(?P<name>\w+)\s*;",
    re.IGNORECASE | re.MULTILINE,
)

_PRAGMA_RE = re.compile(r"pragma\s+solidity\s+([^;]+);", re.IGNORECASE)


@dataclass(frozen=True)
class FunctionInfo:
    """A function declaration and its brace-matched body.

    Attributes:
        name: Function name (or constructor/fallback/receive)
        start_line: Line holding the declaration keyword
        end_line: Line holding the matching closing brace
        visibility: Declared visibility, "public" when omitted
        modifiers: Modifier names attached to the signature
        body: Raw text between the matched braces
        full_signature: Declaration line plus up to two following lines
        body_line: Line holding the opening brace
        terminated: False when no matching brace was found
    """

    name: str
    start_line: int
    end_line: int
    visibility: str
    modifiers: tuple[str, ...]
    body: str
    full_signature: str
    body_line: int
    terminated: bool = True


@dataclass(frozen=True)
class ModifierInfo:
    """A modifier declaration."""

    name: str
    line_number: int
    body: str


@dataclass(frozen=True)
class VariableInfo:
    """A state (or local) variable declaration."""

    name: str
    type: str
    visibility: str
    line_number: int
    is_constant: bool


@dataclass(frozen=True)
class StructuralModel:
    """Immutable parse result consumed by every detector."""

    source: str
    lines: tuple[str, ...]
    functions: tuple[FunctionInfo, ...]
    modifiers: tuple[ModifierInfo, ...]
    variables: tuple[VariableInfo, ...]


class _LineIndex:
    """Maps character offsets to 1-indexed line numbers."""

    def __init__(self, source: str):
        self._newlines = [i for i, char in enumerate(source) if char == "\n"]

    def line_of(self, offset: int) -> int:
        # Number of newlines strictly before offset, plus one
        return bisect_right(self._newlines, offset - 1) + 1


def find_matching_brace(source: str, open_index: int) -> tuple[int, bool]:
    """Find the brace closing the one at open_index.

    Args:
        source: Full source text
        open_index: Index of an opening brace

    Returns:
        Tuple of (close_index, terminated). When the braces never balance,
        close_index is len(source) and terminated is False.
    """
    depth = 1
    index = open_index + 1
    length = len(source)

    while index < length:
        char = source[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index, True
        index += 1

    return length, False


def _split_signature_tail(tail: str) -> tuple[str, tuple[str, ...]]:
    """Pull visibility and modifier names out of a signature tail."""
    visibility = None
    modifiers = []

    for match in _SIGNATURE_TOKEN_RE.finditer(_COMMENT_RE.sub(" ", tail)):
        token = match.group(1)
        lowered = token.lower()
        if lowered in VISIBILITIES:
            visibility = visibility or lowered
        elif lowered in MUTABILITIES or lowered in RESERVED_TOKENS:
            continue
        else:
            modifiers.append(token)

    return visibility or "public", tuple(modifiers)


def _extract_functions(source: str, lines: tuple[str, ...], index: _LineIndex) -> list[FunctionInfo]:
    functions = []

    for match in _FUNCTION_RE.finditer(source):
        name = match.group("name") or match.group("special").lower()
        start_line = index.line_of(match.start())
        visibility, modifiers = _split_signature_tail(match.group("tail"))

        open_index = match.end() - 1
        close_index, terminated = find_matching_brace(source, open_index)

        full_signature = "\n".join(lines[start_line - 1:start_line + 2]).strip()

        functions.append(
            FunctionInfo(
                name=name,
                start_line=start_line,
                end_line=index.line_of(close_index),
                visibility=visibility,
                modifiers=modifiers,
                body=source[open_index + 1:close_index],
                full_signature=full_signature,
                body_line=index.line_of(open_index),
                terminated=terminated,
            )
        )

    return functions


def _extract_modifiers(source: str, index: _LineIndex) -> list[ModifierInfo]:
    modifiers = []

    for match in _MODIFIER_RE.finditer(source):
        open_index = match.end() - 1
        close_index, _ = find_matching_brace(source, open_index)
        modifiers.append(
            ModifierInfo(
                name=match.group("name"),
                line_number=index.line_of(match.start()),
                body=source[open_index + 1:close_index],
            )
        )

    return modifiers


def _extract_variables(source: str, index: _LineIndex) -> list[VariableInfo]:
    found: list[tuple[int, VariableInfo]] = []

    for match in _SCALAR_VARIABLE_RE.finditer(source):
        found.append((
            match.start(),
            VariableInfo(
                name=match.group("name"),
                type=" ".join(match.group("type").split()),
                visibility=(match.group("visibility") or "internal").lower(),
                line_number=index.line_of(match.start()),
                is_constant=match.group("constant") is not None,
            ),
        ))

    for match in _MAPPING_VARIABLE_RE.finditer(source):
        found.append((
            match.start(),
            VariableInfo(
                name=match.group("name"),
                type="mapping",
                visibility=(match.group("visibility") or "internal").lower(),
                line_number=index.line_of(match.start()),
                is_constant=False,
            ),
        ))

    found.sort(key=lambda item: item[0])
    return [variable for _, variable in found]


def parse(source: str) -> StructuralModel:
    """Parse contract source into a StructuralModel.

    Never raises for malformed braces, unterminated declarations or odd
    formatting; the result is best-effort and may be empty.

    Args:
        source: Contract source text

    Returns:
        Immutable StructuralModel

    Example:
        >>> model = parse("contract A { function f() public {} }")
        >>> [f.name for f in model.functions]
        ['f']
    """
    lines = tuple(source.split("\n"))
    index = _LineIndex(source)

    return StructuralModel(
        source=source,
        lines=lines,
        functions=tuple(_extract_functions(source, lines, index)),
        modifiers=tuple(_extract_modifiers(source, index)),
        variables=tuple(_extract_variables(source, index)),
    )


def looks_like_supported_source(source: str) -> bool:
    """Advisory check that the input looks like Solidity.

    Args:
        source: Candidate source text

    Returns:
        True if any structural marker (pragma, contract, interface,
        library) appears, case-insensitively
    """
    lowered = source.lower()
    return any(marker in lowered for marker in SUPPORTED_SOURCE_MARKERS)


def extract_compiler_version(source: str) -> str | None:
    """Return the version constraint from `pragma solidity ...;`, if any."""
    match = _PRAGMA_RE.search(source)
    return match.group(1).strip() if match else None


def count_lines_of_code(source: str) -> int:
    """Count non-blank lines that do not start a comment."""
    count = 0
    for line in source.split("\n"):
        trimmed = line.strip()
        if trimmed and not trimmed.startswith(("//", "/*", "*")):
            count += 1
    return count


def source_fingerprint(source: str) -> str:
    """Short SHA-256 digest of the source, used by cache layers as a key."""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()[:16]
