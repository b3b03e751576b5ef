"""Dangerous function detector.

Flags selfdestruct, tx.origin authentication and low-level calls whose
success flag is never checked.

Provides:
- DangerousFunctionsDetector: SELFDESTRUCT, TX_ORIGIN, UNCHECKED_CALL
"""

import re

from riskscan.core.output import RiskFinding
from riskscan.core.severity import RiskType
from riskscan.detectors.base import (
    Detector,
    create_finding,
    extract_code_snippet,
    find_line_in_function,
)
from riskscan.parser.source import FunctionInfo, StructuralModel

LOW_LEVEL_CALL_RE = re.compile(r"\.call\{|\.call\(|\.staticcall\(|\.callcode\(")
SUCCESS_CHECK_RE = re.compile(
    r"require\s*\(.*success|if\s*\(\s*!?\s*success|success\s*==\s*true"
)
SUCCESS_DESTRUCTURE_RE = re.compile(r"\(\s*bool\s+success")

# Call line plus the two body lines that follow it
CALL_CHECK_WINDOW = 3


class DangerousFunctionsDetector(Detector):
    """Detects inherently dangerous Solidity constructs."""

    name = "DangerousFunctionsDetector"
    pattern_count = 3

    def detect(self, model: StructuralModel) -> list[RiskFinding]:
        findings = []

        selfdestruct = self._detect_selfdestruct(model)
        if selfdestruct:
            findings.append(selfdestruct)

        findings.extend(self._detect_tx_origin(model))
        findings.extend(self._detect_unchecked_calls(model))
        return findings

    def _detect_selfdestruct(self, model: StructuralModel) -> RiskFinding | None:
        if "selfdestruct" not in model.source:
            return None

        func = next((f for f in model.functions if "selfdestruct" in f.body), None)
        if func is None:
            return None

        line_index = find_line_in_function(model, func, "selfdestruct")
        return create_finding(
            RiskType.SELFDESTRUCT,
            extract_code_snippet(model.lines, line_index, 1),
            line_index + 1,
            "selfdestruct allows complete contract destruction, permanently removing "
            "code and sending all funds to an arbitrary address.",
            func.name,
        )

    def _detect_tx_origin(self, model: StructuralModel) -> list[RiskFinding]:
        findings = []
        if "tx.origin" not in model.source:
            return findings

        for func in model.functions:
            if "tx.origin" not in func.body:
                continue
            line_index = find_line_in_function(model, func, "tx.origin")
            findings.append(
                create_finding(
                    RiskType.TX_ORIGIN,
                    extract_code_snippet(model.lines, line_index, 1),
                    line_index + 1,
                    "tx.origin usage detected. Vulnerable to phishing attacks where "
                    "malicious contracts trick users into authorizing transactions.",
                    func.name,
                )
            )
        return findings

    def _detect_unchecked_calls(self, model: StructuralModel) -> list[RiskFinding]:
        findings = []
        for func in model.functions:
            if not LOW_LEVEL_CALL_RE.search(func.body):
                continue
            unchecked_line = self._first_unchecked_call_line(func)
            if unchecked_line is None:
                continue
            findings.append(
                create_finding(
                    RiskType.UNCHECKED_CALL,
                    extract_code_snippet(model.lines, unchecked_line - 1, 1),
                    unchecked_line,
                    "Low-level call without return value check. Silent failures "
                    "can lead to unexpected behavior.",
                    func.name,
                )
            )
        return findings

    def _first_unchecked_call_line(self, func: FunctionInfo) -> int | None:
        """Source line of the first unchecked low-level call in func, if any."""
        body_lines = func.body.split("\n")
        for offset, line in enumerate(body_lines):
            if not LOW_LEVEL_CALL_RE.search(line):
                continue
            window = "\n".join(body_lines[offset:offset + CALL_CHECK_WINDOW])
            if SUCCESS_CHECK_RE.search(window) or SUCCESS_DESTRUCTURE_RE.search(line):
                continue
            return func.body_line + offset
        return None
