"""Ownership risk detector.

Flags concentration of privileged functions, pause mechanisms and
single-step ownership transfer.

Provides:
- OwnershipDetector: CENTRALIZED_OWNERSHIP, PAUSABLE_CONTRACT,
  OWNERSHIP_TRANSFER
"""

import re

from riskscan.core.output import RiskFinding
from riskscan.core.severity import RiskType
from riskscan.detectors.base import (
    Detector,
    create_finding,
    find_function,
    find_functions_matching,
    has_modifier,
    has_modifier_declared,
    inherits_matching,
    is_owner_gated,
)
from riskscan.parser.source import FunctionInfo, StructuralModel

CENTRALIZATION_THRESHOLD = 3
TRANSFER_OWNERSHIP_RE = re.compile(r"transferOwnership", re.IGNORECASE)
TWO_STEP_MARKERS = ("acceptOwnership", "claimOwnership", "Ownable2Step")
# Pausable, ERC20PausableUpgradeable, ERC1155Pausable, ...
PAUSABLE_BASE_PATTERN = r"\w*Pausable\w*"

_INLINE_OWNER_CHECK_RE = re.compile(r"require\s*\(\s*msg\.sender\s*==\s*_?owner")


class OwnershipDetector(Detector):
    """Detects centralized control over the contract."""

    name = "OwnershipDetector"
    pattern_count = 3

    def detect(self, model: StructuralModel) -> list[RiskFinding]:
        findings = []
        for check in (
            self._detect_centralized_ownership,
            self._detect_pausable,
            self._detect_ownership_transfer,
        ):
            finding = check(model)
            if finding:
                findings.append(finding)
        return findings

    def _is_owner_only(self, func: FunctionInfo) -> bool:
        return is_owner_gated(func) or _INLINE_OWNER_CHECK_RE.search(func.body) is not None

    def _detect_centralized_ownership(self, model: StructuralModel) -> RiskFinding | None:
        owner_functions = [f for f in model.functions if self._is_owner_only(f)]
        if len(owner_functions) < CENTRALIZATION_THRESHOLD:
            return None

        names = ", ".join(f.name for f in owner_functions)
        return create_finding(
            RiskType.CENTRALIZED_OWNERSHIP,
            f"{len(owner_functions)} owner-controlled functions: {names}",
            owner_functions[0].start_line,
            f"Contract has {len(owner_functions)} owner-only functions, indicating high "
            "centralization. Single address controls critical operations.",
            names,
        )

    def _detect_pausable(self, model: StructuralModel) -> RiskFinding | None:
        pause = find_function(model, "pause")
        unpause = find_function(model, "unpause")
        has_pausable_base = inherits_matching(model, PAUSABLE_BASE_PATTERN)
        uses_when_not_paused = has_modifier_declared(model, "whenNotPaused") or any(
            has_modifier(f, "whenNotPaused") for f in model.functions
        )

        if not (pause or unpause or has_pausable_base or uses_when_not_paused):
            return None

        anchor = pause or unpause
        return create_finding(
            RiskType.PAUSABLE_CONTRACT,
            anchor.full_signature if anchor else "Pausable mechanism detected",
            anchor.start_line if anchor else 1,
            "Contract can be paused by owner, freezing user operations. "
            "No timelock or safeguards detected.",
            anchor.name if anchor else "pause mechanism",
        )

    def _detect_ownership_transfer(self, model: StructuralModel) -> RiskFinding | None:
        transfer = find_function(model, "transferOwnership")
        if transfer is None:
            matching = find_functions_matching(model, TRANSFER_OWNERSHIP_RE)
            transfer = matching[0] if matching else None
        if transfer is None:
            return None

        if any(marker in model.source for marker in TWO_STEP_MARKERS):
            return None

        return create_finding(
            RiskType.OWNERSHIP_TRANSFER,
            transfer.full_signature,
            transfer.start_line,
            "Single-step ownership transfer detected. No 2-step transfer "
            "protection against accidental transfers.",
            transfer.name,
        )
