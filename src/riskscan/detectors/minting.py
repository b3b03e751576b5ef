"""Minting risk detector.

Flags mint functions that can inflate supply without a cap, and mint
functions restricted to a privileged address.

Provides:
- MintingDetector: UNLIMITED_MINTING and OWNER_RESTRICTED_MINTING
"""

import re

from riskscan.core.output import RiskFinding
from riskscan.core.severity import RiskType
from riskscan.detectors.base import (
    Detector,
    create_finding,
    find_functions_matching,
    has_any_modifier,
    has_constant,
    has_variable,
    modifier_list,
)
from riskscan.parser.source import FunctionInfo, StructuralModel

MINT_NAME_RE = re.compile(r"mint", re.IGNORECASE)
SUPPLY_CAP_CONSTANTS = ("MAX_SUPPLY", "CAP", "TOTAL_SUPPLY", "MAX_TOTAL_SUPPLY")
SUPPLY_CAP_VARIABLES = ("maxSupply", "_maxSupply", "cap", "_cap")
MINTER_MODIFIERS = ("onlyOwner", "onlyRole", "onlyMinter", "onlyAdmin")

_SUPPLY_REFERENCE_RE = re.compile(r"totalSupply", re.IGNORECASE)
_RUNTIME_CHECK_RE = re.compile(r"\b(?:require|if|assert)\b")
_SENDER_OWNER_CHECK_RE = re.compile(
    r"msg\.sender\s*==\s*\w*owner\w*(?:\(\))?|\w*owner\w*(?:\(\))?\s*==\s*msg\.sender",
    re.IGNORECASE,
)


class MintingDetector(Detector):
    """Detects supply-inflation risks on mint functions."""

    name = "MintingDetector"
    pattern_count = 2

    def detect(self, model: StructuralModel) -> list[RiskFinding]:
        findings = []
        has_cap = self._has_supply_cap(model)

        for func in find_functions_matching(model, MINT_NAME_RE):
            if not has_cap and not self._has_supply_check(func):
                findings.append(
                    create_finding(
                        RiskType.UNLIMITED_MINTING,
                        func.full_signature,
                        func.start_line,
                        "Mint function exists without MAX_SUPPLY constant or supply check. "
                        "Tokens can be minted without limit.",
                        func.name,
                    )
                )

            if has_any_modifier(func, MINTER_MODIFIERS) or _SENDER_OWNER_CHECK_RE.search(func.body):
                findings.append(
                    create_finding(
                        RiskType.OWNER_RESTRICTED_MINTING,
                        func.full_signature,
                        func.start_line,
                        "Minting is restricted to owner/privileged address. "
                        "Centralized control over token supply.",
                        func.name,
                        modifier_list(func),
                    )
                )

        return findings

    def _has_supply_cap(self, model: StructuralModel) -> bool:
        return any(has_constant(model, name) for name in SUPPLY_CAP_CONSTANTS) or any(
            has_variable(model, name) for name in SUPPLY_CAP_VARIABLES
        )

    def _has_supply_check(self, func: FunctionInfo) -> bool:
        return bool(_SUPPLY_REFERENCE_RE.search(func.body) and _RUNTIME_CHECK_RE.search(func.body))
