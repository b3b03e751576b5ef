"""Upgrade risk detector.

Flags delegatecall usage and the common proxy upgrade patterns (UUPS and
transparent proxies).

Provides:
- UpgradeDetector: DELEGATECALL_USAGE, UUPS_PROXY, TRANSPARENT_PROXY
"""

import re

from riskscan.core.output import RiskFinding
from riskscan.core.severity import RiskType
from riskscan.detectors.base import (
    Detector,
    create_finding,
    extract_code_snippet,
    find_function,
    find_functions_matching,
    find_line_in_function,
    has_variable,
    inherits_from,
)
from riskscan.parser.source import StructuralModel

AUTHORIZE_UPGRADE_RE = re.compile(r"_authorizeUpgrade", re.IGNORECASE)
UPGRADE_TO_RE = re.compile(r"upgradeTo", re.IGNORECASE)
IMPLEMENTATION_NAMES = ("implementation", "_implementation")


class UpgradeDetector(Detector):
    """Detects mechanisms that can swap contract logic."""

    name = "UpgradeDetector"
    pattern_count = 3

    def detect(self, model: StructuralModel) -> list[RiskFinding]:
        findings = self._detect_delegatecall(model)

        uups = self._detect_uups_proxy(model)
        if uups:
            findings.append(uups)

        transparent = self._detect_transparent_proxy(model)
        if transparent:
            findings.append(transparent)

        return findings

    def _detect_delegatecall(self, model: StructuralModel) -> list[RiskFinding]:
        findings = []
        for func in model.functions:
            if "delegatecall" not in func.body:
                continue
            line_index = find_line_in_function(model, func, "delegatecall")
            findings.append(
                create_finding(
                    RiskType.DELEGATECALL_USAGE,
                    extract_code_snippet(model.lines, line_index, 1),
                    line_index + 1,
                    "delegatecall allows executing arbitrary code in contract context. "
                    "Can be used for proxy upgrades or attacks.",
                    func.name,
                )
            )
        return findings

    def _detect_uups_proxy(self, model: StructuralModel) -> RiskFinding | None:
        authorize = find_function(model, "_authorizeUpgrade")
        if authorize is None:
            matching = find_functions_matching(model, AUTHORIZE_UPGRADE_RE)
            authorize = matching[0] if matching else None

        if authorize is None and not inherits_from(model, "UUPSUpgradeable"):
            return None

        return create_finding(
            RiskType.UUPS_PROXY,
            authorize.full_signature if authorize else "UUPSUpgradeable inheritance detected",
            authorize.start_line if authorize else 1,
            "UUPS (Universal Upgradeable Proxy Standard) pattern detected. "
            "Contract logic can be upgraded, changing behavior.",
            authorize.name if authorize else "UUPS pattern",
        )

    def _detect_transparent_proxy(self, model: StructuralModel) -> RiskFinding | None:
        has_transparent_base = inherits_from(model, "TransparentUpgradeableProxy")

        upgrade_to = find_function(model, "upgradeTo")
        if upgrade_to is None:
            matching = find_functions_matching(model, UPGRADE_TO_RE)
            upgrade_to = matching[0] if matching else None

        has_implementation = (
            "_implementation" in model.source
            or any(has_variable(model, name) for name in IMPLEMENTATION_NAMES)
            or any(find_function(model, name) for name in IMPLEMENTATION_NAMES)
        )

        has_fallback_delegatecall = any(
            f.name in ("fallback", "receive") and "delegatecall" in f.body
            for f in model.functions
        )

        if not (has_transparent_base or (upgrade_to and has_implementation) or has_fallback_delegatecall):
            return None

        return create_finding(
            RiskType.TRANSPARENT_PROXY,
            upgrade_to.full_signature if upgrade_to else "Transparent proxy pattern detected",
            upgrade_to.start_line if upgrade_to else 1,
            "Transparent proxy pattern detected. Implementation contract can be "
            "swapped, completely changing contract behavior.",
            upgrade_to.name if upgrade_to else "Transparent proxy",
        )
