"""Economic manipulation detector.

Flags owner-adjustable fees, owner-managed black/whitelists and
owner-adjustable transaction limits.

Provides:
- EconomicDetector: ADJUSTABLE_FEES, BLACKLIST_MODIFICATION,
  WHITELIST_MODIFICATION, MAX_TX_LIMIT
"""

import re

from riskscan.core.output import RiskFinding
from riskscan.core.severity import RiskType
from riskscan.detectors.base import (
    Detector,
    create_finding,
    find_functions_matching,
    is_owner_gated,
    modifier_list,
)
from riskscan.parser.source import FunctionInfo, StructuralModel

FEE_SETTER_RE = re.compile(r"setFee|setTax|updateFee|changeFee|setRate", re.IGNORECASE)
MAX_TX_SETTER_RE = re.compile(r"setMax.*Amount|setMaxTx", re.IGNORECASE)
MAX_TX_VARIABLE_RE = re.compile(r"^_?max(?:Tx|Transaction)(?:Amount)?$", re.IGNORECASE)

LIST_MODIFICATION_REASONS = {
    "blacklist": "Owner can blacklist addresses, preventing them from transferring "
    "tokens or interacting with contract.",
    "whitelist": "Owner controls whitelist access. Can restrict who can interact "
    "with contract.",
}


class EconomicDetector(Detector):
    """Detects owner levers over token economics."""

    name = "EconomicDetector"
    pattern_count = 4

    def detect(self, model: StructuralModel) -> list[RiskFinding]:
        findings = self._detect_adjustable_fees(model)

        for keyword, risk_type in (
            ("blacklist", RiskType.BLACKLIST_MODIFICATION),
            ("whitelist", RiskType.WHITELIST_MODIFICATION),
        ):
            finding = self._detect_list_modification(model, keyword, risk_type)
            if finding:
                findings.append(finding)

        max_tx = self._detect_max_tx_limit(model)
        if max_tx:
            findings.append(max_tx)

        return findings

    def _owner_finding(self, risk_type: RiskType, func: FunctionInfo, reason: str) -> RiskFinding:
        return create_finding(
            risk_type,
            func.full_signature,
            func.start_line,
            reason,
            func.name,
            modifier_list(func),
        )

    def _detect_adjustable_fees(self, model: StructuralModel) -> list[RiskFinding]:
        return [
            self._owner_finding(
                RiskType.ADJUSTABLE_FEES,
                func,
                "Owner can modify fees/taxes at any time. No caps or timelocks "
                "detected. Users may face unexpected costs.",
            )
            for func in find_functions_matching(model, FEE_SETTER_RE)
            if is_owner_gated(func)
        ]

    def _detect_list_modification(
        self, model: StructuralModel, keyword: str, risk_type: RiskType
    ) -> RiskFinding | None:
        if not any(keyword in v.name.lower() for v in model.variables):
            return None

        name_re = re.compile(keyword, re.IGNORECASE)
        for func in find_functions_matching(model, name_re):
            lowered = func.name.lower()
            if ("add" in lowered or "set" in lowered) and is_owner_gated(func):
                return self._owner_finding(risk_type, func, LIST_MODIFICATION_REASONS[keyword])
        return None

    def _detect_max_tx_limit(self, model: StructuralModel) -> RiskFinding | None:
        if not any(MAX_TX_VARIABLE_RE.match(v.name) for v in model.variables):
            return None

        for func in find_functions_matching(model, MAX_TX_SETTER_RE):
            if is_owner_gated(func):
                return self._owner_finding(
                    RiskType.MAX_TX_LIMIT,
                    func,
                    "Owner can modify maximum transaction amount, potentially "
                    "restricting user transactions.",
                )
        return None
