"""Fund control risk detector.

Flags privileged withdrawal paths, emergency drains and direct balance
writes.

Provides:
- FundControlDetector: WITHDRAW_FUNCTION, EMERGENCY_WITHDRAWAL,
  BALANCE_MANIPULATION
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
    transfers_funds,
)
from riskscan.parser.source import StructuralModel

WITHDRAW_NAME_RE = re.compile(r"withdraw|claim|rescue|recover|sweep", re.IGNORECASE)
EMERGENCY_NAME_RE = re.compile(r"emergency", re.IGNORECASE)
TRANSFER_NAME_RE = re.compile(r"transfer", re.IGNORECASE)

_EMERGENCY_TRANSFER_RE = re.compile(r"transfer|send|call\{\s*value")
_BALANCE_ASSIGNMENT_RE = re.compile(r"_?balances?\[.*\]\s*=(?!=)")


class FundControlDetector(Detector):
    """Detects owner-controlled movement of user funds."""

    name = "FundControlDetector"
    pattern_count = 6

    def detect(self, model: StructuralModel) -> list[RiskFinding]:
        findings = []
        findings.extend(self._detect_withdrawals(model))
        findings.extend(self._detect_emergency_withdrawals(model))
        findings.extend(self._detect_balance_manipulation(model))
        return findings

    def _detect_withdrawals(self, model: StructuralModel) -> list[RiskFinding]:
        findings = []
        for func in find_functions_matching(model, WITHDRAW_NAME_RE):
            if transfers_funds(func) and is_owner_gated(func):
                findings.append(
                    create_finding(
                        RiskType.WITHDRAW_FUNCTION,
                        func.full_signature,
                        func.start_line,
                        "Owner-controlled withdrawal function detected. "
                        "Owner can withdraw contract funds at any time.",
                        func.name,
                        modifier_list(func),
                    )
                )
        return findings

    def _detect_emergency_withdrawals(self, model: StructuralModel) -> list[RiskFinding]:
        findings = []
        for func in find_functions_matching(model, EMERGENCY_NAME_RE):
            if _EMERGENCY_TRANSFER_RE.search(func.body):
                findings.append(
                    create_finding(
                        RiskType.EMERGENCY_WITHDRAWAL,
                        func.full_signature,
                        func.start_line,
                        "Emergency withdrawal function allows draining funds "
                        "without timelock or safeguards.",
                        func.name,
                        modifier_list(func),
                    )
                )
        return findings

    def _detect_balance_manipulation(self, model: StructuralModel) -> list[RiskFinding]:
        findings = []
        for func in model.functions:
            # Constructors and transfer functions write balances legitimately
            if func.name == "constructor" or TRANSFER_NAME_RE.search(func.name):
                continue
            if not _BALANCE_ASSIGNMENT_RE.search(func.body):
                continue
            if is_owner_gated(func):
                findings.append(
                    create_finding(
                        RiskType.BALANCE_MANIPULATION,
                        func.full_signature,
                        func.start_line,
                        "Direct balance manipulation detected. Privileged address "
                        "can arbitrarily modify user balances.",
                        func.name,
                        modifier_list(func),
                    )
                )
        return findings
