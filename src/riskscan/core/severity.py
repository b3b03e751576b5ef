"""Risk type table and score classification.

Severity and weight are properties of the risk type, never of an
individual finding. Every finding looks its values up in RISK_WEIGHTS so
that identical types always carry identical severity and weight.

Provides:
- RiskType: Closed enum of the 18 detectable risk types
- Severity: Severity labels with a sort rank
- RiskClassification: Discrete label derived from a risk score
- RISK_WEIGHTS: Fixed type -> (severity, weight) table
- classify_risk_score: Map a risk score to its classification
- severity_rank: Sort rank for a severity (CRITICAL first)
"""

from enum import Enum
from typing import NamedTuple


class RiskType(str, Enum):
    """Risk types, declared in detector emission order.

    Declaration order doubles as the tie-breaker when findings of equal
    severity are sorted, so keep each detector's types grouped and in the
    order the detector emits them.
    """

    # Minting
    UNLIMITED_MINTING = "UNLIMITED_MINTING"
    OWNER_RESTRICTED_MINTING = "OWNER_RESTRICTED_MINTING"

    # Fund control
    WITHDRAW_FUNCTION = "WITHDRAW_FUNCTION"
    EMERGENCY_WITHDRAWAL = "EMERGENCY_WITHDRAWAL"
    BALANCE_MANIPULATION = "BALANCE_MANIPULATION"

    # Ownership
    CENTRALIZED_OWNERSHIP = "CENTRALIZED_OWNERSHIP"
    PAUSABLE_CONTRACT = "PAUSABLE_CONTRACT"
    OWNERSHIP_TRANSFER = "OWNERSHIP_TRANSFER"

    # Upgrade
    DELEGATECALL_USAGE = "DELEGATECALL_USAGE"
    UUPS_PROXY = "UUPS_PROXY"
    TRANSPARENT_PROXY = "TRANSPARENT_PROXY"

    # Dangerous functions
    SELFDESTRUCT = "SELFDESTRUCT"
    TX_ORIGIN = "TX_ORIGIN"
    UNCHECKED_CALL = "UNCHECKED_CALL"

    # Economic
    ADJUSTABLE_FEES = "ADJUSTABLE_FEES"
    BLACKLIST_MODIFICATION = "BLACKLIST_MODIFICATION"
    WHITELIST_MODIFICATION = "WHITELIST_MODIFICATION"
    MAX_TX_LIMIT = "MAX_TX_LIMIT"


class Severity(str, Enum):
    """Severity level of a finding."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class RiskClassification(str, Enum):
    """Overall risk label for an analyzed contract."""

    VERY_LOW = "VERY_LOW"
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"


class RiskWeight(NamedTuple):
    severity: Severity
    weight: float


RISK_WEIGHTS: dict[RiskType, RiskWeight] = {
    RiskType.UNLIMITED_MINTING: RiskWeight(Severity.CRITICAL, 3.0),
    RiskType.OWNER_RESTRICTED_MINTING: RiskWeight(Severity.HIGH, 2.0),
    RiskType.WITHDRAW_FUNCTION: RiskWeight(Severity.CRITICAL, 3.0),
    RiskType.EMERGENCY_WITHDRAWAL: RiskWeight(Severity.CRITICAL, 3.5),
    RiskType.BALANCE_MANIPULATION: RiskWeight(Severity.HIGH, 2.5),
    RiskType.CENTRALIZED_OWNERSHIP: RiskWeight(Severity.HIGH, 2.0),
    RiskType.PAUSABLE_CONTRACT: RiskWeight(Severity.MEDIUM, 1.5),
    RiskType.OWNERSHIP_TRANSFER: RiskWeight(Severity.MEDIUM, 1.0),
    RiskType.DELEGATECALL_USAGE: RiskWeight(Severity.HIGH, 2.5),
    RiskType.UUPS_PROXY: RiskWeight(Severity.MEDIUM, 1.5),
    RiskType.TRANSPARENT_PROXY: RiskWeight(Severity.MEDIUM, 1.5),
    RiskType.SELFDESTRUCT: RiskWeight(Severity.CRITICAL, 4.0),
    RiskType.TX_ORIGIN: RiskWeight(Severity.HIGH, 2.0),
    RiskType.UNCHECKED_CALL: RiskWeight(Severity.MEDIUM, 1.5),
    RiskType.ADJUSTABLE_FEES: RiskWeight(Severity.HIGH, 2.0),
    RiskType.BLACKLIST_MODIFICATION: RiskWeight(Severity.MEDIUM, 1.5),
    RiskType.WHITELIST_MODIFICATION: RiskWeight(Severity.MEDIUM, 1.0),
    RiskType.MAX_TX_LIMIT: RiskWeight(Severity.LOW, 0.5),
}

_SEVERITY_RANK = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}

_TYPE_ORDER = {risk_type: index for index, risk_type in enumerate(RiskType)}


def severity_rank(severity: Severity) -> int:
    """Return the sort rank of a severity (0 = most severe)."""
    return _SEVERITY_RANK[severity]


def type_order(risk_type: RiskType) -> int:
    """Return the declaration index of a risk type."""
    return _TYPE_ORDER[risk_type]


def classify_risk_score(score: float) -> RiskClassification:
    """Map a risk score to its classification using fixed thresholds.

    Args:
        score: Risk score in [0, 10]

    Returns:
        VERY_LOW (<= 2.0), LOW (<= 4.0), MODERATE (<= 6.0),
        HIGH (<= 8.0), otherwise VERY_HIGH

    Example:
        >>> classify_risk_score(3.0)
        <RiskClassification.LOW: 'LOW'>
    """
    if score <= 2.0:
        return RiskClassification.VERY_LOW
    if score <= 4.0:
        return RiskClassification.LOW
    if score <= 6.0:
        return RiskClassification.MODERATE
    if score <= 8.0:
        return RiskClassification.HIGH
    return RiskClassification.VERY_HIGH
