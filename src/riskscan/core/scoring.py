"""Deterministic risk scoring.

Aggregates findings into a capped risk score, a classification and a
confidence estimate, and puts findings into their canonical order.

Provides:
- calculate_risk_score: Capped, rounded sum of finding weights
- calculate_confidence: Coverage-based confidence estimate
- sort_by_severity: Canonical, execution-order independent ordering
- group_by_severity: Findings bucketed by severity label
- summary_stats: Per-severity counts and total weight
- build_result: Assemble a RiskDetectionResult
"""

from riskscan.core.output import DetectionMetadata, RiskDetectionResult, RiskFinding
from riskscan.core.severity import (
    Severity,
    classify_risk_score,
    severity_rank,
    type_order,
)

MAX_RISK_SCORE = 10.0
NEUTRAL_CONFIDENCE = 0.5


def calculate_risk_score(findings: list[RiskFinding]) -> float:
    """Sum every finding weight, rounded to one decimal and capped at 10.

    Repeated findings of the same type are not deduplicated; each
    occurrence adds its weight.

    Args:
        findings: Findings from all detectors

    Returns:
        Risk score in [0.0, 10.0]

    Example:
        >>> calculate_risk_score([])
        0.0
    """
    total = sum(finding.weight for finding in findings)
    return min(MAX_RISK_SCORE, round(total, 1))


def calculate_confidence(
    total_functions: int,
    successfully_parsed: int,
    patterns_checked: int,
    patterns_matched: int,
) -> float:
    """Estimate how complete the analysis was.

    Weighted blend of parse success (0.4), pattern coverage (0.3) and
    structural completeness (0.3). Falls back to 0.5 when there are no
    functions or no patterns were checked.

    Args:
        total_functions: Functions extracted by the parser
        successfully_parsed: Functions whose bodies were fully matched
        patterns_checked: Patterns evaluated by completed detectors
        patterns_matched: Patterns that produced findings

    Returns:
        Confidence in [0.0, 1.0], two decimals
    """
    if total_functions == 0 or patterns_checked == 0:
        return NEUTRAL_CONFIDENCE

    parsing_confidence = successfully_parsed / total_functions
    pattern_confidence = patterns_matched / patterns_checked
    completeness = min(1.0, successfully_parsed / max(5, total_functions))

    confidence = (
        parsing_confidence * 0.4
        + pattern_confidence * 0.3
        + completeness * 0.3
    )
    return round(min(1.0, max(0.0, confidence)), 2)


def sort_by_severity(findings: list[RiskFinding]) -> list[RiskFinding]:
    """Order findings CRITICAL -> LOW.

    The sort is stable and breaks severity ties by risk type declaration
    order, which matches each detector's own emission order. The result
    therefore depends only on the findings, not on detector run order.
    """
    return sorted(
        findings,
        key=lambda f: (severity_rank(f.severity), type_order(f.type)),
    )


def group_by_severity(findings: list[RiskFinding]) -> dict[Severity, list[RiskFinding]]:
    """Bucket findings by severity, keeping their relative order."""
    groups: dict[Severity, list[RiskFinding]] = {severity: [] for severity in Severity}
    for finding in findings:
        groups[finding.severity].append(finding)
    return groups


def summary_stats(findings: list[RiskFinding]) -> dict[str, float | int]:
    """Count findings per severity and total their weight."""
    groups = group_by_severity(findings)
    return {
        "total": len(findings),
        "critical": len(groups[Severity.CRITICAL]),
        "high": len(groups[Severity.HIGH]),
        "medium": len(groups[Severity.MEDIUM]),
        "low": len(groups[Severity.LOW]),
        "total_weight": round(sum(f.weight for f in findings), 1),
    }


def build_result(findings: list[RiskFinding], metadata: DetectionMetadata) -> RiskDetectionResult:
    """Score, classify and order findings into a RiskDetectionResult.

    Args:
        findings: Unordered findings from all detectors
        metadata: Coverage counters for the run

    Returns:
        Complete RiskDetectionResult
    """
    risk_score = calculate_risk_score(findings)
    return RiskDetectionResult(
        findings=sort_by_severity(findings),
        risk_score=risk_score,
        classification=classify_risk_score(risk_score),
        confidence=calculate_confidence(
            metadata.total_functions,
            metadata.successfully_parsed,
            metadata.patterns_checked,
            metadata.patterns_matched,
        ),
        metadata=metadata,
    )
