"""Core analysis models and scoring.

Provides:
- Risk type table with fixed severities and weights
- Finding and result models with console formatting
- Deterministic scoring, classification and confidence
- Environment-backed configuration
"""

from .config import Config, load_config
from .output import DetectionMetadata, RiskDetectionResult, RiskFinding, format_finding, format_output
from .scoring import build_result, calculate_confidence, calculate_risk_score, sort_by_severity
from .severity import RISK_WEIGHTS, RiskClassification, RiskType, Severity, classify_risk_score

__all__ = [
    "Config",
    "load_config",
    "DetectionMetadata",
    "RiskDetectionResult",
    "RiskFinding",
    "format_finding",
    "format_output",
    "build_result",
    "calculate_confidence",
    "calculate_risk_score",
    "sort_by_severity",
    "RISK_WEIGHTS",
    "RiskClassification",
    "RiskType",
    "Severity",
    "classify_risk_score",
]
