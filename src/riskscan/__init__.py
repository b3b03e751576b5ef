"""riskscan - deterministic smart contract risk analysis.

Parses Solidity source into a lightweight structural model, runs six
rule-based detectors over it and scores the findings on a 0-10 scale.

Example:
    >>> from riskscan import RiskEngine
    >>> result = RiskEngine().analyze(source)
    >>> result.classification
"""

from riskscan.core.output import RiskDetectionResult, RiskFinding
from riskscan.core.severity import RiskClassification, RiskType, Severity
from riskscan.engine import RiskEngine, SourceTooLargeError, UnsupportedSourceError

__version__ = "0.1.0"

__all__ = [
    "RiskDetectionResult",
    "RiskFinding",
    "RiskClassification",
    "RiskType",
    "Severity",
    "RiskEngine",
    "SourceTooLargeError",
    "UnsupportedSourceError",
    "__version__",
]
