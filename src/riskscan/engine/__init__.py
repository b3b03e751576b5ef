"""Analysis orchestration.

Provides:
- RiskEngine: Parse once, run detectors, score findings
- validate_size: Reject oversized input
- contract_metadata: Compiler version, lines of code and function count
- quick_check: Cheap textual pre-scan
"""

from .risk import (
    ContractMetadata,
    DetectorOutcome,
    QuickCheckResult,
    RiskEngine,
    SourceTooLargeError,
    UnsupportedSourceError,
    contract_metadata,
    quick_check,
    validate_size,
)

__all__ = [
    "ContractMetadata",
    "DetectorOutcome",
    "QuickCheckResult",
    "RiskEngine",
    "SourceTooLargeError",
    "UnsupportedSourceError",
    "contract_metadata",
    "quick_check",
    "validate_size",
]
