"""RiskEngine for orchestrating parsing, detection and scoring.

Parses the source once, runs every detector over the shared structural
model, isolates detector failures and scores the combined findings. The
engine is rule-based only; nothing here calls a model or the network.
"""

import asyncio
import re
from dataclasses import dataclass, field
from typing import Iterable, Literal

import structlog
from pydantic import BaseModel

from riskscan.core.config import Config, load_config
from riskscan.core.output import DetectionMetadata, RiskDetectionResult, RiskFinding
from riskscan.core.scoring import build_result
from riskscan.detectors import Detector, default_detectors
from riskscan.parser.source import (
    StructuralModel,
    count_lines_of_code,
    extract_compiler_version,
    looks_like_supported_source,
    parse,
    source_fingerprint,
)

logger = structlog.get_logger()

QUICK_CHECK_CRITICAL_PATTERNS = ("selfdestruct", "delegatecall", "tx.origin")
_MINT_DECLARATION_RE = re.compile(r"function\s+mint", re.IGNORECASE)


class UnsupportedSourceError(ValueError):
    """Input does not look like Solidity and strict checking is on."""


class SourceTooLargeError(ValueError):
    """Input exceeds the configured size limit."""


@dataclass
class DetectorOutcome:
    """Result of running one detector."""
    detector: str
    pattern_count: int
    findings: list[RiskFinding] = field(default_factory=list)
    succeeded: bool = True

    @property
    def patterns_matched(self) -> int:
        return min(self.pattern_count, len({f.type for f in self.findings}))


class ContractMetadata(BaseModel):
    """Descriptive facts about a source file."""
    compiler_version: str | None
    lines_of_code: int
    total_functions: int


class QuickCheckResult(BaseModel):
    """Cheap pre-scan without running the detectors."""
    is_valid: bool
    has_risks: bool
    estimated_risk_level: Literal["LOW", "MEDIUM", "HIGH"]


class RiskEngine:
    """Deterministic risk analysis orchestrator.

    Features:
    - Single parse shared by all detectors
    - Per-detector failure isolation (logged, zero findings)
    - Optional concurrent detector dispatch with a join before scoring
    - Canonical output ordering independent of detector run order
    """

    def __init__(
        self,
        detectors: Iterable[Detector] | None = None,
        config: Config | None = None,
    ):
        """Initialize engine.

        Args:
            detectors: Detectors to run (default: all six built-ins)
            config: Analyzer configuration (default: from environment)
        """
        self.config = config or load_config()
        self.detectors = list(detectors) if detectors is not None else default_detectors()
        self.log = logger.bind(engine=self.__class__.__name__)

    def analyze(self, source: str, strict: bool | None = None) -> RiskDetectionResult:
        """Analyze contract source and return a scored result.

        Args:
            source: Contract source text
            strict: Raise on unsupported input (default: config.strict_source_check)

        Returns:
            RiskDetectionResult with findings ordered by severity

        Raises:
            UnsupportedSourceError: If strict and the input is not Solidity-like

        Example:
            >>> result = RiskEngine().analyze(code)
            >>> print(result.risk_score, result.classification.value)
        """
        model = self._prepare(source, strict)
        outcomes = [self._run_detector(detector, model) for detector in self.detectors]
        return self._finish(model, outcomes)

    async def analyze_async(self, source: str, strict: bool | None = None) -> RiskDetectionResult:
        """Analyze with detectors dispatched to worker threads.

        Produces the same result as analyze(); scoring waits for every
        detector to finish.
        """
        model = self._prepare(source, strict)
        outcomes = await asyncio.gather(
            *(asyncio.to_thread(self._run_detector, detector, model) for detector in self.detectors)
        )
        return self._finish(model, list(outcomes))

    def _prepare(self, source: str, strict: bool | None) -> StructuralModel:
        strict = self.config.strict_source_check if strict is None else strict
        fingerprint = source_fingerprint(source)
        self.log.info("analysis_start", fingerprint=fingerprint, size=len(source))

        if not looks_like_supported_source(source):
            self.log.warning("unsupported_source", fingerprint=fingerprint, strict=strict)
            if strict:
                raise UnsupportedSourceError("Input does not appear to be Solidity source")

        return parse(source)

    def _run_detector(self, detector: Detector, model: StructuralModel) -> DetectorOutcome:
        try:
            findings = detector.detect(model)
        except Exception as e:
            self.log.error("detector_failed", detector=detector.name, error=str(e), exc_info=True)
            return DetectorOutcome(
                detector=detector.name,
                pattern_count=detector.pattern_count,
                succeeded=False,
            )

        self.log.debug("detector_complete", detector=detector.name, findings=len(findings))
        return DetectorOutcome(
            detector=detector.name,
            pattern_count=detector.pattern_count,
            findings=list(findings),
        )

    def _finish(self, model: StructuralModel, outcomes: list[DetectorOutcome]) -> RiskDetectionResult:
        completed = [o for o in outcomes if o.succeeded]
        findings = [finding for outcome in completed for finding in outcome.findings]

        metadata = DetectionMetadata(
            total_functions=len(model.functions),
            successfully_parsed=sum(1 for f in model.functions if f.terminated),
            patterns_checked=sum(o.pattern_count for o in completed),
            patterns_matched=sum(o.patterns_matched for o in completed),
        )
        result = build_result(findings, metadata)

        self.log.info(
            "analysis_complete",
            findings=len(result.findings),
            risk_score=result.risk_score,
            classification=result.classification.value,
            failed_detectors=[o.detector for o in outcomes if not o.succeeded],
        )
        return result


def validate_size(source: str, max_bytes: int = 1048576) -> None:
    """Reject sources larger than max_bytes (UTF-8 encoded).

    Raises:
        SourceTooLargeError: If the source is too large
    """
    size = len(source.encode("utf-8"))
    if size > max_bytes:
        raise SourceTooLargeError(f"Contract exceeds maximum size of {max_bytes} bytes")


def contract_metadata(source: str) -> ContractMetadata:
    """Compiler version, lines of code and function count of a source."""
    return ContractMetadata(
        compiler_version=extract_compiler_version(source),
        lines_of_code=count_lines_of_code(source),
        total_functions=len(parse(source).functions),
    )


def quick_check(source: str) -> QuickCheckResult:
    """Cheap textual pre-scan, without parsing or detectors.

    HIGH when a critical construct appears, MEDIUM for owner-gated code
    declaring a mint function, otherwise LOW.
    """
    has_critical = any(pattern in source for pattern in QUICK_CHECK_CRITICAL_PATTERNS)
    has_owner_control = "onlyOwner" in source
    has_minting = _MINT_DECLARATION_RE.search(source) is not None

    if has_critical:
        level = "HIGH"
    elif has_owner_control and has_minting:
        level = "MEDIUM"
    else:
        level = "LOW"

    return QuickCheckResult(
        is_valid=looks_like_supported_source(source),
        has_risks=has_critical or has_owner_control,
        estimated_risk_level=level,
    )
