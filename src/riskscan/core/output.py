"""Finding and result models with console formatting.

Provides the structured output of an analysis run. A finding's severity
and weight are computed from its type and cannot be set independently.

Provides:
- RiskFinding: Single typed risk observation
- DetectionMetadata: Counters describing analysis coverage
- RiskDetectionResult: Scored, classified and ordered findings
- format_output: Format a result as a console summary
- format_finding: Format a single finding
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field

from riskscan.core.severity import (
    RISK_WEIGHTS,
    RiskClassification,
    RiskType,
    Severity,
)

MAX_SNIPPET_LENGTH = 500


class RiskFinding(BaseModel):
    """Typed risk observation emitted by a detector.

    Attributes:
        type: Risk type (closed enum)
        code_snippet: Cleaned source excerpt (max 500 characters)
        line_number: 1-indexed source line, 0 when unknown
        machine_reason: Machine-readable explanation of the match
        function_name: Function (or comma-separated functions) involved
        modifier_name: Comma-separated modifiers on the function, if any
    """

    model_config = ConfigDict(frozen=True)

    type: RiskType
    code_snippet: str = Field(max_length=MAX_SNIPPET_LENGTH)
    line_number: int = Field(ge=0)
    machine_reason: str
    function_name: str | None = None
    modifier_name: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def severity(self) -> Severity:
        return RISK_WEIGHTS[self.type].severity

    @computed_field  # type: ignore[prop-decorator]
    @property
    def weight(self) -> float:
        return RISK_WEIGHTS[self.type].weight


class DetectionMetadata(BaseModel):
    """Coverage counters for one analysis run."""

    model_config = ConfigDict(frozen=True)

    total_functions: int = Field(default=0, ge=0)
    successfully_parsed: int = Field(default=0, ge=0)
    patterns_checked: int = Field(default=0, ge=0)
    patterns_matched: int = Field(default=0, ge=0)


class RiskDetectionResult(BaseModel):
    """Outcome of a full analysis.

    Attributes:
        findings: Findings ordered by severity (CRITICAL first)
        risk_score: Capped sum of finding weights, 0.0 - 10.0
        classification: Label derived from risk_score
        confidence: Analysis completeness estimate, 0.0 - 1.0
        metadata: Coverage counters
    """

    model_config = ConfigDict(frozen=True)

    findings: list[RiskFinding] = Field(default_factory=list)
    risk_score: float = Field(ge=0.0, le=10.0)
    classification: RiskClassification
    confidence: float = Field(ge=0.0, le=1.0)
    metadata: DetectionMetadata = Field(default_factory=DetectionMetadata)


def format_finding(index: int, finding: RiskFinding) -> str:
    """Format one finding as an indented console block.

    Args:
        index: 1-based position in the result
        finding: Finding to format

    Returns:
        Multi-line string
    """
    location = f"line {finding.line_number}" if finding.line_number else "line unknown"
    header = f"  {index}. [{finding.severity.value}] {finding.type.value} (+{finding.weight}) @ {location}"
    lines = [header]
    if finding.function_name:
        lines.append(f"     function: {finding.function_name}")
    if finding.modifier_name:
        lines.append(f"     modifiers: {finding.modifier_name}")
    lines.append(f"     reason: {finding.machine_reason}")
    for snippet_line in finding.code_snippet.splitlines():
        lines.append(f"     | {snippet_line}")
    return "\n".join(lines)


def format_output(result: RiskDetectionResult) -> str:
    """Format an analysis result for the console.

    Args:
        result: The result to format

    Returns:
        Formatted string with score header and numbered findings
    """
    output = []
    output.append(f"{'=' * 60}")
    output.append(
        f"Risk score: {result.risk_score}/10 | Classification: {result.classification.value}"
    )
    output.append(f"Confidence: {result.confidence:.2f} | Findings: {len(result.findings)}")
    meta = result.metadata
    output.append(
        f"Functions: {meta.successfully_parsed}/{meta.total_functions} parsed | "
        f"Patterns: {meta.patterns_matched}/{meta.patterns_checked} matched"
    )
    output.append(f"{'=' * 60}")

    if result.findings:
        output.append("Findings:")
        for idx, finding in enumerate(result.findings, 1):
            output.append(format_finding(idx, finding))
    else:
        output.append("No risks detected.")

    output.append(f"{'=' * 60}")
    return "\n".join(output)
