"""Report generator with Jinja2 templates.

Produces structured markdown risk reports from an analysis result, with
an executive summary, severity grouping and remediation guidance.
"""

from datetime import datetime, timezone
from pathlib import Path

import structlog
from jinja2 import Environment, FileSystemLoader

from riskscan.core.output import RiskDetectionResult, RiskFinding
from riskscan.core.scoring import group_by_severity, summary_stats
from riskscan.core.severity import RiskType, Severity

logger = structlog.get_logger()


REMEDIATION_GUIDANCE: dict[RiskType, str] = {
    RiskType.UNLIMITED_MINTING: (
        "Enforce a hard supply cap inside the mint function, for example "
        "`require(totalSupply() + amount <= MAX_SUPPLY)`."
    ),
    RiskType.OWNER_RESTRICTED_MINTING: (
        "Move minting authority to a multisig or timelock, or renounce it once "
        "the initial supply is distributed."
    ),
    RiskType.WITHDRAW_FUNCTION: (
        "Restrict withdrawals to user-owned balances, or route privileged "
        "withdrawals through a timelock."
    ),
    RiskType.EMERGENCY_WITHDRAWAL: (
        "Limit emergency paths to returning funds to their depositors and "
        "require multisig approval."
    ),
    RiskType.BALANCE_MANIPULATION: (
        "Remove privileged functions that write balances directly; balances "
        "should only change through transfer, mint and burn logic."
    ),
    RiskType.CENTRALIZED_OWNERSHIP: (
        "Split privileged roles, transfer ownership to a multisig and put "
        "sensitive functions behind a timelock."
    ),
    RiskType.PAUSABLE_CONTRACT: (
        "Document pause conditions, cap pause duration and hold the pauser "
        "role in a multisig."
    ),
    RiskType.OWNERSHIP_TRANSFER: (
        "Use a two-step transfer (Ownable2Step) so the new owner must accept."
    ),
    RiskType.DELEGATECALL_USAGE: (
        "Only delegatecall to fixed, audited implementation addresses and "
        "never to caller-supplied targets."
    ),
    RiskType.UUPS_PROXY: (
        "Protect _authorizeUpgrade with a multisig plus timelock and publish "
        "upgrade proposals in advance."
    ),
    RiskType.TRANSPARENT_PROXY: (
        "Hold the proxy admin in a multisig with a timelock and verify every "
        "new implementation."
    ),
    RiskType.SELFDESTRUCT: (
        "Remove selfdestruct; it is deprecated and lets the holder destroy "
        "the contract and sweep its balance."
    ),
    RiskType.TX_ORIGIN: (
        "Authenticate with msg.sender instead of tx.origin."
    ),
    RiskType.UNCHECKED_CALL: (
        "Capture the boolean result of every low-level call and revert on "
        "failure."
    ),
    RiskType.ADJUSTABLE_FEES: (
        "Enforce a hard maximum fee in the setter and delay changes with a "
        "timelock."
    ),
    RiskType.BLACKLIST_MODIFICATION: (
        "Remove the blacklist or govern it through a transparent, "
        "multisig-controlled process."
    ),
    RiskType.WHITELIST_MODIFICATION: (
        "Document whitelist criteria and restrict changes to a multisig."
    ),
    RiskType.MAX_TX_LIMIT: (
        "Enforce a minimum allowed transaction limit so the owner cannot "
        "freeze trading by setting it near zero."
    ),
}


class ReportGenerator:
    """Generate structured markdown risk reports.

    Produces reports with:
    - Executive summary with score, classification and finding counts
    - Findings grouped by severity (critical/high/medium/low)
    - Remediation guidance per risk type
    - Analysis coverage metadata
    """

    def __init__(self, template_dir: str | None = None):
        """Initialize report generator with Jinja2 templates.

        Args:
            template_dir: Path to template directory (defaults to ./templates/)
        """
        if template_dir is None:
            template_dir = str(Path(__file__).parent / "templates")
        self.env = Environment(loader=FileSystemLoader(template_dir))

        self.env.globals["render_finding"] = self._render_finding

    def generate(
        self,
        result: RiskDetectionResult,
        contract_name: str = "contract",
        fingerprint: str | None = None,
        generated_at: datetime | None = None,
    ) -> str:
        """Generate a complete markdown risk report.

        Args:
            result: Analysis result to report on
            contract_name: Display name of the analyzed source
            fingerprint: Source fingerprint to print in the header (optional)
            generated_at: Report timestamp (defaults to now, UTC)

        Returns:
            Markdown report string

        Example:
            >>> generator = ReportGenerator()
            >>> report = generator.generate(result, contract_name="Token.sol")
        """
        generated_at = generated_at or datetime.now(timezone.utc)
        groups = group_by_severity(result.findings)

        findings_by_severity = {
            severity.value.lower(): groups[severity] for severity in Severity
        }

        context = {
            "contract_name": contract_name,
            "fingerprint": fingerprint,
            "date": generated_at.strftime("%Y-%m-%d %H:%M UTC"),
            "result": result,
            "executive_summary": self._generate_executive_summary(result, contract_name),
            "findings_by_severity": findings_by_severity,
            "remediation_guidance": self._generate_remediation(result.findings),
            "stats": summary_stats(result.findings),
        }

        logger.debug("report_generated", contract=contract_name, findings=len(result.findings))
        template = self.env.get_template("risk_report.md.j2")
        return template.render(**context)

    def _generate_executive_summary(self, result: RiskDetectionResult, contract_name: str) -> str:
        if not result.findings:
            return (
                f"Automated risk analysis of **{contract_name}** completed with no "
                f"findings. Risk score **{result.risk_score}/10** "
                f"({result.classification.value})."
            )

        stats = summary_stats(result.findings)
        summary_parts = [
            f"Automated risk analysis of **{contract_name}** produced "
            f"**{stats['total']} finding{'s' if stats['total'] != 1 else ''}** for a risk score "
            f"of **{result.risk_score}/10** ({result.classification.value})."
        ]

        critical = stats["critical"]
        high = stats["high"]
        if critical > 0:
            summary_parts.append(
                f"**{critical} critical** issue{'s' if critical > 1 else ''} give privileged "
                "accounts direct control over funds or contract existence."
            )
        if high > 0:
            summary_parts.append(
                f"**{high} high severity** finding{'s' if high > 1 else ''} should be reviewed "
                "before interacting with the contract."
            )

        return " ".join(summary_parts)

    def _generate_remediation(self, findings: list[RiskFinding]) -> list[dict]:
        """One remediation entry per distinct risk type, in finding order."""
        seen: set[RiskType] = set()
        remediation_list = []

        for finding in findings:
            if finding.type in seen:
                continue
            seen.add(finding.type)
            remediation_list.append({
                "risk_type": finding.type.value,
                "severity": finding.severity.value,
                "recommendation": REMEDIATION_GUIDANCE[finding.type],
            })

        return remediation_list

    def _render_finding(self, finding: RiskFinding) -> str:
        """Render a single finding; used as a Jinja2 global."""
        template = self.env.get_template("finding.md.j2")
        return template.render(finding=finding)
