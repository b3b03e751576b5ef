"""AsyncClick CLI for contract risk analysis.

Provides user-facing commands:
- analyze: Run all detectors and print a scored summary or JSON
- check: Quick textual pre-scan without detectors
- info: Compiler version, size and function count of a source file
"""

import json
import logging
import sys

import asyncclick as click
import structlog

from riskscan.core.config import load_config
from riskscan.core.output import format_output
from riskscan.core.reporting import ReportGenerator, export_html
from riskscan.engine import (
    RiskEngine,
    SourceTooLargeError,
    UnsupportedSourceError,
    contract_metadata,
    quick_check,
    validate_size,
)
from riskscan.parser.source import source_fingerprint


def configure_logging(level: str) -> None:
    """Send structlog output to stderr, filtered at level."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def read_source(path: str, max_bytes: int) -> str:
    """Read and size-check a source file.

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not UTF-8
        SourceTooLargeError: If the file exceeds max_bytes
    """
    with open(path, encoding="utf-8") as f:
        source = f.read()
    validate_size(source, max_bytes)
    return source


@click.group()
@click.option("--log-level", default=None, help="Log level for stderr output (default: RISKSCAN_LOG_LEVEL)")
@click.pass_context
async def cli(ctx, log_level: str | None):
    """riskscan - Deterministic Smart Contract Risk Analyzer"""
    ctx.ensure_object(dict)
    config = load_config()
    if log_level:
        config = config.model_copy(update={"log_level": log_level.upper()})
    configure_logging(config.log_level)
    ctx.obj["config"] = config


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option("--report", "report_path", default=None, help="Write a markdown report to FILE")
@click.option("--html", "html_path", default=None, help="Write an HTML report to FILE")
@click.option("--strict", is_flag=True, help="Fail on input that does not look like Solidity")
@click.option("--parallel", is_flag=True, help="Run detectors concurrently")
@click.pass_context
async def analyze(
    ctx,
    path: str,
    as_json: bool,
    report_path: str | None,
    html_path: str | None,
    strict: bool,
    parallel: bool,
):
    """Analyze a Solidity source file for rug-pull and centralization risks.

    Examples:
        riskscan analyze Token.sol
        riskscan analyze Token.sol --json
        riskscan analyze Token.sol --report report.md --html report.html
    """
    config = ctx.obj["config"]
    strict = strict or config.strict_source_check
    parallel = parallel or config.parallel_detectors

    try:
        source = read_source(path, config.max_source_bytes)
    except (OSError, UnicodeDecodeError, SourceTooLargeError) as e:
        click.echo(f"[-] Cannot read {path}: {e}")
        ctx.exit(1)

    engine = RiskEngine(config=config)
    try:
        if parallel:
            result = await engine.analyze_async(source, strict=strict)
        else:
            result = engine.analyze(source, strict=strict)
    except UnsupportedSourceError as e:
        click.echo(f"[-] {e}: {path}")
        ctx.exit(1)

    fingerprint = source_fingerprint(source)

    if as_json:
        payload = {"fingerprint": fingerprint, **result.model_dump(mode="json")}
        click.echo(json.dumps(payload, indent=2))
    else:
        click.echo(f"[*] Analyzing: {path}")
        click.echo(format_output(result))

    if report_path or html_path:
        generator = ReportGenerator()
        markdown_report = generator.generate(result, contract_name=path, fingerprint=fingerprint)

        if report_path:
            try:
                with open(report_path, "w", encoding="utf-8") as f:
                    f.write(markdown_report)
            except OSError as e:
                click.echo(f"[-] Cannot write report {report_path}: {e}")
                ctx.exit(1)
            if not as_json:
                click.echo(f"[+] Report generated: {report_path}")

        if html_path:
            try:
                export_html(markdown_report, html_path)
            except OSError as e:
                click.echo(f"[-] Cannot write report {html_path}: {e}")
                ctx.exit(1)
            if not as_json:
                click.echo(f"[+] HTML report generated: {html_path}")


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_context
async def check(ctx, path: str):
    """Quick pre-scan for critical constructs without running detectors.

    Examples:
        riskscan check Token.sol
    """
    config = ctx.obj["config"]
    try:
        source = read_source(path, config.max_source_bytes)
    except (OSError, UnicodeDecodeError, SourceTooLargeError) as e:
        click.echo(f"[-] Cannot read {path}: {e}")
        ctx.exit(1)

    check_result = quick_check(source)
    click.echo(f"[+] Quick check: {path}")
    click.echo(f"    Valid source: {'yes' if check_result.is_valid else 'no'}")
    click.echo(f"    Has risks: {'yes' if check_result.has_risks else 'no'}")
    click.echo(f"    Estimated risk level: {check_result.estimated_risk_level}")


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_context
async def info(ctx, path: str):
    """Show compiler version, lines of code and function count.

    Examples:
        riskscan info Token.sol
    """
    config = ctx.obj["config"]
    try:
        source = read_source(path, config.max_source_bytes)
    except (OSError, UnicodeDecodeError, SourceTooLargeError) as e:
        click.echo(f"[-] Cannot read {path}: {e}")
        ctx.exit(1)

    metadata = contract_metadata(source)
    click.echo(f"[+] Contract: {path}")
    click.echo(f"    Compiler: {metadata.compiler_version or 'unknown'}")
    click.echo(f"    Lines of code: {metadata.lines_of_code}")
    click.echo(f"    Functions: {metadata.total_functions}")
    click.echo(f"    Fingerprint: {source_fingerprint(source)}")


if __name__ == "__main__":
    cli()
