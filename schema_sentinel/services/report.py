"""
Drift report emitter.

Builds the aggregated DriftReport, persists it as
reports/drift/drift-report-{timestamp}.json and renders the text summary
printed at the end of a drift run.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Union

from ..schemas.drift import DriftReport, DriftResult

logger = logging.getLogger(__name__)


SUMMARY_WIDTH = 60


def build_report(results: Iterable[DriftResult], now: Optional[datetime] = None) -> DriftReport:
    """Aggregate results into a timestamped DriftReport."""
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    return DriftReport(timestamp=timestamp, results=list(results))


def report_filename(report: DriftReport) -> str:
    """
    File name for a report, safe on every filesystem.

    Example:
        >>> report_filename(DriftReport(timestamp="2026-02-22T10:00:00.5+00:00", results=[]))
        'drift-report-2026-02-22T10-00-00-5+00-00.json'
    """
    safe = report.timestamp.replace(":", "-").replace(".", "-")
    return f"drift-report-{safe}.json"


def write_report(report: DriftReport, report_dir: Union[str, Path]) -> Path:
    """
    Persist a report as JSON, creating the directory if needed.

    Args:
        report: The aggregated report
        report_dir: Output directory

    Returns:
        Path: Path of the written file
    """
    directory = Path(report_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / report_filename(report)
    path.write_text(report.model_dump_json(indent=2), encoding="utf-8")
    logger.info(f"Report saved to: {path}")
    return path


def format_summary(report: DriftReport) -> str:
    """Render the human-readable summary table."""
    rule = "-" * SUMMARY_WIDTH
    lines = [rule, "Drift Detection Summary", rule]
    for result in report.results:
        status = "DRIFT" if result.drifted else "OK"
        lines.append(f"[{status:>5}] {result.schema_name}")
        lines.extend(f"        {detail}" for detail in result.details)
    summary = report.summary
    lines.append(rule)
    lines.append(
        f"total={summary.total} drifted={summary.drifted} clean={summary.clean}"
    )
    return "\n".join(lines)


def exit_code(report: DriftReport) -> int:
    """Process exit status: 1 when any check drifted, 0 otherwise."""
    return 1 if report.has_drift else 0
