from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path

from convention_checker.models import CheckReport, CheckSummary


CSV_FIELDS = ["file_path", "line", "column", "severity", "rule_id", "message"]


def render_text(report: CheckReport) -> str:
    lines = [
        f"{item.location.file_path}:{item.location.line}:{item.location.column}: "
        f"{item.severity.value} [{item.rule_id}] {item.message}"
        for item in report.findings
    ]
    status = "PASSED" if report.passed else "FAILED"
    lines.append(
        f"{status}: {len(report.findings)} findings "
        f"({report.error_count} errors, {report.warning_count} warnings)"
    )
    return "\n".join(lines)


def write_reports(
    report: CheckReport,
    output_dir: str | Path,
    summary: CheckSummary | None = None,
) -> dict:
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    summary_json = out_dir / "check_summary.json"
    findings_csv = out_dir / "findings.csv"

    payload = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "summary": summary.to_dict() if summary is not None else None,
        "report": report.to_dict(),
        "files": {
            "check_summary": str(summary_json.resolve()),
            "findings": str(findings_csv.resolve()),
        },
    }

    _write_json(summary_json, payload)
    _write_csv(findings_csv, [item.to_dict() for item in report.findings])
    return payload


def _write_json(path: Path, payload: dict) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=True)


def _write_csv(path: Path, rows: list[dict]) -> None:
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
