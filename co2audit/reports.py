"""
Report rendering: JSON document, CSV table, and rich console output.

Per-artifact and total emissions are rendered with six decimal places of
grams; the CSV ends with a single TOTAL row carrying the aggregate figures.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .artifacts import REPORT_FILENAMES
from .gate import GateResult
from .grading import Grade

logger = logging.getLogger(__name__)

JSON_REPORT_NAME, CSV_REPORT_NAME = REPORT_FILENAMES
CSV_HEADER = ("file", "size_bytes", "co2_grams", "grade")

GRADE_STYLES = {
    Grade.A: "green",
    Grade.B: "green",
    Grade.C: "yellow",
    Grade.D: "dark_orange",
    Grade.E: "red",
    Grade.F: "bold red",
}


def format_grams(value: float) -> str:
    return f"{value:.6f}"


def report_to_dict(result: GateResult) -> dict[str, Any]:
    """Convert a gate result to a JSON-serializable dict."""
    report = result.report
    return {
        "total_files": report.artifact_count,
        "total_size_bytes": report.total_size_bytes,
        "total_co2_grams": format_grams(report.total_raw_emission),
        "aggregate_intensity": report.aggregate_intensity,
        "aggregate_grade": report.aggregate_grade.value,
        "grade_label": report.aggregate_grade.label,
        "fail_threshold": result.fail_threshold.value,
        "passed": result.passed,
        "files": [
            {
                "file": m.name,
                "size_bytes": m.size_bytes,
                "co2_grams": format_grams(m.raw_emission),
                "grade": m.grade.value,
            }
            for m in report.artifacts
        ],
        "violations": [
            {
                "file": v.name,
                "co2_grams": format_grams(v.raw_emission),
                "budget_grams": format_grams(v.budget),
                "grade": v.grade.value,
            }
            for v in report.violations
        ],
    }


def render_json(result: GateResult) -> str:
    return json.dumps(report_to_dict(result), indent=2)


def render_csv(result: GateResult) -> str:
    report = result.report
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for m in report.artifacts:
        writer.writerow([m.name, m.size_bytes, format_grams(m.raw_emission), m.grade.value])
    writer.writerow(
        [
            "TOTAL",
            report.total_size_bytes,
            format_grams(report.total_raw_emission),
            report.aggregate_grade.value,
        ]
    )
    return buf.getvalue()


def write_json_report(result: GateResult, out_dir: Path) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / JSON_REPORT_NAME
    path.write_text(render_json(result) + "\n", encoding="utf-8")
    logger.info("Wrote JSON report to %s", path)
    return path


def write_csv_report(result: GateResult, out_dir: Path) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / CSV_REPORT_NAME
    path.write_text(render_csv(result), encoding="utf-8")
    logger.info("Wrote CSV report to %s", path)
    return path


def _grade_cell(grade: Grade) -> str:
    style = GRADE_STYLES[grade]
    return f"[{style}]{grade.label}[/{style}]"


def print_report(console: Console, result: GateResult) -> None:
    """Print the artifact table, totals, violations and verdict."""
    report = result.report

    table = Table(title="CO2 Emission Report")
    table.add_column("File", style="cyan")
    table.add_column("Size (bytes)", justify="right")
    table.add_column("CO2 (g)", justify="right")
    table.add_column("Grade")
    for m in report.artifacts:
        table.add_row(escape(m.name), str(m.size_bytes), format_grams(m.raw_emission), _grade_cell(m.grade))
    console.print(table)

    console.print(f"Total build size: {report.total_size_bytes} bytes")
    console.print(f"Total CO2 emissions: {format_grams(report.total_raw_emission)} g")
    console.print(f"Overall build grade: {_grade_cell(report.aggregate_grade)}")

    if report.violations:
        console.print()
        console.print("[yellow]⚠ Some files exceeded CO2 emission thresholds:[/yellow]")
        vtable = Table()
        vtable.add_column("File", style="cyan")
        vtable.add_column("CO2 (g)", justify="right")
        vtable.add_column("Budget (g)", justify="right")
        vtable.add_column("Grade")
        for v in report.violations:
            vtable.add_row(escape(v.name), format_grams(v.raw_emission), format_grams(v.budget), _grade_cell(v.grade))
        console.print(vtable)

    console.print()
    if result.failed:
        console.print(f"✗ {result.message}", style="bold red")
    else:
        console.print(f"✓ {result.message}", style="bold green")
