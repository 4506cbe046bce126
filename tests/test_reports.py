"""Tests for JSON, CSV and console reports."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path

from rich.console import Console

from co2audit.estimators import BYTES_PER_MEGABYTE
from co2audit.gate import GateConfig, audit_build
from co2audit.reports import (
    CSV_REPORT_NAME,
    JSON_REPORT_NAME,
    print_report,
    render_csv,
    report_to_dict,
    write_csv_report,
    write_json_report,
)

MB = BYTES_PER_MEGABYTE


def _result(table_estimator, fail_threshold: str = "F"):
    config = GateConfig.create(fail_threshold=fail_threshold, thresholds={".png": 5.0})
    estimator = table_estimator({0: 0.0, 10 * MB: 12.0, 2 * MB: 0.2})
    return audit_build(
        [("b.png", 10 * MB), ("a.css", 0), ("bundle.js", 2 * MB)],
        config,
        estimator=estimator,
    )


def test_report_dict_shape(table_estimator):
    """Test the JSON report fields and formatting."""
    data = report_to_dict(_result(table_estimator))

    assert data["total_files"] == 3
    assert data["total_size_bytes"] == 12 * MB
    assert data["total_co2_grams"] == "12.200000"
    assert data["aggregate_grade"] == "F"
    assert data["grade_label"] == "F (Extremely High)"
    assert data["fail_threshold"] == "F"
    assert data["passed"] is False
    assert [f["file"] for f in data["files"]] == ["b.png", "a.css", "bundle.js"]
    assert data["files"][2] == {"file": "bundle.js", "size_bytes": 2 * MB, "co2_grams": "0.200000", "grade": "B"}
    assert data["violations"] == [
        {"file": "b.png", "co2_grams": "12.000000", "budget_grams": "5.000000", "grade": "F"}
    ]
    json.dumps(data)


def test_csv_has_trailing_total_row(table_estimator):
    """Test CSV rows follow input order and end with TOTAL."""
    rows = list(csv.reader(io.StringIO(render_csv(_result(table_estimator)))))

    assert rows[0] == ["file", "size_bytes", "co2_grams", "grade"]
    assert rows[1] == ["b.png", str(10 * MB), "12.000000", "F"]
    assert rows[2] == ["a.css", "0", "0.000000", "A"]
    assert rows[3] == ["bundle.js", str(2 * MB), "0.200000", "B"]
    assert rows[-1] == ["TOTAL", str(12 * MB), "12.200000", "F"]
    assert len(rows) == 5


def test_csv_for_empty_build():
    """Test the CSV of an empty build is header plus TOTAL."""
    rows = list(csv.reader(io.StringIO(render_csv(audit_build([], GateConfig())))))
    assert rows == [["file", "size_bytes", "co2_grams", "grade"], ["TOTAL", "0", "0.000000", "A"]]


def test_write_reports(tmp_path: Path, table_estimator):
    """Test report files are written under their fixed names."""
    result = _result(table_estimator)
    out = tmp_path / "reports"

    json_path = write_json_report(result, out)
    csv_path = write_csv_report(result, out)

    assert json_path == out / JSON_REPORT_NAME
    assert csv_path == out / CSV_REPORT_NAME
    assert json.loads(json_path.read_text(encoding="utf-8"))["aggregate_grade"] == "F"
    assert csv_path.read_text(encoding="utf-8").splitlines()[-1].startswith("TOTAL,")


def test_print_report(table_estimator):
    """Test console output for a failing build with violations."""
    console = Console(record=True, width=120)
    print_report(console, _result(table_estimator))
    text = console.export_text()

    assert "CO2 Emission Report" in text
    assert "bundle.js" in text
    assert "exceeded CO2 emission thresholds" in text
    assert "Build failed due to high CO2 emissions. Grade: F" in text


def test_print_report_pass(table_estimator):
    """Test console output for a passing build."""
    console = Console(record=True, width=120)
    result = audit_build([("bundle.js", 2 * MB)], GateConfig.create(fail_threshold="D"), estimator=table_estimator({2 * MB: 0.2}))
    print_report(console, result)
    text = console.export_text()

    assert "Build passed. Grade: B" in text
    assert "exceeded" not in text


def test_print_report_escapes_markup_in_names(table_estimator):
    """Test artifact names with brackets print literally."""
    console = Console(record=True, width=120)
    result = audit_build([("pages/[id].js", 10)], estimator=table_estimator({10: 0.0}))
    print_report(console, result)
    assert "pages/[id].js" in console.export_text()
