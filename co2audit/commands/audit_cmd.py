"""Audit command - account a build's output and apply the CO2 gate."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from ..artifacts import enumerate_artifacts, report_excludes
from ..config import load_config, merge_overrides
from ..errors import Co2AuditError
from ..gate import audit_build
from ..reports import print_report, render_json, write_csv_report, write_json_report

EXIT_OK = 0
EXIT_GATE_FAILED = 1
EXIT_ERROR = 2


def run_audit(
    build_dir: Path | None,
    *,
    artifacts: list[tuple[str, int]] | None = None,
    config_path: Path | None = None,
    fail_threshold: str | None = None,
    thresholds: dict[str, float] | None = None,
    estimator: str | None = None,
    report_dir: Path | None = None,
    write_reports: bool = True,
    output_json: bool = False,
    cwd: Path | None = None,
) -> int:
    """Run the audit command.

    Args:
        build_dir: Build output directory to enumerate (None to use `artifacts` only)
        artifacts: Explicit (name, size) pairs, appended after enumerated files
        config_path: Explicit config file (default: discovered in cwd)
        fail_threshold: Override the configured failure floor
        thresholds: Per-category budget overrides
        estimator: Override the configured estimator model
        report_dir: Where to write co2-report.json/.csv (default: build_dir)
        write_reports: Write report files at all
        output_json: Print the JSON report on stdout instead of tables
        cwd: Directory to discover config in (default: process cwd)

    Returns:
        Exit code (0 = pass, 1 = gate failed, 2 = configuration, input or report write error)
    """
    console = Console(stderr=True)

    try:
        config = load_config(config_path, cwd=cwd)
        config = merge_overrides(
            config,
            fail_threshold=fail_threshold,
            thresholds=thresholds,
            estimator=estimator,
        )

        snapshot: list[tuple[str, int]] = []
        if build_dir is not None:
            console.print(f"Scanning build output in {build_dir}...", style="dim")
            snapshot.extend(enumerate_artifacts(build_dir, exclude=report_excludes(build_dir, report_dir)))
        snapshot.extend(artifacts or [])

        result = audit_build(snapshot, config)
    except Co2AuditError as e:
        console.print(f"Error: {e}", style="bold red", soft_wrap=True, markup=False)
        return EXIT_ERROR

    if output_json:
        print(render_json(result))
    else:
        print_report(console, result)

    out_dir = report_dir if report_dir is not None else build_dir
    if write_reports and out_dir is not None:
        try:
            json_path = write_json_report(result, out_dir)
            csv_path = write_csv_report(result, out_dir)
        except OSError as e:
            console.print(
                f"Error: could not write reports to {out_dir}: {e}",
                style="bold red",
                soft_wrap=True,
                markup=False,
            )
            return EXIT_ERROR
        console.print(f"Wrote reports to {json_path} and {csv_path}", style="green", soft_wrap=True, markup=False)

    return EXIT_GATE_FAILED if result.failed else EXIT_OK
