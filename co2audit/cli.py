"""CLI entrypoint for co2audit."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .artifacts import parse_artifact_arg


def _configure_logging(level: str) -> None:
    from rich.console import Console
    from rich.logging import RichHandler

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _parse_thresholds(values: tuple[str, ...]) -> dict[str, float]:
    thresholds: dict[str, float] = {}
    for value in values:
        category, sep, budget = value.partition("=")
        if not sep or not category.strip():
            raise click.BadParameter(f"Expected CATEGORY=BUDGET, got '{value}'", param_hint="--threshold")
        try:
            thresholds[category.strip()] = float(budget)
        except ValueError:
            raise click.BadParameter(f"Budget in '{value}' is not a number", param_hint="--threshold")
    return thresholds


def _parse_artifacts(values: tuple[str, ...]) -> list[tuple[str, int]]:
    artifacts = []
    for value in values:
        try:
            artifacts.append(parse_artifact_arg(value))
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--artifact")
    return artifacts


@click.group()
@click.version_option(__version__, prog_name="co2audit")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    show_default=True,
    help="Diagnostic log level (logs go to stderr)",
)
def cli(log_level: str) -> None:
    """co2audit - Estimate, grade and gate the CO2 cost of build artifacts."""
    _configure_logging(log_level)


@cli.command()
@click.argument(
    "build_dir",
    required=False,
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    "--artifact",
    "artifact_specs",
    multiple=True,
    metavar="NAME=SIZE",
    help="Add an artifact by name and byte size (repeatable)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: co2audit.toml / co2audit.yml / [tool.co2audit] in ./pyproject.toml)",
)
@click.option(
    "--fail-threshold",
    type=click.Choice(["A", "B", "C", "D", "E", "F"]),
    default=None,
    help="Fail the build at this grade or worse (default: F)",
)
@click.option(
    "--threshold",
    "threshold_specs",
    multiple=True,
    metavar="CATEGORY=BUDGET",
    help="Per-file-type budget in grams, e.g. --threshold .js=0.05 (repeatable)",
)
@click.option(
    "--estimator",
    type=str,
    default=None,
    help="Emission model (1byte, linear)",
)
@click.option(
    "--report-dir",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Directory for co2-report.json/.csv (default: BUILD_DIR)",
)
@click.option(
    "--no-reports",
    is_flag=True,
    help="Do not write report files",
)
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output the report as JSON on stdout",
)
def audit(
    build_dir: Path | None,
    artifact_specs: tuple[str, ...],
    config_path: Path | None,
    fail_threshold: str | None,
    threshold_specs: tuple[str, ...],
    estimator: str | None,
    report_dir: Path | None,
    no_reports: bool,
    output_json: bool,
) -> None:
    """Account CO2 emissions of a build's output and apply the gate.

    Exits 1 when the overall grade is at or beyond the fail threshold,
    2 on configuration or input errors.

    Examples:

        co2audit audit dist/

        co2audit audit dist/ --fail-threshold D --threshold .js=0.05

        co2audit audit --artifact bundle.js=2097152 --no-reports
    """
    from .commands.audit_cmd import run_audit

    if build_dir is None and not artifact_specs:
        raise click.UsageError("Pass a BUILD_DIR or at least one --artifact NAME=SIZE.")

    exit_code = run_audit(
        build_dir,
        artifacts=_parse_artifacts(artifact_specs),
        config_path=config_path,
        fail_threshold=fail_threshold,
        thresholds=_parse_thresholds(threshold_specs),
        estimator=estimator,
        report_dir=report_dir,
        write_reports=not no_reports,
        output_json=output_json,
    )
    sys.exit(exit_code)


@cli.command()
def grades() -> None:
    """Show the grade bands (grams CO2 per megabyte)."""
    from .commands.grades_cmd import run_grades

    sys.exit(run_grades())


# Lets "-0.5" through as the argument rather than an unknown option.
@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("intensity", type=float)
def grade(intensity: float) -> None:
    """Show the grade for an INTENSITY in grams CO2 per megabyte.

    Negative values are reported as invalid (exit code 1).
    """
    from .commands.grades_cmd import run_grade

    sys.exit(run_grade(intensity))


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
