"""Grade scale commands."""

from __future__ import annotations

import math

from rich.console import Console
from rich.table import Table

from ..grading import GRADE_BANDS, GRADE_ORDER, band_bounds, grade_for_intensity
from ..reports import GRADE_STYLES


def _format_bound(value: float) -> str:
    return "∞" if math.isinf(value) else f"{value:.2f}"


def run_grades() -> int:
    """Print the grade bands."""
    console = Console()

    table = Table(title="Grade scale (g CO2 per MB)")
    table.add_column("Grade")
    table.add_column("Above", justify="right")
    table.add_column("Up to (inclusive)", justify="right")
    for grade in GRADE_ORDER:
        lower, upper = band_bounds(grade)
        style = GRADE_STYLES[grade]
        table.add_row(f"[{style}]{grade.label}[/{style}]", _format_bound(lower), _format_bound(upper))
    console.print(table)
    console.print(f"{len(GRADE_BANDS)} bands; boundary values belong to the better grade.", style="dim")
    return 0


def run_grade(intensity: float) -> int:
    """Print the grade for a single intensity value.

    Returns:
        Exit code (0 = success, 1 = invalid intensity)
    """
    console = Console()
    try:
        grade = grade_for_intensity(intensity)
    except ValueError as e:
        console.print(str(e), style="bold red")
        return 1
    console.print(grade.label, style=GRADE_STYLES[grade])
    return 0
