"""
Grade scale for megabyte-normalized emission intensity.

Grades are a pure ordinal: A is best, F is worst. Every "worse than"
comparison in the package goes through `Grade.rank`; the decorated labels
below are for display only.
"""

from __future__ import annotations

import math
from enum import Enum
from functools import total_ordering

from .errors import ConfigurationError


@total_ordering
class Grade(Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"

    @property
    def rank(self) -> int:
        return GRADE_ORDER.index(self)

    @property
    def label(self) -> str:
        return f"{self.value} ({GRADE_DESCRIPTIONS[self]})"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Grade):
            return NotImplemented
        return self.rank < other.rank

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "Grade | str") -> "Grade":
        """Resolve a configured grade. Only the bare letters A-F are accepted."""
        if isinstance(value, Grade):
            return value
        if isinstance(value, str) and value in cls.__members__:
            return cls[value]
        allowed = ", ".join(g.value for g in GRADE_ORDER)
        raise ConfigurationError(f"Invalid grade {value!r}; expected one of: {allowed}")


GRADE_ORDER: tuple[Grade, ...] = (Grade.A, Grade.B, Grade.C, Grade.D, Grade.E, Grade.F)

GRADE_DESCRIPTIONS: dict[Grade, str] = {
    Grade.A: "Excellent",
    Grade.B: "Good",
    Grade.C: "Moderate",
    Grade.D: "High",
    Grade.E: "Very High",
    Grade.F: "Extremely High",
}

# Inclusive upper bound of each band, in grams per megabyte.
GRADE_BANDS: tuple[tuple[Grade, float], ...] = (
    (Grade.A, 0.05),
    (Grade.B, 0.10),
    (Grade.C, 0.30),
    (Grade.D, 0.50),
    (Grade.E, 1.00),
    (Grade.F, math.inf),
)


def grade_for_intensity(intensity: float) -> Grade:
    """Map an intensity (grams per megabyte) onto the grade scale.

    Band boundaries belong to the better grade: exactly 0.05 is an A.
    """
    if math.isnan(intensity) or intensity < 0:
        raise ValueError(f"intensity must be a non-negative number, got {intensity!r}")
    for grade, upper in GRADE_BANDS:
        if intensity <= upper:
            return grade
    return Grade.F


def band_bounds(grade: Grade) -> tuple[float, float]:
    """Return the (exclusive lower, inclusive upper) intensity bounds of a grade."""
    lower = 0.0
    for candidate, upper in GRADE_BANDS:
        if candidate is grade:
            return (lower, upper)
        lower = upper
    raise KeyError(grade)
