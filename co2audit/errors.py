"""Error types raised by the accounting engine and its configuration layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .engine import AggregateReport
    from .grading import Grade


class Co2AuditError(Exception):
    """Base class for all co2audit errors."""


class ConfigurationError(Co2AuditError, ValueError):
    """Gate configuration is malformed (bad grade letter, bad budget, unknown key)."""


class EstimationError(Co2AuditError, ArithmeticError):
    """The emission estimator returned a negative or non-finite value."""


class InvalidArtifactError(Co2AuditError, ValueError):
    """An artifact in the build snapshot is malformed (bad size, duplicate name)."""


class BuildGateFailure(Co2AuditError):
    """The aggregate grade reached the configured failure floor.

    This is the designed outcome of a gated build, not a defect. It always
    carries the complete report that produced it.
    """

    def __init__(self, grade: "Grade", fail_threshold: "Grade", report: "AggregateReport"):
        self.grade = grade
        self.fail_threshold = fail_threshold
        self.report = report
        super().__init__(f"Build failed due to high CO2 emissions. Grade: {grade.name}")
