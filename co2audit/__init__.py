"""co2audit - CO2 emission accounting, grading and gating for build artifacts."""

from .engine import AggregateReport, ArtifactMetric, account, compute_intensity
from .errors import (
    BuildGateFailure,
    Co2AuditError,
    ConfigurationError,
    EstimationError,
    InvalidArtifactError,
)
from .gate import GateConfig, GateResult, audit_build, should_fail
from .grading import Grade, grade_for_intensity
from .thresholds import ThresholdPolicy, ThresholdViolation, category_of

__version__ = "0.1.0"

__all__ = [
    "AggregateReport",
    "ArtifactMetric",
    "BuildGateFailure",
    "Co2AuditError",
    "ConfigurationError",
    "EstimationError",
    "GateConfig",
    "GateResult",
    "Grade",
    "InvalidArtifactError",
    "ThresholdPolicy",
    "ThresholdViolation",
    "account",
    "audit_build",
    "category_of",
    "compute_intensity",
    "grade_for_intensity",
    "should_fail",
]
