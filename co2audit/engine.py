"""
Emission accounting over a build's artifact snapshot.

One synchronous pass: estimate, normalize, grade, check budgets, aggregate.
The aggregate is graded as if the whole build were a single artifact of
total size and total emission, not as an average of per-artifact grades.
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass, field
from typing import Callable, Iterable

from .errors import EstimationError, InvalidArtifactError
from .estimators import BYTES_PER_MEGABYTE, EmissionEstimator
from .grading import Grade, grade_for_intensity
from .thresholds import ThresholdPolicy, ThresholdViolation, category_of as default_category_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactMetric:
    name: str
    size_bytes: int
    raw_emission: float
    intensity: float
    grade: Grade


@dataclass(frozen=True)
class AggregateReport:
    artifacts: list[ArtifactMetric] = field(default_factory=list)
    violations: list[ThresholdViolation] = field(default_factory=list)
    total_size_bytes: int = 0
    total_raw_emission: float = 0.0
    aggregate_intensity: float = 0.0
    aggregate_grade: Grade = Grade.A

    @property
    def artifact_count(self) -> int:
        return len(self.artifacts)

    @property
    def has_violations(self) -> bool:
        return bool(self.violations)


def compute_intensity(raw_emission: float, size_bytes: int) -> float:
    """Emission per megabyte; 0 for an empty artifact."""
    if size_bytes <= 0:
        return 0.0
    return raw_emission / (size_bytes / BYTES_PER_MEGABYTE)


def _check_size(name: str, size_bytes: object) -> int:
    if isinstance(size_bytes, bool) or not isinstance(size_bytes, int):
        raise InvalidArtifactError(f"Size of {name!r} must be an integer byte count, got {size_bytes!r}")
    if size_bytes < 0:
        raise InvalidArtifactError(f"Size of {name!r} must be non-negative, got {size_bytes}")
    return size_bytes


def _estimate(estimator: EmissionEstimator, name: str, size_bytes: int) -> float:
    raw = estimator(size_bytes)
    if isinstance(raw, bool) or not isinstance(raw, numbers.Real):
        raise EstimationError(f"Estimator returned a non-numeric value for {name!r}: {raw!r}")
    if not math.isfinite(raw) or raw < 0:
        raise EstimationError(f"Estimator returned {raw!r} for {name!r} ({size_bytes} bytes)")
    return float(raw)


def account(
    artifacts: Iterable[tuple[str, int]],
    estimator: EmissionEstimator,
    policy: ThresholdPolicy | None = None,
    *,
    category_of: Callable[[str], str] = default_category_of,
) -> AggregateReport:
    """Account emissions for an ordered artifact snapshot.

    Args:
        artifacts: (name, size in bytes) pairs in host enumeration order
        estimator: Byte-to-emission model
        policy: Per-category budgets (no budgets if None)
        category_of: Maps an artifact name to its budget category

    Returns:
        AggregateReport with artifacts and violations in input order

    Raises:
        InvalidArtifactError: Duplicate name or malformed size
        EstimationError: Estimator output negative, non-finite or non-numeric
    """
    policy = policy or ThresholdPolicy()

    metrics: list[ArtifactMetric] = []
    violations: list[ThresholdViolation] = []
    seen: set[str] = set()
    total_size = 0
    total_emission = 0.0

    for name, size_bytes in artifacts:
        if name in seen:
            raise InvalidArtifactError(f"Duplicate artifact name: {name!r}")
        seen.add(name)

        size_bytes = _check_size(name, size_bytes)
        raw = _estimate(estimator, name, size_bytes)
        intensity = compute_intensity(raw, size_bytes)
        grade = grade_for_intensity(intensity)

        metrics.append(ArtifactMetric(name, size_bytes, raw, intensity, grade))
        total_size += size_bytes
        total_emission += raw

        violation = policy.evaluate(name, category_of(name), raw, grade)
        if violation is not None:
            violations.append(violation)

        logger.debug("%s: %d bytes, %.6f g, %.6f g/MB, grade %s", name, size_bytes, raw, intensity, grade.value)

    aggregate_intensity = compute_intensity(total_emission, total_size)
    aggregate_grade = grade_for_intensity(aggregate_intensity)

    logger.info(
        "Accounted %d artifacts: %d bytes, %.6f g, grade %s, %d violations",
        len(metrics),
        total_size,
        total_emission,
        aggregate_grade.value,
        len(violations),
    )

    return AggregateReport(
        artifacts=metrics,
        violations=violations,
        total_size_bytes=total_size,
        total_raw_emission=total_emission,
        aggregate_intensity=aggregate_intensity,
        aggregate_grade=aggregate_grade,
    )
