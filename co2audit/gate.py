"""
Build gate: pass/fail decision on the aggregate grade.

`audit_build` is the single call a host build makes once its artifacts are
known. It always completes the report before deciding, and returns a
`GateResult` rather than raising; hosts that want an exception call
`GateResult.raise_for_failure()`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from .engine import AggregateReport, account
from .errors import BuildGateFailure, ConfigurationError
from .estimators import DEFAULT_ESTIMATOR, EmissionEstimator, build_estimator
from .grading import Grade
from .thresholds import ThresholdPolicy, category_of as default_category_of

logger = logging.getLogger(__name__)


def should_fail(aggregate_grade: Grade, fail_threshold: Grade = Grade.F) -> bool:
    """True when the build grade is at least as bad as the failure floor."""
    return aggregate_grade.rank >= fail_threshold.rank


@dataclass(frozen=True)
class GateConfig:
    """Read-only gate configuration, validated at construction.

    Raises ConfigurationError on any malformed value.
    """

    fail_threshold: Grade = Grade.F
    thresholds: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    estimator: str = DEFAULT_ESTIMATOR
    estimator_params: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        object.__setattr__(self, "fail_threshold", Grade.parse(self.fail_threshold))

        if not isinstance(self.thresholds, Mapping):
            raise ConfigurationError(f"thresholds must be a table of category -> budget, got {self.thresholds!r}")
        object.__setattr__(self, "thresholds", ThresholdPolicy(self.thresholds).budgets)

        if not isinstance(self.estimator, str) or not self.estimator.strip():
            raise ConfigurationError(f"estimator must be a model name, got {self.estimator!r}")
        if not isinstance(self.estimator_params, Mapping):
            raise ConfigurationError(f"estimator parameters must be a table, got {self.estimator_params!r}")
        object.__setattr__(self, "estimator", self.estimator.strip())
        object.__setattr__(self, "estimator_params", MappingProxyType(dict(self.estimator_params)))

        # Fail at construction rather than at first use.
        self.build_estimator()

    @classmethod
    def create(
        cls,
        *,
        fail_threshold: Grade | str = Grade.F,
        thresholds: Mapping[str, Any] | None = None,
        estimator: str = DEFAULT_ESTIMATOR,
        estimator_params: Mapping[str, Any] | None = None,
    ) -> "GateConfig":
        """Validate raw option values (None meaning empty) into a read-only config."""
        return cls(
            fail_threshold=fail_threshold,
            thresholds=thresholds if thresholds is not None else {},
            estimator=estimator,
            estimator_params=estimator_params if estimator_params is not None else {},
        )

    def policy(self) -> ThresholdPolicy:
        return ThresholdPolicy(self.thresholds)

    def build_estimator(self) -> EmissionEstimator:
        return build_estimator(self.estimator, **self.estimator_params)


@dataclass(frozen=True)
class GateResult:
    report: AggregateReport
    fail_threshold: Grade
    failed: bool

    @property
    def passed(self) -> bool:
        return not self.failed

    @property
    def grade(self) -> Grade:
        return self.report.aggregate_grade

    @property
    def message(self) -> str:
        if self.failed:
            return f"Build failed due to high CO2 emissions. Grade: {self.grade.value}"
        return f"Build passed. Grade: {self.grade.value} (fails at {self.fail_threshold.value})"

    def raise_for_failure(self) -> None:
        if self.failed:
            raise BuildGateFailure(self.grade, self.fail_threshold, self.report)


def audit_build(
    artifacts: Iterable[tuple[str, int]],
    config: GateConfig | None = None,
    *,
    estimator: EmissionEstimator | None = None,
    category_of: Callable[[str], str] = default_category_of,
) -> GateResult:
    """Account a build's artifacts and apply the gate.

    An injected `estimator` takes precedence over the one named in config.
    Internal defects (InvalidArtifactError, EstimationError) propagate.
    """
    config = config or GateConfig()
    estimator = estimator or config.build_estimator()

    report = account(artifacts, estimator, config.policy(), category_of=category_of)
    failed = should_fail(report.aggregate_grade, config.fail_threshold)

    if failed:
        logger.warning(
            "Gate failed: grade %s is at or beyond floor %s",
            report.aggregate_grade.value,
            config.fail_threshold.value,
        )
    else:
        logger.info("Gate passed: grade %s (floor %s)", report.aggregate_grade.value, config.fail_threshold.value)

    return GateResult(report=report, fail_threshold=config.fail_threshold, failed=failed)
