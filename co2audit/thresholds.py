"""Per-category absolute emission budgets."""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Mapping

from .errors import ConfigurationError
from .grading import Grade


@dataclass(frozen=True)
class ThresholdViolation:
    """An artifact whose raw emission exceeded its category budget."""

    name: str
    raw_emission: float
    budget: float
    grade: Grade


def category_of(name: str) -> str:
    """Category key of an artifact: its lower-cased extension, e.g. ".js"."""
    return PurePosixPath(name.replace("\\", "/")).suffix.lower()


def normalize_category(key: str) -> str:
    key = str(key).strip().lower()
    if key and not key.startswith("."):
        key = "." + key
    return key


class ThresholdPolicy:
    """Budgets in grams keyed by category.

    Budgets compare against raw emission, not intensity, so a small file
    can violate its budget while still grading A.
    """

    def __init__(self, budgets: Mapping[str, float] | None = None):
        validated: dict[str, float] = {}
        for key, budget in (budgets or {}).items():
            category = normalize_category(key)
            if not category:
                raise ConfigurationError(f"Empty threshold category key: {key!r}")
            if isinstance(budget, bool) or not isinstance(budget, (int, float)):
                raise ConfigurationError(f"Threshold for {category} must be a number, got {budget!r}")
            if not math.isfinite(budget) or budget < 0:
                raise ConfigurationError(f"Threshold for {category} must be finite and non-negative, got {budget!r}")
            validated[category] = float(budget)
        self._budgets = MappingProxyType(validated)

    @property
    def budgets(self) -> Mapping[str, float]:
        return self._budgets

    def budget_for(self, category: str) -> float | None:
        return self._budgets.get(category)

    def evaluate(self, name: str, category: str, raw_emission: float, grade: Grade) -> ThresholdViolation | None:
        budget = self.budget_for(category)
        if budget is None or raw_emission <= budget:
            return None
        return ThresholdViolation(name=name, raw_emission=raw_emission, budget=budget, grade=grade)

    def __repr__(self) -> str:
        return f"ThresholdPolicy({dict(self._budgets)!r})"
