"""Tests for per-category budgets."""

from __future__ import annotations

import math

import pytest

from co2audit.errors import ConfigurationError
from co2audit.grading import Grade
from co2audit.thresholds import ThresholdPolicy, ThresholdViolation, category_of, normalize_category


@pytest.mark.parametrize(
    "name, expected",
    [
        ("bundle.js", ".js"),
        ("dist/App.CSS", ".css"),
        ("assets\\logo.PNG", ".png"),
        ("vendor.min.js", ".js"),
        ("LICENSE", ""),
        (".htaccess", ""),
    ],
)
def test_category_is_lowercased_extension(name: str, expected: str):
    """Test categories are lower-cased extensions."""
    assert category_of(name) == expected


def test_normalize_category_adds_leading_dot():
    """Test config keys normalize to dotted lower case."""
    assert normalize_category("js") == ".js"
    assert normalize_category(".JS") == ".js"
    assert normalize_category(" css ") == ".css"


def test_unconfigured_category_never_violates():
    """Test categories without a budget never violate."""
    policy = ThresholdPolicy({".js": 0.1})
    assert policy.evaluate("a.css", ".css", 1e6, Grade.F) is None


def test_violation_requires_strictly_greater_emission():
    """Test emission equal to the budget is not a violation."""
    policy = ThresholdPolicy({".js": 0.1})
    assert policy.evaluate("a.js", ".js", 0.1, Grade.A) is None
    violation = policy.evaluate("a.js", ".js", 0.1000001, Grade.A)
    assert violation == ThresholdViolation(name="a.js", raw_emission=0.1000001, budget=0.1, grade=Grade.A)


def test_zero_budget_is_a_configured_budget():
    """Test a zero budget is enforced."""
    policy = ThresholdPolicy({"png": 0})
    assert policy.budget_for(".png") == 0.0
    assert policy.evaluate("x.png", ".png", 0.0, Grade.A) is None
    assert policy.evaluate("x.png", ".png", 1e-9, Grade.A) is not None


def test_violation_carries_grade_independent_of_budget():
    """Test a violation records the artifact's own grade."""
    # A tiny artifact grades A yet still exceeds a tight absolute budget.
    policy = ThresholdPolicy({".js": 0.000001})
    violation = policy.evaluate("tiny.js", ".js", 0.00001, Grade.A)
    assert violation is not None
    assert violation.grade is Grade.A


def test_budgets_are_read_only():
    """Test policy budgets cannot be mutated."""
    policy = ThresholdPolicy({".js": 1.0})
    with pytest.raises(TypeError):
        policy.budgets[".css"] = 2.0  # type: ignore[index]


@pytest.mark.parametrize("bad", [-0.1, math.inf, math.nan, "0.5", True, None])
def test_malformed_budget_is_a_configuration_error(bad: object):
    """Test malformed budgets raise ConfigurationError."""
    with pytest.raises(ConfigurationError):
        ThresholdPolicy({".js": bad})  # type: ignore[dict-item]


def test_empty_category_key_is_rejected():
    """Test a blank category key is rejected."""
    with pytest.raises(ConfigurationError):
        ThresholdPolicy({"  ": 1.0})
