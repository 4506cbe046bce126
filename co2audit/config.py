from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from .errors import ConfigurationError
from .estimators import DEFAULT_ESTIMATOR
from .gate import GateConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("co2audit.toml", "co2audit.yml", "co2audit.yaml")
KNOWN_KEYS = {"fail_threshold", "thresholds", "estimator"}


def _read_toml(path: Path) -> dict[str, Any]:
    import tomllib

    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"{path}: invalid TOML: {e}") from e


def _read_yaml(path: Path) -> dict[str, Any]:
    import yaml

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{path}: invalid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: top level must be a mapping")
    return data


def _split_estimator(value: Any) -> tuple[str, dict[str, Any]]:
    if value is None:
        return DEFAULT_ESTIMATOR, {}
    if isinstance(value, str):
        return value, {}
    if isinstance(value, dict):
        params = {k: v for k, v in value.items() if k != "model"}
        return str(value.get("model", DEFAULT_ESTIMATOR)), params
    raise ConfigurationError(f"estimator must be a model name or a table, got {value!r}")


def config_from_mapping(data: Mapping[str, Any], *, source: str = "<config>") -> GateConfig:
    """Build a validated GateConfig from a parsed config table."""
    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(f"{source}: unknown option(s): {', '.join(unknown)}")

    estimator, params = _split_estimator(data.get("estimator"))
    try:
        return GateConfig.create(
            fail_threshold=data.get("fail_threshold", "F"),
            thresholds=data.get("thresholds"),
            estimator=estimator,
            estimator_params=params,
        )
    except ConfigurationError as e:
        raise ConfigurationError(f"{source}: {e}") from e


def load_config_file(path: Path) -> GateConfig:
    """Load a co2audit config from TOML, YAML or a pyproject.toml [tool.co2audit] table."""
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    if path.suffix.lower() in (".yml", ".yaml"):
        data = _read_yaml(path)
    else:
        data = _read_toml(path)
        if path.name == "pyproject.toml":
            tool = data.get("tool", {})
            data = tool.get("co2audit", {}) if isinstance(tool, dict) else {}
            if not isinstance(data, dict):
                raise ConfigurationError(f"{path}: [tool.co2audit] must be a table")

    logger.debug("Loaded config from %s", path)
    return config_from_mapping(data, source=str(path))


def find_config(start: Path) -> Path | None:
    """Find a config file in `start`, falling back to its pyproject.toml."""
    for name in CONFIG_FILENAMES:
        candidate = start / name
        if candidate.is_file():
            return candidate

    pyproject = start / "pyproject.toml"
    if pyproject.is_file():
        tool = _read_toml(pyproject).get("tool", {})
        if isinstance(tool, dict) and "co2audit" in tool:
            return pyproject
    return None


def load_config(path: Path | None = None, *, cwd: Path | None = None) -> GateConfig:
    """Load an explicit config file, or discover one in `cwd`; defaults if none."""
    if path is not None:
        return load_config_file(path)

    found = find_config(cwd or Path.cwd())
    if found is None:
        logger.debug("No config file found; using defaults")
        return GateConfig()
    return load_config_file(found)


def merge_overrides(
    config: GateConfig,
    *,
    fail_threshold: str | None = None,
    thresholds: Mapping[str, float] | None = None,
    estimator: str | None = None,
) -> GateConfig:
    """Apply command-line overrides on top of a loaded config.

    Per-category thresholds are merged key by key; an estimator override
    drops the configured model parameters.
    """
    merged_thresholds = dict(config.thresholds)
    if thresholds:
        merged_thresholds.update(thresholds)

    if estimator is not None and estimator != config.estimator:
        estimator_name, params = estimator, {}
    else:
        estimator_name, params = config.estimator, dict(config.estimator_params)

    return GateConfig.create(
        fail_threshold=fail_threshold if fail_threshold is not None else config.fail_threshold,
        thresholds=merged_thresholds,
        estimator=estimator_name,
        estimator_params=params,
    )
