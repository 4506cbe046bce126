"""
Byte-to-emission models.

The engine treats an estimator as an opaque, deterministic function of byte
count. Models here are stateless strategies; pass one into `account()` or
select one by name in the configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

from .errors import ConfigurationError

BYTES_PER_MEGABYTE = 1_048_576

# Energy per transferred byte, in kWh.
KWH_PER_BYTE_IN_DC = 0.00000000072
FIXED_NETWORK_WIRED = 0.00000000429
FIXED_NETWORK_WIFI = 0.00000000152
FOUR_G_MOBILE = 0.00000000884
KWH_PER_BYTE_FOR_NETWORK = (FIXED_NETWORK_WIRED + FIXED_NETWORK_WIFI + FOUR_G_MOBILE) / 3

# Grid carbon intensity, in grams CO2 per kWh.
CO2_PER_KWH_IN_DC_GREY = 519
CO2_PER_KWH_NETWORK_GREY = 475
CO2_PER_KWH_IN_DC_GREEN = 0


class EmissionEstimator(Protocol):
    def __call__(self, size_bytes: int) -> float: ...


@dataclass(frozen=True)
class OneByteModel:
    """The "1byte" model: data-centre plus average network energy per byte.

    With `green=True` the data-centre share is assumed to run on renewable
    energy and only the network share is charged.
    """

    green: bool = False

    def __call__(self, size_bytes: int) -> float:
        if self.green:
            dc = size_bytes * KWH_PER_BYTE_IN_DC * CO2_PER_KWH_IN_DC_GREEN
            network = size_bytes * KWH_PER_BYTE_FOR_NETWORK * CO2_PER_KWH_NETWORK_GREY
            return dc + network
        return size_bytes * (KWH_PER_BYTE_IN_DC + KWH_PER_BYTE_FOR_NETWORK) * CO2_PER_KWH_IN_DC_GREY


@dataclass(frozen=True)
class LinearModel:
    """Constant emission factor, in grams per megabyte."""

    grams_per_megabyte: float

    def __post_init__(self) -> None:
        if not isinstance(self.grams_per_megabyte, (int, float)) or isinstance(self.grams_per_megabyte, bool):
            raise ConfigurationError("grams_per_megabyte must be a number")
        if self.grams_per_megabyte < 0:
            raise ConfigurationError("grams_per_megabyte must be non-negative")

    def __call__(self, size_bytes: int) -> float:
        return size_bytes / BYTES_PER_MEGABYTE * self.grams_per_megabyte


ESTIMATORS: dict[str, Callable[..., EmissionEstimator]] = {
    "1byte": OneByteModel,
    "linear": LinearModel,
}

DEFAULT_ESTIMATOR = "1byte"


def build_estimator(name: str, **params: Any) -> EmissionEstimator:
    """Instantiate a registered model by name."""
    factory = ESTIMATORS.get(name)
    if factory is None:
        raise ConfigurationError(f"Unknown estimator {name!r}; available: {', '.join(sorted(ESTIMATORS))}")
    try:
        return factory(**params)
    except TypeError as e:
        raise ConfigurationError(f"Invalid parameters for estimator {name!r}: {e}") from e
