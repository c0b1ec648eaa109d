"""
Parameter validation for the simulated robot, camera and particle belief.

Every stochastic model in the simulation is configured through explicit
constructor parameters. The helpers below are called from those constructors so
that a bad value aborts the setup before any time step runs.
"""

import logging
import math
from typing import Tuple

import numpy as np

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a model is constructed with out-of-domain parameters."""


def check_non_negative(name: str, value: float, allow_inf: bool = False) -> float:
    """Return ``value`` as float, rejecting NaN and negative numbers.

    Expected times pass ``allow_inf=True``: infinity disables the effect.
    """
    value = float(value)
    if math.isnan(value) or value < 0.0 or (math.isinf(value) and not allow_inf):
        raise ConfigurationError(f"{name} must be a non-negative number, got {value}")
    return value


def check_positive(name: str, value: float) -> float:
    value = float(value)
    if math.isnan(value) or math.isinf(value) or value <= 0.0:
        raise ConfigurationError(f"{name} must be a positive finite number, got {value}")
    return value


def check_probability(name: str, value: float) -> float:
    value = float(value)
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must lie in [0, 1], got {value}")
    return value


def check_range(name: str, bounds) -> Tuple[float, float]:
    """Validate a ``(low, high)`` pair of finite numbers with ``low <= high``."""
    try:
        low, high = (float(b) for b in bounds)
    except (TypeError, ValueError) as error:
        raise ConfigurationError(
            f"{name} must be a (low, high) pair of numbers, got {bounds!r}"
        ) from error
    if not (np.isfinite(low) and np.isfinite(high)) or low > high:
        raise ConfigurationError(
            f"{name} must satisfy low <= high with finite bounds, got ({low}, {high})"
        )
    return low, high


def check_pose(pose) -> np.ndarray:
    """Return a float copy of ``pose`` shaped ``(3,)``."""
    pose = np.array(pose, dtype=float)
    if pose.shape != (3,) or not np.all(np.isfinite(pose)):
        raise ConfigurationError(
            f"pose must be a finite (x, y, theta) triple, got {pose.tolist()}"
        )
    return pose


def make_rng(rng=None, seed=None) -> np.random.Generator:
    """
    Resolve the random stream owned by a stochastic entity.

    Parameters
    ----------
    rng : numpy.random.Generator, optional
        Generator handed in by the caller. Used as-is when given.
    seed : int, optional
        Seed for a new generator when ``rng`` is not given.

    Returns
    -------
    numpy.random.Generator
    """
    if rng is not None:
        if seed is not None:
            raise ConfigurationError("pass either rng or seed, not both")
        if not isinstance(rng, np.random.Generator):
            raise ConfigurationError(
                f"rng must be a numpy.random.Generator, got {type(rng).__name__}"
            )
        return rng
    if seed is None:
        logger.debug("No seed given; drawing a fresh entropy-seeded generator")
    return np.random.default_rng(seed)
