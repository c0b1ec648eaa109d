import numpy as np
import pytest

from mcl_labs.simulation import Map


@pytest.fixture
def landmark_map() -> Map:
    """Three-landmark map used throughout the lab demos."""
    return Map([(-4.0, 2.0), (2.0, -3.0), (3.0, 3.0)])


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)


@pytest.fixture
def quiet_robot_kwargs() -> dict:
    """Robot parameters that switch every stochastic effect off."""
    return {
        "noise_per_meter": 0.0,
        "noise_std": 0.0,
        "bias_rate_stds": (0.0, 0.0),
        "expected_stuck_time": 0.0,
        "expected_escape_time": 0.0,
        "expected_kidnap_time": 0.0,
    }


@pytest.fixture
def quiet_camera_kwargs() -> dict:
    """Camera parameters that switch every failure mode off."""
    return {
        "distance_noise_rate": 0.0,
        "direction_noise": 0.0,
        "distance_bias_rate_stddev": 0.0,
        "direction_bias_stddev": 0.0,
        "phantom_prob": 0.0,
        "oversight_prob": 0.0,
        "occlusion_prob": 0.0,
    }
