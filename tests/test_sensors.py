import numpy as np
import pytest

from mcl_labs.simulation import Camera, ConfigurationError, IdealCamera, Map, OpticalSensor


def test_obs_fn_projects_into_camera_frame():
    distance, direction = OpticalSensor.obs_fn(np.array([0.0, 0.0, 0.0]), (4.0, 0.0))
    assert (distance, direction) == pytest.approx((4.0, 0.0))

    distance, direction = OpticalSensor.obs_fn(np.array([1.0, 1.0, np.pi / 4]), (2.0, 2.0))
    assert (distance, direction) == pytest.approx((np.sqrt(2.0), 0.0))


def test_obs_fn_subtracts_camera_heading():
    distance, direction = OpticalSensor.obs_fn(np.array([-2.0, 3.0, 0.6]), (2.0, 3.0))
    assert (distance, direction) == pytest.approx((4.0, -0.6))


def test_obs_fn_bearing_behind_is_plus_pi():
    _, direction = OpticalSensor.obs_fn(np.array([0.0, 0.0, np.pi / 2]), (0.0, -2.0))
    assert direction == pytest.approx(np.pi)


@pytest.mark.parametrize(
    "polarpos, expected",
    [
        ((2.0, 0.0), True),
        ((0.8, 0.0), True),
        ((3.9, -0.6), True),
        ((0.2, 0.0), False),
        ((1.5, -0.8), False),
        ((4.0, 0.6), True),
        ((0.5, -0.6), True),
        ((4.01, 0.0), False),
        ((0.49, 0.0), False),
        ((2.0, 0.61), False),
        (None, False),
    ],
)
def test_visibility_gate_is_inclusive(polarpos, expected):
    camera = IdealCamera(Map([(1.0, 1.0)]), (0.5, 4.0), (-0.6, 0.6))
    assert camera.visible(polarpos) is expected


def test_ideal_camera_data():
    camera = IdealCamera(Map([(2.0, 3.0)]), (0.5, 4.0), (-0.6, 0.6))
    assert camera.data(np.array([0.0, 3.0, 0.0])) == [(2.0, 0.0)]


def test_ideal_camera_skips_out_of_view_landmarks(landmark_map):
    camera = IdealCamera(landmark_map)
    # Facing +x from the origin, (-4, 2) lies behind the camera
    observed = camera.data(np.array([0.0, 0.0, 0.0]))
    expected = [(np.hypot(2.0, 3.0), np.arctan2(-3.0, 2.0)), (np.hypot(3.0, 3.0), np.pi / 4)]
    assert np.array(observed) == pytest.approx(np.array(expected))


def test_lastdata_is_replaced():
    camera = IdealCamera(Map([(2.0, 0.0)]))
    camera.data(np.array([0.0, 0.0, 0.0]))
    assert len(camera.lastdata) == 1
    camera.data(np.array([0.0, 0.0, np.pi]))
    assert camera.lastdata == []


def test_quiet_camera_matches_ideal_camera(landmark_map, quiet_camera_kwargs):
    camera = Camera(landmark_map, seed=0, **quiet_camera_kwargs)
    ideal = IdealCamera(landmark_map)
    for pose in [(0.0, 0.0, 0.0), (1.0, -1.0, -1.0), (-2.0, 1.0, 2.5)]:
        observed = camera.data(np.array(pose))
        assert np.array(observed) == pytest.approx(np.array(ideal.data(np.array(pose))))


def test_noisy_observations_stay_in_domain(landmark_map, rng):
    camera = Camera(landmark_map, distance_noise_rate=0.5, direction_noise=0.5, seed=4)
    for _ in range(200):
        pose = np.array([rng.uniform(-5, 5), rng.uniform(-5, 5), rng.uniform(-np.pi, np.pi)])
        for distance, direction in camera.data(pose):
            assert distance >= 0.0
            assert -np.pi < direction <= np.pi


def test_full_oversight_sees_nothing(landmark_map, quiet_camera_kwargs):
    quiet_camera_kwargs["oversight_prob"] = 1.0
    camera = Camera(landmark_map, seed=0, **quiet_camera_kwargs)
    assert camera.data(np.array([0.0, 0.0, 0.0])) == []


def test_phantom_replaces_the_landmark(quiet_camera_kwargs):
    quiet_camera_kwargs["phantom_prob"] = 1.0
    camera = Camera(
        Map([(1.0, 1.0)]),
        phantom_range_x=(3.0, 3.0),
        phantom_range_y=(0.0, 0.0),
        seed=0,
        **quiet_camera_kwargs,
    )
    observed = camera.data(np.array([0.0, 0.0, 0.0]))
    assert np.array(observed) == pytest.approx(np.array([[3.0, 0.0]]))


def test_occlusion_lengthens_the_range(quiet_camera_kwargs):
    quiet_camera_kwargs["occlusion_prob"] = 1.0
    camera = Camera(Map([(2.0, 0.0)]), seed=0, **quiet_camera_kwargs)
    for _ in range(50):
        [(distance, direction)] = camera.data(np.array([0.0, 0.0, 0.0]))
        assert 2.0 <= distance <= 6.0
        assert direction == pytest.approx(0.0)


def test_bias_is_fixed_per_camera(landmark_map):
    camera = Camera(landmark_map, seed=7)
    bias = (camera.distance_bias, camera.direction_bias)
    camera.data(np.array([0.0, 0.0, 0.0]))
    assert (camera.distance_bias, camera.direction_bias) == bias


def test_same_seed_same_observations(landmark_map):
    first = Camera(landmark_map, seed=11, phantom_prob=0.2, occlusion_prob=0.2)
    second = Camera(landmark_map, seed=11, phantom_prob=0.2, occlusion_prob=0.2)
    pose = np.array([0.0, 0.0, 0.5])
    for _ in range(20):
        assert first.data(pose) == second.data(pose)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"distance_range": (-1.0, 5.0)},
        {"distance_range": (5.0, 1.0)},
        {"oversight_prob": 1.5},
        {"phantom_prob": -0.1},
        {"distance_noise_rate": -0.1},
        {"rng": np.random.default_rng(0), "seed": 1},
    ],
)
def test_invalid_camera_parameters(landmark_map, kwargs):
    with pytest.raises(ConfigurationError):
        Camera(landmark_map, **kwargs)


def test_empty_map_warns(caplog):
    with caplog.at_level("WARNING"):
        camera = IdealCamera(Map())
    assert "empty map" in caplog.text
    assert camera.data(np.array([0.0, 0.0, 0.0])) == []
