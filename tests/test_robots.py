import numpy as np
import pytest

from mcl_labs.simulation import Agent, ConfigurationError, IdealCamera, IdealRobot, Robot


def run(robot, steps, nu=0.2, omega=0.1, time_interval=0.1):
    for _ in range(steps):
        robot.one_step(nu, omega, time_interval)
    return robot.poses


def test_agent_issues_constant_command():
    agent = Agent(0.2, 0.1)
    assert agent.decision() == (0.2, 0.1)
    assert agent.decision([(1.0, 0.0)]) == (0.2, 0.1)


def test_history_grows_by_one_pose_per_step():
    robot = IdealRobot([0.0, 0.0, 0.0])
    poses = run(robot, 7)
    assert poses.shape == (8, 3)
    assert poses[0].tolist() == [0.0, 0.0, 0.0]
    assert poses[-1] == pytest.approx(robot.pose)


def test_pose_property_is_a_copy():
    robot = IdealRobot([0.0, 0.0, 0.0])
    robot.pose[0] = 10.0
    assert robot.pose[0] == 0.0


def test_observe_without_sensor():
    assert IdealRobot([0.0, 0.0, 0.0]).observe() == []


def test_observe_uses_current_pose(landmark_map):
    robot = IdealRobot([0.0, 0.0, np.pi / 4], sensor=IdealCamera(landmark_map))
    [(distance, direction)] = robot.observe()
    assert distance == pytest.approx(np.hypot(3.0, 3.0))
    assert direction == pytest.approx(0.0)


def test_invalid_pose():
    with pytest.raises(ConfigurationError):
        IdealRobot([0.0, 0.0])
    with pytest.raises(ConfigurationError):
        IdealRobot([0.0, np.nan, 0.0])


def test_quiet_robot_matches_ideal_robot(quiet_robot_kwargs):
    robot = Robot([0.0, 0.0, 0.0], seed=3, **quiet_robot_kwargs)
    ideal = IdealRobot([0.0, 0.0, 0.0])
    assert run(robot, 100) == pytest.approx(run(ideal, 100))


def test_same_seed_same_trajectory():
    kwargs = {"expected_stuck_time": 5.0, "expected_escape_time": 1.0, "expected_kidnap_time": 20.0}
    first = run(Robot([0.0, 0.0, 0.0], seed=42, **kwargs), 300)
    second = run(Robot([0.0, 0.0, 0.0], seed=42, **kwargs), 300)
    assert np.array_equal(first, second)


def test_different_seeds_diverge():
    first = run(Robot([0.0, 0.0, 0.0], seed=1), 100)
    second = run(Robot([0.0, 0.0, 0.0], seed=2), 100)
    assert not np.allclose(first, second)


def test_heading_noise_is_applied_per_distance():
    robot = Robot(
        [0.0, 0.0, 0.0], noise_per_meter=0.0, noise_std=0.1, bias_rate_stds=(0.0, 0.0), seed=0
    )
    poses = run(robot, 10, omega=0.0)
    # Zero noise_per_meter perturbs the heading on every step
    assert np.all(np.diff(poses[:, 2]) != 0.0)


def test_stuck_robot_does_not_move(quiet_robot_kwargs):
    quiet_robot_kwargs.update(expected_stuck_time=1e-6, expected_escape_time=np.inf)
    robot = Robot([1.0, 2.0, 0.5], seed=0, **quiet_robot_kwargs)
    poses = run(robot, 20)
    assert robot.is_stuck
    assert np.allclose(poses, [1.0, 2.0, 0.5])


def test_zero_escape_time_escapes_on_next_step(quiet_robot_kwargs):
    quiet_robot_kwargs.update(expected_stuck_time=1e-6, expected_escape_time=0.0)
    robot = Robot([0.0, 0.0, 0.0], seed=0, **quiet_robot_kwargs)
    poses = run(robot, 2, omega=0.0)
    assert poses[1] == pytest.approx(poses[0])
    assert poses[2] == pytest.approx([0.02, 0.0, 0.0])


def test_zero_expected_times_disable_stuck_and_kidnap(quiet_robot_kwargs):
    robot = Robot([0.0, 0.0, 0.0], seed=0, **quiet_robot_kwargs)
    run(robot, 500)
    assert not robot.is_stuck
    assert robot.time_until_stuck == np.inf
    assert robot.time_until_kidnap == np.inf


def test_kidnapped_pose_is_drawn_from_the_ranges(quiet_robot_kwargs):
    quiet_robot_kwargs["expected_kidnap_time"] = 1e-6
    robot = Robot(
        [0.0, 0.0, 0.0],
        kidnap_range_x=(1.0, 2.0),
        kidnap_range_y=(3.0, 4.0),
        seed=0,
        **quiet_robot_kwargs,
    )
    x, y, theta = robot.one_step(0.2, 0.0, 0.1)
    assert 1.0 <= x <= 2.0
    assert 3.0 <= y <= 4.0
    assert 0.0 <= theta < 2 * np.pi


def test_bias_scales_the_command():
    robot = Robot([0.0, 0.0, 0.0], seed=9)
    nu, omega = robot.bias(0.2, 0.1)
    assert nu == pytest.approx(0.2 * robot.bias_rate_nu)
    assert omega == pytest.approx(0.1 * robot.bias_rate_omega)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"noise_std": -0.1},
        {"noise_per_meter": np.inf},
        {"bias_rate_stds": (-0.1, 0.1)},
        {"expected_stuck_time": -1.0},
        {"kidnap_range_x": (2.0, 1.0)},
        {"rng": "not a generator"},
    ],
)
def test_invalid_robot_parameters(kwargs):
    with pytest.raises(ConfigurationError):
        Robot([0.0, 0.0, 0.0], **kwargs)
