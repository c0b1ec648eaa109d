#!/usr/bin/env python3
"""
Ground-truth robots and the decision policy that commands them.

``IdealRobot`` integrates the commanded velocities exactly. ``Robot`` layers
the stochastic effects of a real platform on top of the same kinematics:

    1. **Bias**: constant multipliers on ν and ω, drawn once per robot.
    2. **Stuck/Escape**: a two-state process that intermittently zeroes the
       command.
    3. **State transition**: arc integration of the effective command.
    4. **Heading noise**: a one-shot θ perturbation every time an
       exponentially distributed travelled distance is exhausted.
    5. **Kidnapping**: an occasional teleport to a uniformly drawn pose.

The models follow Ueda, "Probabilistic Robotics in Python" (Chapter 4) and
Probabilistic Robotics, Section 5.3.
"""

import logging
from abc import ABC, abstractmethod

import numpy as np

from mcl_labs.simulation.config import (
    check_non_negative,
    check_pose,
    check_range,
    make_rng,
)
from mcl_labs.simulation.kinematics import state_transition

logger = logging.getLogger(__name__)

# Distance charged per radian of rotation when accumulating heading noise
TURN_DISTANCE_PER_RAD = 0.2
# Keeps the exponential scale strictly positive for zero parameters
SCALE_EPSILON = 1e-100


class Agent:
    """
    Decision policy issuing a constant (ν, ω) command.

    Examples
    --------
    >>> straight = Agent(0.2, 0.0)
    >>> circle = Agent(0.2, 10.0 / 180.0 * np.pi)
    >>> straight.decision([])
    (0.2, 0.0)
    """

    def __init__(self, nu, omega):
        self.nu = float(nu)
        self.omega = float(omega)

    def decision(self, observation=None):
        return self.nu, self.omega


class BaseRobot(ABC):
    """
    Pose and append-only trajectory shared by ``IdealRobot`` and ``Robot``.

    Parameters
    ----------
    pose : array_like, shape (3,)
        Initial pose [x, y, θ]. It seeds the trajectory history.
    agent : Agent, optional
        Decision policy consulted by the world every tick.
    sensor : OpticalSensor, optional
        Camera mounted on the robot.
    """

    def __init__(self, pose, agent=None, sensor=None):
        self._pose = check_pose(pose)
        self._poses = [self._pose.copy()]
        self.agent = agent
        self.sensor = sensor

    @property
    def pose(self):
        return self._pose.copy()

    @property
    def poses(self):
        """Trajectory history [x, y, θ], shape (T + 1, 3) after T steps."""
        return np.array(self._poses)

    def observe(self):
        """Run the mounted sensor at the current pose."""
        if self.sensor is None:
            return []
        return self.sensor.data(self._pose)

    def one_step(self, nu, omega, time_interval):
        """Apply one commanded (ν, ω) for ``time_interval`` and record the pose."""
        self._pose = self._advance(float(nu), float(omega), float(time_interval))
        self._poses.append(self._pose.copy())
        return self.pose

    @abstractmethod
    def _advance(self, nu, omega, time_interval):
        """Return the pose reached after one step."""


class IdealRobot(BaseRobot):
    """Robot that follows its commands exactly."""

    def _advance(self, nu, omega, time_interval):
        return state_transition(nu, omega, time_interval, self._pose)


class Robot(BaseRobot):
    """
    Robot with biased, intermittently stuck, drifting and kidnappable motion.

    Parameters
    ----------
    pose : array_like, shape (3,)
        Initial pose [x, y, θ].
    agent : Agent, optional
        Decision policy.
    sensor : OpticalSensor, optional
        Mounted camera.
    noise_per_meter : float
        Parameter of the travelled distance between two heading
        perturbations, exponential with rate ``1 / noise_per_meter``.
        ``0`` perturbs the heading on every step.
    noise_std : float
        Standard deviation of each heading perturbation (rad).
    bias_rate_stds : tuple of float
        Standard deviations (σ_ν, σ_ω) of the bias multipliers, drawn from
        N(1, σ²) once per robot.
    expected_stuck_time : float
        Mean time (s) before the robot gets stuck. ``0`` or ``inf`` disables
        the stuck process.
    expected_escape_time : float
        Mean time (s) the robot stays stuck.
    expected_kidnap_time : float
        Mean time (s) between kidnappings. ``0`` or ``inf`` disables them.
    kidnap_range_x, kidnap_range_y : tuple of float
        Area from which the kidnapped position is drawn.
    rng : numpy.random.Generator, optional
        Random stream owned by this robot.
    seed : int, optional
        Seed for a new stream when ``rng`` is not given.

    Attributes
    ----------
    bias_rate_nu, bias_rate_omega : float
        Bias multipliers applied to every command.
    is_stuck : bool
        Current state of the stuck/escape process.

    Notes
    -----
    Every timer counts down by the step duration and is replenished with a
    fresh exponential draw when it expires, so a stuck period, an escape
    period or a kidnapping never overlaps itself. The order of the five effects
    is fixed; reordering them changes the distribution of the trajectory.
    """

    def __init__(
        self,
        pose,
        agent=None,
        sensor=None,
        noise_per_meter=5.0,
        noise_std=np.pi / 60,
        bias_rate_stds=(0.1, 0.1),
        expected_stuck_time=np.inf,
        expected_escape_time=1e-100,
        expected_kidnap_time=np.inf,
        kidnap_range_x=(-5.0, 5.0),
        kidnap_range_y=(-5.0, 5.0),
        rng=None,
        seed=None,
    ):
        super().__init__(pose, agent, sensor)
        self.rng = make_rng(rng, seed)

        # Heading noise per distance travelled
        self.noise_per_meter = check_non_negative("noise_per_meter", noise_per_meter)
        self.noise_std = check_non_negative("noise_std", noise_std)
        self.distance_until_noise = self.rng.exponential(
            SCALE_EPSILON + self.noise_per_meter
        )

        # Velocity bias
        std_nu, std_omega = bias_rate_stds
        self.bias_rate_nu = self.rng.normal(1.0, check_non_negative("bias_rate_stds[0]", std_nu))
        self.bias_rate_omega = self.rng.normal(
            1.0, check_non_negative("bias_rate_stds[1]", std_omega)
        )

        # Stuck / escape
        self.expected_stuck_time = check_non_negative(
            "expected_stuck_time", expected_stuck_time, allow_inf=True
        )
        self.expected_escape_time = check_non_negative(
            "expected_escape_time", expected_escape_time, allow_inf=True
        )
        self.time_until_stuck = self._countdown(self.expected_stuck_time)
        self.time_until_escape = self.rng.exponential(
            SCALE_EPSILON + self.expected_escape_time
        )
        self.is_stuck = False

        # Kidnapping
        self.expected_kidnap_time = check_non_negative(
            "expected_kidnap_time", expected_kidnap_time, allow_inf=True
        )
        self.kidnap_range_x = check_range("kidnap_range_x", kidnap_range_x)
        self.kidnap_range_y = check_range("kidnap_range_y", kidnap_range_y)
        self.time_until_kidnap = self._countdown(self.expected_kidnap_time)

    def _countdown(self, expected_time):
        # Zero and infinite expectations switch the event off
        if expected_time == 0.0 or np.isinf(expected_time):
            return np.inf
        return self.rng.exponential(expected_time)

    def noise(self, pose, nu, omega, time_interval):
        self.distance_until_noise -= (
            abs(nu) * time_interval + TURN_DISTANCE_PER_RAD * abs(omega) * time_interval
        )
        if self.distance_until_noise <= 0.0:
            self.distance_until_noise += self.rng.exponential(
                SCALE_EPSILON + self.noise_per_meter
            )
            kick = self.rng.normal(0.0, self.noise_std)
            pose = pose.copy()
            pose[2] += kick
            logger.debug(f"Heading noise {kick:.4f} rad applied")
        return pose

    def bias(self, nu, omega):
        return nu * self.bias_rate_nu, omega * self.bias_rate_omega

    def stuck(self, nu, omega, time_interval):
        if self.is_stuck:
            self.time_until_escape -= time_interval
            if self.time_until_escape <= 0.0:
                self.time_until_escape += self.rng.exponential(
                    SCALE_EPSILON + self.expected_escape_time
                )
                self.is_stuck = False
                logger.debug("Robot escaped")
        else:
            self.time_until_stuck -= time_interval
            if self.time_until_stuck <= 0.0:
                self.time_until_stuck += self._countdown(self.expected_stuck_time)
                self.is_stuck = True
                logger.debug("Robot got stuck")

        if self.is_stuck:
            return 0.0, 0.0
        return nu, omega

    def kidnap(self, pose, time_interval):
        self.time_until_kidnap -= time_interval
        if self.time_until_kidnap <= 0.0:
            self.time_until_kidnap += self._countdown(self.expected_kidnap_time)
            pose = np.array(
                [
                    self.rng.uniform(*self.kidnap_range_x),
                    self.rng.uniform(*self.kidnap_range_y),
                    self.rng.uniform(0.0, 2 * np.pi),
                ]
            )
            logger.debug(f"Robot kidnapped to {np.round(pose, 3).tolist()}")
        return pose

    def _advance(self, nu, omega, time_interval):
        nu, omega = self.bias(nu, omega)
        nu, omega = self.stuck(nu, omega, time_interval)
        pose = state_transition(nu, omega, time_interval, self._pose)
        pose = self.noise(pose, nu, omega, time_interval)
        return self.kidnap(pose, time_interval)
