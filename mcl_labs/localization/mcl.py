#!/usr/bin/env python3
"""
Monte Carlo Localization: particle belief and its motion update.
See Probabilistic Robotics:
    1. Page 252, Table 8.2 for the MCL algorithm.
    2. Page 124, Table 5.3 for the velocity motion model.

Only the prediction half of MCL is implemented here. The importance weighting
and resampling of Table 8.2 are left to ``Mcl.observation_update``.
"""

import logging

import numpy as np

from mcl_labs.simulation.config import (
    ConfigurationError,
    check_pose,
    check_positive,
    make_rng,
)
from mcl_labs.simulation.kinematics import state_transition
from mcl_labs.utils.sampling import CorrelatedNoiseSampler

logger = logging.getLogger(__name__)

# Standard deviations of the velocity noise channels used in the book's demos:
# nn = ν error per √|ν|, no = ν error per √|ω|, on = ω error per √|ν|,
# oo = ω error per √|ω|
DEFAULT_MOTION_NOISE_STDS = {"nn": 0.18462, "no": 0.001, "on": 0.02264, "oo": 0.018462}


class Particle:
    """One pose hypothesis."""

    def __init__(self, init_pose):
        self.pose = check_pose(init_pose)

    def motion_update(self, nu, omega, time, noise_rate_pdf, rng):
        """
        Move the particle with a noised copy of the commanded velocities.

        The four correlated noise channels are scaled by the square root of
        the commanded speeds, so turning adds translational uncertainty and
        translating adds rotational uncertainty:

            ν' = ν + n₀·√(|ν|/Δt) + n₁·√(|ω|/Δt)
            ω' = ω + n₂·√(|ν|/Δt) + n₃·√(|ω|/Δt)
        """
        ns = noise_rate_pdf.sample(rng)
        noised_nu = (
            nu + ns[0] * np.sqrt(abs(nu) / time) + ns[1] * np.sqrt(abs(omega) / time)
        )
        noised_omega = (
            omega + ns[2] * np.sqrt(abs(nu) / time) + ns[3] * np.sqrt(abs(omega) / time)
        )
        self.pose = state_transition(noised_nu, noised_omega, time, self.pose)


class Mcl:
    """
    Particle belief over the robot pose, advanced by the motion model.

    The belief bel(x_t) is represented by M particles, all initialised at the
    same pose. Each motion update moves every particle independently with
    velocities perturbed by a shared 4×4 process-noise covariance Σ over the
    channels [ν·ν, ν·ω, ω·ν, ω·ω].

    Parameters
    ----------
    init_pose : array_like, shape (3,)
        Initial pose [x, y, θ] of every particle.
    num : int
        Number of particles M. Fixed for the lifetime of the belief.
    motion_noise_stds : dict, optional
        Standard deviations ``{"nn", "no", "on", "oo"}`` turned into a
        diagonal covariance. Defaults to ``DEFAULT_MOTION_NOISE_STDS``.
    motion_noise_cov : array_like, shape (4, 4), optional
        Explicit covariance. Takes precedence over ``motion_noise_stds``.
    rng : numpy.random.Generator, optional
        Random stream owned by the belief.
    seed : int, optional
        Seed for a new stream when ``rng`` is not given.

    Attributes
    ----------
    particles : list of Particle
        Current pose hypotheses.
    motion_noise_cov : ndarray, shape (4, 4)
        Process-noise covariance.
    particles_log : list of ndarray
        Particle poses, shape (M, 3), recorded after every update.

    Examples
    --------
    >>> estimator = Mcl(np.array([2.0, 2.0, np.pi / 6]), 100, seed=1)
    >>> estimator.motion_update(0.2, 10.0 / 180.0 * np.pi, 0.1)
    >>> estimator.poses.shape
    (100, 3)

    Raises
    ------
    ConfigurationError
        If ``num`` is not a positive integer or the covariance is not a valid
        4×4 covariance matrix.
    """

    def __init__(
        self,
        init_pose,
        num,
        motion_noise_stds=None,
        motion_noise_cov=None,
        rng=None,
        seed=None,
    ):
        if isinstance(num, bool) or not isinstance(num, (int, np.integer)) or num < 1:
            raise ConfigurationError(f"num must be a positive integer, got {num!r}")

        if motion_noise_cov is None:
            stds = dict(DEFAULT_MOTION_NOISE_STDS)
            if motion_noise_stds is not None:
                unknown = set(motion_noise_stds) - set(stds)
                if unknown:
                    raise ConfigurationError(
                        f"unknown motion noise channels {sorted(unknown)}; "
                        f"expected {sorted(stds)}"
                    )
                stds.update(motion_noise_stds)
            motion_noise_cov = np.diag(
                [stds["nn"] ** 2, stds["no"] ** 2, stds["on"] ** 2, stds["oo"] ** 2]
            )

        motion_noise_cov = np.array(motion_noise_cov, dtype=float)
        if motion_noise_cov.shape != (4, 4):
            raise ConfigurationError(
                f"motion_noise_cov must be 4x4, got shape {motion_noise_cov.shape}"
            )
        self.motion_noise_rate_pdf = CorrelatedNoiseSampler(motion_noise_cov)
        self.motion_noise_cov = self.motion_noise_rate_pdf.cov
        self.rng = make_rng(rng, seed)

        init_pose = check_pose(init_pose)
        self.particles = [Particle(init_pose) for _ in range(int(num))]
        self.particles_log = [self.poses]

    def __len__(self):
        return len(self.particles)

    @property
    def poses(self):
        """Particle poses as an array of shape (M, 3)."""
        return np.array([p.pose for p in self.particles])

    def motion_update(self, nu, omega, time):
        """
        Propagate every particle through the noisy motion model.

        Parameters
        ----------
        nu : float
            Commanded linear velocity (m/s).
        omega : float
            Commanded angular velocity (rad/s).
        time : float
            Step duration Δt (s), strictly positive.

        Raises
        ------
        ConfigurationError
            If ``time`` is not a positive finite number.
        """
        time = check_positive("time", time)
        for p in self.particles:
            p.motion_update(nu, omega, time, self.motion_noise_rate_pdf, self.rng)
        self.particles_log.append(self.poses)

    def observation_update(self, observation):
        """
        Correct the belief with an observation (weighting and resampling).

        Extension point: the measurement half of MCL (Table 8.2, lines 5-8) is
        not implemented.
        """
        raise NotImplementedError(
            "Mcl implements the motion update only; observation_update is an "
            "extension point for importance weighting and resampling"
        )

    def mean_pose(self):
        """
        Sample mean of the particle poses.

        The heading is averaged on the unit circle so that particles on both
        sides of ±π do not cancel out.
        """
        poses = self.poses
        theta = np.arctan2(np.mean(np.sin(poses[:, 2])), np.mean(np.cos(poses[:, 2])))
        return np.array([np.mean(poses[:, 0]), np.mean(poses[:, 1]), theta])


if __name__ == "__main__":
    from mcl_labs.simulation import Agent, Camera, Map, Robot, World

    logging.basicConfig(level=logging.INFO)

    env_map = Map([(-4.0, 2.0), (2.0, -3.0), (3.0, 3.0)])
    initial_pose = np.array([2.0, 2.0, np.pi / 6])
    time_interval = 0.1

    camera = Camera(
        env_map,
        distance_noise_rate=0.0,
        direction_noise=0.0,
        distance_bias_rate_stddev=0.0,
        direction_bias_stddev=0.0,
        oversight_prob=0.0,
        seed=2,
    )
    circle = Agent(0.2, 10.0 / 180.0 * np.pi)
    robot = Robot(initial_pose, agent=circle, sensor=camera, seed=1)
    estimator = Mcl(initial_pose, 100, seed=3)

    world = World(env_map, time_span=30.0, time_interval=time_interval)
    world.append(robot, estimator)
    world.run()

    final_error = np.linalg.norm(estimator.mean_pose()[:2] - robot.pose[:2])
    print(f"Distance between belief mean and true pose: {final_error:.2f} m")
