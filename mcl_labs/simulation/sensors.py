#!/usr/bin/env python3
"""
Range-bearing cameras observing point landmarks.

Two sensors share the ``OpticalSensor`` interface:

    - ``IdealCamera``: exact projection of every landmark followed by the
      visibility gate.
    - ``Camera``: the same projection corrupted by the failure modes of a real
      detector (phantoms, occlusion, oversight, Gaussian noise and a fixed
      bias).

Measurement Model
----------------
For a camera at pose (x, y, θ) and a landmark at (x_l, y_l):

    r = √[(x_l − x)² + (y_l − y)²]
    φ = atan2(y_l − y, x_l − x) − θ,   wrapped into (−π, π]

See Probabilistic Robotics, Section 6.6 for the landmark measurement model.
"""

import logging
from abc import ABC, abstractmethod

import numpy as np

from mcl_labs.simulation.config import (
    ConfigurationError,
    check_non_negative,
    check_probability,
    check_range,
    make_rng,
)
from mcl_labs.simulation.kinematics import wrap_angle

logger = logging.getLogger(__name__)


class OpticalSensor(ABC):
    """
    Interface shared by ``IdealCamera`` and ``Camera``.

    Subclasses keep the last observation in ``lastdata``; every call to
    ``data`` replaces it.
    """

    def __init__(self, env_map, distance_range, direction_range):
        if len(env_map) == 0:
            logger.warning("Camera attached to an empty map; it will never observe anything")
        self.map = env_map.freeze()
        self.distance_range = check_range("distance_range", distance_range)
        self.direction_range = check_range("direction_range", direction_range)
        if self.distance_range[0] < 0.0:
            raise ConfigurationError(
                f"distance_range must not be negative, got {self.distance_range}"
            )
        self.lastdata = []

    def visible(self, polarpos):
        """Whether a (range, bearing) pair passes the visibility gate."""
        if polarpos is None:
            return False
        distance, direction = polarpos
        return (
            self.distance_range[0] <= distance <= self.distance_range[1]
            and self.direction_range[0] <= direction <= self.direction_range[1]
        )

    @staticmethod
    def obs_fn(cam_pose, obj_pos):
        """
        Project a world point into the camera frame.

        Parameters
        ----------
        cam_pose : array_like, shape (3,)
            Camera pose [x, y, θ].
        obj_pos : array_like, shape (2,)
            Point [x, y] in the world frame.

        Returns
        -------
        tuple of float
            (range, bearing) with bearing in (−π, π].
        """
        diff_x = obj_pos[0] - cam_pose[0]
        diff_y = obj_pos[1] - cam_pose[1]
        phi = wrap_angle(np.arctan2(diff_y, diff_x) - cam_pose[2])
        distance = np.hypot(diff_x, diff_y)
        return float(distance), float(phi)

    @abstractmethod
    def data(self, cam_pose):
        """Observe every landmark of the map from ``cam_pose``."""


class IdealCamera(OpticalSensor):
    """
    Noise-free camera: projection plus visibility gate.

    Parameters
    ----------
    env_map : Map
        Landmark map, frozen and shared by reference.
    distance_range : tuple of float
        Inclusive (min, max) observable range (m).
    direction_range : tuple of float
        Inclusive (min, max) observable bearing (rad).

    Examples
    --------
    >>> m = Map([(2.0, 3.0)])
    >>> camera = IdealCamera(m, (0.5, 4.0), (-0.6, 0.6))
    >>> camera.data(np.array([0.0, 3.0, 0.0]))
    [(2.0, 0.0)]
    """

    def __init__(
        self,
        env_map,
        distance_range=(0.5, 6.0),
        direction_range=(-np.pi / 3, np.pi / 3),
    ):
        super().__init__(env_map, distance_range, direction_range)

    def data(self, cam_pose):
        observed = []
        for landmark in self.map:
            z = self.obs_fn(cam_pose, landmark.position)
            if self.visible(z):
                observed.append(z)
        self.lastdata = observed
        return self.lastdata


class Camera(OpticalSensor):
    """
    Camera with the failure modes of a real landmark detector.

    Each landmark goes through the following pipeline, in order:

        1. **Projection**: exact (range, bearing), as in ``IdealCamera``.
        2. **Phantom**: with probability ``phantom_prob`` the projection is
           replaced by that of a uniformly drawn fake position.
        3. **Occlusion**: with probability ``occlusion_prob`` the range is
           redrawn uniformly between its value and the maximum range.
        4. **Oversight**: with probability ``oversight_prob`` the landmark is
           missed.
        5. **Visibility gate**: range and bearing must lie inside
           ``distance_range`` and ``direction_range``.
        6. **Noise**: r ~ N(r, (r·distance_noise_rate)²),
           φ ~ N(φ, direction_noise²).
        7. **Bias**: r·(1 + distance_bias), φ + direction_bias.

    The two bias constants are drawn once, at construction, from zero-mean
    normals with the given standard deviations.

    Parameters
    ----------
    env_map : Map
        Landmark map, frozen and shared by reference.
    distance_range, direction_range : tuple of float
        Inclusive visibility bounds (m, rad).
    distance_noise_rate : float
        Range noise standard deviation per metre of range.
    direction_noise : float
        Bearing noise standard deviation (rad).
    distance_bias_rate_stddev, direction_bias_stddev : float
        Standard deviations of the fixed range-rate and bearing biases.
    phantom_prob : float
        Probability of a phantom detection per landmark.
    phantom_range_x, phantom_range_y : tuple of float
        Area from which phantom positions are drawn.
    oversight_prob : float
        Probability of missing a landmark.
    occlusion_prob : float
        Probability of an occluded (lengthened) range.
    rng : numpy.random.Generator, optional
        Random stream owned by this camera.
    seed : int, optional
        Seed for a new stream when ``rng`` is not given.

    Notes
    -----
    Occlusion lengthens the range toward the far limit instead of shortening
    it.
    """

    def __init__(
        self,
        env_map,
        distance_range=(0.5, 6.0),
        direction_range=(-np.pi / 3, np.pi / 3),
        distance_noise_rate=0.1,
        direction_noise=np.pi / 90,
        distance_bias_rate_stddev=0.1,
        direction_bias_stddev=np.pi / 90,
        phantom_prob=0.0,
        phantom_range_x=(-5.0, 5.0),
        phantom_range_y=(-5.0, 5.0),
        oversight_prob=0.1,
        occlusion_prob=0.0,
        rng=None,
        seed=None,
    ):
        super().__init__(env_map, distance_range, direction_range)
        self.rng = make_rng(rng, seed)

        self.distance_noise_rate = check_non_negative(
            "distance_noise_rate", distance_noise_rate
        )
        self.direction_noise = check_non_negative("direction_noise", direction_noise)

        # Systematic error, fixed for the lifetime of the sensor
        self.distance_bias = self.rng.normal(
            0.0, check_non_negative("distance_bias_rate_stddev", distance_bias_rate_stddev)
        )
        self.direction_bias = self.rng.normal(
            0.0, check_non_negative("direction_bias_stddev", direction_bias_stddev)
        )

        self.phantom_prob = check_probability("phantom_prob", phantom_prob)
        self.phantom_range_x = check_range("phantom_range_x", phantom_range_x)
        self.phantom_range_y = check_range("phantom_range_y", phantom_range_y)
        self.oversight_prob = check_probability("oversight_prob", oversight_prob)
        self.occlusion_prob = check_probability("occlusion_prob", occlusion_prob)

    def noise(self, relpos):
        distance, direction = relpos
        ell = self.rng.normal(distance, distance * self.distance_noise_rate)
        phi = self.rng.normal(direction, self.direction_noise)
        return max(ell, 0.0), phi

    def bias(self, relpos):
        distance, direction = relpos
        return (
            max(distance * (1.0 + self.distance_bias), 0.0),
            direction + self.direction_bias,
        )

    def phantom(self, cam_pose, relpos):
        if self.rng.uniform() < self.phantom_prob:
            pos = (
                self.rng.uniform(*self.phantom_range_x),
                self.rng.uniform(*self.phantom_range_y),
            )
            return self.obs_fn(cam_pose, pos)
        return relpos

    def occlusion(self, relpos):
        if self.rng.uniform() < self.occlusion_prob:
            distance, direction = relpos
            ell = distance + self.rng.uniform() * (self.distance_range[1] - distance)
            return ell, direction
        return relpos

    def oversight(self, relpos):
        if self.rng.uniform() < self.oversight_prob:
            return None
        return relpos

    def data(self, cam_pose):
        observed = []
        for landmark in self.map:
            z = self.obs_fn(cam_pose, landmark.position)
            z = self.phantom(cam_pose, z)
            z = self.occlusion(z)
            z = self.oversight(z)
            if not self.visible(z):
                continue
            distance, direction = self.bias(self.noise(z))
            observed.append((float(distance), float(wrap_angle(direction))))
        self.lastdata = observed
        return self.lastdata
