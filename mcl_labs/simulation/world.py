#!/usr/bin/env python3
"""
Discrete-time simulation loop.

The world advances every registered robot in fixed steps of ``time_interval``
for ``int(time_span / time_interval)`` steps. Within a step, for each robot:

    1. **Sense**: the mounted camera observes the map from the true pose.
    2. **Decide**: the robot's agent turns the observation into (ν, ω).
    3. **Act**: the robot applies the command and records its new pose.
    4. **Predict**: the robot's estimator, if any, runs its motion update
       with the same commanded (ν, ω).

Robots are stepped in registration order and steps run strictly in time order,
since every stochastic model carries timers from one step to the next.
"""

import logging
import math

import numpy as np

from mcl_labs.simulation.config import ConfigurationError, check_positive
from mcl_labs.utils.data_utils import build_timeseries
from mcl_labs.visualization.plotting import plot_world

logger = logging.getLogger(__name__)


class World:
    """
    Simulation of one or more robots moving through a landmark map.

    Parameters
    ----------
    env_map : Map
        Landmark map shared by every camera.
    time_span : float
        Simulated duration (s).
    time_interval : float
        Step duration Δt (s).
    plot : bool, optional
        Draw the final state with matplotlib after ``run``. Default: False.

    Attributes
    ----------
    objects : list of tuple
        Registered ``(robot, estimator)`` pairs; ``estimator`` may be None.
    observations : list of ndarray
        Per-robot observation log, rows [t, range, bearing].
    estimates : list of ndarray
        Per-robot belief mean log, rows [t, x, y, θ] (empty without estimator).

    Examples
    --------
    >>> env_map = Map([(2.0, -2.0), (-1.0, -3.0), (3.0, 3.0)])
    >>> camera = IdealCamera(env_map)
    >>> robot = IdealRobot([-2.0, -1.0, np.pi / 5 * 6], Agent(0.2, np.pi / 18), camera)
    >>> world = World(env_map, time_span=10.0, time_interval=1.0)
    >>> world.append(robot)
    >>> world.run()
    >>> len(robot.poses)
    11
    """

    def __init__(self, env_map, time_span, time_interval, plot=False):
        self.map = env_map
        self.time_span = check_positive("time_span", time_span)
        self.time_interval = check_positive("time_interval", time_interval)
        self.plot = plot
        self.objects = []
        self.observations = []
        self.estimates = []

        ratio = self.time_span / self.time_interval
        if not math.isclose(ratio, round(ratio)):
            logger.warning(
                f"time_span={self.time_span} is not a multiple of "
                f"time_interval={self.time_interval}; the last partial step is dropped"
            )

    @property
    def max_iteration(self):
        # Small tolerance so that e.g. 30.0 / 0.1 gives 300 steps, not 299
        return int(self.time_span / self.time_interval + 1e-9)

    def append(self, robot, estimator=None):
        """Register a robot and, optionally, the belief that tracks it."""
        if robot.agent is None:
            raise ConfigurationError("robot has no agent to decide its commands")
        if estimator is not None and len(estimator) < 1:
            raise ConfigurationError("estimator has no particles")
        self.objects.append((robot, estimator))
        self.observations.append([])
        self.estimates.append([])
        if estimator is not None:
            self.estimates[-1].append(np.concatenate([[0.0], estimator.mean_pose()]))

    def run(self):
        """Execute every step of the simulation."""
        logger.info(
            f"Running {self.max_iteration} steps of {self.time_interval} s "
            f"for {len(self.objects)} robot(s) and {len(self.map)} landmark(s)"
        )
        for i in range(self.max_iteration):
            self.one_step(i)
        logger.info("Simulation finished")

        if self.plot:
            plot_world(self)

    def one_step(self, i):
        t = i * self.time_interval
        for k, (robot, estimator) in enumerate(self.objects):
            obs = robot.observe()
            for distance, direction in obs:
                self.observations[k].append([t, distance, direction])

            nu, omega = robot.agent.decision(obs)
            robot.one_step(nu, omega, self.time_interval)
            if estimator is not None:
                estimator.motion_update(nu, omega, self.time_interval)
                self.estimates[k].append(
                    np.concatenate([[t + self.time_interval], estimator.mean_pose()])
                )

    def build_dataframes(self, index=0):
        """
        Convert the logs of one robot into time-indexed DataFrames.

        Updates class attributes:
            - ``gt``: true poses [x, y, theta]
            - ``states``: belief mean [x, y, theta] (None without estimator)
            - ``sensor``: observations [range_l, bearing_l]

        Timestamps are seconds of simulated time from the start of the run.
        """
        robot, estimator = self.objects[index]
        poses = robot.poses
        stamps = np.arange(len(poses)) * self.time_interval
        self.gt = build_timeseries(
            np.column_stack([stamps, poses]), cols=["stamp", "x", "y", "theta"]
        )

        self.states = None
        if estimator is not None:
            self.states = build_timeseries(
                np.array(self.estimates[index]), cols=["stamp", "x", "y", "theta"]
            )

        sensor = np.array(self.observations[index], dtype=float).reshape(-1, 3)
        self.sensor = build_timeseries(sensor, cols=["stamp", "range_l", "bearing_l"])
