"""Simulated world: landmarks, noisy cameras and robots, and the time-step loop."""

from .config import ConfigurationError
from .kinematics import state_transition, wrap_angle
from .landmarks import Landmark, Map
from .robots import Agent, IdealRobot, Robot
from .sensors import Camera, IdealCamera, OpticalSensor
from .world import World

__all__ = [
    "Agent",
    "Camera",
    "ConfigurationError",
    "IdealCamera",
    "IdealRobot",
    "Landmark",
    "Map",
    "OpticalSensor",
    "Robot",
    "World",
    "state_transition",
    "wrap_angle",
]
