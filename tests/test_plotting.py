import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pytest  # noqa: E402

from mcl_labs.localization import Mcl  # noqa: E402
from mcl_labs.simulation import Agent, IdealCamera, Robot, World  # noqa: E402
from mcl_labs.visualization.plotting import plot_world  # noqa: E402


@pytest.fixture
def finished_world(landmark_map):
    robot = Robot([0.0, 0.0, 0.0], Agent(0.2, 0.1), IdealCamera(landmark_map), seed=1)
    world = World(landmark_map, time_span=3.0, time_interval=0.1)
    world.append(robot, Mcl([0.0, 0.0, 0.0], 20, seed=2))
    world.run()
    return world


def test_plot_world_draws_into_given_axes(finished_world):
    fig, ax = plt.subplots()
    assert plot_world(finished_world, ax=ax) is ax
    assert len(ax.texts) == 3
    assert len(ax.lines) >= 3
    assert ax.get_xlim() == (-5.0, 5.0)
    plt.close(fig)


def test_plot_world_draws_sensor_rays(finished_world):
    fig, ax = plt.subplots()
    plot_world(finished_world, ax=ax)
    robot, _ = finished_world.objects[0]
    rays = [line for line in ax.lines if line.get_color() == "magenta"]
    assert len(rays) == len(robot.sensor.lastdata)
    plt.close(fig)


def test_plot_world_on_current_axes(landmark_map):
    world = World(landmark_map, time_span=1.0, time_interval=0.5, plot=True)
    world.append(Robot([0.0, 0.0, np.pi / 4], Agent(0.1, 0.0), seed=0))
    world.run()
    assert len(plt.gca().texts) == 3
    plt.close("all")
