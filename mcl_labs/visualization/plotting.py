"""
Matplotlib views of a simulated world.

The drawing mirrors the lab's localization plots: true trajectory, belief
estimate, particles and landmarks with their ids. Sensor rays are drawn from
the pose at which the last observation was taken.
"""

import matplotlib.pyplot as plt
import numpy as np


def plot_world(world, ax=None, xlim=(-5.0, 5.0), ylim=(-5.0, 5.0)):
    """
    Draw the current state of a ``World``.

    Parameters
    ----------
    world : World
        Simulated world, typically after ``run()``.
    ax : matplotlib.axes.Axes, optional
        Target axes. Defaults to the current axes.
    xlim, ylim : tuple of float
        Axis limits (m).

    Returns
    -------
    matplotlib.axes.Axes
    """
    if ax is None:
        ax = plt.gca()
    ax.cla()

    # Landmark locations and indexes
    positions = world.map.positions
    if len(positions):
        ax.scatter(
            positions[:, 0],
            positions[:, 1],
            s=200,
            c="k",
            alpha=0.2,
            marker="*",
            label="Landmark Locations",
        )
        for landmark in world.map:
            ax.text(*landmark.position, f"id: {landmark.id}", alpha=0.5, fontsize=10)

    for robot, estimator in world.objects:
        poses = robot.poses

        # Ground truth trajectory and heading
        ax.plot(poses[:, 0], poses[:, 1], "k", linewidth=0.8)
        x, y, theta = poses[-1]
        ax.plot(x, y, "o", markersize=8, markerfacecolor="none", markeredgecolor="k")
        ax.plot([x, x + 0.3 * np.cos(theta)], [y, y + 0.3 * np.sin(theta)], "k")

        # Sensor rays from the pose the last observation was taken at
        if robot.sensor is not None and len(poses) > 1:
            sx, sy, stheta = poses[-2]
            for distance, direction in robot.sensor.lastdata:
                lx = sx + distance * np.cos(direction + stheta)
                ly = sy + distance * np.sin(direction + stheta)
                ax.plot([sx, lx], [sy, ly], color="magenta", linewidth=0.8)

        if estimator is not None:
            particles = estimator.poses
            ax.quiver(
                particles[:, 0],
                particles[:, 1],
                np.cos(particles[:, 2]),
                np.sin(particles[:, 2]),
                color="blue",
                alpha=0.5,
                angles="xy",
                scale_units="xy",
                scale=5.0,
                width=0.003,
            )

    ax.set_xlim(*xlim)
    ax.set_ylim(*ylim)
    ax.set_aspect("equal")
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_title("Robot Simulation with Particle Belief")
    return ax
