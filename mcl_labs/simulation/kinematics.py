"""
Unicycle pose kinematics shared by the true robot and by every particle.

Constant-velocity motion over one time step follows an arc of constant
curvature (Probabilistic Robotics, Table 5.3 without the noise terms):

    x' = x + ν/ω · (sin(θ + ω·Δt) − sin θ)
    y' = y + ν/ω · (−cos(θ + ω·Δt) + cos θ)
    θ' = θ + ω·Δt

For |ω| below ``OMEGA_EPSILON`` the arc degenerates into a straight segment,
which is also the limit of the expressions above as ω → 0.
"""

import math

import numpy as np

OMEGA_EPSILON = 1e-10


def state_transition(nu, omega, time, pose):
    """
    Advance a pose by one time step of constant (ν, ω).

    Parameters
    ----------
    nu : float
        Linear velocity (m/s).
    omega : float
        Angular velocity (rad/s).
    time : float
        Step duration Δt (s).
    pose : array_like, shape (3,)
        Current pose [x, y, θ].

    Returns
    -------
    ndarray, shape (3,)
        New pose. The input is not modified and θ is not wrapped.

    Examples
    --------
    >>> state_transition(0.2, 0.0, 1.0, np.array([-2.0, 3.0, 0.0]))
    array([-1.8,  3. ,  0. ])
    """
    x, y, theta = pose
    if abs(omega) < OMEGA_EPSILON:
        return np.array(
            [
                x + nu * np.cos(theta) * time,
                y + nu * np.sin(theta) * time,
                theta + omega * time,
            ]
        )
    return np.array(
        [
            x + nu / omega * (np.sin(theta + omega * time) - np.sin(theta)),
            y + nu / omega * (-np.cos(theta + omega * time) + np.cos(theta)),
            theta + omega * time,
        ]
    )


def wrap_angle(angle):
    """Wrap an angle into (-π, π]."""
    # remainder lands in [-π, π]; the loops only fix the -π endpoint
    angle = math.remainder(angle, 2 * np.pi)
    while angle > np.pi:
        angle -= 2 * np.pi
    while angle <= -np.pi:
        angle += 2 * np.pi
    return angle
