"""
Marimo UI widget helpers for the noise-simulation notebook.

Provides standardized widget creation functions for the parameters of the
simulated robot, camera and particle belief. All widgets are designed to work
with Marimo's reactive execution model.

Example:
    import marimo as mo
    from mcl_labs.visualization.marimo_helpers import (
        create_robot_noise_controls,
        robot_kwargs,
    )

    # Create reactive controls
    robot_controls = create_robot_noise_controls()

    # Use in dependent cell
    robot = Robot(pose, agent, camera, **robot_kwargs(robot_controls), seed=1)
"""

import math

import marimo as mo

AGENT_COMMANDS = {
    "straight": (0.2, 0.0),
    "circle": (0.2, 10.0 / 180.0 * math.pi),
}


def create_parameter_slider(
    name: str,
    min_val: float,
    max_val: float,
    default: float,
    step: float | None = None,
) -> mo.ui.slider:
    """
    Create a standardized parameter slider with consistent styling.

    Args:
        name: Slider label (e.g., "Noise std θ (rad)")
        min_val: Minimum slider value
        max_val: Maximum slider value
        default: Default/initial value
        step: Step size (default: (max-min)/100)

    Returns:
        Marimo slider widget with show_value=True
    """
    if step is None:
        step = (max_val - min_val) / 100

    return mo.ui.slider(
        min_val,
        max_val,
        value=default,
        step=step,
        label=name,
        show_value=True,
    )


def create_agent_selector(default: str = "circle") -> mo.ui.dropdown:
    """
    Create dropdown for the constant-command agents of the demos.

    Options map to (ν, ω): "straight" → (0.2, 0), "circle" → (0.2, 10°/s).

    Example:
        agent = create_agent_selector()
        nu, omega = AGENT_COMMANDS[agent.value]
    """
    return mo.ui.dropdown(list(AGENT_COMMANDS), label="Agent", value=default)


def create_robot_noise_controls() -> dict[str, mo.ui.slider]:
    """
    Create sliders for the actuation noise of ``Robot``.

    Expected times use 0 to mean "disabled", which is how ``Robot`` treats a
    zero expected stuck or kidnap time.

    Returns:
        Dictionary of sliders keyed by ``Robot`` parameter name
    """
    return {
        "noise_per_meter": create_parameter_slider("Noise per meter", 0.0, 20.0, 5.0, 0.5),
        "noise_std": create_parameter_slider(
            "Heading noise std (rad)", 0.0, 0.2, round(math.pi / 60, 3), 0.001
        ),
        "bias_nu": create_parameter_slider("Bias std ν", 0.0, 0.5, 0.1, 0.01),
        "bias_omega": create_parameter_slider("Bias std ω", 0.0, 0.5, 0.1, 0.01),
        "expected_stuck_time": create_parameter_slider(
            "Expected stuck time (s)", 0.0, 120.0, 0.0, 1.0
        ),
        "expected_escape_time": create_parameter_slider(
            "Expected escape time (s)", 0.0, 30.0, 0.0, 0.5
        ),
        "expected_kidnap_time": create_parameter_slider(
            "Expected kidnap time (s)", 0.0, 120.0, 0.0, 1.0
        ),
    }


def robot_kwargs(controls: dict) -> dict:
    """Translate the sliders of ``create_robot_noise_controls`` into ``Robot`` kwargs."""
    return {
        "noise_per_meter": controls["noise_per_meter"].value,
        "noise_std": controls["noise_std"].value,
        "bias_rate_stds": (controls["bias_nu"].value, controls["bias_omega"].value),
        "expected_stuck_time": controls["expected_stuck_time"].value,
        "expected_escape_time": controls["expected_escape_time"].value,
        "expected_kidnap_time": controls["expected_kidnap_time"].value,
    }


def create_camera_noise_controls() -> dict[str, mo.ui.slider]:
    """
    Create sliders for the failure modes of ``Camera``.

    Returns:
        Dictionary of sliders keyed by ``Camera`` parameter name
    """
    return {
        "distance_noise_rate": create_parameter_slider(
            "Range noise rate", 0.0, 0.5, 0.1, 0.01
        ),
        "direction_noise": create_parameter_slider(
            "Bearing noise (rad)", 0.0, 0.2, round(math.pi / 90, 3), 0.001
        ),
        "phantom_prob": create_parameter_slider("Phantom probability", 0.0, 1.0, 0.0, 0.01),
        "oversight_prob": create_parameter_slider("Oversight probability", 0.0, 1.0, 0.1, 0.01),
        "occlusion_prob": create_parameter_slider("Occlusion probability", 0.0, 1.0, 0.0, 0.01),
    }


def create_particle_filter_controls(
    num_particles_default: int = 100,
    max_particles: int = 500,
) -> dict[str, mo.ui.slider]:
    """
    Create sliders for the particle belief.

    Args:
        num_particles_default: Default number of particles
        max_particles: Maximum particles allowed

    Returns:
        Dictionary with the particle count and the four motion noise stds

    Example:
        pf_controls = create_particle_filter_controls()
        estimator = Mcl(
            pose,
            pf_controls["num_particles"].value,
            motion_noise_stds={k: pf_controls[k].value for k in ("nn", "no", "on", "oo")},
        )
    """
    return {
        "num_particles": mo.ui.slider(
            10,
            max_particles,
            value=num_particles_default,
            step=10,
            label="Number of Particles",
            show_value=True,
        ),
        "nn": create_parameter_slider("σ_νν", 0.0, 0.5, 0.185, 0.001),
        "no": create_parameter_slider("σ_νω", 0.0, 0.5, 0.001, 0.001),
        "on": create_parameter_slider("σ_ων", 0.0, 0.5, 0.023, 0.001),
        "oo": create_parameter_slider("σ_ωω", 0.0, 0.5, 0.018, 0.001),
    }


def create_time_scrubber(max_timesteps: int, default: int = 0) -> mo.ui.slider:
    """
    Create a time scrubber slider for trajectory playback.

    Args:
        max_timesteps: Maximum number of timesteps
        default: Starting timestep (default: 0)

    Returns:
        Marimo slider for time scrubbing

    Example:
        time_slider = create_time_scrubber(len(robot.poses))
        # In dependent cell:
        trajectory_up_to_now = robot.poses[:time_slider.value + 1]
    """
    return mo.ui.slider(
        0,
        max_timesteps - 1,
        value=default,
        step=1,
        label="Trajectory Progress",
        show_value=True,
    )


def build_control_panel(widgets: dict):
    """
    Build a standardized vertical control panel from widgets.

    Args:
        widgets: Dictionary of {label: widget}; labels starting with "##" are
            rendered as section headers

    Returns:
        Marimo vstack containing labeled widgets
    """
    elements = []
    for label, widget in widgets.items():
        if label.startswith("##"):  # Section header
            elements.append(mo.md(label))
        else:
            elements.append(widget)

    return mo.vstack(elements)
