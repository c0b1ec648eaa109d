import marimo

__generated_with = "0.16.5"
app = marimo.App(width="full")


@app.cell(hide_code=True)
def _(mo):
    mo.md(
        r"""
    # Session 2: Motion and Sensor Uncertainty, and the MCL Motion Update

    **Learning Objectives**:
    - See how bias, heading drift, getting stuck and kidnapping corrupt a trajectory
    - See how phantoms, oversight, occlusion, noise and bias corrupt landmark observations
    - Estimate motion-noise parameters from many straight runs
    - Watch a particle belief spread under the motion update alone

    **Session Structure**:
    1. **Noisy Robot**: one robot, interactive actuation noise
    2. **Noisy Camera**: range/bearing observations and their statistics
    3. **Noise Estimation**: σ_νν and σ_ων from 100 straight runs
    4. **Particle Belief**: prediction step of Monte Carlo Localization
    """
    )
    return


@app.cell(hide_code=True)
def _():
    # Standard library
    import os
    import sys

    # Data manipulation and visualization
    import matplotlib.pyplot as plt
    import numpy as np
    return np, os, plt, sys


@app.cell
def _(os, sys):
    # Setup project environment: navigate to project root
    if os.path.basename(os.getcwd()) == "notebooks":
        os.chdir("..")
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())

    # Import project modules
    from mcl_labs.localization.mcl import Mcl
    from mcl_labs.simulation import Agent, Camera, Map, Robot, World
    from mcl_labs.utils.metrics import (
        compute_ate,
        estimate_motion_noise,
        summarize_observations,
    )
    from mcl_labs.visualization import marimo_helpers as mh
    from mcl_labs.visualization.plotting import plot_world
    return (
        Agent,
        Camera,
        Map,
        Mcl,
        Robot,
        World,
        compute_ate,
        estimate_motion_noise,
        mh,
        plot_world,
        summarize_observations,
    )


@app.cell(hide_code=True)
def _(mo):
    mo.md(r"""## Part 1: Noisy Robot""")
    return


@app.cell
def _(mh):
    agent_selector = mh.create_agent_selector()
    robot_controls = mh.create_robot_noise_controls()
    camera_controls = mh.create_camera_noise_controls()
    pf_controls = mh.create_particle_filter_controls()

    mh.build_control_panel(
        {
            "## Agent": None,
            "agent": agent_selector,
            "## Robot": None,
            **robot_controls,
            "## Camera": None,
            **camera_controls,
            "## Particle belief": None,
            **pf_controls,
        }
    )
    return agent_selector, camera_controls, pf_controls, robot_controls


@app.cell
def _(
    Agent,
    Camera,
    Map,
    Mcl,
    Robot,
    World,
    agent_selector,
    camera_controls,
    mh,
    np,
    pf_controls,
    robot_controls,
):
    env_map = Map([(-4.0, 2.0), (2.0, -3.0), (3.0, 3.0)])
    initial_pose = np.array([0.0, 0.0, 0.0])

    camera = Camera(
        env_map,
        **{name: slider.value for name, slider in camera_controls.items()},
        seed=2,
    )
    agent = Agent(*mh.AGENT_COMMANDS[agent_selector.value])
    robot = Robot(
        initial_pose, agent, camera, **mh.robot_kwargs(robot_controls), seed=1
    )
    estimator = Mcl(
        initial_pose,
        pf_controls["num_particles"].value,
        motion_noise_stds={k: pf_controls[k].value for k in ("nn", "no", "on", "oo")},
        seed=3,
    )

    world = World(env_map, time_span=30.0, time_interval=0.1)
    world.append(robot, estimator)
    world.run()
    world.build_dataframes()
    return (world,)


@app.cell
def _(plot_world, plt, world):
    fig, ax = plt.subplots(figsize=(7, 7))
    plot_world(world, ax=ax)
    fig
    return


@app.cell(hide_code=True)
def _(mo):
    mo.md(
        r"""
    ## Part 2: Observation Statistics

    Ranges are corrupted proportionally to their length, bearings by a constant
    amount. The summary below is computed over every observation of the run.
    """
    )
    return


@app.cell
def _(summarize_observations, world):
    summarize_observations(world.sensor) if len(world.sensor) > 1 else world.sensor
    return


@app.cell(hide_code=True)
def _(mo):
    mo.md(
        r"""
    ## Part 3: Estimating Motion Noise

    100 robots drive straight at 0.1 m/s for 40 s from the origin, with heading
    noise only. The spread of their final poses gives the noise rates used by
    the particle belief.
    """
    )
    return


@app.cell
def _(Agent, Map, Robot, World, estimate_motion_noise, np):
    straight_world = World(Map(), time_span=40.0, time_interval=0.1)
    runs = [
        Robot(
            [0.0, 0.0, 0.0],
            Agent(0.1, 0.0),
            noise_per_meter=5.0,
            noise_std=np.pi / 60,
            bias_rate_stds=(0.0, 0.0),
            seed=seed,
        )
        for seed in range(100)
    ]
    for run in runs:
        straight_world.append(run)
    straight_world.run()

    noise = estimate_motion_noise(np.array([run.pose for run in runs]))
    noise
    return


@app.cell(hide_code=True)
def _(mo):
    mo.md(
        r"""
    ## Part 4: Particle Belief

    Without an observation update the belief only spreads: the ATE between
    its mean and the true trajectory grows with the distance travelled.
    """
    )
    return


@app.cell
def _(compute_ate, world):
    ate = compute_ate(world.states, world.gt, verbose=False)
    f"Belief ATE: {ate:.3f} m"
    return


@app.cell
def _():
    import marimo as mo
    return (mo,)


if __name__ == "__main__":
    app.run()
