"""
Evaluation metrics for simulated localization runs.

This module provides the Absolute Trajectory Error (ATE) between a belief
estimate and the simulated ground truth, summary statistics of a run, and the
offline estimation of the motion-noise parameters used by the particle belief.
Trajectory metrics operate on pandas DataFrames with timestamp indices, as
produced by ``World.build_dataframes()``.
"""

import logging
from typing import Tuple

import numpy as np
import pandas as pd
from scipy import stats

# Configure module logger
logger = logging.getLogger(__name__)


def _check_frame(name: str, frame, required_cols) -> None:
    if not isinstance(frame, pd.DataFrame):
        raise ValueError(
            f"{name} must be a DataFrame, got {type(frame).__name__}. "
            f"Did you call world.build_dataframes() first?"
        )
    for col in required_cols:
        if col not in frame.columns:
            raise ValueError(
                f"{name} missing required column '{col}'. "
                f"Available columns: {list(frame.columns)}"
            )


def _align(estimated_states: pd.DataFrame, groundtruth_data: pd.DataFrame) -> pd.DataFrame:
    # Inner join keeps only the stamps present in both trajectories
    aligned = estimated_states[["x", "y"]].join(
        groundtruth_data[["x", "y"]], how="inner", rsuffix="_gt"
    )
    if len(aligned) == 0:
        raise RuntimeError(
            "Timestamp alignment produced 0 matching frames! "
            f"Estimated time range: [{estimated_states.index.min()}, {estimated_states.index.max()}], "
            f"Ground truth time range: [{groundtruth_data.index.min()}, {groundtruth_data.index.max()}]"
        )
    return aligned


def compute_ate(
    estimated_states: pd.DataFrame,
    groundtruth_data: pd.DataFrame,
    verbose: bool = True
) -> float:
    """
    Compute Absolute Trajectory Error (ATE) using RMSE with timestamp matching.

    Parameters
    ----------
    estimated_states : pd.DataFrame
        Belief mean trajectory with datetime index and columns ['x', 'y'],
        typically ``world.states``.
    groundtruth_data : pd.DataFrame
        True trajectory with datetime index and columns ['x', 'y'],
        typically ``world.gt``.
    verbose : bool, optional
        If True, log alignment and error statistics. Default: True.

    Returns
    -------
    float
        Root Mean Squared Error (RMSE) of position errors in meters.

    Raises
    ------
    ValueError
        If inputs are not DataFrames or miss required columns.
    RuntimeError
        If timestamp alignment produces no matching frames.

    Examples
    --------
    >>> world.run()
    >>> world.build_dataframes()
    >>> ate = compute_ate(world.states, world.gt, verbose=False)
    >>> print(f"Belief ATE: {ate:.3f} m")
    """
    _check_frame("estimated_states", estimated_states, ["x", "y"])
    _check_frame("groundtruth_data", groundtruth_data, ["x", "y"])

    aligned = _align(estimated_states, groundtruth_data)

    if verbose:
        alignment_pct = len(aligned) / len(estimated_states) * 100
        logger.info("=" * 60)
        logger.info("ATE Computation: Timestamp Alignment")
        logger.info(f"✓ Estimated states: {len(estimated_states)} frames")
        logger.info(f"✓ Ground truth: {len(groundtruth_data)} frames")
        logger.info(f"✓ Aligned frames: {len(aligned)} ({alignment_pct:.1f}% of estimates)")

        if alignment_pct < 90:
            logger.warning(
                f"⚠ Only {alignment_pct:.1f}% of frames aligned! "
                "Check that both logs use the same time step."
            )

    # Per-frame Euclidean errors
    errors = np.sqrt(
        (aligned["x"] - aligned["x_gt"]) ** 2 +
        (aligned["y"] - aligned["y_gt"]) ** 2
    )
    ate = float(np.sqrt(np.mean(errors ** 2)))

    if verbose:
        logger.info("=" * 60)
        logger.info("ATE Computation: Error Statistics")
        logger.info(f"✓ Mean error: {np.mean(errors):.4f} m")
        logger.info(f"✓ Max error: {np.max(errors):.4f} m")
        logger.info(f"✓ ATE (RMSE): {ate:.4f} m")
        logger.info("=" * 60)

    return ate


def compute_trajectory_stats(
    estimated_states: pd.DataFrame,
    groundtruth_data: pd.DataFrame
) -> dict:
    """
    Compute detailed trajectory error statistics.

    Returns
    -------
    dict
        'ate', 'mean_error', 'std_error', 'median_error', 'max_error',
        'min_error', 'aligned_frames' and 'alignment_ratio'.
    """
    _check_frame("estimated_states", estimated_states, ["x", "y"])
    _check_frame("groundtruth_data", groundtruth_data, ["x", "y"])
    aligned = _align(estimated_states, groundtruth_data)

    errors = np.sqrt(
        (aligned["x"] - aligned["x_gt"]) ** 2 +
        (aligned["y"] - aligned["y_gt"]) ** 2
    )

    return {
        "ate": float(np.sqrt(np.mean(errors ** 2))),
        "mean_error": float(np.mean(errors)),
        "std_error": float(np.std(errors)),
        "median_error": float(np.median(errors)),
        "max_error": float(np.max(errors)),
        "min_error": float(np.min(errors)),
        "aligned_frames": len(aligned),
        "alignment_ratio": len(aligned) / len(estimated_states),
    }


def compute_run_metrics(world, index: int = 0) -> dict:
    """
    Summarise one robot of a finished simulation.

    Returns
    -------
    dict
        - 'path_length': total distance travelled (m), kidnap jumps included
        - 'duration': simulated time (s)
        - 'n_landmarks': number of landmarks in the map
        - 'distance': straight-line start-to-end distance (m)
        - 'n_observations': number of recorded observations
        - 'm_density': observations per metre travelled
    """
    robot, _ = world.objects[index]
    poses = robot.poses

    steps = np.diff(poses[:, :2], axis=0)
    path_length = float(np.sum(np.hypot(steps[:, 0], steps[:, 1])))
    n_observations = len(world.observations[index])

    return {
        "path_length": path_length,
        "duration": (len(poses) - 1) * world.time_interval,
        "n_landmarks": len(world.map),
        "distance": float(np.linalg.norm(poses[-1, :2] - poses[0, :2])),
        "n_observations": n_observations,
        "m_density": n_observations / path_length if path_length > 0 else 0.0,
    }


def estimate_motion_noise(
    final_poses: np.ndarray,
    initial_pose: Tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> dict:
    """
    Estimate process-noise parameters from many straight runs.

    Many robots start at ``initial_pose`` and drive straight ahead for the same
    time. The spread of their final poses gives

        σ_νν = √(Var[r] / E[r])
        σ_ων = √(Var[θ] / E[r])

    where r is the distance travelled and θ the heading change. The variances
    are unbiased sample variances.

    Parameters
    ----------
    final_poses : ndarray, shape (N, 3)
        Final [x, y, θ] of each run, N >= 2.
    initial_pose : tuple of float
        Common initial pose.

    Returns
    -------
    dict
        'r_mean', 'r_var', 'theta_var', 'sigma_nu_nu', 'sigma_omega_nu'.
    """
    final_poses = np.asarray(final_poses, dtype=float)
    if final_poses.ndim != 2 or final_poses.shape[1] != 3 or len(final_poses) < 2:
        raise ValueError(
            f"final_poses must have shape (N, 3) with N >= 2, got {final_poses.shape}"
        )

    start = np.asarray(initial_pose, dtype=float)
    df = pd.DataFrame(
        {
            "r": np.hypot(final_poses[:, 0] - start[0], final_poses[:, 1] - start[1]),
            "theta": final_poses[:, 2] - start[2],
        }
    )
    r_mean = df["r"].mean()
    if r_mean <= 0.0:
        raise RuntimeError("robots did not move; cannot estimate noise per distance")

    result = {
        "r_mean": float(r_mean),
        "r_var": float(df["r"].var()),
        "theta_var": float(df["theta"].var()),
    }
    result["sigma_nu_nu"] = float(np.sqrt(result["r_var"] / r_mean))
    result["sigma_omega_nu"] = float(np.sqrt(result["theta_var"] / r_mean))
    logger.info(
        f"σ_νν: {result['sigma_nu_nu']:.5f}, σ_ων: {result['sigma_omega_nu']:.5f} "
        f"from {len(df)} runs"
    )
    return result


def summarize_observations(sensor: pd.DataFrame) -> pd.DataFrame:
    """
    Descriptive statistics of a range-bearing observation log.

    Parameters
    ----------
    sensor : pd.DataFrame
        Observation log with columns ['range_l', 'bearing_l'], typically
        ``world.sensor``.

    Returns
    -------
    pd.DataFrame
        One row per column with nobs, mean, variance (unbiased), min, max,
        skewness and kurtosis.
    """
    _check_frame("sensor", sensor, ["range_l", "bearing_l"])
    if len(sensor) < 2:
        raise RuntimeError(f"need at least 2 observations, got {len(sensor)}")

    rows = {}
    for col in ["range_l", "bearing_l"]:
        d = stats.describe(sensor[col].to_numpy())
        rows[col] = {
            "nobs": d.nobs,
            "mean": d.mean,
            "variance": d.variance,
            "min": d.minmax[0],
            "max": d.minmax[1],
            "skewness": d.skewness,
            "kurtosis": d.kurtosis,
        }
    return pd.DataFrame.from_dict(rows, orient="index")
