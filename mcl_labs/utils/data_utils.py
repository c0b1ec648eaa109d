"""
Data transformation and preprocessing utilities.

This module provides helper functions for converting simulation logs into
time series, the format consumed by the trajectory metrics.
"""

import pandas as pd


def build_timeseries(data, cols):
    """
    Convert numpy array to pandas DataFrame with datetime index.

    Converts the stamp column (seconds) to pandas datetime objects so that
    logs sampled on the same simulated clock can be joined on their index.

    Parameters
    ----------
    data : ndarray
        Input data array where first column contains timestamps in seconds.
    cols : list of str
        Column names for the DataFrame. First column should be 'stamp'.

    Returns
    -------
    pandas.DataFrame
        Time-indexed DataFrame with datetime index and remaining columns.

    Examples
    --------
    >>> import numpy as np
    >>> from mcl_labs.utils.data_utils import build_timeseries
    >>>
    >>> # Trajectory sampled every 0.1 s [t, x, y, theta]
    >>> data = np.array([
    ...     [0.0, 0.0, 0.0, 0.0],
    ...     [0.1, 0.02, 0.0, 0.0],
    ...     [0.2, 0.04, 0.0, 0.0]
    ... ])
    >>> df = build_timeseries(data, cols=['stamp', 'x', 'y', 'theta'])
    >>> len(df)
    3

    Notes
    -----
    - Stamps are rounded to the microsecond so that float steps such as
      ``3 * 0.1`` and ``0.3`` land on the same index entry
    - Sets timestamp column as DataFrame index for temporal operations
    """
    timeseries = pd.DataFrame(data, columns=cols)
    timeseries["stamp"] = pd.to_datetime(timeseries["stamp"], unit="s").dt.round("us")
    timeseries = timeseries.set_index("stamp")
    return timeseries
