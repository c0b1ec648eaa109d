"""
Correlated Gaussian sampling.

A draw from N(μ, Σ) is obtained from independent standard normals
z ~ N(0, I) through a factor L with L·Lᵀ = Σ:

    x = L·z + μ

L is the lower Cholesky factor when Σ is positive definite. Positive
semi-definite matrices (for instance a process-noise covariance with a channel
switched off) have no Cholesky factor, so they are factored through their
eigen-decomposition instead, which gives the same distribution.
"""

import logging

import numpy as np

from mcl_labs.simulation.config import ConfigurationError

logger = logging.getLogger(__name__)

# Relative tolerance on eigenvalues and asymmetry of a covariance matrix
PSD_TOLERANCE = 1e-10


def covariance_factor(cov: np.ndarray) -> np.ndarray:
    """
    Compute a square-root factor L of a covariance matrix, L·Lᵀ = cov.

    Parameters
    ----------
    cov : array_like, shape (n, n)
        Symmetric positive semi-definite covariance.

    Returns
    -------
    ndarray, shape (n, n)
        Lower Cholesky factor, or the eigen-decomposition factor
        V·diag(√λ) for singular matrices.

    Raises
    ------
    ConfigurationError
        If ``cov`` is not square, not symmetric, not finite, or has a
        negative eigenvalue.
    """
    cov = np.asarray(cov, dtype=float)
    if cov.ndim != 2 or cov.shape[0] != cov.shape[1]:
        raise ConfigurationError(f"covariance must be a square matrix, got shape {cov.shape}")
    if not np.all(np.isfinite(cov)):
        raise ConfigurationError("covariance contains non-finite entries")

    scale = max(1.0, float(np.max(np.abs(cov))))
    if not np.allclose(cov, cov.T, rtol=0.0, atol=PSD_TOLERANCE * scale):
        raise ConfigurationError(f"covariance must be symmetric, got\n{cov}")

    try:
        return np.linalg.cholesky(cov)
    except np.linalg.LinAlgError:
        eigenvals, eigenvecs = np.linalg.eigh(cov)
        if np.min(eigenvals) < -PSD_TOLERANCE * scale:
            raise ConfigurationError(
                f"covariance is not positive semi-definite "
                f"(smallest eigenvalue {np.min(eigenvals):.3g})"
            )
        logger.debug("Singular covariance; using eigen-decomposition factor")
        return eigenvecs @ np.diag(np.sqrt(np.clip(eigenvals, 0.0, None)))


class CorrelatedNoiseSampler:
    """
    Draws correlated Gaussian vectors from a fixed covariance.

    The factor is computed once, at construction, so an invalid covariance is
    reported before any sample is requested.

    Parameters
    ----------
    cov : array_like, shape (n, n)
        Symmetric positive semi-definite covariance.

    Examples
    --------
    >>> sampler = CorrelatedNoiseSampler(np.diag([0.04, 0.01]))
    >>> sampler.sample(np.random.default_rng(0)).shape
    (2,)
    """

    def __init__(self, cov):
        self.cov = np.array(cov, dtype=float)
        self.factor = covariance_factor(self.cov)

    @property
    def dim(self):
        return self.cov.shape[0]

    def sample(self, rng, mean=None):
        """Return ``L·z + mean`` for one standard-normal vector ``z``."""
        z = rng.standard_normal(self.dim)
        if mean is None:
            return self.factor @ z
        return self.factor @ z + np.asarray(mean, dtype=float)


def mvtnorm(rng, mu, cov):
    """Draw one sample from N(mu, cov) using the generator ``rng``."""
    mu = np.asarray(mu, dtype=float)
    sampler = CorrelatedNoiseSampler(cov)
    if mu.shape != (sampler.dim,):
        raise ConfigurationError(
            f"mean has shape {mu.shape}, covariance expects ({sampler.dim},)"
        )
    return sampler.sample(rng, mu)
