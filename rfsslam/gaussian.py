"""Gaussian random vectors: Mahalanobis distance, likelihood and sampling."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

_DEFAULT_RNG = np.random.default_rng()


@dataclass(eq=False)
class RandomVec:
    """A random vector described by its mean, covariance and a time stamp."""

    mean: np.ndarray
    cov: np.ndarray | None = None
    time: float = 0.0

    def __post_init__(self) -> None:
        mean = np.atleast_1d(np.array(self.mean, dtype=float))
        if mean.ndim != 1:
            raise ValueError(f"mean must be a vector, got shape {mean.shape}")
        n = mean.shape[0]
        if self.cov is None:
            cov = np.zeros((n, n))
        else:
            cov = np.atleast_2d(np.array(self.cov, dtype=float))
        if cov.shape != (n, n):
            raise ValueError(f"covariance must have shape {(n, n)}, got {cov.shape}")
        self.mean = mean
        self.cov = cov
        self.time = float(self.time)

    @property
    def n_dim(self) -> int:
        return self.mean.shape[0]

    @property
    def cov_det(self) -> float:
        return float(np.linalg.det(self.cov))

    @property
    def cov_inv(self) -> np.ndarray:
        return np.linalg.inv(self.cov)

    @property
    def cov_cholesky_lower(self) -> np.ndarray:
        return np.linalg.cholesky(self.cov)

    def sample(self, rng: np.random.Generator | None = None) -> RandomVec:
        """Draw a vector from this Gaussian; covariance and time are carried over."""
        generator = rng if rng is not None else _DEFAULT_RNG
        noise = generator.standard_normal(self.n_dim)
        if self.cov.any():
            drawn = self.mean + self.cov_cholesky_lower @ noise
        else:
            drawn = self.mean.copy()
        return RandomVec(drawn, self.cov.copy(), self.time)


def _point(x) -> np.ndarray:
    if isinstance(x, RandomVec):
        return x.mean
    return np.atleast_1d(np.array(x, dtype=float))


def mahalanobis_dist2(x_fm: RandomVec, x_to) -> float:
    """Squared Mahalanobis distance from ``x_fm`` to ``x_to``, scaled by the covariance of ``x_fm``.

    ``x_to`` may be a :class:`RandomVec`, whose covariance is ignored, or a plain vector.
    """
    target = _point(x_to)
    if target.shape != x_fm.mean.shape:
        raise ValueError(f"vector shape {target.shape} does not match {x_fm.mean.shape}")
    e = target - x_fm.mean
    return float(e @ x_fm.cov_inv @ e)


def mahalanobis_dist(x_fm: RandomVec, x_to) -> float:
    """Mahalanobis distance from ``x_fm`` to ``x_to``."""
    return math.sqrt(mahalanobis_dist2(x_fm, x_to))


def gaussian_likelihood(gaussian: RandomVec, x_eval) -> float:
    """Density of ``gaussian`` at ``x_eval``; 0 where the value is not a number."""
    md2 = mahalanobis_dist2(gaussian, x_eval)
    with np.errstate(all="ignore"):
        norm = np.sqrt(np.power(2 * np.pi, gaussian.n_dim) * gaussian.cov_det)
        value = float(np.exp(-0.5 * md2) / norm)
    if math.isnan(value):
        return 0.0
    return value