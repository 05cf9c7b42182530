"""
Generalization Gradient
=======================

Estimates the marginal generalization gradients from the posterior
hypothesis set.

The probability that a novel stimulus at position x on one dimension
shares the consequences of the observed stimulus is the posterior mass of
the hypotheses whose span on that dimension contains x:

    p(x) = (1 / |H|) * sum_{h in H} [x_min(h) < x < x_max(h)]

With equally weighted Monte Carlo hypotheses this is the mean of a boolean
indicator over the retained population. Averaged over Shepard's gamma
prior on region size the curve approaches an exponential decay away from
the observation, with p = 1 at the observation itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..regions.sampler import RegionSet

logger = logging.getLogger(__name__)


def within_prob(
    points: NDArray,
    lower: NDArray,
    upper: NDArray,
    chunk_size: int = 256,
) -> NDArray:
    """
    Fraction of intervals (lower, upper) strictly containing each point.

    Args:
        points: Evaluation coordinates.
        lower: Lower interval edges, one per hypothesis.
        upper: Upper interval edges, same length as ``lower``.
        chunk_size: Number of points evaluated per broadcast block.

    Returns:
        Array of probabilities with the same length as ``points``. All
        zeros when there are no intervals.
    """
    points = np.atleast_1d(np.asarray(points, dtype=np.float64))
    lower = np.asarray(lower, dtype=np.float64)
    upper = np.asarray(upper, dtype=np.float64)

    if lower.shape != upper.shape:
        raise ValueError(f"Edge arrays differ in shape: {lower.shape} vs {upper.shape}")

    probs = np.zeros(points.shape[0], dtype=np.float64)
    if lower.size == 0:
        return probs

    for start in range(0, points.shape[0], chunk_size):
        block = points[start:start + chunk_size, None]
        inside = (block > lower[None, :]) & (block < upper[None, :])
        probs[start:start + chunk_size] = inside.mean(axis=1)

    return probs


@dataclass
class GeneralizationGradient:
    """Marginal generalization curves over an evaluation grid."""
    x: NDArray
    y: NDArray
    px: NDArray
    py: NDArray
    n_hypotheses: int

    @property
    def grid_size(self) -> int:
        return int(self.x.shape[0])

    def summary(self) -> dict:
        return {
            "grid_size": self.grid_size,
            "n_hypotheses": self.n_hypotheses,
            "max_px": float(self.px.max()) if self.px.size else 0.0,
            "max_py": float(self.py.max()) if self.py.size else 0.0,
            "area_px": float(np.trapezoid(self.px, self.x)) if self.px.size else 0.0,
            "area_py": float(np.trapezoid(self.py, self.y)) if self.py.size else 0.0,
        }


class GradientEstimator:
    """
    Computes generalization gradients on an evenly spaced grid.

    Parameters
    ----------
    range_limit : float
        The grid spans [-range_limit, range_limit] inclusive on each axis.
    grid_size : int
        Number of evaluation points per axis.
    """

    def __init__(self, range_limit: float = 7.5, grid_size: int = 1000):
        if not range_limit > 0:
            raise ValueError(f"range_limit must be positive, got {range_limit}")
        if grid_size < 2:
            raise ValueError(f"grid_size must be at least 2, got {grid_size}")

        self.range_limit = float(range_limit)
        self.grid_size = grid_size

    @property
    def grid(self) -> NDArray:
        r = self.range_limit
        return np.linspace(-r, r, self.grid_size)

    def estimate(self, hypotheses: RegionSet) -> GeneralizationGradient:
        """Compute px over the x grid and py over the y grid."""
        x = self.grid
        y = self.grid

        px = within_prob(x, hypotheses.x_min, hypotheses.x_max)
        py = within_prob(y, hypotheses.y_min, hypotheses.y_max)

        gradient = GeneralizationGradient(
            x=x, y=y, px=px, py=py, n_hypotheses=len(hypotheses),
        )
        summary = gradient.summary()
        logger.info(
            f"Generalization gradients over {self.grid_size} points from "
            f"{len(hypotheses)} hypotheses: max px={summary['max_px']:.3f}, "
            f"max py={summary['max_py']:.3f}"
        )
        return gradient
