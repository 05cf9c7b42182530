"""
Region Sampler
==============

Draws candidate consequential regions from Shepard's prior.

Theoretical Foundation:
-----------------------
Shepard (1987) derived the exponential law of generalization by assuming
that a learner who observes one consequential stimulus entertains a
family of hypotheses about the *consequential region*: the connected
subset of stimulus space within which stimuli share consequences. In a
two-dimensional separable space those regions are axis-aligned
rectangles.

The prior over rectangles used here factorizes per axis:
    - Location: the center is uniform over [-R, R] on each axis. The
      location prior is arbitrary; it only needs to be wide enough that
      regions containing the observation are not truncated.
    - Size: the extent on each axis is Erlang/gamma distributed, as in
      Shepard's original analysis. Width and height have independent
      gamma priors with their own shape and rate.

Each region is stored both as center + extent and as edges:
    x_min = mid_x - len_x / 2,  x_max = mid_x + len_x / 2
    y_min = mid_y - len_y / 2,  y_max = mid_y + len_y / 2

Parameterization:
    The prior is specified with a *rate* (as in Shepard's Erlang
    densities). ``numpy.random.Generator.gamma`` takes a *scale*, so the
    sampler passes ``scale = 1 / rate``. Mixing up the two conventions
    silently changes the size distribution without raising.

Reference:
    Shepard, R.N. (1987). "Toward a Universal Law of Generalization for
    Psychological Science." Science, 237, 1317-1323.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Region:
    """A single axis-aligned rectangular hypothesis."""
    mid_x: float
    mid_y: float
    len_x: float
    len_y: float
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def contains(self, x: float, y: float) -> bool:
        """Whether (x, y) lies strictly inside the region."""
        return self.x_min < x < self.x_max and self.y_min < y < self.y_max


@dataclass(frozen=True, eq=False)
class RegionSet:
    """Column store of many regions: one array per field, equal lengths."""
    mid_x: NDArray
    mid_y: NDArray
    len_x: NDArray
    len_y: NDArray
    x_min: NDArray
    x_max: NDArray
    y_min: NDArray
    y_max: NDArray

    @classmethod
    def from_centers(
        cls,
        mid_x: NDArray,
        mid_y: NDArray,
        len_x: NDArray,
        len_y: NDArray,
    ) -> RegionSet:
        """Build a region set from centers and extents, deriving the edges."""
        mid_x = np.asarray(mid_x, dtype=np.float64)
        mid_y = np.asarray(mid_y, dtype=np.float64)
        len_x = np.asarray(len_x, dtype=np.float64)
        len_y = np.asarray(len_y, dtype=np.float64)

        if not (mid_x.shape == mid_y.shape == len_x.shape == len_y.shape):
            raise ValueError(
                "Region columns must have equal shapes, got "
                f"{mid_x.shape}, {mid_y.shape}, {len_x.shape}, {len_y.shape}"
            )

        return cls(
            mid_x=mid_x,
            mid_y=mid_y,
            len_x=len_x,
            len_y=len_y,
            x_min=mid_x - len_x / 2,
            x_max=mid_x + len_x / 2,
            y_min=mid_y - len_y / 2,
            y_max=mid_y + len_y / 2,
        )

    @classmethod
    def empty(cls) -> RegionSet:
        """A region set with no regions."""
        return cls.from_centers(*(np.empty(0) for _ in range(4)))

    def __len__(self) -> int:
        return int(self.mid_x.shape[0])

    def __getitem__(self, index: int) -> Region:
        return Region(
            mid_x=float(self.mid_x[index]),
            mid_y=float(self.mid_y[index]),
            len_x=float(self.len_x[index]),
            len_y=float(self.len_y[index]),
            x_min=float(self.x_min[index]),
            x_max=float(self.x_max[index]),
            y_min=float(self.y_min[index]),
            y_max=float(self.y_max[index]),
        )

    def subset(self, mask: NDArray) -> RegionSet:
        """Select regions by boolean mask, preserving order."""
        mask = np.asarray(mask, dtype=bool)
        if mask.shape != self.mid_x.shape:
            raise ValueError(
                f"Mask shape {mask.shape} does not match region count {len(self)}"
            )
        return RegionSet(
            mid_x=self.mid_x[mask],
            mid_y=self.mid_y[mask],
            len_x=self.len_x[mask],
            len_y=self.len_y[mask],
            x_min=self.x_min[mask],
            x_max=self.x_max[mask],
            y_min=self.y_min[mask],
            y_max=self.y_max[mask],
        )

    def summary(self) -> dict:
        """Basic statistics of the region set."""
        if len(self) == 0:
            return {"n_regions": 0}
        return {
            "n_regions": len(self),
            "mean_width": float(np.mean(self.len_x)),
            "mean_height": float(np.mean(self.len_y)),
            "median_width": float(np.median(self.len_x)),
            "median_height": float(np.median(self.len_y)),
        }


@dataclass(frozen=True)
class RegionPrior:
    """Prior hyperparameters for the gamma-distributed region extents."""
    width_shape: float = 1.0
    width_rate: float = 1.2
    height_shape: float = 1.0
    height_rate: float = 0.5

    def __post_init__(self):
        for name in ("width_shape", "width_rate", "height_shape", "height_rate"):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"Prior parameter {name} must be positive, got {value}")

    @property
    def expected_width(self) -> float:
        return self.width_shape / self.width_rate

    @property
    def expected_height(self) -> float:
        return self.height_shape / self.height_rate


class RegionSampler:
    """
    Monte Carlo sampler for candidate consequential regions.

    Draws are made column by column in a fixed order (all x centers, all
    y centers, all widths, all heights), so a given seed always yields the
    same region set for the same numpy bit generator.

    Parameters
    ----------
    range_limit : float
        Half-width R of the stimulus space [-R, R] on each axis.
    prior : RegionPrior, optional
        Gamma hyperparameters for the extents.
    seed : int, optional
        Seed for ``numpy.random.default_rng``.
    """

    def __init__(
        self,
        range_limit: float = 7.5,
        prior: Optional[RegionPrior] = None,
        seed: Optional[int] = None,
    ):
        if not range_limit > 0:
            raise ValueError(f"range_limit must be positive, got {range_limit}")

        self.range_limit = float(range_limit)
        self.prior = prior or RegionPrior()
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def sample(self, n_samples: int = 50000) -> RegionSet:
        """
        Draw ``n_samples`` independent regions from the prior.

        Returns:
            RegionSet with ``n_samples`` regions in draw order.
        """
        if n_samples < 0:
            raise ValueError(f"n_samples must be non-negative, got {n_samples}")

        r = self.range_limit
        prior = self.prior

        logger.info(
            f"Sampling {n_samples} regions: centers ~ U(-{r}, {r}), "
            f"width ~ Gamma(shape={prior.width_shape}, rate={prior.width_rate}), "
            f"height ~ Gamma(shape={prior.height_shape}, rate={prior.height_rate})"
        )

        mid_x = self.rng.uniform(-r, r, size=n_samples)
        mid_y = self.rng.uniform(-r, r, size=n_samples)
        len_x = self.rng.gamma(prior.width_shape, 1.0 / prior.width_rate, size=n_samples)
        len_y = self.rng.gamma(prior.height_shape, 1.0 / prior.height_rate, size=n_samples)

        regions = RegionSet.from_centers(mid_x, mid_y, len_x, len_y)

        logger.debug(f"Sampled region summary: {regions.summary()}")
        return regions
