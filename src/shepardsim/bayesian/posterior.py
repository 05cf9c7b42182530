"""
Weak-Sampling Posterior
=======================

Updates the prior over consequential regions given one observed
consequential stimulus.

Theoretical Framework:
    Under weak sampling (Tenenbaum & Griffiths, 2001) the observed
    stimulus is assumed to be generated independently of the true region,
    so the likelihood of a hypothesis h given observation s is

        p(s | h) = 1  if s lies in h
                   0  otherwise

    and the posterior is the prior restricted to the hypotheses that
    contain s. With a Monte Carlo sample from the prior, Bayesian updating
    is therefore plain falsification: discard every sampled region that
    does not contain the observation, keep the rest with equal weight.

    The surviving regions are additionally required to lie strictly inside
    the plotted stimulus space [-R, R]^2. This is the "bounded" hypothesis
    space of Navarro et al. (2012). Here it is a visual convention, not a
    modeling requirement, and can be switched off.

Reference:
    Tenenbaum, J.B. & Griffiths, T.L. (2001). "Generalization, similarity,
    and Bayesian inference." Behavioral and Brain Sciences, 24, 629-640.
    Navarro, D.J., Dry, M.J. & Lee, M.D. (2012). "Sampling assumptions in
    inductive generalization." Cognitive Science, 36, 187-223.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..regions.sampler import RegionSet

logger = logging.getLogger(__name__)


@dataclass
class PosteriorResult:
    """Hypotheses that survived the posterior filter."""
    hypotheses: RegionSet
    n_prior: int
    observation: tuple[float, float]
    bounded: bool

    @property
    def n_hypotheses(self) -> int:
        return len(self.hypotheses)

    @property
    def retention_rate(self) -> float:
        if self.n_prior == 0:
            return 0.0
        return self.n_hypotheses / self.n_prior


class PosteriorFilter:
    """
    Rejection filter implementing weak-sampling Bayesian updating.

    Parameters
    ----------
    range_limit : float
        Half-width R of the stimulus space.
    observation : tuple of float
        The observed consequential stimulus. Defaults to the origin.
    bounded : bool
        Also require each region to lie strictly within [-R, R]^2.
    """

    def __init__(
        self,
        range_limit: float = 7.5,
        observation: tuple[float, float] = (0.0, 0.0),
        bounded: bool = True,
    ):
        if not range_limit > 0:
            raise ValueError(f"range_limit must be positive, got {range_limit}")

        self.range_limit = float(range_limit)
        self.observation = (float(observation[0]), float(observation[1]))
        self.bounded = bounded

    def contains_observation(self, regions: RegionSet) -> NDArray:
        """Mask of regions that strictly contain the observation."""
        ox, oy = self.observation
        return (
            (regions.x_min < ox) & (regions.x_max > ox)
            & (regions.y_min < oy) & (regions.y_max > oy)
        )

    def within_bounds(self, regions: RegionSet) -> NDArray:
        """Mask of regions lying strictly inside [-R, R] on both axes."""
        r = self.range_limit
        return (
            (regions.x_min > -r) & (regions.x_max < r)
            & (regions.y_min > -r) & (regions.y_max < r)
        )

    def apply(self, regions: RegionSet) -> PosteriorResult:
        """
        Filter the sampled regions down to the posterior hypothesis set.

        Order of the input is preserved. An empty result is valid.
        """
        mask = self.contains_observation(regions)
        n_consistent = int(np.count_nonzero(mask))

        if self.bounded:
            mask &= self.within_bounds(regions)

        result = PosteriorResult(
            hypotheses=regions.subset(mask),
            n_prior=len(regions),
            observation=self.observation,
            bounded=self.bounded,
        )

        logger.info(
            f"Posterior: {n_consistent}/{len(regions)} regions contain the "
            f"observation {self.observation}, {result.n_hypotheses} retained "
            f"({result.retention_rate:.2%})"
        )
        if result.n_hypotheses == 0:
            logger.warning("No hypotheses survived the posterior filter")

        return result
