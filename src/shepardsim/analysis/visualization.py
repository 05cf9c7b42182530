"""
Visualization Module
====================

Renders the composite figure of the Shepard generalization simulation.

Figure Layout
-------------
    The figure is a 2x2 grid with row heights 1:2 and column widths 2:1::

        +------------------+---------+
        |  p(x) area chart |  blank  |
        +------------------+---------+
        |                  |         |
        |  hypothesis      |  p(y)   |
        |  rectangles      |  area   |
        |                  |  chart  |
        +------------------+---------+

    The main panel overlays every retained hypothesis as a semi-transparent
    rectangle, so regions of stimulus space covered by many hypotheses
    appear darker. The marginal panels share the main panel's spatial axes
    and show the generalization gradient along each dimension.

    Two callouts point at the observed stimulus and at one example
    consequential region. Tick labels are suppressed throughout: the
    figure is illustrative, not a data table.

Output
------
    The figure is saved at exactly the configured size (6 x 6 inches by
    default) and dpi. No tight bounding box is applied, so the pixel
    dimensions of the file are ``figsize * dpi``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for server/CLI use
import matplotlib.pyplot as plt
from matplotlib.collections import PolyCollection
import seaborn as sns

from ..config import PlotConfig
from ..regions.sampler import RegionSet
from ..generalization.gradient import GeneralizationGradient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Callout:
    """A text label with a curved arrow, in data coordinates."""
    label: str
    text_xy: tuple[float, float]
    arrow_start: tuple[float, float]
    arrow_end: tuple[float, float]
    curvature: float


DEFAULT_CALLOUTS = (
    Callout(
        label="Known\nConsequential\nStimulus",
        text_xy=(2.7, 6.0),
        arrow_start=(2.2, 6.0),
        arrow_end=(0.0, 0.6),
        curvature=0.2,
    ),
    Callout(
        label="Possible Consequential Region",
        text_xy=(-7.0, -7.2),
        arrow_start=(-5.8, -6.5),
        arrow_end=(-4.2, 0.0),
        curvature=-0.2,
    ),
)


def region_vertices(regions: RegionSet) -> np.ndarray:
    """Corner coordinates of each region, shape (n, 4, 2)."""
    xs = np.stack([regions.x_min, regions.x_max, regions.x_max, regions.x_min], axis=1)
    ys = np.stack([regions.y_min, regions.y_min, regions.y_max, regions.y_max], axis=1)
    return np.stack([xs, ys], axis=2)


class Visualizer:
    """
    Renders and saves the generalization figure.

    Parameters
    ----------
    output_dir : str or Path
        Directory where the figure is saved. Created automatically if it
        does not exist.
    config : PlotConfig, optional
        Styling and output configuration.
    """

    def __init__(
        self,
        output_dir: str | Path = ".",
        config: Optional[PlotConfig] = None,
    ):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.config = config or PlotConfig()

        sns.set_theme(style=self.config.style, context=self.config.context)

        logger.info(f"Visualizer initialized, output directory: {self.output_dir}")

    def figure_path(self, filename: str) -> Path:
        return self.output_dir / f"{filename}.{self.config.file_format}"

    def _save_figure(self, fig: plt.Figure, filename: str) -> Path:
        """Save a figure to the output directory at its exact canvas size."""
        filepath = self.figure_path(filename)
        fig.savefig(
            filepath,
            dpi=self.config.dpi,
            format=self.config.file_format,
            facecolor="white",
            edgecolor="none",
        )
        plt.close(fig)
        logger.info(f"Saved plot: {filepath}")
        return filepath

    # ------------------------------------------------------------------
    # Composite figure
    # ------------------------------------------------------------------

    def plot_generalization_figure(
        self,
        hypotheses: RegionSet,
        gradient: GeneralizationGradient,
        range_limit: float = 7.5,
        observation: tuple[float, float] = (0.0, 0.0),
        callouts: tuple[Callout, ...] = DEFAULT_CALLOUTS,
        filename: str = "shepardsim",
    ) -> plt.Figure:
        """
        Compose the four-panel figure and save it.

        Parameters
        ----------
        hypotheses : RegionSet
            Retained posterior hypotheses drawn in the main panel.
        gradient : GeneralizationGradient
            Marginal curves drawn above and to the right.
        range_limit : float
            Spatial axes are fixed to [-range_limit, range_limit].
        observation : tuple of float
            Position of the observed stimulus marker.
        callouts : tuple of Callout
            Annotations drawn on the main panel.
        filename : str
            Output filename (without extension).

        Returns
        -------
        matplotlib.figure.Figure
            The generated figure (also saved to the output directory).
        """
        cfg = self.config
        r = range_limit

        fig = plt.figure(figsize=cfg.figsize)
        grid = fig.add_gridspec(2, 2, height_ratios=[1, 2], width_ratios=[2, 1])

        ax_main = fig.add_subplot(grid[1, 0])
        ax_top = fig.add_subplot(grid[0, 0], sharex=ax_main)
        ax_right = fig.add_subplot(grid[1, 1], sharey=ax_main)
        ax_blank = fig.add_subplot(grid[0, 1])

        self._draw_regions(ax_main, hypotheses, r)
        ax_main.plot(*observation, "o", color="black", markersize=4, zorder=3)
        for callout in callouts:
            self._draw_callout(ax_main, callout)

        # Generalization along dimension 1, above
        ax_top.fill_between(gradient.x, gradient.px, 0, color=cfg.area_color, linewidth=0)
        ax_top.set_ylim(0, 1)
        ax_top.set_ylabel("Generalization")
        ax_top.tick_params(labelbottom=False, labelleft=False)

        # Generalization along dimension 2, to the right
        ax_right.fill_betweenx(gradient.y, gradient.py, 0, color=cfg.area_color, linewidth=0)
        ax_right.set_xlim(0, 1)
        ax_right.set_xlabel("Generalization")
        ax_right.tick_params(labelbottom=False, labelleft=False)

        for ax in (ax_top, ax_right):
            ax.grid(True, color="0.92", linewidth=0.5)

        ax_blank.axis("off")

        # Shared axes: set the spatial limits last so nothing rescales them
        ax_main.set_xlim(-r, r)
        ax_main.set_ylim(-r, r)

        fig.tight_layout()
        self._save_figure(fig, filename)
        return fig

    def _draw_regions(self, ax: plt.Axes, hypotheses: RegionSet, range_limit: float) -> None:
        cfg = self.config
        if len(hypotheses) > 0:
            rects = PolyCollection(
                region_vertices(hypotheses),
                facecolors=cfg.region_color,
                edgecolors=cfg.region_edgecolor,
                linewidths=cfg.region_linewidth,
                alpha=cfg.region_alpha,
            )
            ax.add_collection(rects)
        else:
            logger.warning("No hypotheses to draw; main panel will be empty")

        ax.set_xlabel("Stimulus Dimension 1")
        ax.set_ylabel("Stimulus Dimension 2")
        ax.tick_params(labelbottom=False, labelleft=False)
        ax.grid(False)

    def _draw_callout(self, ax: plt.Axes, callout: Callout) -> None:
        ax.annotate(
            "",
            xy=callout.arrow_end,
            xytext=callout.arrow_start,
            arrowprops=dict(
                arrowstyle="-|>",
                connectionstyle=f"arc3,rad={callout.curvature}",
                color="black",
                linewidth=0.6,
                shrinkA=0,
                shrinkB=0,
            ),
        )
        ax.text(
            *callout.text_xy,
            callout.label,
            ha="left",
            va="center",
            fontsize=self.config.annotation_fontsize,
        )
