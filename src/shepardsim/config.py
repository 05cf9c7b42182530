"""
Configuration
=============

Central configuration for the Shepard generalization simulation.
Loads from YAML config files with defaults that reproduce the published
figure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class SimulationConfig:
    """Monte Carlo sampling configuration."""
    n_samples: int = 50000
    range_limit: float = 7.5  # stimulus space is [-range_limit, range_limit]^2
    seed: int = 1


@dataclass
class PriorConfig:
    """Gamma prior over region extents (shape/rate parameterization)."""
    width_shape: float = 1.0
    width_rate: float = 1.2
    height_shape: float = 1.0
    height_rate: float = 0.5


@dataclass
class PosteriorConfig:
    """Weak-sampling posterior configuration."""
    observation: tuple[float, float] = (0.0, 0.0)
    bounded: bool = True


@dataclass
class GeneralizationConfig:
    """Generalization gradient configuration."""
    grid_size: int = 1000


@dataclass
class PlotConfig:
    """Figure aesthetics.

    Attributes:
        figsize: Figure size as (width, height) in inches.
        dpi: Resolution for the saved figure.
        file_format: Output file format ('png', 'pdf', 'svg').
        style: Seaborn style preset.
        context: Seaborn context preset controlling element sizes.
        region_color: Fill color of the hypothesis rectangles.
        region_alpha: Fill alpha of the hypothesis rectangles.
        region_edgecolor: Outline color of the hypothesis rectangles.
        region_linewidth: Outline width of the hypothesis rectangles.
        area_color: Fill color of the marginal generalization curves.
        annotation_fontsize: Font size for the callout labels.
    """
    figsize: tuple[float, float] = (6.0, 6.0)
    dpi: int = 300
    file_format: str = "png"
    style: str = "ticks"
    context: str = "paper"
    region_color: str = "black"
    region_alpha: float = 0.15
    region_edgecolor: str = "white"
    region_linewidth: float = 0.1
    area_color: str = "#333333"
    annotation_fontsize: int = 8


@dataclass
class OutputConfig:
    """Output locations. The figure is written to output_dir/figure_name.<file_format>."""
    output_dir: str = "."
    figure_name: str = "shepardsim"
    save_summary: bool = False
    summary_name: str = "shepardsim_summary.json"


@dataclass
class PipelineConfig:
    """Master configuration for the full simulation."""
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    prior: PriorConfig = field(default_factory=PriorConfig)
    posterior: PosteriorConfig = field(default_factory=PosteriorConfig)
    generalization: GeneralizationConfig = field(default_factory=GeneralizationConfig)
    plot: PlotConfig = field(default_factory=PlotConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> PipelineConfig:
        """Load configuration from a YAML file."""
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        config = cls()

        if "simulation" in data:
            config.simulation = SimulationConfig(**data["simulation"])
        if "prior" in data:
            config.prior = PriorConfig(**data["prior"])
        if "posterior" in data:
            posterior = dict(data["posterior"])
            if "observation" in posterior:
                posterior["observation"] = tuple(posterior["observation"])
            config.posterior = PosteriorConfig(**posterior)
        if "generalization" in data:
            config.generalization = GeneralizationConfig(**data["generalization"])
        if "plot" in data:
            plot = dict(data["plot"])
            if "figsize" in plot:
                plot["figsize"] = tuple(plot["figsize"])
            config.plot = PlotConfig(**plot)
        if "output" in data:
            config.output = OutputConfig(**data["output"])

        return config

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        import dataclasses
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = dataclasses.asdict(self)
        # YAML has no tuple type under safe_load
        data["posterior"]["observation"] = list(data["posterior"]["observation"])
        data["plot"]["figsize"] = list(data["plot"]["figsize"])
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
