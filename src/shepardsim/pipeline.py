"""
Main Pipeline
=============

Orchestrates the Shepard generalization simulation.

Pipeline Phases:
    1. SAMPLE         - Draw candidate regions from the prior
    2. POSTERIOR      - Keep regions consistent with the observation
    3. GENERALIZATION - Marginal generalization gradients over a grid
    4. RENDER         - Compose the figure and write it to disk

Phases run in order in a single pass. Any failure is fatal: it is logged
with its traceback and re-raised.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Optional

from .config import PipelineConfig
from .regions.sampler import RegionSampler, RegionPrior, RegionSet
from .bayesian.posterior import PosteriorFilter, PosteriorResult
from .generalization.gradient import GradientEstimator, GeneralizationGradient

logger = logging.getLogger(__name__)

PHASES = ("sample", "posterior", "generalization", "render")


class Pipeline:
    """
    Orchestrates the complete simulation.

    Usage:
        config = PipelineConfig.from_yaml("configs/default.yaml")
        pipeline = Pipeline(config)
        results = pipeline.run()
    """

    def __init__(self, config: PipelineConfig):
        self.config = config
        self.output_dir = Path(config.output.output_dir)

        # Pipeline state: populated as phases complete
        self.regions: Optional[RegionSet] = None
        self.posterior: Optional[PosteriorResult] = None
        self.gradient: Optional[GeneralizationGradient] = None
        self.figure_path: Optional[Path] = None

    def run(self) -> dict:
        """
        Run all pipeline phases.

        Returns:
            Dict of phase_name -> result summary.
        """
        results = {}
        total_start = time.time()

        logger.info("Starting Shepard generalization simulation")
        logger.info(f"Output directory: {self.output_dir}")

        for phase in PHASES:
            phase_start = time.time()
            logger.info(f"PHASE: {phase.upper()}")

            try:
                if phase == "sample":
                    results[phase] = self._run_sample()
                elif phase == "posterior":
                    results[phase] = self._run_posterior()
                elif phase == "generalization":
                    results[phase] = self._run_generalization()
                elif phase == "render":
                    results[phase] = self._run_render()
            except Exception as e:
                logger.error(f"Phase {phase} failed: {e}", exc_info=True)
                raise

            elapsed = time.time() - phase_start
            logger.info(f"Phase {phase} completed in {elapsed:.1f}s")

        total_elapsed = time.time() - total_start
        logger.info(f"Pipeline completed in {total_elapsed:.1f}s")

        if self.config.output.save_summary:
            self._save_summary(results, total_elapsed)

        return results

    def _run_sample(self) -> dict:
        """Phase 1: Sample candidate regions from the prior."""
        sim = self.config.simulation
        p = self.config.prior
        prior = RegionPrior(
            width_shape=p.width_shape,
            width_rate=p.width_rate,
            height_shape=p.height_shape,
            height_rate=p.height_rate,
        )
        sampler = RegionSampler(range_limit=sim.range_limit, prior=prior, seed=sim.seed)
        self.regions = sampler.sample(n_samples=sim.n_samples)

        return {"seed": sim.seed, **self.regions.summary()}

    def _run_posterior(self) -> dict:
        """Phase 2: Weak-sampling posterior update."""
        if self.regions is None:
            raise RuntimeError("Regions must be sampled before posterior phase")

        cfg = self.config.posterior
        posterior_filter = PosteriorFilter(
            range_limit=self.config.simulation.range_limit,
            observation=cfg.observation,
            bounded=cfg.bounded,
        )
        self.posterior = posterior_filter.apply(self.regions)

        return {
            "n_prior": self.posterior.n_prior,
            "n_hypotheses": self.posterior.n_hypotheses,
            "retention_rate": self.posterior.retention_rate,
            "bounded": self.posterior.bounded,
        }

    def _run_generalization(self) -> dict:
        """Phase 3: Generalization gradients."""
        if self.posterior is None:
            raise RuntimeError("Posterior must be computed before generalization phase")

        estimator = GradientEstimator(
            range_limit=self.config.simulation.range_limit,
            grid_size=self.config.generalization.grid_size,
        )
        self.gradient = estimator.estimate(self.posterior.hypotheses)

        return self.gradient.summary()

    def _run_render(self) -> dict:
        """Phase 4: Render and save the figure."""
        if self.posterior is None or self.gradient is None:
            raise RuntimeError("Gradients must be computed before render phase")

        from .analysis.visualization import Visualizer

        viz = Visualizer(output_dir=self.output_dir, config=self.config.plot)
        viz.plot_generalization_figure(
            self.posterior.hypotheses,
            self.gradient,
            range_limit=self.config.simulation.range_limit,
            observation=self.posterior.observation,
            filename=self.config.output.figure_name,
        )
        self.figure_path = viz.figure_path(self.config.output.figure_name)

        return {"figure": str(self.figure_path)}

    def _save_summary(self, results: dict, total_elapsed: float) -> None:
        """Save pipeline run summary."""
        summary = {
            "total_elapsed_seconds": total_elapsed,
            "config": {
                "n_samples": self.config.simulation.n_samples,
                "range_limit": self.config.simulation.range_limit,
                "seed": self.config.simulation.seed,
                "grid_size": self.config.generalization.grid_size,
            },
            "results": results,
        }

        path = self.output_dir / self.config.output.summary_name
        with open(path, "w") as f:
            json.dump(summary, f, indent=2, default=str)

        logger.info(f"Summary saved to {path}")


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for running the simulation from the command line."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Monte Carlo simulation of Shepard's consequential region model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Reproduce the published figure (writes ./shepardsim.png)
    python -m shepardsim.pipeline

    # Run with custom config
    python -m shepardsim.pipeline --config configs/default.yaml

    # Different seed, figure written elsewhere
    python -m shepardsim.pipeline --seed 7 --output figures
        """,
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--output", "-o",
        help="Output directory (overrides config)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        help="Random seed (overrides config)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.config is not None:
        config = PipelineConfig.from_yaml(args.config)
    else:
        config = PipelineConfig()

    if args.output:
        config.output.output_dir = args.output
    if args.seed is not None:
        config.simulation.seed = args.seed

    pipeline = Pipeline(config)
    results = pipeline.run()

    print(
        f"{results['posterior']['n_hypotheses']} hypotheses retained "
        f"from {results['posterior']['n_prior']} samples"
    )
    print(f"Figure saved to: {pipeline.figure_path}")

    return 0


if __name__ == "__main__":
    import sys
    sys.exit(main())
