"""
Analysis Package
================

Visualization tools for the Shepard generalization simulation.

    Visualizer
        Renders the composite figure: the retained hypothesis rectangles
        in the main panel and the marginal generalization gradients above
        and to the right. The figure is saved to a configurable output
        directory at a fixed size.

Usage::

    from shepardsim.analysis import Visualizer

    viz = Visualizer(output_dir="./figures")
    viz.plot_generalization_figure(posterior.hypotheses, gradient)
"""

from .visualization import Visualizer

__all__ = [
    "Visualizer",
]
