"""
Shepard Generalization Simulation
=================================

A Monte Carlo simulation of Shepard's consequential region model of
stimulus generalization. Candidate rectangular regions are sampled from a
gamma/uniform prior, filtered by one observed consequential stimulus
under weak sampling, and summarized as marginal generalization gradients.
The result is rendered as a single composite figure for publication.
"""

__version__ = "0.1.0"
