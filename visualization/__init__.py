"""Plotting helpers for the phase calendar"""

from visualization.phase_heatmap import PhaseHeatmap

__all__ = ['PhaseHeatmap']
