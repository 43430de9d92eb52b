"""
Visualization module for the L-system engine.
"""

from .growth_viz import plot_growth

__all__ = [
    'plot_growth',
]
