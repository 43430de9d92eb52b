"""
Growth visualization functions.
"""

from __future__ import annotations
from typing import Any, Optional
import numpy as np

from lsystem.core import GrowthResult

_plt = None
def _get_plt():
    global _plt
    if _plt is None:
        import matplotlib.pyplot as plt
        _plt = plt
    return _plt


def plot_growth(
    result: GrowthResult,
    ax: Optional[Any] = None,
    title: str = "",
    log_scale: bool = True,
    color: str = "green",
    **kwargs,
) -> Any:
    """
    Plot sequence length per generation.

    Args:
        result: Result of LSystem.run
        ax: Matplotlib axis
        title: Plot title
        log_scale: Use a logarithmic y-axis (growth is usually geometric)
        color: Line color

    Returns:
        Matplotlib axis
    """
    plt = _get_plt()

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 4))

    lengths = result.length_series()
    generations = np.arange(len(lengths))

    ax.plot(generations, lengths, marker='o', color=color, **kwargs)
    ax.set_xlabel('Generation')
    ax.set_ylabel('Length')
    if log_scale and len(lengths) and lengths.min() > 0:
        ax.set_yscale('log')

    if title:
        ax.set_title(title)

    return ax
