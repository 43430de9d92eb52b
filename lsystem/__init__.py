"""
L-system engine

A generic Lindenmayer-system rewriting engine: an axiom is rewritten
generation by generation by a pluggable set of production rules.

Main components:
- core: Rule sets, rewriting engine, sequence helpers
- config: Character-alphabet system configuration
- storage: JSON persistence of runs
- visualization: Growth plots
"""

__version__ = "0.1.0"
__author__ = "L-system Team"

from .core import LSystem, ProductionRules, MapRules, FunctionRules, rewrite, show
from .config import LSystemConfig

__all__ = [
    "LSystem",
    "ProductionRules",
    "MapRules",
    "FunctionRules",
    "rewrite",
    "show",
    "LSystemConfig",
]
