"""
Core module for the L-system engine.

Contains:
- ProductionRules: Capability mapping an atom to its production
- MapRules: Lookup-table rule set
- FunctionRules: Procedural rule set
- LSystem: Rewriting engine (axiom + rules → generations)
- show / from_text: Character sequence helpers
"""

from .rules import (
    ProductionRules, MapRules, FunctionRules,
    create_algae_rules, create_pythagoras_rules, create_numeric_rules,
    PRESETS, load_preset,
)
from .lsystem import LSystem, GrowthResult, GrowthStats, rewrite
from .display import show, from_text

__all__ = [
    "ProductionRules",
    "MapRules",
    "FunctionRules",
    "create_algae_rules",
    "create_pythagoras_rules",
    "create_numeric_rules",
    "PRESETS",
    "load_preset",
    # Engine
    "LSystem",
    "GrowthResult",
    "GrowthStats",
    "rewrite",
    # Display
    "show",
    "from_text",
]
