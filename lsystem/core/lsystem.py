"""
Rewriting engine for L-systems.

Implements the generation-by-generation evolution of a sequence:
    S(n) → S(n+1) = P(s_0) P(s_1) ... P(s_{k-1})

where P is the production map of a rule set and terminal atoms map to
themselves.

Key features:
- Single left-to-right pass per generation (atoms inserted during a pass
  are not rewritten again in that pass)
- Fixed point detection: a generation without any expansion ends the run
- Value semantics: callers only ever receive copies of engine state
- History and growth statistics for multi-generation runs
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple
import copy
import logging
import time

import numpy as np

from .rules import Atom, ProductionRules


logger = logging.getLogger(__name__)


def _expand(rules: ProductionRules, sequence: Iterable[Atom]) -> Tuple[List[Atom], Dict[Atom, int]]:
    """Rewrite one generation, counting expansions per atom."""
    result: List[Atom] = []
    expansions: Dict[Atom, int] = {}

    for atom in sequence:
        production = rules.map(atom)
        if production is None:
            result.append(atom)
        else:
            result.extend(production)
            expansions[atom] = expansions.get(atom, 0) + 1

    return result, expansions


def rewrite(rules: ProductionRules, sequence: Iterable[Atom]) -> Tuple[List[Atom], bool]:
    """
    Apply the rules once to every atom of a sequence.

    Args:
        rules: Rule set used for lookups
        sequence: Current generation (not modified)

    Returns:
        (next generation, whether any atom was expanded)
    """
    result, expansions = _expand(rules, sequence)
    return result, bool(expansions)


@dataclass
class GrowthStats:
    """Statistics from a multi-generation run."""
    generations: int = 0
    expansions: int = 0
    expansions_by_atom: Dict[Atom, int] = field(default_factory=dict)
    lengths: List[int] = field(default_factory=list)

    # Timing
    start_time: float = 0.0
    end_time: float = 0.0

    @property
    def elapsed_time(self) -> float:
        return self.end_time - self.start_time

    @property
    def final_length(self) -> int:
        return self.lengths[-1] if self.lengths else 0


@dataclass
class GrowthResult:
    """
    Complete result of a run.

    Contains:
    - Final state
    - History (axiom first, if enabled)
    - Statistics
    - Stop reason: "max_generations", "fixed_point" or "max_length"
    """
    final_state: List[Atom]
    history: List[List[Atom]] = field(default_factory=list)
    stats: GrowthStats = field(default_factory=GrowthStats)
    stop_reason: str = "max_generations"

    def get_generation(self, n: int) -> Optional[List[Atom]]:
        """Get generation n (0 = axiom) if it is in the history."""
        if 0 <= n < len(self.history):
            return list(self.history[n])
        return None

    def length_series(self) -> np.ndarray:
        """Sequence length per generation, axiom included."""
        return np.array(self.stats.lengths, dtype=np.int64)

    def growth_ratios(self) -> np.ndarray:
        """Ratio of each generation's length to the previous one."""
        lengths = self.length_series().astype(np.float64)
        if len(lengths) < 2:
            return np.array([], dtype=np.float64)
        prev, nxt = lengths[:-1], lengths[1:]
        return np.divide(nxt, prev, out=np.full_like(nxt, np.nan), where=prev > 0)


class LSystem:
    """
    A fully specified L-system: rule set plus axiom.

    The engine owns a private copy of its rules and of the axiom, and the
    current state. Every sequence it returns is a copy, so past
    generations stay valid while the engine keeps advancing.

    Example:
        rules = MapRules()
        rules.set_str('A', "AB")
        rules.set_str('B', "A")
        system = LSystem(rules, list("A"))

        system.advance()   # ['A', 'B']
        system.advance()   # ['A', 'B', 'A']

        # Iterator protocol stops at a fixed point
        for generation in system:
            ...
    """

    def __init__(self, rules: ProductionRules, axiom: Iterable[Atom]):
        """
        Initialize the system.

        Args:
            rules: Rule set used for every generation (copied)
            axiom: Initial sequence (copied)
        """
        self.rules = copy.deepcopy(rules)
        self._axiom: List[Atom] = list(axiom)
        self._state: List[Atom] = list(self._axiom)
        self._generation = 0
        self.last_expansions: Dict[Atom, int] = {}

    @property
    def axiom(self) -> List[Atom]:
        """Copy of the axiom."""
        return list(self._axiom)

    @property
    def state(self) -> List[Atom]:
        """Copy of the current generation."""
        return list(self._state)

    @property
    def generation(self) -> int:
        """Number of successful advances since construction or reset."""
        return self._generation

    def reset(self) -> None:
        """Reset the state back to the axiom."""
        self._state = list(self._axiom)
        self._generation = 0
        self.last_expansions = {}

    def advance(self) -> Optional[List[Atom]]:
        """
        Compute the next generation.

        Returns:
            Copy of the new state, or None if no atom could be expanded
            (fixed point). State is left unchanged at a fixed point.
        """
        result, expansions = _expand(self.rules, self._state)
        self.last_expansions = expansions

        if not expansions:
            logger.debug(f"Fixed point reached at generation {self._generation}")
            return None

        self._state = result
        self._generation += 1
        return list(result)

    def generations(self, n: int) -> List[List[Atom]]:
        """Advance up to n times, stopping early at a fixed point."""
        out = []
        for _ in range(n):
            nxt = self.advance()
            if nxt is None:
                break
            out.append(nxt)
        return out

    def __iter__(self) -> "LSystem":
        return self

    def __next__(self) -> List[Atom]:
        nxt = self.advance()
        if nxt is None:
            raise StopIteration
        return nxt

    def copy(self) -> "LSystem":
        """Independent engine with its own copy of the state."""
        return copy.deepcopy(self)

    def __copy__(self) -> "LSystem":
        return self.copy()

    def __deepcopy__(self, memo: dict) -> "LSystem":
        other = LSystem.__new__(LSystem)
        memo[id(self)] = other
        other.rules = copy.deepcopy(self.rules, memo)
        other._axiom = copy.deepcopy(self._axiom, memo)
        other._state = copy.deepcopy(self._state, memo)
        other._generation = self._generation
        other.last_expansions = dict(self.last_expansions)
        return other

    def run(
        self,
        max_generations: int = 10,
        store_history: bool = True,
        max_length: Optional[int] = None,
    ) -> GrowthResult:
        """
        Advance for multiple generations.

        Args:
            max_generations: Maximum number of advances
            store_history: Whether to store every generation
            max_length: Stop once a generation grows longer than this

        Returns:
            GrowthResult with final state, history, and statistics
        """
        stats = GrowthStats(start_time=time.time())
        history: List[List[Atom]] = []

        stats.lengths.append(len(self._state))
        if store_history:
            history.append(self.state)

        stop_reason = "max_generations"

        for _ in range(max_generations):
            nxt = self.advance()
            if nxt is None:
                stop_reason = "fixed_point"
                break

            stats.generations += 1
            for atom, count in self.last_expansions.items():
                stats.expansions += count
                stats.expansions_by_atom[atom] = stats.expansions_by_atom.get(atom, 0) + count
            stats.lengths.append(len(nxt))

            if store_history:
                history.append(nxt)

            if max_length is not None and len(nxt) > max_length:
                stop_reason = "max_length"
                break

        stats.end_time = time.time()
        logger.debug(
            f"Run stopped after {stats.generations} generations: {stop_reason} "
            f"(length {stats.final_length})"
        )

        return GrowthResult(
            final_state=self.state,
            history=history,
            stats=stats,
            stop_reason=stop_reason,
        )

    def __repr__(self) -> str:
        return f"LSystem({self.rules!r}, generation={self._generation}, length={len(self._state)})"
