"""
Production rules for L-system rewriting.

A rule set maps a single atom to the sequence of atoms that replaces it:
    P: a → a_1 a_2 ... a_k

Key properties:
- Atoms are any hashable, comparable values (chars, ints, enums, tuples)
- An atom without a production is terminal and passes through unchanged
- Lookups are pure: every production handed out is a fresh list

Rule sets can be:
- Lookup tables (MapRules)
- Procedural rules computed on demand (FunctionRules)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Hashable, Iterable, Iterator, List, Optional, Tuple


Atom = Hashable


class ProductionRules(ABC):
    """
    Capability shared by every rule set.

    Implementations answer a single question: what does this atom
    rewrite to? ``None`` marks the atom as terminal.
    """

    @abstractmethod
    def map(self, atom: Atom) -> Optional[List[Atom]]:
        """
        Map one atom to its production.

        Returns:
            A new list if the atom is a variable with a production,
            None if the atom is terminal.
        """


class MapRules(ProductionRules):
    """
    Lookup-table rule set.

    Example:
        rules = MapRules()
        rules.set(0, [0, 1])
        rules.set(1, [1, 1, 2])

        rules.map(0)   # [0, 1]
        rules.map(3)   # None (terminal)

        # Character alphabets
        rules = MapRules()
        rules.set_str('A', "AB")
        rules.set_str('B', "A")
    """

    def __init__(self, productions: Optional[Dict[Atom, Iterable[Atom]]] = None):
        self._productions: Dict[Atom, List[Atom]] = {}
        if productions:
            for atom, sequence in productions.items():
                self.set(atom, sequence)

    def set(self, atom: Atom, sequence: Iterable[Atom]) -> Optional[List[Atom]]:
        """
        Set the production for an atom.

        Returns the production it replaced, or None if there was none.
        """
        previous = self._productions.get(atom)
        self._productions[atom] = list(sequence)
        return previous

    def set_str(self, atom: str, text: str) -> Optional[List[str]]:
        """Set an atom to produce the characters of a string."""
        return self.set(atom, list(text))

    def remove(self, atom: Atom) -> bool:
        """Remove a production. Returns True if found."""
        if atom in self._productions:
            del self._productions[atom]
            return True
        return False

    def map(self, atom: Atom) -> Optional[List[Atom]]:
        production = self._productions.get(atom)
        if production is None:
            return None
        return list(production)

    def to_dict(self) -> Dict[Atom, List[Atom]]:
        """Copy of the production table."""
        return {atom: list(seq) for atom, seq in self._productions.items()}

    def __contains__(self, atom: object) -> bool:
        return atom in self._productions

    def __len__(self) -> int:
        return len(self._productions)

    def __iter__(self) -> Iterator[Atom]:
        return iter(list(self._productions))

    def __repr__(self) -> str:
        parts = ", ".join(
            f"{atom!r} → {''.join(map(str, seq))!r}"
            for atom, seq in self._productions.items()
        )
        return f"MapRules({parts})"


class FunctionRules(ProductionRules):
    """
    Procedural rule set backed by a callable.

    The callable receives an atom and returns an iterable of atoms, or
    None for terminals. Useful for rules too large to tabulate.

    Example:
        # n → n+1 n for n < 3, larger numbers are terminal
        rules = FunctionRules(lambda n: [n + 1, n] if n < 3 else None)
    """

    def __init__(self, func: Callable[[Atom], Optional[Iterable[Atom]]], name: str = ""):
        self.func = func
        self.name = name or getattr(func, "__name__", "rules")

    def map(self, atom: Atom) -> Optional[List[Atom]]:
        production = self.func(atom)
        if production is None:
            return None
        return list(production)

    def __repr__(self) -> str:
        return f"FunctionRules({self.name})"


# ===== Predefined rule sets =====

def create_algae_rules() -> MapRules:
    """Lindenmayer's original algae system: A → AB, B → A"""
    rules = MapRules()
    rules.set_str('A', "AB")
    rules.set_str('B', "A")
    return rules


def create_pythagoras_rules() -> MapRules:
    """
    Pythagoras tree (fractal binary tree).

    1 → 11, 0 → 1[0]0; brackets are terminal.
    """
    rules = MapRules()
    rules.set_str('1', "11")
    rules.set_str('0', "1[0]0")
    return rules


def create_numeric_rules() -> MapRules:
    """Integer alphabet: 0 → [1, 0], 1 → [0, 1, 1]"""
    rules = MapRules()
    rules.set(0, [1, 0])
    rules.set(1, [0, 1, 1])
    return rules


# name -> (rules factory, axiom)
PRESETS: Dict[str, Tuple[Callable[[], MapRules], List[Any]]] = {
    "algae": (create_algae_rules, ['A']),
    "pythagoras": (create_pythagoras_rules, ['0']),
    "numeric": (create_numeric_rules, [0]),
}


def load_preset(name: str) -> Tuple[MapRules, List[Any]]:
    """Create rules and a copy of the axiom for a named preset."""
    if name not in PRESETS:
        raise ValueError(f"Unknown preset: {name} (available: {', '.join(PRESETS)})")
    factory, axiom = PRESETS[name]
    return factory(), list(axiom)
