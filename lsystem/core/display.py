"""
Conversions between text and character sequences.
"""

from __future__ import annotations
from typing import Iterable, List

from .rules import Atom


def show(sequence: Iterable[Atom]) -> str:
    """String representation of a sequence: AB, 1[0]0, 01110, ..."""
    return "".join(str(atom) for atom in sequence)


def from_text(text: str) -> List[str]:
    """Split text into a character sequence (axioms, productions)."""
    return list(text)
