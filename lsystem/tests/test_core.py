"""
Tests for core module.
"""

import copy

import pytest
import numpy as np
from lsystem.core import (
    LSystem, MapRules, FunctionRules, ProductionRules,
    create_algae_rules, create_pythagoras_rules, create_numeric_rules,
    load_preset, rewrite, show, from_text,
)


ALGAE = [
    "AB",
    "ABA",
    "ABAAB",
    "ABAABABA",
    "ABAABABAABAAB",
    "ABAABABAABAABABAABABA",
    "ABAABABAABAABABAABABAABAABABAABAAB",
]

PYTHAGORAS = [
    "1[0]0",
    "11[1[0]0]1[0]0",
    "1111[11[1[0]0]1[0]0]11[1[0]0]1[0]0",
]


class TestMapRules:
    """Tests for MapRules class."""

    def test_map_lookup(self):
        """Variables map to their production, others are terminal."""
        rules = MapRules()
        rules.set(0, [0, 1])
        rules.set(1, [1, 1, 2])

        assert rules.map(0) == [0, 1]
        assert rules.map(1) == [1, 1, 2]
        assert rules.map(3) is None

    def test_set_returns_previous(self):
        """Overwriting a production returns the old one."""
        rules = MapRules()
        assert rules.set('A', ['B']) is None
        assert rules.set('A', ['C']) == ['B']
        assert rules.map('A') == ['C']

    def test_set_str(self):
        """set_str splits text into characters."""
        rules = MapRules()
        assert rules.set_str('A', "AB") is None
        assert rules.map('A') == ['A', 'B']
        assert rules.set_str('A', "BA") == ['A', 'B']

    def test_map_returns_copy(self):
        """Mutating a returned production must not touch the rule set."""
        rules = create_algae_rules()
        production = rules.map('A')
        production.append('X')
        assert rules.map('A') == ['A', 'B']

    def test_set_copies_input(self):
        """The stored production is independent of the caller's list."""
        production = [1, 0]
        rules = MapRules()
        rules.set(0, production)
        production.clear()
        assert rules.map(0) == [1, 0]

    def test_collection_protocol(self):
        """Length, membership, iteration and removal."""
        rules = MapRules({'A': "AB", 'B': "A"})
        assert len(rules) == 2
        assert 'A' in rules
        assert 'C' not in rules
        assert sorted(rules) == ['A', 'B']

        assert rules.remove('B') is True
        assert rules.remove('B') is False
        assert rules.map('B') is None
        assert rules.to_dict() == {'A': ['A', 'B']}

    def test_is_production_rules(self):
        assert isinstance(MapRules(), ProductionRules)

    def test_abstract_capability(self):
        """ProductionRules cannot be instantiated without map."""
        with pytest.raises(TypeError):
            ProductionRules()


class TestFunctionRules:
    """Tests for procedural rule sets."""

    def test_computed_productions(self):
        rules = FunctionRules(lambda n: range(n) if n > 1 else None)
        assert rules.map(3) == [0, 1, 2]
        assert rules.map(1) is None

    def test_drives_engine(self):
        """Procedural rules reach a fixed point like any other rule set."""
        rules = FunctionRules(lambda n: [n + 1, n + 1] if n < 2 else None)
        system = LSystem(rules, [0])

        assert system.advance() == [1, 1]
        assert system.advance() == [2, 2, 2, 2]
        assert system.advance() is None


class TestRewrite:
    """Tests for the single-pass rewrite function."""

    def test_pure(self):
        """Input sequence is not modified."""
        rules = create_algae_rules()
        sequence = ['A', 'B']
        result, expanded = rewrite(rules, sequence)
        assert result == ['A', 'B', 'A']
        assert expanded is True
        assert sequence == ['A', 'B']

    def test_no_expansion(self):
        rules = create_algae_rules()
        result, expanded = rewrite(rules, ['x', 'y'])
        assert result == ['x', 'y']
        assert expanded is False

    def test_inserted_atoms_not_rescanned(self):
        """A → AA doubles once per pass, it does not loop forever."""
        rules = MapRules({'A': "AA"})
        result, _ = rewrite(rules, ['A'])
        assert result == ['A', 'A']

    def test_empty_production(self):
        """An empty production deletes the atom but still counts as expansion."""
        rules = MapRules({'X': ""})
        result, expanded = rewrite(rules, list("aXb"))
        assert result == ['a', 'b']
        assert expanded is True

    def test_length_accounting(self):
        """New length = sum of production lengths, 1 for terminals."""
        rules = create_pythagoras_rules()
        sequence = from_text("11[1[0]0]1[0]0")
        expected = sum(
            len(rules.map(a)) if rules.map(a) is not None else 1
            for a in sequence
        )
        result, _ = rewrite(rules, sequence)
        assert len(result) == expected

    def test_terminal_pass_through(self):
        """Terminal atoms survive in the same relative order."""
        rules = create_pythagoras_rules()
        result, _ = rewrite(rules, from_text("0[1]"))
        brackets = [a for a in result if a in "[]"]
        assert brackets == ['[', ']', '[', ']']
        assert show(result) == "1[0]0[11]"


class TestLSystem:
    """Tests for LSystem engine."""

    def test_algae(self):
        system = LSystem(create_algae_rules(), from_text("A"))
        for expected in ALGAE:
            assert show(system.advance()) == expected

    def test_pythagoras_tree(self):
        system = LSystem(create_pythagoras_rules(), from_text("0"))
        for expected in PYTHAGORAS:
            assert show(system.advance()) == expected

    def test_numeric_alphabet(self):
        system = LSystem(create_numeric_rules(), [0])
        assert system.advance() == [1, 0]
        assert system.advance() == [0, 1, 1, 1, 0]

    def test_axiom_is_copied(self):
        """Mutating the caller's axiom does not affect the engine."""
        axiom = ['A']
        system = LSystem(create_algae_rules(), axiom)
        axiom.append('B')
        assert system.axiom == ['A']
        assert system.state == ['A']

    def test_returned_generations_are_independent(self):
        """Held generations stay valid across later advances."""
        system = LSystem(create_algae_rules(), ['A'])
        first = system.advance()
        first.append('Z')
        second = system.advance()
        assert second == list("ABA")
        assert system.state == list("ABA")

        second.clear()
        assert system.state == list("ABA")

    def test_fixed_point(self):
        """Once every atom is terminal, advance keeps returning None."""
        rules = MapRules({'A': "B"})
        system = LSystem(rules, ['A', 'A'])

        assert system.advance() == ['B', 'B']
        assert system.advance() is None
        assert system.advance() is None
        assert system.state == ['B', 'B']
        assert system.generation == 1

    def test_terminal_axiom(self):
        """An axiom without variables is already a fixed point."""
        system = LSystem(create_algae_rules(), list("xyz"))
        assert system.advance() is None
        assert system.state == list("xyz")

    def test_empty_axiom(self):
        system = LSystem(create_algae_rules(), [])
        assert system.advance() is None

    def test_reset(self):
        """After reset, generations repeat those of a fresh engine."""
        system = LSystem(create_algae_rules(), ['A'])
        system.generations(4)
        system.reset()

        assert system.state == ['A']
        assert system.generation == 0

        fresh = LSystem(create_algae_rules(), ['A'])
        assert system.generations(5) == fresh.generations(5)

    def test_reset_after_fixed_point(self):
        system = LSystem(MapRules({'A': "B"}), ['A'])
        system.advance()
        assert system.advance() is None
        system.reset()
        assert system.advance() == ['B']

    def test_reset_state_independent_of_axiom(self):
        """Growing after reset never alters the stored axiom."""
        system = LSystem(create_algae_rules(), ['A'])
        system.reset()
        system.advance()
        system.advance()
        assert system.axiom == ['A']

    def test_determinism(self):
        runs = [LSystem(create_pythagoras_rules(), ['0']).generations(4) for _ in range(3)]
        assert runs[0] == runs[1] == runs[2]

    def test_iterator(self):
        """Iteration stops at the fixed point."""
        rules = FunctionRules(lambda n: [n - 1] * 2 if n > 0 else None)
        system = LSystem(rules, [2])
        generations = list(system)
        assert generations == [[1, 1], [0, 0, 0, 0]]

    def test_generations_stops_early(self):
        system = LSystem(MapRules({'A': "B"}), ['A'])
        assert system.generations(10) == [['B']]

    def test_rules_are_copied(self):
        """Changing the caller's rules after construction does not affect the engine."""
        rules = MapRules({'A': "AB", 'B': "A"})
        system = LSystem(rules, ['A'])
        rules.set_str('A', "X")
        rules.remove('B')

        assert show(system.advance()) == "AB"
        assert show(system.advance()) == "ABA"
        system.reset()
        assert show(system.advance()) == "AB"

    def test_copy_is_independent(self):
        """Copies advance independently of the original."""
        system = LSystem(create_algae_rules(), ['A'])
        system.advance()

        clone = copy.copy(system)
        clone.advance()
        clone.advance()

        assert system.state == list("AB")
        assert clone.state == list("ABAAB")
        assert clone.generation == 3
        assert system.copy().state == system.state

    def test_load_preset(self):
        rules, axiom = load_preset("numeric")
        assert axiom == [0]
        assert LSystem(rules, axiom).advance() == [1, 0]

        with pytest.raises(ValueError):
            load_preset("unknown")


class TestRun:
    """Tests for multi-generation runs."""

    def test_history(self):
        system = LSystem(create_algae_rules(), ['A'])
        result = system.run(max_generations=4)

        assert result.stop_reason == "max_generations"
        assert [show(g) for g in result.history] == ["A"] + ALGAE[:4]
        assert show(result.final_state) == ALGAE[3]
        assert show(result.get_generation(2)) == "ABA"
        assert result.get_generation(10) is None

    def test_stats(self):
        system = LSystem(create_algae_rules(), ['A'])
        result = system.run(max_generations=3)

        # A | AB | ABA | ABAAB
        assert result.stats.generations == 3
        assert result.stats.lengths == [1, 2, 3, 5]
        assert result.stats.expansions == 1 + 2 + 3
        assert result.stats.expansions_by_atom == {'A': 4, 'B': 2}
        assert result.stats.final_length == 5
        assert result.stats.elapsed_time >= 0.0

    def test_length_series_fibonacci(self):
        """Algae lengths follow the Fibonacci numbers."""
        result = LSystem(create_algae_rules(), ['A']).run(max_generations=7)
        np.testing.assert_array_equal(
            result.length_series(), [1, 2, 3, 5, 8, 13, 21, 34]
        )
        ratios = result.growth_ratios()
        assert ratios[-1] == pytest.approx((1 + 5 ** 0.5) / 2, rel=1e-2)

    def test_fixed_point_stop(self):
        system = LSystem(MapRules({'A': "BB"}), ['A'])
        result = system.run(max_generations=10)
        assert result.stop_reason == "fixed_point"
        assert result.stats.generations == 1
        assert result.final_state == ['B', 'B']

    def test_max_length_stop(self):
        system = LSystem(create_pythagoras_rules(), ['0'])
        result = system.run(max_generations=20, max_length=10)
        assert result.stop_reason == "max_length"
        assert result.stats.generations == 2
        assert len(result.final_state) == 14

    def test_without_history(self):
        result = LSystem(create_algae_rules(), ['A']).run(max_generations=3, store_history=False)
        assert result.history == []
        assert result.stats.lengths == [1, 2, 3, 5]

    def test_growth_ratios_short(self):
        result = LSystem(create_algae_rules(), ['x']).run(max_generations=3)
        assert len(result.growth_ratios()) == 0
