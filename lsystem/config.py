"""
Configuration module for the L-system engine.

Describes a character-alphabet L-system and how to run it.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional
import json
from pathlib import Path

from lsystem.core import LSystem, MapRules, from_text


def _check_keys(cls, data: dict, section: str) -> None:
    """Raise ValueError for keys that are not fields of cls."""
    unknown = sorted(set(data) - {f.name for f in fields(cls)})
    if unknown:
        raise ValueError(f"Unknown {section} key(s): {', '.join(unknown)}")


@dataclass
class OutputParams:
    """Output parameters."""
    base_path: Optional[Path] = None  # None = do not save results
    save_history: bool = True
    compress: bool = False


@dataclass
class LSystemConfig:
    """
    Configuration for a character-alphabet L-system run.

    Example:
        config = LSystemConfig(
            axiom="A",
            rules={"A": "AB", "B": "A"},
            generations=10,
        )
        config.save("algae.json")
    """
    axiom: str = "A"
    rules: Dict[str, str] = field(default_factory=dict)

    # Run parameters
    generations: int = 10
    max_length: Optional[int] = None  # None = unbounded

    output: OutputParams = field(default_factory=OutputParams)

    def save(self, path) -> None:
        """Save configuration to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self._to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def load(cls, path) -> "LSystemConfig":
        """Load configuration from JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls._from_dict(data)

    def _to_dict(self) -> dict:
        return {
            'axiom': self.axiom,
            'rules': dict(self.rules),
            'generations': self.generations,
            'max_length': self.max_length,
            'output': {
                'base_path': str(self.output.base_path) if self.output.base_path is not None else None,
                'save_history': self.output.save_history,
                'compress': self.output.compress,
            },
        }

    @classmethod
    def _from_dict(cls, data: dict) -> "LSystemConfig":
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a JSON object")
        data = dict(data)
        _check_keys(cls, data, "configuration")
        if 'output' in data:
            output = dict(data['output'])
            _check_keys(OutputParams, output, "output")
            if output.get('base_path') is not None:
                output['base_path'] = Path(output['base_path'])
            data['output'] = OutputParams(**output)
        return cls(**data)

    def validate(self) -> List[str]:
        """Validate configuration, return list of issues."""
        issues = []

        if not self.axiom:
            issues.append("axiom must not be empty")
        for key in self.rules:
            if len(key) != 1:
                issues.append(f"rule key {key!r} must be a single character")
        if self.generations < 0:
            issues.append("generations must be non-negative")
        if self.max_length is not None and self.max_length <= 0:
            issues.append("max_length must be positive")

        return issues

    def to_rules(self) -> MapRules:
        """Build the lookup-table rule set."""
        rules = MapRules()
        for atom, production in self.rules.items():
            rules.set_str(atom, production)
        return rules

    def to_engine(self) -> LSystem:
        """Build an engine; raises ValueError if the configuration is invalid."""
        issues = self.validate()
        if issues:
            raise ValueError(f"Invalid configuration: {'; '.join(issues)}")
        return LSystem(self.to_rules(), from_text(self.axiom))


# Preset configurations
def algae_config() -> LSystemConfig:
    """Lindenmayer's algae: A → AB, B → A."""
    return LSystemConfig(axiom="A", rules={"A": "AB", "B": "A"}, generations=9)


def pythagoras_config() -> LSystemConfig:
    """Pythagoras tree: 1 → 11, 0 → 1[0]0."""
    return LSystemConfig(axiom="0", rules={"1": "11", "0": "1[0]0"}, generations=5)


PRESET_CONFIGS = {
    "algae": algae_config,
    "pythagoras": pythagoras_config,
}
