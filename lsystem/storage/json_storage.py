"""
JSON storage for generations and run results.
"""

from __future__ import annotations
import json
import gzip
from pathlib import Path
from typing import Dict, List, Any, Union
from dataclasses import asdict, is_dataclass
import numpy as np

from lsystem.core import GrowthResult, GrowthStats


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy arrays and scalars."""

    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.bool_):
            return bool(obj)
        if is_dataclass(obj) and not isinstance(obj, type):
            return asdict(obj)
        return super().default(obj)


def _open(filepath: Path, mode: str):
    if filepath.suffix == '.gz':
        return gzip.open(filepath, mode + 't', encoding='utf-8')
    return open(filepath, mode, encoding='utf-8')


class JSONStorage:
    """
    JSON-based storage backend.

    Supports:
    - Plain JSON files
    - Gzipped JSON files
    - numpy scalars in sequences (numeric alphabets)
    """

    EXTENSIONS = ('', '.json', '.json.gz')

    def __init__(self, base_path: Union[str, Path]):
        """
        Initialize JSON storage.

        Args:
            base_path: Base directory for storage
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def save(self, data: Any, filename: str, compress: bool = False) -> Path:
        """
        Save data to JSON file.

        Args:
            data: Data to save
            filename: Filename (without extension)
            compress: Use gzip compression

        Returns:
            Path to saved file
        """
        ext = '.json.gz' if compress else '.json'
        filepath = self.base_path / f"{filename}{ext}"
        with _open(filepath, 'w') as f:
            json.dump(data, f, cls=NumpyEncoder, indent=2)
        return filepath

    def _find(self, filename: str) -> Path:
        for ext in self.EXTENSIONS:
            filepath = self.base_path / f"{filename}{ext}"
            if filepath.is_file():
                return filepath
        raise FileNotFoundError(f"No JSON file found for {filename}")

    def load(self, filename: str) -> Any:
        """Load data from JSON file (with or without extension)."""
        with _open(self._find(filename), 'r') as f:
            return json.load(f)

    def list_files(self, pattern: str = "*.json*") -> List[Path]:
        """List all JSON files in storage."""
        return sorted(self.base_path.glob(pattern))

    def exists(self, filename: str) -> bool:
        """Check if file exists."""
        try:
            self._find(filename)
        except FileNotFoundError:
            return False
        return True

    def delete(self, filename: str) -> bool:
        """Delete file if exists."""
        try:
            self._find(filename).unlink()
        except FileNotFoundError:
            return False
        return True


def result_to_dict(result: GrowthResult) -> Dict[str, Any]:
    """Convert a run result to plain JSON-friendly data."""
    stats = result.stats
    return {
        'stop_reason': result.stop_reason,
        'final_state': list(result.final_state),
        'history': [list(g) for g in result.history],
        'stats': {
            'generations': stats.generations,
            'expansions': stats.expansions,
            # JSON object keys must be strings
            'expansions_by_atom': {str(k): v for k, v in stats.expansions_by_atom.items()},
            'lengths': list(stats.lengths),
            'elapsed_time': stats.elapsed_time,
        },
    }


def _split_result_path(filepath: Path):
    """Directory and bare name (no .json/.json.gz) of a result file."""
    name = filepath.name
    for ext in ('.gz', '.json'):
        if name.endswith(ext):
            name = name[:-len(ext)]
    return filepath.parent, name


def save_result(
    result: GrowthResult,
    filepath: Union[str, Path],
    compress: bool = True,
) -> Path:
    """
    Save a run result.

    Args:
        result: Result of LSystem.run
        filepath: Full path to save file (extension is normalized)
        compress: Use gzip compression (.json.gz)

    Returns:
        Path to saved file
    """
    directory, name = _split_result_path(Path(filepath))
    return JSONStorage(directory).save(result_to_dict(result), name, compress=compress)


def load_result(filepath: Union[str, Path]) -> GrowthResult:
    """
    Load a run result saved with save_result.

    Expansion counts come back keyed by the string form of each atom.
    """
    filepath = Path(filepath)
    data = JSONStorage(filepath.parent).load(filepath.name)

    raw = data['stats']
    stats = GrowthStats(
        generations=raw['generations'],
        expansions=raw['expansions'],
        expansions_by_atom=dict(raw['expansions_by_atom']),
        lengths=list(raw['lengths']),
        end_time=raw.get('elapsed_time', 0.0),
    )
    return GrowthResult(
        final_state=data['final_state'],
        history=data['history'],
        stats=stats,
        stop_reason=data['stop_reason'],
    )
