"""
Storage module for the L-system engine.

Provides persistence for:
- Generations and run histories
- Growth statistics
"""

from .json_storage import JSONStorage, save_result, load_result, result_to_dict

__all__ = [
    "JSONStorage",
    "save_result",
    "load_result",
    "result_to_dict",
]
