"""
Registry of the wire formats a record can be written in.

Usage:
    from nomad.formatters.registry import resolve_formatter

    text = resolve_formatter("json").dump(person)
"""

from __future__ import annotations

from typing import Callable, Dict, List

from nomad.formatters.abstract import RecordFormatter
from nomad.formatters.json_object import JsonFormatter
from nomad.formatters.pairs import PairsFormatter
from nomad.formatters.query_string import QueryStringFormatter


def _formatter_factories() -> Dict[str, Callable[[], RecordFormatter]]:
    """Registry of available formatters."""
    return {
        "pairs": lambda: PairsFormatter(),
        "query": lambda: QueryStringFormatter(),
        "json": lambda: JsonFormatter(),
    }


def available_formats() -> List[str]:
    """List available format names."""
    return sorted(_formatter_factories().keys())


def resolve_formatter(name: str) -> RecordFormatter:
    factories = _formatter_factories()
    if name not in factories:
        raise ValueError(f"Unknown format '{name}'. Available: {', '.join(sorted(factories))}")
    return factories[name]()


__all__ = [
    "available_formats",
    "resolve_formatter",
]
