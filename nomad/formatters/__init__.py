"""
Formatters package for nomad records.

Re-exports the formatter interfaces and the concrete formatters so
downstream code can import from `nomad.formatters` directly.
"""

from nomad.formatters.abstract import AbstractRecordFormatter, RecordFormatter
from nomad.formatters.json_object import JsonFormatter
from nomad.formatters.pairs import PairsFormatter
from nomad.formatters.query_string import QueryStringFormatter
from nomad.formatters.registry import available_formats, resolve_formatter

__all__ = [
    # Abstracts
    "AbstractRecordFormatter",
    "RecordFormatter",
    # Concrete formatters
    "JsonFormatter",
    "PairsFormatter",
    "QueryStringFormatter",
    # Registry
    "available_formats",
    "resolve_formatter",
]
