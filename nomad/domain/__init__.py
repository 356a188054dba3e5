"""
Domain package for nomad records.

Exports the column descriptors every other layer builds on. Keep this package
focused on data definitions and free of codec or record logic.
"""

from nomad.domain.types import Column, LogicalType

__all__ = [
    "Column",
    "LogicalType",
]
