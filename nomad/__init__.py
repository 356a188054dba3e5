"""
nomad records - typed attribute serialization for in-memory records.

This package provides:

- Column schemas with eleven logical types, inherited by record subclasses
- A typed value codec shared by every wire format
- Round-trip-exact raw pair, query string and JSON formatters
- Pluggable save/destroy strategies and an overridable transaction wrapper
"""

from __future__ import annotations

__version__ = "0.1.0"

# Public API exports
from nomad.codec import coerce, deserialize, serialize
from nomad.config import Settings, get_settings
from nomad.domain.types import Column, LogicalType
from nomad.errors import (
    CodecError,
    NomadError,
    NoStrategyError,
    SchemaError,
    SchemaFrozenError,
    TransactionAborted,
)
from nomad.formatters import (
    JsonFormatter,
    PairsFormatter,
    QueryStringFormatter,
    available_formats,
    resolve_formatter,
)
from nomad.persistence import RecordState
from nomad.record import Attribute, Record, define_record
from nomad.schema import SchemaRegistry
from nomad.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "Settings",
    "get_settings",
    # Schema
    "Column",
    "LogicalType",
    "SchemaRegistry",
    # Codec
    "coerce",
    "serialize",
    "deserialize",
    # Records
    "Attribute",
    "Record",
    "RecordState",
    "define_record",
    # Formatters
    "JsonFormatter",
    "PairsFormatter",
    "QueryStringFormatter",
    "available_formats",
    "resolve_formatter",
    # Errors
    "NomadError",
    "SchemaError",
    "SchemaFrozenError",
    "CodecError",
    "NoStrategyError",
    "TransactionAborted",
    # Logging
    "configure_logging",
    "get_logger",
]
