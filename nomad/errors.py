"""
Exception hierarchy for nomad records.

Codec and schema errors are loud: they signal a programmer or data-integrity
problem and propagate to the caller. Structurally broken wire input is not an
error at all; the formatters recover from it (see nomad.formatters).
"""

from __future__ import annotations

from typing import Any, Optional


class NomadError(Exception):
    """Base class for every error raised by this package."""


class SchemaError(NomadError):
    """A column declaration or schema description is invalid."""


class SchemaFrozenError(SchemaError):
    """A column was declared after the record type started building instances."""


class CodecError(NomadError, ValueError):
    """
    A value could not be converted to or from its column's logical type.

    Attributes
    ----------
    logical_type : str | None
        The logical type the conversion targeted.
    value : Any
        The offending input.
    """

    def __init__(self, message: str, logical_type: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message)
        self.logical_type = logical_type
        self.value = value


class NoStrategyError(NomadError):
    """save() was called on a record with no save strategy and no persist() override."""


class TransactionAborted(NomadError):
    """
    Rollback signal.

    Raise it inside a transaction block to abandon the transaction; the
    wrapper swallows it and returns normally.
    """


__all__ = [
    "NomadError",
    "SchemaError",
    "SchemaFrozenError",
    "CodecError",
    "NoStrategyError",
    "TransactionAborted",
]
