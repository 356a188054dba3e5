"""
Column descriptors for nomad records.

A Column is the immutable description of one attribute: its name, its logical
type, whether it may hold null, its default, and the size hints a migration
would carry (limit, precision, scale).
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from nomad.errors import SchemaError


class LogicalType(str, Enum):
    """The closed set of value kinds a column can hold."""

    INTEGER = "integer"
    SHORT_TEXT = "string"
    LONG_TEXT = "text"
    FLOAT = "float"
    DECIMAL = "decimal"
    DATETIME = "datetime"
    TIMESTAMP = "timestamp"
    TIME_OF_DAY = "time"
    DATE = "date"
    BINARY = "binary"
    BOOLEAN = "boolean"

    @classmethod
    def parse(cls, value: Union["LogicalType", str]) -> "LogicalType":
        """Accept a member or its string value ("integer", "string", ...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            known = ", ".join(member.value for member in cls)
            raise SchemaError(f"Unknown logical type {value!r}. Known: {known}") from None

    @property
    def is_textual(self) -> bool:
        return self in (LogicalType.SHORT_TEXT, LogicalType.LONG_TEXT)

    @property
    def is_temporal(self) -> bool:
        return self in (
            LogicalType.DATETIME,
            LogicalType.TIMESTAMP,
            LogicalType.TIME_OF_DAY,
            LogicalType.DATE,
        )


class Column(BaseModel):
    """
    Description of a single declared attribute.
    """

    name: str = Field(..., min_length=1, description="Attribute name, unique within a schema.")
    logical_type: LogicalType = Field(..., description="Codec branch used for this column.")
    nullable: bool = Field(True, description="Whether the column may hold null.")
    default: Any = Field(None, description="Typed value used when input omits the column.")
    limit: Optional[int] = Field(None, ge=0)
    precision: Optional[int] = Field(None, ge=0)
    scale: Optional[int] = Field(None, ge=0)

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }

    @property
    def type(self) -> LogicalType:
        return self.logical_type

    @property
    def sql_type(self) -> str:
        """The type string a migration would emit, e.g. ``string(100)``."""
        base = self.logical_type.value
        if self.logical_type is LogicalType.DECIMAL:
            if self.precision is None:
                return base
            if self.scale is None:
                return f"{base}({self.precision})"
            return f"{base}({self.precision},{self.scale})"
        if self.limit is not None:
            return f"{base}({self.limit})"
        return base


__all__ = ["Column", "LogicalType"]
