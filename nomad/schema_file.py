"""
Schema files: JSON descriptions of a record type.

    {
      "name": "Person",
      "columns": [
        {"name": "first_name", "type": "string", "limit": 100},
        {"name": "age", "type": "integer", "null": false, "default": "0"}
      ]
    }

Files are validated with pydantic before any column is declared.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from nomad.domain.types import LogicalType
from nomad.errors import SchemaError
from nomad.record import Record, define_record


class ColumnModel(BaseModel):
    """One column entry of a schema file."""

    name: str = Field(..., min_length=1)
    type: str
    null: bool = True
    default: Any = None
    limit: Optional[int] = Field(None, ge=0)
    precision: Optional[int] = Field(None, ge=0)
    scale: Optional[int] = Field(None, ge=0)

    model_config = ConfigDict(extra="forbid")

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Reject types the codec has no rule for."""
        try:
            return LogicalType.parse(v).value
        except SchemaError as exc:
            raise ValueError(str(exc)) from exc


class SchemaFileModel(BaseModel):
    """A whole schema file."""

    name: str = Field(..., min_length=1)
    columns: List[ColumnModel] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"Record name '{v}' must be a valid identifier")
        return v

    @field_validator("columns")
    @classmethod
    def validate_unique_names(cls, v: List[ColumnModel]) -> List[ColumnModel]:
        seen = set()
        duplicates = set()
        for column in v:
            if column.name in seen:
                duplicates.add(column.name)
            seen.add(column.name)
        if duplicates:
            raise ValueError(f"Duplicate column names not allowed: {sorted(duplicates)}")
        return v


def record_from_schema(data: Dict[str, Any], base: Type[Record] = Record) -> Type[Record]:
    """
    Validate a parsed schema document and build its Record subclass.

    Raises SchemaError when the document is invalid.
    """
    try:
        model = SchemaFileModel.model_validate(data)
    except ValidationError as exc:
        raise SchemaError(f"Invalid schema: {exc}") from exc
    return define_record(model.name, [column.model_dump() for column in model.columns], base=base)


def load_schema_file(path: Path | str, base: Type[Record] = Record) -> Type[Record]:
    """
    Read a schema file from disk and build its Record subclass.
    """
    schema_path = Path(path)
    try:
        with schema_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as exc:
        raise SchemaError(f"Schema file not found: {schema_path}") from exc
    except json.JSONDecodeError as exc:
        raise SchemaError(f"Invalid JSON in schema file {schema_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise SchemaError(f"Schema file {schema_path} must contain a JSON object")
    return record_from_schema(data, base=base)


__all__ = ["ColumnModel", "SchemaFileModel", "load_schema_file", "record_from_schema"]
