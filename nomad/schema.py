"""Schema registry: the ordered columns of one record type."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Union

from nomad.codec import coerce
from nomad.domain.types import Column, LogicalType
from nomad.errors import SchemaError, SchemaFrozenError
from nomad.utils.logging import get_logger

log = get_logger(__name__)


class SchemaRegistry:
    """
    Ordered, unique-by-name collection of columns bound to one record type.

    A subtype starts from ``parent.copy()`` and declares its own columns on
    top. Redeclaring a name replaces that column where it stands.
    """

    def __init__(self, owner: str = "", columns: Optional[List[Column]] = None) -> None:
        self.owner = owner
        self._columns: List[Column] = list(columns or [])
        self._frozen = False
        self._columns_hash: Optional[Dict[str, Column]] = None
        self._sorted_names: Optional[List[str]] = None

    def declare_column(
        self,
        name: str,
        logical_type: Union[LogicalType, str],
        *,
        limit: Optional[int] = None,
        null: bool = True,
        default: Any = None,
        precision: Optional[int] = None,
        scale: Optional[int] = None,
    ) -> Column:
        """
        Declare a column, the way ``add_column`` works in a migration.

        Returns the new Column. Raises SchemaFrozenError once the registry is
        frozen, SchemaError on an unknown type, and CodecError when the
        default cannot be coerced to the column's type.
        """
        if self._frozen:
            raise SchemaFrozenError(
                f"Cannot declare column '{name}' on {self.owner or 'schema'}: "
                "instances have already been built from it"
            )
        kind = LogicalType.parse(logical_type)
        column_name = str(name)
        if not column_name:
            raise SchemaError("Column name must not be empty")

        column = Column(
            name=column_name,
            logical_type=kind,
            nullable=null is not False,
            default=coerce(default, kind),
            limit=limit,
            precision=precision,
            scale=scale,
        )

        for position, existing in enumerate(self._columns):
            if existing.name == column_name:
                self._columns[position] = column
                log.debug(
                    "Column redeclared",
                    extra={"owner": self.owner, "column": column_name, "type": kind.value},
                )
                break
        else:
            self._columns.append(column)

        self.reset_column_information()
        return column

    def columns(self) -> List[Column]:
        """Columns in declaration order, inherited ones first."""
        return list(self._columns)

    def column(self, name: str) -> Optional[Column]:
        """Look a column up by name; None when it is not declared."""
        return self._lookup().get(str(name))

    def columns_hash(self) -> Dict[str, Column]:
        return dict(self._lookup())

    def _lookup(self) -> Dict[str, Column]:
        if self._columns_hash is None:
            self._columns_hash = {column.name: column for column in self._columns}
        return self._columns_hash

    def column_names(self) -> List[str]:
        return [column.name for column in self._columns]

    def sorted_names(self) -> List[str]:
        """Column names in the canonical wire order."""
        if self._sorted_names is None:
            self._sorted_names = sorted(self.column_names())
        return list(self._sorted_names)

    def reset_column_information(self) -> None:
        """Drop derived lookups; the declared columns are kept."""
        self._columns_hash = None
        self._sorted_names = None

    def copy(self, owner: str = "") -> "SchemaRegistry":
        """An unfrozen registry holding the same columns, for a subtype."""
        return SchemaRegistry(owner=owner or self.owner, columns=self._columns)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._lookup()

    def __iter__(self) -> Iterator[Column]:
        return iter(self.columns())

    def __len__(self) -> int:
        return len(self._columns)

    def __repr__(self) -> str:
        return f"SchemaRegistry({self.owner!r}, {self.column_names()!r})"


__all__ = ["SchemaRegistry"]
