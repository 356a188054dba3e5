"""
Records: typed attribute maps with a declared schema.

Declare columns in the class body with Attribute descriptors, or afterwards
with ``attribute()``, which works like ``add_column`` in a migration:

    class Person(Record):
        first_name = Attribute("string", limit=100)
        last_name = Attribute("string", default="Blow")

    Person.attribute("age", "integer", null=False)

    joe = Person(first_name="Joe", age="42")
    joe.to_ordered_query_string()     # 'age=42&first_name=Joe&last_name=Blow'
    Person.from_json(joe.to_ordered_json()) == joe

Subclasses inherit their parent's columns and append their own.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import (
    Any,
    ClassVar,
    Dict,
    Iterable,
    List,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from nomad.codec import coerce
from nomad.domain.types import Column, LogicalType
from nomad.errors import SchemaError
from nomad.formatters.json_object import JsonFormatter
from nomad.formatters.pairs import PairsFormatter
from nomad.formatters.query_string import QueryStringFormatter
from nomad.persistence import Persistable
from nomad.schema import SchemaRegistry
from nomad.utils.logging import get_logger

log = get_logger(__name__)

R = TypeVar("R", bound="Record")

AttributeInput = Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None]

_PAIRS = PairsFormatter()
_QUERY_STRING = QueryStringFormatter(_PAIRS)
_JSON = JsonFormatter(_PAIRS)


class Attribute:
    """
    Class-body column declaration; also the accessor for that column.

    Takes the same options as ``Record.attribute``. The column name is the
    name the descriptor is bound to, unless ``name`` is given.
    """

    def __init__(
        self,
        logical_type: Union[LogicalType, str],
        *,
        name: Optional[str] = None,
        limit: Optional[int] = None,
        null: bool = True,
        default: Any = None,
        precision: Optional[int] = None,
        scale: Optional[int] = None,
    ) -> None:
        self.logical_type = LogicalType.parse(logical_type)
        self.name = name
        self.options: Dict[str, Any] = {
            "limit": limit,
            "null": null,
            "default": default,
            "precision": precision,
            "scale": scale,
        }

    def __set_name__(self, owner: type, name: str) -> None:
        if self.name is None:
            self.name = name

    def __get__(self, instance: Optional["Record"], owner: type) -> Any:
        if instance is None:
            return self
        return instance.get(self.name)

    def __set__(self, instance: "Record", value: Any) -> None:
        instance.set(self.name, value)

    def __repr__(self) -> str:
        return f"Attribute({self.logical_type.value!r}, name={self.name!r})"


class Record(Persistable):
    """
    In-memory record holding one typed value per declared column.

    The schema is shared by every instance of a class and frozen once the
    first instance is built. Values are coerced to their column's logical
    type on construction and on every assignment.
    """

    _schema: ClassVar[SchemaRegistry] = SchemaRegistry(owner="Record")
    _attributes: Dict[str, Any]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Copy by value: declarations on the subclass never leak to the parent.
        cls._schema = cls._schema.copy(owner=cls.__name__)
        for attribute in list(vars(cls).values()):
            if isinstance(attribute, Attribute):
                cls._declare(attribute.name, attribute.logical_type, **attribute.options)

    def __init__(self, attributes: AttributeInput = None, **values: Any) -> None:
        schema = type(self)._schema
        schema.freeze()
        object.__setattr__(self, "_attributes", {column.name: column.default for column in schema})

        for name, value in [*_items(attributes), *values.items()]:
            if str(name) in schema:
                self.set(str(name), value)
            else:
                log.debug(
                    "Ignoring unknown attribute",
                    extra={"record_type": type(self).__name__, "column": str(name)},
                )

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    @classmethod
    def schema(cls) -> SchemaRegistry:
        return cls._schema

    @classmethod
    def attribute(
        cls,
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
        Declare a column.

        Works like ``add_column`` in a migration:

            Person.attribute("name", "string", limit=1, null=False, default="Joe")
        """
        return cls._declare(
            name,
            logical_type,
            limit=limit,
            null=null,
            default=default,
            precision=precision,
            scale=scale,
        )

    @classmethod
    def _declare(cls, name: Any, logical_type: Union[LogicalType, str], **options: Any) -> Column:
        column_name = str(name)
        reserved = column_name.startswith("__") or column_name == "_attributes"
        if reserved or hasattr(Record, column_name):
            raise SchemaError(
                f"Column name '{column_name}' clashes with a Record attribute on {cls.__name__}"
            )
        return cls._schema.declare_column(column_name, logical_type, **options)

    @classmethod
    def columns(cls) -> List[Column]:
        return cls._schema.columns()

    @classmethod
    def column(cls, name: str) -> Optional[Column]:
        return cls._schema.column(name)

    @classmethod
    def column_names(cls) -> List[str]:
        return cls._schema.column_names()

    @classmethod
    def columns_hash(cls) -> Dict[str, Column]:
        return cls._schema.columns_hash()

    @classmethod
    def reset_column_information(cls) -> None:
        """Reset derived column metadata, keeping the declared columns."""
        cls._schema.reset_column_information()

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    @classmethod
    def instantiate(cls: Type[R], attributes: Mapping[str, Any]) -> R:
        """
        Build a record from a map of typed values.

        Every loader goes through here; override to hook object construction.
        """
        return cls(attributes)

    def get(self, name: str) -> Any:
        """Value of a column; raises KeyError for undeclared names."""
        if name not in self._attributes:
            raise KeyError(f"'{type(self).__name__}' has no column '{name}'")
        return self._attributes[name]

    def set(self, name: str, value: Any) -> None:
        """Coerce ``value`` to the column's type and store it."""
        column = type(self)._schema.column(name)
        if column is None:
            raise KeyError(f"'{type(self).__name__}' has no column '{name}'")
        self._attributes[column.name] = coerce(value, column.logical_type)

    @property
    def attributes(self) -> Dict[str, Any]:
        """A copy of the typed values, in declaration order."""
        return dict(self._attributes)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails: columns declared with attribute().
        attributes = self.__dict__.get("_attributes")
        if attributes is not None and name in attributes:
            return attributes[name]
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if name in type(self)._schema:
            self.set(name, value)
        else:
            object.__setattr__(self, name, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return type(self) is type(other) and self._attributes == other._attributes

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        values = ", ".join(f"{name}={value!r}" for name, value in self._attributes.items())
        return f"{type(self).__name__}({values})"

    # ------------------------------------------------------------------
    # Wire formats
    # ------------------------------------------------------------------

    def to_serialized_attributes(self) -> Dict[str, Optional[str]]:
        """
        Return the serialized attributes, sorted by name.

        Each value is either a string or None.
        """
        return _PAIRS.dump(self)

    @classmethod
    def from_serialized_attributes(cls: Type[R], serialized: AttributeInput) -> R:
        """Recreate a record from a mapping or iterable of serialized pairs."""
        return _PAIRS.load(cls, serialized)

    def to_ordered_query_string(self) -> str:
        """Serialize as a query string, attributes sorted by name."""
        return _QUERY_STRING.dump(self)

    @classmethod
    def from_query_string(cls: Type[R], text: Optional[str]) -> R:
        """Deserialize from a string returned by ``to_ordered_query_string``."""
        return _QUERY_STRING.load(cls, text)

    def serialize(self) -> str:
        return self.to_ordered_query_string()

    @classmethod
    def deserialize(cls: Type[R], text: Optional[str]) -> R:
        return cls.from_query_string(text)

    def to_ordered_json(self) -> str:
        """Serialize as a JSON object, attributes sorted by name."""
        return _JSON.dump(self)

    @classmethod
    def from_json(cls: Type[R], text: Optional[str]) -> R:
        """Deserialize from a string returned by ``to_ordered_json``."""
        return _JSON.load(cls, text)


def _items(attributes: AttributeInput) -> List[Tuple[Any, Any]]:
    if attributes is None:
        return []
    if isinstance(attributes, Mapping):
        return list(attributes.items())
    return [tuple(pair) for pair in attributes]  # type: ignore[misc]


def define_record(
    name: str,
    columns: Iterable[Union[Column, Mapping[str, Any]]],
    base: Type[Record] = Record,
) -> Type[Record]:
    """
    Build a Record subclass at runtime.

    ``columns`` holds Column objects or mappings with the keys ``name``,
    ``type`` and, optionally, ``null``, ``default``, ``limit``, ``precision``
    and ``scale``.
    """
    record_cls = type(name, (base,), {"__module__": base.__module__})
    for column in columns:
        if isinstance(column, Column):
            record_cls.attribute(
                column.name,
                column.logical_type,
                limit=column.limit,
                null=column.nullable,
                default=column.default,
                precision=column.precision,
                scale=column.scale,
            )
            continue
        options = dict(column)
        try:
            column_name = options.pop("name")
            logical_type = options.pop("type")
        except KeyError as exc:
            raise SchemaError(f"Column description for {name} is missing {exc}") from None
        try:
            record_cls.attribute(column_name, logical_type, **options)
        except TypeError as exc:
            raise SchemaError(f"Invalid options for column '{column_name}': {exc}") from None
    return record_cls


__all__ = ["Attribute", "Record", "define_record"]
