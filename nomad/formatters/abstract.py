"""
Abstract formatter interfaces for nomad records.

A formatter turns a record into one wire representation and back. Concrete
formatters (raw pairs, query string, JSON) implement the RecordFormatter
protocol; they all share the codec in nomad.codec and differ only in
escaping, ordering and how they tolerate malformed input.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, Protocol, Type, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from nomad.record import Record

R = TypeVar("R", bound="Record")


@runtime_checkable
class RecordFormatter(Protocol):
    """
    Common interface all wire formatters implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of the format.
    textual : bool
        Whether ``dump`` produces a str (and ``load`` accepts one).
    """

    name: str
    description: str
    textual: bool

    def dump(self, record: "Record") -> Any:
        """
        Serialize a record.

        Columns are visited in name-sorted order so equal records always
        produce identical output.
        """
        ...

    def load(self, record_cls: Type[R], data: Any) -> R:
        """
        Build a record of ``record_cls`` from serialized data.

        Structurally malformed input degrades to a record holding only column
        defaults; values that do not parse as their column's type raise
        CodecError.
        """
        ...


class AbstractRecordFormatter(abc.ABC):
    """
    ABC helper for class-based formatters.

    Subclasses set `name`, `description` and `textual`, and implement `dump`
    and `load`.
    """

    name: str
    description: str
    textual: bool = True

    @abc.abstractmethod
    def dump(self, record: "Record") -> Any:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def load(self, record_cls: Type[R], data: Any) -> R:  # pragma: no cover - interface only
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


__all__ = [
    "RecordFormatter",
    "AbstractRecordFormatter",
]
