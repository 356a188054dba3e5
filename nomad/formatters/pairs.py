"""
Raw pairs formatter: the substrate the query string and JSON formats build on.

Produces an ordered mapping of column name to canonical text (None kept) and
accepts any mapping or finite iterable of ``(name, text)`` pairs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Type

from nomad.codec import deserialize, serialize
from nomad.formatters.abstract import AbstractRecordFormatter, R
from nomad.utils.logging import get_logger

if TYPE_CHECKING:
    from nomad.record import Record

log = get_logger(__name__)


class PairsFormatter(AbstractRecordFormatter):
    """
    Ordered ``name -> text`` pairs with no escaping.
    """

    name: str = "pairs"
    description: str = "Ordered (name, value) pairs; nulls kept, no escaping."
    textual: bool = False

    def dump(self, record: "Record") -> Dict[str, Optional[str]]:
        """
        Return the record's serialized attributes, sorted by name.

        Each value is either a string or None.
        """
        schema = type(record).schema()
        columns = schema.columns_hash()
        return {
            name: serialize(record.get(name), columns[name].logical_type)
            for name in schema.sorted_names()
        }

    def load(self, record_cls: Type[R], data: Any) -> R:
        """
        Recreate a record from serialized pairs.

        Unknown names and entries that are not 2-item pairs are skipped;
        columns the input does not mention keep their defaults. A name given
        twice takes its last value.
        """
        attributes: Dict[str, Any] = {}
        for entry in _entries(data):
            if isinstance(entry, (str, bytes)):
                log.debug("Dropping malformed pair", extra={"entry": entry})
                continue
            try:
                name, text = entry
            except (TypeError, ValueError):
                log.debug("Dropping malformed pair", extra={"entry": repr(entry)})
                continue

            column = record_cls.column(str(name))
            if column is None:
                log.debug(
                    "Ignoring unknown column",
                    extra={"record_type": record_cls.__name__, "column": str(name)},
                )
                continue
            attributes[column.name] = deserialize(text, column.logical_type)

        return record_cls.instantiate(attributes)


def _entries(data: Any) -> Iterable[Any]:
    if data is None:
        return ()
    if isinstance(data, Mapping):
        return data.items()
    return data


__all__ = ["PairsFormatter"]
