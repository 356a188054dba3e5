"""
Query string formatter.

Wire form: ``name1=value1&name2=value2``, names and values form-encoded
(``=``, ``&``, spaces and non-ASCII escaped), entries sorted by encoded name,
null values omitted. A blank string means "no attributes".
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional, Tuple, Type
from urllib.parse import quote_plus, unquote_plus

from nomad.formatters.abstract import AbstractRecordFormatter, R
from nomad.formatters.pairs import PairsFormatter
from nomad.utils.logging import get_logger

if TYPE_CHECKING:
    from nomad.record import Record

log = get_logger(__name__)


class QueryStringFormatter(AbstractRecordFormatter):
    name: str = "query"
    description: str = "Percent-encoded query string sorted by name; nulls omitted."
    textual: bool = True

    def __init__(self, pairs: Optional[PairsFormatter] = None) -> None:
        self._pairs = pairs or PairsFormatter()

    def dump(self, record: "Record") -> str:
        encoded: List[Tuple[str, str]] = [
            (quote_plus(name, safe=""), quote_plus(value, safe=""))
            for name, value in self._pairs.dump(record).items()
            if value is not None
        ]
        encoded.sort(key=lambda pair: pair[0])
        return "&".join(f"{name}={value}" for name, value in encoded)

    def load(self, record_cls: Type[R], data: Any) -> R:
        """
        Parse a string produced by ``dump``.

        None, empty and whitespace-only input give a record with defaults
        only. Entries without ``=`` are dropped.
        """
        text = _as_text(data)
        if not text.strip():
            return self._pairs.load(record_cls, ())

        pairs: List[Tuple[str, str]] = []
        for entry in text.strip().split("&"):
            if not entry:
                continue
            name, separator, value = entry.partition("=")
            if not separator:
                log.debug(
                    "Dropping query string entry without '='",
                    extra={"record_type": record_cls.__name__, "entry": entry},
                )
                continue
            pairs.append((unquote_plus(name), unquote_plus(value)))
        return self._pairs.load(record_cls, pairs)


def _as_text(data: Any) -> str:
    if data is None:
        return ""
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).decode("utf-8", errors="replace")
    return str(data)


__all__ = ["QueryStringFormatter"]
