"""
JSON formatter.

Wire form: one flat object whose keys are the column names in sorted order
and whose values are canonical strings or null. Null columns are written out
so an explicit null is not replaced by the column default on the way back.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Optional, Type

from nomad.formatters.abstract import AbstractRecordFormatter, R
from nomad.formatters.pairs import PairsFormatter
from nomad.utils.logging import get_logger

if TYPE_CHECKING:
    from nomad.record import Record

log = get_logger(__name__)


class JsonFormatter(AbstractRecordFormatter):
    name: str = "json"
    description: str = "Flat JSON object with sorted keys; string or null values."
    textual: bool = True

    def __init__(self, pairs: Optional[PairsFormatter] = None) -> None:
        self._pairs = pairs or PairsFormatter()

    def dump(self, record: "Record") -> str:
        return json.dumps(
            self._pairs.dump(record),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )

    def load(self, record_cls: Type[R], data: Any) -> R:
        """
        Parse a string produced by ``dump``.

        A blank or None document, one that does not parse, and one that is not
        an object all give a record with defaults only. Keys that are not
        columns are ignored; a null value binds the column to None.
        """
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("utf-8", errors="replace")
        if data is None or not str(data).strip():
            return self._pairs.load(record_cls, {})

        try:
            document = json.loads(data)
        except (ValueError, RecursionError) as exc:
            log.warning(
                "Unparsable JSON document; using defaults",
                extra={"record_type": record_cls.__name__, "error": str(exc)},
            )
            document = {}

        if not isinstance(document, dict):
            log.warning(
                "JSON document is not an object; using defaults",
                extra={"record_type": record_cls.__name__, "kind": type(document).__name__},
            )
            document = {}

        return self._pairs.load(record_cls, document)


__all__ = ["JsonFormatter"]
