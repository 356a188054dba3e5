"""
Pytest configuration for nomad records.

Provides fixtures for:
- Settings isolation (environment and the cached Settings instance)
- Record types shared across the unit and integration tests
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Dict, Generator, Type

import pytest

from nomad.config import get_settings
from nomad.record import Attribute, Record, define_record

ALL_TYPE_COLUMNS = [
    {"name": "an_integer", "type": "integer"},
    {"name": "a_string", "type": "string", "limit": 100},
    {"name": "a_text", "type": "text"},
    {"name": "a_float", "type": "float"},
    {"name": "a_decimal", "type": "decimal", "precision": 8, "scale": 3},
    {"name": "a_datetime", "type": "datetime"},
    {"name": "a_timestamp", "type": "timestamp"},
    {"name": "a_time", "type": "time"},
    {"name": "a_date", "type": "date"},
    {"name": "a_binary", "type": "binary"},
    {"name": "a_boolean", "type": "boolean"},
]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Pin the codec to UTC and drop any cached Settings around each test.
    """
    for name in ("NOMAD_TIME_ZONE", "NOMAD_LOG_LEVEL", "NOMAD_JSON_LOGS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NOMAD_TIME_ZONE", "utc")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def person_cls() -> Type[Record]:
    """
    A fresh record type per test, so schema freezing never leaks.
    """

    class Person(Record):
        first_name = Attribute("string", limit=100)
        last_name = Attribute("string", default="Blow")

    return Person


@pytest.fixture
def all_types_cls() -> Type[Record]:
    """One nullable column of every logical type, no defaults."""
    return define_record("AllTypes", ALL_TYPE_COLUMNS)


@pytest.fixture
def all_type_values() -> Dict[str, Any]:
    """
    Whole-second values, one per logical type, as they read back from the codec.
    """
    return {
        "an_integer": -42,
        "a_string": "Joe Blow & co = ok?",
        "a_text": "line one\nline two\té中",
        "a_float": 0.1,
        "a_decimal": Decimal("123.450"),
        "a_datetime": datetime(2001, 2, 3, 12, 34, 56, tzinfo=timezone.utc),
        "a_timestamp": datetime(1999, 12, 31, 23, 59, 59, tzinfo=timezone.utc),
        "a_time": time(12, 34, 56),
        "a_date": date(2001, 2, 3),
        "a_binary": bytes(range(256)),
        "a_boolean": False,
    }
