from __future__ import annotations

import pytest

from nomad.record import define_record


def test_example_person_scenario(person_cls):
    person = person_cls(first_name="Joe", last_name="Blow")

    text = person.to_ordered_query_string()

    assert text == "first_name=Joe&last_name=Blow"
    parsed = person_cls.from_query_string(text)
    assert parsed.first_name == "Joe"
    assert parsed.last_name == "Blow"


def test_unset_decimal_scenario():
    Price = define_record("Price", [{"name": "value", "type": "decimal"}])
    price = Price()

    assert price.to_serialized_attributes() == {"value": None}
    assert price.to_ordered_query_string() == ""
    assert Price.from_query_string("").value is None


@pytest.mark.parametrize("blank", [None, "", "  \t", "\n"])
def test_blank_input_falls_back_to_defaults(blank):
    Named = define_record("Named", [{"name": "a", "type": "string", "default": "Joe"}])
    assert Named.from_query_string(blank).a == "Joe"


def test_delimiters_in_names_and_values_are_escaped():
    Tricky = define_record(
        "Tricky", [{"name": "b&x", "type": "string"}, {"name": "a=x", "type": "string"}]
    )
    record = Tricky({"a=x": "1=2", "b&x": "3&4"})

    text = record.to_ordered_query_string()

    assert text == "a%3Dx=1%3D2&b%26x=3%264"
    assert Tricky.from_query_string(text) == record


def test_spaces_and_plus_signs_use_form_encoding(person_cls):
    person = person_cls(first_name="Joe Jr", last_name="A+B")

    text = person.to_ordered_query_string()

    assert text == "first_name=Joe+Jr&last_name=A%2BB"
    assert person_cls.from_query_string(text) == person


def test_every_logical_type_round_trips(all_types_cls, all_type_values):
    record = all_types_cls(all_type_values)
    assert all_types_cls.from_query_string(record.to_ordered_query_string()) == record


def test_all_null_record_round_trips(all_types_cls):
    record = all_types_cls()
    assert record.to_ordered_query_string() == ""
    assert all_types_cls.from_query_string("") == record


def test_entries_without_separator_and_empty_entries_are_dropped(person_cls):
    record = person_cls.from_query_string("first_name=Joe&garbage&&last_name=Doe&")
    assert record == person_cls(first_name="Joe", last_name="Doe")


def test_value_may_contain_equals_after_the_first(person_cls):
    assert person_cls.from_query_string("first_name=a=b").first_name == "a=b"


def test_unknown_names_are_ignored(person_cls):
    assert person_cls.from_query_string("shoe_size=44&first_name=Joe") == person_cls(
        first_name="Joe"
    )


def test_output_is_sorted_by_name_regardless_of_declaration_order():
    Reversed = define_record(
        "Reversed",
        [{"name": "zeta", "type": "integer"}, {"name": "alpha", "type": "integer"}],
    )
    assert Reversed(zeta=1, alpha=2).to_ordered_query_string() == "alpha=2&zeta=1"


def test_equal_records_serialize_identically(all_types_cls, all_type_values):
    first = all_types_cls(all_type_values)
    second = all_types_cls(dict(reversed(list(all_type_values.items()))))
    assert first.to_ordered_query_string() == second.to_ordered_query_string()


def test_serialize_aliases(person_cls):
    person = person_cls(first_name="Joe")
    assert person.serialize() == person.to_ordered_query_string()
    assert person_cls.deserialize(person.serialize()) == person


def test_bytes_input_is_decoded(person_cls):
    assert person_cls.from_query_string(b"first_name=Jos%C3%A9").first_name == "José"
