"""
Unit tests for PayloadArray

Tests:
- Person/Address freeform payloads (import, export, validation)
- Shared primitives (_import_mapping, _validate_required, _validate_depth)
- Attribute access sugar and persistence
"""

import json
import pickle

import pytest

from payloadmap import InvalidDataError, PayloadArray, decode_input

from samples import Address, Person


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def person_input():
    """Person input in the canonical shape"""
    return {
        "name": "John Connor",
        "email": "john@skynet.com",
        "phone": "+1-202-555-0172",
        "address": {
            "address": "Future Avenue",
            "number": "2047",
            "complement": "High Tech World",
            "district": "Nobody's Alive",
            "city": "Unknown",
            "country_id": "US",
            "postal_code": "55372",
        },
    }


@pytest.fixture
def normalized_person(person_input):
    """person_input after the Address setters normalize it"""
    person_input["address"]["district"] = "Nobody'S Alive"
    return person_input


class Bag(PayloadArray):
    """Freeform payload importing whatever is listed in REQUIRED"""

    REQUIRED = ["title", "count"]

    def import_data(self, input_):
        return self._import_mapping(self.REQUIRED, decode_input(input_))

    def validate(self):
        self._validate_required(self.REQUIRED)
        self._validate_depth()

    def set_count(self, count):
        return self.add("count", int(count))


# ============================================================================
# TEST: Person
# ============================================================================


class TestPerson:
    """Tests for the canonical person scenario"""

    def test_to_dict(self, person_input, normalized_person):
        person = Person().import_data(person_input)

        assert person.to_dict() == normalized_person
        assert list(person.to_dict()) == list(normalized_person)
        assert list(person.to_dict()["address"]) == list(normalized_person["address"])

    def test_to_json(self, person_input, normalized_person):
        person = Person().import_data(person_input)

        assert person.to_json() == json.dumps(normalized_person)
        assert json.loads(person.to_json()) == person.to_dict()

    def test_normalization(self):
        person = Person().import_data(
            {
                "name": "john connor",
                "address": {"city": "new york", "country_id": "us", "postal_code": "55372-1234"},
            }
        )
        address = person.get("address")

        assert person.get("name") == "John Connor"
        assert address.get("city") == "New York"
        assert address.get("country_id") == "US"
        assert address.get("postal_code") == "553721234"

    def test_is_valid(self, person_input):
        assert Person().import_data(person_input).is_valid() is True

    def test_is_invalid(self, person_input):
        del person_input["name"]

        assert Person().import_data(person_input).is_valid() is False

    def test_wrong_value(self, person_input):
        person_input["phone"] = "unknow"

        with pytest.raises(InvalidDataError) as exc_info:
            Person().import_data(person_input).validate()

        assert exc_info.value.key == "phone"
        assert exc_info.value.hint == "Invalid phone"

    def test_nested_failure_propagates(self, person_input):
        del person_input["address"]["city"]
        person = Person().import_data(person_input)

        assert person.is_valid() is False

        with pytest.raises(InvalidDataError) as exc_info:
            person.validate()

        assert exc_info.value.key == "city"
        assert exc_info.value.payload_name == "Address"

    def test_import_json_text(self, person_input, normalized_person):
        assert Person().import_data(json.dumps(person_input)).to_dict() == normalized_person

    def test_invalid_json_imports_nothing(self):
        person = Person().import_data("not json")

        assert person.to_dict() == {}
        assert person.is_valid() is False

    def test_extra_keys_are_ignored(self, person_input):
        person_input["unknown"] = "x"
        person = Person().import_data(person_input)

        assert person.has("unknown") is False


# ============================================================================
# TEST: primitives
# ============================================================================


class TestPrimitives:
    """Tests for the shared PayloadArray primitives"""

    def test_add_get_has(self):
        bag = Bag().add("title", "Report").add("count", None)

        assert bag.get("title") == "Report"
        assert bag.has("title") is True
        assert bag.has("count") is False
        assert bag.get("count", 5) == 5

    def test_add_when(self):
        bag = Bag().add_when(False, "title", "x").add_when(True, "count", 3)

        assert bag.has("title") is False
        assert bag.get("count") == 3

    def test_remove_is_unconditional(self):
        bag = Bag().add("title", "Report")

        bag.remove("title").remove("never-added")

        assert bag.has("title") is False
        assert bag.to_dict() == {}

    def test_remove_when(self):
        bag = Bag().add("title", "Report")

        bag.remove_when(False, "title")
        assert bag.has("title") is True

        bag.remove_when(True, "title")
        assert bag.has("title") is False

    def test_get_and_remove(self):
        bag = Bag().add("title", "Report")

        assert bag.get_and_remove("title") == "Report"
        assert bag.get_and_remove("title", "gone") == "gone"

    @pytest.mark.parametrize("empty", [None, "", "0", 0, 0.0, False, [], {}, ()])
    def test_validate_required_rejects_empty(self, empty):
        bag = Bag().add("title", "Report").add("count", empty)

        with pytest.raises(InvalidDataError) as exc_info:
            bag.validate()

        assert exc_info.value.key == "count"
        assert exc_info.value.hint == "Cannot be empty value"

    def test_validate_required_accepts_values(self):
        assert Bag().add("title", "Report").add("count", 1).is_valid() is True

    def test_validate_depth(self):
        bag = Bag().add("title", "Report").add("count", 1).add("child", Bag().add("title", "x"))

        with pytest.raises(InvalidDataError) as exc_info:
            bag.validate()

        assert exc_info.value.key == "count"
        assert exc_info.value.payload_name == "Bag"

    def test_import_mapping_bare_keys(self):
        bag = Bag().import_data({"title": "Report", "count": 2, "extra": True})

        assert bag.to_dict() == {"title": "Report", "count": 2}

    def test_import_mapping_pairs_and_callables(self):
        seen = []
        bag = Bag()

        bag._import_mapping(
            ["title", ("count", "set_count"), ("note", seen.append)],
            {"title": "Report", "count": "2", "note": "hi", "missing": None},
        )

        assert bag.get("title") == "Report"
        assert bag.get("count") == 2
        assert seen == ["hi"]

    def test_import_mapping_skips_missing_and_none(self):
        bag = Bag()._import_mapping({"title": None, "count": None}, {"count": None})

        assert bag.to_dict() == {}

    def test_export_iterables(self):
        bag = Bag().add("tags", {"a"}).add("pairs", ("x", "y"))

        assert bag.to_dict() == {"tags": ["a"], "pairs": ["x", "y"]}


# ============================================================================
# TEST: attribute access
# ============================================================================


class TestAttributeAccess:
    """Tests for attribute sugar over add/get/has/remove"""

    def test_read_write_delete(self):
        bag = Bag()
        bag.title = "Report"

        assert bag.title == "Report"
        assert "title" in bag
        assert bag.missing is None

        del bag.title

        assert "title" not in bag

    def test_write_goes_through_setter(self):
        person = Person()
        person.name = "john connor"

        assert person.get("name") == "John Connor"

    def test_write_setter_rejects_value(self):
        person = Person()

        with pytest.raises(InvalidDataError) as exc_info:
            person.phone = "unknow"

        assert exc_info.value.key == "phone"
        assert person.has("phone") is False

    def test_read_goes_through_getter(self):
        class Labelled(Bag):
            def get_title(self):
                return self.get("title", "").upper()

        labelled = Labelled()
        labelled.title = "Report"

        assert labelled.title == "REPORT"
        assert labelled.get("title") == "Report"

    def test_container_methods_are_not_accessors(self):
        bag = Bag()
        bag.and_remove = "x"

        assert bag.and_remove == "x"


# ============================================================================
# TEST: persistence
# ============================================================================


class TestPersistence:
    """Tests for serialize/unserialize and pickle"""

    def test_serialize_round_trip(self, person_input, normalized_person):
        person = Person().import_data(person_input)
        restored = Person().unserialize(person.serialize())

        assert restored.to_dict() == normalized_person
        assert isinstance(restored.get("address"), Address)
        assert restored.is_valid() is True

    def test_pickle_round_trip(self, person_input, normalized_person):
        person = Person().import_data(person_input)

        assert pickle.loads(pickle.dumps(person)).to_dict() == normalized_person

    def test_blob_from_another_type(self, person_input):
        blob = Person().import_data(person_input).serialize()

        with pytest.raises(TypeError):
            Address().unserialize(blob)

    def test_corrupted_blob(self):
        with pytest.raises(pickle.UnpicklingError):
            Person().unserialize(b"\x00\x01garbage")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
