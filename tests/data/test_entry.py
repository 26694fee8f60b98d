from collections.abc import Hashable
from copy import deepcopy
from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from scimcore.data.attrs import MultiComplex, SingleComplex, SingleSimple, String
from scimcore.data.entry import Entry, Meta
from scimcore.error import ErrorKind, ScimError


@pytest.fixture
def meta_data():
    return {
        "resourceType": "User",
        "created": "2010-01-23T04:56:22Z",
        "lastModified": "2011-05-13T04:42:34Z",
        "version": 'W/"a330bc54f0671c9"',
        "location": "https://example.com/v2/Users/2819c223-7f76-453a-919d-413861904646",
    }


def test_meta_is_deserialized(meta_data):
    meta = Meta.deserialize(meta_data)

    assert meta.resource_type == "User"
    assert meta.created == datetime(2010, 1, 23, 4, 56, 22, tzinfo=timezone.utc)
    assert meta.last_modified == datetime(2011, 5, 13, 4, 42, 34, tzinfo=timezone.utc)
    assert meta.version == 'W/"a330bc54f0671c9"'
    assert meta.location == meta_data["location"]


def test_meta_is_serialized_to_same_data(meta_data):
    assert Meta.deserialize(meta_data).serialize() == meta_data


@pytest.mark.parametrize(
    ("created", "expected"),
    (
        (
            "2010-01-23T04:56:22.123Z",
            datetime(2010, 1, 23, 4, 56, 22, 123000, tzinfo=timezone.utc),
        ),
        (
            "2010-01-23t04:56:22.1234567+02:00",
            datetime(2010, 1, 23, 4, 56, 22, 123456, tzinfo=timezone(timedelta(hours=2))),
        ),
        (
            "2010-01-23T04:56:22-05:30",
            datetime(2010, 1, 23, 4, 56, 22, tzinfo=timezone(-timedelta(hours=5, minutes=30))),
        ),
    ),
)
def test_meta_timestamps_are_parsed_as_rfc3339(meta_data, created, expected):
    meta_data["created"] = created

    assert Meta.deserialize(meta_data).created == expected


@pytest.mark.parametrize(
    "created",
    (
        "2010-01-23T04:56:22.5Z",
        "2010-01-23T04:56:22.123+02:00",
        "2010-01-23T04:56:22.000001-08:00",
        "2010-01-23T04:56:22.999999Z",
    ),
)
def test_meta_with_fractional_timestamp_is_serialized_to_same_data(meta_data, created):
    meta_data["created"] = created

    assert Meta.deserialize(meta_data).serialize() == meta_data


def test_meta_timestamp_with_offset_is_serialized_with_offset(meta_data):
    meta_data["created"] = "2010-01-23T04:56:22+02:00"

    assert Meta.deserialize(meta_data).serialize()["created"] == "2010-01-23T04:56:22+02:00"


@pytest.mark.parametrize(
    ("key", "value"),
    (
        ("created", "2010-01-23"),
        ("created", "2010-01-23 04:56:22Z"),
        ("created", "2010-13-23T04:56:22Z"),
        ("created", "2010-01-23T04:56:22"),
        ("lastModified", 1264222582),
        ("location", "/v2/Users/2819c223"),
        ("location", "not a url"),
        ("resourceType", 1),
        ("version", None),
    ),
)
def test_meta_deserialization_fails_for_bad_value(meta_data, key, value):
    meta_data[key] = value

    with pytest.raises(ScimError) as exc_info:
        Meta.deserialize(meta_data)

    assert exc_info.value.kind == ErrorKind.INVALID_ATTRIBUTE


@pytest.mark.parametrize(
    "key", ("resourceType", "created", "lastModified", "location", "version")
)
def test_meta_deserialization_fails_if_sub_attribute_missing(meta_data, key):
    meta_data.pop(key)

    with pytest.raises(ScimError) as exc_info:
        Meta.deserialize(meta_data)

    assert exc_info.value.kind == ErrorKind.MISSING_REQUIRED_ATTRIBUTE


def test_meta_deserialization_fails_for_non_object():
    with pytest.raises(ScimError) as exc_info:
        Meta.deserialize("User")

    assert exc_info.value.kind == ErrorKind.INVALID_ATTRIBUTE


def test_entry_is_deserialized(user_data):
    entry = Entry.deserialize(user_data)

    assert entry.schemas == ["urn:ietf:params:scim:schemas:core:2.0:User"]
    assert entry.id == UUID("2819c223-7f76-453a-919d-413861904646")
    assert entry.external_id == "701984"
    assert entry.meta is not None
    assert entry.meta.resource_type == "User"
    assert "schemas" not in entry.attrs
    assert "id" not in entry.attrs
    assert "externalId" not in entry.attrs
    assert "meta" not in entry.attrs
    assert entry.attrs["userName"] == SingleSimple(String("bjensen@example.com"))
    assert isinstance(entry.attrs["name"], SingleComplex)
    assert isinstance(entry.attrs["emails"], MultiComplex)
    assert list(entry.attrs) == sorted(entry.attrs)


def test_entry_is_not_hashable(minimal_user_data):
    entry = Entry.deserialize(minimal_user_data)

    assert not isinstance(entry, Hashable)
    with pytest.raises(TypeError):
        hash(entry)


def test_entry_without_optional_keys_is_deserialized(minimal_user_data):
    entry = Entry.deserialize(minimal_user_data)

    assert entry.external_id is None
    assert entry.meta is None
    assert list(entry.attrs) == ["active", "userName"]


def test_entry_is_serialized_to_same_data(user_data):
    assert Entry.deserialize(deepcopy(user_data)).serialize() == user_data


def test_entry_keeps_schemas_verbatim():
    data = {
        "schemas": [
            "urn:ietf:params:scim:schemas:core:2.0:User",
            "urn:ietf:params:scim:schemas:extension:enterprise:2.0:User",
        ],
        "id": "2819c223-7f76-453a-919d-413861904646",
    }

    assert Entry.deserialize(data).serialize() == data


def test_entry_serialization_omits_absent_optional_keys():
    entry = Entry(
        schemas=["urn:ietf:params:scim:schemas:core:2.0:Group"],
        id=UUID("e9e30dba-f08f-4109-8486-d5c6a331660a"),
    )

    assert entry.serialize() == {
        "schemas": ["urn:ietf:params:scim:schemas:core:2.0:Group"],
        "id": "e9e30dba-f08f-4109-8486-d5c6a331660a",
    }


def test_entry_attributes_are_sorted_on_creation():
    entry = Entry(
        schemas=["urn:ietf:params:scim:schemas:core:2.0:Group"],
        id=UUID("e9e30dba-f08f-4109-8486-d5c6a331660a"),
        attrs={"members": SingleSimple(String("b")), "displayName": SingleSimple(String("a"))},
    )

    assert list(entry.attrs) == ["displayName", "members"]


@pytest.mark.parametrize(
    ("key", "value", "expected_kind"),
    (
        ("schemas", None, ErrorKind.MISSING_REQUIRED_ATTRIBUTE),
        ("schemas", [], ErrorKind.INVALID_ATTRIBUTE),
        ("schemas", "urn:ietf:params:scim:schemas:core:2.0:User", ErrorKind.INVALID_ATTRIBUTE),
        ("schemas", [1], ErrorKind.INVALID_ATTRIBUTE),
        ("id", None, ErrorKind.MISSING_REQUIRED_ATTRIBUTE),
        ("id", "2819c223", ErrorKind.INVALID_ATTRIBUTE),
        ("id", 2819, ErrorKind.INVALID_ATTRIBUTE),
        ("externalId", 701984, ErrorKind.INVALID_ATTRIBUTE),
        ("meta", "User", ErrorKind.INVALID_ATTRIBUTE),
        ("emails", [], ErrorKind.EMPTY_MULTI_VALUE),
        ("emails", [["bjensen@example.com"]], ErrorKind.NESTED_MULTI_VALUE),
        ("nickName", None, ErrorKind.INVALID_SINGLE_VALUE),
    ),
)
def test_entry_deserialization_fails(minimal_user_data, key, value, expected_kind):
    if value is None and key in ("schemas", "id"):
        minimal_user_data.pop(key)
    else:
        minimal_user_data[key] = value

    with pytest.raises(ScimError) as exc_info:
        Entry.deserialize(minimal_user_data)

    assert exc_info.value.kind == expected_kind


def test_entry_deserialization_fails_for_non_object():
    with pytest.raises(ScimError) as exc_info:
        Entry.deserialize([{"id": "2819c223-7f76-453a-919d-413861904646"}])

    assert exc_info.value.kind == ErrorKind.INCONSISTENT_MULTI_VALUE
