from copy import deepcopy

import marshmallow
import pytest

from scimcore.config import ConversionConfig, UnknownAttributes, set_conversion_config
from scimcore.data.filter import Filter
from scimcore.error import ERROR_SCHEMA
from scimcore.ext.marshmallow import FilterField, ResourceField, create_resource_schema
from scimcore.schemas import Group, User


def test_resource_schema_loads_typed_resource(user_data):
    schema = create_resource_schema(User)()

    user = schema.load(deepcopy(user_data))

    assert isinstance(user, User)
    assert user == User.deserialize(user_data)


def test_resource_schema_dumps_typed_resource(user_data):
    schema = create_resource_schema(User)()

    assert schema.dump(User.deserialize(deepcopy(user_data))) == user_data


def test_resource_schema_is_named_after_resource():
    assert create_resource_schema(Group).__name__ == "Group"


def test_resource_schema_reports_conversion_error_as_error_response(user_data):
    user_data["locale"] = "pl-PL"
    schema = create_resource_schema(User)()

    with pytest.raises(marshmallow.ValidationError) as exc_info:
        schema.load(user_data)

    assert exc_info.value.messages == {
        "schemas": [ERROR_SCHEMA],
        "status": "400",
        "scimType": "invalidValue",
        "detail": "unknown locale 'pl-PL'",
        "kind": "UnknownLocale",
    }


def test_resource_schema_passes_unknown_attributes_to_conversion(group_data):
    set_conversion_config(ConversionConfig(unknown_attributes=UnknownAttributes.REJECT))
    group_data["owner"] = "bjensen"
    schema = create_resource_schema(Group)()

    with pytest.raises(marshmallow.ValidationError) as exc_info:
        schema.load(group_data)

    assert exc_info.value.messages["kind"] == "InvalidAttribute"


def test_resource_field_loads_and_dumps_resource(group_data):
    schema = marshmallow.Schema.from_dict(
        {"resources": marshmallow.fields.List(ResourceField(Group))}
    )()

    loaded = schema.load({"resources": [deepcopy(group_data)]})

    assert loaded == {"resources": [Group.deserialize(group_data)]}
    assert schema.dump(loaded) == {"resources": [group_data]}


def test_resource_field_reports_conversion_error(group_data):
    group_data.pop("displayName")
    schema = marshmallow.Schema.from_dict({"resource": ResourceField(Group)})()

    with pytest.raises(marshmallow.ValidationError) as exc_info:
        schema.load({"resource": group_data})

    assert exc_info.value.messages["resource"]["kind"] == "MissingRequiredAttribute"


def test_filter_field_loads_and_dumps_filter():
    schema = marshmallow.Schema.from_dict({"filter": FilterField()})()

    loaded = schema.load({"filter": "userName eq bjensen"})

    assert loaded == {"filter": Filter.deserialize('userName eq "bjensen"')}
    assert schema.dump(loaded) == {"filter": 'userName eq "bjensen"'}


@pytest.mark.parametrize("value", ("userName xx bjensen", 42))
def test_filter_field_reports_bad_filter(value):
    schema = marshmallow.Schema.from_dict({"filter": FilterField()})()

    with pytest.raises(marshmallow.ValidationError) as exc_info:
        schema.load({"filter": value})

    assert "filter" in exc_info.value.messages


def test_bad_filter_is_reported_as_invalid_filter_error():
    schema = marshmallow.Schema.from_dict({"filter": FilterField()})()

    with pytest.raises(marshmallow.ValidationError) as exc_info:
        schema.load({"filter": "userName xx bjensen"})

    assert exc_info.value.messages["filter"]["scimType"] == "invalidFilter"
