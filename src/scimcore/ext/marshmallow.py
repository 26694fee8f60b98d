import dataclasses
from collections.abc import Mapping
from typing import Any, Callable, Optional, cast

import marshmallow

from scimcore.data.constants import EntryKey
from scimcore.data.fields import (
    BooleanType,
    Field,
    MultiNested,
    Nested,
    Simple,
    get_scim_field,
)
from scimcore.data.filter import Filter
from scimcore.data.schemas import Resource
from scimcore.error import FilterSyntaxError, ScimError

_marshmallow_field_by_value_type: dict[type, type[marshmallow.fields.Field]] = {
    BooleanType: marshmallow.fields.Boolean,
}


def _load_resource(resource: type[Resource], data: Any) -> Resource:
    try:
        return resource.deserialize(data)
    except ScimError as e:
        raise marshmallow.ValidationError(message=dict(e.to_dict())) from e


def _dump_resource(value: Optional[Resource]) -> Optional[dict[str, Any]]:
    if value is None:
        return None
    return value.serialize()


class ResourceField(marshmallow.fields.Field):
    """
    Field holding typed resource. Conversion errors are reported as `ValidationError`,
    with SCIM error response as the message.

    Examples:
        >>> schema_cls = marshmallow.Schema.from_dict(
        >>>     {"Resources": marshmallow.fields.List(ResourceField(User))}
        >>> )
    """

    def __init__(self, resource: type[Resource], **kwargs: Any):
        super().__init__(**kwargs)
        self._resource = resource

    def _deserialize(self, value: Any, attr: Optional[str], data: Any, **kwargs: Any) -> Resource:
        return _load_resource(self._resource, value)

    def _serialize(
        self, value: Optional[Resource], attr: Optional[str], obj: Any, **kwargs: Any
    ) -> Optional[dict[str, Any]]:
        return _dump_resource(value)


class FilterField(marshmallow.fields.Field):
    """
    Field holding parsed filter expression.
    """

    def _deserialize(self, value: Any, attr: Optional[str], data: Any, **kwargs: Any) -> Filter:
        if not isinstance(value, str):
            raise marshmallow.ValidationError("filter expression must be a string")
        try:
            return Filter.deserialize(value)
        except FilterSyntaxError as e:
            raise marshmallow.ValidationError(message=dict(e.to_dict())) from e

    def _serialize(
        self, value: Optional[Filter], attr: Optional[str], obj: Any, **kwargs: Any
    ) -> Optional[str]:
        if value is None:
            return None
        return value.serialize()


def _get_field(spec: Field) -> marshmallow.fields.Field:
    field: marshmallow.fields.Field
    if isinstance(spec, (Nested, MultiNested)):
        field = marshmallow.fields.Dict()
    elif isinstance(spec, Simple):
        field_cls = _marshmallow_field_by_value_type.get(
            type(spec.value_type), marshmallow.fields.String
        )
        field = field_cls()
    else:
        field = marshmallow.fields.Raw()
    if isinstance(spec, MultiNested):
        field = marshmallow.fields.List(field)
    return field


def _get_fields(resource: type[Resource]) -> dict[str, marshmallow.fields.Field]:
    fields_: dict[str, marshmallow.fields.Field] = {
        EntryKey.SCHEMAS.value: marshmallow.fields.List(marshmallow.fields.String()),
        EntryKey.ID.value: marshmallow.fields.String(),
        EntryKey.EXTERNAL_ID.value: marshmallow.fields.String(),
        EntryKey.META.value: marshmallow.fields.Dict(),
    }
    for field in dataclasses.fields(cast(Any, resource)):
        spec = get_scim_field(field)
        if spec is not None:
            fields_[spec.name] = _get_field(spec)
    return fields_


def _get_resource_processors(resource: type[Resource]) -> dict[str, Callable]:
    processors_: dict[str, Callable] = {}

    def _post_load(_, data: Mapping[str, Any], original_data: Any, **__) -> Resource:
        return _load_resource(resource, original_data)

    def _pre_dump(_, data: Any, **__) -> Any:
        if isinstance(data, Resource):
            return data.serialize()
        return data

    processors_["_post_load"] = marshmallow.post_load(_post_load, pass_original=True)
    processors_["_pre_dump"] = marshmallow.pre_dump(_pre_dump)
    return processors_


def create_resource_schema(resource: type[Resource]) -> type[marshmallow.Schema]:
    """
    Creates `marshmallow` schema for the provided typed resource.

    The fields of the resulting schema have no SCIM-specific properties. Instead, the resource
    conversion is hidden inside, so loading returns typed resource, and dumping accepts one.
    Attributes unknown to the resource are passed through to the conversion, which applies
    the configured unknown attributes policy.

    Args:
        resource: The typed resource class to create the schema from.

    Examples:
        >>> from scimcore.schemas import User
        >>>
        >>> schema = create_resource_schema(User)()
        >>> schema
        <User(many=False)>
        >>> schema.load({...})
        User(id=UUID('2819c223-7f76-453a-919d-413861904646'), ...)
    """
    schema_cls = marshmallow.Schema.from_dict(fields=_get_fields(resource))
    processors_: dict[str, Any] = _get_resource_processors(resource)
    processors_["Meta"] = type("Meta", (), {"unknown": marshmallow.INCLUDE})
    class_ = type(resource.__name__, (schema_cls,), processors_)
    return cast(type[marshmallow.Schema], class_)
