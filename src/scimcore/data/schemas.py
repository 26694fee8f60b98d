import dataclasses
import logging
from collections.abc import Mapping
from typing import Any, ClassVar, MutableMapping, Optional
from uuid import UUID

from typing_extensions import Self

from scimcore import config
from scimcore._registry import register_resource, resources
from scimcore.config import UnknownAttributes
from scimcore.data.attrs import ComplexAttribute
from scimcore.data.entry import Entry, Meta
from scimcore.data.fields import get_scim_field
from scimcore.data.identifiers import SchemaUri
from scimcore.error import ScimError

logger = logging.getLogger(__name__)


def _pop_fields(cls: type, attrs: MutableMapping[str, Any]) -> dict[str, Any]:
    values = {}
    for field in dataclasses.fields(cls):
        spec = get_scim_field(field)
        if spec is None:
            continue
        values[field.name] = spec.pop(attrs)
    return values


def _put_fields(obj: Any, attrs: MutableMapping[str, Any]) -> None:
    for field in dataclasses.fields(obj):
        spec = get_scim_field(field)
        if spec is None:
            continue
        spec.put(attrs, getattr(obj, field.name))


def _handle_unknown(owner: str, attrs: Mapping[str, Any]) -> None:
    if not attrs:
        return
    if config.conversion_config.unknown_attributes == UnknownAttributes.REJECT:
        name = next(iter(attrs))
        logger.debug("attribute %r is not recognized by %s", name, owner)
        raise ScimError.invalid_attribute(name, f"not recognized by {owner}")
    logger.debug("dropping attributes not recognized by %s: %s", owner, ", ".join(attrs))


class ComplexValue:
    """
    Base class for nested shapes, decoded from complex attributes. Subclasses are frozen
    dataclasses, whose fields are declared with `scim_field`.

    Examples:
        >>> @dataclass(frozen=True)
        >>> class Manager(ComplexValue):
        >>>     value: str = scim_field(SubAttr("value", StringType(), required=True))
        >>>     display_name: Optional[str] = scim_field(SubAttr("displayName", StringType()))
    """

    @classmethod
    def from_complex(cls, value: ComplexAttribute) -> Self:
        """
        Decodes the nested shape from the complex attribute.

        Raises:
            ScimError: If any of the sub-attributes is missing or invalid, or if the
                sub-attribute is not recognized and unknown attributes are rejected.
        """
        attrs = dict(value)
        values = _pop_fields(cls, attrs)
        _handle_unknown(cls.__name__, attrs)
        return cls(**values)

    def to_complex(self) -> ComplexAttribute:
        attrs: dict[str, Any] = {}
        _put_fields(self, attrs)
        return ComplexAttribute(attrs)


class SchemaMeta(type):
    def __init__(cls, name, bases, dct):
        super().__init__(name, bases, dct)
        schema = dct.get("schema")
        if schema is not None:
            cls.schema = SchemaUri(schema)
            register_resource(cls.schema, cls)


class Resource(metaclass=SchemaMeta):
    """
    Base class for typed resources. Every subclass must be a frozen dataclass and specify
    `schema` class attribute, which registers the resource for the schema URI. Besides
    the fields declared with `scim_field`, subclasses must declare `id`, `external_id`,
    and `meta` fields.

    Examples:
        >>> @dataclass(frozen=True)
        >>> class Device(Resource):
        >>>     schema = "urn:example:scim:schemas:Device"
        >>>
        >>>     id: UUID
        >>>     serial_number: str = scim_field(
        >>>         Simple("serialNumber", StringType(), required=True)
        >>>     )
        >>>     external_id: Optional[str] = None
        >>>     meta: Optional[Meta] = None
    """

    schema: ClassVar[SchemaUri]

    id: UUID
    external_id: Optional[str]
    meta: Optional[Meta]

    @classmethod
    def accepts(cls, entry: Entry) -> bool:
        """
        Tells whether the entry declares the resource schema. Schema URIs are compared
        case-insensitively.
        """
        return any(cls.schema == schema for schema in entry.schemas)

    @classmethod
    def from_entry(cls, entry: Entry) -> Self:
        """
        Converts the generic entry to the typed resource. Attributes are consumed from the copy
        of the entry's attributes, so the entry itself stays intact.

        Raises:
            ScimError: `EntryMissingSchema` if the entry does not declare the resource
                schema, or any error raised by the field decoding.
        """
        if not cls.accepts(entry):
            logger.debug("entry schemas %r do not include %r", entry.schemas, cls.schema)
            raise ScimError.entry_missing_schema(cls.schema)
        attrs = dict(entry.attrs)
        values = _pop_fields(cls, attrs)
        _handle_unknown(cls.__name__, attrs)
        return cls(id=entry.id, external_id=entry.external_id, meta=entry.meta, **values)

    def to_entry(self) -> Entry:
        """
        Converts the typed resource to the generic entry. The entry declares exactly one
        schema, the resource's own.
        """
        attrs: dict[str, Any] = {}
        _put_fields(self, attrs)
        return Entry(
            schemas=[str(self.schema)],
            id=self.id,
            external_id=self.external_id,
            meta=self.meta,
            attrs=attrs,
        )

    @classmethod
    def deserialize(cls, data: Any) -> Self:
        """
        Converts the resource payload to the typed resource.
        """
        return cls.from_entry(Entry.deserialize(data))

    def serialize(self) -> dict[str, Any]:
        return self.to_entry().serialize()


def resource_for(entry: Entry) -> type[Resource]:
    """
    Returns the registered resource class for the first of the entry's schemas that has one.

    Raises:
        ScimError: `EntryMissingSchema` if none of the entry's schemas is registered.
    """
    for schema in entry.schemas:
        try:
            resource = resources.get(SchemaUri(schema))
        except ValueError:
            continue
        if resource is not None:
            return resource
    logger.debug("no resource registered for any of %r", entry.schemas)
    raise ScimError.entry_missing_schema(", ".join(str(schema) for schema in resources))


def decode_resource(entry: Entry) -> Resource:
    """
    Converts the generic entry to the typed resource registered for its schema.

    Examples:
        >>> decode_resource(Entry.deserialize(payload))
        User(id=UUID('2819c223-7f76-453a-919d-413861904646'), user_name='bjensen', ...)
    """
    return resource_for(entry).from_entry(entry)
