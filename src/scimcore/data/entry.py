import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from scimcore.data.attrs import Attribute
from scimcore.data.constants import EntryKey, MetaKey
from scimcore.data.fields import format_datetime, parse_datetime, parse_url, parse_uuid
from scimcore.error import ScimError

logger = logging.getLogger(__name__)


def _get_required(data: Mapping[str, Any], key: str) -> Any:
    if key not in data:
        logger.debug("required attribute %r is missing", key)
        raise ScimError.missing_required_attribute(key)
    return data[key]


def _get_string(data: Mapping[str, Any], key: str, required: bool = True) -> Optional[str]:
    if not required and key not in data:
        return None
    value = _get_required(data, key)
    if not isinstance(value, str):
        logger.debug("attribute %r expects string, got %r", key, value)
        raise ScimError.invalid_attribute(key, "expected string")
    return value


@dataclass(frozen=True)
class Meta:
    """
    Resource metadata, as specified in RFC-7643. When present in the payload, all its
    sub-attributes are required.
    """

    resource_type: str
    created: datetime
    last_modified: datetime
    location: str
    version: str

    @classmethod
    def deserialize(cls, value: Any) -> "Meta":
        """
        Raises:
            ScimError: `InvalidAttribute` if `value` is not an object, timestamps are not valid
                RFC-3339 date-times, or location is not absolute URL. `MissingRequiredAttribute`
                if any of the sub-attributes is missing.
        """
        if not isinstance(value, Mapping):
            logger.debug("meta expects object, got %r", value)
            raise ScimError.invalid_attribute(EntryKey.META.value, "expected object")
        resource_type = _get_string(value, MetaKey.RESOURCE_TYPE.value)
        created = parse_datetime(
            MetaKey.CREATED.value, _get_required(value, MetaKey.CREATED.value)
        )
        last_modified = parse_datetime(
            MetaKey.LAST_MODIFIED.value, _get_required(value, MetaKey.LAST_MODIFIED.value)
        )
        location = parse_url(
            MetaKey.LOCATION.value, _get_required(value, MetaKey.LOCATION.value)
        )
        version = _get_string(value, MetaKey.VERSION.value)
        return cls(
            resource_type=resource_type,
            created=created,
            last_modified=last_modified,
            location=location,
            version=version,
        )

    def serialize(self) -> dict[str, str]:
        return {
            MetaKey.RESOURCE_TYPE.value: self.resource_type,
            MetaKey.CREATED.value: format_datetime(self.created),
            MetaKey.LAST_MODIFIED.value: format_datetime(self.last_modified),
            MetaKey.LOCATION.value: self.location,
            MetaKey.VERSION.value: self.version,
        }


@dataclass(frozen=True)
class Entry:
    """
    Generic resource: the envelope (`schemas`, `id`, `externalId`, `meta`) and the bag of all
    the other attributes, sorted by name.

    Examples:
        >>> entry = Entry.deserialize(
        >>>     {
        >>>         "schemas": ["urn:ietf:params:scim:schemas:core:2.0:Group"],
        >>>         "id": "e9e30dba-f08f-4109-8486-d5c6a331660a",
        >>>         "displayName": "Tour Guides",
        >>>     }
        >>> )
        >>> entry.attrs
        {'displayName': SingleSimple(value=String(value='Tour Guides'))}
    """

    __hash__ = None  # type: ignore[assignment]

    schemas: list[str]
    id: UUID
    external_id: Optional[str] = None
    meta: Optional[Meta] = None
    attrs: dict[str, Attribute] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "schemas", list(self.schemas))
        object.__setattr__(self, "attrs", dict(sorted(self.attrs.items())))

    @classmethod
    def deserialize(cls, data: Any) -> "Entry":
        """
        Converts resource payload to generic entry. Every key, except the envelope ones,
        is classified as an attribute.

        Raises:
            ScimError: If the envelope is invalid, or any of the attributes can not be
                classified.
        """
        if not isinstance(data, Mapping):
            logger.debug("entry expects object, got %r", data)
            raise ScimError.inconsistent_multi_value(got=type(data).__name__)

        schemas = _get_required(data, EntryKey.SCHEMAS.value)
        if (
            not isinstance(schemas, (list, tuple))
            or not schemas
            or not all(isinstance(item, str) for item in schemas)
        ):
            logger.debug("'schemas' expects non-empty list of strings, got %r", schemas)
            raise ScimError.invalid_attribute(
                EntryKey.SCHEMAS.value, "expected non-empty list of schema URIs"
            )

        id_ = parse_uuid(EntryKey.ID.value, _get_required(data, EntryKey.ID.value))
        external_id = _get_string(data, EntryKey.EXTERNAL_ID.value, required=False)
        meta = None
        if EntryKey.META.value in data:
            meta = Meta.deserialize(data[EntryKey.META.value])

        reserved = {key.value for key in EntryKey}
        attrs = {
            name: Attribute.deserialize(value)
            for name, value in data.items()
            if name not in reserved
        }
        return cls(
            schemas=list(schemas),
            id=id_,
            external_id=external_id,
            meta=meta,
            attrs=attrs,
        )

    def serialize(self) -> dict[str, Any]:
        """
        Converts the entry to resource payload. Absent `externalId` and `meta` are omitted.
        """
        output: dict[str, Any] = {
            EntryKey.SCHEMAS.value: list(self.schemas),
            EntryKey.ID.value: str(self.id),
        }
        if self.external_id is not None:
            output[EntryKey.EXTERNAL_ID.value] = self.external_id
        if self.meta is not None:
            output[EntryKey.META.value] = self.meta.serialize()
        for name, attr in self.attrs.items():
            output[name] = attr.serialize()
        return output
