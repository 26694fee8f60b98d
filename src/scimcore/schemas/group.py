from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from scimcore.data.constants import SCHEMA_GROUP
from scimcore.data.entry import Meta
from scimcore.data.fields import (
    MultiNested,
    Simple,
    StringType,
    SubAttr,
    UrlType,
    UuidType,
    scim_field,
)
from scimcore.data.schemas import ComplexValue, Resource


@dataclass(frozen=True)
class Member(ComplexValue):
    """
    Member of the group, either user or another group.
    """

    value: UUID = scim_field(SubAttr("value", UuidType(), required=True))
    ref: str = scim_field(SubAttr("$ref", UrlType(), required=True))
    display: str = scim_field(SubAttr("display", StringType(), required=True))
    type: Optional[str] = scim_field(SubAttr("type", StringType()))


@dataclass(frozen=True)
class Group(Resource):
    schema = SCHEMA_GROUP
    __hash__ = None  # type: ignore[assignment]

    id: UUID
    display_name: str = scim_field(Simple("displayName", StringType(), required=True))
    external_id: Optional[str] = None
    meta: Optional[Meta] = None
    members: list[Member] = scim_field(MultiNested("members", Member))
