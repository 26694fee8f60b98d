from scimcore.schemas.group import Group, Member
from scimcore.schemas.user import (
    Address,
    Binary,
    GroupMembership,
    Locale,
    MultiValueAttr,
    Name,
    Photo,
    Timezone,
    User,
)

__all__ = [
    "Address",
    "Binary",
    "Group",
    "GroupMembership",
    "Locale",
    "Member",
    "MultiValueAttr",
    "Name",
    "Photo",
    "Timezone",
    "User",
]
