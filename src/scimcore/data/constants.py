from enum import Enum

SCHEMA_USER = "urn:ietf:params:scim:schemas:core:2.0:User"
SCHEMA_GROUP = "urn:ietf:params:scim:schemas:core:2.0:Group"


class EntryKey(str, Enum):
    """
    Keys of the resource payload that are not resource attributes.
    """

    SCHEMAS = "schemas"
    ID = "id"
    EXTERNAL_ID = "externalId"
    META = "meta"

    def __str__(self) -> str:
        return self.value


class MetaKey(str, Enum):
    RESOURCE_TYPE = "resourceType"
    CREATED = "created"
    LAST_MODIFIED = "lastModified"
    LOCATION = "location"
    VERSION = "version"

    def __str__(self) -> str:
        return self.value
