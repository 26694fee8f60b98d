from dataclasses import dataclass
from enum import Enum
from typing import Optional
from uuid import UUID

from scimcore.data.constants import SCHEMA_USER
from scimcore.data.entry import Meta
from scimcore.data.fields import (
    BinaryType,
    BooleanType,
    ChoiceType,
    CountryType,
    MultiNested,
    Nested,
    Simple,
    StringType,
    SubAttr,
    UrlType,
    UuidType,
    scim_field,
)
from scimcore.data.schemas import ComplexValue, Resource
from scimcore.error import ScimError


class Locale(str, Enum):
    """
    Recognized language tags, used by `locale` and `preferredLanguage`. Any other tag
    fails with `UnknownLocale` error.
    """

    EN = "en"
    EN_AU = "en-AU"
    EN_GB = "en-GB"
    EN_US = "en-US"
    DE = "de"
    DE_DE = "de-DE"

    def __str__(self) -> str:
        return self.value


class Timezone(str, Enum):
    """
    Recognized IANA time zones. Any other zone fails with `UnknownTimezone` error.
    """

    AUSTRALIA_BRISBANE = "Australia/Brisbane"
    AMERICA_LOS_ANGELES = "America/Los_Angeles"
    EUROPE_BERLIN = "Europe/Berlin"
    EUROPE_LONDON = "Europe/London"
    UTC = "UTC"

    def __str__(self) -> str:
        return self.value


_STRING = StringType()
_URL = UrlType()
_LOCALE = ChoiceType(Locale, ScimError.unknown_locale)


@dataclass(frozen=True)
class Name(ComplexValue):
    formatted: Optional[str] = scim_field(SubAttr("formatted", _STRING))
    family_name: Optional[str] = scim_field(SubAttr("familyName", _STRING))
    given_name: Optional[str] = scim_field(SubAttr("givenName", _STRING))
    middle_name: Optional[str] = scim_field(SubAttr("middleName", _STRING))
    honorific_prefix: Optional[str] = scim_field(SubAttr("honorificPrefix", _STRING))
    honorific_suffix: Optional[str] = scim_field(SubAttr("honorificSuffix", _STRING))


@dataclass(frozen=True)
class MultiValueAttr(ComplexValue):
    """
    Generic item of multi-valued attributes, like `emails`, `phoneNumbers`, `ims`,
    `entitlements`, and `roles`.
    """

    value: str = scim_field(SubAttr("value", _STRING, required=True))
    type: Optional[str] = scim_field(SubAttr("type", _STRING))
    primary: Optional[bool] = scim_field(SubAttr("primary", BooleanType()))
    display: Optional[str] = scim_field(SubAttr("display", _STRING))
    ref: Optional[str] = scim_field(SubAttr("$ref", _URL))


@dataclass(frozen=True)
class Photo(ComplexValue):
    value: str = scim_field(SubAttr("value", _URL, required=True))
    type: Optional[str] = scim_field(SubAttr("type", _STRING))
    primary: Optional[bool] = scim_field(SubAttr("primary", BooleanType()))
    display: Optional[str] = scim_field(SubAttr("display", _STRING))
    ref: Optional[str] = scim_field(SubAttr("$ref", _URL))


@dataclass(frozen=True)
class Binary(ComplexValue):
    """
    Binary item of `x509Certificates`. The value is kept decoded.
    """

    value: bytes = scim_field(SubAttr("value", BinaryType(), required=True))
    type: Optional[str] = scim_field(SubAttr("type", _STRING))
    primary: Optional[bool] = scim_field(SubAttr("primary", BooleanType()))
    display: Optional[str] = scim_field(SubAttr("display", _STRING))
    ref: Optional[str] = scim_field(SubAttr("$ref", _URL))


@dataclass(frozen=True)
class Address(ComplexValue):
    """
    Physical mailing address. `country` must be ISO-3166 code or country name, which is
    stricter than plain string the wire model allows.
    """

    type: Optional[str] = scim_field(SubAttr("type", _STRING))
    primary: Optional[bool] = scim_field(SubAttr("primary", BooleanType()))
    formatted: Optional[str] = scim_field(SubAttr("formatted", _STRING))
    street_address: Optional[str] = scim_field(SubAttr("streetAddress", _STRING))
    locality: Optional[str] = scim_field(SubAttr("locality", _STRING))
    region: Optional[str] = scim_field(SubAttr("region", _STRING))
    postal_code: Optional[str] = scim_field(SubAttr("postalCode", _STRING))
    country: Optional[str] = scim_field(SubAttr("country", CountryType()))


@dataclass(frozen=True)
class GroupMembership(ComplexValue):
    """
    Group the user belongs to, item of user's `groups`.
    """

    value: UUID = scim_field(SubAttr("value", UuidType(), required=True))
    ref: str = scim_field(SubAttr("$ref", _URL, required=True))
    display: str = scim_field(SubAttr("display", _STRING, required=True))
    type: Optional[str] = scim_field(SubAttr("type", _STRING))


@dataclass(frozen=True)
class User(Resource):
    """
    User resource, as specified in RFC-7643. `userName` and `active` are required.

    Examples:
        >>> user = User.deserialize(
        >>>     {
        >>>         "schemas": ["urn:ietf:params:scim:schemas:core:2.0:User"],
        >>>         "id": "2819c223-7f76-453a-919d-413861904646",
        >>>         "userName": "bjensen",
        >>>         "active": True,
        >>>         "locale": "en-US",
        >>>     }
        >>> )
        >>> user.locale
        <Locale.EN_US: 'en-US'>
    """

    schema = SCHEMA_USER
    __hash__ = None  # type: ignore[assignment]

    id: UUID
    user_name: str = scim_field(Simple("userName", _STRING, required=True))
    active: bool = scim_field(Simple("active", BooleanType(), required=True))
    external_id: Optional[str] = None
    meta: Optional[Meta] = None
    name: Optional[Name] = scim_field(Nested("name", Name))
    display_name: Optional[str] = scim_field(Simple("displayName", _STRING))
    nick_name: Optional[str] = scim_field(Simple("nickName", _STRING))
    profile_url: Optional[str] = scim_field(Simple("profileUrl", _URL))
    title: Optional[str] = scim_field(Simple("title", _STRING))
    user_type: Optional[str] = scim_field(Simple("userType", _STRING))
    preferred_language: Optional[Locale] = scim_field(Simple("preferredLanguage", _LOCALE))
    locale: Optional[Locale] = scim_field(Simple("locale", _LOCALE))
    timezone: Optional[Timezone] = scim_field(
        Simple("timezone", ChoiceType(Timezone, ScimError.unknown_timezone))
    )
    password: Optional[str] = scim_field(Simple("password", _STRING))
    emails: list[MultiValueAttr] = scim_field(MultiNested("emails", MultiValueAttr))
    phone_numbers: list[MultiValueAttr] = scim_field(MultiNested("phoneNumbers", MultiValueAttr))
    ims: list[MultiValueAttr] = scim_field(MultiNested("ims", MultiValueAttr))
    photos: list[Photo] = scim_field(MultiNested("photos", Photo))
    addresses: list[Address] = scim_field(MultiNested("addresses", Address))
    groups: list[GroupMembership] = scim_field(MultiNested("groups", GroupMembership))
    entitlements: list[MultiValueAttr] = scim_field(MultiNested("entitlements", MultiValueAttr))
    roles: list[MultiValueAttr] = scim_field(MultiNested("roles", MultiValueAttr))
    x509_certificates: list[Binary] = scim_field(MultiNested("x509Certificates", Binary))
