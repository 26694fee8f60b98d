import abc
import base64
import binascii
import dataclasses
import logging
import re
from datetime import datetime, timezone
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    ClassVar,
    Generic,
    MutableMapping,
    Optional,
    TypeVar,
)
from urllib.parse import urlparse
from uuid import UUID

import iso3166

from scimcore.data.attrs import (
    AttrValue,
    Boolean,
    MultiComplex,
    SingleComplex,
    SingleSimple,
    String,
)
from scimcore.error import ScimError

if TYPE_CHECKING:
    from scimcore.data.schemas import ComplexValue

logger = logging.getLogger(__name__)

T = TypeVar("T")
TEnum = TypeVar("TEnum", bound=Enum)

SCIM_FIELD = "scim"

_RFC3339_DATETIME = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})"
)
_UUID = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")


class MissingType:
    _instance = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls, *args, **kwargs)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Missing"


Missing = MissingType()


def parse_datetime(name: str, value: Any) -> datetime:
    """
    Parses RFC-3339 `date-time`.

    Raises:
        ScimError: `InvalidAttribute` if the value is not a string or not a valid timestamp.
    """
    match = _RFC3339_DATETIME.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        logger.debug("attribute %r has bad timestamp %r", name, value)
        raise ScimError.invalid_attribute(name, "expected RFC-3339 date-time")
    date, time, fraction, offset = match.groups()
    if offset in ("Z", "z"):
        offset = "+00:00"
    fraction = (fraction or "0")[:6].ljust(6, "0")
    try:
        return datetime.fromisoformat(f"{date}T{time}.{fraction}{offset}")
    except ValueError as e:
        logger.debug("attribute %r has bad timestamp %r: %s", name, value, e)
        raise ScimError.invalid_attribute(name, "expected RFC-3339 date-time") from e


def format_datetime(value: datetime) -> str:
    """
    Formats the timestamp as RFC-3339 `date-time`. Naive timestamps are considered UTC.
    Fraction of second is written without trailing zeros, and omitted if zero.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    output = value.isoformat(timespec="seconds")
    if value.microsecond:
        fraction = f"{value.microsecond:06d}".rstrip("0")
        output = f"{output[:19]}.{fraction}{output[19:]}"
    if value.utcoffset() == timezone.utc.utcoffset(None):
        output = output[: -len("+00:00")] + "Z"
    return output


def parse_url(name: str, value: Any) -> str:
    """
    Validates the URI and returns its canonical form. The URI must be absolute, that is, have
    a scheme. The network location is optional, so URNs are accepted.

    Raises:
        ScimError: `InvalidAttribute` if the value is not a string or not an absolute URL.
    """
    if not isinstance(value, str):
        raise ScimError.invalid_attribute(name, "expected URL string")
    try:
        result = urlparse(value)
    except ValueError as e:
        logger.debug("attribute %r has bad URL %r: %s", name, value, e)
        raise ScimError.invalid_attribute(name, "expected absolute URL") from e
    if not result.scheme or any(char.isspace() for char in value):
        logger.debug("attribute %r has bad URL %r", name, value)
        raise ScimError.invalid_attribute(name, "expected absolute URL")
    return result.geturl()


def parse_uuid(name: str, value: Any) -> UUID:
    """
    Parses UUID in its canonical, hyphenated 8-4-4-4-12 form. Braced, `urn:uuid:` and
    unhyphenated forms are rejected.
    """
    if not isinstance(value, str):
        raise ScimError.invalid_attribute(name, "expected UUID string")
    if _UUID.fullmatch(value) is None:
        logger.debug("attribute %r has non-canonical UUID %r", name, value)
        raise ScimError.invalid_attribute(name, "expected UUID")
    try:
        return UUID(value)
    except ValueError as e:
        logger.debug("attribute %r has bad UUID %r", name, value)
        raise ScimError.invalid_attribute(name, "expected UUID") from e


class ValueType(abc.ABC, Generic[T]):
    """
    Scalar type of a field. Defines how the wire value is converted to the Python value,
    and back.
    """

    wire_type: ClassVar[type[AttrValue]]

    def decode(self, name: str, value: AttrValue) -> T:
        """
        Converts the scalar value to the Python value.

        Raises:
            ScimError: `InvalidAttribute` if the value variant is not the expected one, or
                its content is invalid.
        """
        if not isinstance(value, self.wire_type):
            logger.debug(
                "attribute %r expects %s, got %r", name, self.wire_type.__name__, value
            )
            raise ScimError.invalid_attribute(
                name, f"expected {self.wire_type.__name__.lower()} value"
            )
        return self._decode(name, value.value)

    def _decode(self, name: str, value: Any) -> T:
        return value

    def encode(self, value: T) -> AttrValue:
        return self.wire_type(self._encode(value))

    def _encode(self, value: T) -> Any:
        return value


class StringType(ValueType[str]):
    wire_type = String


class BooleanType(ValueType[bool]):
    wire_type = Boolean


class UuidType(ValueType[UUID]):
    wire_type = String

    def _decode(self, name: str, value: str) -> UUID:
        return parse_uuid(name, value)

    def _encode(self, value: UUID) -> str:
        return str(value)


class UrlType(ValueType[str]):
    wire_type = String

    def _decode(self, name: str, value: str) -> str:
        return parse_url(name, value)


class BinaryType(ValueType[bytes]):
    """
    Base64-encoded binary data. Both standard and URL-safe alphabets are accepted, with or
    without padding. Encoded with the standard alphabet and padding.
    """

    wire_type = String

    def _decode(self, name: str, value: str) -> bytes:
        padded = value + "=" * (-len(value) % 4)
        try:
            return base64.b64decode(padded.translate(str.maketrans("-_", "+/")), validate=True)
        except binascii.Error as e:
            logger.debug("attribute %r has bad base64 value: %s", name, e)
            raise ScimError.invalid_attribute(name, "expected base64 encoding") from e

    def _encode(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")


class CountryType(ValueType[str]):
    """
    Country, as ISO-3166 code or name. The original text is kept.
    """

    wire_type = String

    def _decode(self, name: str, value: str) -> str:
        if iso3166.countries.get(value, None) is None:
            logger.debug("attribute %r has unknown country %r", name, value)
            raise ScimError.invalid_attribute(name, "expected ISO-3166 country")
        return value


class ChoiceType(ValueType[TEnum]):
    """
    Closed set of textual values, represented by string enumeration. Values outside of
    the enumeration fail with the provided error.
    """

    wire_type = String

    def __init__(self, choices: type[TEnum], error: Callable[[str], ScimError]):
        self._choices = choices
        self._error = error

    def _decode(self, name: str, value: str) -> TEnum:
        try:
            return self._choices(value)
        except ValueError:
            logger.debug("attribute %r has unrecognized value %r", name, value)
            raise self._error(value) from None

    def _encode(self, value: TEnum) -> str:
        return self._choices(value).value


class Field(abc.ABC):
    """
    Base class for typed fields. A field knows its wire name, whether it is required, and
    which attribute variant it expects.

    Args:
        name: The wire name of the attribute.
        required: Whether the attribute absence fails the conversion.
    """

    def __init__(self, name: str, *, required: bool = False):
        self._name = name
        self._required = required

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._name!r}, required={self._required})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def required(self) -> bool:
        return self._required

    def empty(self) -> Any:
        """Value the field decodes to, when optional attribute is absent."""
        return None

    def pop(self, attrs: MutableMapping[str, Any]) -> Any:
        """
        Removes the field's attribute from `attrs` and decodes it.

        Raises:
            ScimError: `MissingRequiredAttribute` if the field is required and the attribute
                is absent, or any error raised by the decoding.
        """
        raw = attrs.pop(self._name, Missing)
        if raw is Missing:
            if self._required:
                logger.debug("required attribute %r is missing", self._name)
                raise ScimError.missing_required_attribute(self._name)
            return self.empty()
        return self.load(raw)

    def put(self, attrs: MutableMapping[str, Any], value: Any) -> None:
        """
        Encodes `value` and sets it in `attrs`. Absent values (`None` and empty lists) are
        omitted.
        """
        if value is None or (isinstance(value, list) and not value):
            return
        attrs[self._name] = self.dump(value)

    @abc.abstractmethod
    def load(self, raw: Any) -> Any:
        """Decodes the raw attribute or value."""

    @abc.abstractmethod
    def dump(self, value: Any) -> Any:
        """Encodes the Python value to raw attribute or value."""


class SubAttr(Field):
    """
    Scalar sub-attribute of a complex attribute.
    """

    def __init__(self, name: str, type_: ValueType, *, required: bool = False):
        super().__init__(name, required=required)
        self._type = type_

    @property
    def value_type(self) -> ValueType:
        return self._type

    def load(self, raw: AttrValue) -> Any:
        return self._type.decode(self._name, raw)

    def dump(self, value: Any) -> AttrValue:
        return self._type.encode(value)


class Simple(Field):
    """
    Single-valued, simple top-level attribute.
    """

    def __init__(self, name: str, type_: ValueType, *, required: bool = False):
        super().__init__(name, required=required)
        self._type = type_

    @property
    def value_type(self) -> ValueType:
        return self._type

    def load(self, raw: Any) -> Any:
        if not isinstance(raw, SingleSimple):
            logger.debug("attribute %r expects single simple value, got %r", self._name, raw)
            raise ScimError.invalid_attribute(self._name, "expected single simple value")
        return self._type.decode(self._name, raw.value)

    def dump(self, value: Any) -> SingleSimple:
        return SingleSimple(self._type.encode(value))


class Nested(Field):
    """
    Single-valued complex top-level attribute, decoded to the provided shape.
    """

    def __init__(self, name: str, shape: type["ComplexValue"], *, required: bool = False):
        super().__init__(name, required=required)
        self._shape = shape

    def load(self, raw: Any) -> "ComplexValue":
        if not isinstance(raw, SingleComplex):
            logger.debug("attribute %r expects single complex value, got %r", self._name, raw)
            raise ScimError.invalid_attribute(self._name, "expected single complex value")
        return self._shape.from_complex(raw.value)

    def dump(self, value: "ComplexValue") -> SingleComplex:
        return SingleComplex(value.to_complex())


class MultiNested(Field):
    """
    Multi-valued complex top-level attribute, each item decoded to the provided shape.
    Absent attribute decodes to empty list.
    """

    def __init__(self, name: str, shape: type["ComplexValue"]):
        super().__init__(name, required=False)
        self._shape = shape

    def empty(self) -> list:
        return []

    def load(self, raw: Any) -> list["ComplexValue"]:
        if not isinstance(raw, MultiComplex):
            logger.debug("attribute %r expects multi complex value, got %r", self._name, raw)
            raise ScimError.invalid_attribute(self._name, "expected multi complex value")
        return [self._shape.from_complex(item) for item in raw.values]

    def dump(self, value: list["ComplexValue"]) -> MultiComplex:
        return MultiComplex([item.to_complex() for item in value])


def scim_field(spec: Field) -> Any:
    """
    Declares dataclass field backed by the provided `spec`. Required fields have no default,
    so they must be declared before optional ones.

    Examples:
        >>> @dataclass(frozen=True)
        >>> class Name(ComplexValue):
        >>>     formatted: Optional[str] = scim_field(SubAttr("formatted", StringType()))
    """
    metadata = {SCIM_FIELD: spec}
    if isinstance(spec, MultiNested):
        return dataclasses.field(default_factory=list, metadata=metadata)
    if spec.required:
        return dataclasses.field(metadata=metadata)
    return dataclasses.field(default=None, metadata=metadata)


def get_scim_field(field: dataclasses.Field) -> Optional[Field]:
    return field.metadata.get(SCIM_FIELD)
