from enum import Enum
from typing import Any, Optional, Union

from typing_extensions import NotRequired, TypedDict

ERROR_SCHEMA = "urn:ietf:params:scim:api:messages:2.0:Error"


class ScimErrorType(str, Enum):
    INVALID_FILTER = "invalidFilter"
    INVALID_SYNTAX = "invalidSyntax"
    INVALID_VALUE = "invalidValue"


INVALID_FILTER = {
    "status": "400",
    "scimType": ScimErrorType.INVALID_FILTER,
    "detail": (
        "The specified filter syntax is invalid, "
        "or the specified attribute and filter comparison combination is not supported."
    ),
}


INVALID_SYNTAX = {
    "status": "400",
    "scimType": ScimErrorType.INVALID_SYNTAX,
    "detail": (
        "The request body message structure was invalid or did not conform to the request schema."
    ),
}


INVALID_VALUE = {
    "status": "400",
    "scimType": ScimErrorType.INVALID_VALUE,
    "detail": (
        "A required value was missing, or the value specified was not compatible "
        "with the operation or attribute type, or resource schema."
    ),
}


_RESPONSE_BY_SCIM_ERROR = {
    ScimErrorType.INVALID_FILTER: INVALID_FILTER,
    ScimErrorType.INVALID_SYNTAX: INVALID_SYNTAX,
    ScimErrorType.INVALID_VALUE: INVALID_VALUE,
}


class ErrorKind(str, Enum):
    ENTRY_MISSING_SCHEMA = "EntryMissingSchema"
    INCONSISTENT_MULTI_VALUE = "InconsistentMultiValue"
    EMPTY_MULTI_VALUE = "EmptyMultiValue"
    NESTED_MULTI_VALUE = "NestedMultiValue"
    INVALID_SINGLE_VALUE = "InvalidSingleValue"
    MISSING_REQUIRED_ATTRIBUTE = "MissingRequiredAttribute"
    INVALID_ATTRIBUTE = "InvalidAttribute"
    UNKNOWN_LOCALE = "UnknownLocale"
    UNKNOWN_TIMEZONE = "UnknownTimezone"

    def __str__(self) -> str:
        return self.value


class ErrorResponseDict(TypedDict):
    schemas: list[str]
    status: str
    scimType: str
    detail: str
    kind: NotRequired[str]


class ScimError(Exception):
    """
    Conversion error. Uniquely identified by its kind, which is one of the closed set
    defined in `ErrorKind`.

    Pre-formatted messages stored in `message_by_kind` can be modified, as long as embedded
    string parameters stay the same.
    """

    message_by_kind = {
        ErrorKind.ENTRY_MISSING_SCHEMA: "entry does not declare schema {schema!r}",
        ErrorKind.INCONSISTENT_MULTI_VALUE: "expected complex value, got {got}",
        ErrorKind.EMPTY_MULTI_VALUE: "multi-valued attribute can not be empty",
        ErrorKind.NESTED_MULTI_VALUE: "multi-valued attribute can not contain arrays",
        ErrorKind.INVALID_SINGLE_VALUE: "expected string, boolean or number, got {got}",
        ErrorKind.MISSING_REQUIRED_ATTRIBUTE: "required attribute {attr!r} is missing",
        ErrorKind.INVALID_ATTRIBUTE: "attribute {attr!r} is invalid",
        ErrorKind.UNKNOWN_LOCALE: "unknown locale {value!r}",
        ErrorKind.UNKNOWN_TIMEZONE: "unknown timezone {value!r}",
    }

    scim_error_by_kind = {
        ErrorKind.ENTRY_MISSING_SCHEMA: ScimErrorType.INVALID_VALUE,
        ErrorKind.INCONSISTENT_MULTI_VALUE: ScimErrorType.INVALID_SYNTAX,
        ErrorKind.EMPTY_MULTI_VALUE: ScimErrorType.INVALID_SYNTAX,
        ErrorKind.NESTED_MULTI_VALUE: ScimErrorType.INVALID_SYNTAX,
        ErrorKind.INVALID_SINGLE_VALUE: ScimErrorType.INVALID_SYNTAX,
        ErrorKind.MISSING_REQUIRED_ATTRIBUTE: ScimErrorType.INVALID_VALUE,
        ErrorKind.INVALID_ATTRIBUTE: ScimErrorType.INVALID_VALUE,
        ErrorKind.UNKNOWN_LOCALE: ScimErrorType.INVALID_VALUE,
        ErrorKind.UNKNOWN_TIMEZONE: ScimErrorType.INVALID_VALUE,
    }

    def __init__(
        self,
        kind: Union[str, ErrorKind],
        message: Optional[str] = None,
        **context: Any,
    ):
        """
        Args:
            kind: The error kind.
            message: Error message. Replaces the built-in message if provided.
            **context: Parameters passed to pre-formatted messages.
        """
        self.kind = ErrorKind(kind)
        if message is None:
            message = self.message_by_kind[self.kind].format(**context)
        self.message = message
        self.context = context
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.kind.value}, {self.message!r})"

    def __eq__(self, other):
        if not isinstance(other, ScimError):
            return False
        return self.kind == other.kind

    def __hash__(self):
        return hash(self.kind)

    @property
    def scim_error(self) -> ScimErrorType:
        return self.scim_error_by_kind[self.kind]

    @classmethod
    def entry_missing_schema(cls, schema: str):
        return cls(ErrorKind.ENTRY_MISSING_SCHEMA, schema=schema)

    @classmethod
    def inconsistent_multi_value(cls, got: str = "non-object"):
        return cls(ErrorKind.INCONSISTENT_MULTI_VALUE, got=got)

    @classmethod
    def empty_multi_value(cls):
        return cls(ErrorKind.EMPTY_MULTI_VALUE)

    @classmethod
    def nested_multi_value(cls):
        return cls(ErrorKind.NESTED_MULTI_VALUE)

    @classmethod
    def invalid_single_value(cls, got: str = "null"):
        return cls(ErrorKind.INVALID_SINGLE_VALUE, got=got)

    @classmethod
    def missing_required_attribute(cls, attr: str):
        return cls(ErrorKind.MISSING_REQUIRED_ATTRIBUTE, attr=attr)

    @classmethod
    def invalid_attribute(cls, attr: str, reason: Optional[str] = None):
        message = None
        if reason is not None:
            message = f"attribute {attr!r} is invalid, {reason}"
        return cls(ErrorKind.INVALID_ATTRIBUTE, message=message, attr=attr)

    @classmethod
    def unknown_locale(cls, value: str):
        return cls(ErrorKind.UNKNOWN_LOCALE, value=value)

    @classmethod
    def unknown_timezone(cls, value: str):
        return cls(ErrorKind.UNKNOWN_TIMEZONE, value=value)

    def to_dict(self) -> ErrorResponseDict:
        """
        Converts the error to SCIM error response body, as specified in RFC-7644.
        The error kind is included, so the caller can tell the cause apart.
        """
        return {
            "schemas": [ERROR_SCHEMA],
            "status": _RESPONSE_BY_SCIM_ERROR[self.scim_error]["status"],
            "scimType": self.scim_error.value,
            "detail": self.message,
            "kind": self.kind.value,
        }


class FilterSyntaxError(ValueError):
    """
    Raised when a filter expression does not conform to the filter grammar.
    """

    def __init__(self, expression: str, position: int, message: str):
        """
        Args:
            expression: The whole filter expression.
            position: Offset in `expression` where parsing failed.
            message: Description of what was expected.
        """
        self.expression = expression
        self.position = position
        self.message = message
        super().__init__(f"{message} at position {position} in {expression!r}")

    def __eq__(self, other):
        if not isinstance(other, FilterSyntaxError):
            return False
        return (self.expression, self.position) == (other.expression, other.position)

    def __hash__(self):
        return hash((self.expression, self.position))

    def to_dict(self) -> ErrorResponseDict:
        return {
            "schemas": [ERROR_SCHEMA],
            "status": _RESPONSE_BY_SCIM_ERROR[ScimErrorType.INVALID_FILTER]["status"],
            "scimType": ScimErrorType.INVALID_FILTER.value,
            "detail": str(self),
        }
