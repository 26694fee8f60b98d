import re
from typing import Any, Optional, cast

_ATTR_NAME = re.compile(r"[a-zA-Z][a-zA-Z0-9_-]*")
_ATTR_PATH = re.compile(rf"({_ATTR_NAME.pattern})(?:\.({_ATTR_NAME.pattern}))?")
_URI_PREFIX = re.compile(r"(?:[\w.-]+:)*")


class AttrName(str):
    """
    Represents attribute name. The name must start with a letter, optionally followed
    by letters, digits, hyphens and underscores.

    Attribute names are case-insensitive.

    Raises:
        ValueError: If the provided value is not valid attribute name.
    """

    def __repr__(self):
        return f"AttrName({self})"

    def __new__(cls, value: str) -> "AttrName":
        if not isinstance(value, AttrName) and not _ATTR_NAME.fullmatch(value):
            raise ValueError(f"{value!r} is not valid attr name")
        return cast(AttrName, str.__new__(cls, value))

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, str):
            other = other.lower()
        return self.lower() == other

    def __hash__(self):
        return hash(self.lower())


class SchemaUri(str):
    """
    Represents schema URI.

    Schema URIs are case-insensitive.

    Raises:
        ValueError: If the provided value is not valid schema URI.
    """

    def __new__(cls, value: str) -> "SchemaUri":
        if not isinstance(value, SchemaUri) and not _URI_PREFIX.fullmatch(value + ":"):
            raise ValueError(f"{value!r} is not a valid schema URI")
        return cast(SchemaUri, str.__new__(cls, value))

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, str):
            other = other.lower()
        return self.lower() == other

    def __hash__(self):
        return hash(self.lower())


class AttrPath:
    """
    Location of an attribute or sub-attribute, used as filter operand.
    """

    def __init__(self, attr: str, sub_attr: Optional[str] = None):
        """
        Args:
            attr: The attribute name.
            sub_attr: The sub-attribute name.

        Raises:
            ValueError: If `attr` or `sub_attr` is not valid attribute name.
        """
        attr = AttrName(attr)
        str_: str = attr
        if sub_attr is not None:
            sub_attr = AttrName(sub_attr)
            str_ += "." + sub_attr

        self._attr = attr
        self._sub_attr = sub_attr
        self._str = str_

    def __str__(self) -> str:
        return self._str

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, AttrPath):
            return False
        return bool(self._attr == other._attr and self._sub_attr == other._sub_attr)

    def __hash__(self):
        return hash((self._attr, self._sub_attr))

    @property
    def attr(self) -> AttrName:
        """
        The attribute name.
        """
        return self._attr

    @property
    def sub_attr(self) -> Optional[AttrName]:
        """
        The sub-attribute name, `None` if the path points at top-level attribute.
        """
        return self._sub_attr

    @property
    def is_sub_attr(self) -> bool:
        return self._sub_attr is not None

    @classmethod
    def deserialize(cls, value: str) -> "AttrPath":
        """
        Deserializes textual attribute path, e.g. `name` or `name.givenName`.

        Raises:
            ValueError: If the provided `value` is not valid attribute path.

        Examples:
            >>> AttrPath.deserialize("name.formatted")
            AttrPath(name.formatted)
        """
        match = _ATTR_PATH.fullmatch(value)
        if match is None:
            raise ValueError(f"{value!r} is not valid attribute path")
        return cls(attr=match.group(1), sub_attr=match.group(2))
