import abc
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, ClassVar, Iterable, Iterator, Union

from typing_extensions import TypeAlias

from scimcore.error import ScimError

logger = logging.getLogger(__name__)

Scalar: TypeAlias = Union[str, bool, int, float, Decimal]


def _wire_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


class AttrValue(abc.ABC):
    """
    Base class for scalar attribute values: `String`, `Boolean`, and `Number`.
    """

    value: Any

    @classmethod
    @abc.abstractmethod
    def base_types(cls) -> tuple[type, ...]:
        """Python types the value can be represented with."""

    def __post_init__(self):
        # bool is a subclass of int, so it must be excluded from numbers explicitly
        if isinstance(self.value, bool) and bool not in self.base_types():
            raise TypeError(f"{self.__class__.__name__} can not hold {self.value!r}")
        if not isinstance(self.value, self.base_types()):
            raise TypeError(f"{self.__class__.__name__} can not hold {self.value!r}")

    @staticmethod
    def deserialize(value: Any) -> "AttrValue":
        """
        Converts wire scalar to the corresponding value variant.

        Raises:
            ScimError: `InvalidSingleValue` if `value` is null, object or array.
        """
        if isinstance(value, bool):
            return Boolean(value)
        if isinstance(value, str):
            return String(value)
        if isinstance(value, (int, float, Decimal)):
            return Number(value)
        logger.debug("value %r can not be used as single value", value)
        raise ScimError.invalid_single_value(got=_wire_type_name(value))

    def serialize(self) -> Scalar:
        return self.value


@dataclass(frozen=True)
class String(AttrValue):
    value: str

    @classmethod
    def base_types(cls) -> tuple[type, ...]:
        return (str,)


@dataclass(frozen=True)
class Boolean(AttrValue):
    value: bool

    @classmethod
    def base_types(cls) -> tuple[type, ...]:
        return (bool,)


@dataclass(frozen=True)
class Number(AttrValue):
    value: Union[int, float, Decimal]

    @classmethod
    def base_types(cls) -> tuple[type, ...]:
        return int, float, Decimal


class ComplexAttribute(Mapping):
    """
    Single level of named scalar values. Sub-attributes are kept sorted by name, and can not
    be complex themselves.
    """

    def __init__(self, attrs: Union[Mapping[str, AttrValue], Iterable[tuple[str, AttrValue]]] = ()):
        items = dict(attrs)
        for name, value in items.items():
            if not isinstance(value, AttrValue):
                raise TypeError(f"sub-attribute {name!r} must be AttrValue, got {value!r}")
        self._attrs: dict[str, AttrValue] = dict(sorted(items.items()))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._attrs!r})"

    def __getitem__(self, key: str) -> AttrValue:
        return self._attrs[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._attrs)

    def __len__(self) -> int:
        return len(self._attrs)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ComplexAttribute):
            return False
        return self._attrs == other._attrs

    def __hash__(self):
        return hash(tuple(self._attrs.items()))

    @classmethod
    def deserialize(cls, value: Any) -> "ComplexAttribute":
        """
        Converts wire object to complex attribute. Every member must be a scalar, and the
        first member that is not fails the whole conversion.

        Raises:
            ScimError: `InconsistentMultiValue` if `value` is not an object, or
                `InvalidSingleValue` if any of its members is not a scalar.
        """
        if not isinstance(value, Mapping):
            logger.debug("value %r can not be used as complex value", value)
            raise ScimError.inconsistent_multi_value(got=_wire_type_name(value))
        return cls((name, AttrValue.deserialize(item)) for name, item in value.items())

    def serialize(self) -> dict[str, Scalar]:
        return {name: value.serialize() for name, value in self._attrs.items()}


class Attribute(abc.ABC):
    """
    Base class for the full shape of a single wire attribute. There are exactly four variants:
    `SingleSimple`, `SingleComplex`, `MultiSimple`, and `MultiComplex`.
    """

    multi_valued: ClassVar[bool]
    complex: ClassVar[bool]

    @abc.abstractmethod
    def __len__(self) -> int:
        """Number of values; always 1 for single-valued attributes."""

    @abc.abstractmethod
    def serialize(self) -> Any:
        """Converts the attribute back to the wire shape it was classified from."""

    @staticmethod
    def deserialize(value: Any) -> "Attribute":
        """
        Classifies the wire value and converts it to the matching variant.

        Arrays are classified by the first item: objects make the attribute `MultiComplex`,
        scalars make it `MultiSimple`. All the remaining items must be of the same kind,
        otherwise the conversion fails on the first item that is not.

        Raises:
            ScimError: `EmptyMultiValue` for empty arrays, `NestedMultiValue` for arrays of
                arrays, `InconsistentMultiValue` or `InvalidSingleValue` for heterogeneous
                arrays, and `InvalidSingleValue` for nulls.

        Examples:
            >>> Attribute.deserialize([{"value": "a"}])
            MultiComplex(values=(ComplexAttribute({'value': String(value='a')}),))
            >>> Attribute.deserialize("a")
            SingleSimple(value=String(value='a'))
        """
        if isinstance(value, (list, tuple)):
            if len(value) == 0:
                raise ScimError.empty_multi_value()
            first = value[0]
            if isinstance(first, (list, tuple)):
                raise ScimError.nested_multi_value()
            if isinstance(first, Mapping):
                return MultiComplex([ComplexAttribute.deserialize(item) for item in value])
            return MultiSimple([AttrValue.deserialize(item) for item in value])
        if isinstance(value, Mapping):
            return SingleComplex(ComplexAttribute.deserialize(value))
        return SingleSimple(AttrValue.deserialize(value))


@dataclass(frozen=True)
class SingleSimple(Attribute):
    value: AttrValue

    multi_valued: ClassVar[bool] = False
    complex: ClassVar[bool] = False

    def __len__(self) -> int:
        return 1

    def serialize(self) -> Scalar:
        return self.value.serialize()


@dataclass(frozen=True)
class SingleComplex(Attribute):
    value: ComplexAttribute

    multi_valued: ClassVar[bool] = False
    complex: ClassVar[bool] = True

    def __len__(self) -> int:
        return 1

    def serialize(self) -> dict[str, Scalar]:
        return self.value.serialize()


class _MultiValued(Attribute, abc.ABC):
    values: tuple

    multi_valued: ClassVar[bool] = True

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))
        if not self.values:
            raise ScimError.empty_multi_value()

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def serialize(self) -> list:
        return [item.serialize() for item in self.values]


@dataclass(frozen=True)
class MultiSimple(_MultiValued):
    values: tuple[AttrValue, ...]

    complex: ClassVar[bool] = False


@dataclass(frozen=True)
class MultiComplex(_MultiValued):
    values: tuple[ComplexAttribute, ...]

    complex: ClassVar[bool] = True
