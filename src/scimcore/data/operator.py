import abc
from typing import Any, Union

from typing_extensions import TypeAlias

from scimcore.data.identifiers import AttrPath

OperandValue: TypeAlias = Union[str, bool, int, float, None]


class Operator(abc.ABC):
    """
    Base class for filter operators. Operators are compared structurally.
    """

    op: str


class AttributeOperator(Operator, abc.ABC):
    """
    Base class for all operators that involve attributes directly.
    Every subclass which is not an abstract must specify `op` class attribute.
    """

    def __init__(self, attr_path: AttrPath):
        """
        Args:
            attr_path: The path of an attribute the operator applies to.
        """
        self._attr_path = attr_path

    @property
    def attr_path(self) -> AttrPath:
        """
        The path of an attribute the operator applies to.
        """
        return self._attr_path


class UnaryAttributeOperator(AttributeOperator, abc.ABC):
    """
    Base class for all unary operators, which take no operand besides the attribute.
    """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._attr_path!r})"

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return False
        return self._attr_path == other._attr_path

    def __hash__(self):
        return hash((self.op, self._attr_path))


class BinaryAttributeOperator(AttributeOperator, abc.ABC):
    """
    Base class for all binary operators. Every subclass which is not an abstract must specify
    `op` and `supported_types` class attributes.
    """

    supported_types: set[type]

    def __init__(self, attr_path: AttrPath, value: OperandValue):
        """
        Args:
            attr_path: The path of an attribute which value should be compared with
                the operator's value.
            value: The operator's value (right operand), compared to the attribute's value
                (left operand).

        Raises:
            TypeError: If the type of `value` is not supported by the operator.
        """
        super().__init__(attr_path=attr_path)
        if type(value) not in self.supported_types:
            raise TypeError(
                f"value type {type(value).__name__!r} is not supported by {self.op!r} operator"
            )
        self._value = value

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._attr_path!r}, {self._value!r})"

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return False
        return (
            self._attr_path == other._attr_path
            and type(self._value) is type(other._value)
            and self._value == other._value
        )

    def __hash__(self):
        return hash((self.op, self._attr_path, type(self._value), self._value))

    @property
    def value(self) -> OperandValue:
        """
        The operator's value (right operand), compared to the attribute's value (left operand).
        """
        return self._value


class Present(UnaryAttributeOperator):
    """
    Represents `pr` operator.
    """

    op = "pr"


class Equal(BinaryAttributeOperator):
    """
    Represents `eq` operator.
    """

    op = "eq"
    supported_types = {str, bool, int, float, type(None)}
