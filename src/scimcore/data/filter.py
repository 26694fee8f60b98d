import json
import logging
import math
import re
from typing import Any, Generic, Optional, TypeVar

from scimcore._registry import (
    binary_operators,
    register_binary_operator,
    register_unary_operator,
    unary_operators,
)
from scimcore.data import operator as op
from scimcore.data.identifiers import AttrPath
from scimcore.error import FilterSyntaxError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_TOKEN = re.compile(r"\S+")
_KEYWORD = re.compile(r"[a-zA-Z]+")
_QUOTED_STRING = re.compile(r'"(?:[^"\\]|\\.)*"')

TOperator = TypeVar("TOperator", bound=op.Operator)


def _reject_constant(value: str) -> Any:
    raise ValueError(f"{value!r} is not a valid comparison value")


def deserialize_comparison_value(value: str) -> op.OperandValue:
    """
    Deserializes bare comparison value as JSON literal (`true`, `false`, `null`, or number).
    Anything else is taken as it is, as a string.

    Raises:
        ValueError: If the value is JSON array or object, or number out of float range.
    """
    try:
        deserialized = json.loads(value, parse_constant=_reject_constant)
    except ValueError:
        return value
    if isinstance(deserialized, (list, dict)):
        raise ValueError(f"{value!r} is not a scalar value")
    if isinstance(deserialized, float) and not math.isfinite(deserialized):
        raise ValueError(f"{value!r} is out of range")
    return deserialized


class _Parser:
    def __init__(self, exp: str):
        self._exp = exp
        self._pos = 0

    def error(self, message: str, position: Optional[int] = None) -> FilterSyntaxError:
        position = self._pos if position is None else position
        logger.debug("filter %r rejected at %d: %s", self._exp, position, message)
        return FilterSyntaxError(expression=self._exp, position=position, message=message)

    def skip_whitespace(self, required: bool = False, expected: str = "") -> None:
        match = _WHITESPACE.match(self._exp, self._pos)
        if match is None:
            if required:
                raise self.error(f"expected whitespace before {expected}")
            return
        self._pos = match.end()

    def at_end(self) -> bool:
        return self._pos == len(self._exp)

    def parse(self) -> op.Operator:
        self.skip_whitespace()
        attr_path = self.parse_attr_path()
        self.skip_whitespace(required=True, expected="operator")
        keyword_start = self._pos
        keyword = self.parse_keyword()
        if keyword in unary_operators:
            operator: op.Operator = unary_operators[keyword](attr_path)
        elif keyword in binary_operators:
            self.skip_whitespace(required=True, expected="comparison value")
            value_start = self._pos
            value = self.parse_value()
            try:
                operator = binary_operators[keyword](attr_path, value)
            except TypeError as e:
                raise self.error(str(e), value_start) from e
        else:
            raise self.error(f"unknown operator {keyword!r}", keyword_start)
        self.skip_whitespace()
        if not self.at_end():
            raise self.error("expected end of expression")
        return operator

    def parse_attr_path(self) -> AttrPath:
        match = _TOKEN.match(self._exp, self._pos)
        if match is None:
            raise self.error("expected attribute path")
        try:
            attr_path = AttrPath.deserialize(match.group(0))
        except ValueError as e:
            raise self.error(f"bad attribute path {match.group(0)!r}") from e
        self._pos = match.end()
        return attr_path

    def parse_keyword(self) -> str:
        match = _KEYWORD.match(self._exp, self._pos)
        if match is None:
            raise self.error("expected operator")
        end = match.end()
        if end < len(self._exp) and not self._exp[end].isspace():
            raise self.error("expected operator")
        self._pos = end
        return match.group(0).lower()

    def parse_value(self) -> op.OperandValue:
        if self._exp.startswith('"', self._pos):
            match = _QUOTED_STRING.match(self._exp, self._pos)
            if match is None:
                raise self.error("unterminated string")
            try:
                value = json.loads(match.group(0))
            except ValueError as e:
                raise self.error("bad string escape") from e
            self._pos = match.end()
            return value
        match = _TOKEN.match(self._exp, self._pos)
        if match is None:
            raise self.error("expected comparison value")
        try:
            value = deserialize_comparison_value(match.group(0))
        except ValueError as e:
            raise self.error(str(e)) from e
        self._pos = match.end()
        return value


class Filter(Generic[TOperator]):
    """
    Parsed filter expression. Supports presence (`pr`) and equality (`eq`) operators, and
    any other operator registered with `register_unary_operator` or
    `register_binary_operator`. Operator keywords are case-insensitive.

    Args:
        operator: Underlying filter operator.

    Examples:
        >>> Filter.deserialize("userName eq \"bjensen\"")
        Filter(Equal(AttrPath(userName), 'bjensen'))
        >>> Filter.deserialize("title pr").attr_paths
        [AttrPath(title)]
    """

    def __init__(self, operator: TOperator):
        self._operator = operator

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._operator!r})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Filter):
            return False
        return self._operator == other._operator

    def __hash__(self):
        return hash(self._operator)

    @property
    def operator(self) -> TOperator:
        """
        Underlying filter operator.
        """
        return self._operator

    @property
    def attr_paths(self) -> list[AttrPath]:
        """
        Attribute paths included in the filter.
        """
        if isinstance(self._operator, op.AttributeOperator):
            return [self._operator.attr_path]
        return []

    @classmethod
    def validate(cls, filter_exp: str) -> Optional[FilterSyntaxError]:
        """
        Validates the filter expression syntax.

        Args:
            filter_exp: Filter expression to validate.

        Returns:
            The syntax error, or `None` if the expression is valid.
        """
        try:
            cls.deserialize(filter_exp)
        except FilterSyntaxError as e:
            return e
        return None

    @classmethod
    def deserialize(cls, filter_exp: str) -> "Filter":
        """
        Deserializes the filter expression. No partial filter is ever returned.

        Args:
            filter_exp: Filter expression to be deserialized.

        Raises:
            FilterSyntaxError: If provided filter expression is invalid.

        Returns:
            Deserialized filter.
        """
        return cls(_Parser(filter_exp).parse())

    def serialize(self) -> str:
        """
        Serializes the filter back to the expression. String values are always quoted.
        """
        return self._serialize(self._operator)

    @staticmethod
    def _serialize(operator: op.Operator) -> str:
        if isinstance(operator, op.AttributeOperator):
            output = f"{operator.attr_path} {operator.op}"
            if isinstance(operator, op.BinaryAttributeOperator):
                output += f" {json.dumps(operator.value)}"
            return output
        raise TypeError(f"unsupported filter type {type(operator).__name__!r}")

    def to_dict(self) -> dict[str, Any]:
        """
        Converts the filter to a dictionary.
        """
        operator = self._operator
        if isinstance(operator, op.AttributeOperator):
            filter_dict: dict[str, Any] = {
                "op": operator.op,
                "attr": str(operator.attr_path),
            }
            if isinstance(operator, op.BinaryAttributeOperator):
                filter_dict["value"] = operator.value
            return filter_dict
        raise TypeError(f"unsupported filter type {type(operator).__name__!r}")


register_unary_operator(op.Present)
register_binary_operator(op.Equal)
