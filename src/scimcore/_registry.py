from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scimcore.data.identifiers import SchemaUri
    from scimcore.data.operator import BinaryAttributeOperator, UnaryAttributeOperator
    from scimcore.data.schemas import Resource


resources: dict["SchemaUri", type["Resource"]] = {}


def register_resource(schema: "SchemaUri", resource: type["Resource"]):
    existing = resources.get(schema)
    if existing is not None and existing is not resource:
        raise RuntimeError(f"resource for schema {schema!r} already registered")
    resources[schema] = resource


unary_operators: dict[str, type["UnaryAttributeOperator"]] = {}
binary_operators: dict[str, type["BinaryAttributeOperator"]] = {}


def register_unary_operator(operator: type["UnaryAttributeOperator"]):
    op = operator.op.lower()
    existing_operator = unary_operators.get(op)
    if existing_operator is not None and existing_operator != operator:
        raise RuntimeError(f"different implementation for unary operator {op!r} already provided")
    if op in binary_operators:
        raise RuntimeError(f"operator {op!r} already registered as binary operator")
    unary_operators[op] = operator


def register_binary_operator(operator: type["BinaryAttributeOperator"]):
    op = operator.op.lower()
    existing_operator = binary_operators.get(op)
    if existing_operator is not None and existing_operator != operator:
        raise RuntimeError(f"different implementation for binary operator {op!r} already provided")
    if op in unary_operators:
        raise RuntimeError(f"operator {op!r} already registered as unary operator")
    binary_operators[op] = operator
