from scimcore.data.attrs import (
    Attribute,
    AttrValue,
    Boolean,
    ComplexAttribute,
    MultiComplex,
    MultiSimple,
    Number,
    SingleComplex,
    SingleSimple,
    String,
)
from scimcore.data.entry import Entry, Meta
from scimcore.data.fields import Missing, scim_field
from scimcore.data.filter import Filter
from scimcore.data.identifiers import AttrName, AttrPath, SchemaUri
from scimcore.data.schemas import ComplexValue, Resource, decode_resource, resource_for

__all__ = [
    "AttrName",
    "SchemaUri",
    "AttrPath",
    "AttrValue",
    "String",
    "Boolean",
    "Number",
    "ComplexAttribute",
    "Attribute",
    "SingleSimple",
    "SingleComplex",
    "MultiSimple",
    "MultiComplex",
    "Entry",
    "Meta",
    "ComplexValue",
    "Resource",
    "resource_for",
    "decode_resource",
    "scim_field",
    "Filter",
    "Missing",
]
