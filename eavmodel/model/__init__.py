"""Runtime model objects: attribute types, attributes and families."""

from .attribute_types import AttributeType, AttributeTypeCatalog, BUILTIN_TYPES
from .attribute import AttributeDefinition
from .family import FamilyDefinition, FamilyState

__all__ = [
    "AttributeType",
    "AttributeTypeCatalog",
    "BUILTIN_TYPES",
    "AttributeDefinition",
    "FamilyDefinition",
    "FamilyState",
]
