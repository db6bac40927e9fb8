"""Registries holding the global attribute pool and the family graph."""

from .attributes import AttributeRegistry, RESERVED_CODES
from .families import FamilyRegistry

__all__ = [
    "AttributeRegistry",
    "RESERVED_CODES",
    "FamilyRegistry",
]
