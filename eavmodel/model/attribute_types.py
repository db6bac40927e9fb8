"""Attribute type catalog.

An attribute type is the behavior behind a type tag: whether values are
multi-valued by default, whether they point to other data (relation) or
embed it, and whether a uniqueness constraint makes sense for them.
"""

import logging
from dataclasses import dataclass

from ..errors import DuplicateCodeError, MissingAttributeTypeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttributeType:
    """Type-level behavior shared by every attribute of that type."""

    code: str
    collection: bool = False  # default when the attribute doesn't say
    relation: bool = False
    embedded: bool = False
    supports_unique: bool = True


BUILTIN_TYPES = (
    AttributeType("string"),
    AttributeType("text", supports_unique=False),
    AttributeType("html", supports_unique=False),
    AttributeType("integer"),
    AttributeType("decimal"),
    AttributeType("boolean", supports_unique=False),
    AttributeType("date"),
    AttributeType("datetime"),
    AttributeType("choice"),
    AttributeType("email"),
    AttributeType("data", relation=True),
    AttributeType("embed", embedded=True, supports_unique=False),
    AttributeType("string_collection", collection=True, supports_unique=False),
)


class AttributeTypeCatalog:
    """Maps a type tag to its AttributeType."""

    def __init__(self, types: tuple[AttributeType, ...] | list[AttributeType] = BUILTIN_TYPES):
        self._types: dict[str, AttributeType] = {}
        for attribute_type in types:
            self.register(attribute_type)

    def register(self, attribute_type: AttributeType) -> None:
        if attribute_type.code in self._types:
            raise DuplicateCodeError("attribute type", attribute_type.code)
        self._types[attribute_type.code] = attribute_type
        logger.debug("Registered attribute type %s", attribute_type.code)

    def get_type(self, code: str) -> AttributeType:
        if code not in self._types:
            raise MissingAttributeTypeError(f"Unknown attribute type '{code}'")
        return self._types[code]

    def has_type(self, code: str) -> bool:
        return code in self._types

    def codes(self) -> list[str]:
        return list(self._types)
