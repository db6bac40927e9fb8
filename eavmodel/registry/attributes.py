"""Container for all global attributes.

Families don't share these definitions: they clone the ones they use and
merge their local configuration onto the clone. Look attributes up through
the families at runtime, not here.
"""

import logging
from collections.abc import Mapping
from typing import Any

from ..core.models import AttributeConfig
from ..errors import DuplicateCodeError, MissingAttributeError, ReservedCodeError
from ..model.attribute import RESERVED_CODES, AttributeDefinition
from ..model.attribute_types import AttributeTypeCatalog
from ..translation import Translator

logger = logging.getLogger(__name__)


class AttributeRegistry:
    """Global attribute pool and attribute factory."""

    def __init__(
        self,
        type_catalog: AttributeTypeCatalog | None = None,
        global_context_mask: list[str] | None = None,
        translator: Translator | None = None,
        attribute_class: type[AttributeDefinition] = AttributeDefinition,
    ):
        self.type_catalog = type_catalog or AttributeTypeCatalog()
        self.global_context_mask = list(global_context_mask or [])
        self.translator = translator
        self.attribute_class = attribute_class
        self._attributes: dict[str, AttributeDefinition] = {}

    def parse_global_config(
        self, global_config: Mapping[str, AttributeConfig | Mapping[str, Any] | None]
    ) -> None:
        """Create and register an attribute for every entry.

        Either every attribute is registered or, on error, none of them.
        """
        added: list[str] = []
        try:
            for code, configuration in global_config.items():
                self.add_attribute(self.create_attribute(code, configuration))
                added.append(code)
        except Exception:
            for code in added:
                del self._attributes[code]
            raise

    def create_attribute(
        self, code: str, configuration: AttributeConfig | Mapping[str, Any] | None = None
    ) -> AttributeDefinition:
        """Build a new attribute without registering it.

        The global context mask applies unless the configuration sets one.

        Raises:
            ReservedCodeError: If the code is reserved
            ConfigurationError: If the configuration is invalid
        """
        if code in RESERVED_CODES:
            raise ReservedCodeError(code)
        return self.attribute_class(
            code,
            self.type_catalog,
            configuration,
            self.global_context_mask,
            self.translator,
        )

    def add_attribute(self, attribute: AttributeDefinition) -> None:
        if attribute.code in RESERVED_CODES:
            raise ReservedCodeError(attribute.code)
        if attribute.code in self._attributes:
            raise DuplicateCodeError("attribute", attribute.code)
        self._attributes[attribute.code] = attribute
        logger.debug("Registered global attribute %s", attribute.code)

    def get_attribute(self, code: str) -> AttributeDefinition:
        if code not in self._attributes:
            raise MissingAttributeError(f"No attribute with code : {code}")
        return self._attributes[code]

    def has_attribute(self, code: str) -> bool:
        return code in self._attributes

    def get_attributes(self) -> dict[str, AttributeDefinition]:
        return dict(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __repr__(self) -> str:
        return f"AttributeRegistry(attributes={list(self._attributes)!r})"
