"""Container for all families.

Families are built parents first, so every child can clone an already
finalized parent. A family is published (frozen) as soon as it is added.
"""

import logging
from collections.abc import Mapping
from typing import Any

from ..context import ContextManager
from ..core.models import FamilyConfig
from ..entities import ContextualData, ContextualValue
from ..errors import ConfigurationError, DuplicateCodeError, MissingFamilyError
from ..model.family import FamilyDefinition, coerce_family_config
from ..translation import Translator
from ..utils import CircularDependencyError, topological_sort
from .attributes import AttributeRegistry

logger = logging.getLogger(__name__)


class FamilyRegistry:
    """Owns the family graph: lookup by code and by parent."""

    def __init__(
        self,
        attribute_registry: AttributeRegistry,
        context_manager: ContextManager | None = None,
        translator: Translator | None = None,
        family_class: type[FamilyDefinition] = FamilyDefinition,
        default_data_class: Any = ContextualData,
        default_value_class: Any = ContextualValue,
    ):
        self.attribute_registry = attribute_registry
        self.context_manager = context_manager or ContextManager()
        self.translator = translator
        self.family_class = family_class
        self.default_data_class = default_data_class
        self.default_value_class = default_value_class
        self._families: dict[str, FamilyDefinition] = {}

    def parse_global_config(
        self, global_config: Mapping[str, FamilyConfig | Mapping[str, Any]]
    ) -> None:
        """Build and register every configured family, parents first.

        Either every family is registered or, on error, none of them.

        Raises:
            ConfigurationError: On unknown parents, inheritance cycles or any
                invalid family
        """
        configs = {
            code: coerce_family_config(code, config) for code, config in global_config.items()
        }

        dependencies: dict[str, list[str]] = {}
        for code, config in configs.items():
            if code in self._families:
                raise DuplicateCodeError("family", code)
            if config.parent and config.parent not in configs and not self.has_family(config.parent):
                raise ConfigurationError(
                    f"Bad configuration for family {code}: unknown parent '{config.parent}'"
                )
            dependencies[code] = [config.parent] if config.parent else []

        try:
            order = topological_sort(dependencies)
        except CircularDependencyError as exc:
            raise ConfigurationError(f"Family inheritance cycle: {exc}") from exc

        added: list[str] = []
        try:
            for code in order:
                self.add_family(self.build_family(code, configs[code]))
                added.append(code)
        except Exception:
            for code in added:
                del self._families[code]
            raise

    def build_family(
        self, code: str, config: FamilyConfig | Mapping[str, Any] | None = None
    ) -> FamilyDefinition:
        """Build a family against this registry without registering it."""
        return self.family_class(
            code,
            self.attribute_registry,
            self,
            self.context_manager,
            config,
            translator=self.translator,
            default_data_class=self.default_data_class,
            default_value_class=self.default_value_class,
        )

    def add_family(self, family: FamilyDefinition) -> None:
        if family.code in self._families:
            raise DuplicateCodeError("family", family.code)
        family.publish()
        self._families[family.code] = family
        logger.debug("Registered family %s", family.code)

    def get_family(self, code: str) -> FamilyDefinition:
        if code not in self._families:
            raise MissingFamilyError(f"Unknown family {code}")
        return self._families[code]

    def has_family(self, code: str) -> bool:
        return code in self._families

    def get_families(self) -> dict[str, FamilyDefinition]:
        return dict(self._families)

    def get_family_codes(self) -> list[str]:
        return list(self._families)

    def get_by_parent(self, parent: FamilyDefinition) -> list[FamilyDefinition]:
        """Direct children of a family, in registration order."""
        return [
            family
            for family in self._families.values()
            if family.parent is not None and family.parent.code == parent.code
        ]

    def __len__(self) -> int:
        return len(self._families)

    def __repr__(self) -> str:
        return f"FamilyRegistry(families={list(self._families)!r})"
