"""Attribute definitions.

An AttributeDefinition is one field of a family: its type, flags, context
mask and free-form options. The global registry owns the canonical
definitions; every family works on its own clones, so configuring an
attribute for one family never leaks into the registry or another family.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from ..core.models import AttributeConfig
from ..errors import ConfigurationError, MissingAttributeTypeError
from ..translation import Translator, humanize, try_translate
from .attribute_types import AttributeType, AttributeTypeCatalog

if TYPE_CHECKING:
    from .family import FamilyDefinition

logger = logging.getLogger(__name__)

_MERGED_DICTS = ("options", "form_options", "view_options")

# Codes colliding with built-in entity fields
RESERVED_CODES = frozenset(
    {
        "id",
        "identifier",
        "values",
        "value",
        "valueData",
        "valuesData",
        "refererValues",
        "createdAt",
        "updatedAt",
        "family",
        "familyCode",
        "currentContext",
        "empty",
    }
)


def coerce_attribute_config(
    code: str, config: AttributeConfig | Mapping[str, Any] | None
) -> AttributeConfig:
    """Validate raw attribute configuration into an AttributeConfig."""
    if isinstance(config, AttributeConfig):
        return config
    try:
        return AttributeConfig.model_validate(dict(config or {}))
    except ValidationError as exc:
        raise ConfigurationError(
            f"Bad configuration for attribute '{code}': {exc}"
        ) from exc


class AttributeDefinition:
    """Full configuration of one attribute.

    The code is fixed at creation. Everything else stays mutable until the
    owning family is published, through merge_configuration() or direct
    assignment.
    """

    def __init__(
        self,
        code: str,
        type_catalog: AttributeTypeCatalog,
        config: AttributeConfig | Mapping[str, Any] | None = None,
        global_context_mask: list[str] | None = None,
        translator: Translator | None = None,
    ):
        self._code = code
        self._type_catalog = type_catalog
        self.translator = translator
        self.family: FamilyDefinition | None = None

        config = coerce_attribute_config(code, config)

        self.type: AttributeType = self._resolve_type(config.type)
        self.label: str | None = None
        self.group: str | None = None
        self.required = False
        self.unique = False
        self.default: Any = None
        self.options: dict[str, Any] = {}
        self.form_options: dict[str, Any] = {}
        self.view_options: dict[str, Any] = {}
        self._explicit_collection: bool | None = None
        self.context_mask: list[str] = list(global_context_mask or [])

        self._apply(config, set(AttributeConfig.model_fields))

    @property
    def code(self) -> str:
        return self._code

    @property
    def collection(self) -> bool:
        if self._explicit_collection is not None:
            return self._explicit_collection
        return self.type.collection

    @collection.setter
    def collection(self, value: bool | None) -> None:
        self._explicit_collection = value

    def is_contextual(self) -> bool:
        return bool(self.context_mask)

    def get_option(self, code: str, fallback: Any = None) -> Any:
        return self.options.get(code, fallback)

    # ── Clone / merge ──

    def clone(self) -> "AttributeDefinition":
        """Copy of this attribute sharing no mutable state with it.

        The clone is detached from any family; collaborators (type catalog,
        translator) are shared.
        """
        clone = copy.copy(self)
        clone.family = None
        clone.context_mask = list(self.context_mask)
        clone.default = copy.deepcopy(self.default)
        for name in _MERGED_DICTS:
            setattr(clone, name, copy.deepcopy(getattr(self, name)))
        return clone

    def merge_configuration(
        self, config: AttributeConfig | Mapping[str, Any] | None
    ) -> None:
        """Merge a configuration on top of this attribute.

        Only keys the configuration actually sets are applied. Option
        mappings are merged key by key with the new values winning; every
        other setting is replaced.
        """
        if config is None:
            return
        config = coerce_attribute_config(self.code, config)
        self._apply(config, set(config.model_fields_set))

    def _apply(self, config: AttributeConfig, fields: set[str]) -> None:
        if "type" in fields:
            self.type = self._resolve_type(config.type)
        for name in ("label", "group", "required", "unique"):
            if name in fields:
                setattr(self, name, getattr(config, name))
        if "default" in fields:
            self.default = copy.deepcopy(config.default)
        if "collection" in fields:
            self._explicit_collection = config.collection
        if "context_mask" in fields and config.context_mask is not None:
            self.context_mask = list(config.context_mask)
        for name in _MERGED_DICTS:
            if name in fields:
                merged = {**getattr(self, name), **copy.deepcopy(getattr(config, name))}
                setattr(self, name, merged)

        if self.unique and not self.type.supports_unique:
            raise ConfigurationError(
                f"Attribute '{self.code}' of type '{self.type.code}' can't be unique"
            )

    def _resolve_type(self, type_code: str) -> AttributeType:
        try:
            return self._type_catalog.get_type(type_code)
        except MissingAttributeTypeError as exc:
            raise ConfigurationError(
                f"Bad configuration for attribute '{self.code}': {exc}"
            ) from exc

    # ── Presentation ──

    def get_label(self) -> str:
        """Explicit label, else a translation, else the humanized code.

        Never raises.
        """
        if self.label:
            return self.label
        keys = [f"eav.attribute.{self.code}.label"]
        if self.family is not None:
            keys.insert(0, f"eav.family.{self.family.code}.attribute.{self.code}.label")
        try:
            return try_translate(self.translator, keys, fallback=self.code)
        except Exception:  # labels are presentation-only
            logger.debug("Label lookup failed for attribute %s", self.code, exc_info=True)
            return humanize(self.code)

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view of the attribute, for display."""
        return {
            "code": self.code,
            "type": self.type.code,
            "label": self.get_label(),
            "group": self.group,
            "required": self.required,
            "unique": self.unique,
            "collection": self.collection,
            "context_mask": list(self.context_mask),
            "options": copy.deepcopy(self.options),
        }

    def __str__(self) -> str:
        return self.get_label()

    def __repr__(self) -> str:
        family = self.family.code if self.family is not None else None
        return (
            f"AttributeDefinition(code={self.code!r}, type={self.type.code!r}, "
            f"family={family!r}, context_mask={self.context_mask!r})"
        )
