"""Family definitions: the runtime entity types of the model.

A family is built in a single pass from its configuration:

1. Parent resolution: the parent (already built) is looked up in the family
   registry and every one of its attributes is cloned into the child, along
   with its label/identifier attributes and class bindings.
2. Attribute assembly: each locally declared attribute is merged onto the
   inherited clone, or onto a clone of the global definition, or created
   from scratch as a family-local attribute.
3. Label/identifier resolution against the final attribute set. The
   identifier must be unique, required, single-valued and context free.
4. Scalar settings (label, flags, options, class bindings).
5. Context check: a contextual value class must accept the default context.

Once built, a family is FINALIZED. Its setters stay usable for late binding
until the family is published to a FamilyRegistry.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from ..context import ContextManager
from ..core.models import AttributeConfig, FamilyConfig
from ..entities import ContextualData, ContextualValue, Data, Value, resolve_class
from ..errors import (
    ConfigurationError,
    FamilyStateError,
    IdentifierAttributeError,
    MissingAttributeError,
    MissingContextError,
    MissingFamilyError,
    ReservedCodeError,
)
from ..translation import Translator, humanize, try_translate
from .attribute import RESERVED_CODES, AttributeDefinition

if TYPE_CHECKING:
    from ..registry.attributes import AttributeRegistry
    from ..registry.families import FamilyRegistry

logger = logging.getLogger(__name__)


class FamilyState(str, Enum):
    UNBUILT = "unbuilt"
    BUILDING = "building"
    FINALIZED = "finalized"


def coerce_family_config(
    code: str, config: FamilyConfig | Mapping[str, Any] | None
) -> FamilyConfig:
    """Validate raw family configuration into a FamilyConfig."""
    if isinstance(config, FamilyConfig):
        return config
    try:
        return FamilyConfig.model_validate(dict(config or {}))
    except ValidationError as exc:
        raise ConfigurationError(f"Bad configuration for family {code}: {exc}") from exc


class FamilyDefinition:
    """Defines the model of a data, think of it as the data type."""

    def __init__(
        self,
        code: str,
        attribute_registry: AttributeRegistry,
        family_registry: FamilyRegistry | None,
        context_manager: ContextManager | None,
        config: FamilyConfig | Mapping[str, Any] | None = None,
        translator: Translator | None = None,
        default_data_class: Any = ContextualData,
        default_value_class: Any = ContextualValue,
    ):
        self.state = FamilyState.UNBUILT
        self._code = code
        self._family_registry = family_registry
        self._context_manager = context_manager
        self.translator = translator

        self._label: str | None = None
        self._parent: FamilyDefinition | None = None
        self._attributes: dict[str, AttributeDefinition] = {}
        self._attribute_as_label: list[AttributeDefinition] = []
        self._attribute_as_identifier: AttributeDefinition | None = None
        self._instantiable = True
        self._singleton = False
        self._options: dict[str, Any] = {}
        self._form_options: dict[str, Any] = {}
        self._data_class: type[Data] = resolve_class(default_data_class, Data)
        self._value_class: type[Value] = resolve_class(default_value_class, Value)

        self._children: list[FamilyDefinition] | None = None
        self._children_lock = threading.Lock()
        self._published = False

        # Snapshots kept when the family is detached from its collaborators
        self._fallback_context: dict[str, str] | None = None
        self._fallback_label: str | None = None

        self._build(attribute_registry, coerce_family_config(code, config))

    # =========================================================================
    # Construction
    # =========================================================================

    def _build(self, attribute_registry: AttributeRegistry, config: FamilyConfig) -> None:
        self.state = FamilyState.BUILDING

        label_codes: list[str] = []
        identifier_code: str | None = None
        if config.parent:
            self._parent = self._resolve_parent(config.parent)
            label_codes, identifier_code = self._copy_from_family(self._parent)

        self._build_attributes(attribute_registry, config.attributes)

        if config.attribute_as_label:
            label_codes = config.attribute_as_label
        self._attribute_as_label = [
            self._resolve_designated(c, "attribute as label") for c in label_codes
        ]

        if config.attribute_as_identifier:
            identifier_code = config.attribute_as_identifier
        if identifier_code:
            attribute = self._resolve_designated(identifier_code, "attribute as identifier")
            self._check_identifier(attribute)
            self._attribute_as_identifier = attribute

        self._label = config.label
        self._instantiable = config.instantiable
        self._singleton = config.singleton
        self._options = copy.deepcopy(config.options)
        self._form_options = copy.deepcopy(config.form_options)
        if config.data_class is not None:
            self._data_class = resolve_class(config.data_class, Data)
        if config.value_class is not None:
            self._value_class = resolve_class(config.value_class, Value)

        if issubclass(self._value_class, ContextualValue):
            default_context = (
                self._context_manager.get_default_context()
                if self._context_manager is not None
                else {}
            )
            self._value_class.check_context(default_context)

        self.state = FamilyState.FINALIZED
        logger.debug(
            "Built family %s (parent=%s, %d attributes)",
            self._code,
            self._parent.code if self._parent else None,
            len(self._attributes),
        )

    def _resolve_parent(self, parent_code: str) -> FamilyDefinition:
        if self._family_registry is None:
            raise ConfigurationError(
                f"Bad configuration for family {self._code}: parent '{parent_code}' "
                "can't be resolved without a family registry"
            )
        try:
            parent = self._family_registry.get_family(parent_code)
        except MissingFamilyError as exc:
            raise ConfigurationError(
                f"Bad configuration for family {self._code}: unknown parent '{parent_code}'"
            ) from exc
        if parent.state is not FamilyState.FINALIZED:
            raise ConfigurationError(
                f"Bad configuration for family {self._code}: parent '{parent_code}' "
                "must be built before its children"
            )
        return parent

    def _copy_from_family(self, parent: FamilyDefinition) -> tuple[list[str], str | None]:
        """Clone the parent's attributes and bindings into this family.

        Returns the codes of the parent's label and identifier attributes so
        they can be resolved against this family's own clones.
        """
        for attribute in parent.get_attributes().values():
            self._add_attribute(attribute.clone())
        self._data_class = parent.data_class
        self._value_class = parent.value_class

        label_codes = [a.code for a in parent.attribute_as_label]
        identifier = parent.attribute_as_identifier
        return label_codes, identifier.code if identifier else None

    def _build_attributes(
        self,
        attribute_registry: AttributeRegistry,
        attributes: Mapping[str, AttributeConfig | Mapping[str, Any] | None],
    ) -> None:
        for code, attribute_config in attributes.items():
            if code in self._attributes:
                # Inherited: local configuration is merged onto our own clone
                attribute = self._attributes[code]
                attribute.merge_configuration(attribute_config)
            elif attribute_registry.has_attribute(code):
                # Global: merge family configuration into a clone
                attribute = attribute_registry.get_attribute(code).clone()
                attribute.merge_configuration(attribute_config)
            else:
                # Unknown elsewhere: family-local attribute
                attribute = attribute_registry.create_attribute(code, attribute_config)
            self._add_attribute(attribute)

    def _resolve_designated(self, attribute_code: str, role: str) -> AttributeDefinition:
        if not self.has_attribute(attribute_code):
            raise ConfigurationError(
                f"Bad configuration for family {self._code}: {role} "
                f"'{attribute_code}' doesn't exists for this family"
            )
        return self._attributes[attribute_code]

    def _check_identifier(self, attribute: AttributeDefinition) -> None:
        if not attribute.unique:
            raise IdentifierAttributeError(self._code, attribute.code, "should be unique")
        if not attribute.required:
            raise IdentifierAttributeError(self._code, attribute.code, "should be required")
        if attribute.collection:
            raise IdentifierAttributeError(
                self._code, attribute.code, "should NOT be a collection"
            )
        if attribute.context_mask:
            raise IdentifierAttributeError(
                self._code, attribute.code, "should NOT be contextualized"
            )

    def _add_attribute(self, attribute: AttributeDefinition) -> None:
        attribute.family = self
        self._attributes[attribute.code] = attribute

    # =========================================================================
    # Late binding
    # =========================================================================

    def publish(self) -> None:
        """Freeze the family. Called by the registry that exposes it."""
        self._published = True

    @property
    def published(self) -> bool:
        return self._published

    def _check_mutable(self) -> None:
        if self._published:
            raise FamilyStateError(
                f"Family {self._code} is published and can't be modified anymore"
            )

    def add_attribute(self, attribute: AttributeDefinition) -> AttributeDefinition:
        """Add a clone of attribute to this family and return the clone.

        Raises:
            FamilyStateError: If the family is published
            ReservedCodeError: If the attribute code is reserved
        """
        self._check_mutable()
        if attribute.code in RESERVED_CODES:
            raise ReservedCodeError(attribute.code)
        clone = attribute.clone()
        self._add_attribute(clone)
        return clone

    # =========================================================================
    # Read API
    # =========================================================================

    @property
    def code(self) -> str:
        return self._code

    @property
    def parent(self) -> FamilyDefinition | None:
        return self._parent

    def get_attribute(self, code: str) -> AttributeDefinition:
        if not self.has_attribute(code):
            raise MissingAttributeError(f"Unknown attribute {code} in family {self._code}")
        return self._attributes[code]

    def has_attribute(self, code: str) -> bool:
        return code in self._attributes

    def get_attributes(self) -> dict[str, AttributeDefinition]:
        return dict(self._attributes)

    @property
    def attribute_as_label(self) -> list[AttributeDefinition]:
        return list(self._attribute_as_label)

    @attribute_as_label.setter
    def attribute_as_label(self, attributes: list[AttributeDefinition]) -> None:
        self._check_mutable()
        self._attribute_as_label = [
            self._resolve_designated(a.code, "attribute as label") for a in attributes
        ]

    @property
    def attribute_as_identifier(self) -> AttributeDefinition | None:
        return self._attribute_as_identifier

    @attribute_as_identifier.setter
    def attribute_as_identifier(self, attribute: AttributeDefinition | None) -> None:
        self._check_mutable()
        if attribute is not None:
            attribute = self._resolve_designated(attribute.code, "attribute as identifier")
            self._check_identifier(attribute)
        self._attribute_as_identifier = attribute

    @property
    def instantiable(self) -> bool:
        return self._instantiable

    @instantiable.setter
    def instantiable(self, value: bool) -> None:
        self._check_mutable()
        self._instantiable = value

    @property
    def singleton(self) -> bool:
        return self._singleton

    @singleton.setter
    def singleton(self, value: bool) -> None:
        self._check_mutable()
        self._singleton = value

    @property
    def options(self) -> dict[str, Any]:
        return self._options

    @options.setter
    def options(self, value: dict[str, Any]) -> None:
        self._check_mutable()
        self._options = dict(value)

    def get_option(self, code: str, fallback: Any = None) -> Any:
        return self._options.get(code, fallback)

    @property
    def form_options(self) -> dict[str, Any]:
        return self._form_options

    @form_options.setter
    def form_options(self, value: dict[str, Any]) -> None:
        self._check_mutable()
        self._form_options = dict(value)

    @property
    def data_class(self) -> type[Data]:
        return self._data_class

    @data_class.setter
    def data_class(self, value: Any) -> None:
        self._check_mutable()
        self._data_class = resolve_class(value, Data)

    @property
    def value_class(self) -> type[Value]:
        return self._value_class

    @value_class.setter
    def value_class(self, value: Any) -> None:
        self._check_mutable()
        self._value_class = resolve_class(value, Value)

    def get_children(self) -> list[FamilyDefinition]:
        """Direct sub-families, resolved once and cached.

        Families registered after the first call are not reflected.
        """
        if self._children is None:
            with self._children_lock:
                if self._children is None:
                    if self._family_registry is None:
                        self._children = []
                    else:
                        self._children = list(self._family_registry.get_by_parent(self))
        return list(self._children)

    def get_matching_codes(self) -> list[str]:
        """This family's code and the codes of all its descendants."""
        codes = [self._code]
        for child in self.get_children():
            for code in child.get_matching_codes():
                if code not in codes:
                    codes.append(code)
        return codes

    def get_context(self) -> dict[str, str]:
        if self._context_manager is None:
            return dict(self._fallback_context or {})
        return self._context_manager.get_current_context()

    # =========================================================================
    # Instantiation
    # =========================================================================

    def create_data(self) -> Data:
        """Create a new data of this family.

        Raises:
            FamilyStateError: If the family isn't instantiable or is a singleton
        """
        if not self._instantiable:
            raise FamilyStateError(f"Family {self._code} is not instantiable")
        if self._singleton:
            raise FamilyStateError(
                f"Family {self._code} is a singleton, use the repository to retrieve the instance"
            )
        return self._data_class(self)

    def create_value(
        self,
        data: Data,
        attribute: AttributeDefinition,
        context: Mapping[str, str] | None = None,
    ) -> Value:
        """Create a value slot for an attribute and attach it to the data.

        When both the value and the data are contextual and the attribute has
        a context mask, the value receives exactly the masked keys of the
        effective context: ``context`` merged over the data's current context.

        Raises:
            MissingAttributeError: If the attribute isn't this family's own definition
            MissingContextError: If a masked key is absent from the effective context
        """
        if self._attributes.get(attribute.code) is not attribute:
            raise MissingAttributeError(
                f"Attribute {attribute.code} doesn't belong to family {self._code}"
            )
        value = self._value_class(data, attribute)
        data.add_value(value)

        if (
            isinstance(value, ContextualValue)
            and isinstance(data, ContextualData)
            and attribute.context_mask
        ):
            if context:
                effective_context = {**data.current_context(), **context}
            else:
                effective_context = data.current_context()
            for key in attribute.context_mask:
                if key not in effective_context:
                    raise MissingContextError(attribute.code, key)
                value.set_context_value(key, effective_context[key])

        return value

    # =========================================================================
    # Presentation
    # =========================================================================

    @property
    def label(self) -> str | None:
        """Explicitly configured label, if any. See get_label()."""
        return self._label

    @label.setter
    def label(self, value: str | None) -> None:
        self._check_mutable()
        self._label = value

    def get_label(self) -> str:
        """Explicit label, else the "eav.family.{code}.label" translation,
        else the humanized code. Never raises.
        """
        if self._label:
            return self._label
        if self.translator is None and self._fallback_label:
            return self._fallback_label
        try:
            return try_translate(
                self.translator, f"eav.family.{self._code}.label", fallback=self._code
            )
        except Exception:  # labels are presentation-only
            logger.debug("Label lookup failed for family %s", self._code, exc_info=True)
            return humanize(self._code)

    def __str__(self) -> str:
        return self.get_label()

    def __repr__(self) -> str:
        return (
            f"FamilyDefinition(code={self._code!r}, "
            f"parent={self._parent.code if self._parent else None!r}, "
            f"attributes={list(self._attributes)!r}, state={self.state.value!r})"
        )

    # =========================================================================
    # Serialization
    # =========================================================================

    def __getstate__(self) -> dict[str, Any]:
        """Drop collaborators, keeping the dynamic data they provide."""
        if self._context_manager is not None:
            self._fallback_context = self._context_manager.get_current_context()
        if self.translator is not None:
            self._fallback_label = self.get_label()
        self.get_children()  # resolve before losing the registry

        state = self.__dict__.copy()
        state["translator"] = None
        state["_family_registry"] = None
        state["_context_manager"] = None
        del state["_children_lock"]
        return state

    def __setstate__(self, state: dict[str, Any]) -> None:
        self.__dict__.update(state)
        self._children_lock = threading.Lock()
