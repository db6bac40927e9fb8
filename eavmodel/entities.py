"""Default data and value representations.

Families only know their data and value classes by reference. The engine
calls ``data_class(family)`` and ``value_class(data, attribute)``; anything
more (persistence, identity, timestamps) belongs to the application.
"""

from __future__ import annotations

import importlib
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from .errors import ConfigurationError, ContextError

if TYPE_CHECKING:
    from .model.attribute import AttributeDefinition
    from .model.family import FamilyDefinition


class Data:
    """A generic entity: a family plus the values created for it."""

    def __init__(self, family: FamilyDefinition):
        self.family = family
        self.values: list[Value] = []

    @property
    def family_code(self) -> str:
        return self.family.code

    def add_value(self, value: Value) -> None:
        self.values.append(value)

    def get_values(self, attribute_code: str) -> list[Value]:
        return [v for v in self.values if v.attribute.code == attribute_code]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(family={self.family_code!r}, values={len(self.values)})"


class ContextualData(Data):
    """Data carrying its own current context on top of the family's."""

    def __init__(self, family: FamilyDefinition):
        super().__init__(family)
        self._context: dict[str, str] = {}

    def current_context(self) -> dict[str, str]:
        return {**self.family.get_context(), **self._context}

    def set_current_context(self, context: Mapping[str, str]) -> None:
        self._context = dict(context)


class Value:
    """One value slot of a data for an attribute."""

    def __init__(self, data: Data, attribute: AttributeDefinition):
        self.data = data
        self.attribute = attribute
        self.value: Any = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(attribute={self.attribute.code!r}, value={self.value!r})"


class ContextualValue(Value):
    """A value addressed by the context keys of its attribute's mask.

    Subclasses list the keys they need in ``context_keys``; the default
    context of the process must provide them (see check_context()).
    """

    context_keys: ClassVar[tuple[str, ...]] = ()

    def __init__(self, data: Data, attribute: AttributeDefinition):
        super().__init__(data, attribute)
        self.context: dict[str, str] = {}

    @classmethod
    def check_context(cls, context: Mapping[str, Any]) -> None:
        """Check that a context is usable with this value class.

        Raises:
            ContextError: If the context isn't a str → str mapping or misses a key
        """
        if not isinstance(context, Mapping):
            raise ContextError(f"Context must be a mapping, got {type(context).__name__}")
        for key, value in context.items():
            if not isinstance(key, str) or not key:
                raise ContextError(f"Invalid context key {key!r}")
            if not isinstance(value, str):
                raise ContextError(f"Context value for '{key}' must be a string, got {value!r}")
        missing = [key for key in cls.context_keys if key not in context]
        if missing:
            raise ContextError(
                f"{cls.__name__} requires context keys {missing} missing from {dict(context)!r}"
            )

    def set_context_value(self, key: str, value: str) -> None:
        self.context[key] = value

    def get_context_value(self, key: str) -> str | None:
        return self.context.get(key)

    def get_context(self) -> dict[str, str]:
        return dict(self.context)


# =============================================================================
# Class references
# =============================================================================


def resolve_class(reference: Any, base: type) -> type:
    """Resolve a class reference: a class, "pkg.module.Class" or "pkg.module:Class".

    Raises:
        ConfigurationError: If the reference can't be imported or isn't a subclass of base
    """
    if isinstance(reference, str):
        module_name, sep, class_name = reference.partition(":")
        if not sep:
            module_name, _, class_name = reference.rpartition(".")
        if not module_name or not class_name:
            raise ConfigurationError(f"Invalid class reference '{reference}'")
        try:
            module = importlib.import_module(module_name)
            resolved = getattr(module, class_name)
        except (ImportError, AttributeError) as exc:
            raise ConfigurationError(f"Can't import class '{reference}': {exc}") from exc
    else:
        resolved = reference

    if not isinstance(resolved, type) or not issubclass(resolved, base):
        raise ConfigurationError(f"{reference!r} is not a subclass of {base.__name__}")
    return resolved
