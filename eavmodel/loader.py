"""Model loading: configuration → ready-to-use registries.

    model = load_model("model.yaml")
    product = model.get_family("product")
    data = product.create_data()
    value = product.create_value(data, product.get_attribute("name"))

The build is all or nothing: any invalid attribute or family aborts the
load with a ConfigurationError.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .config import EAVConfig, get_config
from .context import ContextManager
from .core.models import ModelConfig
from .errors import ConfigurationError
from .model.attribute import AttributeDefinition
from .model.attribute_types import AttributeTypeCatalog
from .model.family import FamilyDefinition
from .registry import AttributeRegistry, FamilyRegistry
from .translation import Translator

logger = logging.getLogger(__name__)


@dataclass
class EAVModel:
    """A built model: registries plus the collaborators they share."""

    attribute_registry: AttributeRegistry
    family_registry: FamilyRegistry
    context_manager: ContextManager
    translator: Translator | None = None

    def get_family(self, code: str) -> FamilyDefinition:
        return self.family_registry.get_family(code)

    def has_family(self, code: str) -> bool:
        return self.family_registry.has_family(code)

    @property
    def families(self) -> dict[str, FamilyDefinition]:
        return self.family_registry.get_families()

    @property
    def attributes(self) -> dict[str, AttributeDefinition]:
        """Global attribute pool."""
        return self.attribute_registry.get_attributes()

    def summary(self) -> str:
        """Get a text summary of the model."""
        lines = [
            f"Global attributes: {len(self.attribute_registry)}",
            f"Families: {len(self.family_registry)}",
            "",
        ]
        for family in self.families.values():
            parent = f" < {family.parent.code}" if family.parent else ""
            lines.append(
                f"  {family.code}{parent} ({len(family.get_attributes())} attributes)"
            )
        return "\n".join(lines)


def read_model_config(source: ModelConfig | Mapping[str, Any] | Path | str) -> ModelConfig:
    """Parse a model configuration from a struct, a mapping or a file.

    Raises:
        FileNotFoundError: If a path doesn't exist
        ConfigurationError: If the content is malformed or has unknown keys
    """
    if isinstance(source, ModelConfig):
        return source
    try:
        if isinstance(source, Mapping):
            return ModelConfig.model_validate(dict(source))
        return ModelConfig.from_file(source)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid model configuration: {exc}") from exc
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Can't parse model file {source}: {exc}") from exc


def load_model(
    source: ModelConfig | Mapping[str, Any] | Path | str,
    config: EAVConfig | None = None,
    translator: Translator | None = None,
    type_catalog: AttributeTypeCatalog | None = None,
) -> EAVModel:
    """Build the attribute pool and every family of a model.

    Args:
        source: Model file path (YAML or JSON), mapping or ModelConfig
        config: Process settings, defaults to get_config()
        translator: Optional translator for labels
        type_catalog: Attribute types, defaults to the built-in catalog

    Returns:
        The built EAVModel
    """
    model_config = read_model_config(source)
    settings = config or get_config()

    default_context = model_config.context.default
    if default_context is None:
        default_context = settings.default_context
    context_mask = model_config.context.mask
    if context_mask is None:
        context_mask = settings.context_mask

    context_manager = ContextManager(default_context)
    attribute_registry = AttributeRegistry(
        type_catalog or AttributeTypeCatalog(), context_mask, translator
    )
    attribute_registry.parse_global_config(model_config.attributes)

    family_registry = FamilyRegistry(
        attribute_registry,
        context_manager,
        translator,
        default_data_class=settings.data_class,
        default_value_class=settings.value_class,
    )
    family_registry.parse_global_config(model_config.families)

    logger.debug(
        "Loaded model with %d global attributes and %d families",
        len(attribute_registry),
        len(family_registry),
    )
    return EAVModel(attribute_registry, family_registry, context_manager, translator)
