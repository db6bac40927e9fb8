"""Model configuration structs and YAML I/O.

A ModelConfig is the complete declarative input of the engine: the
addressing context, the global attribute pool and every family.

Every struct rejects unknown keys, so a typo in a model file fails the
load instead of being silently ignored. Keys are written in camelCase in
model files; the snake_case field names are accepted too.
"""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


_STRICT = ConfigDict(extra="forbid", populate_by_name=True)


# =============================================================================
# Attribute Configuration
# =============================================================================


class AttributeConfig(BaseModel):
    """Configuration of a single attribute.

    Fields left unset keep their inherited value when this config is merged
    onto an existing attribute; use model_fields_set to tell them apart.
    """

    model_config = _STRICT

    type: str = Field(default="string", description="Attribute type tag")
    label: str | None = Field(default=None, description="Explicit label")
    group: str | None = Field(default=None, description="Display group")
    required: bool = False
    unique: bool = False
    collection: bool | None = Field(
        default=None, description="Multi-valued. None uses the type default"
    )
    context_mask: list[str] | None = Field(
        default=None,
        alias="contextMask",
        description="Context keys this attribute varies over. None uses the global mask",
    )
    default: Any = None
    options: dict[str, Any] = Field(default_factory=dict)
    form_options: dict[str, Any] = Field(default_factory=dict, alias="formOptions")
    view_options: dict[str, Any] = Field(default_factory=dict, alias="viewOptions")

    @field_validator("context_mask")
    @classmethod
    def _dedupe_mask(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return list(dict.fromkeys(value))


# =============================================================================
# Family Configuration
# =============================================================================


class FamilyConfig(BaseModel):
    """Configuration of a single family."""

    model_config = _STRICT

    parent: str | None = Field(default=None, description="Parent family code")
    label: str | None = None
    attributes: dict[str, AttributeConfig | None] = Field(default_factory=dict)
    attribute_as_label: list[str] = Field(default_factory=list, alias="attributeAsLabel")
    attribute_as_identifier: str | None = Field(
        default=None, alias="attributeAsIdentifier"
    )
    instantiable: bool = True
    singleton: bool = False
    options: dict[str, Any] = Field(default_factory=dict)
    form_options: dict[str, Any] = Field(default_factory=dict, alias="formOptions")
    data_class: Any = Field(default=None, alias="dataClass")
    value_class: Any = Field(default=None, alias="valueClass")

    @field_validator("attributes", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("attribute_as_label", mode="before")
    @classmethod
    def _wrap_single_label(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


# =============================================================================
# Model Configuration
# =============================================================================


class ContextConfig(BaseModel):
    """Per-model override of the process context settings."""

    model_config = _STRICT

    default: dict[str, str] | None = None
    mask: list[str] | None = None


class ModelConfig(BaseModel):
    """Complete declarative model: context, global attributes, families."""

    model_config = _STRICT

    context: ContextConfig = Field(default_factory=ContextConfig)
    attributes: dict[str, AttributeConfig | None] = Field(default_factory=dict)
    families: dict[str, FamilyConfig] = Field(default_factory=dict)

    @field_validator("attributes", "families", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def to_yaml(self, path: Path | str) -> None:
        """Save the model to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(mode="json", by_alias=True, exclude_defaults=True)

        with open(path, "w") as f:
            yaml.dump(
                data, f, default_flow_style=False, sort_keys=False, allow_unicode=True
            )

    @classmethod
    def from_yaml(cls, path: Path | str) -> "ModelConfig":
        """Load a model from a YAML file."""
        path = Path(path)

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.model_validate(data or {})

    @classmethod
    def from_file(cls, path: Path | str) -> "ModelConfig":
        """Load a model from a YAML or JSON file, chosen by extension."""
        path = Path(path)
        if path.suffix.lower() == ".json":
            return cls.model_validate(json.loads(path.read_text()) or {})
        return cls.from_yaml(path)
