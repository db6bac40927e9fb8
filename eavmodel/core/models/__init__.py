"""Pydantic configuration models for eavmodel.

- schema.py: attribute, family and model configuration structs with YAML I/O
"""

from .schema import (
    AttributeConfig,
    FamilyConfig,
    ContextConfig,
    ModelConfig,
)

__all__ = [
    "AttributeConfig",
    "FamilyConfig",
    "ContextConfig",
    "ModelConfig",
]
