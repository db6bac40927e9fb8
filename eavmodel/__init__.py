"""eavmodel: runtime Entity-Attribute-Value type system.

Families (entity types) and their attributes are declared in configuration
and assembled into an in-memory model at startup.

Example:
    from eavmodel import load_model

    model = load_model("model.yaml")
    article = model.get_family("article")
    data = article.create_data()
    title = article.create_value(data, article.get_attribute("title"))
"""

__version__ = "0.1.0"

from .config import EAVConfig, configure, get_config, reset_config
from .context import ContextManager
from .entities import ContextualData, ContextualValue, Data, Value
from .errors import (
    ConfigurationError,
    ContextError,
    DuplicateCodeError,
    EAVError,
    FamilyStateError,
    IdentifierAttributeError,
    MissingAttributeError,
    MissingAttributeTypeError,
    MissingContextError,
    MissingFamilyError,
    ReservedCodeError,
)
from .loader import EAVModel, load_model
from .model import (
    AttributeDefinition,
    AttributeType,
    AttributeTypeCatalog,
    FamilyDefinition,
    FamilyState,
)
from .registry import RESERVED_CODES, AttributeRegistry, FamilyRegistry
from .translation import MessageCatalogue, humanize, try_translate

__all__ = [
    "__version__",
    # Config
    "EAVConfig",
    "configure",
    "get_config",
    "reset_config",
    # Context
    "ContextManager",
    # Representations
    "Data",
    "ContextualData",
    "Value",
    "ContextualValue",
    # Errors
    "EAVError",
    "ConfigurationError",
    "ReservedCodeError",
    "DuplicateCodeError",
    "IdentifierAttributeError",
    "ContextError",
    "MissingAttributeError",
    "MissingFamilyError",
    "MissingAttributeTypeError",
    "MissingContextError",
    "FamilyStateError",
    # Model
    "AttributeType",
    "AttributeTypeCatalog",
    "AttributeDefinition",
    "FamilyDefinition",
    "FamilyState",
    "AttributeRegistry",
    "FamilyRegistry",
    "RESERVED_CODES",
    "EAVModel",
    "load_model",
    # Translation
    "MessageCatalogue",
    "humanize",
    "try_translate",
]
