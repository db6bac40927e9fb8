"""CLI commands for eavmodel."""

from . import (
    validate,
    families,
)

__all__ = [
    "validate",
    "families",
]
