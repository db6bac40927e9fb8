"""Configuration management for eavmodel.

Process-level settings that every model built in this process shares:
- default_context: the addressing context used when nothing more specific is set
- context_mask: the context keys every attribute varies over unless it says otherwise
- data_class / value_class: default representations bound to families

Config resolution order (highest priority first):
1. Programmatic (EAVConfig constructed in code, installed with configure())
2. Environment variables (EAV_DEFAULT_CONTEXT, EAV_CONTEXT_MASK, ...)
3. Config file (~/.config/eavmodel/config.json)
4. Hardcoded defaults

A model file may still override the context settings for that one model.
"""

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)


# =============================================================================
# Settings file location
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "eavmodel"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_DATA_CLASS = "eavmodel.entities.ContextualData"
DEFAULT_VALUE_CLASS = "eavmodel.entities.ContextualValue"


# =============================================================================
# Env string parsing
# =============================================================================


def parse_context_string(context_string: str) -> dict[str, str]:
    """Parse a "key=value,key=value" string into a context mapping.

    Examples:
        "locale=en,channel=web" → {"locale": "en", "channel": "web"}
        "" → {}

    Raises:
        ValueError: If an entry has no '=' or an empty key.
    """
    context: dict[str, str] = {}
    for entry in context_string.split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, sep, value = entry.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(
                f"Invalid context entry: {entry!r}. Expected format: 'key=value'"
            )
        context[key] = value.strip()
    return context


def parse_mask_string(mask_string: str) -> list[str]:
    """Parse a "key,key" string into an ordered, de-duplicated context mask."""
    mask: list[str] = []
    for key in mask_string.split(","):
        key = key.strip()
        if key and key not in mask:
            mask.append(key)
    return mask


# =============================================================================
# Main config class
# =============================================================================


@dataclass
class EAVConfig:
    """Top-level eavmodel configuration.

    Examples:
        # Package use: no files needed
        config = EAVConfig(
            default_context={"locale": "en", "channel": "web"},
            context_mask=["locale", "channel"],
        )

        # CLI use: loads from ~/.config/eavmodel/config.json + env
        config = EAVConfig.load()
    """

    default_context: dict[str, str] = field(default_factory=dict)
    context_mask: list[str] = field(default_factory=list)
    data_class: str = DEFAULT_DATA_CLASS
    value_class: str = DEFAULT_VALUE_CLASS

    @classmethod
    def load(cls) -> "EAVConfig":
        """Build the settings from config.json, then EAV_* variables on top."""
        config = cls()
        config._merge_file()
        config._merge_env(os.environ)
        return config

    def _merge_file(self) -> None:
        if not CONFIG_FILE.exists():
            return
        try:
            data = json.loads(CONFIG_FILE.read_text())
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", CONFIG_FILE, exc)
            return
        if isinstance(data, dict):
            _apply_dict(self, data)

    def _merge_env(self, environ: Mapping[str, str]) -> None:
        if raw := environ.get("EAV_DEFAULT_CONTEXT"):
            try:
                self.default_context = parse_context_string(raw)
            except ValueError as exc:
                logger.warning("Ignoring EAV_DEFAULT_CONTEXT: %s", exc)
        if raw := environ.get("EAV_CONTEXT_MASK"):
            self.context_mask = parse_mask_string(raw)
        if raw := environ.get("EAV_DATA_CLASS"):
            self.data_class = raw
        if raw := environ.get("EAV_VALUE_CLASS"):
            self.value_class = raw

    def save(self) -> None:
        """Write the settings to ~/.config/eavmodel/config.json."""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        CONFIG_FILE.write_text(json.dumps(self.to_dict(), indent=2))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _apply_dict(config: EAVConfig, data: dict) -> None:
    """Copy the recognized keys of a settings file onto config."""
    if isinstance(data.get("default_context"), dict):
        config.default_context = {
            str(k): str(v) for k, v in data["default_context"].items()
        }
    if isinstance(data.get("context_mask"), list):
        config.context_mask = [str(k) for k in data["context_mask"]]
    for key in ("data_class", "value_class"):
        if isinstance(data.get(key), str) and data[key]:
            setattr(config, key, data[key])


# =============================================================================
# Process-wide settings
# =============================================================================

_config: EAVConfig | None = None


def get_config() -> EAVConfig:
    """Settings used by load_model() when none are passed.

    Loaded on first use and kept until configure() or reset_config().
    """
    global _config
    if _config is None:
        _config = EAVConfig.load()
    return _config


def configure(config: EAVConfig) -> None:
    """Install settings built in code, bypassing file and environment.

        from eavmodel.config import configure, EAVConfig
        configure(EAVConfig(default_context={"locale": "en"}))
    """
    global _config
    _config = config


def reset_config() -> None:
    """Forget the current settings; the next get_config() reloads them."""
    global _config
    _config = None
