"""Label translation with humanized fallback.

Families and attributes never fail to produce a label: each candidate key
is tried against the translator, and on a total miss the code is humanized
("userFirstName" → "user First Name").
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import yaml

logger = logging.getLogger(__name__)

# A space goes before an acronym followed by a capitalized word, before each
# capitalized word and before each digit run, never at the very start.
_HUMANIZE_PATTERN = re.compile(
    r"(?!^)(?:(?<![A-Z])[A-Z]{2,}(?=[A-Z][a-z])|[A-Z][a-z]|\d+)"
)


def humanize(text: str) -> str:
    """Turn a camelCase / snake_case code into space separated words.

    Examples:
        >>> humanize("orderLineItem")
        'order Line Item'
        >>> humanize("HTTPServerError")
        'HTTP Server Error'
        >>> humanize("shipping_address2")
        'shipping address 2'
    """
    return _HUMANIZE_PATTERN.sub(lambda m: " " + m.group(0), text).replace("_", " ")


# =============================================================================
# Translator protocols
# =============================================================================


@runtime_checkable
class Translator(Protocol):
    """Anything that can translate a key. Returns the key itself on a miss."""

    def trans(self, key: str, params: Mapping[str, Any] | None = None) -> str: ...


@runtime_checkable
class CatalogueTranslator(Translator, Protocol):
    """A translator that can tell whether its catalogue holds a key."""

    def has(self, key: str) -> bool: ...


def try_translate(
    translator: Translator | None,
    keys: str | Iterable[str],
    params: Mapping[str, Any] | None = None,
    fallback: str | None = None,
    humanize_fallback: bool = True,
) -> str | None:
    """Try each key in order, then fall back to the (humanized) fallback.

    Args:
        translator: Translator to query, or None to go straight to the fallback
        keys: Candidate translation keys, most specific first
        params: Parameters forwarded to the translator
        fallback: Text used when no key translates; None returns None
        humanize_fallback: Humanize the fallback before returning it

    Returns:
        The first translation found, the fallback, or None
    """
    if isinstance(keys, str):
        keys = [keys]

    if translator is not None:
        for key in keys:
            try:
                if isinstance(translator, CatalogueTranslator):
                    if translator.has(key):
                        return translator.trans(key, params)
                else:
                    label = translator.trans(key, params)
                    if label != key:
                        return label
            except (KeyError, ValueError) as exc:
                logger.debug("Translation of %r failed: %s", key, exc)

    if fallback is None:
        return None
    if not humanize_fallback:
        return fallback
    return humanize(fallback)


# =============================================================================
# Mapping-backed translator
# =============================================================================


def _flatten(messages: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for key, value in messages.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten(value, full_key))
        elif value is not None:
            flat[full_key] = str(value)
    return flat


class MessageCatalogue:
    """In-memory translation catalogue.

    Nested mappings are flattened with dots, so YAML files can be written
    as trees. Parameters are substituted verbatim: {"%name%": "x"} replaces
    every "%name%" in the message.
    """

    def __init__(self, messages: Mapping[str, Any] | None = None):
        self._messages = _flatten(messages or {})

    @classmethod
    def from_yaml(cls, path: Path | str) -> "MessageCatalogue":
        """Load a catalogue from a YAML file."""
        with open(Path(path)) as f:
            data = yaml.safe_load(f) or {}
        return cls(data)

    def has(self, key: str) -> bool:
        return key in self._messages

    def trans(self, key: str, params: Mapping[str, Any] | None = None) -> str:
        message = self._messages.get(key, key)
        for name, value in (params or {}).items():
            message = message.replace(name, str(value))
        return message

    def add(self, messages: Mapping[str, Any]) -> None:
        self._messages.update(_flatten(messages))

    def __len__(self) -> int:
        return len(self._messages)
