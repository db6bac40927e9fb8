"""Addressing context (locale, channel, scope, ...) for contextual values.

The engine itself only ever reads a context snapshot handed to it. The
ContextManager is the thin boundary adapter for callers that want an
ambient "current context" instead of threading one through every call.
"""

from __future__ import annotations

import contextvars
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

Context = dict[str, str]

# Current context of every ContextManager, keyed by manager. Each update
# sets a new mapping, so a copied Context never sees later changes.
_current_contexts: contextvars.ContextVar[Mapping[object, Context] | None] = (
    contextvars.ContextVar("eav_current_contexts", default=None)
)


class ContextManager:
    """Holds the default context and the ambient current context.

    The current context lives in a module-level ContextVar, so every thread
    and asyncio task sees its own value. When nothing was set, the current
    context is the default context. reset() drops this manager's entry.
    """

    def __init__(self, default_context: Mapping[str, str] | None = None):
        self._default_context: Context = dict(default_context or {})
        self._key = object()

    def get_default_context(self) -> Context:
        return dict(self._default_context)

    def get_current_context(self) -> Context:
        current = (_current_contexts.get() or {}).get(self._key)
        if current is None:
            return self.get_default_context()
        return dict(current)

    def get_context(self) -> Context:
        """Alias of get_current_context()."""
        return self.get_current_context()

    def _with_current(self, context: Context | None) -> dict[object, Context]:
        contexts = dict(_current_contexts.get() or {})
        if context is None:
            contexts.pop(self._key, None)
        else:
            contexts[self._key] = context
        return contexts

    def set_current_context(self, context: Mapping[str, str]) -> None:
        """Replace the current context, merged over the default context."""
        _current_contexts.set(self._with_current({**self._default_context, **context}))

    def reset(self) -> None:
        """Go back to the default context."""
        _current_contexts.set(self._with_current(None))

    @contextmanager
    def scoped(self, **overrides: str) -> Iterator[Context]:
        """Temporarily override keys of the current context.

        Example:
            with manager.scoped(locale="fr"):
                family.create_value(data, attribute)
        """
        token = _current_contexts.set(
            self._with_current({**self.get_current_context(), **overrides})
        )
        try:
            yield self.get_current_context()
        finally:
            _current_contexts.reset(token)

    def __repr__(self) -> str:
        return f"ContextManager(default={self._default_context!r})"
