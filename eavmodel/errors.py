"""Error taxonomy for the EAV model engine.

Configuration errors are fatal and raised while the model is being built.
Lookup and state errors are caller errors raised at runtime. Nothing here
is retried or logged by the engine; callers decide how to surface them.
"""


class EAVError(Exception):
    """Base class for every error raised by eavmodel."""

    pass


# =============================================================================
# Load-time (fatal)
# =============================================================================


class ConfigurationError(EAVError, ValueError):
    """Raised when the model configuration is invalid.

    A model is never partially built: any ConfigurationError aborts the load.
    """

    pass


class ReservedCodeError(ConfigurationError):
    """Raised when an attribute uses a code reserved for built-in entity fields."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Attribute code '{code}' is a reserved code")


class DuplicateCodeError(ConfigurationError):
    """Raised when the same attribute or family code is registered twice."""

    def __init__(self, kind: str, code: str):
        self.kind = kind
        self.code = code
        super().__init__(f"Duplicate {kind} code '{code}'")


class IdentifierAttributeError(ConfigurationError):
    """Raised when the identifier attribute breaks the natural key constraints."""

    def __init__(self, family_code: str, attribute_code: str, reason: str):
        self.family_code = family_code
        self.attribute_code = attribute_code
        self.reason = reason
        super().__init__(
            f"Bad configuration for family {family_code}: "
            f"attribute as identifier '{attribute_code}' {reason}"
        )


class ContextError(ConfigurationError):
    """Raised when a context does not satisfy a value class's requirements."""

    pass


# =============================================================================
# Runtime lookups
# =============================================================================


class MissingAttributeError(EAVError, LookupError):
    """Raised when an attribute code is unknown."""

    pass


class MissingFamilyError(EAVError, LookupError):
    """Raised when a family code is unknown."""

    pass


class MissingAttributeTypeError(EAVError, LookupError):
    """Raised when an attribute type tag is not in the catalog."""

    pass


class MissingContextError(EAVError, LookupError):
    """Raised when a masked context key is absent from the effective context."""

    def __init__(self, attribute_code: str, key: str):
        self.attribute_code = attribute_code
        self.key = key
        super().__init__(
            f"Missing context key '{key}' required by the context mask "
            f"of attribute '{attribute_code}'"
        )


# =============================================================================
# Runtime state
# =============================================================================


class FamilyStateError(EAVError, RuntimeError):
    """Raised when a family does not allow the requested operation."""

    pass
