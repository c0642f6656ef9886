"""Exception types raised by fluentval.

Failed checks are never raised; they come back as ``ValidationFailure``
records. The exceptions here signal misuse of the builder or of a predicate.
"""


class FluentvalError(Exception):
    """Base class for all fluentval errors."""


class ConfigurationError(FluentvalError, ValueError):
    """Raised at build time when a rule or accessor is malformed."""

    def __init__(self, message: str, property_name: str | None = None):
        self.property_name = property_name
        super().__init__(message)


class PreconditionError(FluentvalError, ValueError):
    """Raised during evaluation when a predicate receives an absent value."""

    def __init__(self, message: str, property_name: str):
        self.property_name = property_name
        super().__init__(message)


class ValidatorNotRegisteredError(FluentvalError, LookupError):
    """Raised when no validator is registered for a subject type."""

    def __init__(self, subject_type: type):
        self.subject_type = subject_type
        super().__init__(f"No validator registered for {subject_type.__qualname__}")
