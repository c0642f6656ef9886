"""fluentval - fluent, rule-based validation for Python objects.

fluentval composes per-property validation rules at runtime, gates them on
conditions over the whole object, and reports every violated rule with the
property it belongs to. Declarative validation through pydantic annotations
and an explicit validator registry sit alongside the fluent builder.
"""

__version__ = "0.1.0"
__author__ = "fluentval contributors"
__description__ = "Fluent, rule-based validation for Python objects"

from fluentval.annotations import AnnotationValidator, satisfies
from fluentval.config import FluentvalConfig, load_config
from fluentval.errors import (
    ConfigurationError,
    FluentvalError,
    PreconditionError,
    ValidatorNotRegisteredError,
)
from fluentval.property_rule import PropertyRule
from fluentval.registry import ValidatorRegistry, default_registry, validator_for
from fluentval.results import ValidationFailure
from fluentval.rules import Rule
from fluentval.selector import PropertyDescriptor, resolve_property
from fluentval.validator import BaseValidator, FluentValidator

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "AnnotationValidator",
    "BaseValidator",
    "ConfigurationError",
    "FluentValidator",
    "FluentvalConfig",
    "FluentvalError",
    "PreconditionError",
    "PropertyDescriptor",
    "PropertyRule",
    "Rule",
    "ValidationFailure",
    "ValidatorNotRegisteredError",
    "ValidatorRegistry",
    "default_registry",
    "load_config",
    "resolve_property",
    "satisfies",
    "validator_for",
]
