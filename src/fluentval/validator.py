"""Validator base classes.

``BaseValidator`` is the two-method contract every validator honours:
``validate(instance)`` returns an ordered list of failures and
``is_valid(instance)`` is True exactly when that list is empty.

``FluentValidator`` builds its rules at construction time::

    class UserValidator(FluentValidator[User]):
        subject_type = User

        def __init__(self):
            super().__init__()
            self.rule_for(lambda u: u.username).not_empty().length(3, 20)
            self.rule_for(lambda u: u.age).greater_than_or_equal(18)

Once the constructor has run, the rule configuration is read-only and a
single instance can serve concurrent ``validate`` calls.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

from .config import FluentvalConfig, create_default_config
from .property_rule import PropertyRule
from .results import ValidationFailure
from .selector import Accessor, resolve_property

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseValidator(ABC, Generic[T]):
    """Base class for validators of a subject type ``T``."""

    # Optional; used to build subjects from raw records (see the CLI)
    subject_type: ClassVar[type | None] = None

    @abstractmethod
    def validate(self, instance: T) -> list[ValidationFailure]:
        """Validate an instance.

        Args:
            instance: Subject to validate

        Returns:
            Every failure, in a deterministic order; empty when valid
        """
        pass

    def is_valid(self, instance: T) -> bool:
        """Whether ``validate`` reports no failures."""
        return not self.validate(instance)

    def try_validate(self, instance: T) -> tuple[bool, list[ValidationFailure]]:
        """Validate and return both the verdict and the failures."""
        failures = self.validate(instance)
        return not failures, failures


class FluentValidator(BaseValidator[T]):
    """Validator composed from per-property rule sets."""

    def __init__(self, config: FluentvalConfig | None = None):
        self.config = config if config is not None else create_default_config()
        self._rule_sets: list[PropertyRule[T]] = []

    def rule_for(self, accessor: Accessor) -> PropertyRule[T]:
        """Start a rule set for one property.

        Args:
            accessor: Attribute name or single-attribute callable,
                      e.g. ``lambda user: user.age``

        Returns:
            A new rule set; calling ``rule_for`` again for the same property
            adds a second, independent rule set

        Raises:
            ConfigurationError: If the accessor is not a direct attribute access
        """
        descriptor = resolve_property(accessor)
        rule_set: PropertyRule[T] = PropertyRule(descriptor, self.config.messages)
        self._rule_sets.append(rule_set)
        logger.debug(f"{type(self).__name__}: registered rule set for '{descriptor.name}'")
        return rule_set

    @property
    def rule_sets(self) -> tuple[PropertyRule[T], ...]:
        return tuple(self._rule_sets)

    def validate(self, instance: T) -> list[ValidationFailure]:
        """Run every rule set in registration order and concatenate the failures."""
        failures: list[ValidationFailure] = []
        for rule_set in self._rule_sets:
            failures.extend(rule_set.validate(instance))

        logger.debug(f"{type(self).__name__}: {len(failures)} failures")
        return failures

    def describe(self) -> list[dict[str, Any]]:
        """Describe every configured rule, in evaluation order."""
        return [entry for rule_set in self._rule_sets for entry in rule_set.describe()]
