"""Explicit mapping from subject types to validators.

Applications register their validators at startup::

    registry = ValidatorRegistry()

    @registry.validator_for(User)
    class UserValidator(FluentValidator[User]):
        ...

    registry.validate(user)

Each subject type gets one shared validator instance, built on first use.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from .annotations import AnnotationValidator, is_annotated_type
from .config import FluentvalConfig, create_default_config
from .errors import ConfigurationError, ValidatorNotRegisteredError
from .results import ValidationFailure
from .validator import BaseValidator

logger = logging.getLogger(__name__)

ValidatorFactory = Callable[[], BaseValidator]
V = TypeVar("V", bound=type)


class ValidatorRegistry:
    """Registry of validator factories keyed by subject type."""

    def __init__(self, config: FluentvalConfig | None = None):
        self.config = config if config is not None else create_default_config()
        self._factories: dict[type, ValidatorFactory] = {}
        self._instances: dict[type, BaseValidator] = {}
        self._annotation_validator = AnnotationValidator()
        self._lock = threading.Lock()

    def register(self, subject_type: type, factory: ValidatorFactory, *, replace: bool = False) -> None:
        """Register a validator class (or zero-argument factory) for a subject type.

        Raises:
            ConfigurationError: If the subject type is already registered and
                                ``replace`` is False
        """
        if not isinstance(subject_type, type):
            raise ConfigurationError(f"subject type must be a class, got {subject_type!r}")
        if not callable(factory):
            raise ConfigurationError(f"validator factory for {subject_type.__qualname__} is not callable")

        with self._lock:
            if subject_type in self._factories and not replace:
                raise ConfigurationError(
                    f"A validator is already registered for {subject_type.__qualname__}"
                )
            self._factories[subject_type] = factory
            self._instances.pop(subject_type, None)

        logger.debug(f"Registered validator for {subject_type.__qualname__}")

    def validator_for(self, subject_type: type, *, replace: bool = False) -> Callable[[V], V]:
        """Class decorator form of ``register``."""
        def decorator(validator_type: V) -> V:
            self.register(subject_type, validator_type, replace=replace)
            return validator_type
        return decorator

    def unregister(self, subject_type: type) -> None:
        with self._lock:
            self._factories.pop(subject_type, None)
            self._instances.pop(subject_type, None)

    def is_registered(self, subject_type: type) -> bool:
        return self._registered_base(subject_type) is not None

    def subject_types(self) -> list[type]:
        return list(self._factories)

    def _registered_base(self, subject_type: type) -> type | None:
        for candidate in subject_type.__mro__:
            if candidate in self._factories:
                return candidate
        return None

    def resolve(self, subject_type: type) -> BaseValidator:
        """Return the shared validator for a subject type.

        Lookup follows the subject type's MRO, so a validator registered for
        a base class also serves its subclasses.

        Raises:
            ValidatorNotRegisteredError: If nothing is registered and
                                         annotation fallback does not apply
        """
        registered = self._registered_base(subject_type)
        if registered is None:
            return self._fallback(subject_type)

        instance = self._instances.get(registered)
        if instance is not None:
            return instance

        with self._lock:
            instance = self._instances.get(registered)
            if instance is None:
                instance = self._factories[registered]()
                if not isinstance(instance, BaseValidator):
                    raise ConfigurationError(
                        f"Factory for {registered.__qualname__} returned "
                        f"{type(instance).__name__}, not a validator"
                    )
                self._instances[registered] = instance
                logger.info(
                    f"Constructed {type(instance).__name__} for {registered.__qualname__}"
                )
        return instance

    def _fallback(self, subject_type: type) -> BaseValidator:
        if self.config.registry.annotation_fallback and is_annotated_type(subject_type):
            return self._annotation_validator
        raise ValidatorNotRegisteredError(subject_type)

    def validate(self, instance: Any) -> list[ValidationFailure]:
        """Validate an instance with the validator registered for its type."""
        return self.resolve(type(instance)).validate(instance)

    def is_valid(self, instance: Any) -> bool:
        return self.resolve(type(instance)).is_valid(instance)


default_registry = ValidatorRegistry()


def validator_for(subject_type: type, *, replace: bool = False) -> Callable[[V], V]:
    """Register a validator class with the default registry."""
    return default_registry.validator_for(subject_type, replace=replace)
