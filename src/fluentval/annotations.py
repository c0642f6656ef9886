"""Declarative validation driven by field annotations.

Constraints are declared on pydantic models or standard dataclasses with
``Annotated[...]``, ``Field(...)`` or ``satisfies(...)``, and pydantic does
all the checking. ``AnnotationValidator`` re-validates an instance's current
field values and reports pydantic's errors as ``ValidationFailure`` records.
"""

import dataclasses
import logging
from collections.abc import Callable
from functools import lru_cache
from typing import Any

from pydantic import AfterValidator, BaseModel, TypeAdapter, ValidationError

from .errors import ConfigurationError
from .predicates import AtomicCheck
from .results import ValidationFailure
from .validator import BaseValidator

logger = logging.getLogger(__name__)

ROOT_PROPERTY = "__root__"


@lru_cache(maxsize=None)
def _adapter_for(subject_type: type) -> TypeAdapter:
    logger.debug(f"Building type adapter for {subject_type.__qualname__}")
    return TypeAdapter(subject_type)


@lru_cache(maxsize=None)
def _alias_map(model_type: type[BaseModel]) -> dict[str, str]:
    return {
        field.alias: name
        for name, field in model_type.model_fields.items()
        if field.alias and field.alias != name
    }


def is_annotated_type(subject_type: type) -> bool:
    """Whether instances of a type can be checked by ``AnnotationValidator``."""
    if issubclass(subject_type, BaseModel):
        return True
    return dataclasses.is_dataclass(subject_type)


def is_annotated_subject(instance: Any) -> bool:
    return not isinstance(instance, type) and is_annotated_type(type(instance))


class AnnotationValidator(BaseValidator[Any]):
    """Validator for pydantic models and dataclasses using their declared constraints."""

    def validate(self, instance: Any) -> list[ValidationFailure]:
        """Validate an instance's current field values against its annotations.

        Raises:
            ConfigurationError: If the instance is neither a pydantic model nor a dataclass
        """
        try:
            if isinstance(instance, BaseModel):
                self._validate_model(instance)
            elif is_annotated_subject(instance):
                self._validate_dataclass(instance)
            else:
                raise ConfigurationError(
                    f"{type(instance).__name__} is neither a pydantic model nor a dataclass"
                )
        except ValidationError as e:
            failures = [self._to_failure(instance, error) for error in e.errors()]
            logger.debug(f"{type(instance).__name__}: {len(failures)} annotation failures")
            return failures

        return []

    @staticmethod
    def _validate_model(instance: BaseModel) -> None:
        model_type = type(instance)
        data = instance.model_dump(
            by_alias=True,
            exclude=set(model_type.model_computed_fields),
        )
        model_type.model_validate(data)

    @staticmethod
    def _validate_dataclass(instance: Any) -> None:
        data = {
            field.name: getattr(instance, field.name)
            for field in dataclasses.fields(instance)
            if field.init
        }
        _adapter_for(type(instance)).validate_python(data)

    @staticmethod
    def _to_failure(instance: Any, error: dict[str, Any]) -> ValidationFailure:
        location = [str(part) for part in error.get("loc", ())]
        if location and isinstance(instance, BaseModel):
            location[0] = _alias_map(type(instance)).get(location[0], location[0])

        return ValidationFailure(
            property_name=".".join(location) or ROOT_PROPERTY,
            message=error["msg"],
        )


def satisfies(check: AtomicCheck | Callable[[Any], bool], message: str | None = None) -> AfterValidator:
    """Use a predicate as an annotation constraint.

    Example::

        class Signup(BaseModel):
            email: Annotated[str, satisfies(predicates.email)]

    Args:
        check: An ``AtomicCheck`` or any ``value -> bool`` callable
        message: Error message; defaults to the check's own template

    Returns:
        A pydantic ``AfterValidator`` that raises when the check fails
    """
    if not callable(check):
        raise ConfigurationError("satisfies requires a callable check")

    if message is None:
        if isinstance(check, AtomicCheck):
            message = check.message.format(property="Value")
        else:
            message = "Value is invalid."

    def validator(value: Any) -> Any:
        if not check(value):
            raise ValueError(message)
        return value

    return AfterValidator(validator)
