"""Fluent rule builder for a single property.

A ``PropertyRule`` owns one property descriptor and an ordered list of
``Rule`` records. Builder methods append a rule and return the same builder
so calls can be chained; no checking happens until ``validate`` is called.
"""

import inspect
import logging
import re
from collections.abc import Callable, Sized
from decimal import Decimal
from enum import Enum
from typing import Any, Generic, TypeVar

from . import predicates
from .config import MessagesConfig
from .errors import ConfigurationError, PreconditionError
from .messages import render_message
from .predicates import AtomicCheck
from .results import ValidationFailure
from .rules import Check, Condition, MessageSource, Rule
from .selector import PropertyDescriptor

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_blank(value: Any) -> bool:
    return isinstance(value, str) and not value.strip()


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def _compare(test: Callable[[Any], bool]) -> Check:
    """Wrap an ordering test: absent values pass, incomparable values fail.

    Signalling comparisons such as ``Decimal("NaN") > 0`` raise
    ``InvalidOperation``, an ``ArithmeticError``; those fail as well.
    """
    def check(value: Any, instance: Any) -> bool:
        if value is None:
            return True
        try:
            return bool(test(value))
        except (TypeError, ArithmeticError):
            return False
    return check


def _sized(test: Callable[[int], bool]) -> Check:
    """Wrap a length test: absent values pass, values without a length fail."""
    def check(value: Any, instance: Any) -> bool:
        if value is None:
            return True
        if not isinstance(value, Sized):
            return False
        return test(len(value))
    return check


def _digit_counts(value: Any) -> tuple[int, int] | None:
    """Return (significant digits, fractional digits) of a number's written form."""
    number = value if isinstance(value, Decimal) else Decimal(str(value))
    if not number.is_finite():
        return None

    text = format(number, "f").lstrip("-")
    integer_part, _, fraction_part = text.partition(".")
    return len(integer_part.lstrip("0")) + len(fraction_part), len(fraction_part)


def _positional_arity(func: Callable[..., Any]) -> int | None:
    """Number of required positional parameters, or None if it can't be determined."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None

    return sum(
        1
        for parameter in signature.parameters.values()
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD)
        and parameter.default is parameter.empty
    )


class PropertyRule(Generic[T]):
    """Ordered rules for one property of a subject type ``T``."""

    def __init__(self, descriptor: PropertyDescriptor, messages: MessagesConfig | None = None):
        self.descriptor = descriptor
        self._messages = messages if messages is not None else MessagesConfig()
        self._rules: list[Rule] = []

    @property
    def property_name(self) -> str:
        return self.descriptor.name

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(self._rules)

    def _add(self, kind: str, check: Check, message: MessageSource | None, **params: Any) -> "PropertyRule[T]":
        if message is None:
            template = self._messages.template_for(kind)
            message = render_message(template, self.property_name, params)

        self._rules.append(Rule(kind=kind, check=check, message=message, params=params))
        logger.debug(f"Added {kind} rule to property '{self.property_name}'")
        return self

    def _fail(self, message: str) -> ConfigurationError:
        return ConfigurationError(f"{self.property_name}: {message}", property_name=self.property_name)

    # Presence

    def required(self, message: MessageSource | None = None) -> "PropertyRule[T]":
        """Value must be present: not None and not whitespace-only text."""
        return self._add("required", lambda v, _: v is not None and not _is_blank(v), message)

    def not_null(self, message: MessageSource | None = None) -> "PropertyRule[T]":
        """Value must not be None."""
        return self._add("not_null", lambda v, _: v is not None, message)

    def null(self, message: MessageSource | None = None) -> "PropertyRule[T]":
        """Value must be None."""
        return self._add("null", lambda v, _: v is None, message)

    def not_empty(self, message: MessageSource | None = None) -> "PropertyRule[T]":
        """Value must not be None, whitespace-only text or an empty collection."""
        return self._add("not_empty", lambda v, _: not _is_empty(v), message)

    def empty(self, message: MessageSource | None = None) -> "PropertyRule[T]":
        """Inverse of ``not_empty``."""
        return self._add("empty", lambda v, _: _is_empty(v), message)

    # Length and shape

    def min_length(self, length: int, message: MessageSource | None = None) -> "PropertyRule[T]":
        if length < 0:
            raise self._fail(f"min_length must be >= 0, got {length}")
        return self._add("min_length", _sized(lambda n: n >= length), message, length=length)

    def max_length(self, length: int, message: MessageSource | None = None) -> "PropertyRule[T]":
        if length < 0:
            raise self._fail(f"max_length must be >= 0, got {length}")
        return self._add("max_length", _sized(lambda n: n <= length), message, length=length)

    def length(self, low: int, high: int, message: MessageSource | None = None) -> "PropertyRule[T]":
        if low < 0 or high < low:
            raise self._fail(f"length bounds must satisfy 0 <= low <= high, got {low}..{high}")
        return self._add("length", _sized(lambda n: low <= n <= high), message, min=low, max=high)

    def matches(self, pattern: str | re.Pattern, message: MessageSource | None = None) -> "PropertyRule[T]":
        """Text must match ``pattern`` in full. None and empty text pass."""
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise self._fail(f"invalid pattern {pattern!r}: {e}") from e

        def check(value: Any, instance: Any) -> bool:
            if value is None or value == "":
                return True
            return compiled.fullmatch(value if isinstance(value, str) else str(value)) is not None

        return self._add("matches", check, message, pattern=compiled.pattern)

    def email(self, message: MessageSource | None = None) -> "PropertyRule[T]":
        return self._add("email", self._shape(predicates.email), message)

    def phone(self, message: MessageSource | None = None) -> "PropertyRule[T]":
        return self._add("phone", self._shape(predicates.phone), message)

    def credit_card(self, message: MessageSource | None = None) -> "PropertyRule[T]":
        return self._add("credit_card", self._shape(predicates.credit_card), message)

    @staticmethod
    def _shape(check: AtomicCheck) -> Check:
        return lambda value, _: value is None or check(value)

    # Ranges and comparisons

    def _bounds(self, kind: str, low: Any, high: Any) -> None:
        try:
            inverted = low > high
        except TypeError as e:
            raise self._fail(f"{kind} bounds are not comparable: {e}") from e
        if inverted:
            raise self._fail(f"{kind} lower bound {low!r} exceeds upper bound {high!r}")

    def range(self, low: Any, high: Any, message: MessageSource | None = None) -> "PropertyRule[T]":
        self._bounds("range", low, high)
        return self._add("range", _compare(lambda v: low <= v <= high), message, min=low, max=high)

    def inclusive_between(self, low: Any, high: Any, message: MessageSource | None = None) -> "PropertyRule[T]":
        self._bounds("inclusive_between", low, high)
        return self._add(
            "inclusive_between", _compare(lambda v: low <= v <= high), message, min=low, max=high
        )

    def exclusive_between(self, low: Any, high: Any, message: MessageSource | None = None) -> "PropertyRule[T]":
        self._bounds("exclusive_between", low, high)
        return self._add(
            "exclusive_between", _compare(lambda v: low < v < high), message, min=low, max=high
        )

    def equal(self, value: Any, message: MessageSource | None = None) -> "PropertyRule[T]":
        expected = value
        return self._add("equal", lambda v, _: v == expected, message, value=expected)

    def not_equal(self, value: Any, message: MessageSource | None = None) -> "PropertyRule[T]":
        unexpected = value
        return self._add("not_equal", lambda v, _: v != unexpected, message, value=unexpected)

    def greater_than(self, value: Any, message: MessageSource | None = None) -> "PropertyRule[T]":
        threshold = value
        return self._add("greater_than", _compare(lambda v: v > threshold), message, value=threshold)

    def greater_than_or_equal(self, value: Any, message: MessageSource | None = None) -> "PropertyRule[T]":
        threshold = value
        return self._add(
            "greater_than_or_equal", _compare(lambda v: v >= threshold), message, value=threshold
        )

    def less_than(self, value: Any, message: MessageSource | None = None) -> "PropertyRule[T]":
        threshold = value
        return self._add("less_than", _compare(lambda v: v < threshold), message, value=threshold)

    def less_than_or_equal(self, value: Any, message: MessageSource | None = None) -> "PropertyRule[T]":
        threshold = value
        return self._add(
            "less_than_or_equal", _compare(lambda v: v <= threshold), message, value=threshold
        )

    # Enumerations and numbers

    def _enum_type(self, kind: str, enum_type: Any) -> type[Enum]:
        if not (isinstance(enum_type, type) and issubclass(enum_type, Enum)):
            raise self._fail(f"{kind} requires an Enum subclass, got {enum_type!r}")
        return enum_type

    def is_enum(self, enum_type: type[Enum], message: MessageSource | None = None) -> "PropertyRule[T]":
        """Value must be a member of ``enum_type`` or the value of one of its members."""
        enum_type = self._enum_type("is_enum", enum_type)
        member_values = [member.value for member in enum_type]

        def check(value: Any, instance: Any) -> bool:
            if value is None:
                return False
            return isinstance(value, enum_type) or value in member_values

        return self._add("is_enum", check, message, enum=enum_type.__name__)

    def is_enum_name(
        self,
        enum_type: type[Enum],
        ignore_case: bool = False,
        message: MessageSource | None = None,
    ) -> "PropertyRule[T]":
        """Text must be the name of a member of ``enum_type``."""
        enum_type = self._enum_type("is_enum_name", enum_type)
        names = set(enum_type.__members__)
        folded = {name.casefold() for name in names}

        def check(value: Any, instance: Any) -> bool:
            if not isinstance(value, str):
                return False
            if ignore_case:
                return value.casefold() in folded
            return value in names

        return self._add("is_enum_name", check, message, enum=enum_type.__name__)

    def precision_scale(self, precision: int, scale: int, message: MessageSource | None = None) -> "PropertyRule[T]":
        """Number must have at most ``precision`` significant digits, ``scale`` of them fractional."""
        if precision < 1 or scale < 0 or scale > precision:
            raise self._fail(
                f"precision_scale requires precision >= 1 and 0 <= scale <= precision, "
                f"got {precision}, {scale}"
            )

        def check(value: Any, instance: Any) -> bool:
            if value is None or isinstance(value, bool):
                return True
            if not isinstance(value, (Decimal, int, float)):
                return True
            counts = _digit_counts(value)
            if counts is None:
                return False
            digits, fraction_digits = counts
            return digits <= precision and fraction_digits <= scale

        return self._add("precision_scale", check, message, precision=precision, scale=scale)

    # Custom predicates

    def must(
        self,
        predicate: Callable[..., bool],
        message: MessageSource | None = None,
        *,
        with_instance: bool | None = None,
    ) -> "PropertyRule[T]":
        """Value must satisfy ``predicate``.

        The predicate takes either ``(value)`` or ``(instance, value)``; the
        shape is read from its signature unless ``with_instance`` is given.
        An absent value raises ``PreconditionError`` instead of being passed
        to the predicate.
        """
        if not callable(predicate):
            raise self._fail("must requires a callable predicate")

        if with_instance is None:
            arity = _positional_arity(predicate)
            if arity not in (None, 1, 2):
                raise self._fail(
                    f"must predicates take (value) or (instance, value), got {arity} parameters"
                )
            with_instance = arity == 2

        property_name = self.property_name

        def check(value: Any, instance: Any) -> bool:
            if value is None:
                raise PreconditionError(
                    f"must predicate for '{property_name}' received no value",
                    property_name=property_name,
                )
            if with_instance:
                return bool(predicate(instance, value))
            return bool(predicate(value))

        return self._add("must", check, message)

    def with_custom_validation(
        self,
        check: AtomicCheck | Callable[..., bool],
        message: MessageSource | None = None,
    ) -> "PropertyRule[T]":
        """Delegate to an external check taking ``(value)`` or ``(value, instance)``."""
        if isinstance(check, AtomicCheck):
            atomic = check
            if message is None:
                message = render_message(atomic.message, self.property_name, {})
            return self._add("custom", lambda v, _: atomic(v), message, check_name=atomic.name)

        if not callable(check):
            raise self._fail("with_custom_validation requires a callable check")

        arity = _positional_arity(check)
        if arity not in (None, 1, 2):
            raise self._fail(
                f"custom checks take (value) or (value, instance), got {arity} parameters"
            )
        external = check
        name = getattr(check, "__name__", type(check).__name__)

        if arity == 2:
            return self._add("custom", lambda v, obj: bool(external(v, obj)), message, check_name=name)
        return self._add("custom", lambda v, _: bool(external(v)), message, check_name=name)

    # Conditions

    def when(
        self,
        condition: Condition,
        configure: Callable[["PropertyRule[T]"], Any],
    ) -> "PropertyRule[T]":
        """Add the rules built by ``configure`` gated on ``condition(instance)``."""
        if not callable(condition):
            raise self._fail("when requires a callable condition")

        side = PropertyRule(self.descriptor, self._messages)
        configure(side)

        for rule in side._rules:
            self._rules.append(rule.gated(condition))

        logger.debug(
            f"Added {len(side._rules)} conditional rules to property '{self.property_name}'"
        )
        return self

    def unless(
        self,
        condition: Condition,
        configure: Callable[["PropertyRule[T]"], Any],
    ) -> "PropertyRule[T]":
        """Add the rules built by ``configure`` gated on ``not condition(instance)``."""
        if not callable(condition):
            raise self._fail("unless requires a callable condition")
        return self.when(lambda instance: not condition(instance), configure)

    # Evaluation

    def validate(self, instance: T) -> list[ValidationFailure]:
        """Evaluate every active rule against the instance.

        The property value is read once and shared by all rules. Every active
        rule runs, in declaration order, regardless of earlier failures.
        """
        value = self.descriptor.extract(instance)
        failures: list[ValidationFailure] = []

        for rule in self._rules:
            if not rule.is_active(instance):
                continue
            failure = rule.evaluate(self.property_name, value, instance)
            if failure is not None:
                failures.append(failure)

        return failures

    def describe(self) -> list[dict[str, Any]]:
        """Describe the configured rules, for listings."""
        return [
            {
                "property": self.property_name,
                "kind": rule.kind,
                "conditional": rule.conditional,
                "message": rule.describe_message(),
            }
            for rule in self._rules
        ]
