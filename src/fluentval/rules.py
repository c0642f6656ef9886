"""Rule records: one check bound to a property, with an optional gate."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from .results import ValidationFailure

Check = Callable[[Any, Any], bool]
Condition = Callable[[Any], bool]
MessageSource = str | Callable[[Any, Any], str]


@dataclass(frozen=True)
class Rule:
    """A single validation check.

    Attributes:
        kind: Rule kind, e.g. ``"max_length"``; also the message template key
        check: ``(value, instance) -> bool``, True when the value passes
        message: Failure message, or ``(instance, value) -> str`` to compute it
        activation: Optional gate over the whole instance; None means always active
        params: Constraint parameters, kept for messages and descriptions
    """
    kind: str
    check: Check = field(repr=False)
    message: MessageSource
    activation: Condition | None = field(default=None, repr=False)
    params: Mapping[str, Any] = field(default_factory=dict, hash=False)

    @property
    def conditional(self) -> bool:
        return self.activation is not None

    def is_active(self, instance: Any) -> bool:
        """Whether the gate is open for this instance (evaluated per call)."""
        return self.activation is None or bool(self.activation(instance))

    def evaluate(self, property_name: str, value: Any, instance: Any) -> ValidationFailure | None:
        """Run the check and return a failure record when it does not pass."""
        if self.check(value, instance):
            return None

        message = self.message if isinstance(self.message, str) else self.message(instance, value)
        return ValidationFailure(property_name=property_name, message=message)

    def gated(self, condition: Condition) -> "Rule":
        """Return a copy of this rule that is only active when ``condition`` holds.

        An existing gate is kept: the copy is active only when both are open.
        """
        inner = self.activation
        if inner is None:
            activation = condition
        else:
            def activation(instance: Any) -> bool:
                return bool(condition(instance)) and bool(inner(instance))

        return replace(self, activation=activation)

    def describe_message(self) -> str:
        if isinstance(self.message, str):
            return self.message
        return "<computed>"
