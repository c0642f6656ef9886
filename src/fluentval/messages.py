"""Default message templates for the built-in rule kinds.

Templates use ``str.format`` fields: ``{property}`` is the property name and
the remaining fields are the constraint parameters of the rule.
"""

from collections.abc import Mapping

from .errors import ConfigurationError

DEFAULT_MESSAGES: dict[str, str] = {
    "required": "{property} is required.",
    "not_null": "{property} cannot be null.",
    "not_empty": "{property} cannot be empty.",
    "empty": "{property} must be empty.",
    "null": "{property} must be null.",
    "min_length": "{property} must be at least {length} characters.",
    "max_length": "{property} cannot exceed {length} characters.",
    "length": "{property} must be between {min} and {max} characters.",
    "matches": "{property} has an invalid format.",
    "range": "{property} must be between {min} and {max}.",
    "inclusive_between": "{property} must be between {min} and {max}.",
    "exclusive_between": "{property} must be exclusively between {min} and {max}.",
    "equal": "{property} must be equal to {value}.",
    "not_equal": "{property} must not be equal to {value}.",
    "greater_than": "{property} must be greater than {value}.",
    "greater_than_or_equal": "{property} must be greater than or equal to {value}.",
    "less_than": "{property} must be less than {value}.",
    "less_than_or_equal": "{property} must be less than or equal to {value}.",
    "is_enum": "{property} must be a valid {enum} value.",
    "is_enum_name": "{property} must be a valid name of enum {enum}.",
    "precision_scale": "{property} must have precision {precision} and scale {scale}.",
    "email": "{property} must be a valid email address.",
    "phone": "{property} must be a valid phone number.",
    "credit_card": "{property} must be a valid credit card number.",
    "must": "The specified condition was not met for {property}.",
    "custom": "{property} is invalid.",
}


def render_message(template: str, property_name: str, params: Mapping[str, object]) -> str:
    """Interpolate a template with the property name and rule parameters.

    Raises:
        ConfigurationError: If the template references an unknown field
    """
    try:
        return template.format(property=property_name, **params)
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid message template {template!r}: {e}",
            property_name=property_name,
        ) from e
