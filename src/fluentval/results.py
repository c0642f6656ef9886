"""Failure records produced by validators."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationFailure:
    """A single violated rule, attributed to the property it was declared on."""
    property_name: str
    message: str

    def __str__(self) -> str:
        return f"{self.property_name}: {self.message}"

    def to_dict(self) -> dict[str, str]:
        """Convert to the ``{propertyName, message}`` shape used for rendering."""
        return {
            "propertyName": self.property_name,
            "message": self.message,
        }


def failures_to_dict(failures: list[ValidationFailure]) -> dict:
    """Convert a failure list to a dictionary for JSON output."""
    return {
        "valid": not failures,
        "failures": [failure.to_dict() for failure in failures],
    }
