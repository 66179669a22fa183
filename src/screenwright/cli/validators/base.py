"""Base validator classes for CLI input."""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ValidationError(Exception):
    """Raised when validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize validation error.

        Args:
            message: Error message
            field: Optional field name that failed validation
        """
        self.field = field
        super().__init__(message)


class Validator(ABC, Generic[T]):
    """Base class for input validators."""

    @abstractmethod
    def validate(self, value: Any) -> T:
        """Validate input value.

        Args:
            value: Value to validate

        Returns:
            Validated value, possibly transformed

        Raises:
            ValidationError: If validation fails
        """
        pass


class LineArrayValidator(Validator[list[str]]):
    """Validator for a JSON array of screenplay lines."""

    def validate(self, value: Any) -> list[str]:
        """Check that ``value`` is a list whose items are all strings.

        Raises:
            ValidationError: If validation fails
        """
        if not isinstance(value, list):
            raise ValidationError("Input must be a JSON array of strings", "lines")
        for index, item in enumerate(value):
            if not isinstance(item, str):
                raise ValidationError(
                    f"Line {index + 1} must be a string, got {type(item).__name__}",
                    "lines",
                )
        return value
