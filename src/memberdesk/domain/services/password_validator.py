"""Password validation service.

Validates a new member password against the dashboard policy:
- Minimum length (8 by default)
- At least one uppercase letter
- At least one lowercase letter
- At least one digit
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class PasswordValidationError:
    """Represents a password validation error.

    Attributes:
        field: The field name that failed.
        message: Human-readable error message.
        code: Machine-readable error code.
    """

    field: str
    message: str
    code: str


class PasswordValidator:
    """Validates password strength."""

    def __init__(
        self,
        min_length: int = 8,
        require_uppercase: bool = True,
        require_lowercase: bool = True,
        require_digit: bool = True,
    ) -> None:
        self.min_length = min_length
        self.require_uppercase = require_uppercase
        self.require_lowercase = require_lowercase
        self.require_digit = require_digit

    def validate(
        self, password: str, field: str = "new_password"
    ) -> list[PasswordValidationError]:
        """Validate a password against the policy.

        Args:
            password: The password to validate.
            field: Field name reported in errors.

        Returns:
            List of validation errors. Empty list if password is valid.
        """
        errors: list[PasswordValidationError] = []

        if len(password) < self.min_length:
            errors.append(
                PasswordValidationError(
                    field=field,
                    message=f"Password must be at least {self.min_length} characters",
                    code="password_too_short",
                )
            )

        if self.require_uppercase and not re.search(r"[A-Z]", password):
            errors.append(
                PasswordValidationError(
                    field=field,
                    message="Password must contain at least one uppercase letter",
                    code="password_no_uppercase",
                )
            )

        if self.require_lowercase and not re.search(r"[a-z]", password):
            errors.append(
                PasswordValidationError(
                    field=field,
                    message="Password must contain at least one lowercase letter",
                    code="password_no_lowercase",
                )
            )

        if self.require_digit and not re.search(r"\d", password):
            errors.append(
                PasswordValidationError(
                    field=field,
                    message="Password must contain at least one number",
                    code="password_no_digit",
                )
            )

        return errors

    def is_valid(self, password: str) -> bool:
        """Check if a password meets all requirements."""
        return not self.validate(password)


# Default validator instance
default_password_validator = PasswordValidator()
