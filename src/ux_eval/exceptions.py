"""Errors surfaced by the evaluation core."""

from pydantic import ValidationError


class InvalidInputError(ValueError):
    """Input that cannot be interpreted as the expected shape at all."""

    @classmethod
    def from_validation_error(
        cls, what: str, error: ValidationError
    ) -> "InvalidInputError":
        details = "; ".join(
            f"{'.'.join(str(part) for part in e['loc']) or '<root>'}: {e['msg']}"
            for e in error.errors()
        )
        return cls(f"Invalid {what}: {details}")
