"""Parameter normalization outcome entities."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .run_configuration import RunConfiguration


class ParameterError(Exception):
    """One configuration field whose value cannot be mapped to the wire vocabulary."""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(message)
        self.field_name = field_name
        self.message = message


class ParameterValidationError(Exception):
    """Raised when at least one configuration field failed normalization."""

    def __init__(self, errors: Sequence[ParameterError]) -> None:
        self.errors = tuple(errors)
        super().__init__("\n".join(f"- {error.message}" for error in self.errors))


@dataclass(frozen=True)
class NormalizationResult:
    """Normalized configuration, or every field error found while normalizing."""

    configuration: RunConfiguration | None
    errors: tuple[ParameterError, ...]

    @property
    def ok(self) -> bool:
        return not self.errors

    def require_valid(self) -> RunConfiguration:
        if self.errors or self.configuration is None:
            raise ParameterValidationError(self.errors)
        return self.configuration
