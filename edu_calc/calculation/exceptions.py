# Calculation error hierarchy
from typing import Optional


class CalculationError(ValueError):
    """Base class for every error a calculator reports back as text."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def __str__(self) -> str:
        return self.message


class ParseError(CalculationError):
    """Expression text could not be turned into a function."""

    def __init__(self, message: str = "Invalid function.", detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail


class DomainError(CalculationError):
    """Inputs are well formed but outside the domain of the formula."""
    pass


class EvaluationError(DomainError):
    """A parsed function could not be evaluated at a given point."""
    pass


class InputRangeError(CalculationError):
    """Inputs are individually valid but do not describe a solvable problem."""
    pass


class UnsupportedFeatureError(CalculationError):
    """The request needs functionality the engine does not provide."""
    pass


class InvalidFieldError(CalculationError):
    """A field value is missing or cannot be read as the expected type."""
    pass
