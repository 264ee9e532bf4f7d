"""Histogram exceptions and warnings."""

__all__ = [
    "HistogramError",
    "InvalidArgumentError",
    "DomainError",
    "OutputResizeWarning",
    "NotDifferentiableWarning",
]


class HistogramError(ValueError):
    """Base exception for histogram errors."""

    pass


class InvalidArgumentError(HistogramError):
    """Raised when the shape, dtype or count of an argument is invalid."""

    pass


class DomainError(HistogramError):
    """Raised when the outer bin edges are not finite or are inverted."""

    pass


class OutputResizeWarning(UserWarning):
    """Warning when a non-empty ``out`` tensor has to be resized."""

    pass


class NotDifferentiableWarning(UserWarning):
    """Warning when a histogram is computed from tensors requiring grad."""

    pass
