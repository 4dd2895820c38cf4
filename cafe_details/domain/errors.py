"""Exceptions raised by the cafe details application."""


class CafeDetailsError(Exception):
    """Base exception for cafe details errors."""
    pass


class InvalidReviewError(CafeDetailsError):
    """A submitted review payload failed validation."""
    pass


class CafeNotFoundError(CafeDetailsError):
    """No cafe record could be resolved for a place id."""
    pass
