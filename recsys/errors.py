"""Errors raised by the recommender entry points."""


class InvalidArgumentError(ValueError):
    """A required argument is missing or has the wrong shape. Raised before any work."""
