"""Exception hierarchy for the matching engine."""


class MatchingError(Exception):
    """Base exception for all matching errors."""


class MatchValidationError(MatchingError):
    """Raised when a single (property, profile) pair cannot be scored."""


class WeightConfigurationError(MatchingError):
    """Raised when the weight table is malformed."""


class EntityNotFoundError(MatchingError):
    """Raised when the anchor property or client of a run does not exist."""
