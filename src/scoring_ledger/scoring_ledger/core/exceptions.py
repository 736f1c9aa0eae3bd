class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced student does not exist."""


class ConfigurationError(DomainError):
    """Raised when the scoring rule table is missing or malformed."""


class NoScoringRuleError(ConfigurationError):
    """Raised when no scoring condition exists for an event type."""


class StorageError(DomainError):
    """Raised when a store read or write fails."""
