class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when an entry violates a structural or temporal rule."""


class ParseError(DomainError):
    """Raised when a bulk-import line cannot be split into fields."""


class PersistenceError(DomainError):
    """Raised by storage backends when a remote save/delete/load fails."""


class ConfigurationError(DomainError):
    """Raised at startup when settings are unusable."""
