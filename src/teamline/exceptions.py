"""Custom exceptions for Teamline."""


class TeamlineError(Exception):
    """Base exception for all Teamline errors."""

    pass


class ValidationError(TeamlineError):
    """Raised when planning data fails validation."""

    pass


class MissingReferenceError(ValidationError):
    """Raised when a referenced ID does not exist."""

    pass


class ParseError(TeamlineError):
    """Raised when YAML parsing fails."""

    pass
