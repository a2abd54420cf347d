class DomainError(Exception):
    """Base exception for errors raised outside the rejection flow."""


class ValidationError(DomainError):
    """Raised when raw input (HTTP payloads, settings) cannot be parsed."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""
