"""Errors raised by the chat relay."""


class RelayError(Exception):
    """Base class for relay failures."""


class InvalidMessageError(RelayError):
    """Raised when the inbound message is missing, empty or not text."""


class ProviderError(RelayError):
    """Raised when the model provider fails to produce a completion."""
