class ChatError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(ChatError, ValueError):
    """Invalid or incomplete provider configuration."""


class ClientNotInitializedError(ChatError, RuntimeError):
    """A provider was asked to send a request before its client was created."""
