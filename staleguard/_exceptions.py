__all__ = ("StaleguardError", "ConfigurationError")


class StaleguardError(Exception): ...


class ConfigurationError(StaleguardError):
    """
    Raised when the caller did not provide enough routing context to pick a
    template or a view. These are integration mistakes and are never retried.
    """
