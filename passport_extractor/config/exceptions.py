class ConfigurationError(ValueError):
    """Raised when the application cannot be built from its settings."""
