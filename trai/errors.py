class ConfigurationError(RuntimeError):
    """Voice tables are inconsistent; synthesis must not proceed."""
