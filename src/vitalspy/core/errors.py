"""Exceptions raised by the vitalspy core."""


class ConfigurationError(ValueError):
    """Raised when thresholds, weights or triage bounds are invalid.

    Configuration is validated when it is constructed, so this is raised
    before any observation entry can be ingested.
    """
