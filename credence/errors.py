"""
Exception hierarchy for the Credence engine.
"""

class CredenceError(Exception):
    """Base class for all Credence errors."""
    pass

class InputError(CredenceError):
    """Raised when no analyzable content was supplied."""
    pass

class ConfigurationError(CredenceError):
    """Raised when analyzers, weights or verdict thresholds disagree.

    Indicates a deployment defect; callers should not retry.
    """
    pass

class PersistenceUnavailable(CredenceError):
    """Raised by a persistence backend when weights cannot be loaded or saved."""
    pass
