"""
Error types raised by jobhelper.

ParseError is recovered inside link extraction and never reaches callers.
NetworkError is surfaced to the single caller whose verification failed.
ConfigError marks an invalid settings value; the scorer treats the
affected feature as disabled instead of raising.
"""


class JobHelperError(Exception):
    """Base class for all jobhelper errors."""
    pass


class ParseError(JobHelperError):
    """Raised when a search-result link cannot be normalized or parsed."""
    pass


class NetworkError(JobHelperError):
    """Raised when the search collaborator fails to return a document."""
    pass


class ConfigError(JobHelperError):
    """Raised when a configuration value is missing or invalid."""
    pass
