"""
Exception types raised by the call relay.
"""


class RelayError(Exception):
    """Base class for all relay errors."""


class ConfigError(RelayError):
    """Missing or invalid configuration."""


class SessionError(RelayError):
    """Logging in to the dashboard failed."""


class FormDetectionError(SessionError):
    """The email or password field could not be found on the login page."""


class SubmitError(SessionError):
    """No submit control was found on the login page."""


class VerificationError(SessionError):
    """The post-login page did not look like an authenticated dashboard."""


class AudioFetchError(RelayError):
    """A call recording could not be downloaded."""
