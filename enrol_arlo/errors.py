"""Exceptions raised by the Arlo enrolment plugin."""


class EnrolArloError(Exception):
    """Base class for plugin errors."""


class ConfigurationError(EnrolArloError):
    """Raised when a required configuration value cannot be resolved.

    For example the deferred ``roleid`` default when the site has no role
    with the ``student`` archetype.
    """


class CodingError(EnrolArloError):
    """Raised on programmer misuse, such as an unknown config property."""
