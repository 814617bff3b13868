"""Exceptions raised by the navigation data context."""


class XPNavError(Exception):
    """Base class for navigation data errors."""


class InvalidInstallationError(XPNavError):
    """Raised when a path does not look like a simulator installation."""


class ReloadInProgressError(XPNavError):
    """Raised when a reload is requested while another one is running."""


class AirportStoreError(XPNavError):
    """Raised when the airport store cannot be read or written."""
