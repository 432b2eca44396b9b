"""
Errors raised by the diagnostics engine.
"""


class InvalidMeasurement(ValueError):
    """Raised when a measurement cannot be fed to a propagation or capacity formula."""
