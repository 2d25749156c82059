"""Exceptions raised by the topology layout engine."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a layout request or layout configuration is invalid.

    Covers unknown topology kinds, a mesh request without a random source,
    a layout that does not belong to the supplied device list and invalid
    configuration values.
    """
