"""
Exception types raised by the Microdata extractor.

Per-item anomalies (itemref recursion, reverse properties with literal values)
are recovered locally and only surface as exceptions in strict mode.
"""


class MicrodataError(Exception):
    """Base class for all extractor errors."""


class ValidationError(MicrodataError):
    """Malformed input encountered while running in strict mode."""


class RegistryError(MicrodataError):
    """A vocabulary registry description could not be loaded."""
