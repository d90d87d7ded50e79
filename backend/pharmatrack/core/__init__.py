"""Core application primitives."""

from .exceptions import (
    PharmaTrackException,
    FetchError,
    ProxyConfigurationError,
    ExtractionError,
    NoPriceFoundError,
)

__all__ = [
    "PharmaTrackException",
    "FetchError",
    "ProxyConfigurationError",
    "ExtractionError",
    "NoPriceFoundError",
]
