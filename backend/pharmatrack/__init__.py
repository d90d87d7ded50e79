"""PharmaTrack: price and stock tracking for Romanian online pharmacies."""

__version__ = "0.1.0"
