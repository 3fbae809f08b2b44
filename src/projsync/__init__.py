"""projsync: IDE project and solution generation from a host module graph."""

__version__ = "0.3.0"
