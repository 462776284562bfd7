"""lil: short link storage, resolution and management."""

__version__ = '0.1.0'
