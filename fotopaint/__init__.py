"""Raster photo editing: a photo workspace, painting tools, raster primitives and dialog helpers."""

__version__ = "0.1.0"