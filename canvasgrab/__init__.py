"""Capture full-resolution page images from canvas-rendered web viewers."""

__version__ = "0.1.0"
