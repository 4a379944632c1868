"""Decoders that turn x86 machine check register values into readable text."""

__version__ = "0.1.0"