"""Toolkit for building your own bootloader: device interfaces, slot activation strategies and persistent boot state."""

__version__ = "0.1.0"