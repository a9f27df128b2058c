"""Quake Relay: translated JMA earthquake bulletins over HTTP."""

__version__ = "0.1.0"
