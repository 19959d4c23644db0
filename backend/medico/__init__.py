"""Medico Assistant - AI healthcare companion backend."""

__version__ = "1.0.0"
