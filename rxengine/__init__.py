"""Prescription lifecycle and smart reorder service."""

__version__ = "1.0.0"
