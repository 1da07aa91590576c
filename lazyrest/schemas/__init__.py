"""Schemas - pydantic payload types for the bundled services."""
