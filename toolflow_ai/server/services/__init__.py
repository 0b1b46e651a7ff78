"""Dependency providers for the API layer."""
