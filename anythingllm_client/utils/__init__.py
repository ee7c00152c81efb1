"""Logging and error utilities."""
