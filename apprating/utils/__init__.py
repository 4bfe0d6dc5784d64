"""Logging and exception helpers."""
