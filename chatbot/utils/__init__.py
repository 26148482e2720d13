"""Shared utilities: logging setup and exception types."""
