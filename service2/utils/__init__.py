"""Shared utilities: logging, trace context and constants."""
