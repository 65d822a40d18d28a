"""Middleware package for request processing.

This package contains HTTP middleware components for service2,
including trace middleware for request tracking and logging.
"""

from __future__ import annotations
