"""Utility helpers for the UI harness."""

from .logging_utils import InterceptHandler, configure_json_logging

__all__ = ["InterceptHandler", "configure_json_logging"]
