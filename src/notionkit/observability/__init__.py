"""Observability: structured logging and metrics hooks for notionkit."""

from __future__ import annotations

from . import metrics
from .logger import StructuredFormatter, error_fields, get_logger
from .metrics import MetricsHook, NoopMetricsHook, route

__all__ = [
    "MetricsHook",
    "NoopMetricsHook",
    "StructuredFormatter",
    "error_fields",
    "get_logger",
    "metrics",
    "route",
]
