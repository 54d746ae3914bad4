"""Diagnostics logging package."""

from hawkward.diagnostics.logger import DiagnosticsLogger, configure_logging

__all__ = ["DiagnosticsLogger", "configure_logging"]
