"""Logging helpers."""

from profilesift.logging.setup import analysis_context, configure_logging, get_logger

__all__ = ["analysis_context", "configure_logging", "get_logger"]
