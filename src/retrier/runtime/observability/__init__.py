"""Observability for retry execution: logging configuration."""

from .logging import ROOT_LOGGER, JsonFormatter, TextFormatter, configure_from_settings, configure_logging

__all__ = [
    "ROOT_LOGGER",
    "JsonFormatter",
    "TextFormatter",
    "configure_from_settings",
    "configure_logging",
]
