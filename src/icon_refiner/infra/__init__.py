"""Các tiện ích hạ tầng như logging."""

from .logging import configure_logging

__all__ = ["configure_logging"]
