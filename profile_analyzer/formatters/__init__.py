"""Output formatting helpers."""

from .time_formatter import format_time

__all__ = ["format_time"]
