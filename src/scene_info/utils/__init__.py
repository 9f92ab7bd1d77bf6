"""Shared helpers for logging and timing."""

from .logging_utils import setup_logging, strip_colors, Timer, TimingStats

__all__ = ['setup_logging', 'strip_colors', 'Timer', 'TimingStats']
