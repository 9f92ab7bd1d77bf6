"""
Logging utilities for the asset info report.

Provides console logging setup, ANSI colors shared with the report output,
and timing of report phases.
"""

import logging
import re
import time
from typing import Optional, List
from dataclasses import dataclass, field


LOGGER_NAME = 'scene_info'

# ANSI color codes
COLORS = {
    'cyan': '\033[36m',
    'white': '\033[37m',
    'yellow': '\033[33m',
    'red': '\033[31m',
    'magenta': '\033[35m',
}
BOLD = '\033[1m'
RESET = '\033[0m'

_ANSI_PATTERN = re.compile(r'\033\[[0-9;]*m')


def strip_colors(text: str) -> str:
    """Remove ANSI color codes from text."""
    return _ANSI_PATTERN.sub('', text)


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for different log levels."""

    LEVEL_COLORS = {
        'DEBUG': COLORS['cyan'],
        'INFO': COLORS['white'],
        'WARNING': COLORS['yellow'],
        'ERROR': COLORS['red'],
        'CRITICAL': COLORS['magenta'],
    }

    def format(self, record):
        # Add color to level name
        if record.levelname in self.LEVEL_COLORS:
            record.levelname = f"{self.LEVEL_COLORS[record.levelname]}{record.levelname}{RESET}"
        return super().format(record)


def setup_logging(verbose: bool = False, quiet: bool = False,
                  color: bool = False) -> logging.Logger:
    """
    Configure logging for the report tool.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Only show WARNING and above
        color: Color the level names

    Returns:
        Configured logger
    """
    # Determine log level
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # Console handler writes to stderr, keeping stdout for the report
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    formatter_class = ColoredFormatter if color else logging.Formatter
    formatter = formatter_class(
        '[%(asctime)s] [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Prevent propagation to root logger
    logger.propagate = False

    return logger


class Timer:
    """Context manager for timing operations with automatic logging."""

    def __init__(self, name: str, logger: Optional[logging.Logger] = None,
                 level: int = logging.INFO):
        """
        Initialize timer.

        Args:
            name: Name of the operation being timed
            logger: Logger to use (defaults to the scene_info logger)
            level: Level to log start and completion at
        """
        self.name = name
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.level = level
        self.start_time = None
        self.elapsed = None

    def __enter__(self):
        """Start timing."""
        self.start_time = time.perf_counter()
        self.logger.log(self.level, "[TIMER] %s started...", self.name)
        return self

    def __exit__(self, *args):
        """Stop timing and log result."""
        self.elapsed = time.perf_counter() - self.start_time
        self.logger.log(self.level, "[OK] %s complete in %.3fs", self.name, self.elapsed)


@dataclass
class TimingStats:
    """Track timing statistics for report phases."""

    name: str
    elapsed: float
    substeps: List['TimingStats'] = field(default_factory=list)

    def add_substep(self, name: str, elapsed: float):
        """Add a substep timing."""
        self.substeps.append(TimingStats(name, elapsed))

    def get_percentage(self, total: float) -> float:
        """Get percentage of total time."""
        return (self.elapsed / total * 100) if total > 0 else 0

    def format_tree(self, total_time: float, indent: int = 0) -> str:
        """Format as a tree structure."""
        lines = []
        prefix = "  " * indent
        pct = self.get_percentage(total_time)

        # Format time with appropriate precision
        if self.elapsed < 1:
            time_str = f"{self.elapsed*1000:.0f}ms"
        else:
            time_str = f"{self.elapsed:.1f}s"

        # Main line
        dots = "." * max(1, 50 - len(prefix) - len(self.name))
        lines.append(f"{prefix}{self.name} {dots} {time_str:>8} ({pct:>5.1f}%)")

        # Substeps
        for substep in self.substeps:
            lines.extend(substep.format_tree(total_time, indent + 1).split('\n'))

        return '\n'.join(lines)
