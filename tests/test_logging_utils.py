# ABOUTME: Test suite for logging setup, timers and timing trees
# ABOUTME: Verifies levels, handler replacement and color stripping

import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from scene_info.utils import Timer, TimingStats, setup_logging, strip_colors
from scene_info.utils.logging_utils import COLORS, ColoredFormatter, LOGGER_NAME, RESET


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_levels(self):
        """Test verbose and quiet levels."""
        assert setup_logging(verbose=True).level == logging.DEBUG
        assert setup_logging(quiet=True).level == logging.WARNING
        assert setup_logging().level == logging.INFO

    def test_single_handler(self):
        """Test that repeated setup doesn't stack handlers."""
        setup_logging()
        logger = setup_logging()

        assert logger.name == LOGGER_NAME
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_colored_formatter(self):
        """Test that colored level names strip back to plain ones."""
        logger = setup_logging(color=True)
        assert isinstance(logger.handlers[0].formatter, ColoredFormatter)

        record = logging.LogRecord(LOGGER_NAME, logging.ERROR, __file__, 1, "boom", None, None)
        text = ColoredFormatter('%(levelname)s %(message)s').format(record)

        assert text == f"{COLORS['red']}ERROR{RESET} boom"
        assert strip_colors(text) == "ERROR boom"


class TestTiming:
    """Tests for Timer and TimingStats."""

    def test_timer_measures(self):
        """Test that the timer records elapsed time."""
        with Timer("step", logging.getLogger("test"), level=logging.DEBUG) as timer:
            sum(range(1000))

        assert timer.elapsed is not None
        assert timer.elapsed >= 0

    def test_format_tree(self):
        """Test the timing tree layout."""
        stats = TimingStats("Asset info", 2.0)
        stats.add_substep("Fetch", 1.5)
        stats.add_substep("Render", 0.5)
        lines = stats.format_tree(2.0).split('\n')

        assert len(lines) == 3
        assert lines[0].startswith("Asset info ")
        assert lines[0].endswith("2.0s (100.0%)")
        assert lines[1].startswith("  Fetch ")
        assert lines[1].endswith("1.5s ( 75.0%)")
        assert lines[2].endswith("500ms ( 25.0%)")
