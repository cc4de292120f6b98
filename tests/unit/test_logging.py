"""Unit tests for logging utilities."""

import json
import logging

import pytest
import structlog

from glyphanatomy.utils import DetectionLogger, DetectionStats, configure_logging


def own_handlers():
    return [
        handler.get_name()
        for handler in logging.getLogger().handlers
        if (handler.get_name() or "").startswith("glyphanatomy.")
    ]


@pytest.fixture
def root_handlers():
    """Restore the root logger handlers after the test."""
    root = logging.getLogger()
    saved = list(root.handlers)
    yield
    for handler in root.handlers:
        if handler not in saved:
            handler.close()
    root.handlers = saved


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_file_output(self, tmp_path, root_handlers) -> None:
        """Test records reach the log file as JSON lines."""
        log_file = tmp_path / "run.log"
        logger = configure_logging(log_file=log_file, quiet=True)
        logger.info("hello", glyph="a")
        for handler in logging.getLogger().handlers:
            handler.flush()

        records = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert records[-1]["event"] == "hello"
        assert records[-1]["glyph"] == "a"
        assert records[-1]["level"] == "info"

    def test_handlers_are_replaced(self, tmp_path, root_handlers) -> None:
        """Test repeated calls keep one handler of each kind."""
        configure_logging(log_file=tmp_path / "a.log")
        configure_logging(log_file=tmp_path / "b.log")
        assert own_handlers() == ["glyphanatomy.file", "glyphanatomy.console"]

        configure_logging(quiet=True)
        assert own_handlers() == []


class TestDetectionLogger:
    """Tests for DetectionLogger statistics."""

    def test_stats(self) -> None:
        """Test counters follow the logged events."""
        detection_logger = DetectionLogger(structlog.get_logger("test"))
        detection_logger.log_glyph_start("a")
        detection_logger.log_glyph_complete("a", features_found=3, duration_ms=1.5)
        detection_logger.log_glyph_skipped("space", "empty outline")
        detection_logger.log_detector_failure("b", "bowl", "boom", "RuntimeError")
        detection_logger.log_cache_usage(hits=4, misses=2)

        stats = detection_logger.stats
        assert stats.glyphs_inspected == 1
        assert stats.features_found == 3
        assert stats.glyphs_skipped == 1
        assert stats.detector_failures == 1
        assert stats.errors == [("b", "bowl", "boom")]
        assert (stats.cache_hits, stats.cache_misses) == (4, 2)

    def test_duration(self) -> None:
        """Test duration needs both timestamps."""
        assert DetectionStats().duration_seconds == 0.0
        assert DetectionStats(start_time=10.0, end_time=12.5).duration_seconds == 2.5
