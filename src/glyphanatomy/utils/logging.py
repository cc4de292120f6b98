"""Logging utilities for glyphanatomy."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog

HANDLER_PREFIX = "glyphanatomy."


@dataclass
class DetectionStats:
    """Statistics from a detection run."""

    glyphs_inspected: int = 0
    glyphs_skipped: int = 0
    features_found: int = 0
    detector_failures: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    errors: list[tuple[str, str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate run duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure structured logging over the standard library.

    Args:
        log_file: Path to a log file; no file output when None
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output entirely

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Handlers from an earlier call are replaced, not stacked
    for handler in list(root_logger.handlers):
        if (handler.get_name() or "").startswith(HANDLER_PREFIX):
            root_logger.removeHandler(handler)
            handler.close()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        root_logger.addHandler(_handler(file_handler, "file", file_level))

    if not quiet:
        root_logger.addHandler(_handler(logging.StreamHandler(), "console", console_level))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("glyphanatomy")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


def _handler(handler: logging.Handler, kind: str, level: str) -> logging.Handler:
    handler.set_name(HANDLER_PREFIX + kind)
    handler.setLevel(getattr(logging, level.upper()))
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


class DetectionLogger:
    """Logger for tracking detection progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = DetectionStats()

    def log_glyph_start(self, glyph_name: str) -> None:
        """Log start of glyph inspection."""
        self._logger.debug("Inspecting glyph", glyph=glyph_name)

    def log_glyph_complete(
        self,
        glyph_name: str,
        features_found: int,
        duration_ms: float,
    ) -> None:
        """Log a finished glyph."""
        self._logger.info(
            "Glyph inspected",
            glyph=glyph_name,
            features=features_found,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.glyphs_inspected += 1
        self._stats.features_found += features_found

    def log_glyph_skipped(self, glyph_name: str, reason: str) -> None:
        """Log skipped glyph."""
        self._logger.debug("Glyph skipped", glyph=glyph_name, reason=reason)
        self._stats.glyphs_skipped += 1

    def log_detector_failure(
        self,
        glyph_name: str,
        feature: str,
        error: str,
        error_type: str | None = None,
    ) -> None:
        """Log a detector that raised."""
        self._logger.error(
            "Detector failed",
            glyph=glyph_name,
            feature=feature,
            error=error,
            error_type=error_type,
        )
        self._stats.detector_failures += 1
        self._stats.errors.append((glyph_name, feature, error))

    def log_cache_usage(self, hits: int, misses: int) -> None:
        """Record geometry cache hit and miss counts."""
        self._logger.debug("Geometry cache usage", hits=hits, misses=misses)
        self._stats.cache_hits = hits
        self._stats.cache_misses = misses

    @property
    def stats(self) -> DetectionStats:
        """Get current detection statistics."""
        return self._stats
