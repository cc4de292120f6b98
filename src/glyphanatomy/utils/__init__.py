"""Utility functions for glyphanatomy.

This module provides:

- Logging setup and configuration
- Detection statistics tracking
"""

from glyphanatomy.utils.logging import (
    DetectionLogger,
    DetectionStats,
    configure_logging,
)

__all__ = [
    "DetectionLogger",
    "DetectionStats",
    "configure_logging",
]
