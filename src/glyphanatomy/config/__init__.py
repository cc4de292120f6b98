"""Configuration management for glyphanatomy.

This module provides configuration management using Pydantic models.
Every detector threshold lives here as a named, overridable ratio.

Key classes:
- DetectionConfig: All detector tuning groups
- LoggingConfig: Logging settings
- AnatomySettings: Main application settings
"""

from glyphanatomy.config.settings import (
    DEFAULT_DETECTION_CONFIG,
    AnatomySettings,
    ApertureConfig,
    ArmConfig,
    ContourConfig,
    CrossbarConfig,
    CrotchConfig,
    CurvatureConfig,
    DetectionConfig,
    EnclosedConfig,
    ExtremumConfig,
    LoggingConfig,
    ScaleConfig,
    SpineConfig,
    StemConfig,
    TailConfig,
    TerminalConfig,
    TittleConfig,
    get_default_settings,
)

__all__ = [
    "DEFAULT_DETECTION_CONFIG",
    "AnatomySettings",
    "ApertureConfig",
    "ArmConfig",
    "ContourConfig",
    "CrossbarConfig",
    "CrotchConfig",
    "CurvatureConfig",
    "DetectionConfig",
    "EnclosedConfig",
    "ExtremumConfig",
    "LoggingConfig",
    "ScaleConfig",
    "SpineConfig",
    "StemConfig",
    "TailConfig",
    "TerminalConfig",
    "TittleConfig",
    "get_default_settings",
]
