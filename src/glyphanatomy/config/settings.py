"""Configuration settings for Glyphanatomy.

Every detector threshold is a ratio applied to a glyph-relative scale
primitive (eps, bbox width/height, stem width), never an absolute font-unit
value. The ratios are empirically tuned and can be overridden per field.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class _TuningConfig(BaseModel):
    """Immutable group of tuning ratios. Override with ``model_copy(update=...)``."""

    model_config = ConfigDict(frozen=True)


class ScaleConfig(_TuningConfig):
    """Configuration for scale primitive estimation and ray casting."""

    eps_upm_ratio: float = Field(
        default=0.001,
        gt=0.0,
        le=0.1,
        description="Epsilon as a fraction of units per em",
    )
    eps_bbox_ratio: float = Field(
        default=0.001,
        gt=0.0,
        le=0.1,
        description="Epsilon as a fraction of the smaller bbox dimension",
    )
    overshoot_factor: float = Field(
        default=2.0,
        ge=1.0,
        le=10.0,
        description="Ray length as a multiple of the larger bbox dimension",
    )
    stem_percentile: float = Field(
        default=0.25,
        ge=0.0,
        lt=1.0,
        description="Percentile of span widths used as the stem width",
    )
    stem_fallback_ratio: float = Field(
        default=0.08,
        gt=0.0,
        le=1.0,
        description="Stem width as a fraction of bbox width when no spans are found",
    )
    flatten_tolerance: float = Field(
        default=0.5,
        gt=0.0,
        le=10.0,
        description="Curve flattening tolerance as a multiple of eps",
    )


class ContourConfig(_TuningConfig):
    """Configuration for contour classification."""

    mark_max_ratio: float = Field(
        default=0.3,
        gt=0.0,
        le=1.0,
        description="Marks are smaller than this fraction of glyph width and height",
    )
    mark_x_height_ratio: float = Field(
        default=0.8,
        gt=0.0,
        le=2.0,
        description="Marks start above this fraction of the x-height",
    )


class CurvatureConfig(_TuningConfig):
    """Configuration for Bezier curvature classification (at reference UPM)."""

    straight_below: float = Field(default=0.001, gt=0.0, description="Straight threshold")
    gentle_below: float = Field(default=0.01, gt=0.0, description="Gentle threshold")
    moderate_below: float = Field(default=0.05, gt=0.0, description="Moderate threshold")
    terminal_tolerance: float = Field(
        default=0.5,
        gt=0.0,
        le=5.0,
        description="Terminal segment search radius as a fraction of stem width",
    )
    terminal_t: float = Field(
        default=0.05,
        gt=0.0,
        lt=0.5,
        description="Curve parameter offset from the nearer segment end",
    )
    reference_upm: int = Field(
        default=1000,
        gt=0,
        description="UPM the thresholds above are calibrated for",
    )

    def scale_curvature(self, curvature: float, upm: int) -> float:
        """Express a curvature measured at ``upm`` at the reference UPM.

        Curvature is an inverse length, so it shrinks as the em grows.

        Args:
            curvature: Curvature in 1/design units
            upm: The actual UPM of the font

        Returns:
            Curvature scaled to the reference UPM
        """
        return curvature * (upm / self.reference_upm)


class ExtremumConfig(_TuningConfig):
    """Configuration for apex and vertex detection."""

    probe_depths: tuple[float, ...] = Field(
        default=(0.1, 0.2, 0.3),
        description="Probe distances from the glyph top/bottom as fractions of height",
    )
    probe_x_ratios: tuple[float, ...] = Field(
        default=(0.2, 0.35, 0.5, 0.65, 0.8),
        description="Probe X positions as fractions of width",
    )
    ray_length: float = Field(default=1.5, gt=0.0, description="Ray length / bbox height")
    band_depth: float = Field(
        default=0.2, gt=0.0, le=1.0, description="Hit band depth / bbox height"
    )
    band_overshoot: float = Field(
        default=0.1, ge=0.0, le=1.0, description="Band extent past the extreme / bbox height"
    )
    converge_eps: float = Field(default=20.0, ge=0.0, description="Y convergence in eps")
    converge_height: float = Field(default=0.05, ge=0.0, description="Y convergence / height")
    sharp_eps: float = Field(default=8.0, ge=0.0, description="Sharp X divergence in eps")
    sharp_width: float = Field(default=0.05, ge=0.0, description="Sharp X divergence / width")
    ridge_width: float = Field(default=0.3, ge=0.0, description="Ridge X divergence / width")
    dedupe_eps: float = Field(default=30.0, ge=0.0, description="Duplicate radius in eps")
    dedupe_width: float = Field(default=0.05, ge=0.0, description="Duplicate radius / width")
    sharp_confidence: float = Field(default=0.9, ge=0.0, le=1.0)
    ridge_confidence: float = Field(default=0.7, ge=0.0, le=1.0)


class StemConfig(_TuningConfig):
    """Configuration for stem detection."""

    uppercase_margin: float = Field(
        default=0.1, ge=0.0, description="Glyph top above x-height + this / height is a cap"
    )
    bands: int = Field(default=5, ge=3, le=20, description="Band divisions of the stem extent")
    min_thickness_stem: float = Field(default=0.6, ge=0.0, description="Min span / stem width")
    min_thickness_width: float = Field(default=0.03, ge=0.0, description="Min span / bbox width")
    group_tolerance: float = Field(default=0.5, gt=0.0, description="Mid-X grouping / stem width")
    max_drift: float = Field(default=0.3, gt=0.0, description="Mid-X std dev limit / stem width")
    width_consistency: float = Field(default=0.4, gt=0.0, description="Width std dev / mean")
    max_thickness_stem: float = Field(default=3.0, gt=0.0, description="Max span / stem width")
    min_samples: int = Field(default=2, ge=1, description="Samples needed per stem")
    base_confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    confidence_step: float = Field(default=0.1, ge=0.0, le=1.0)
    max_confidence: float = Field(default=0.9, ge=0.0, le=1.0)


class CrossbarConfig(_TuningConfig):
    """Configuration for crossbar detection."""

    band_ratios: tuple[float, ...] = Field(
        default=(0.3, 0.35, 0.4, 0.45, 0.5, 0.55, 0.6, 0.65, 0.7),
        description="Scan heights as fractions of cap-height and x-height",
    )
    samples: int = Field(default=16, ge=4, le=64, description="Thickness samples per span")
    max_thickness_stem: float = Field(
        default=1.6, gt=0.0, description="Bar thickness limit / stem width"
    )
    max_thickness_height: float = Field(
        default=0.2, gt=0.0, description="Bar thickness limit / bbox height"
    )
    min_thin_fraction: float = Field(
        default=0.5, gt=0.0, le=1.0, description="Share of a span that must be bar-thin"
    )
    max_tilt: float = Field(
        default=0.5, gt=0.0, description="Bar center Y spread limit / stem width"
    )
    min_width_stem: float = Field(default=0.3, ge=0.0, description="Min bar length / stem width")
    interior_margin: float = Field(
        default=0.05, ge=0.0, description="Bar must sit this far / height from glyph top/bottom"
    )
    group_tolerance: float = Field(default=0.08, gt=0.0, description="Y grouping / height")
    base_confidence: float = Field(default=0.6, ge=0.0, le=1.0)
    confidence_step: float = Field(default=0.1, ge=0.0, le=1.0)
    max_confidence: float = Field(default=0.9, ge=0.0, le=1.0)
    segment_tolerance: float = Field(
        default=0.15, gt=0.0, description="Fallback segment distance to mid-height / height"
    )
    segment_aspect: float = Field(
        default=3.0, gt=1.0, description="Fallback segment length / vertical drift"
    )
    segment_pair_tolerance: float = Field(
        default=0.1, gt=0.0, description="Fallback edge to filled-run mismatch / stem width"
    )
    segment_confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class ArmConfig(_TuningConfig):
    """Configuration for arm detection."""

    zone_margin: float = Field(default=0.05, ge=0.0, description="Extra zones inset / height")
    min_length_stem: float = Field(default=0.3, ge=0.0, description="Min arm length / stem width")
    max_length_width: float = Field(default=0.7, gt=0.0, description="Max arm length / width")
    edge_distance: float = Field(default=0.2, gt=0.0, description="Free end to edge / width")
    max_thickness_stem: float = Field(default=1.6, gt=0.0, description="Arm thickness / stem")
    max_thickness_height: float = Field(default=0.25, gt=0.0, description="Arm thickness / height")
    attach_tolerance: float = Field(
        default=0.5, ge=0.0, description="Attached end slack around a stem / stem width"
    )
    group_tolerance: float = Field(default=0.1, gt=0.0, description="Y grouping / height")
    base_confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    confidence_step: float = Field(default=0.1, ge=0.0, le=1.0)
    max_confidence: float = Field(default=0.85, ge=0.0, le=1.0)
    slide_step: float = Field(default=0.01, gt=0.0, description="Fallback slide step / width")
    slide_limit: float = Field(default=0.3, gt=0.0, le=1.0, description="Slide stop / width")
    slide_confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class CrotchConfig(_TuningConfig):
    """Configuration for crotch detection."""

    probe_start: float = Field(default=0.15, ge=0.0, le=0.5, description="First probe / width")
    probe_step: float = Field(default=0.05, gt=0.0, le=0.5, description="Probe step / width")
    min_probes: int = Field(default=3, ge=3, description="Profile samples required")
    min_depth: float = Field(default=0.03, gt=0.0, description="Valley depth / height")
    baseline_clearance: float = Field(
        default=0.05, ge=0.0, description="Valley height above baseline / height"
    )
    depth_scale: float = Field(default=0.1, gt=0.0, description="Depth normalizer / height")
    base_confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    depth_weight: float = Field(default=0.2, ge=0.0, le=1.0)
    max_confidence: float = Field(default=0.85, ge=0.0, le=1.0)
    v_baseline_distance: float = Field(default=0.15, gt=0.0, description="V fallback / height")
    v_min_depth: float = Field(default=0.05, gt=0.0, description="V arm rise / height")
    v_confidence: float = Field(default=0.6, ge=0.0, le=1.0)


class SpineConfig(_TuningConfig):
    """Configuration for spine detection."""

    bands: int = Field(default=9, ge=4, le=40, description="Scan levels across the body")
    margin: float = Field(default=0.1, ge=0.0, lt=0.5, description="Skipped top/bottom / height")
    min_drift: float = Field(default=0.02, ge=0.0, description="Ignored drift / width")
    min_offset: float = Field(default=0.1, gt=0.0, description="Required swing off center / width")
    min_direction_changes: int = Field(default=1, ge=1)
    base_confidence: float = Field(default=0.6, ge=0.0, le=1.0)
    confidence_step: float = Field(default=0.1, ge=0.0, le=1.0)
    max_confidence: float = Field(default=0.85, ge=0.0, le=1.0)


class ApertureConfig(_TuningConfig):
    """Configuration for aperture detection."""

    levels: int = Field(default=7, ge=3, le=40, description="Level divisions of the x-height")
    min_gap_stem: float = Field(default=0.3, gt=0.0, description="Min gap / stem width")
    min_gap_width: float = Field(default=0.05, gt=0.0, description="Min gap / width")
    edge_distance: float = Field(default=0.2, gt=0.0, description="Interior gap to edge / width")
    min_levels: int = Field(default=2, ge=1, description="Levels a gap must persist over")
    base_confidence: float = Field(default=0.4, ge=0.0, le=1.0)
    confidence_step: float = Field(default=0.1, ge=0.0, le=1.0)
    right_max_confidence: float = Field(default=0.9, ge=0.0, le=1.0)
    left_max_confidence: float = Field(default=0.85, ge=0.0, le=1.0)


class EnclosedConfig(_TuningConfig):
    """Configuration for bowl, counter, eye and loop detection."""

    bowl_sweep_step: float = Field(default=12.0, gt=0.0, le=90.0, description="Degrees")
    counter_sweep_step: float = Field(default=10.0, gt=0.0, le=90.0, description="Degrees")
    min_trace_points: int = Field(default=8, ge=3, description="Points for a bowl trace")
    counter_min_points: int = Field(default=6, ge=3, description="Points for a counter trace")
    bowl_confidence: float = Field(default=0.85, ge=0.0, le=1.0)
    bowl_circle_confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    bowl_fallback_confidence: float = Field(default=0.65, ge=0.0, le=1.0)
    counter_confidence: float = Field(default=0.85, ge=0.0, le=1.0)
    counter_trace_confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    counter_seed_confidence: float = Field(default=0.4, ge=0.0, le=1.0)
    seed_levels: tuple[float, ...] = Field(
        default=(0.5, 0.4, 0.6, 0.3, 0.7, 0.2, 0.8),
        description="Seed scan heights as fractions of bbox height, in search order",
    )
    min_seed_gap: float = Field(default=0.05, gt=0.0, description="Seed gap / width")
    eye_margin: float = Field(default=0.1, ge=0.0, description="Eye top above x-height / height")
    eye_min_height: float = Field(default=0.1, ge=0.0, description="Eye min height / height")
    eye_max_height: float = Field(default=0.6, gt=0.0, description="Eye max height / height")
    eye_max_gap: float = Field(default=0.6, gt=0.0, description="Eye seed gap limit / width")
    eye_confidence: float = Field(default=0.85, ge=0.0, le=1.0)
    eye_trace_confidence: float = Field(default=0.65, ge=0.0, le=1.0)
    eye_seed_confidence: float = Field(default=0.4, ge=0.0, le=1.0)
    loop_descender: float = Field(default=0.1, gt=0.0, description="Descender depth / height")
    loop_min_hits: int = Field(default=4, ge=2, description="Crossings through a loop")
    loop_min_points: int = Field(default=6, ge=3, description="Points for a loop polyline")
    loop_confidence: float = Field(default=0.85, ge=0.0, le=1.0)
    loop_trace_confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    loop_seed_confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class TittleConfig(_TuningConfig):
    """Configuration for tittle detection."""

    clearance_eps: float = Field(default=10.0, ge=0.0, description="Gap above x-height in eps")
    clearance_stem: float = Field(default=0.2, ge=0.0, description="Gap above x-height / stem")
    min_aspect: float = Field(default=0.6, gt=0.0, description="Min width/height ratio")
    max_aspect: float = Field(default=1.6, gt=0.0, description="Max width/height ratio")
    max_width: float = Field(default=0.4, gt=0.0, description="Max width / glyph width")
    max_height: float = Field(default=0.25, gt=0.0, description="Max height / glyph height")
    min_area_stem: float = Field(default=0.2, ge=0.0, description="Min area / stem width^2")
    max_area_bbox: float = Field(default=0.15, gt=0.0, description="Max area / bbox area")
    probe_x_ratios: tuple[float, ...] = Field(
        default=(0.5, 0.4, 0.6, 0.3, 0.7),
        description="Fallback vertical probes as fractions of width",
    )
    fallback_max_width: float = Field(
        default=0.8, gt=0.0, description="Fallback dot width / glyph width"
    )
    confidence: float = Field(default=0.9, ge=0.0, le=1.0)
    fallback_confidence: float = Field(default=0.65, ge=0.0, le=1.0)


class TerminalConfig(_TuningConfig):
    """Configuration for serif, finial, spur and ear detection."""

    nudge: float = Field(default=0.25, gt=0.0, description="Probe depth into a terminal / stem")
    reach_stem: float = Field(default=1.5, gt=0.0, description="Stroke probe depth / stem")
    reach_height: float = Field(default=0.1, gt=0.0, description="Stroke probe depth / height")
    max_stroke: float = Field(default=2.5, gt=0.0, description="Stroke width limit / stem")
    serif_min: float = Field(default=0.1, ge=0.0, description="Min serif projection / stem")
    serif_max: float = Field(default=1.5, gt=0.0, description="Max serif projection / stem")
    serif_confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    serif_context_boost: float = Field(default=0.1, ge=0.0, le=1.0)
    dedupe: float = Field(default=0.5, gt=0.0, description="Duplicate radius / stem width")
    finial_sharp: float = Field(default=0.85, ge=0.0, le=1.0)
    finial_moderate: float = Field(default=0.75, ge=0.0, le=1.0)
    finial_gentle: float = Field(default=0.65, ge=0.0, le=1.0)
    finial_straight: float = Field(default=0.5, ge=0.0, le=1.0)
    finial_unknown: float = Field(default=0.6, ge=0.0, le=1.0)
    spur_min: float = Field(default=0.15, ge=0.0, description="Min spur projection / stem")
    spur_max: float = Field(default=1.2, gt=0.0, description="Max spur projection / stem")
    spur_zone: float = Field(default=0.15, gt=0.0, description="Spur distance to baseline / height")
    spur_confidence: float = Field(default=0.6, ge=0.0, le=1.0)
    spur_curvature_boost: float = Field(default=0.1, ge=0.0, le=1.0)
    ear_band: float = Field(default=0.25, gt=0.0, le=1.0, description="Top band depth / height")
    ear_levels: int = Field(default=4, ge=1, le=20)
    ear_max_width: float = Field(default=2.0, gt=0.0, description="Ear span limit / stem")
    ear_max_drop: float = Field(
        default=0.5, gt=0.0, le=1.0, description="Ear stroke must end above this share of height"
    )
    ear_confidence: float = Field(default=0.6, ge=0.0, le=1.0)
    ear_curvature_boost: float = Field(default=0.1, ge=0.0, le=1.0)


class TailConfig(_TuningConfig):
    """Configuration for tail detection."""

    descender_ratio: float = Field(
        default=0.15, gt=0.0, description="Descender depth / (baseline - descent)"
    )
    steps: int = Field(default=6, ge=2, le=40, description="Levels between baseline and bottom")
    min_points: int = Field(default=3, ge=2)
    trace_confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    line_confidence: float = Field(default=0.55, ge=0.0, le=1.0)
    diagonal_offset: float = Field(default=0.3, gt=0.0, description="Q probe inset / width")
    diagonal_drop: float = Field(default=0.05, ge=0.0, description="Q tail depth / height")
    diagonal_confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    overlap: float = Field(default=0.1, gt=0.0, description="Overlap radius / max(width, height)")


class DetectionConfig(_TuningConfig):
    """All detector tuning parameters."""

    scale: ScaleConfig = Field(default_factory=ScaleConfig)
    contour: ContourConfig = Field(default_factory=ContourConfig)
    curvature: CurvatureConfig = Field(default_factory=CurvatureConfig)
    extremum: ExtremumConfig = Field(default_factory=ExtremumConfig)
    stem: StemConfig = Field(default_factory=StemConfig)
    crossbar: CrossbarConfig = Field(default_factory=CrossbarConfig)
    arm: ArmConfig = Field(default_factory=ArmConfig)
    crotch: CrotchConfig = Field(default_factory=CrotchConfig)
    spine: SpineConfig = Field(default_factory=SpineConfig)
    aperture: ApertureConfig = Field(default_factory=ApertureConfig)
    enclosed: EnclosedConfig = Field(default_factory=EnclosedConfig)
    tittle: TittleConfig = Field(default_factory=TittleConfig)
    terminal: TerminalConfig = Field(default_factory=TerminalConfig)
    tail: TailConfig = Field(default_factory=TailConfig)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class AnatomySettings(BaseModel):
    """Main application settings."""

    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> AnatomySettings:
    """Get default application settings."""
    return AnatomySettings()


DEFAULT_DETECTION_CONFIG = DetectionConfig()
