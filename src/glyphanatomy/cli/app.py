"""CLI application entry point for glyphanatomy.

This module provides the command line interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer

from glyphanatomy import __version__
from glyphanatomy.cli.output import (
    console,
    create_progress,
    print_error,
    print_feature_table,
    print_features_list,
    print_font_info,
    print_glyph_info,
    print_header,
    print_hints,
    print_scan_results,
    print_step,
)
from glyphanatomy.config import LoggingConfig
from glyphanatomy.core import (
    AnatomySession,
    get_all_features,
    get_feature_hints,
    get_registered_features,
    is_feature_supported,
)
from glyphanatomy.domain import DetectionContext, FeatureKind, Font, Glyph
from glyphanatomy.exceptions import (
    DetectionError,
    FontLoadError,
    GlyphAnatomyError,
    GlyphNotFoundError,
)
from glyphanatomy.io import FontReader
from glyphanatomy.utils import DetectionLogger, configure_logging

# Create the Typer app
app = typer.Typer(
    name="glyphanatomy",
    help="Detect typographic anatomy (stems, bowls, serifs, apertures...) in font glyphs.",
    add_completion=False,
    no_args_is_help=True,
)

FeatureOption = Annotated[
    list[str] | None,
    typer.Option(
        "--feature",
        "-f",
        help="Feature to detect; repeat for several (default: all detectors)",
    ),
]
AxisOption = Annotated[
    list[str] | None,
    typer.Option(
        "--axis",
        "-a",
        help="Variable font axis location as TAG=VALUE, e.g. wght=700",
    ),
]
LogFileOption = Annotated[
    Path | None,
    typer.Option(
        "--log-file",
        help="Write detailed logs to file",
    ),
]
LogLevelOption = Annotated[
    str,
    typer.Option(
        "--log-level",
        help="Logging level (DEBUG|INFO|WARNING|ERROR)",
    ),
]
QuietOption = Annotated[
    bool,
    typer.Option(
        "--quiet",
        "-q",
        help="Minimal console output",
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Glyphanatomy[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Detect typographic anatomy in font glyphs."""


def parse_feature(name: str) -> FeatureKind:
    """Parse a feature id or display name given on the command line.

    Raises:
        typer.BadParameter: If the name matches no feature
    """
    try:
        return FeatureKind.from_name(name)
    except ValueError:
        raise typer.BadParameter(f"Unknown feature: {name}") from None


def parse_features(names: list[str] | None) -> list[FeatureKind] | None:
    if not names:
        return None
    return [parse_feature(name) for name in names]


def parse_axes(values: list[str] | None) -> dict[str, float] | None:
    """Parse ``TAG=VALUE`` axis settings.

    Raises:
        typer.BadParameter: If a setting is malformed
    """
    if not values:
        return None
    location = {}
    for value in values:
        tag, sep, number = value.partition("=")
        if not sep or not tag.strip():
            raise typer.BadParameter(f"Expected TAG=VALUE, got: {value}")
        try:
            location[tag.strip()] = float(number)
        except ValueError:
            raise typer.BadParameter(f"Axis value is not a number: {value}") from None
    return location


def _setup_logging(log_file: Path | None, log_level: str, quiet: bool) -> DetectionLogger:
    settings = LoggingConfig(log_file=log_file, log_level=log_level)
    logger = configure_logging(
        log_file=settings.log_file,
        console_level=settings.log_level,
        file_level=settings.file_log_level,
        quiet=quiet,
    )
    return DetectionLogger(logger)


@app.command()
def inspect(
    font_path: Annotated[
        Path,
        typer.Argument(help="Path to TTF/OTF font file", show_default=False),
    ],
    char: Annotated[
        str,
        typer.Argument(help="Character to inspect", show_default=False),
    ],
    feature: FeatureOption = None,
    axis: AxisOption = None,
    hinted: Annotated[
        bool,
        typer.Option(
            "--hinted",
            help="Only detect the features hinted for the character",
        ),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print results as JSON",
        ),
    ] = False,
    strict: Annotated[
        bool,
        typer.Option(
            "--strict",
            help="Exit with an error when any detector fails",
        ),
    ] = False,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Detect anatomical features in the glyph of one character.

    Example:
        glyphanatomy inspect Roboto-Regular.ttf a -f bowl -f stem
    """
    features = parse_features(feature)
    location = parse_axes(axis)
    detection_logger = _setup_logging(log_file, log_level, quiet or as_json)
    show = not quiet and not as_json

    if show:
        print_header(__version__)
        print_step("Loading font")

    try:
        with FontReader(font_path) as reader:
            if show:
                print_font_info(
                    font_path=str(font_path),
                    font_type=reader.format,
                    glyph_count=reader.glyph_count,
                    upm=reader.units_per_em,
                )
            font = reader.load_font(location)
            glyph = reader.get_glyph_for_char(char, location)

        session = AnatomySession(detection_logger=detection_logger)
        context = session.store.get_or_build(glyph, font, location).context
        if hinted:
            allowed = features or get_registered_features()
            features = [kind for kind in get_all_features(char, context) if kind in allowed]

        if show:
            print_step("Detecting features")
            print_glyph_info(glyph, context)

        results = session.detect(glyph, font, features=features, variation=location)

        if strict and detection_logger.stats.errors:
            glyph_name, failed, reason = detection_logger.stats.errors[0]
            raise DetectionError(failed, glyph_name, reason)

        if as_json:
            console.print_json(
                data={
                    "glyph": glyph.name,
                    "char": char,
                    "features": {
                        kind.value: [instance.to_dict() for instance in instances]
                        for kind, instances in results.items()
                    },
                }
            )
        elif quiet:
            for kind, instances in results.items():
                if instances:
                    console.print(f"{kind.value}\t{len(instances)}")
        else:
            console.print()
            print_feature_table(results)

    except FontLoadError as e:
        print_error(f"Could not load font: {e.reason}")
        raise typer.Exit(code=1)
    except GlyphNotFoundError as e:
        print_error(f"No glyph for {e.glyph_name!r}")
        raise typer.Exit(code=1)
    except GlyphAnatomyError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command()
def scan(
    font_path: Annotated[
        Path,
        typer.Argument(help="Path to TTF/OTF font file", show_default=False),
    ],
    feature: Annotated[
        str,
        typer.Option("--feature", "-f", help="Feature to look for", show_default=False),
    ],
    axis: AxisOption = None,
    min_confidence: Annotated[
        float,
        typer.Option(
            "--min-confidence",
            "-c",
            help="Ignore instances below this confidence",
            min=0.0,
            max=1.0,
        ),
    ] = 0.0,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """List every mapped character whose glyph shows a feature.

    Example:
        glyphanatomy scan Roboto-Regular.ttf -f tittle
    """
    kind = parse_feature(feature)
    location = parse_axes(axis)
    detection_logger = _setup_logging(log_file, log_level, quiet)

    if not is_feature_supported(kind):
        print_error(f"No detector for {kind.value}")
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)
        print_step("Loading font")

    matches: list[tuple[str, str, float]] = []
    try:
        with FontReader(font_path) as reader:
            font = reader.load_font(location)
            glyphs = list(reader.iter_char_glyphs(location))
            if not quiet:
                print_font_info(
                    font_path=str(font_path),
                    font_type=reader.format,
                    glyph_count=reader.glyph_count,
                    upm=reader.units_per_em,
                )
                print_step(f"Scanning {len(glyphs)} glyphs")

        session = AnatomySession(detection_logger=detection_logger)
        if quiet:
            for glyph in glyphs:
                _scan_glyph(session, glyph, font, kind, location, min_confidence, matches)
        else:
            with create_progress() as progress:
                task_id = progress.add_task("Scanning", total=len(glyphs))
                for glyph in glyphs:
                    _scan_glyph(session, glyph, font, kind, location, min_confidence, matches)
                    progress.advance(task_id)

    except FontLoadError as e:
        print_error(f"Could not load font: {e.reason}")
        raise typer.Exit(code=1)
    except GlyphAnatomyError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    if quiet:
        for char, _name, _confidence in matches:
            console.print(char)
    else:
        print_scan_results(kind, matches)


def _scan_glyph(
    session: AnatomySession,
    glyph: Glyph,
    font: Font,
    kind: FeatureKind,
    location: dict[str, float] | None,
    min_confidence: float,
    matches: list[tuple[str, str, float]],
) -> None:
    if not glyph.commands:
        if session.detection_logger:
            session.detection_logger.log_glyph_skipped(glyph.name, "empty outline")
        return
    results = session.detect(glyph, font, features=[kind], variation=location)
    confident = [i.confidence for i in results[kind] if i.confidence >= min_confidence]
    if confident:
        matches.append((glyph.char or "", glyph.name, max(confident)))


@app.command()
def features() -> None:
    """List every feature kind and whether it has a detector."""
    supported = set(get_registered_features())
    print_features_list(list(FeatureKind), supported)


@app.command()
def hints(
    char: Annotated[
        str,
        typer.Argument(help="Character to look up", show_default=False),
    ],
    serif: Annotated[
        bool,
        typer.Option("--serif", help="Include hints that only apply to serif fonts"),
    ] = False,
) -> None:
    """Show the features suggested for a character."""
    context = DetectionContext(is_serif=serif)
    print_hints(char, get_feature_hints(char, context))


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
