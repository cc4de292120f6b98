"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""

from collections.abc import Mapping, Sequence

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from glyphanatomy.core.hints import FeatureHint
from glyphanatomy.domain import (
    CircleShape,
    DetectionContext,
    FeatureInstance,
    FeatureKind,
    FeatureShape,
    Glyph,
    LineShape,
    PathShape,
    PointShape,
    PolylineShape,
    RectShape,
)

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for scanning glyphs.

    Returns:
        Configured Progress instance with bar, count and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Glyphanatomy[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_font_info(font_path: str, font_type: str, glyph_count: int, upm: int) -> None:
    """Print font information.

    Args:
        font_path: Path to the font file
        font_type: Font format type (e.g., "TrueType", "OpenType")
        glyph_count: Total number of glyphs in font
        upm: Units per em value
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(font_path)
    line.append(f" ({font_type})")
    console.print(line)
    console.print(f"  {glyph_count:,} glyphs {SYM_DOT} {upm:,} UPM")


def print_glyph_info(glyph: Glyph, context: DetectionContext) -> None:
    """Print the inspected glyph and the font flags that tune detection."""
    style = "serif" if context.is_serif else "sans"
    flags = [style]
    if context.is_italic:
        flags.append(f"italic {context.italic_angle:g}°")
    if context.is_mono:
        flags.append("mono")
    bbox = glyph.bbox

    line = Text("  ")
    line.append(glyph.name, style="bold")
    line.append(f" (id {glyph.id})")
    console.print(line)
    console.print(
        f"  {bbox.width:g} × {bbox.height:g} units {SYM_DOT} weight {context.weight} "
        f"{SYM_DOT} {', '.join(flags)}"
    )


def describe_shape(shape: FeatureShape) -> str:
    """Short human readable description of an overlay shape."""
    match shape:
        case PointShape(x=x, y=y):
            return f"point ({x:.0f}, {y:.0f})"
        case LineShape(x1=x1, y1=y1, x2=x2, y2=y2):
            return f"line ({x1:.0f}, {y1:.0f}) → ({x2:.0f}, {y2:.0f})"
        case RectShape(x=x, y=y, width=w, height=h):
            return f"rect ({x:.0f}, {y:.0f}) {w:.0f} × {h:.0f}"
        case CircleShape(cx=cx, cy=cy, r=r):
            return f"circle ({cx:.0f}, {cy:.0f}) r={r:.0f}"
        case PolylineShape(points=points, closed=closed):
            kind = "polygon" if closed else "polyline"
            return f"{kind} of {len(points)} points"
        case PathShape():
            return "path"
    return type(shape).__name__


def _confidence_text(confidence: float) -> Text:
    if confidence >= 0.8:
        style = "green"
    elif confidence >= 0.6:
        style = "yellow"
    else:
        style = "red"
    return Text(f"{confidence:.2f}", style=style)


def print_feature_table(results: Mapping[FeatureKind, Sequence[FeatureInstance]]) -> None:
    """Print one row per detected instance, and a dim row for absent features."""
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Feature")
    table.add_column("Id")
    table.add_column("Confidence", justify="right")
    table.add_column("Shape")

    for feature, instances in results.items():
        if not instances:
            table.add_row(Text(feature.display_name, style="dim"), "", "", Text("—", style="dim"))
            continue
        for instance in instances:
            table.add_row(
                feature.display_name,
                instance.id,
                _confidence_text(instance.confidence),
                describe_shape(instance.shape),
            )
    console.print(table)

    found = sum(1 for instances in results.values() if instances)
    console.print(f"\n  [green]{found}[/green] of {len(results)} features found")


def print_scan_results(feature: FeatureKind, matches: Sequence[tuple[str, str, float]]) -> None:
    """Print characters whose glyph shows a feature.

    Args:
        feature: Feature that was scanned for
        matches: ``(char, glyph name, best confidence)`` tuples
    """
    console.print(f"\n[bold]{len(matches)} glyphs with {feature.display_name.lower()}[/bold]\n")
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Char")
    table.add_column("Glyph")
    table.add_column("Best", justify="right")
    for char, name, confidence in matches:
        table.add_row(char, name, _confidence_text(confidence))
    console.print(table)


def print_features_list(features: Sequence[FeatureKind], supported: set[FeatureKind]) -> None:
    """Print every known feature, marking those with a detector."""
    for feature in features:
        if feature in supported:
            console.print(f"  [green]{SYM_OK}[/green] {feature.value}")
        else:
            console.print(f"  [dim]{SYM_DOT} {feature.value} (no detector)[/dim]")


def print_hints(char: str, hints: Sequence[FeatureHint]) -> None:
    """Print the feature hints for a character."""
    console.print(f"\n[bold]Hints for {char!r}[/bold]\n")
    for hint in hints:
        marker = f"[green]{SYM_OK}[/green]" if hint.default_on else SYM_DOT
        suffix = " [dim](serif fonts)[/dim]" if hint.serif_only else ""
        console.print(f"  {marker} {hint.kind.value}{suffix}")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
