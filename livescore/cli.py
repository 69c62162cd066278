"""Command-line interface for livescore.

Provides commands for:
- replay: Run a recorded performance through the live quantizer
- export: Replay and write the score to MIDI or MusicXML
- info: Show information about a performance file
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core import ColorHint, NotationEvent, ScorifyConfig, compute_tatum

app = typer.Typer(
    name="livescore",
    help="Real-time onset quantization and bar tracking",
    rich_markup_mode="markdown",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_performance(input_file: Optional[Path], use_tracker: bool):
    """Load a performance from JSON or MIDI, or the preset if no file is given."""
    from .input import Performance

    if input_file is None:
        return Performance.preset()

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    suffix = input_file.suffix.lower()
    try:
        if suffix == ".json":
            performance = Performance.from_json(str(input_file))
        elif suffix in (".mid", ".midi"):
            performance = Performance.from_midi(str(input_file))
        else:
            console.print(f"[red]Error: Unsupported format: {suffix} (use .json, .mid)[/red]")
            raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if use_tracker:
        performance.annotated = False
    return performance


def _load_config(config_file: Optional[Path], min_beat_level: int) -> ScorifyConfig:
    data: Dict[str, Any] = {"tatum_units_per_beat": compute_tatum(min_beat_level)}
    if config_file is not None:
        if not config_file.exists():
            console.print(f"[red]Error: Config file not found: {config_file}[/red]")
            raise typer.Exit(1)
        try:
            data.update(json.loads(config_file.read_text()))
            return ScorifyConfig.from_dict(data)
        except (ValueError, TypeError) as e:
            console.print(f"[red]Error: Invalid config {config_file}: {e}[/red]")
            raise typer.Exit(1)
    return ScorifyConfig.from_dict(data)


def _run_session(
    input_file: Optional[Path],
    min_beat_level: int,
    config_file: Optional[Path],
    use_tracker: bool,
    fixed_split: bool,
):
    from .input import ScriptedBeatTracker
    from .session import LiveSession

    if min_beat_level not in (4, 8, 16):
        console.print(f"[red]Error: --min-beat-level must be 4, 8 or 16, got {min_beat_level}[/red]")
        raise typer.Exit(1)

    performance = _load_performance(input_file, use_tracker)
    config = _load_config(config_file, min_beat_level)

    tracker = None
    if not performance.annotated:
        # Without a model, fall back to the beats recorded with the notes
        tracker = ScriptedBeatTracker.from_flags(
            [None if n.beat is None else n.beat.is_downbeat for n in performance.notes]
        )

    session = LiveSession(
        tracker=tracker,
        config=config,
        min_beat_level=min_beat_level,
        separate_hands=not fixed_split,
    )
    emitted = session.replay(performance)
    return performance, session, emitted


@app.command()
def replay(
    input_file: Optional[Path] = typer.Argument(
        None, help="Performance file (.json or .mid). Omit for the built-in preset"
    ),
    min_beat_level: int = typer.Option(
        8, "-l", "--min-beat-level", help="Finest note type drawn: 4, 8 or 16"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "-c", "--config", help="JSON file with quantizer settings"
    ),
    use_tracker: bool = typer.Option(
        False, "--tracker", help="Route beats through the beat tracker and thresholds"
    ),
    fixed_split: bool = typer.Option(
        False, "--fixed-split", help="Split staves at middle C instead of tracking hands"
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Verbose output"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
):
    """Replay a performance through the live quantizer and show the score.

    **Examples:**

        livescore replay

        livescore replay take1.mid -l 16

        livescore replay take1.json --json
    """
    _setup_logging(verbose)
    performance, session, emitted = _run_session(
        input_file, min_beat_level, config_file, use_tracker, fixed_split
    )

    if json_output:
        result = {
            "input": str(input_file) if input_file else "preset",
            "notes_count": len(performance),
            "emitted_count": len(emitted),
            "measures": len(session.layout.measures()),
            "bpm": round(session.bpm, 2),
            "events": [_event_to_dict(e) for e in emitted],
        }
        console.print_json(data=result)
        return

    _show_layout_table(session.layout)
    console.print(
        f"[green]{len(emitted)} of {len(performance)} notes placed in "
        f"{len(session.layout.measures())} measures, {session.bpm:.1f} BPM[/green]"
    )
    pending = session.quantizer.pending_count
    if pending:
        console.print(f"[yellow]{pending} notes still waiting for a beat[/yellow]")


@app.command()
def export(
    input_file: Optional[Path] = typer.Argument(
        None, help="Performance file (.json or .mid). Omit for the built-in preset"
    ),
    output: Path = typer.Option(
        ..., "-o", "--output", help="Output file (.mid or .musicxml/.xml)"
    ),
    min_beat_level: int = typer.Option(
        8, "-l", "--min-beat-level", help="Finest note type drawn: 4, 8 or 16"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "-c", "--config", help="JSON file with quantizer settings"
    ),
    beats_per_measure: int = typer.Option(
        4, "-b", "--beats-per-measure", help="Beats per measure (x/4 time)"
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Verbose output"
    ),
):
    """Replay a performance and export the quantized score."""
    from .output import MIDIExporter, MusicXMLExporter

    _setup_logging(verbose)
    performance, session, emitted = _run_session(
        input_file, min_beat_level, config_file, use_tracker=False, fixed_split=False
    )

    suffix = output.suffix.lower()
    if suffix in (".mid", ".midi"):
        exporter = MIDIExporter(
            tempo=session.bpm,
            tatum_units_per_beat=session.tatum_units_per_beat,
            beats_per_measure=beats_per_measure,
        )
    elif suffix in (".musicxml", ".xml"):
        exporter = MusicXMLExporter(
            tempo=session.bpm,
            tatum_units_per_beat=session.tatum_units_per_beat,
            beats_per_measure=beats_per_measure,
            title=performance.title,
        )
    else:
        console.print(f"[red]Error: Unsupported output format: {suffix}[/red]")
        raise typer.Exit(1)

    console.print(f"[blue]Exporting to:[/blue] {output}")
    try:
        exporter.export(session.layout, str(output))
    except ImportError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Export complete![/green] {len(emitted)} notes")


@app.command()
def info(
    input_file: Path = typer.Argument(..., help="Performance file (.json or .mid)"),
):
    """Show information about a performance file."""
    performance = _load_performance(input_file, use_tracker=False)

    console.print(f"\n[bold]Performance:[/bold] {performance.title}")
    console.print(f"  Notes: {len(performance)}")
    console.print(f"  Duration: {performance.duration_ms / 1000.0:.2f} seconds")
    console.print(f"  Annotated beats: {performance.beat_count}")
    console.print(f"  Annotated downbeats: {performance.downbeat_count}")


def _event_to_dict(event: NotationEvent) -> Dict[str, Any]:
    return {
        "pitch": event.pitch,
        "stave": event.stave.value,
        "new_bar": event.starts_new_bar,
        "position": event.position_in_measure,
        "duration": event.duration_unit,
        "color": event.color_hint.value,
        "timestamp": event.timestamp,
    }


def _show_layout_table(layout) -> None:
    """Display placed notes in a table."""
    table = Table(title="Quantized Notes")
    table.add_column("Measure", style="cyan")
    table.add_column("Position", style="green")
    table.add_column("Pitch", style="yellow")
    table.add_column("Stave", style="magenta")
    table.add_column("Time (ms)")
    table.add_column("Bar")

    for placed in layout.notes:
        table.add_row(
            str(placed.measure_index),
            str(placed.position_in_measure),
            str(placed.pitch),
            placed.stave.value,
            f"{placed.timestamp:.0f}",
            "|" if placed.new_bar else "",
            style="bold" if placed.color_hint is ColorHint.ON_BEAT else None,
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
