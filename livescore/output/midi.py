"""MIDI export functionality."""

import pretty_midi
from pathlib import Path

from ..core import Stave
from ..core.constants import DEFAULT_BEATS_PER_MEASURE, DEFAULT_TATUM, DEFAULT_TEMPO
from .layout import ScoreLayout


class MIDIExporter:
    """Export a laid-out score to MIDI, one instrument per stave."""

    def __init__(
        self,
        tempo: float = DEFAULT_TEMPO,
        tatum_units_per_beat: int = DEFAULT_TATUM,
        beats_per_measure: int = DEFAULT_BEATS_PER_MEASURE,
        instrument_program: int = 0,
        velocity: int = 80,
    ):
        """
        Initialize MIDIExporter.

        Args:
            tempo: Tempo in BPM
            tatum_units_per_beat: Grid units per beat used when quantizing
            beats_per_measure: Beats per measure
            instrument_program: MIDI program number (0-127)
            velocity: Velocity given to every note
        """
        self.tempo = tempo
        self.tatum_units_per_beat = tatum_units_per_beat
        self.beats_per_measure = beats_per_measure
        self.instrument_program = instrument_program
        self.velocity = velocity

    @property
    def tatum_duration(self) -> float:
        """Duration of one grid unit in seconds."""
        return 60.0 / self.tempo / self.tatum_units_per_beat

    def export(self, layout: ScoreLayout, output_path: str) -> None:
        """
        Export a score layout to a MIDI file.

        Args:
            layout: ScoreLayout filled by a session
            output_path: Path to output MIDI file
        """
        midi = self.layout_to_pretty_midi(layout)

        # Ensure output directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        midi.write(str(output_path))

    def layout_to_pretty_midi(self, layout: ScoreLayout) -> pretty_midi.PrettyMIDI:
        """Convert a score layout to a PrettyMIDI object without saving."""
        midi = pretty_midi.PrettyMIDI(initial_tempo=self.tempo)

        instruments = {
            Stave.UPPER: pretty_midi.Instrument(program=self.instrument_program, name="Treble"),
            Stave.LOWER: pretty_midi.Instrument(program=self.instrument_program, name="Bass"),
        }

        tatum = self.tatum_duration
        for note, units in layout.grid_timeline(self.tatum_units_per_beat, self.beats_per_measure):
            start = units * tatum
            length = ScoreLayout.note_units(note.note_type, self.tatum_units_per_beat) * tatum
            instruments[note.stave].notes.append(
                pretty_midi.Note(
                    velocity=self.velocity,
                    pitch=note.pitch,
                    start=start,
                    end=start + length,
                )
            )

        for instrument in instruments.values():
            if instrument.notes:
                midi.instruments.append(instrument)
        return midi
