"""MusicXML export functionality.

Writes a two-stave (treble/bass) score via music21. Notes sharing an
onset on one stave become a chord; each note is cut short where the next
onset on its stave begins.
"""

from collections import defaultdict
from pathlib import Path
from typing import Dict, List

from ..core import Stave
from ..core.constants import DEFAULT_BEATS_PER_MEASURE, DEFAULT_TATUM, DEFAULT_TEMPO
from .layout import PlacedNote, ScoreLayout


class MusicXMLExporter:
    """Export a laid-out score to MusicXML via music21."""

    def __init__(
        self,
        tempo: float = DEFAULT_TEMPO,
        tatum_units_per_beat: int = DEFAULT_TATUM,
        beats_per_measure: int = DEFAULT_BEATS_PER_MEASURE,
        title: str = "Live Transcription",
    ):
        """
        Initialize MusicXMLExporter.

        Args:
            tempo: Tempo in BPM
            tatum_units_per_beat: Grid units per beat used when quantizing
            beats_per_measure: Beats per measure (x/4 time)
            title: Score title
        """
        self.tempo = tempo
        self.tatum_units_per_beat = tatum_units_per_beat
        self.beats_per_measure = beats_per_measure
        self.title = title

    def export(self, layout: ScoreLayout, output_path: str) -> None:
        """
        Export a score layout to a MusicXML file.

        Args:
            layout: ScoreLayout filled by a session
            output_path: Path to output MusicXML file
        """
        score = self.layout_to_score(layout)

        # Ensure output directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        score.write("musicxml", fp=str(output_path))

    def layout_to_score(self, layout: ScoreLayout):
        """Build a music21 Score without saving."""
        try:
            from music21 import chord, clef, metadata, meter, note as m21_note, pitch, stream
            from music21 import tempo as m21_tempo
        except ImportError:
            raise ImportError("music21 is required for MusicXML export")

        score = stream.Score()
        score.metadata = metadata.Metadata()
        score.metadata.title = self.title

        onsets: Dict[Stave, Dict[int, List[PlacedNote]]] = {
            Stave.UPPER: defaultdict(list),
            Stave.LOWER: defaultdict(list),
        }
        for placed, units in layout.grid_timeline(self.tatum_units_per_beat, self.beats_per_measure):
            onsets[placed.stave][units].append(placed)

        for stave, part_clef in ((Stave.UPPER, clef.TrebleClef()), (Stave.LOWER, clef.BassClef())):
            part = stream.Part()
            part.partName = "Treble" if stave is Stave.UPPER else "Bass"
            part.insert(0, part_clef)
            part.insert(0, meter.TimeSignature(f"{self.beats_per_measure}/4"))
            part.insert(0, m21_tempo.MetronomeMark(number=round(self.tempo)))

            starts = sorted(onsets[stave])
            for i, units in enumerate(starts):
                notes = onsets[stave][units]
                length = max(
                    ScoreLayout.note_units(n.note_type, self.tatum_units_per_beat) for n in notes
                )
                if i + 1 < len(starts):
                    length = min(length, starts[i + 1] - units)

                if len(notes) == 1:
                    element = m21_note.Note()
                    element.pitch.midi = notes[0].pitch
                else:
                    element = chord.Chord([pitch.Pitch(midi=p) for p in sorted({n.pitch for n in notes})])
                element.duration.quarterLength = self._units_to_quarters(length)
                part.insert(self._units_to_quarters(units), element)

            score.insert(0, part)

        return score

    def _units_to_quarters(self, units: int) -> float:
        """Convert grid units to quarter-note lengths."""
        return units / self.tatum_units_per_beat
