"""Output layer - Notation layout and export.

This layer turns the quantized note stream into a score:
- Measure layout and bar lines (the notation sink)
- MIDI files
- MusicXML (for notation software)
"""

from .layout import ScoreLayout, PlacedNote
from .midi import MIDIExporter
from .musicxml import MusicXMLExporter

__all__ = [
    "ScoreLayout",
    "PlacedNote",
    "MIDIExporter",
    "MusicXMLExporter",
]
