"""Score layout - Place notation events into measures on a scrolling staff.

:class:`ScoreLayout` is a notation sink: hand it to the quantizer and it
keeps every emitted note with its measure index and horizontal position,
opening a new measure (and drawing a bar line) whenever an event starts a
new bar.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..core import ColorHint, NotationEvent, Stave
from ..core.constants import DEFAULT_BEATS_PER_MEASURE, DEFAULT_MIN_BEAT_LEVEL, NOTE_TYPES

logger = logging.getLogger(__name__)

BASE_UNIT = 15.0  # minimum distance between grid positions
BAR_PADDING = 30.0


@dataclass(frozen=True)
class PlacedNote:
    """A notation event after layout."""

    pitch: int
    stave: Stave
    measure_index: int
    position_in_measure: int
    note_type: int
    x: float
    color_hint: ColorHint
    new_bar: bool = False
    barline_x: Optional[float] = None
    timestamp: float = 0.0


class ScoreLayout:
    """Collect quantized notes into measures."""

    def __init__(
        self,
        min_beat_level: int = DEFAULT_MIN_BEAT_LEVEL,
        base_unit: float = BASE_UNIT,
        start_x: float = 0.0,
    ):
        """
        Initialize ScoreLayout.

        Args:
            min_beat_level: Finest note type drawn (4, 8 or 16)
            base_unit: Spacing of one sixteenth in layout units
            start_x: Absolute x of the first measure
        """
        if min_beat_level not in NOTE_TYPES:
            raise ValueError(f"min_beat_level should be one of {NOTE_TYPES}, got {min_beat_level}")
        self.min_beat_level = min_beat_level
        self.base_unit = base_unit
        self.start_x = start_x
        self.clear()

    def clear(self) -> None:
        self.notes: List[PlacedNote] = []
        self.barlines: List[float] = []
        self.current_measure = 0
        self._measure_start: Dict[int, float] = {}
        self._cursor_x = self.start_x

    @property
    def position_spacing(self) -> float:
        """Distance between adjacent grid positions."""
        return (16 / self.min_beat_level) * self.base_unit

    def set_min_beat_level(self, min_beat_level: int) -> None:
        """Change the grid resolution; clears the score."""
        if min_beat_level not in NOTE_TYPES:
            raise ValueError(f"min_beat_level should be one of {NOTE_TYPES}, got {min_beat_level}")
        self.min_beat_level = min_beat_level
        self.clear()

    def __call__(self, event: NotationEvent) -> None:
        self.place(event)

    def place(self, event: NotationEvent) -> PlacedNote:
        """Lay out one notation event."""
        note_type = event.duration_unit
        if note_type > self.min_beat_level:
            logger.debug(
                "Note type %d is finer than min beat level %d; clamping",
                note_type,
                self.min_beat_level,
            )
            note_type = self.min_beat_level

        spacing = self.position_spacing
        barline_x = None

        if event.starts_new_bar:
            barline_x = self._close_measure(spacing)
        else:
            self._measure_start.setdefault(self.current_measure, self._cursor_x)

        x = self._measure_start[self.current_measure] + event.position_in_measure * spacing
        if x > self._cursor_x:
            self._cursor_x = x

        placed = PlacedNote(
            pitch=event.pitch,
            stave=event.stave,
            measure_index=self.current_measure,
            position_in_measure=event.position_in_measure,
            note_type=note_type,
            x=x,
            color_hint=event.color_hint,
            new_bar=event.starts_new_bar,
            barline_x=barline_x,
            timestamp=event.timestamp,
        )
        self.notes.append(placed)
        return placed

    def _close_measure(self, spacing: float) -> float:
        """Draw the bar line after the current measure and open the next one."""
        current = [n for n in self.notes if n.measure_index == self.current_measure]

        barline_position = 0.0
        if current:
            last_position = max(n.position_in_measure for n in current)
            # Smaller note type = longer note
            longest = min(n.note_type for n in current if n.position_in_measure == last_position)
            barline_position = last_position + self.min_beat_level / longest

        measure_start = self._measure_start.get(self.current_measure, self._cursor_x)
        barline_x = measure_start + barline_position * spacing + BAR_PADDING
        self.barlines.append(barline_x)

        self.current_measure += 1
        new_start = barline_x + BAR_PADDING
        self._measure_start[self.current_measure] = new_start
        self._cursor_x = new_start
        return barline_x

    def measures(self) -> "OrderedDict[int, List[PlacedNote]]":
        """Placed notes grouped by measure index, in order."""
        grouped: "OrderedDict[int, List[PlacedNote]]" = OrderedDict()
        for note in sorted(self.notes, key=lambda n: n.measure_index):
            grouped.setdefault(note.measure_index, []).append(note)
        return grouped

    def grid_timeline(
        self,
        tatum_units_per_beat: int,
        beats_per_measure: int = DEFAULT_BEATS_PER_MEASURE,
    ) -> List[Tuple[PlacedNote, int]]:
        """
        Absolute grid offset of every placed note.

        Measures are at least ``beats_per_measure`` beats long and stretch
        when a bar line arrives late.

        Returns:
            (note, grid units from the first measure) pairs in score order
        """
        bar_units = beats_per_measure * tatum_units_per_beat
        timeline = []
        measure_offset = 0
        for notes in self.measures().values():
            for note in notes:
                timeline.append((note, measure_offset + note.position_in_measure))
            longest_end = max(
                n.position_in_measure + self.note_units(n.note_type, tatum_units_per_beat)
                for n in notes
            )
            measure_offset += max(bar_units, longest_end)
        return timeline

    @staticmethod
    def note_units(note_type: int, tatum_units_per_beat: int) -> int:
        """Grid units covered by a note type (quarter note = one beat)."""
        return max(1, int(round(4 / note_type * tatum_units_per_beat)))
