"""Tests for score layout (the notation sink)."""

import pytest

from livescore.core import ColorHint, NotationEvent, Stave
from livescore.output import ScoreLayout


def event(position, new_bar=False, duration=8, pitch=60, stave=Stave.UPPER):
    return NotationEvent(
        pitch=pitch,
        stave=stave,
        starts_new_bar=new_bar,
        position_in_measure=position,
        duration_unit=duration,
        color_hint=ColorHint.ON_BEAT,
    )


@pytest.fixture
def layout():
    return ScoreLayout(min_beat_level=8)


class TestScoreLayout:
    """Tests for measure bookkeeping and horizontal placement."""

    def test_position_spacing(self, layout):
        """Spacing scales with the minimum beat level."""
        assert layout.position_spacing == 30.0
        assert ScoreLayout(min_beat_level=16).position_spacing == 15.0

    def test_rejects_unknown_level(self):
        """Levels that are not note types are refused."""
        with pytest.raises(ValueError):
            ScoreLayout(min_beat_level=12)

    def test_first_bar_opens_measure_one(self, layout):
        """The first bar line closes an empty measure 0."""
        placed = layout.place(event(0, new_bar=True))

        assert placed.measure_index == 1
        assert placed.barline_x == 30.0
        assert placed.x == 60.0
        assert layout.barlines == [30.0]

    def test_notes_before_first_bar_stay_in_measure_zero(self, layout):
        """Notes before any bar line go in measure 0."""
        placed = layout.place(event(3))
        assert placed.measure_index == 0
        assert placed.x == 90.0

    def test_barline_follows_last_note(self, layout):
        """The bar line sits one note length after the last note."""
        layout.place(event(0, new_bar=True))
        layout.place(event(6))
        placed = layout.place(event(0, new_bar=True))

        # Last note at 6, an eighth takes one more position
        assert layout.barlines[-1] == 60.0 + 7 * 30.0 + 30.0
        assert placed.measure_index == 2
        assert placed.x == layout.barlines[-1] + 30.0

    def test_longest_note_at_last_position_sets_barline(self, layout):
        """The longest note at the last position decides the bar line."""
        layout.place(event(0, new_bar=True))
        layout.place(event(4, duration=8))
        layout.place(event(4, duration=2))
        layout.place(event(0, new_bar=True))
        # A half note spans four eighth positions
        assert layout.barlines[-1] == 60.0 + 8 * 30.0 + 30.0

    def test_finer_notes_clamped(self, layout):
        """Notes finer than the grid are drawn at the grid level."""
        placed = layout.place(event(0, duration=16))
        assert placed.note_type == 8

    def test_used_as_sink(self, layout):
        """The layout can be called like any notation sink."""
        layout(event(0, new_bar=True))
        layout(event(2))
        assert len(layout.notes) == 2

    def test_measures_grouped(self, layout):
        """Placed notes are grouped by measure."""
        layout.place(event(0, new_bar=True))
        layout.place(event(2))
        layout.place(event(0, new_bar=True))

        measures = layout.measures()

        assert list(measures) == [1, 2]
        assert len(measures[1]) == 2

    def test_set_min_beat_level_clears(self, layout):
        """Changing the level starts an empty score."""
        layout.place(event(0, new_bar=True))
        layout.set_min_beat_level(16)
        assert layout.notes == []
        assert layout.barlines == []
        assert layout.current_measure == 0
        assert layout.min_beat_level == 16


class TestGridTimeline:
    def test_full_measures(self, layout):
        """Short measures are padded to a full bar."""
        layout.place(event(0, new_bar=True))
        layout.place(event(6))
        layout.place(event(0, new_bar=True))

        offsets = [units for _, units in layout.grid_timeline(2, 4)]

        assert offsets == [0, 6, 8]

    def test_long_measure_stretches(self, layout):
        """Measures longer than a bar keep their length."""
        layout.place(event(0, new_bar=True))
        layout.place(event(10))
        layout.place(event(0, new_bar=True))

        offsets = [units for _, units in layout.grid_timeline(2, 4)]

        assert offsets == [0, 10, 11]

    def test_empty(self, layout):
        """An empty score has an empty timeline."""
        assert layout.grid_timeline(2) == []

    def test_note_units(self):
        """Grid units per note type at a given tatum."""
        assert ScoreLayout.note_units(4, 2) == 2
        assert ScoreLayout.note_units(8, 2) == 1
        assert ScoreLayout.note_units(16, 2) == 1
        assert ScoreLayout.note_units(2, 4) == 8
