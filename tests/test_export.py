"""Tests for MIDI and MusicXML export."""

import pretty_midi
import pytest

from livescore import LiveSession
from livescore.input import Performance
from livescore.output import MIDIExporter, MusicXMLExporter


@pytest.fixture
def session():
    session = LiveSession()
    session.replay(Performance.preset())
    return session


class TestMIDIExport:
    """Test MIDI export of a laid-out score."""

    def test_tatum_duration(self):
        """One eighth-note unit at 120 BPM lasts 0.25 s."""
        assert MIDIExporter(tempo=120, tatum_units_per_beat=2).tatum_duration == pytest.approx(0.25)

    def test_one_instrument_per_stave(self, session):
        """Treble and bass become separate instruments."""
        midi = MIDIExporter().layout_to_pretty_midi(session.layout)

        names = sorted(inst.name for inst in midi.instruments)
        assert names == ["Bass", "Treble"]
        assert sum(len(inst.notes) for inst in midi.instruments) == 16

    def test_note_times_follow_grid(self, session):
        """Note starts follow the measure timeline."""
        midi = MIDIExporter().layout_to_pretty_midi(session.layout)
        bass = next(inst for inst in midi.instruments if inst.name == "Bass")

        starts = {(n.pitch, round(n.start, 3)) for n in bass.notes}
        # First measure holds 15 grid units (longer than a 4/4 bar)
        assert (60, 0.0) in starts
        assert (57, 3.75) in starts

    def test_empty_stave_skipped(self):
        """Staves without notes are left out."""
        session = LiveSession(separate_hands=False)
        session.quantizer.add_note_onset(72, "treble", 0.0)
        session.quantizer.add_beat_detection(0.0, True)
        session.quantizer.flush_pending()

        midi = MIDIExporter().layout_to_pretty_midi(session.layout)

        assert [inst.name for inst in midi.instruments] == ["Treble"]

    def test_export_writes_file(self, session, tmp_path):
        """The MIDI file is written and loads back."""
        output_path = tmp_path / "nested" / "score.mid"

        MIDIExporter(tempo=session.bpm).export(session.layout, str(output_path))

        assert output_path.exists()
        loaded = pretty_midi.PrettyMIDI(str(output_path))
        assert sum(len(inst.notes) for inst in loaded.instruments) == 16


class TestMusicXMLExport:
    def test_score_has_two_parts(self, session):
        """The score has a treble and a bass part."""
        pytest.importorskip("music21")

        score = MusicXMLExporter(title="Preset").layout_to_score(session.layout)

        assert len(score.parts) == 2
        assert score.metadata.title == "Preset"

    def test_export_writes_file(self, session, tmp_path):
        """The MusicXML file is written."""
        pytest.importorskip("music21")
        output_path = tmp_path / "score.musicxml"

        MusicXMLExporter().export(session.layout, str(output_path))

        assert output_path.exists()
        assert "<score-partwise" in output_path.read_text()

    def test_units_to_quarters(self):
        """Grid units convert to quarter lengths."""
        assert MusicXMLExporter(tatum_units_per_beat=4)._units_to_quarters(6) == 1.5
