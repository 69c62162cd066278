"""Recorded performances for offline replay.

A performance is the ordered list of note-ons a player produced. Notes
may carry the beat detection that accompanied them ("annotated"
performances); otherwise a beat tracker decides during replay.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import pretty_midi

from ..core import BeatDetection, Stave
from ..core.constants import MIDI_MAX, MIDI_MIN


@dataclass(frozen=True)
class PerformedNote:
    """One note-on of a performance."""

    pitch: int  # MIDI pitch (0-127)
    timestamp_ms: float
    velocity: int = 80
    stave: Optional[Stave] = None  # None lets the hand separator decide
    beat: Optional[BeatDetection] = None

    def __post_init__(self) -> None:
        if not (MIDI_MIN <= int(self.pitch) <= MIDI_MAX):
            raise ValueError(f"pitch must be in [{MIDI_MIN}, {MIDI_MAX}], got {self.pitch}")
        if not (MIDI_MIN <= int(self.velocity) <= MIDI_MAX):
            raise ValueError(f"velocity must be in [{MIDI_MIN}, {MIDI_MAX}], got {self.velocity}")


@dataclass
class Performance:
    """An ordered note-on stream."""

    notes: List[PerformedNote] = field(default_factory=list)
    annotated: bool = False  # True if notes carry their own beat detections
    title: str = "Performance"

    def __len__(self) -> int:
        return len(self.notes)

    @property
    def duration_ms(self) -> float:
        if not self.notes:
            return 0.0
        return self.notes[-1].timestamp_ms - self.notes[0].timestamp_ms

    @property
    def beat_count(self) -> int:
        return sum(1 for n in self.notes if n.beat is not None)

    @property
    def downbeat_count(self) -> int:
        return sum(1 for n in self.notes if n.beat is not None and n.beat.is_downbeat)

    # ------------------------------------------------------------------
    # JSON
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        notes = []
        for n in self.notes:
            entry: Dict[str, Any] = {
                "pitch": n.pitch,
                "timestamp": n.timestamp_ms,
                "velocity": n.velocity,
            }
            if n.stave is not None:
                entry["stave"] = n.stave.value
            if n.beat is not None:
                entry["beat"] = {"timestamp": n.beat.timestamp, "downbeat": n.beat.is_downbeat}
            notes.append(entry)
        return {"title": self.title, "annotated": self.annotated, "notes": notes}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Performance":
        if not isinstance(data, dict):
            raise ValueError(f"Performance data must be an object, got {type(data).__name__}")
        notes = []
        for entry in data.get("notes", []):
            beat = entry.get("beat")
            stave = entry.get("stave")
            notes.append(
                PerformedNote(
                    pitch=int(entry["pitch"]),
                    timestamp_ms=float(entry["timestamp"]),
                    velocity=int(entry.get("velocity", 80)),
                    stave=Stave(stave) if stave is not None else None,
                    beat=BeatDetection(
                        timestamp=float(beat["timestamp"]),
                        is_downbeat=bool(beat.get("downbeat", False)),
                    )
                    if beat is not None
                    else None,
                )
            )
        annotated = bool(data.get("annotated", any(n.beat is not None for n in notes)))
        return cls(notes=notes, annotated=annotated, title=str(data.get("title", "Performance")))

    @classmethod
    def from_json(cls, path: str) -> "Performance":
        """
        Load a performance from a JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the file is not a valid performance
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Performance file not found: {path}")
        try:
            data = json.loads(path.read_text())
            return cls.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid performance file {path}: {e}")

    def to_json(self, path: str) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2))

    # ------------------------------------------------------------------
    # MIDI
    # ------------------------------------------------------------------

    @classmethod
    def from_midi(
        cls,
        path: str,
        annotate_beats: bool = True,
        beat_tolerance_ms: float = 50.0,
    ) -> "Performance":
        """
        Load note-ons from a MIDI file.

        Args:
            path: Path to a .mid file
            annotate_beats: Attach detections from the file's own beat grid
                to notes starting within ``beat_tolerance_ms`` of a beat
            beat_tolerance_ms: Max distance between a note and its beat

        Returns:
            Performance with notes of all non-drum instruments, in time order
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"MIDI file not found: {path}")

        pm = pretty_midi.PrettyMIDI(str(path))
        raw = sorted(
            (n for inst in pm.instruments if not inst.is_drum for n in inst.notes),
            key=lambda n: (n.start, n.pitch),
        )

        beats_ms = np.asarray(pm.get_beats(), dtype=np.float64) * 1000.0
        downbeats_ms = np.asarray(pm.get_downbeats(), dtype=np.float64) * 1000.0

        notes = []
        for n in raw:
            t = n.start * 1000.0
            beat = None
            if annotate_beats and len(beats_ms):
                nearest = beats_ms[np.argmin(np.abs(beats_ms - t))]
                if abs(nearest - t) <= beat_tolerance_ms:
                    is_down = bool(len(downbeats_ms)) and bool(
                        np.min(np.abs(downbeats_ms - nearest)) < 1e-3
                    )
                    beat = BeatDetection(timestamp=t, is_downbeat=is_down)
            notes.append(
                PerformedNote(pitch=n.pitch, timestamp_ms=t, velocity=n.velocity, beat=beat)
            )

        return cls(notes=notes, annotated=annotate_beats, title=path.stem)

    # ------------------------------------------------------------------
    # Built-in demo
    # ------------------------------------------------------------------

    @classmethod
    def preset(cls) -> "Performance":
        """Two-hand demo phrase with a noisy beat script.

        The classifier misses the beats at 1000 and 2000 ms and fires late
        at 2500 ms, exercising missed-beat inference.
        """
        L, U = Stave.LOWER, Stave.UPPER
        notes = [
            (60, L, 0), (64, U, 0),
            (60, L, 1000), (65, U, 1000),
            (60, L, 2000), (67, U, 2000),
            (69, U, 2500),
            (59, L, 3000), (71, U, 3000),
            (67, U, 3500),
            (57, L, 4000), (72, U, 4000),
            (59, L, 5000), (74, U, 5000),
            (60, L, 6000), (76, U, 6000),
        ]
        beats = [
            (0, True), (0, True),
            None, None, None, (2500, False),
            None,
            (3000, False), (3000, False),
            None,
            (4000, True), (4000, True),
            (5000, False), (5000, False),
            (6000, False), (6000, False),
        ]
        performed = [
            PerformedNote(
                pitch=pitch,
                timestamp_ms=float(t),
                stave=stave,
                beat=BeatDetection(timestamp=float(b[0]), is_downbeat=b[1]) if b else None,
            )
            for (pitch, stave, t), b in zip(notes, beats)
        ]
        return cls(notes=performed, annotated=True, title="Preset")
