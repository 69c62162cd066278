"""Live session - Wire hand separation, beat tracking and quantization.

One :class:`LiveSession` owns everything a performance needs: the hand
separator, the beat tracker, the onset quantizer and the score layout
receiving its output. Feed it note-ons as they happen (or replay a
recorded :class:`Performance`) and read the score from ``session.layout``.
"""

import logging
from typing import List, Optional

from .core import (
    BeatDetection,
    HandConfig,
    NotationEvent,
    ScorifyConfig,
    Stave,
    compute_tatum,
    is_valid_pitch,
    is_valid_timestamp,
)
from .core.constants import DEFAULT_MIN_BEAT_LEVEL, MIDDLE_C
from .inference import HandSeparator
from .input import BeatThresholds, BeatTracker, Performance, PerformedNote
from .output import ScoreLayout
from .processing import OnsetQuantizer

logger = logging.getLogger(__name__)


class LiveSession:
    """A single live transcription session."""

    def __init__(
        self,
        tracker: Optional[BeatTracker] = None,
        config: Optional[ScorifyConfig] = None,
        hand_config: Optional[HandConfig] = None,
        thresholds: Optional[BeatThresholds] = None,
        min_beat_level: int = DEFAULT_MIN_BEAT_LEVEL,
        separate_hands: bool = True,
    ):
        """
        Initialize LiveSession.

        Args:
            tracker: Beat/downbeat classifier consulted on every note-on
            config: Quantizer settings; tatum derives from min_beat_level if omitted
            hand_config: Hand separator settings
            thresholds: Probability thresholds for beats and downbeats
            min_beat_level: Finest note type drawn (4, 8 or 16)
            separate_hands: Use the hand separator; otherwise split at middle C
        """
        if config is None:
            config = ScorifyConfig(tatum_units_per_beat=compute_tatum(min_beat_level))
        self.tracker = tracker
        self.thresholds = thresholds if thresholds is not None else BeatThresholds()
        self.separate_hands = separate_hands
        self.hands = HandSeparator(hand_config)
        self.layout = ScoreLayout(min_beat_level=min_beat_level)
        self.quantizer = OnsetQuantizer(sink=self.layout, config=config)
        self._downbeat_hint = False

    @property
    def bpm(self) -> float:
        return self.quantizer.current_estimated_tempo()

    @property
    def min_beat_level(self) -> int:
        return self.layout.min_beat_level

    @property
    def tatum_units_per_beat(self) -> int:
        return self.quantizer.tatum_units_per_beat

    def tap_downbeat(self) -> None:
        """Hint that the next note falls on a downbeat (e.g. pedal tap)."""
        self._downbeat_hint = True

    def stave_for(self, pitch: int) -> Stave:
        if self.separate_hands:
            return self.hands.classify(pitch)
        return Stave.LOWER if pitch < MIDDLE_C else Stave.UPPER

    def note_on(
        self,
        pitch: int,
        velocity: int,
        timestamp_ms: float,
        stave: Optional[Stave] = None,
    ) -> List[NotationEvent]:
        """
        Handle one live note-on.

        The note is queued, the beat tracker classifies it and, on a beat,
        the queue is quantized.

        Returns:
            NotationEvents emitted because of this note
        """
        if not self._accepts(pitch, timestamp_ms, stave):
            return []
        stave = self.stave_for(pitch) if stave is None else Stave(stave)

        beat = None
        if self.tracker is not None:
            prediction = self.tracker.predict(
                timestamp_ms / 1000.0, pitch, velocity, self._downbeat_hint
            )
            self._downbeat_hint = False
            if self.thresholds.is_beat(prediction):
                beat = BeatDetection(
                    timestamp=timestamp_ms,
                    is_downbeat=self.thresholds.is_downbeat(prediction),
                )

        return self._advance(pitch, stave, timestamp_ms, beat)

    def play(self, note: PerformedNote, annotated: bool = True) -> List[NotationEvent]:
        """Replay one recorded note; annotated notes bring their own beat."""
        if not self._accepts(note.pitch, note.timestamp_ms, note.stave):
            return []
        if not annotated:
            return self.note_on(note.pitch, note.velocity, note.timestamp_ms, note.stave)
        stave = note.stave if note.stave is not None else self.stave_for(note.pitch)
        return self._advance(note.pitch, stave, note.timestamp_ms, note.beat)

    def replay(self, performance: Performance) -> List[NotationEvent]:
        """Replay a whole performance in order."""
        emitted: List[NotationEvent] = []
        for note in performance.notes:
            emitted.extend(self.play(note, annotated=performance.annotated))
        logger.info(
            "Replayed %d notes: %d emitted, %d measures, %.1f BPM",
            len(performance),
            len(emitted),
            len(self.layout.measures()),
            self.bpm,
        )
        return emitted

    def _accepts(self, pitch, timestamp_ms, stave) -> bool:
        """Validate a note-on before it touches the hands, tracker or quantizer."""
        if not is_valid_pitch(pitch):
            logger.warning("Dropping note-on: bad pitch %r", pitch)
            return False
        if not is_valid_timestamp(timestamp_ms):
            logger.warning("Dropping note-on %r: bad timestamp %r", pitch, timestamp_ms)
            return False
        if stave is not None:
            try:
                Stave(stave)
            except ValueError:
                logger.warning("Dropping note-on %r: unknown stave %r", pitch, stave)
                return False
        return True

    def _advance(
        self,
        pitch: int,
        stave: Stave,
        timestamp_ms: float,
        beat: Optional[BeatDetection],
    ) -> List[NotationEvent]:
        self.quantizer.add_note_onset(pitch, stave, timestamp_ms)
        if beat is None:
            return []
        if not self.quantizer.add_beat_detection(beat.timestamp, beat.is_downbeat):
            return []
        return self.quantizer.flush_pending()

    def set_min_beat_level(self, min_beat_level: int) -> None:
        """Change the grid resolution and start a fresh score."""
        tatum = compute_tatum(min_beat_level)
        self.reset()
        self.layout.set_min_beat_level(min_beat_level)
        self.quantizer.set_tatum_resolution(tatum)

    def reset(self) -> None:
        """Clear the score and all tracking state."""
        self.quantizer.reset()
        self.layout.clear()
        self.hands.reset()
        if self.tracker is not None:
            self.tracker.reset()
        self._downbeat_hint = False
