"""Onset quantization - Map live note onsets onto a beat-relative grid.

The quantizer buffers note onsets until a beat detection arrives, then
places every buffered note between the previous beat and the new one by
linear interpolation in time. It also tracks where measures start, so
each emitted note carries its position in the current measure and a
flag for the first note of a new bar.

Nothing emitted is ever revised and nothing in the live path raises:
bad input is logged and dropped, and a missing or failing sink only
skips the emission.
"""

import logging
from numbers import Integral
from typing import Callable, List, Optional, Union

from ..analysis import BeatGrouper, TempoEstimator, round_half_up
from ..core import (
    ColorHint,
    NotationEvent,
    NoteEvent,
    ScorifyConfig,
    Stave,
    is_valid_pitch,
    is_valid_timestamp,
)

logger = logging.getLogger(__name__)

NotationSink = Callable[[NotationEvent], None]


class OnsetQuantizer:
    """Real-time onset quantizer and bar tracker.

    Typical use, once per performed note::

        quantizer.add_note_onset(pitch, stave, t)
        if beat_detected:
            quantizer.add_beat_detection(t, is_downbeat)
            quantizer.flush_pending()
    """

    def __init__(
        self,
        sink: Optional[NotationSink] = None,
        config: Optional[ScorifyConfig] = None,
    ):
        """
        Initialize OnsetQuantizer.

        Args:
            sink: Callable receiving each NotationEvent as it is finalized
            config: Optional ScorifyConfig for tuning constants
        """
        self.sink = sink
        self.config = config if config is not None else ScorifyConfig()
        self._tatum = int(self.config.tatum_units_per_beat)
        self._init_state()

    def _init_state(self) -> None:
        cfg = self.config
        self._pending: List[NoteEvent] = []
        self._grouper = BeatGrouper(grouping_window_ms=cfg.grouping_window_ms)
        self._tempo = TempoEstimator(
            default_interval_ms=cfg.default_interval_ms,
            max_tempo_jump=cfg.max_tempo_jump,
            smoothing=cfg.tempo_smoothing,
            debounce_floor_ms=cfg.debounce_floor_ms,
        )
        self._measure_position = 0
        self._last_group_index = -1
        self._bar_emitted_for_group = False
        self._session_start = True

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def measure_grid_position(self) -> int:
        """Grid offset of the current beat within the current measure."""
        return self._measure_position

    @property
    def tatum_units_per_beat(self) -> int:
        return self._tatum

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def smoothed_interval(self) -> float:
        return self._tempo.smoothed_interval

    @property
    def last_beat_time(self) -> Optional[float]:
        return self._tempo.last_beat_time

    @property
    def beat_group_count(self) -> int:
        return len(self._grouper)

    @property
    def is_session_start(self) -> bool:
        return self._session_start

    def current_estimated_tempo(self) -> float:
        """Current tempo in BPM (60000 / smoothed interval)."""
        return self._tempo.bpm

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def add_note_onset(self, pitch: int, stave: Union[Stave, str], timestamp: float) -> bool:
        """
        Queue a note onset for the next drain.

        Returns:
            False if the event was malformed and dropped
        """
        if not is_valid_timestamp(timestamp):
            logger.warning("Dropping note %r: bad timestamp %r", pitch, timestamp)
            return False
        if not is_valid_pitch(pitch):
            logger.warning("Dropping note: bad pitch %r", pitch)
            return False
        try:
            stave = Stave(stave)
        except ValueError:
            logger.warning("Dropping note %d: unknown stave %r", pitch, stave)
            return False

        self._pending.append(NoteEvent(pitch=int(pitch), stave=stave, timestamp=float(timestamp)))
        return True

    def add_beat_detection(self, timestamp: float, is_downbeat: bool = False) -> bool:
        """
        Fold a positive beat detection into the beat groups.

        Returns:
            False if the detection was malformed and dropped
        """
        if not is_valid_timestamp(timestamp):
            logger.warning("Dropping beat detection: bad timestamp %r", timestamp)
            return False
        self._grouper.observe(float(timestamp), bool(is_downbeat))
        return True

    def set_tatum_resolution(self, units_per_beat: int) -> bool:
        """Change the number of grid units per beat for later drains."""
        if isinstance(units_per_beat, bool) or not isinstance(units_per_beat, Integral) or units_per_beat < 1:
            logger.warning("Ignoring tatum resolution %r", units_per_beat)
            return False
        self._tatum = int(units_per_beat)
        return True

    def reset(self) -> None:
        """Discard all session state and start over. The tatum resolution is kept."""
        self._init_state()

    # ------------------------------------------------------------------
    # Drain
    # ------------------------------------------------------------------

    def flush_pending(self) -> List[NotationEvent]:
        """
        Quantize all pending notes against the most recent beat group.

        Returns:
            The NotationEvents produced by this drain, in timestamp order
        """
        group = self._grouper.latest
        if group is None:
            return []

        cfg = self.config
        group_index = self._grouper.latest_index
        beat_time = group.representative_time

        self._tempo.update(beat_time)

        is_same_group = group_index == self._last_group_index
        virtual_beats = 0
        if is_same_group:
            span = 0
        else:
            virtual_beats = self._tempo.estimate_virtual_beats(beat_time)
            span = (1 + virtual_beats) * self._tatum
            self._bar_emitted_for_group = False

        # First beat ever, or a repeat of the last group: assume one beat back
        prev_beat_time = self._tempo.last_beat_time
        if is_same_group or self._last_group_index < 0 or prev_beat_time is None:
            prev_beat_time = beat_time - self._tempo.smoothed_interval
        beat_duration = max(cfg.min_beat_duration_ms, beat_time - prev_beat_time)

        first = group.first
        is_downbeat = self._session_start or (
            first.is_downbeat and abs(first.timestamp - beat_time) < cfg.grouping_window_ms
        )

        logger.debug(
            "Drain group %d at %.1f ms: span=%d virtual=%d downbeat=%s pending=%d",
            group_index,
            beat_time,
            span,
            virtual_beats,
            is_downbeat,
            len(self._pending),
        )

        emitted: List[NotationEvent] = []
        bar_started_here = False
        for note in sorted(self._pending, key=lambda n: n.timestamp):
            on_beat = abs(note.timestamp - beat_time) < cfg.on_beat_tolerance_ms

            if on_beat:
                index = span
            else:
                delta = note.timestamp - prev_beat_time
                index = round_half_up(delta / beat_duration * span)
            index = min(max(index, 0), span)

            position = self._measure_position + index
            starts_new_bar = False

            if is_downbeat and on_beat:
                if not self._bar_emitted_for_group and not bar_started_here:
                    starts_new_bar = True
                    self._bar_emitted_for_group = True
                    bar_started_here = True
                position = 0

            event = NotationEvent(
                pitch=note.pitch,
                stave=note.stave,
                starts_new_bar=starts_new_bar,
                position_in_measure=position,
                duration_unit=cfg.duration_unit,
                color_hint=ColorHint.ON_BEAT if on_beat else ColorHint.OFF_BEAT,
                timestamp=note.timestamp,
            )
            self._emit(event)
            emitted.append(event)

        if is_downbeat:
            self._measure_position = 0
        elif not is_same_group:
            self._measure_position += span

        self._pending = []
        self._tempo.commit(beat_time)
        self._last_group_index = group_index
        self._session_start = False
        self._grouper.trim(keep=1)

        return emitted

    def _emit(self, event: NotationEvent) -> None:
        if self.sink is None:
            logger.warning("No notation sink attached; skipping note %d", event.pitch)
            return
        try:
            self.sink(event)
        except Exception as e:
            logger.warning("Notation sink failed on note %d: %s", event.pitch, e)
