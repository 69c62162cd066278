"""Beat tracker interface - Per-note beat and downbeat probabilities.

The recurrent beat/downbeat model itself lives outside this package.
Anything implementing :class:`BeatTracker` can drive a live session;
:class:`ScriptedBeatTracker` replays fixed predictions for offline runs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from ..core.constants import BEAT_THRESHOLD, DOWNBEAT_THRESHOLD


@dataclass(frozen=True)
class BeatPrediction:
    """Model output for one note event."""

    beat: float  # 0.0 - 1.0
    downbeat: float  # 0.0 - 1.0

    def __post_init__(self) -> None:
        for name in ("beat", "downbeat"):
            value = getattr(self, name)
            if not (0.0 <= float(value) <= 1.0):
                raise ValueError(f"{name} probability must be in [0,1], got {value}")


@dataclass(frozen=True)
class BeatThresholds:
    """Thresholds that turn predictions into beat detections."""

    beat: float = BEAT_THRESHOLD
    downbeat: float = DOWNBEAT_THRESHOLD

    def is_beat(self, prediction: BeatPrediction) -> bool:
        return prediction.beat > self.beat

    def is_downbeat(self, prediction: BeatPrediction) -> bool:
        return prediction.downbeat > self.downbeat


class BeatTracker(ABC):
    """Abstract base class for online beat/downbeat classifiers.

    Implementations keep their own recurrent state between calls.
    """

    @abstractmethod
    def predict(
        self,
        timestamp_s: float,
        pitch: int,
        velocity: int,
        downbeat_hint: bool = False,
    ) -> BeatPrediction:
        """
        Classify one note event.

        Args:
            timestamp_s: Event time in seconds
            pitch: MIDI pitch
            velocity: MIDI velocity
            downbeat_hint: User signalled a downbeat (e.g. pedal tap)

        Returns:
            BeatPrediction for this event
        """
        pass

    def reset(self) -> None:
        """Clear recurrent state."""


class ScriptedBeatTracker(BeatTracker):
    """Replay a fixed sequence of predictions, one per note event.

    Calls past the end of the script predict no beat. A downbeat hint
    always yields a certain downbeat.
    """

    def __init__(self, predictions: Iterable[BeatPrediction]):
        self.predictions: List[BeatPrediction] = list(predictions)
        self._cursor = 0

    @classmethod
    def from_flags(cls, flags: Sequence[Optional[bool]]) -> "ScriptedBeatTracker":
        """
        Build a script from per-note flags.

        None means no beat, False a plain beat and True a downbeat.
        """
        predictions = []
        for flag in flags:
            if flag is None:
                predictions.append(BeatPrediction(beat=0.0, downbeat=0.0))
            else:
                predictions.append(BeatPrediction(beat=1.0, downbeat=1.0 if flag else 0.0))
        return cls(predictions)

    def predict(
        self,
        timestamp_s: float,
        pitch: int,
        velocity: int,
        downbeat_hint: bool = False,
    ) -> BeatPrediction:
        if self._cursor < len(self.predictions):
            prediction = self.predictions[self._cursor]
        else:
            prediction = BeatPrediction(beat=0.0, downbeat=0.0)
        self._cursor += 1

        if downbeat_hint:
            return BeatPrediction(beat=1.0, downbeat=1.0)
        return prediction

    def reset(self) -> None:
        self._cursor = 0
