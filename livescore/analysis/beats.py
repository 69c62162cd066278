"""Beat grouping - Cluster near-simultaneous beat detections."""

import logging
from typing import List, Optional

from ..core import BeatDetection, BeatGroup
from ..core.constants import GROUP_WINDOW_MS

logger = logging.getLogger(__name__)


class BeatGrouper:
    """Collect beat detections into beat groups.

    A detection joins the most recent group when it lies within the
    grouping window of that group's last member (chained proximity);
    otherwise it starts a new group. Nothing is ever discarded.

    Groups carry absolute indices so the quantizer can tell a repeated
    flush of the same group from a new one, even after processed groups
    have been trimmed away.
    """

    def __init__(self, grouping_window_ms: float = GROUP_WINDOW_MS):
        self.grouping_window_ms = grouping_window_ms
        self._groups: List[BeatGroup] = []
        self._trimmed = 0

    def __len__(self) -> int:
        """Total number of groups created this session."""
        return self._trimmed + len(self._groups)

    @property
    def groups(self) -> List[BeatGroup]:
        """Groups still held in memory (oldest first)."""
        return list(self._groups)

    @property
    def latest(self) -> Optional[BeatGroup]:
        return self._groups[-1] if self._groups else None

    @property
    def latest_index(self) -> int:
        """Absolute index of the most recent group, -1 if there is none."""
        return len(self) - 1

    def observe(self, timestamp: float, is_downbeat: bool = False) -> int:
        """
        Add a detection.

        Args:
            timestamp: Detection time in ms
            is_downbeat: Whether the classifier flagged a downbeat

        Returns:
            Absolute index of the group the detection landed in
        """
        detection = BeatDetection(timestamp=float(timestamp), is_downbeat=bool(is_downbeat))

        if not self._groups:
            self._groups.append(BeatGroup((detection,)))
            return self.latest_index

        group = self._groups[-1]
        if detection.timestamp - group.last.timestamp < self.grouping_window_ms:
            self._groups[-1] = group.extended(detection)
        else:
            self._groups.append(BeatGroup((detection,)))
            logger.debug("Beat group %d opened at %.1f ms", self.latest_index, detection.timestamp)

        return self.latest_index

    def trim(self, keep: int = 1) -> None:
        """Drop all but the ``keep`` most recent groups from memory."""
        excess = len(self._groups) - max(1, keep)
        if excess > 0:
            del self._groups[:excess]
            self._trimmed += excess

    def reset(self) -> None:
        self._groups = []
        self._trimmed = 0
