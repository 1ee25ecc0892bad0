"""
SHOTFORM Analysis - Temporal Smoother

Rolling windows over the raw per-frame metrics. Each metric keeps its own
fixed-capacity queue; the smoothed value is the plain mean of the queue.
"""

from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Any

import numpy as np

from .geometry import FrameMetrics


METRIC_NAMES = ("elbow_angle", "release_angle", "knee_angle", "alignment_score")
DEFAULT_WINDOW_SIZE = 30


@dataclass
class SmoothedMetrics:
    """Window means of the four raw metrics."""
    elbow_angle: float
    release_angle: float
    knee_angle: float
    alignment_score: float
    window_size: int = 0  # number of frames averaged

    def to_dict(self) -> Dict[str, Any]:
        return {
            "elbow_angle": self.elbow_angle,
            "release_angle": self.release_angle,
            "knee_angle": self.knee_angle,
            "alignment_score": self.alignment_score,
            "window_size": self.window_size,
        }


class MetricHistory:
    """
    Four independent sliding windows, one per raw metric.

    Appending to a full window evicts its oldest value. Windows are only
    ever emptied through reset().
    """

    def __init__(self, capacity: int = DEFAULT_WINDOW_SIZE):
        if capacity < 1:
            raise ValueError(f"Window capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._windows: Dict[str, deque] = {
            name: deque(maxlen=capacity) for name in METRIC_NAMES
        }

    def __len__(self) -> int:
        return len(self._windows[METRIC_NAMES[0]])

    def push(self, metrics: FrameMetrics):
        """Append one frame's raw metrics to every window."""
        for name in METRIC_NAMES:
            self._windows[name].append(float(getattr(metrics, name)))

    def values(self, name: str) -> List[float]:
        """Current contents of one window, oldest first."""
        return list(self._windows[name])

    @staticmethod
    def _mean(window: deque) -> float:
        if not window:
            return 0.0
        return float(np.mean(window))

    def smoothed(self) -> SmoothedMetrics:
        """Mean of each window (0.0 for an empty window)."""
        return SmoothedMetrics(
            elbow_angle=self._mean(self._windows["elbow_angle"]),
            release_angle=self._mean(self._windows["release_angle"]),
            knee_angle=self._mean(self._windows["knee_angle"]),
            alignment_score=self._mean(self._windows["alignment_score"]),
            window_size=len(self),
        )

    def reset(self):
        """Empty all windows."""
        for window in self._windows.values():
            window.clear()
