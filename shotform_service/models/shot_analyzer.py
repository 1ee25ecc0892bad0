"""
SHOTFORM Analysis - Shot Form Analyzer

Per-frame driver for the shooting form pipeline:
landmarks -> geometry -> rolling windows -> scores -> composite -> feedback.

One analyzer instance belongs to one shooter/session and must only be
driven from one thread at a time.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Any
from enum import Enum
import time

from core.config import settings
from shared.utils import log_execution_time, round_half_up
from .landmarks import PoseFrame, find_missing_joints
from .geometry import FrameMetrics, compute_frame_metrics
from .smoother import MetricHistory, SmoothedMetrics
from .scoring import MetricScores, compute_metric_scores, compute_composite_score
from .feedback import FeedbackState, NO_SUBJECT_MESSAGE, build_feedback

logger = logging.getLogger("shotform.analyzer")


# ═══════════════════════════════════════════════════════════════════════════════
# ENUMS AND DATA CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class AnalyzerState(Enum):
    """Frame gate states."""
    IDLE = "idle"
    ACTIVE = "active"
    STOPPED = "stopped"


class NoDetectionReason(Enum):
    """Why a frame produced no analysis."""
    NO_POSE = "no_pose"
    INCOMPLETE_LANDMARKS = "incomplete_landmarks"


@dataclass
class ShotFormResult:
    """Everything the presentation layer needs for one processed frame."""
    detected: bool
    timestamp: float
    frames_analyzed: int
    message: str = ""
    reason: Optional[NoDetectionReason] = None
    missing_joints: List[str] = field(default_factory=list)
    raw: Optional[FrameMetrics] = None
    smoothed: Optional[SmoothedMetrics] = None
    scores: Optional[MetricScores] = None
    overall_score: Optional[int] = None
    feedback: Optional[FeedbackState] = None

    def to_dict(self) -> Dict[str, Any]:
        """Display-ready mapping; metrics and scores are rounded half-up."""
        if not self.detected:
            return {
                "detected": False,
                "timestamp": self.timestamp,
                "frames_analyzed": self.frames_analyzed,
                "reason": self.reason.value if self.reason else None,
                "missing_joints": self.missing_joints,
                "message": self.message,
            }

        return {
            "detected": True,
            "timestamp": self.timestamp,
            "frames_analyzed": self.frames_analyzed,
            "metrics": {
                "elbow_angle": round_half_up(self.smoothed.elbow_angle),
                "release_angle": round_half_up(self.smoothed.release_angle),
                "knee_angle": round_half_up(self.smoothed.knee_angle),
                "alignment_score": round_half_up(self.smoothed.alignment_score),
                "window_size": self.smoothed.window_size,
            },
            "scores": {
                "elbow": round_half_up(self.scores.elbow),
                "release": round_half_up(self.scores.release),
                "knee": round_half_up(self.scores.knee),
                "alignment": round_half_up(self.scores.alignment),
            },
            "overall_score": self.overall_score,
            "feedback": self.feedback.to_dict(),
            "message": self.message,
        }


ResultListener = Callable[[ShotFormResult], None]


# ═══════════════════════════════════════════════════════════════════════════════
# SHOT FORM ANALYZER
# ═══════════════════════════════════════════════════════════════════════════════

class ShotFormAnalyzer:
    """
    Live shooting form analysis over a stream of pose frames.

    Usage:
        analyzer = ShotFormAnalyzer()
        analyzer.add_listener(render)
        analyzer.start()
        for frame in frames:              # PoseFrame, or None when nobody is in view
            analyzer.process_frame(frame)

    Frames are only analyzed while the analyzer is active. Frames without a
    detected pose, or missing a required joint, leave the rolling windows
    untouched and produce a "no subject" result.
    """

    def __init__(self, window_size: Optional[int] = None, min_visibility: Optional[float] = None):
        """
        Args:
            window_size: Rolling window capacity (defaults to METRIC_WINDOW_SIZE)
            min_visibility: Landmark visibility gate (defaults to MIN_LANDMARK_VISIBILITY)
        """
        self.history = MetricHistory(
            settings.METRIC_WINDOW_SIZE if window_size is None else window_size
        )
        self.min_visibility = (
            settings.MIN_LANDMARK_VISIBILITY if min_visibility is None else min_visibility
        )
        self.state = AnalyzerState.IDLE
        self.frames_analyzed = 0
        self.frames_skipped = 0
        self.last_result: Optional[ShotFormResult] = None
        self._listeners: List[ResultListener] = []

    # ═══════════════════════════════════════════════════════════════════════════
    # GATE AND RESET
    # ═══════════════════════════════════════════════════════════════════════════

    @property
    def is_running(self) -> bool:
        return self.state == AnalyzerState.ACTIVE

    def start(self):
        """Begin accepting frames."""
        self.state = AnalyzerState.ACTIVE
        logger.info("Shot form analysis started")

    def stop(self):
        """Ignore incoming frames until start() is called again. History is kept."""
        self.state = AnalyzerState.STOPPED
        logger.info(f"Shot form analysis stopped after {self.frames_analyzed} analyzed frames")

    def reset(self):
        """Clear all history and counters. Works in any state."""
        self.history.reset()
        self.frames_analyzed = 0
        self.frames_skipped = 0
        self.last_result = None
        logger.info("Shot form statistics reset")

    # ═══════════════════════════════════════════════════════════════════════════
    # PRESENTATION CHANNEL
    # ═══════════════════════════════════════════════════════════════════════════

    def add_listener(self, listener: ResultListener):
        self._listeners.append(listener)

    def remove_listener(self, listener: ResultListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, result: ShotFormResult):
        for listener in list(self._listeners):
            try:
                listener(result)
            except Exception:
                logger.exception(f"Result listener {listener!r} failed")

    # ═══════════════════════════════════════════════════════════════════════════
    # FRAME PROCESSING
    # ═══════════════════════════════════════════════════════════════════════════

    @log_execution_time
    def process_frame(self, frame: Optional[PoseFrame]) -> Optional[ShotFormResult]:
        """
        Process one frame from the pose source.

        Args:
            frame: Detected landmarks, or None when no pose was detected

        Returns:
            The emitted result, or None if the analyzer is not active
        """
        if not self.is_running:
            return None

        if frame is None or not frame.landmarks:
            result = self._no_subject(frame, NoDetectionReason.NO_POSE, [])
        else:
            missing = find_missing_joints(frame, self.min_visibility)
            if missing:
                result = self._no_subject(
                    frame,
                    NoDetectionReason.INCOMPLETE_LANDMARKS,
                    [joint.name.lower() for joint in missing],
                )
            else:
                result = self._analyze(frame)
                self.last_result = result

        self._notify(result)
        return result

    def _no_subject(
        self,
        frame: Optional[PoseFrame],
        reason: NoDetectionReason,
        missing_joints: List[str]
    ) -> ShotFormResult:
        self.frames_skipped += 1
        logger.debug(f"Frame skipped ({reason.value}) missing={missing_joints}")

        return ShotFormResult(
            detected=False,
            timestamp=frame.timestamp if frame is not None else time.time(),
            frames_analyzed=self.frames_analyzed,
            message=NO_SUBJECT_MESSAGE,
            reason=reason,
            missing_joints=missing_joints,
        )

    def _analyze(self, frame: PoseFrame) -> ShotFormResult:
        raw = compute_frame_metrics(frame)
        self.history.push(raw)
        self.frames_analyzed += 1

        smoothed = self.history.smoothed()
        scores = compute_metric_scores(smoothed)
        overall = compute_composite_score(scores)
        feedback = build_feedback(overall, scores, smoothed)

        logger.debug(
            f"Frame {self.frames_analyzed}: elbow={smoothed.elbow_angle:.1f} "
            f"release={smoothed.release_angle:.1f} knee={smoothed.knee_angle:.1f} "
            f"alignment={smoothed.alignment_score:.1f} overall={overall}"
        )

        return ShotFormResult(
            detected=True,
            timestamp=frame.timestamp,
            frames_analyzed=self.frames_analyzed,
            message=feedback.message,
            raw=raw,
            smoothed=smoothed,
            scores=scores,
            overall_score=overall,
            feedback=feedback,
        )

    def get_stats(self) -> Dict[str, Any]:
        """Get analyzer counters and state."""
        return {
            "state": self.state.value,
            "frames_analyzed": self.frames_analyzed,
            "frames_skipped": self.frames_skipped,
            "window_size": len(self.history),
            "window_capacity": self.history.capacity,
            "overall_score": self.last_result.overall_score if self.last_result else None,
        }
