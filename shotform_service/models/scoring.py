"""
SHOTFORM Analysis - Scoring

Piecewise laws mapping each smoothed metric to a 0-100 score, and the
weighted composite of the four scores.
"""

from dataclasses import dataclass
from typing import Dict, Any

from shared.utils import round_half_up
from .smoother import SmoothedMetrics


# Elbow: penalty grows with distance from a 90° set point
ELBOW_OPTIMAL = 90.0
ELBOW_TOLERANCE = 10.0

# Flat optimal bands (degrees)
RELEASE_BAND = (45.0, 60.0)
KNEE_BAND = (100.0, 130.0)

COMPOSITE_WEIGHTS = {
    "elbow": 0.30,
    "release": 0.30,
    "knee": 0.20,
    "alignment": 0.20,
}


@dataclass
class MetricScores:
    """Per-metric scores, each 0-100."""
    elbow: float
    release: float
    knee: float
    alignment: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "elbow": self.elbow,
            "release": self.release,
            "knee": self.knee,
            "alignment": self.alignment,
        }


def score_elbow_angle(angle: float) -> float:
    """100 at 90°, -5 per degree up to ±10°, then from 50 down by 2 per degree."""
    diff = abs(angle - ELBOW_OPTIMAL)

    if diff <= ELBOW_TOLERANCE:
        return 100.0 - diff * 5.0
    return max(0.0, 50.0 - (diff - ELBOW_TOLERANCE) * 2.0)


def score_release_angle(angle: float) -> float:
    low, high = RELEASE_BAND
    if low <= angle <= high:
        return 100.0
    elif angle < low:
        return max(0.0, angle / low * 100.0)
    else:
        return max(0.0, 100.0 - (angle - high) * 3.0)


def score_knee_angle(angle: float) -> float:
    low, high = KNEE_BAND
    if low <= angle <= high:
        return 100.0
    elif angle < low:
        return max(0.0, angle / low * 100.0)
    else:
        return max(0.0, 100.0 - (angle - high) * 2.0)


def score_alignment(alignment: float) -> float:
    # The smoothed alignment value already is a 0-100 score
    return alignment


def compute_metric_scores(smoothed: SmoothedMetrics) -> MetricScores:
    """Score every smoothed metric independently."""
    return MetricScores(
        elbow=score_elbow_angle(smoothed.elbow_angle),
        release=score_release_angle(smoothed.release_angle),
        knee=score_knee_angle(smoothed.knee_angle),
        alignment=score_alignment(smoothed.alignment_score),
    )


def compute_composite_score(scores: MetricScores) -> int:
    """
    Weighted sum of the four scores, rounded half-up to an integer.

    Weights: elbow 0.30, release 0.30, knee 0.20, alignment 0.20.
    """
    total = (
        scores.elbow * COMPOSITE_WEIGHTS["elbow"]
        + scores.release * COMPOSITE_WEIGHTS["release"]
        + scores.knee * COMPOSITE_WEIGHTS["knee"]
        + scores.alignment * COMPOSITE_WEIGHTS["alignment"]
    )
    return max(0, min(100, round_half_up(total)))
