"""
SHOTFORM Analysis - Feedback

Stateless threshold classification of the current scores and smoothed
metrics into an overall tier, one directional label per metric, and the
messages shown to the shooter.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any
from enum import Enum

from .scoring import MetricScores
from .smoother import SmoothedMetrics


# ═══════════════════════════════════════════════════════════════════════════════
# LABELS
# ═══════════════════════════════════════════════════════════════════════════════

class FormTier(Enum):
    """Overall shooting form tier."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    NEEDS_IMPROVEMENT = "needs improvement"


class ElbowStatus(Enum):
    OPTIMAL = "optimal"
    RAISE_ELBOW = "raise elbow"
    LOWER_ELBOW = "lower elbow"


class ReleaseStatus(Enum):
    OPTIMAL = "optimal"
    TOO_LOW = "too low"
    TOO_HIGH = "too high"


class KneeStatus(Enum):
    OPTIMAL = "optimal"
    BEND_MORE = "bend more"
    TOO_BENT = "too bent"


class AlignmentStatus(Enum):
    OPTIMAL = "optimal"
    CHECK_SHOULDER_LEVEL = "check shoulder level"


class ScoreBand(Enum):
    """Display band for a 0-100 score (bar and ring colouring)."""
    GOOD = "good"
    WARNING = "warning"
    POOR = "poor"


# Descending thresholds, first match wins
TIER_THRESHOLDS = [
    (85, FormTier.EXCELLENT),
    (70, FormTier.GOOD),
    (50, FormTier.FAIR),
]

TIER_MESSAGES = {
    FormTier.EXCELLENT: "🎯 Excellent form! Your technique is on point!",
    FormTier.GOOD: "👍 Good form! Keep practicing for consistency.",
    FormTier.FAIR: "⚠️ Fair form. Focus on the metrics highlighted below.",
    FormTier.NEEDS_IMPROVEMENT: "💡 Needs improvement. Review the technique tips.",
}

STATUS_MESSAGES = {
    ElbowStatus.OPTIMAL: "Perfect elbow angle!",
    ElbowStatus.RAISE_ELBOW: "Raise your elbow slightly",
    ElbowStatus.LOWER_ELBOW: "Lower your elbow slightly",
    ReleaseStatus.OPTIMAL: "Optimal release height!",
    ReleaseStatus.TOO_LOW: "Release point too low",
    ReleaseStatus.TOO_HIGH: "Release point too high",
    KneeStatus.OPTIMAL: "Good knee bend!",
    KneeStatus.BEND_MORE: "Bend knees more",
    KneeStatus.TOO_BENT: "Knees too bent",
    AlignmentStatus.OPTIMAL: "Perfect alignment!",
    AlignmentStatus.CHECK_SHOULDER_LEVEL: "Check shoulder level",
}

NO_SUBJECT_MESSAGE = "No person detected. Step into frame."


@dataclass
class FeedbackState:
    """Tier, per-metric labels and display messages for one frame."""
    tier: FormTier
    elbow: ElbowStatus
    release: ReleaseStatus
    knee: KneeStatus
    alignment: AlignmentStatus
    message: str
    metric_messages: Dict[str, str] = field(default_factory=dict)
    bands: Dict[str, ScoreBand] = field(default_factory=dict)

    @property
    def tips(self) -> List[str]:
        """Messages for the metrics that are outside their optimal range."""
        statuses = {
            "elbow": self.elbow,
            "release": self.release,
            "knee": self.knee,
            "alignment": self.alignment,
        }
        return [
            self.metric_messages[name]
            for name, status in statuses.items()
            if status.value != "optimal"
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tier": self.tier.value,
            "message": self.message,
            "labels": {
                "elbow": self.elbow.value,
                "release": self.release.value,
                "knee": self.knee.value,
                "alignment": self.alignment.value,
            },
            "metric_messages": dict(self.metric_messages),
            "bands": {name: band.value for name, band in self.bands.items()},
            "tips": self.tips,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# CLASSIFIERS
# ═══════════════════════════════════════════════════════════════════════════════

def classify_tier(overall_score: float) -> FormTier:
    for threshold, tier in TIER_THRESHOLDS:
        if overall_score >= threshold:
            return tier
    return FormTier.NEEDS_IMPROVEMENT


def classify_elbow(angle: float) -> ElbowStatus:
    if 85 <= angle <= 95:
        return ElbowStatus.OPTIMAL
    elif angle < 85:
        return ElbowStatus.RAISE_ELBOW
    return ElbowStatus.LOWER_ELBOW


def classify_release(angle: float) -> ReleaseStatus:
    if 45 <= angle <= 60:
        return ReleaseStatus.OPTIMAL
    elif angle < 45:
        return ReleaseStatus.TOO_LOW
    return ReleaseStatus.TOO_HIGH


def classify_knee(angle: float) -> KneeStatus:
    if 100 <= angle <= 130:
        return KneeStatus.OPTIMAL
    elif angle < 100:
        return KneeStatus.BEND_MORE
    return KneeStatus.TOO_BENT


def classify_alignment(alignment: float) -> AlignmentStatus:
    if alignment >= 90:
        return AlignmentStatus.OPTIMAL
    return AlignmentStatus.CHECK_SHOULDER_LEVEL


def score_band(score: float) -> ScoreBand:
    if score >= 80:
        return ScoreBand.GOOD
    elif score >= 60:
        return ScoreBand.WARNING
    return ScoreBand.POOR


def build_feedback(overall_score: int, scores: MetricScores, smoothed: SmoothedMetrics) -> FeedbackState:
    """
    Classify the current frame.

    Args:
        overall_score: Composite score (0-100)
        scores: Per-metric scores, used for display bands
        smoothed: Smoothed metrics, used for the directional labels

    Returns:
        FeedbackState for this frame only
    """
    tier = classify_tier(overall_score)
    elbow = classify_elbow(smoothed.elbow_angle)
    release = classify_release(smoothed.release_angle)
    knee = classify_knee(smoothed.knee_angle)
    alignment = classify_alignment(smoothed.alignment_score)

    return FeedbackState(
        tier=tier,
        elbow=elbow,
        release=release,
        knee=knee,
        alignment=alignment,
        message=TIER_MESSAGES[tier],
        metric_messages={
            "elbow": STATUS_MESSAGES[elbow],
            "release": STATUS_MESSAGES[release],
            "knee": STATUS_MESSAGES[knee],
            "alignment": STATUS_MESSAGES[alignment],
        },
        bands={
            "overall": score_band(overall_score),
            "elbow": score_band(scores.elbow),
            "release": score_band(scores.release),
            "knee": score_band(scores.knee),
            "alignment": score_band(scores.alignment),
        },
    )
