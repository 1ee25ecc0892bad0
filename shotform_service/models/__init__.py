"""
SHOTFORM Analysis Models

Landmark geometry, temporal smoothing, scoring and feedback for
basketball shooting form.
"""

from .landmarks import (
    JointType,
    Landmark,
    PoseFrame,
    REQUIRED_JOINTS,
    find_missing_joints,
    pose_frame_from_dict,
    landmarks_from_mediapipe,
)

from .geometry import (
    FrameMetrics,
    calculate_joint_angle,
    calculate_release_angle,
    calculate_alignment,
    compute_frame_metrics,
)

from .pose_source import PoseDetector

from .smoother import MetricHistory, SmoothedMetrics

from .scoring import (
    MetricScores,
    score_elbow_angle,
    score_release_angle,
    score_knee_angle,
    score_alignment,
    compute_metric_scores,
    compute_composite_score,
)

from .feedback import (
    FormTier,
    ElbowStatus,
    ReleaseStatus,
    KneeStatus,
    AlignmentStatus,
    ScoreBand,
    FeedbackState,
    build_feedback,
)

from .shot_analyzer import (
    ShotFormAnalyzer,
    ShotFormResult,
    AnalyzerState,
    NoDetectionReason,
)

__all__ = [
    # Landmarks
    "JointType",
    "Landmark",
    "PoseFrame",
    "REQUIRED_JOINTS",
    "find_missing_joints",
    "pose_frame_from_dict",
    "landmarks_from_mediapipe",
    "PoseDetector",
    # Geometry
    "FrameMetrics",
    "calculate_joint_angle",
    "calculate_release_angle",
    "calculate_alignment",
    "compute_frame_metrics",
    # Smoothing
    "MetricHistory",
    "SmoothedMetrics",
    # Scoring
    "MetricScores",
    "score_elbow_angle",
    "score_release_angle",
    "score_knee_angle",
    "score_alignment",
    "compute_metric_scores",
    "compute_composite_score",
    # Feedback
    "FormTier",
    "ElbowStatus",
    "ReleaseStatus",
    "KneeStatus",
    "AlignmentStatus",
    "ScoreBand",
    "FeedbackState",
    "build_feedback",
    # Analyzer
    "ShotFormAnalyzer",
    "ShotFormResult",
    "AnalyzerState",
    "NoDetectionReason",
]
