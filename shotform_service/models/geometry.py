"""
SHOTFORM Analysis - Geometry

Joint angles and shoulder alignment from normalized landmark positions.
Image coordinates: x grows to the right, y grows downward.
"""

from dataclasses import dataclass
from typing import Dict, Any

import numpy as np

from .landmarks import JointType, Landmark, PoseFrame


@dataclass
class FrameMetrics:
    """Raw shooting metrics measured on a single frame."""
    elbow_angle: float  # degrees, 0-180
    release_angle: float  # degrees above horizontal, >= 0
    knee_angle: float  # degrees, 0-180
    alignment_score: float  # 0-100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "elbow_angle": self.elbow_angle,
            "release_angle": self.release_angle,
            "knee_angle": self.knee_angle,
            "alignment_score": self.alignment_score,
        }


def _finite_or_zero(value: float) -> float:
    value = float(value)
    return value if np.isfinite(value) else 0.0


def calculate_joint_angle(proximal: Landmark, vertex: Landmark, distal: Landmark) -> float:
    """
    Calculate the interior angle at ``vertex`` formed by proximal-vertex-distal.

    Returns:
        Angle in degrees (0-180); symmetric in proximal/distal.
    """
    radians = (
        np.arctan2(distal.y - vertex.y, distal.x - vertex.x)
        - np.arctan2(proximal.y - vertex.y, proximal.x - vertex.x)
    )
    angle = abs(np.degrees(radians))

    if angle > 180.0:
        angle = 360.0 - angle

    return _finite_or_zero(angle)


def calculate_release_angle(shoulder: Landmark, wrist: Landmark) -> float:
    """
    Angle of the shoulder-to-wrist line above horizontal, in degrees.

    Image y grows downward, so a wrist above the shoulder has a smaller y
    and ``shoulder.y - wrist.y`` is positive. Wrists at or below shoulder
    height give 0.
    """
    delta_y = shoulder.y - wrist.y
    delta_x = abs(shoulder.x - wrist.x)
    angle = np.degrees(np.arctan2(delta_y, delta_x))
    return max(0.0, _finite_or_zero(angle))


def calculate_alignment(left_shoulder: Landmark, right_shoulder: Landmark) -> float:
    """Shoulder level score: 100 when level, minus 10 points per 0.01 of height difference."""
    shoulder_diff = abs(left_shoulder.y - right_shoulder.y)
    return max(0.0, _finite_or_zero(100.0 - shoulder_diff * 1000.0))


def compute_frame_metrics(frame: PoseFrame) -> FrameMetrics:
    """
    Measure all four shooting metrics on one frame.

    The caller must have checked that every required joint is present
    (see ``find_missing_joints``).
    """
    lm = frame.landmarks

    right_shoulder = lm[JointType.RIGHT_SHOULDER.value]
    right_elbow = lm[JointType.RIGHT_ELBOW.value]
    right_wrist = lm[JointType.RIGHT_WRIST.value]
    right_hip = lm[JointType.RIGHT_HIP.value]
    right_knee = lm[JointType.RIGHT_KNEE.value]
    right_ankle = lm[JointType.RIGHT_ANKLE.value]
    left_shoulder = lm[JointType.LEFT_SHOULDER.value]

    return FrameMetrics(
        elbow_angle=calculate_joint_angle(right_shoulder, right_elbow, right_wrist),
        release_angle=calculate_release_angle(right_shoulder, right_wrist),
        knee_angle=calculate_joint_angle(right_hip, right_knee, right_ankle),
        alignment_score=calculate_alignment(left_shoulder, right_shoulder),
    )
