"""
SHOTFORM Analysis - Pose Landmarks

Landmark types supplied by the pose source, the joints the shot analysis
needs, and conversion from MediaPipe results and serialized frames.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
from enum import Enum
import time


# ═══════════════════════════════════════════════════════════════════════════════
# ENUMS AND DATA CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class JointType(Enum):
    """MediaPipe pose landmark indices."""
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


# Shooting side is the right arm and leg; the left shoulder is only used
# for the shoulder level check.
REQUIRED_JOINTS = (
    JointType.LEFT_SHOULDER,
    JointType.RIGHT_SHOULDER,
    JointType.RIGHT_ELBOW,
    JointType.RIGHT_WRIST,
    JointType.RIGHT_HIP,
    JointType.RIGHT_KNEE,
    JointType.RIGHT_ANKLE,
)


@dataclass
class Landmark:
    """A single pose landmark in normalized image coordinates (y grows downward)."""
    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None

    def is_visible(self, min_visibility: float = 0.0) -> bool:
        if min_visibility <= 0.0 or self.visibility is None:
            return True
        return self.visibility >= min_visibility


@dataclass
class PoseFrame:
    """Landmarks detected in one sampled frame, keyed by JointType value."""
    landmarks: Dict[int, Landmark] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    def get(self, joint: JointType) -> Optional[Landmark]:
        return self.landmarks.get(joint.value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "timestamp": self.timestamp,
            "landmarks": [
                {
                    "id": idx,
                    "name": JointType(idx).name.lower() if 0 <= idx < len(JointType) else f"point_{idx}",
                    "x": lm.x,
                    "y": lm.y,
                    "z": lm.z,
                    "visibility": lm.visibility,
                }
                for idx, lm in sorted(self.landmarks.items())
            ],
        }


# ═══════════════════════════════════════════════════════════════════════════════
# LANDMARK CHECKS
# ═══════════════════════════════════════════════════════════════════════════════

def find_missing_joints(frame: PoseFrame, min_visibility: float = 0.0) -> List[JointType]:
    """Return the required joints that are absent or not visible enough."""
    missing = []
    for joint in REQUIRED_JOINTS:
        landmark = frame.get(joint)
        if landmark is None or not landmark.is_visible(min_visibility):
            missing.append(joint)
    return missing


# ═══════════════════════════════════════════════════════════════════════════════
# CONVERSIONS
# ═══════════════════════════════════════════════════════════════════════════════

def _joint_index(entry: Dict[str, Any]) -> int:
    if "id" in entry:
        try:
            idx = int(entry["id"])
        except (TypeError, ValueError):
            raise ValueError(f"Invalid joint id: {entry['id']!r}")
        if idx < 0:
            raise ValueError(f"Invalid joint id: {idx}")
        return idx
    name = str(entry.get("name", "")).upper()
    try:
        return JointType[name].value
    except KeyError:
        raise ValueError(f"Unknown joint name: {entry.get('name')!r}")


def _as_float(value: Any, what: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {what}: {value!r}")


def pose_frame_from_dict(data: Dict[str, Any]) -> Optional[PoseFrame]:
    """
    Build a PoseFrame from its serialized form.

    Returns None when the record carries no landmarks (no detection).
    Landmarks may be given as a list of {"id"|"name", "x", "y", ...}
    entries or as a mapping of joint name to {"x", "y", ...}.
    Malformed records raise ValueError.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Frame record must be an object, got {type(data).__name__}")

    raw = data.get("landmarks")
    if not raw:
        return None

    if isinstance(raw, dict):
        entries = []
        for name, values in raw.items():
            if not isinstance(values, dict):
                raise ValueError(f"Landmark {name!r} must be an object: {values!r}")
            entries.append({"name": name, **values})
    elif isinstance(raw, list):
        entries = raw
    else:
        raise ValueError(f"Landmarks must be a list or an object: {raw!r}")

    landmarks = {}
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValueError(f"Landmark entry must be an object: {entry!r}")
        if "x" not in entry or "y" not in entry:
            raise ValueError(f"Landmark entry missing coordinates: {entry!r}")
        idx = _joint_index(entry)
        visibility = entry.get("visibility")
        landmarks[idx] = Landmark(
            x=_as_float(entry["x"], "x coordinate"),
            y=_as_float(entry["y"], "y coordinate"),
            z=_as_float(entry.get("z") or 0.0, "z coordinate"),
            visibility=None if visibility is None else _as_float(visibility, "visibility"),
        )

    timestamp = data.get("timestamp")
    if timestamp is None:
        return PoseFrame(landmarks=landmarks)
    return PoseFrame(landmarks=landmarks, timestamp=_as_float(timestamp, "timestamp"))


def landmarks_from_mediapipe(results: Any, timestamp: Optional[float] = None) -> Optional[PoseFrame]:
    """
    Convert a MediaPipe pose result into a PoseFrame.

    Accepts both the legacy ``mp.solutions.pose.Pose.process`` result
    (``results.pose_landmarks.landmark``) and the Tasks API
    ``PoseLandmarkerResult`` (``result.pose_landmarks[0]``). Only the
    first detected person is used. Returns None if no pose was found.
    """
    pose_landmarks = getattr(results, "pose_landmarks", None)
    if not pose_landmarks:
        return None

    if hasattr(pose_landmarks, "landmark"):
        points = pose_landmarks.landmark
    else:
        points = pose_landmarks[0]

    landmarks = {}
    for idx, lm in enumerate(points):
        landmarks[idx] = Landmark(
            x=lm.x,
            y=lm.y,
            z=getattr(lm, "z", 0.0) or 0.0,
            visibility=getattr(lm, "visibility", None),
        )

    if not landmarks:
        return None
    if timestamp is None:
        return PoseFrame(landmarks=landmarks)
    return PoseFrame(landmarks=landmarks, timestamp=timestamp)
