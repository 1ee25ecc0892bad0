import math

import pytest

from shotform_service.models import JointType, Landmark, PoseFrame


SHOULDER = (0.5, 0.4)
HIP = (0.5, 0.6)
UPPER_LEG = 0.15
FOREARM_REACH = 0.2


def build_landmarks(elbow=90.0, release=50.0, knee=115.0, shoulder_dy=0.0, visibility=None):
    """
    Right-side landmarks whose raw metrics are exactly the given values.

    The wrist is placed `release` degrees above horizontal from the right
    shoulder; the elbow sits on the circle through shoulder and wrist from
    which that chord is seen under `elbow` degrees.
    """
    sx, sy = SHOULDER
    r = math.radians(release)
    wx, wy = sx + FOREARM_REACH * math.cos(r), sy - FOREARM_REACH * math.sin(r)

    mx, my = (sx + wx) / 2, (sy + wy) / 2
    cx, cy = wx - sx, wy - sy
    chord = math.hypot(cx, cy)
    nx, ny = -cy / chord, cx / chord
    h = (chord / 2) / math.tan(math.radians(elbow) / 2)
    ex, ey = mx + nx * h, my + ny * h

    hx, hy = HIP
    kx, ky = hx, hy + UPPER_LEG
    a = math.radians(-90.0 + knee)
    ax, ay = kx + UPPER_LEG * math.cos(a), ky + UPPER_LEG * math.sin(a)

    points = {
        JointType.LEFT_SHOULDER: (0.3, sy + shoulder_dy),
        JointType.RIGHT_SHOULDER: (sx, sy),
        JointType.RIGHT_ELBOW: (ex, ey),
        JointType.RIGHT_WRIST: (wx, wy),
        JointType.RIGHT_HIP: (hx, hy),
        JointType.RIGHT_KNEE: (kx, ky),
        JointType.RIGHT_ANKLE: (ax, ay),
        # Present in real detections but unused by the analysis
        JointType.LEFT_ELBOW: (0.25, 0.5),
        JointType.LEFT_WRIST: (0.25, 0.6),
        JointType.LEFT_HIP: (0.35, 0.6),
        JointType.LEFT_KNEE: (0.35, 0.75),
        JointType.LEFT_ANKLE: (0.35, 0.9),
    }
    return {
        joint.value: Landmark(x=x, y=y, z=0.0, visibility=visibility)
        for joint, (x, y) in points.items()
    }


def build_frame(timestamp=0.0, **kwargs):
    return PoseFrame(landmarks=build_landmarks(**kwargs), timestamp=timestamp)


@pytest.fixture
def make_frame():
    return build_frame


@pytest.fixture
def ideal_frame():
    return build_frame(elbow=90.0, release=50.0, knee=115.0, shoulder_dy=0.0)
