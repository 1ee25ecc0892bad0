from types import SimpleNamespace

import numpy as np
import pytest

from shotform_service.models import (
    JointType,
    Landmark,
    PoseDetector,
    PoseFrame,
    REQUIRED_JOINTS,
    find_missing_joints,
    landmarks_from_mediapipe,
    pose_frame_from_dict,
)


def _mp_landmarks(count=33):
    return [SimpleNamespace(x=i / 100, y=i / 50, z=-0.1, visibility=0.9) for i in range(count)]


class TestMediaPipeConversion:
    def test_legacy_solution_result(self):
        results = SimpleNamespace(pose_landmarks=SimpleNamespace(landmark=_mp_landmarks()))

        frame = landmarks_from_mediapipe(results, timestamp=1.5)

        assert len(frame.landmarks) == 33
        assert frame.timestamp == 1.5
        wrist = frame.get(JointType.RIGHT_WRIST)
        assert wrist.x == pytest.approx(0.16)
        assert wrist.y == pytest.approx(0.32)
        assert wrist.visibility == 0.9

    def test_tasks_api_result(self):
        results = SimpleNamespace(pose_landmarks=[_mp_landmarks(), _mp_landmarks()])

        frame = landmarks_from_mediapipe(results)

        assert len(frame.landmarks) == 33
        assert find_missing_joints(frame) == []

    @pytest.mark.parametrize("results", [
        SimpleNamespace(pose_landmarks=None),
        SimpleNamespace(pose_landmarks=[]),
        SimpleNamespace(),
    ])
    def test_no_pose_returns_none(self, results):
        assert landmarks_from_mediapipe(results) is None


class TestSerializedFrames:
    def test_roundtrip_keeps_coordinates(self, ideal_frame):
        restored = pose_frame_from_dict(ideal_frame.to_dict())

        assert restored.timestamp == ideal_frame.timestamp
        assert restored.landmarks.keys() == ideal_frame.landmarks.keys()
        shoulder = restored.get(JointType.RIGHT_SHOULDER)
        assert (shoulder.x, shoulder.y) == (0.5, 0.4)

    def test_named_mapping_form(self):
        frame = pose_frame_from_dict({
            "timestamp": 2.0,
            "landmarks": {
                "right_shoulder": {"x": 0.5, "y": 0.4},
                "left_shoulder": {"x": 0.3, "y": 0.4, "visibility": 0.8},
            },
        })

        assert frame.get(JointType.RIGHT_SHOULDER).x == 0.5
        assert frame.get(JointType.LEFT_SHOULDER).visibility == 0.8
        assert JointType.RIGHT_WRIST in find_missing_joints(frame)

    @pytest.mark.parametrize("record", [{"landmarks": None}, {"landmarks": []}, {}])
    def test_no_landmarks_means_no_detection(self, record):
        assert pose_frame_from_dict(record) is None

    def test_unknown_joint_name(self):
        with pytest.raises(ValueError, match="Unknown joint"):
            pose_frame_from_dict({"landmarks": {"right_tail": {"x": 0.1, "y": 0.1}}})

    def test_missing_coordinates(self):
        with pytest.raises(ValueError):
            pose_frame_from_dict({"landmarks": [{"id": 12, "x": 0.1}]})

    @pytest.mark.parametrize("record", [
        [1, 2],
        {"landmarks": 5},
        {"landmarks": [5]},
        {"landmarks": {"right_shoulder": 3}},
        {"landmarks": [{"id": 12, "x": None, "y": 0.1}]},
        {"landmarks": [{"id": 12, "x": 0.1, "y": "low"}]},
        {"landmarks": [{"id": -1, "x": 0.1, "y": 0.1}]},
        {"landmarks": [{"id": "abc", "x": 0.1, "y": 0.1}]},
        {"landmarks": [{"id": 12, "x": 0.1, "y": 0.1, "visibility": "high"}]},
        {"timestamp": "soon", "landmarks": [{"id": 12, "x": 0.1, "y": 0.1}]},
    ])
    def test_malformed_records_raise_value_error(self, record):
        with pytest.raises(ValueError):
            pose_frame_from_dict(record)

    def test_numeric_strings_are_converted(self):
        frame = pose_frame_from_dict({
            "timestamp": "1.25",
            "landmarks": [{"id": "12", "x": "0.5", "y": "0.4", "visibility": "0.9"}],
        })

        shoulder = frame.get(JointType.RIGHT_SHOULDER)
        assert frame.timestamp == 1.25
        assert shoulder.visibility == 0.9
        assert shoulder.is_visible(0.5)

    def test_to_dict_names_points_outside_the_model(self):
        frame = PoseFrame(landmarks={-1: Landmark(x=0.1, y=0.1), 40: Landmark(x=0.2, y=0.2)}, timestamp=0.0)

        names = [entry["name"] for entry in frame.to_dict()["landmarks"]]

        assert names == ["point_-1", "point_40"]


def test_find_missing_joints_reports_all_required():
    assert find_missing_joints(PoseFrame(landmarks={})) == list(REQUIRED_JOINTS)


def test_visibility_gate():
    lm = Landmark(x=0.1, y=0.1, visibility=0.3)
    assert lm.is_visible(0.0)
    assert not lm.is_visible(0.5)
    assert Landmark(x=0.1, y=0.1).is_visible(0.5)


class _FakeSolution:
    def __init__(self, results):
        self.results = results
        self.images = []
        self.closed = False

    def process(self, image):
        self.images.append(image)
        return self.results

    def close(self):
        self.closed = True


def test_pose_detector_with_injected_solution():
    fake = _FakeSolution(SimpleNamespace(pose_landmarks=SimpleNamespace(landmark=_mp_landmarks())))
    detector = PoseDetector(detector=fake)
    image = np.zeros((4, 4, 3), dtype=np.uint8)

    frame = detector.detect(image, timestamp_ms=500)

    assert fake.images[0] is image
    assert frame.timestamp == pytest.approx(0.5)
    assert len(frame.landmarks) == 33

    detector.close()
    assert fake.closed
    assert detector.pose_detector is None


def test_pose_detector_reports_no_detection():
    detector = PoseDetector(detector=_FakeSolution(SimpleNamespace(pose_landmarks=None)))
    assert detector.detect(np.zeros((4, 4, 3), dtype=np.uint8)) is None


def test_pose_detector_video_timestamps_strictly_increase():
    detector = PoseDetector(detector=_FakeSolution(SimpleNamespace(pose_landmarks=None)))

    first = detector.next_timestamp_ms(0)
    repeated = detector.next_timestamp_ms(0)
    earlier = detector.next_timestamp_ms(-50)
    later = detector.next_timestamp_ms(1000.7)
    implicit = detector.next_timestamp_ms()

    assert [first, repeated, earlier, later] == [0, 1, 2, 1000]
    assert implicit > later
