"""
SHOTFORM Analysis - Pose Source

Thin wrapper around the MediaPipe pose detector. Frames go in as RGB
arrays, PoseFrame objects (or None when nobody is in view) come out.
"""

import logging
import time
from typing import Any, Optional

import numpy as np

from core.config import settings
from .landmarks import PoseFrame, landmarks_from_mediapipe

logger = logging.getLogger("shotform.pose")


class PoseDetector:
    """
    MediaPipe-backed pose source.

    Uses the legacy ``mp.solutions.pose`` solution by default, or a Tasks
    ``PoseLandmarker`` in VIDEO mode when a model path is configured.
    A pre-built detector exposing ``process(image)`` may be injected.
    """

    def __init__(self, model_path: Optional[str] = None, detector: Any = None):
        self.model_path = model_path if model_path is not None else settings.POSE_MODEL_PATH
        self.uses_tasks_api = False
        self._last_timestamp_ms: Optional[int] = None

        if detector is not None:
            self.pose_detector = detector
        else:
            self.pose_detector = self._init_mediapipe(self.model_path)

    def _init_mediapipe(self, model_path: Optional[str]) -> Any:
        """Initialize MediaPipe pose detector."""
        import mediapipe as mp

        if model_path:
            from mediapipe.tasks import python as mp_python
            from mediapipe.tasks.python import vision

            base_options = mp_python.BaseOptions(model_asset_path=model_path)
            options = vision.PoseLandmarkerOptions(
                base_options=base_options,
                running_mode=vision.RunningMode.VIDEO,
                num_poses=1,
                min_pose_detection_confidence=settings.POSE_MIN_DETECTION_CONFIDENCE,
                min_tracking_confidence=settings.POSE_MIN_TRACKING_CONFIDENCE,
            )
            self.uses_tasks_api = True
            logger.info(f"MediaPipe pose landmarker loaded from {model_path}")
            return vision.PoseLandmarker.create_from_options(options)

        detector = mp.solutions.pose.Pose(
            static_image_mode=False,
            model_complexity=settings.POSE_MODEL_COMPLEXITY,
            smooth_landmarks=settings.POSE_SMOOTH_LANDMARKS,
            enable_segmentation=False,
            min_detection_confidence=settings.POSE_MIN_DETECTION_CONFIDENCE,
            min_tracking_confidence=settings.POSE_MIN_TRACKING_CONFIDENCE,
        )
        logger.info("MediaPipe pose solution initialized")
        return detector

    def next_timestamp_ms(self, timestamp_ms: Optional[float] = None) -> int:
        """
        Timestamp for the next VIDEO-mode call.

        The landmarker rejects timestamps that do not strictly increase, so
        missing or repeated values are moved to one past the previous call.
        """
        if timestamp_ms is None:
            timestamp_ms = time.monotonic() * 1000.0
        ts = int(timestamp_ms)
        if self._last_timestamp_ms is not None and ts <= self._last_timestamp_ms:
            ts = self._last_timestamp_ms + 1
        self._last_timestamp_ms = ts
        return ts

    def detect(self, image: np.ndarray, timestamp_ms: Optional[float] = None) -> Optional[PoseFrame]:
        """
        Detect pose landmarks in an image.

        Args:
            image: RGB image as numpy array (H, W, 3)
            timestamp_ms: Frame timestamp in milliseconds (defaults to now)

        Returns:
            PoseFrame with landmarks or None if nobody was detected
        """
        if self.uses_tasks_api:
            import mediapipe as mp

            timestamp_ms = self.next_timestamp_ms(timestamp_ms)
            mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=image)
            results = self.pose_detector.detect_for_video(mp_image, timestamp_ms)
        else:
            results = self.pose_detector.process(image)

        if timestamp_ms is None:
            return landmarks_from_mediapipe(results)
        return landmarks_from_mediapipe(results, timestamp=timestamp_ms / 1000.0)

    def close(self):
        """Release detector resources."""
        if self.pose_detector is not None and hasattr(self.pose_detector, "close"):
            self.pose_detector.close()
        self.pose_detector = None
