"""
SHOTFORM Configuration

Environment variables and analysis settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "SHOTFORM"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Temporal smoothing
    METRIC_WINDOW_SIZE: int = 30  # frames, ~1 second at 30 fps

    # Landmarks below this visibility count as missing (0.0 disables gating)
    MIN_LANDMARK_VISIBILITY: float = 0.0

    # Pose source (MediaPipe)
    POSE_MODEL_PATH: Optional[str] = None
    POSE_MODEL_COMPLEXITY: int = 1
    POSE_SMOOTH_LANDMARKS: bool = True
    POSE_MIN_DETECTION_CONFIDENCE: float = 0.5
    POSE_MIN_TRACKING_CONFIDENCE: float = 0.5

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
