"""
Configuration for face detection and the demo apps.
"""
from pydantic import BaseModel
import os

ANALYZERS = ("auto", "deepface", "opencv", "heuristic")
MERGE_STRATEGIES = ("single_pass", "connected")


class Settings(BaseModel):
    """
    Runtime settings with environment-variable overrides.
    """
    ANALYZER: str = os.getenv("ANALYZER", "auto")
    DETECTOR_BACKEND: str = os.getenv("DETECTOR_BACKEND", "opencv")

    # Heuristic detector tunables
    BLOCK_SIZE: int = int(os.getenv("BLOCK_SIZE", "50"))
    MIN_SKIN_RATIO: float = float(os.getenv("MIN_SKIN_RATIO", "0.3"))
    MIN_SKIN_PIXELS: int = int(os.getenv("MIN_SKIN_PIXELS", "100"))
    MIN_FACE_CONFIDENCE: float = float(os.getenv("MIN_FACE_CONFIDENCE", "0.4"))
    MIN_FACE_AREA: int = int(os.getenv("MIN_FACE_AREA", "1000"))
    MERGE_STRATEGY: str = os.getenv("MERGE_STRATEGY", "single_pass")

    DETECTION_DELAY: float = float(os.getenv("DETECTION_DELAY", "0"))
    MAX_DETECTED_FACES: int = int(os.getenv("MAX_DETECTED_FACES", "10"))

    CAMERA_INDEX: int = int(os.getenv("CAMERA_INDEX", "0"))
    CAPTURE_WIDTH: int = int(os.getenv("CAPTURE_WIDTH", "640"))
    CAPTURE_HEIGHT: int = int(os.getenv("CAPTURE_HEIGHT", "480"))
    SESSION_LOG_SIZE: int = int(os.getenv("SESSION_LOG_SIZE", "200"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG")

    def __init__(self, **data):
        super().__init__(**data)
        # Normalize choice fields: strip comments/extra words, lower-case, validate
        analyzer = (self.ANALYZER or "auto").strip().split()[0].lower()
        if analyzer not in ANALYZERS:
            analyzer = "auto"
        object.__setattr__(self, "ANALYZER", analyzer)

        strategy = (self.MERGE_STRATEGY or "single_pass").strip().split()[0].lower()
        if strategy not in MERGE_STRATEGIES:
            strategy = "single_pass"
        object.__setattr__(self, "MERGE_STRATEGY", strategy)

        object.__setattr__(self, "BLOCK_SIZE", max(1, self.BLOCK_SIZE))
        object.__setattr__(self, "DETECTION_DELAY", max(0.0, self.DETECTION_DELAY))
        object.__setattr__(self, "LOG_LEVEL", (self.LOG_LEVEL or "DEBUG").upper())
