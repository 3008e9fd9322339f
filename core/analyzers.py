"""
Face analyzers: one capability, three backends.

- DeepFaceAnalyzer: face boxes + expression scores from DeepFace
- CascadeAnalyzer: OpenCV Haar cascade face boxes
- HeuristicAnalyzer: skin-tone block heuristic (always available)

probe_analyzer() picks the best backend available at runtime.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, List
import importlib.util
import logging
import sys

import cv2

from core.config import Settings
from core.heuristic import detect_face_regions
from core.image import RasterImage
from core.models import Region

logger = logging.getLogger(__name__)

# DeepFace returns the whole frame with confidence 0 when nothing is found
DEEPFACE_MIN_CONFIDENCE = 0.5
CASCADE_FILE = "haarcascade_frontalface_default.xml"


class ExpressionUnavailableError(RuntimeError):
    """The active analyzer cannot classify facial expressions."""


class FaceAnalyzer(ABC):
    name = "base"

    def __init__(self, settings: Settings):
        self.s = settings

    @abstractmethod
    def detect_regions(self, image: RasterImage) -> List[Region]:
        ...

    def classify_expressions(self, image: RasterImage) -> Dict[str, float]:
        raise ExpressionUnavailableError(f"Analyzer '{self.name}' does not classify expressions")

    @property
    def supports_expressions(self) -> bool:
        return False


class HeuristicAnalyzer(FaceAnalyzer):
    name = "heuristic"

    def detect_regions(self, image: RasterImage) -> List[Region]:
        return detect_face_regions(
            image,
            block_size=self.s.BLOCK_SIZE,
            min_skin_ratio=self.s.MIN_SKIN_RATIO,
            min_skin_pixels=self.s.MIN_SKIN_PIXELS,
            min_confidence=self.s.MIN_FACE_CONFIDENCE,
            min_area=self.s.MIN_FACE_AREA,
            merge_strategy=self.s.MERGE_STRATEGY,
        )


def _clamp_box(x: int, y: int, w: int, h: int, width: int, height: int):
    x = max(0, min(int(x), width)); y = max(0, min(int(y), height))
    w = max(0, min(int(w), width - x)); h = max(0, min(int(h), height - y))
    return x, y, w, h


class CascadeAnalyzer(FaceAnalyzer):
    name = "opencv"

    def __init__(self, settings: Settings):
        super().__init__(settings)
        # some opencv builds ship without the objdetect module
        if not hasattr(cv2, "CascadeClassifier"):
            raise RuntimeError("This OpenCV build has no CascadeClassifier")
        data = getattr(cv2, "data", None)
        path = (data.haarcascades if data is not None else "") + CASCADE_FILE
        try:
            self._cascade = cv2.CascadeClassifier(path)
        except cv2.error as e:
            raise RuntimeError(f"Could not load Haar cascade: {path}") from e
        if self._cascade.empty():
            raise RuntimeError(f"Could not load Haar cascade: {path}")

    def detect_regions(self, image: RasterImage) -> List[Region]:
        gray = image.to_gray()
        faces = self._cascade.detectMultiScale(gray, scaleFactor=1.1, minNeighbors=5, minSize=(30, 30))
        regions: List[Region] = []
        for (x, y, w, h) in list(faces)[: self.s.MAX_DETECTED_FACES]:
            x, y, w, h = _clamp_box(x, y, w, h, image.width, image.height)
            if w and h:
                regions.append(Region(x=x, y=y, width=w, height=h, confidence=1.0))
        logger.debug(f"[analyzer] cascade faces={len(regions)}")
        return regions


class DeepFaceAnalyzer(FaceAnalyzer):
    name = "deepface"

    @property
    def supports_expressions(self) -> bool:
        return True

    def detect_regions(self, image: RasterImage) -> List[Region]:
        # Lazy import: heavy TF stack, and tests swap sys.modules['deepface']
        from deepface import DeepFace

        dets = DeepFace.extract_faces(
            img_path=image.to_bgr(),
            detector_backend=self.s.DETECTOR_BACKEND,
            enforce_detection=False,
            align=True,
        )
        regions: List[Region] = []
        for d in dets or []:
            fa = d.get("facial_area") or {}
            try:
                conf = float(d.get("confidence", 1.0))
            except (TypeError, ValueError):
                conf = 0.0
            if conf < DEEPFACE_MIN_CONFIDENCE:
                continue
            x, y, w, h = _clamp_box(fa.get("x", 0), fa.get("y", 0), fa.get("w", 0), fa.get("h", 0),
                                    image.width, image.height)
            if w and h:
                regions.append(Region(x=x, y=y, width=w, height=h, confidence=min(1.0, conf)))
        logger.debug(f"[analyzer] deepface faces={len(regions)}")
        return regions[: self.s.MAX_DETECTED_FACES]

    def classify_expressions(self, image: RasterImage) -> Dict[str, float]:
        try:
            from deepface import DeepFace
        except Exception as e:
            raise ExpressionUnavailableError("DeepFace import failed. Ensure deepface/tensorflow stack is installed.") from e

        res = DeepFace.analyze(
            image.to_bgr(),
            actions=["emotion"],
            enforce_detection=False,
            detector_backend=self.s.DETECTOR_BACKEND,
        )
        # DeepFace returns list[dict] or dict depending on version; normalize to list
        res = res if isinstance(res, list) else [res]
        r0 = res[0] if res else {}
        probs = r0.get("emotion") if isinstance(r0.get("emotion"), dict) else None
        if probs:
            total = sum(float(v) for v in probs.values()) or 1.0
            return {str(k): float(v) / total for k, v in probs.items()}
        dom = r0.get("dominant_emotion")
        if isinstance(dom, str) and dom:
            return {dom: 1.0}
        return {}


def _deepface_available() -> bool:
    """True when deepface is installed and its TF stack actually imports."""
    if sys.modules.get("deepface") is None and importlib.util.find_spec("deepface") is None:
        return False
    try:
        from deepface import DeepFace  # noqa: F401
    except Exception:
        logger.warning("[analyzer] deepface is installed but failed to import", exc_info=True)
        return False
    return True


def probe_analyzer(settings: Settings) -> FaceAnalyzer:
    """
    Pick an analyzer by runtime capability probing.

    "auto" prefers DeepFace, then the OpenCV cascade, then the heuristic.
    An explicit choice that is not available falls back to the heuristic.
    """
    choice = settings.ANALYZER

    if choice in ("auto", "deepface"):
        if _deepface_available():
            logger.info("[analyzer] using DeepFace")
            return DeepFaceAnalyzer(settings)
        if choice == "deepface":
            logger.warning("[analyzer] deepface unavailable; using heuristic")
            return HeuristicAnalyzer(settings)

    if choice in ("auto", "opencv"):
        try:
            analyzer = CascadeAnalyzer(settings)
            logger.info("[analyzer] using OpenCV cascade")
            return analyzer
        except (RuntimeError, AttributeError):
            logger.warning("[analyzer] Haar cascade unavailable; using heuristic")

    logger.info("[analyzer] using skin-tone heuristic")
    return HeuristicAnalyzer(settings)
