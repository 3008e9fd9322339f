# core/detection.py
"""
Face-count detection for the face check app.
"""
from __future__ import annotations
from typing import List, Optional
import asyncio
import logging

from core.analyzers import FaceAnalyzer, HeuristicAnalyzer
from core.config import Settings
from core.image import RasterImage
from core.models import DetectionResult, Region

logger = logging.getLogger(__name__)

RESULT_MESSAGES = {
    "no_face": "No face detected in the image. Please try again with your face clearly visible in good lighting.",
    "single_face": "Face detected successfully!",
    "multiple_faces": "Multiple faces detected ({count} faces). Please ensure only one person is in the frame.",
    "error": "Face detection failed. Please try again.",
}


def classify_detections(regions: List[Region], analyzer: Optional[str] = None) -> DetectionResult:
    """Turn a region list into a no_face / single_face / multiple_faces result."""
    count = len(regions)
    if count == 0:
        kind = "no_face"
    elif count == 1:
        kind = "single_face"
    else:
        kind = "multiple_faces"
    return DetectionResult(
        type=kind,
        count=count,
        regions=list(regions),
        analyzer=analyzer,
        message=RESULT_MESSAGES[kind].format(count=count),
    )


def error_result(analyzer: Optional[str] = None) -> DetectionResult:
    return DetectionResult(type="error", count=0, analyzer=analyzer, message=RESULT_MESSAGES["error"])


def detect_faces(image: RasterImage, analyzer: FaceAnalyzer, settings: Settings) -> DetectionResult:
    """
    Detect faces with the given analyzer.

    If a cascade/ML analyzer raises, the skin-tone heuristic is used instead.
    """
    logger.debug(f"[detect] analyzer={analyzer.name} image={image.width}x{image.height}")
    try:
        regions = analyzer.detect_regions(image)
        used = analyzer.name
    except Exception:
        if isinstance(analyzer, HeuristicAnalyzer):
            raise
        logger.exception(f"[detect] {analyzer.name} failed; falling back to heuristic")
        fallback = HeuristicAnalyzer(settings)
        regions = fallback.detect_regions(image)
        used = fallback.name

    result = classify_detections(regions, used)
    logger.debug(f"[detect] result={result.type} count={result.count} analyzer={used}")
    return result


async def run_detection(image: RasterImage, analyzer: FaceAnalyzer, settings: Settings) -> DetectionResult:
    """Async detection with the optional cosmetic DETECTION_DELAY before resolving."""
    result = detect_faces(image, analyzer, settings)
    if settings.DETECTION_DELAY > 0:
        await asyncio.sleep(settings.DETECTION_DELAY)
    return result
