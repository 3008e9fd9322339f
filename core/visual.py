"""Visualization & image annotation helpers.

- draw_overlays: draw face rectangles and the detection result banner
- draw_mood: draw the mood and movie picks
- write_annotated: save a loaded image with its detection result drawn on
- annotate_image: detect faces in an image file and write an annotated copy
"""
from __future__ import annotations
import os
import cv2
import numpy as np
from typing import List, Optional, Tuple

from core.analyzers import FaceAnalyzer, probe_analyzer
from core.config import Settings
from core.detection import detect_faces
from core.image import RasterImage
from core.models import DetectionResult, MoodResult, Region

# BGR
RESULT_COLORS = {
    "no_face": (79, 77, 255),
    "single_face": (26, 196, 82),
    "multiple_faces": (20, 173, 250),
    "error": (79, 77, 255),
}
REGION_COLOR = (175, 121, 15)


def put_lines(out: np.ndarray, lines: List[str], color: Tuple[int, int, int],
              origin: Tuple[int, int] = (10, 25), scale: float = 0.55) -> None:
    x, y = origin
    for line in lines:
        cv2.putText(out, line, (x, y), cv2.FONT_HERSHEY_SIMPLEX, scale, color, 2, cv2.LINE_AA)
        y += int(28 * scale / 0.55)


def _wrap(text: str, width: int = 48) -> List[str]:
    words, lines, cur = text.split(), [], ""
    for w in words:
        if cur and len(cur) + 1 + len(w) > width:
            lines.append(cur)
            cur = w
        else:
            cur = f"{cur} {w}".strip()
    if cur:
        lines.append(cur)
    return lines


def draw_overlays(frame: np.ndarray,
                  regions: List[Region] | None = None,
                  result: Optional[DetectionResult] = None,
                  color: Tuple[int, int, int] = REGION_COLOR) -> np.ndarray:
    """Draw face rectangles and the result message on a copy of the frame.

    Args:
        frame: BGR image
        regions: face regions to outline
        result: optional detection result; its message is drawn in the result colour
        color: BGR color for rectangles

    Returns:
        Annotated copy of the frame
    """
    out = frame.copy()
    h, w = out.shape[:2]

    if regions is None:
        regions = result.regions if result is not None else []

    for reg in regions:
        # clamp to image bounds
        x = max(0, min(reg.x, w - 1)); y = max(0, min(reg.y, h - 1))
        rw = max(0, min(reg.width, w - x)); rh = max(0, min(reg.height, h - y))
        cv2.rectangle(out, (x, y), (x + rw, y + rh), color, 2)
        cv2.putText(out, f"{reg.confidence:.2f}", (x, max(0, y - 6)),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.45, color, 1, cv2.LINE_AA)

    if result is not None:
        put_lines(out, _wrap(result.message), RESULT_COLORS.get(result.type, (255, 255, 255)))
    return out


def draw_mood(frame: np.ndarray, mood: Optional[MoodResult], error: Optional[str] = None) -> np.ndarray:
    """Draw the mood headline and movie list, or the error text."""
    out = frame.copy()
    if mood is None:
        put_lines(out, _wrap(error or "No mood detected."), RESULT_COLORS["error"])
        return out
    lines = [f"Mood: {mood.mood}"] + [f"- {m.title} ({m.year})" for m in mood.movies]
    put_lines(out, lines, RESULT_COLORS["single_face"])
    return out


def write_annotated(image: RasterImage, result: DetectionResult, output_path: str) -> None:
    """Draw a detection result onto an already-loaded image and save it."""
    annotated = draw_overlays(image.to_bgr(), result=result)
    if not cv2.imwrite(output_path, annotated):
        raise RuntimeError(f"Could not write image: {output_path}")


def annotate_image(input_path: str,
                   output_path: str,
                   settings: Settings,
                   analyzer: Optional[FaceAnalyzer] = None) -> DetectionResult:
    """Detect faces in an image file and write an annotated copy.

    Returns the detection result drawn onto the image.
    """
    if not os.path.exists(input_path):
        raise FileNotFoundError(f"Image not found: {input_path}")

    frame = cv2.imread(input_path, cv2.IMREAD_COLOR)
    if frame is None:
        raise RuntimeError(f"Could not read image: {input_path}")

    analyzer = analyzer or probe_analyzer(settings)
    image = RasterImage.from_bgr(frame)
    result = detect_faces(image, analyzer, settings)
    write_annotated(image, result, output_path)
    return result
