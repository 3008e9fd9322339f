"""
REST endpoints for face detection and mood match.
"""
from typing import Optional
import logging

from fastapi import APIRouter, UploadFile, File, HTTPException, Form
from fastapi.responses import JSONResponse

from core.analyzers import ExpressionUnavailableError, FaceAnalyzer, probe_analyzer
from core.config import Settings
from core.detection import run_detection
from core.image import RasterImage
from core.mood import MOODS, manual_mood, mood_from_expressions

router = APIRouter()
settings = Settings()
logger = logging.getLogger(__name__)

_analyzer: Optional[FaceAnalyzer] = None


def _ensure_analyzer(choice: Optional[str] = None) -> FaceAnalyzer:
    """Process-wide analyzer, probed once; an explicit choice gets a fresh probe."""
    global _analyzer
    if choice:
        return probe_analyzer(Settings(**{**settings.model_dump(), "ANALYZER": choice}))
    if _analyzer is None:
        _analyzer = probe_analyzer(settings)
    return _analyzer


async def _read_image(file: UploadFile) -> RasterImage:
    data = await file.read()
    try:
        return RasterImage.decode(data)
    except ValueError as e:
        logger.warning(f"[api] undecodable upload filename={file.filename}")
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/detect")
async def detect(
    file: UploadFile = File(...),
    analyzer: str | None = Form(None),
):
    """
    Count faces in an uploaded picture.

    Args:
        file: Uploaded image (PNG/JPEG).
        analyzer: Optional override: deepface | opencv | heuristic | auto.

    Returns:
        JSONResponse: DetectionResult payload.
    """
    logger.debug(f"[api] /detect filename={file.filename} analyzer={analyzer}")
    image = await _read_image(file)
    try:
        result = await run_detection(image, _ensure_analyzer(analyzer), settings)
    except Exception as e:
        logger.exception("[api] detection failed")
        raise HTTPException(status_code=500, detail=str(e))
    return JSONResponse(result.model_dump())


@router.post("/mood")
async def mood(file: UploadFile = File(...)):
    """
    Classify the facial expression in an uploaded picture and recommend movies.

    Returns:
        JSONResponse: MoodResult payload; 503 when no expression analyzer is available.
    """
    logger.debug(f"[api] /mood filename={file.filename}")
    image = await _read_image(file)
    try:
        scores = _ensure_analyzer().classify_expressions(image)
        result = mood_from_expressions(scores)
    except ExpressionUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("[api] expression analysis failed")
        raise HTTPException(status_code=500, detail=str(e))
    return JSONResponse(result.model_dump())


@router.get("/moods")
async def moods():
    return {"moods": MOODS}


@router.post("/mood/manual")
async def mood_manual(mood: str = Form(...)):
    """Manual mood pick -> movie recommendations."""
    try:
        result = manual_mood(mood)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return JSONResponse(result.model_dump())
