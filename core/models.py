"""
Pydantic data models for detection results and API IO.
"""
from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Literal

DetectionType = Literal["no_face", "single_face", "multiple_faces", "error"]
SessionApp = Literal["face_check", "mood"]
SessionStateName = Literal["welcome", "scanning", "manual", "result"]


class Region(BaseModel):
    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(ge=0)
    height: int = Field(ge=0)
    confidence: float = Field(ge=0.0, le=1.0)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height


class DetectionResult(BaseModel):
    type: DetectionType
    count: int = 0
    regions: List[Region] = Field(default_factory=list)
    analyzer: Optional[str] = None
    message: str = ""


class Movie(BaseModel):
    title: str
    year: int
    genre: str


class MoodResult(BaseModel):
    mood: str
    source: Literal["camera", "manual"]
    expressions: Dict[str, float] = Field(default_factory=dict)
    movies: List[Movie] = Field(default_factory=list)
    message: str = ""


class SessionStatus(BaseModel):
    app: SessionApp
    state: SessionStateName
    busy: bool = False
    camera_active: bool = False
    error: Optional[str] = None
    detection: Optional[DetectionResult] = None
    mood: Optional[MoodResult] = None
    log: List[str] = Field(default_factory=list)
