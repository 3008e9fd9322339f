
import pytest
from pydantic import ValidationError
from core.models import Region, DetectionResult, Movie, MoodResult, SessionStatus

def test_models():
    r = Region(x=10, y=20, width=30, height=40, confidence=0.5)
    assert (r.right, r.bottom, r.area) == (40, 60, 1200)
    dr = DetectionResult(type="single_face", count=1, regions=[r], analyzer="heuristic", message="ok")
    mr = MoodResult(mood="happy", source="manual", movies=[Movie(title="Up", year=2009, genre="Animation")])
    st = SessionStatus(app="mood", state="result", detection=dr, mood=mr)
    assert st.detection.regions[0].area == 1200
    assert st.mood.movies[0].title == "Up"
    assert dr.model_dump()["regions"][0] == {"x": 10, "y": 20, "width": 30, "height": 40, "confidence": 0.5}

@pytest.mark.parametrize("kwargs", [
    {"x": -1, "y": 0, "width": 1, "height": 1, "confidence": 0.5},
    {"x": 0, "y": 0, "width": -5, "height": 1, "confidence": 0.5},
    {"x": 0, "y": 0, "width": 1, "height": 1, "confidence": 1.5},
])
def test_region_rejects_invalid_geometry(kwargs):
    with pytest.raises(ValidationError):
        Region(**kwargs)

def test_detection_result_type_is_closed():
    with pytest.raises(ValidationError):
        DetectionResult(type="two_faces", count=2)
