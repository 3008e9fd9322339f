import numpy as np
import pytest

from core.config import Settings
from core.image import RasterImage
from helpers import SKIN_BGR, paint, rgba_canvas


@pytest.fixture
def settings():
    return Settings(ANALYZER="heuristic", DETECTION_DELAY=0)


@pytest.fixture
def face_image():
    """200x200 black image with a 100x100 skin square at (50, 50)."""
    return RasterImage(paint(rgba_canvas(200, 200), 50, 50, 100, 100))


@pytest.fixture
def face_frame():
    """Same scene as face_image, as an OpenCV BGR frame."""
    frame = np.zeros((200, 200, 3), dtype=np.uint8)
    frame[50:150, 50:150] = SKIN_BGR
    return frame


@pytest.fixture
def two_faces_frame():
    frame = np.zeros((200, 400, 3), dtype=np.uint8)
    frame[50:150, 50:150] = SKIN_BGR
    frame[50:150, 250:350] = SKIN_BGR
    return frame
