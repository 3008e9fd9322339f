# core/live.py
"""
Live camera window for the face check and mood match apps.

Drives a CaptureSession from keyboard input:
- s: start camera
- c: capture (face check) / check mood (mood match)
- m: manual mood pick, then 1..N to choose
- r: reset to the welcome screen
- q: quit
"""

from __future__ import annotations

from typing import List, Optional
import logging

import cv2
import numpy as np

from core.config import Settings
from core.mood import MOODS
from core.session import (CaptureSession, SessionStateError, FACE_CHECK, MOOD,
                          WELCOME, MANUAL, RESULT)
from core.visual import draw_overlays, draw_mood, put_lines

logger = logging.getLogger(__name__)

WINDOW_TITLES = {
    FACE_CHECK: "Face Detection Test (q to quit)",
    MOOD: "Mood Match (q to quit)",
}
HINT_COLOR = (200, 200, 200)
ERROR_COLOR = (79, 77, 255)
NO_EXPRESSIONS_HINT = "Expression analysis unavailable"


def _blank(settings: Settings) -> np.ndarray:
    return np.full((settings.CAPTURE_HEIGHT, settings.CAPTURE_WIDTH, 3), 26, dtype=np.uint8)


def _can_scan(session: CaptureSession) -> bool:
    return session.app == FACE_CHECK or session.analyzer.supports_expressions


def welcome_lines(session: CaptureSession) -> List[str]:
    """Hint, key actions and detector name for the welcome screen."""
    if not session.camera_active:
        action, hint = "s: start camera", "Camera not active"
    elif session.app == FACE_CHECK:
        action, hint = "c: capture picture", "Position your face in the frame"
    elif _can_scan(session):
        action, hint = "c: check my mood", "Position your face in the frame"
    else:
        action, hint = "", NO_EXPRESSIONS_HINT
    if session.app == MOOD:
        action = (action + "   m: pick manually").strip()
    return [hint, action, f"detector: {session.analyzer.name}"]


def render(session: CaptureSession, frame: Optional[np.ndarray]) -> np.ndarray:
    """Compose the screen for the session's current state."""
    s = session.s
    st = session.status()
    if st.state == RESULT:
        base = session.captured_frame if session.captured_frame is not None else _blank(s)
        if st.app == FACE_CHECK:
            out = draw_overlays(base, result=st.detection)
        else:
            out = draw_mood(base, st.mood, st.error)
        h = out.shape[0]
        put_lines(out, ["r: try again   q: quit"], HINT_COLOR, origin=(10, h - 15))
        return out

    if st.state == MANUAL:
        out = _blank(s)
        lines = ["Pick your mood:"] + [f"{i}: {m}" for i, m in enumerate(MOODS, start=1)]
        put_lines(out, lines, HINT_COLOR)
        return out

    out = frame.copy() if frame is not None else _blank(s)
    h = out.shape[0]
    put_lines(out, welcome_lines(session), HINT_COLOR, origin=(10, h - 70))
    if st.error:
        put_lines(out, [st.error], ERROR_COLOR)
    return out


def handle_key(session: CaptureSession, key: int) -> bool:
    """Apply one key press. Returns False when the app should quit."""
    if key < 0:
        return True
    ch = chr(key & 0xFF)
    try:
        if ch == "q":
            return False
        if ch == "r":
            session.reset()
        elif session.state == WELCOME:
            if ch == "s":
                session.start_camera()
            elif ch == "c" and session.camera_active and _can_scan(session):
                if session.app == FACE_CHECK:
                    session.capture()
                else:
                    session.check_mood()
            elif ch == "m" and session.app == MOOD:
                session.open_manual()
        elif session.state == MANUAL and ch.isdigit():
            idx = int(ch) - 1
            if 0 <= idx < len(MOODS):
                session.pick_mood(MOODS[idx])
    except SessionStateError:
        logger.warning("[live] ignored key in wrong state", exc_info=True)
    except ValueError:
        logger.warning(f"[live] rejected key {ch!r}", exc_info=True)
    return True


def run_live_app(settings: Settings,
                 app: str = FACE_CHECK,
                 camera_index: Optional[int] = None,
                 session: Optional[CaptureSession] = None) -> CaptureSession:
    """
    Open the app window and run until 'q'.

    The camera is released and windows destroyed on every exit path.
    """
    if camera_index is not None:
        settings = settings.model_copy(update={"CAMERA_INDEX": camera_index})
    session = session or CaptureSession(settings, app=app)
    title = WINDOW_TITLES[session.app]
    logger.info(f"[live] starting {session.app} with analyzer={session.analyzer.name}")

    try:
        while True:
            frame = session.read_frame()
            cv2.imshow(title, render(session, frame))
            if not handle_key(session, cv2.waitKey(30)):
                break
    finally:
        session.stop_camera()
        cv2.destroyAllWindows()
    return session
