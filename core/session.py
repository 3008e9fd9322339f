# core/session.py
"""
Capture session: camera handle, UI state machine and debug log for one user.

Face check:  welcome -> result (capture)
Mood match:  welcome -> scanning -> result (mood check)
             welcome -> manual -> result (manual pick)
Both:        any -> welcome (reset)

The camera is released on every exit path: after a capture, on reset and on failure.
"""
from __future__ import annotations
from collections import deque
from typing import Callable, Deque, Optional
import logging
import time

import cv2
import numpy as np

from core.analyzers import ExpressionUnavailableError, FaceAnalyzer, probe_analyzer
from core.config import Settings
from core.detection import detect_faces, error_result
from core.image import RasterImage
from core.models import DetectionResult, MoodResult, SessionStatus
from core.mood import manual_mood, mood_from_expressions

logger = logging.getLogger(__name__)

WELCOME = "welcome"
SCANNING = "scanning"
MANUAL = "manual"
RESULT = "result"

FACE_CHECK = "face_check"
MOOD = "mood"

# (app, state, event) -> next state
TRANSITIONS = {
    (FACE_CHECK, WELCOME, "capture"): RESULT,
    (MOOD, WELCOME, "scan"): SCANNING,
    (MOOD, SCANNING, "scanned"): RESULT,
    (MOOD, WELCOME, "manual"): MANUAL,
    (MOOD, MANUAL, "pick"): RESULT,
}

CAMERA_DENIED = "Camera access denied. Please allow camera access and try again."
CAMERA_UNAVAILABLE = "Camera not available. Please try again."
EXPRESSION_FAILED = "Could not read your expression. Pick a mood manually instead."


class SessionStateError(RuntimeError):
    """Event not allowed in the current session state."""


class CaptureSession:
    """Per-user UI context passed to capture/detect operations."""

    def __init__(self,
                 settings: Settings,
                 app: str = FACE_CHECK,
                 analyzer: Optional[FaceAnalyzer] = None,
                 camera_factory: Optional[Callable[[int], object]] = None):
        if app not in (FACE_CHECK, MOOD):
            raise ValueError(f"Unknown app: {app}")
        self.s = settings
        self.app = app
        self.analyzer = analyzer if analyzer is not None else probe_analyzer(settings)
        self._camera_factory = camera_factory or cv2.VideoCapture
        self.state = WELCOME
        self.busy = False
        self.error: Optional[str] = None
        self.detection: Optional[DetectionResult] = None
        self.mood: Optional[MoodResult] = None
        self.captured_frame: Optional[np.ndarray] = None
        self._camera = None
        self._log: Deque[str] = deque(maxlen=max(1, settings.SESSION_LOG_SIZE))

    # ---- debug log ----
    def _debug(self, msg: str) -> None:
        logger.debug(f"[session] {msg}")
        self._log.append(f"{time.strftime('%H:%M:%S')} {msg}")

    @property
    def log(self) -> list[str]:
        return list(self._log)

    # ---- state machine ----
    def _transition(self, event: str) -> None:
        nxt = TRANSITIONS.get((self.app, self.state, event))
        if nxt is None:
            raise SessionStateError(f"Event '{event}' not allowed in state '{self.state}' ({self.app})")
        self._debug(f"{self.state} -> {nxt} on {event}")
        self.state = nxt

    def _begin(self) -> None:
        if self.busy:
            raise SessionStateError("A capture is already in progress")
        self.busy = True
        self.error = None
        self.detection = None
        self.mood = None

    # ---- camera ----
    @property
    def camera_active(self) -> bool:
        return self._camera is not None

    def start_camera(self) -> bool:
        """Open the camera; on failure record the error and stay in welcome."""
        self.error = None
        if self._camera is not None:
            return True
        try:
            cap = self._camera_factory(self.s.CAMERA_INDEX)
            opened = bool(cap is not None and cap.isOpened())
        except Exception:
            logger.exception("[session] camera open raised")
            cap, opened = None, False
        if not opened:
            if cap is not None:
                cap.release()
            self.error = CAMERA_DENIED
            self._debug(f"camera {self.s.CAMERA_INDEX} could not be opened")
            return False
        if hasattr(cap, "set"):
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.s.CAPTURE_WIDTH)
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.s.CAPTURE_HEIGHT)
        self._camera = cap
        self._debug(f"camera {self.s.CAMERA_INDEX} started")
        return True

    def stop_camera(self) -> None:
        if self._camera is not None:
            self._camera.release()
            self._camera = None
            self._debug("camera stopped")

    def read_frame(self) -> Optional[np.ndarray]:
        """Latest preview frame, or None when the camera is off or the read failed."""
        if self._camera is None:
            return None
        try:
            ok, frame = self._camera.read()
        except Exception:
            logger.exception("[session] camera read raised")
            return None
        return frame if ok else None

    def _grab(self) -> Optional[RasterImage]:
        frame = self.read_frame()
        if frame is None:
            self._debug("no frame captured")
            return None
        self.captured_frame = frame
        return RasterImage.from_bgr(frame)

    # ---- face check ----
    def capture(self) -> DetectionResult:
        """Capture a frame, count faces, go to result and stop the camera."""
        if self.app != FACE_CHECK or self.state != WELCOME:
            raise SessionStateError(f"Cannot capture in state '{self.state}' ({self.app})")
        self._begin()
        try:
            try:
                image = self._grab()
                if image is None:
                    self.error = CAMERA_UNAVAILABLE
                    self.detection = error_result(self.analyzer.name)
                else:
                    self.detection = detect_faces(image, self.analyzer, self.s)
            except Exception:
                logger.exception("[session] face detection failed")
                self.error = "Face detection failed. Please ensure good lighting and try again."
                self.detection = error_result(self.analyzer.name)
            self._transition("capture")
            return self.detection
        finally:
            self.busy = False
            self.stop_camera()

    # ---- mood match ----
    def check_mood(self) -> Optional[MoodResult]:
        """Capture a frame, classify the expression and recommend movies."""
        if self.busy:
            raise SessionStateError("A capture is already in progress")
        self._transition("scan")
        self._begin()
        try:
            try:
                image = self._grab()
                if image is None:
                    self.error = CAMERA_UNAVAILABLE
                else:
                    scores = self.analyzer.classify_expressions(image)
                    self.mood = mood_from_expressions(scores)
            except (ExpressionUnavailableError, ValueError) as e:
                self._debug(f"expression unavailable: {e}")
                self.error = EXPRESSION_FAILED
            except Exception:
                logger.exception("[session] expression analysis failed")
                self.error = EXPRESSION_FAILED
            self._transition("scanned")
            return self.mood
        finally:
            self.busy = False
            self.stop_camera()

    def open_manual(self) -> None:
        self._transition("manual")
        self.stop_camera()

    def pick_mood(self, mood: str) -> MoodResult:
        """Manual pick; unknown moods raise ValueError and keep the manual screen."""
        if self.state != MANUAL:
            raise SessionStateError(f"Cannot pick a mood in state '{self.state}'")
        result = manual_mood(mood)
        self.mood = result
        self.error = None
        self._transition("pick")
        return result

    # ---- reset ----
    def reset(self) -> None:
        self.stop_camera()
        self.detection = None
        self.mood = None
        self.captured_frame = None
        self.error = None
        self.busy = False
        if self.state != WELCOME:
            self._debug(f"{self.state} -> {WELCOME} on reset")
        self.state = WELCOME

    def status(self) -> SessionStatus:
        return SessionStatus(
            app=self.app,
            state=self.state,
            busy=self.busy,
            camera_active=self.camera_active,
            error=self.error,
            detection=self.detection,
            mood=self.mood,
            log=self.log,
        )
