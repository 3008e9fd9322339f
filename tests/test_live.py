
import numpy as np
import core.live as live
from core.analyzers import FaceAnalyzer, HeuristicAnalyzer
from core.session import CaptureSession, MOOD
from core.mood import MOODS
from helpers import DummyCam, UnpluggedCam


def _patch_window(monkeypatch, keys):
    shown = []
    seq = iter(keys)
    monkeypatch.setattr(live.cv2, "imshow", lambda title, img: shown.append((title, img.shape)))
    monkeypatch.setattr(live.cv2, "waitKey", lambda d: next(seq, ord("q")))
    monkeypatch.setattr(live.cv2, "destroyAllWindows", lambda: None)
    return shown


def test_run_live_face_check(monkeypatch, settings, face_frame):
    cam = DummyCam(face_frame)
    session = CaptureSession(settings, analyzer=HeuristicAnalyzer(settings), camera_factory=lambda idx: cam)
    shown = _patch_window(monkeypatch, [-1, ord("s"), -1, ord("c"), -1, ord("q")])

    out = live.run_live_app(settings, session=session)

    assert out.state == "result"
    assert out.detection.type == "single_face"
    assert cam.released
    assert shown and shown[0][0] == live.WINDOW_TITLES["face_check"]


def test_run_live_mood_manual_pick(monkeypatch, settings):
    session = CaptureSession(settings, app=MOOD, analyzer=HeuristicAnalyzer(settings),
                             camera_factory=lambda idx: DummyCam(None, opened=False))
    idx = MOODS.index("calm") + 1
    _patch_window(monkeypatch, [ord("s"), ord("m"), ord(str(idx)), ord("q")])

    out = live.run_live_app(settings, session=session)
    assert out.state == "result"
    assert out.mood.mood == "calm" and out.mood.source == "manual"


def test_reset_key_returns_to_welcome(monkeypatch, settings, face_frame):
    session = CaptureSession(settings, analyzer=HeuristicAnalyzer(settings),
                             camera_factory=lambda idx: DummyCam(face_frame))
    _patch_window(monkeypatch, [ord("s"), ord("c"), ord("r")])
    out = live.run_live_app(settings, session=session)
    assert out.state == "welcome" and out.detection is None


def test_render_each_state(settings, face_frame):
    class Happy(FaceAnalyzer):
        name = "fake"
        def detect_regions(self, image): return []
        def classify_expressions(self, image): return {"happy": 1.0}

    session = CaptureSession(settings, app=MOOD, analyzer=Happy(settings),
                             camera_factory=lambda idx: DummyCam(face_frame))
    welcome = live.render(session, None)
    assert welcome.shape == (settings.CAPTURE_HEIGHT, settings.CAPTURE_WIDTH, 3)

    session.start_camera()
    assert live.render(session, session.read_frame()).shape == face_frame.shape
    session.check_mood()
    assert live.render(session, None).shape == face_frame.shape

    session.reset()
    session.open_manual()
    assert live.render(session, None).shape[2] == 3


def test_handle_key_ignores_wrong_state(settings):
    session = CaptureSession(settings, analyzer=HeuristicAnalyzer(settings),
                             camera_factory=lambda idx: DummyCam(None))
    # 'c' without camera and 'm' in face check are no-ops
    assert live.handle_key(session, ord("c")) is True
    assert live.handle_key(session, ord("m")) is True
    assert session.state == "welcome"
    assert live.handle_key(session, ord("q")) is False


def test_unplugged_camera_does_not_kill_the_app(monkeypatch, settings, face_frame):
    cam = UnpluggedCam(face_frame)
    session = CaptureSession(settings, analyzer=HeuristicAnalyzer(settings), camera_factory=lambda idx: cam)
    _patch_window(monkeypatch, [ord("s"), -1, ord("c"), ord("q")])

    out = live.run_live_app(settings, session=session)
    assert out.state == "result"
    assert out.detection.type == "error"
    assert cam.released


def test_welcome_hides_mood_check_without_expressions(settings, face_frame):
    session = CaptureSession(settings, app=MOOD, analyzer=HeuristicAnalyzer(settings),
                             camera_factory=lambda idx: DummyCam(face_frame))
    session.start_camera()
    lines = live.welcome_lines(session)
    assert lines[0] == live.NO_EXPRESSIONS_HINT
    assert not any("check my mood" in line for line in lines)
    assert "m: pick manually" in lines[1]

    # 'c' is not offered, so it does nothing
    assert live.handle_key(session, ord("c")) is True
    assert session.state == "welcome" and session.camera_active


def test_welcome_offers_mood_check_with_expressions(settings, face_frame):
    class Happy(FaceAnalyzer):
        name = "fake"
        def detect_regions(self, image): return []
        def classify_expressions(self, image): return {"happy": 1.0}

    session = CaptureSession(settings, app=MOOD, analyzer=Happy(settings),
                             camera_factory=lambda idx: DummyCam(face_frame))
    assert live.welcome_lines(session)[1] == "s: start camera   m: pick manually"
    session.start_camera()
    assert live.welcome_lines(session)[1] == "c: check my mood   m: pick manually"
