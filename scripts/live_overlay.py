"""Run the live camera app.

Usage:
    uvicorn api.main:app --reload            # (separate, for API)
    python scripts/live_overlay.py           # face check window
    python scripts/live_overlay.py --app mood

Press 'q' to quit the window.
"""
import argparse
import logging
from core.config import Settings
from core.live import run_live_app

if __name__ == '__main__':
    p = argparse.ArgumentParser()
    p.add_argument("--app", choices=["face_check", "mood"], default="face_check")
    p.add_argument("--camera", type=int, default=None, help="Camera index override")
    args = p.parse_args()

    s = Settings()
    logging.basicConfig(level=s.LOG_LEVEL)
    run_live_app(s, app=args.app, camera_index=args.camera)
