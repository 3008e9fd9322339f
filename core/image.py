"""
RGBA raster images used as detector input.

Frames come from OpenCV (BGR), uploads (encoded PNG/JPEG) or raw RGBA buffers;
everything is normalized to a read-only (height, width, 4) uint8 array.
"""
from __future__ import annotations
import os
import logging
from typing import Union

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class RasterImage:
    """Immutable RGBA pixel buffer, row-major, 4 bytes per pixel."""

    __slots__ = ("_pixels",)

    def __init__(self, pixels: np.ndarray):
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Expected (height, width, 4) RGBA array, got shape {pixels.shape}")
        arr = np.ascontiguousarray(pixels, dtype=np.uint8).copy()
        arr.setflags(write=False)
        self._pixels = arr

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    def __repr__(self) -> str:
        return f"RasterImage(width={self.width}, height={self.height})"

    # ---- constructors ----
    @classmethod
    def from_bytes(cls, width: int, height: int, data: Union[bytes, bytearray, memoryview]) -> "RasterImage":
        """
        Wrap a raw RGBA byte buffer.

        Raises:
            ValueError: buffer length does not match width*height*4.
        """
        if width < 0 or height < 0:
            raise ValueError(f"Negative image size: {width}x{height}")
        expected = width * height * 4
        if len(data) != expected:
            raise ValueError(f"RGBA buffer has {len(data)} bytes, expected {expected} for {width}x{height}")
        arr = np.frombuffer(bytes(data), dtype=np.uint8).reshape(height, width, 4)
        return cls(arr)

    @classmethod
    def from_bgr(cls, frame: np.ndarray) -> "RasterImage":
        """Convert an OpenCV frame (grayscale, BGR or BGRA) to RGBA."""
        if frame is None:
            raise ValueError("Frame is None")
        if frame.ndim == 2:
            rgba = cv2.cvtColor(frame, cv2.COLOR_GRAY2RGBA)
        elif frame.shape[2] == 3:
            rgba = cv2.cvtColor(frame, cv2.COLOR_BGR2RGBA)
        elif frame.shape[2] == 4:
            rgba = cv2.cvtColor(frame, cv2.COLOR_BGRA2RGBA)
        else:
            raise ValueError(f"Unsupported frame shape: {frame.shape}")
        return cls(rgba)

    @classmethod
    def decode(cls, data: bytes) -> "RasterImage":
        """
        Decode encoded image bytes (PNG, JPEG, ...).

        Raises:
            ValueError: bytes are not a decodable image.
        """
        buf = np.frombuffer(data, dtype=np.uint8)
        frame = cv2.imdecode(buf, cv2.IMREAD_COLOR) if buf.size else None
        if frame is None:
            raise ValueError("Could not decode image data")
        return cls.from_bgr(frame)

    @classmethod
    def load(cls, path: str) -> "RasterImage":
        """
        Read an image file from disk.

        Raises:
            FileNotFoundError: Input file missing.
            ValueError: File is not a readable image.
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"Image file not found: {path}")
        frame = cv2.imread(path, cv2.IMREAD_COLOR)
        if frame is None:
            raise ValueError(f"Could not read image: {path}")
        logger.debug(f"[image] loaded {path} size={frame.shape[1]}x{frame.shape[0]}")
        return cls.from_bgr(frame)

    # ---- conversions ----
    def to_bgr(self) -> np.ndarray:
        return cv2.cvtColor(self._pixels, cv2.COLOR_RGBA2BGR)

    def to_gray(self) -> np.ndarray:
        return cv2.cvtColor(self._pixels, cv2.COLOR_RGBA2GRAY)
