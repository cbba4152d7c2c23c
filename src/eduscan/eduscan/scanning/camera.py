"""Camera device management."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Protocol

import cv2

from ..core.exceptions import CameraError

logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    """Anything that can hand the scanner one encoded image per call."""

    def open(self) -> None:
        ...

    def capture_frame(self) -> bytes:
        ...

    def close(self) -> None:
        ...


@dataclass
class CameraConfig:
    index: int = 0
    width: Optional[int] = None
    height: Optional[int] = None
    jpeg_quality: int = 60


class OpenCVCamera:
    """Owns a cv2.VideoCapture and returns JPEG-encoded frames."""

    def __init__(self, config: Optional[CameraConfig] = None):
        self.config = config or CameraConfig()
        self._capture: Optional[cv2.VideoCapture] = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._capture is not None and self._capture.isOpened()

    def open(self) -> None:
        with self._lock:
            if self.is_open:
                return
            capture = cv2.VideoCapture(self.config.index)
            if not capture or not capture.isOpened():
                raise CameraError(f"Cannot open camera index {self.config.index}")
            if self.config.width:
                capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.width)
            if self.config.height:
                capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.height)
            self._capture = capture
            logger.info(
                "Camera ready: %sx%s",
                int(capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
                int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
            )

    def capture_frame(self) -> bytes:
        with self._lock:
            if not self.is_open:
                raise CameraError("Camera is not open")
            ok, frame = self._capture.read()
            if not ok or frame is None:
                raise CameraError("Failed to read frame from camera")
            ok, buf = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), int(self.config.jpeg_quality)])
            if not ok:
                raise CameraError("Failed to encode frame")
            return buf.tobytes()

    def close(self) -> None:
        with self._lock:
            if self._capture is not None:
                self._capture.release()
                self._capture = None
                logger.info("Camera released")
