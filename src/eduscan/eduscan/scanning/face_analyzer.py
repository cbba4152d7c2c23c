"""Local face matching and liveness analysis built on face_recognition."""
from __future__ import annotations

import base64
import hashlib
import logging
from typing import Any, Mapping, Optional, Sequence

import cv2
import face_recognition
import numpy as np

from ..core.constants import DEFAULT_FACE_MATCH_TOLERANCE, DEFAULT_LIVENESS_TEXTURE_THRESHOLD
from ..core.exceptions import AnalysisError
from .reference_set import ReferenceEntry

logger = logging.getLogger(__name__)


def decode_image(data: bytes | str) -> np.ndarray:
    """Decode raw bytes, base64 text or a data URL into an RGB array."""
    if isinstance(data, str):
        # Strip "data:image/jpeg;base64," style prefixes.
        payload = data.split(",", 1)[1] if "," in data else data
        data = base64.b64decode(payload)

    nparr = np.frombuffer(data, np.uint8)
    img = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ValueError("Cannot decode image")
    if len(img.shape) == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    elif img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    return np.ascontiguousarray(rgb, dtype=np.uint8)


def texture_score(rgb: np.ndarray, box: tuple[int, int, int, int]) -> float:
    """Laplacian variance of the face region.

    Prints and screens are flat and smooth, so they score low.
    """
    top, right, bottom, left = box
    roi = rgb[max(0, top):bottom, max(0, left):right]
    if roi.size == 0:
        return 0.0
    gray = cv2.cvtColor(roi, cv2.COLOR_RGB2GRAY)
    return float(cv2.Laplacian(gray, cv2.CV_64F).var())


class FaceRecognitionAnalyzer:
    """Matches the frame against reference encodings; liveness from face texture.

    There is no emotion model, so verdicts carry ``emotion: None``; the
    "N/A" label is applied where events are displayed.
    """

    def __init__(
        self,
        *,
        tolerance: float = DEFAULT_FACE_MATCH_TOLERANCE,
        texture_threshold: float = DEFAULT_LIVENESS_TEXTURE_THRESHOLD,
    ):
        self._tolerance = float(tolerance)
        self._texture_threshold = float(texture_threshold)
        self._encodings: dict[tuple[str, str], Optional[np.ndarray]] = {}

    def _reference_encoding(self, ref: ReferenceEntry) -> Optional[np.ndarray]:
        key = (ref.student_id, hashlib.sha1(ref.image.encode("utf-8")).hexdigest())
        if key not in self._encodings:
            try:
                encodings = face_recognition.face_encodings(decode_image(ref.image))
            except (ValueError, TypeError) as exc:
                logger.warning("Reference image for student %s is unreadable: %s", ref.student_id, exc)
                encodings = []
            if not encodings:
                logger.warning("No face found in reference image for student %s", ref.student_id)
            self._encodings[key] = encodings[0] if encodings else None
        return self._encodings[key]

    def analyze(self, frame: bytes, references: Sequence[ReferenceEntry]) -> Mapping[str, Any]:
        if not references:
            return {
                "matchId": None,
                "confidence": 0,
                "isRealPerson": False,
                "emotion": "No students registered",
                "description": "Please register students first.",
            }

        try:
            rgb = decode_image(frame)
            boxes = face_recognition.face_locations(rgb)
            if not boxes:
                return {
                    "matchId": None,
                    "confidence": 0,
                    "isRealPerson": False,
                    "emotion": None,
                    "description": "No face detected in the frame.",
                }

            unknown = face_recognition.face_encodings(rgb, boxes[:1])[0]
            known = [(ref, self._reference_encoding(ref)) for ref in references]
            known = [(ref, enc) for ref, enc in known if enc is not None]

            texture = texture_score(rgb, boxes[0])
            is_real = texture > self._texture_threshold
            liveness = f"texture {texture:.0f} ({'pass' if is_real else 'fail'})"

            if not known:
                return {
                    "matchId": None,
                    "confidence": 0,
                    "isRealPerson": is_real,
                    "emotion": None,
                    "description": f"No usable reference faces; {liveness}.",
                }

            distances = face_recognition.face_distance(np.array([enc for _, enc in known]), unknown)
            best = int(np.argmin(distances))
            best_distance = float(distances[best])
            ref = known[best][0]
        except AnalysisError:
            raise
        except Exception as exc:
            raise AnalysisError(f"Face analysis failed: {exc}") from exc

        if best_distance > self._tolerance:
            return {
                "matchId": None,
                "confidence": round(max(0.0, 1.0 - best_distance), 2),
                "isRealPerson": is_real,
                "emotion": None,
                "description": f"No reference within tolerance (closest {ref.name}, distance {best_distance:.2f}); {liveness}.",
            }

        return {
            "matchId": ref.student_id,
            "confidence": round(max(0.0, 1.0 - best_distance), 2),
            "isRealPerson": is_real,
            "emotion": None,
            "description": f"Matched {ref.name} at distance {best_distance:.2f}; {liveness}.",
        }
