"""Core data types for the smartface capture gate.

Landmarks follow the MediaPipe face-mesh convention: x and y are normalized
to the image ([0, 1]), z is a relative depth with no physical scale.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional

import numpy as np

logger = logging.getLogger(__name__)

# Face mesh topology (without the refined iris points)
NUM_FACE_LANDMARKS = 468

# Reference points used by the pose estimators
NOSE_TIP = 1
FOREHEAD = 10
LEFT_EYE_OUTER = 33
CHIN = 152
NOSE_BRIDGE = 168
LEFT_EAR = 234
RIGHT_EYE_OUTER = 263
RIGHT_EAR = 454


class Landmark(NamedTuple):
    """A single face-mesh point."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


def as_landmark_array(landmarks: Any, strict: bool = True) -> np.ndarray:
    """Normalize a landmark set to an (N, 3) float32 array.

    Accepts an array-like of shape (N, 2) or (N, >=3), a sequence of
    ``Landmark`` tuples, or a sequence of objects exposing ``x``/``y``/``z``
    attributes (MediaPipe ``NormalizedLandmark``). Columns past z (e.g.
    visibility) are dropped. ``None`` and empty inputs map to an empty
    (0, 3) array.

    Args:
        landmarks: Landmark set in any of the forms above.
        strict: Raise ValueError on malformed input. When False, malformed
            input maps to the empty array, which downstream code treats as
            "no face".
    """
    try:
        return _to_landmark_array(landmarks)
    except (TypeError, ValueError):
        if strict:
            raise
        logger.debug("Malformed landmark set, treating as empty", exc_info=True)
        return np.zeros((0, 3), dtype=np.float32)


def _to_landmark_array(landmarks: Any) -> np.ndarray:
    if landmarks is None:
        return np.zeros((0, 3), dtype=np.float32)

    if isinstance(landmarks, np.ndarray):
        arr = landmarks.astype(np.float32, copy=False)
    else:
        # MediaPipe NormalizedLandmarkList wraps its points in .landmark
        points = getattr(landmarks, "landmark", landmarks)
        rows = []
        for lm in points:
            if hasattr(lm, "x"):
                rows.append((lm.x, lm.y, getattr(lm, "z", 0.0)))
            else:
                rows.append(tuple(lm))
        if not rows:
            return np.zeros((0, 3), dtype=np.float32)
        arr = np.asarray(rows, dtype=np.float32)

    if arr.size == 0:
        return np.zeros((0, 3), dtype=np.float32)
    if arr.ndim != 2 or arr.shape[1] < 2:
        raise ValueError(f"Expected landmarks of shape (N, 2) or (N, >=3), got {arr.shape}")
    if arr.shape[1] == 2:
        arr = np.hstack([arr, np.zeros((arr.shape[0], 1), dtype=np.float32)])
    return arr[:, :3]


def is_face_landmark_set(landmarks: np.ndarray) -> bool:
    """True if the set holds the full face mesh (anything shorter means no face)."""
    return len(landmarks) >= NUM_FACE_LANDMARKS


@dataclass(frozen=True)
class PoseEstimate:
    """Head pose angles in degrees.

    The zero pose doubles as the "could not estimate" sentinel.
    """

    yaw: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0


def pixel_format_of(image: np.ndarray, bgr: bool = False) -> str:
    """Name the pixel format of an image buffer from its channels and dtype.

    Pass ``bgr=True`` for OpenCV-decoded buffers (blue channel first).
    """
    channels = 1 if image.ndim == 2 else image.shape[2]
    if image.dtype == np.uint8:
        if bgr:
            return {1: "GRAY8", 3: "SBGR", 4: "SBGRA"}.get(channels, f"UINT8C{channels}")
        return {1: "GRAY8", 3: "SRGB", 4: "SRGBA"}.get(channels, f"UINT8C{channels}")
    if image.dtype == np.uint16:
        return {1: "GRAY16", 3: "SRGB48", 4: "SRGBA64"}.get(channels, f"UINT16C{channels}")
    if image.dtype == np.float32:
        return f"VEC32F{channels}"
    return f"{image.dtype.name.upper()}C{channels}"


@dataclass
class Frame:
    """An input video frame.

    Attributes:
        data: Image buffer (H, W) or (H, W, C).
        frame_id: Frame index in the source.
        t_src_ns: Source timestamp in nanoseconds.
        color_format: Explicit pixel format name (e.g. "SBGR" for frames
            decoded by OpenCV). None infers it from ``data``.
    """

    data: np.ndarray
    frame_id: int = 0
    t_src_ns: int = 0
    color_format: Optional[str] = None

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def pixel_format(self) -> str:
        return self.color_format or pixel_format_of(self.data)


class CropBox(NamedTuple):
    """Integer pixel rectangle (x, y, width, height)."""

    x: int
    y: int
    width: int
    height: int


@dataclass
class CroppedRegion:
    """Face sub-image cut out of an accepted frame.

    Attributes:
        image: Copy of the cropped pixels; owned by the consumer.
        box: Rectangle in source pixel coordinates.
        pixel_format: Pixel format of the source frame.
    """

    image: np.ndarray
    box: CropBox
    pixel_format: str

    @property
    def width(self) -> int:
        return self.box.width

    @property
    def height(self) -> int:
        return self.box.height


def landmark_at(landmarks: np.ndarray, index: int) -> Optional[Landmark]:
    """Bounds-checked lookup, ``None`` when the index is outside the set."""
    if 0 <= index < len(landmarks):
        x, y, z = landmarks[index]
        return Landmark(float(x), float(y), float(z))
    return None


__all__ = [
    "NUM_FACE_LANDMARKS",
    "NOSE_TIP",
    "FOREHEAD",
    "LEFT_EYE_OUTER",
    "CHIN",
    "NOSE_BRIDGE",
    "LEFT_EAR",
    "RIGHT_EYE_OUTER",
    "RIGHT_EAR",
    "Landmark",
    "as_landmark_array",
    "is_face_landmark_set",
    "landmark_at",
    "PoseEstimate",
    "pixel_format_of",
    "Frame",
    "CropBox",
    "CroppedRegion",
]
