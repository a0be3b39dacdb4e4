"""Testing utilities: fake frames and synthetic landmark sets.

The synthetic face is a placeholder ring of 468 points, roughly frontal. It
stands in for a real face-mesh model in tests and demos only.

Example:
    >>> from smartface.testing import make_frame, synthetic_face_landmarks
    >>> frame = make_frame(640, 480)
    >>> landmarks = synthetic_face_landmarks(640, 480)
    >>> landmarks.shape
    (468, 3)
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from smartface.types import NUM_FACE_LANDMARKS, Frame

# Below this size no synthetic face is produced
SYNTHETIC_MIN_WIDTH = 320
SYNTHETIC_MIN_HEIGHT = 240


def make_frame(
    width: int = 640,
    height: int = 480,
    frame_id: int = 0,
    t_src_ns: int = 0,
    channels: int = 3,
) -> Frame:
    """Create a frame whose pixel values encode their position.

    Pixel (y, x) holds ``(y % 256, x % 256, (x + y) % 256)`` so tests can
    check which region a crop was taken from.
    """
    ys, xs = np.mgrid[0:height, 0:width]
    planes = [ys % 256, xs % 256, (xs + ys) % 256, np.full_like(xs, 255)]
    if channels == 1:
        data = (ys % 256).astype(np.uint8)
    else:
        data = np.stack(planes[:channels], axis=-1).astype(np.uint8)
    return Frame(data=data, frame_id=frame_id, t_src_ns=t_src_ns)


def make_frames(count: int, width: int = 640, height: int = 480, fps: float = 30.0) -> List[Frame]:
    step_ns = int(1e9 / fps)
    return [make_frame(width, height, frame_id=i, t_src_ns=i * step_ns) for i in range(count)]


def synthetic_face_landmarks(width: int, height: int) -> np.ndarray:
    """Placeholder ring-shaped face mesh for an image of the given size.

    The ring is centered at (0.5, 0.5) with a horizontal radius of 0.3
    (0.24 for the second half of the points) and a vertical radius of 0.4,
    shifted slightly by amounts derived from the image size.

    Returns:
        (468, 3) float32 array, or an empty (0, 3) array for images smaller
        than 320x240.
    """
    if width < SYNTHETIC_MIN_WIDTH or height < SYNTHETIC_MIN_HEIGHT:
        return np.zeros((0, 3), dtype=np.float32)

    center_x = 0.5
    center_y = 0.5
    face_width = 0.3
    face_height = 0.4

    yaw_offset = (float(width % 30) - 15.0) / 1000.0
    pitch_offset = (float(height % 20) - 10.0) / 1000.0

    points = np.zeros((NUM_FACE_LANDMARKS, 3), dtype=np.float32)
    half = NUM_FACE_LANDMARKS // 2
    for i in range(NUM_FACE_LANDMARKS):
        angle = (i * 2.0 * math.pi) / NUM_FACE_LANDMARKS
        radius = face_width if i < half else face_width * 0.8
        points[i] = (
            center_x + radius * math.cos(angle) + yaw_offset,
            center_y + face_height * math.sin(angle) + pitch_offset,
            -0.05 + (i % 10) * 0.001,
        )
    return points


def face_landmarks(
    points: Optional[Dict[int, Tuple[float, float, float]]] = None,
    fill: Tuple[float, float, float] = (0.0, 0.0, 0.0),
    count: int = NUM_FACE_LANDMARKS,
) -> np.ndarray:
    """Build a landmark set with every point at ``fill`` except ``points``."""
    lms = np.tile(np.asarray(fill, dtype=np.float32), (count, 1))
    for index, xyz in (points or {}).items():
        lms[index] = xyz
    return lms


def landmarks_spanning(
    min_xy: Tuple[float, float],
    max_xy: Tuple[float, float],
    count: int = NUM_FACE_LANDMARKS,
) -> np.ndarray:
    """Landmark set whose extent is exactly the given normalized box."""
    lms = np.zeros((count, 3), dtype=np.float32)
    lms[:, 0] = (min_xy[0] + max_xy[0]) / 2
    lms[:, 1] = (min_xy[1] + max_xy[1]) / 2
    lms[0, :2] = min_xy
    lms[1, :2] = max_xy
    return lms


class FakeLandmarkBackend:
    """Backend returning canned landmark sets in order (then repeating the last)."""

    def __init__(self, results: Iterable[List[np.ndarray]]):
        self._results = list(results)
        self.calls = 0
        self.initialized = False

    def initialize(self) -> None:
        self.initialized = True

    def detect(self, image: np.ndarray) -> List[np.ndarray]:
        if not self._results:
            return []
        result = self._results[min(self.calls, len(self._results) - 1)]
        self.calls += 1
        return result

    def cleanup(self) -> None:
        self.initialized = False


__all__ = [
    "SYNTHETIC_MIN_WIDTH",
    "SYNTHETIC_MIN_HEIGHT",
    "make_frame",
    "make_frames",
    "synthetic_face_landmarks",
    "face_landmarks",
    "landmarks_spanning",
    "FakeLandmarkBackend",
]
