"""Head pose estimation from face-mesh landmarks.

Two geometric approximations are provided. Neither is a real 3D solver and
they disagree with each other; callers choose one explicitly.

- ``DepthPoseEstimator``: yaw from the depth asymmetry of the ear region,
  pitch from the nose height relative to the ears. Roll is not estimated.
- ``RatioPoseEstimator``: yaw and pitch from distance ratios between the
  nose, eye corners, forehead, nose bridge and chin; roll from the eye line.

Both return the zero pose when fewer than 468 landmarks are supplied. The
arithmetic runs in single precision on the float32 landmarks, like the crop
box computation.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Protocol, Type

import numpy as np

from smartface.types import (
    CHIN,
    FOREHEAD,
    LEFT_EAR,
    LEFT_EYE_OUTER,
    NOSE_BRIDGE,
    NOSE_TIP,
    RIGHT_EAR,
    RIGHT_EYE_OUTER,
    PoseEstimate,
    as_landmark_array,
    is_face_landmark_set,
)

# Keeps the ratios finite when the reference points coincide
RATIO_EPSILON = 0.001
YAW_RATIO_SCALE = 45.0
PITCH_RATIO_SCALE = 30.0

_f32 = np.float32


def to_degrees(radians: np.float32) -> float:
    """Single-precision radians to degrees."""
    return float(radians * _f32(180.0) / _f32(math.pi))


class PoseEstimationStrategy(Protocol):
    """Protocol for landmark-based pose estimators."""

    name: str

    def estimate(self, landmarks: Any) -> PoseEstimate:
        """Estimate yaw/pitch/roll in degrees from a landmark set."""
        ...


class DepthPoseEstimator:
    """Ear-depth based estimator (roll is always 0)."""

    name = "depth"

    def estimate(self, landmarks: Any) -> PoseEstimate:
        lms = as_landmark_array(landmarks, strict=False)
        if not is_face_landmark_set(lms):
            return PoseEstimate()

        nose = lms[NOSE_TIP]
        left_ear = lms[LEFT_EAR]
        right_ear = lms[RIGHT_EAR]

        yaw = to_degrees(np.arctan2(left_ear[2] - right_ear[2], left_ear[0] - right_ear[0]))

        # Approximation: nose height against the ear line, over nose depth
        ear_mid_y = (left_ear[1] + right_ear[1]) / _f32(2.0)
        pitch = to_degrees(np.arctan2(nose[1] - ear_mid_y, nose[2]))

        return PoseEstimate(yaw=yaw, pitch=pitch, roll=0.0)


class RatioPoseEstimator:
    """Distance-ratio based estimator with eye-line roll."""

    name = "ratio"

    def estimate(self, landmarks: Any) -> PoseEstimate:
        lms = as_landmark_array(landmarks, strict=False)
        if not is_face_landmark_set(lms):
            return PoseEstimate()
        return PoseEstimate(
            yaw=self._yaw(lms),
            pitch=self._pitch(lms),
            roll=self._roll(lms),
        )

    @staticmethod
    def _yaw(lms: np.ndarray) -> float:
        nose = lms[NOSE_TIP]
        left_eye = lms[LEFT_EYE_OUTER]
        right_eye = lms[RIGHT_EYE_OUTER]

        left_dist = abs(nose[0] - left_eye[0])
        right_dist = abs(right_eye[0] - nose[0])
        ratio = (left_dist - right_dist) / (left_dist + right_dist + _f32(RATIO_EPSILON))
        return float(ratio * _f32(YAW_RATIO_SCALE))

    @staticmethod
    def _pitch(lms: np.ndarray) -> float:
        nose_bridge = lms[NOSE_BRIDGE]
        chin = lms[CHIN]
        forehead = lms[FOREHEAD]

        upper = abs(forehead[1] - nose_bridge[1])
        lower = abs(chin[1] - nose_bridge[1])
        ratio = (upper - lower) / (upper + lower + _f32(RATIO_EPSILON))
        return float(ratio * _f32(PITCH_RATIO_SCALE))

    @staticmethod
    def _roll(lms: np.ndarray) -> float:
        left_eye = lms[LEFT_EYE_OUTER]
        right_eye = lms[RIGHT_EYE_OUTER]
        dx = right_eye[0] - left_eye[0]
        dy = right_eye[1] - left_eye[1]
        return to_degrees(np.arctan2(dy, dx))


ESTIMATORS: Dict[str, Type] = {
    DepthPoseEstimator.name: DepthPoseEstimator,
    RatioPoseEstimator.name: RatioPoseEstimator,
}


def get_estimator(name: str) -> PoseEstimationStrategy:
    """Instantiate an estimator by name ("depth" or "ratio")."""
    try:
        return ESTIMATORS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown pose estimator: {name!r} (available: {', '.join(sorted(ESTIMATORS))})"
        ) from None


__all__ = [
    "RATIO_EPSILON",
    "YAW_RATIO_SCALE",
    "PITCH_RATIO_SCALE",
    "to_degrees",
    "PoseEstimationStrategy",
    "DepthPoseEstimator",
    "RatioPoseEstimator",
    "ESTIMATORS",
    "get_estimator",
]
