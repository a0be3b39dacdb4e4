"""Pose quality gate.

Checks run in a fixed order: face presence, yaw, then pitch. The pitch
threshold is scaled by a per-gate multiplier; the capture analyzer gates
with twice the configured pitch while the face processor uses it as is.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any

from smartface.config import GateConfig
from smartface.pose import PoseEstimationStrategy
from smartface.types import PoseEstimate, as_landmark_array, is_face_landmark_set

logger = logging.getLogger(__name__)

CAPTURE_PITCH_MULTIPLIER = 2.0
STRICT_PITCH_MULTIPLIER = 1.0


class GateDecision(enum.Enum):
    """Gate outcome; the value is the human-readable reason."""

    ACCEPT = "Captured!"
    REJECT_YAW = "Face turned too much (Yaw)"
    REJECT_PITCH = "Face tilted up/down too much (Pitch)"
    REJECT_NO_FACE = "No face detected"

    @property
    def accepted(self) -> bool:
        return self is GateDecision.ACCEPT

    @property
    def reason(self) -> str:
        return self.value


@dataclass(frozen=True)
class GateVerdict:
    """Decision together with the pose it was based on."""

    decision: GateDecision
    pose: PoseEstimate

    @property
    def accepted(self) -> bool:
        return self.decision.accepted


class QualityGate:
    """Accept/reject frames by head pose.

    Args:
        config: Angular tolerances.
        pitch_multiplier: Scale applied to ``config.max_pitch_degrees``
            before the pitch comparison.
    """

    def __init__(
        self,
        config: GateConfig | None = None,
        pitch_multiplier: float = STRICT_PITCH_MULTIPLIER,
    ):
        self.config = config or GateConfig()
        self.pitch_multiplier = pitch_multiplier

    @property
    def effective_max_pitch(self) -> float:
        return self.config.max_pitch_degrees * self.pitch_multiplier

    def evaluate(self, pose: PoseEstimate, face_detected: bool = True) -> GateDecision:
        if not face_detected:
            return GateDecision.REJECT_NO_FACE
        if abs(pose.yaw) > self.config.max_yaw_degrees:
            return GateDecision.REJECT_YAW
        if abs(pose.pitch) > self.effective_max_pitch:
            return GateDecision.REJECT_PITCH
        return GateDecision.ACCEPT

    def assess(self, landmarks: Any, estimator: PoseEstimationStrategy) -> GateVerdict:
        """Estimate the pose of a landmark set and gate it."""
        lms = as_landmark_array(landmarks, strict=False)
        if not is_face_landmark_set(lms):
            logger.debug("Gate: %d landmarks, treating as no face", len(lms))
            return GateVerdict(GateDecision.REJECT_NO_FACE, PoseEstimate())

        pose = estimator.estimate(lms)
        decision = self.evaluate(pose)
        if not decision.accepted:
            logger.debug(
                "Gate reject (%s): yaw=%.1f pitch=%.1f (max yaw=%.1f, max pitch=%.1f)",
                decision.name, pose.yaw, pose.pitch,
                self.config.max_yaw_degrees, self.effective_max_pitch,
            )
        return GateVerdict(decision, pose)


__all__ = [
    "CAPTURE_PITCH_MULTIPLIER",
    "STRICT_PITCH_MULTIPLIER",
    "GateDecision",
    "GateVerdict",
    "QualityGate",
]
