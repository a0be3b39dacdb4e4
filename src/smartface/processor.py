"""Interactive face processor.

Stateful front end for a live preview: detect a face, report its pose and a
human-readable verdict, and count captures. Uses the ratio-based estimator
and compares pitch against the configured threshold without scaling.

Example:
    >>> processor = SmartFaceProcessor()
    >>> processor.initialize()
    >>> result = processor.detect_face(image, faces=[landmarks])
    >>> result.message
    'Good quality face detected!'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from smartface import __version__
from smartface.backends.base import LandmarkBackend
from smartface.config import GateConfig
from smartface.counter import CaptureCounter
from smartface.gate import GateDecision, QualityGate, STRICT_PITCH_MULTIPLIER
from smartface.pose import PoseEstimationStrategy, RatioPoseEstimator
from smartface.types import (
    Landmark,
    as_landmark_array,
    is_face_landmark_set,
    landmark_at,
)

logger = logging.getLogger(__name__)

MIN_IMAGE_SIZE = 100


@dataclass
class FaceResult:
    """Face analysis result for one image.

    Attributes:
        detected: Whether a full face mesh was found.
        landmark_count: Number of landmarks in the detected set.
        message: Human-readable verdict.
        yaw, pitch, roll: Estimated angles in degrees.
        quality_good: Whether the pose passed the gate.
        decision: Gate decision (None when the image was never gated).
        landmarks: Landmark set that was analyzed.
    """

    detected: bool = False
    landmark_count: int = 0
    message: str = ""
    yaw: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0
    quality_good: bool = False
    decision: Optional[GateDecision] = None
    landmarks: List[Landmark] = field(default_factory=list)

    def to_dict(self, include_landmarks: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "detected": self.detected,
            "landmark_count": self.landmark_count,
            "message": self.message,
            "yaw": self.yaw,
            "pitch": self.pitch,
            "roll": self.roll,
            "quality_good": self.quality_good,
            "decision": self.decision.name if self.decision else None,
        }
        if include_landmarks:
            data["landmarks"] = [lm._asdict() for lm in self.landmarks]
        return data


class SmartFaceProcessor:
    """Face detection, pose gating and capture counting for a live preview.

    Args:
        config: Gate thresholds and capture limit (padding is unused here).
        backend: Landmark backend used when no landmarks are passed in.
        estimator: Pose estimator (default: ``RatioPoseEstimator``).
        pitch_multiplier: Scale on the configured pitch threshold
            (default 1.0).
    """

    def __init__(
        self,
        config: GateConfig | None = None,
        backend: Optional[LandmarkBackend] = None,
        estimator: Optional[PoseEstimationStrategy] = None,
        pitch_multiplier: float = STRICT_PITCH_MULTIPLIER,
    ):
        self._config = config or GateConfig()
        self._backend = backend
        self._estimator = estimator or RatioPoseEstimator()
        self._pitch_multiplier = pitch_multiplier
        self._gate = QualityGate(self._config, pitch_multiplier=pitch_multiplier)
        self._counter = CaptureCounter(self._config.max_captures)
        self._initialized = False
        self._last_landmarks = np.zeros((0, 3), dtype=np.float32)

    def initialize(self) -> bool:
        if self._backend is not None:
            self._backend.initialize()
        self._initialized = True
        self._counter.reset()
        logger.info("SmartFaceProcessor initialized (%s)", self.describe_config())
        return True

    def cleanup(self) -> None:
        if self._backend is not None:
            self._backend.cleanup()
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def version(self) -> str:
        return f"SmartFace v{__version__} - Face Landmark & Pose Estimation"

    @property
    def config(self) -> GateConfig:
        return self._config

    def set_max_yaw(self, degrees: float) -> None:
        self._update_config(max_yaw_degrees=float(degrees))

    def set_max_pitch(self, degrees: float) -> None:
        self._update_config(max_pitch_degrees=float(degrees))

    def set_max_captures(self, count: int) -> None:
        self._update_config(max_captures=int(count))
        self._counter.max_captures = self._config.max_captures

    @property
    def capture_count(self) -> int:
        return self._counter.count

    def detect_face(
        self,
        image: np.ndarray,
        faces: Optional[Sequence[Any]] = None,
    ) -> FaceResult:
        """Analyze one image.

        Args:
            image: Image buffer (H, W[, C]).
            faces: Landmark sets supplied by the caller. When None, the
                configured backend is asked to detect them.
        """
        if not self._initialized:
            return FaceResult(message="Error: Not initialized")

        height, width = image.shape[:2]
        if width < MIN_IMAGE_SIZE or height < MIN_IMAGE_SIZE:
            return FaceResult(message="Image too small")

        if faces is None:
            faces = self._backend.detect(image) if self._backend is not None else []

        landmarks = as_landmark_array(faces[0] if len(faces) > 0 else None, strict=False)
        self._last_landmarks = landmarks

        if not is_face_landmark_set(landmarks):
            return FaceResult(
                message=GateDecision.REJECT_NO_FACE.reason,
                decision=GateDecision.REJECT_NO_FACE,
            )

        pose = self._estimator.estimate(landmarks)
        decision = self._gate.evaluate(pose)

        if decision is GateDecision.ACCEPT:
            msg = "Good quality face detected!"
        elif decision is GateDecision.REJECT_YAW:
            msg = f"Face turned too much (Yaw: {int(pose.yaw)}°)"
        else:
            msg = f"Face tilted too much (Pitch: {int(pose.pitch)}°)"

        return FaceResult(
            detected=True,
            landmark_count=len(landmarks),
            message=msg,
            yaw=pose.yaw,
            pitch=pose.pitch,
            roll=pose.roll,
            quality_good=decision.accepted,
            decision=decision,
            landmarks=self.get_landmark_list(),
        )

    def get_landmark(self, index: int) -> Landmark:
        """Landmark from the last analyzed set; zero landmark if out of range."""
        return landmark_at(self._last_landmarks, index) or Landmark()

    def get_landmark_list(self) -> List[Landmark]:
        return [Landmark(float(x), float(y), float(z)) for x, y, z in self._last_landmarks]

    def get_landmarks(self) -> List[Dict[str, float]]:
        """Last analyzed landmarks as ``{"x", "y", "z"}`` dicts."""
        return [lm._asdict() for lm in self.get_landmark_list()]

    def capture_frame(
        self,
        image: np.ndarray,
        faces: Optional[Sequence[Any]] = None,
    ) -> bool:
        """Analyze an image and count it as a capture if the pose is good."""

        def evaluate() -> bool:
            result = self.detect_face(image, faces)
            return result.detected and result.quality_good

        captured = self._counter.try_accept(evaluate)
        if captured:
            logger.info(
                "Captured %d/%d", self._counter.count, self._counter.max_captures,
            )
        return captured

    def reset_captures(self) -> None:
        self._counter.reset()

    @property
    def status(self) -> str:
        if not self._initialized:
            return "Not initialized"
        return f"Ready - Captured: {self._counter.count}/{self._counter.max_captures}"

    def describe_config(self) -> str:
        cfg = self._config
        return (
            f"Max Yaw: {int(cfg.max_yaw_degrees)}°, "
            f"Max Pitch: {int(cfg.max_pitch_degrees)}°, "
            f"Max Captures: {cfg.max_captures}"
        )

    def _update_config(self, **changes: Any) -> None:
        self._config = replace(self._config, **changes)
        self._gate = QualityGate(self._config, pitch_multiplier=self._pitch_multiplier)


__all__ = ["FaceResult", "SmartFaceProcessor", "MIN_IMAGE_SIZE"]
