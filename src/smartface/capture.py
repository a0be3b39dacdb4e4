"""Smart capture analyzer: pose gate + face crop with a capture limit.

Per frame: depth-based pose estimate, gate (pitch threshold doubled),
then on accept crop the padded landmark box and count the capture.
Once the limit is reached frames are ignored without any work.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from smartface.config import GateConfig
from smartface.counter import CaptureCounter
from smartface.crop import crop_region
from smartface.gate import CAPTURE_PITCH_MULTIPLIER, GateDecision, QualityGate
from smartface.observation import CaptureOutput, Observation
from smartface.pose import DepthPoseEstimator, PoseEstimationStrategy
from smartface.types import Frame, PoseEstimate

logger = logging.getLogger(__name__)


class SmartCaptureAnalyzer:
    """Gate frames by head pose and emit cropped faces.

    Args:
        config: Gate thresholds, padding and capture limit.
        estimator: Pose estimator (default: ``DepthPoseEstimator``).
        pitch_multiplier: Scale on the configured pitch threshold
            (default 2.0).
    """

    def __init__(
        self,
        config: GateConfig | None = None,
        estimator: Optional[PoseEstimationStrategy] = None,
        pitch_multiplier: float = CAPTURE_PITCH_MULTIPLIER,
    ):
        self.config = config or GateConfig()
        self.estimator = estimator or DepthPoseEstimator()
        self.gate = QualityGate(self.config, pitch_multiplier=pitch_multiplier)
        self.counter = CaptureCounter(self.config.max_captures)
        self._stats_total = 0
        self._stats_reasons: Dict[str, int] = {}

    @property
    def name(self) -> str:
        return "face.capture"

    @property
    def capture_count(self) -> int:
        return self.counter.count

    @property
    def is_done(self) -> bool:
        return self.counter.is_full

    def initialize(self) -> None:
        self.reset()
        logger.info(
            "%s ready: max_captures=%d, max_yaw=%.1f, max_pitch=%.1f (effective %.1f), "
            "padding=%.2f, estimator=%s",
            self.name, self.config.max_captures, self.config.max_yaw_degrees,
            self.config.max_pitch_degrees, self.gate.effective_max_pitch,
            self.config.padding, self.estimator.name,
        )

    def reset(self) -> None:
        self.counter.reset()
        self._stats_total = 0
        self._stats_reasons = {}

    def cleanup(self) -> None:
        if self._stats_total > 0:
            logger.info(
                "%s summary: %d captured from %d frames, reject reasons: %s",
                self.name, self.counter.count, self._stats_total,
                dict(self._stats_reasons) if self._stats_reasons else "none",
            )

    def process(
        self,
        frame: Optional[Frame],
        faces: Optional[Sequence[Any]],
    ) -> Optional[Observation]:
        """Process one frame.

        Args:
            frame: Input frame.
            faces: Landmark sets for the detected faces (only the first one
                is gated). None means no landmark input for this frame; an
                empty sequence means no face was detected.

        Returns:
            Observation with ``CaptureOutput``, or None when the capture
            limit is reached or an input is missing.
        """
        if self.counter.is_full:
            return None
        if frame is None or faces is None:
            return None

        if len(faces) == 0:
            return self._emit(frame, GateDecision.REJECT_NO_FACE, PoseEstimate())

        landmarks = faces[0]
        verdict = self.gate.assess(landmarks, self.estimator)
        if not verdict.accepted:
            return self._emit(frame, verdict.decision, verdict.pose)

        cropped = crop_region(
            frame.data, landmarks, self.config.padding, pixel_format=frame.pixel_format,
        )
        if cropped is None:
            logger.debug("frame=%d accepted but crop box is empty, skipping crop", frame.frame_id)
        self.counter.increment()
        logger.info(
            "Captured frame=%d (%d/%d) yaw=%.1f pitch=%.1f",
            frame.frame_id, self.counter.count, self.config.max_captures,
            verdict.pose.yaw, verdict.pose.pitch,
        )
        return self._emit(frame, verdict.decision, verdict.pose, cropped)

    def _emit(self, frame, decision, pose, cropped=None) -> Observation:
        self._stats_total += 1
        if not decision.accepted:
            self._stats_reasons[decision.name] = self._stats_reasons.get(decision.name, 0) + 1

        output = CaptureOutput(
            decision=decision,
            status=decision.reason if self.config.emit_status else None,
            pose=pose,
            cropped=cropped,
            capture_count=self.counter.count,
        )
        return Observation(
            source=self.name,
            frame_id=frame.frame_id,
            t_ns=frame.t_src_ns,
            signals={
                "accepted": decision.accepted,
                "yaw": pose.yaw,
                "pitch": pose.pitch,
                "capture_count": self.counter.count,
            },
            data=output,
        )


__all__ = ["SmartCaptureAnalyzer"]
