"""Per-frame output of the capture analyzer."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from smartface.gate import GateDecision
from smartface.types import CroppedRegion, PoseEstimate


@dataclass
class CaptureOutput:
    """Capture analyzer result for one frame.

    Attributes:
        decision: Gate decision for the frame.
        status: Reason string, or None when status output is disabled.
        pose: Estimated pose (zero pose when no face was found).
        cropped: Cropped face region on accepted frames with a non-empty box.
        capture_count: Accepted-capture count after this frame.
    """

    decision: GateDecision
    status: Optional[str] = None
    pose: PoseEstimate = field(default_factory=PoseEstimate)
    cropped: Optional[CroppedRegion] = None
    capture_count: int = 0

    @property
    def accepted(self) -> bool:
        return self.decision.accepted


@dataclass
class Observation:
    """Timestamped analyzer output.

    Attributes:
        source: Name of the analyzer that produced this observation.
        frame_id: Frame identifier from the source video.
        t_ns: Timestamp in nanoseconds (source timeline).
        signals: Scalar signals extracted from the frame.
        data: Type-safe output (CaptureOutput).
    """

    source: str
    frame_id: int
    t_ns: int
    signals: Dict[str, Any] = field(default_factory=dict)
    data: Optional[CaptureOutput] = None


__all__ = ["CaptureOutput", "Observation"]
