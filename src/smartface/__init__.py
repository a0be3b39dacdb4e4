"""smartface - face-capture quality gate.

    >>> from smartface import SmartCaptureAnalyzer, GateConfig
    >>> analyzer = SmartCaptureAnalyzer(GateConfig(max_captures=3))
    >>> analyzer.initialize()
    >>> obs = analyzer.process(frame, faces=[landmarks])
    >>> obs.data.status
    'Captured!'
"""

__version__ = "0.1.0"

from smartface.config import GateConfig
from smartface.types import (
    NUM_FACE_LANDMARKS,
    CropBox,
    CroppedRegion,
    Frame,
    Landmark,
    PoseEstimate,
)
from smartface.pose import (
    DepthPoseEstimator,
    PoseEstimationStrategy,
    RatioPoseEstimator,
    get_estimator,
)
from smartface.gate import (
    CAPTURE_PITCH_MULTIPLIER,
    STRICT_PITCH_MULTIPLIER,
    GateDecision,
    GateVerdict,
    QualityGate,
)
from smartface.crop import compute_crop_box, crop_region
from smartface.counter import CaptureCounter
from smartface.observation import CaptureOutput, Observation
from smartface.capture import SmartCaptureAnalyzer
from smartface.processor import FaceResult, SmartFaceProcessor

__all__ = [
    "__version__",
    "GateConfig",
    "NUM_FACE_LANDMARKS",
    "CropBox",
    "CroppedRegion",
    "Frame",
    "Landmark",
    "PoseEstimate",
    "DepthPoseEstimator",
    "PoseEstimationStrategy",
    "RatioPoseEstimator",
    "get_estimator",
    "CAPTURE_PITCH_MULTIPLIER",
    "STRICT_PITCH_MULTIPLIER",
    "GateDecision",
    "GateVerdict",
    "QualityGate",
    "compute_crop_box",
    "crop_region",
    "CaptureCounter",
    "CaptureOutput",
    "Observation",
    "SmartCaptureAnalyzer",
    "FaceResult",
    "SmartFaceProcessor",
]
