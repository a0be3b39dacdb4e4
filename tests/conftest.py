"""Shared fixtures for smartface tests.

All landmark sets are synthetic, no ML models needed.
"""

import math

import pytest

from smartface.testing import face_landmarks, make_frame


@pytest.fixture
def frame():
    """200x100 SRGB frame with position-encoded pixels."""
    return make_frame(200, 100, frame_id=7, t_src_ns=123)


@pytest.fixture
def depth_face():
    """Factory for landmark sets tuned for the depth estimator.

    Ears at x=0.75 (234) / 0.25 (454), forehead/chin spanning y 0.25-0.75,
    nose in the middle slightly in front. Defaults give yaw=0, pitch=0.
    """
    def _make(ear_dz: float = 0.0, pitch_deg: float = 0.0, nose_z: float = 0.1):
        nose_dy = nose_z * math.tan(math.radians(pitch_deg))
        return face_landmarks({
            1: (0.5, 0.5 + nose_dy, nose_z),
            10: (0.5, 0.25, 0.0),
            152: (0.5, 0.75, 0.0),
            234: (0.75, 0.5, ear_dz / 2),
            454: (0.25, 0.5, -ear_dz / 2),
        }, fill=(0.5, 0.5, 0.0))
    return _make


@pytest.fixture
def ratio_face():
    """Factory for landmark sets tuned for the ratio estimator.

    Eye corners at x=0.35 (33) / 0.65 (263), forehead 0.1, nose bridge 0.4,
    chin 0.7: a frontal face by default.
    """
    def _make(nose_x: float = 0.5, chin_y: float = 0.7, right_eye_y: float = 0.4):
        return face_landmarks({
            1: (nose_x, 0.55, 0.0),
            10: (0.5, 0.1, 0.0),
            33: (0.35, 0.4, 0.0),
            152: (0.5, chin_y, 0.0),
            168: (0.5, 0.4, 0.0),
            263: (0.65, right_eye_y, 0.0),
        }, fill=(0.5, 0.5, 0.0))
    return _make
