"""Tests for the depth- and ratio-based pose estimators."""

import math

import numpy as np
import pytest

from smartface.pose import (
    DepthPoseEstimator,
    RatioPoseEstimator,
    get_estimator,
)
from smartface.testing import face_landmarks
from smartface.types import PoseEstimate


class TestShortLandmarkSets:
    @pytest.mark.parametrize("estimator", [DepthPoseEstimator(), RatioPoseEstimator()])
    @pytest.mark.parametrize("count", [0, 1, 300, 467])
    def test_zero_pose(self, estimator, count):
        lms = np.full((count, 3), 0.3, dtype=np.float32)
        assert estimator.estimate(lms) == PoseEstimate(0.0, 0.0, 0.0)

    def test_none_is_zero_pose(self):
        assert DepthPoseEstimator().estimate(None) == PoseEstimate()
        assert RatioPoseEstimator().estimate([]) == PoseEstimate()

    def test_refined_mesh_accepted(self):
        """478-point sets (mesh + iris) still estimate."""
        lms = face_landmarks({234: (0.6, 0.5, 0.0), 454: (0.4, 0.5, 0.0)}, count=478)
        pose = DepthPoseEstimator().estimate(lms)
        assert pose.yaw == pytest.approx(0.0)


class TestDepthPoseEstimator:
    def test_name(self):
        assert DepthPoseEstimator.name == "depth"

    def test_yaw_from_ear_depth(self):
        """atan2(0.1 - -0.1, -0.3 - 0.3) ≈ 161.57°."""
        lms = face_landmarks({
            234: (-0.3, 0.0, 0.1),
            454: (0.3, 0.0, -0.1),
        })
        pose = DepthPoseEstimator().estimate(lms)
        assert pose.yaw == pytest.approx(math.degrees(math.atan2(0.2, -0.6)), abs=1e-3)
        assert pose.yaw == pytest.approx(161.57, abs=0.01)
        assert pose.pitch == 0.0
        assert pose.roll == 0.0

    def test_frontal_ears_in_image_order_give_180(self):
        """Left ear to the image left of the right ear: yaw is ±180 by formula."""
        lms = face_landmarks({234: (0.2, 0.5, 0.0), 454: (0.8, 0.5, 0.0)})
        pose = DepthPoseEstimator().estimate(lms)
        assert abs(pose.yaw) == pytest.approx(180.0)

    def test_pitch_from_nose_height(self):
        lms = face_landmarks({
            1: (0.5, 0.6, 0.1),
            234: (0.7, 0.5, 0.0),
            454: (0.3, 0.5, 0.0),
        })
        pose = DepthPoseEstimator().estimate(lms)
        assert pose.pitch == pytest.approx(45.0, abs=1e-3)

    def test_pitch_uses_ear_midpoint(self):
        lms = face_landmarks({
            1: (0.5, 0.5, -0.1),
            234: (0.7, 0.4, 0.0),
            454: (0.3, 0.6, 0.0),
        })
        pose = DepthPoseEstimator().estimate(lms)
        # nose.y - ear_mid_y == 0 with negative depth
        assert abs(pose.pitch) == pytest.approx(180.0)

    def test_accepts_landmark_objects(self, depth_face):
        from types import SimpleNamespace

        objs = [SimpleNamespace(x=float(x), y=float(y), z=float(z)) for x, y, z in depth_face(ear_dz=0.2)]
        pose = DepthPoseEstimator().estimate(objs)
        assert pose.yaw == pytest.approx(math.degrees(math.atan2(0.2, 0.5)), abs=1e-3)


class TestRatioPoseEstimator:
    def test_name(self):
        assert RatioPoseEstimator.name == "ratio"

    def test_symmetric_eyes_zero_yaw_and_roll(self, ratio_face):
        pose = RatioPoseEstimator().estimate(ratio_face())
        assert pose.yaw == pytest.approx(0.0, abs=1e-4)
        assert pose.roll == 0.0

    def test_yaw_formula(self, ratio_face):
        pose = RatioPoseEstimator().estimate(ratio_face(nose_x=0.45))
        left, right = 0.1, 0.2
        expected = (left - right) / (left + right + 0.001) * 45.0
        assert pose.yaw == pytest.approx(expected, abs=1e-3)
        assert pose.yaw == pytest.approx(-14.95, abs=0.01)

    def test_pitch_formula(self, ratio_face):
        pose = RatioPoseEstimator().estimate(ratio_face(chin_y=0.9))
        upper, lower = 0.3, 0.5
        expected = (upper - lower) / (upper + lower + 0.001) * 30.0
        assert pose.pitch == pytest.approx(expected, abs=1e-3)

    def test_frontal_pitch_zero(self, ratio_face):
        pose = RatioPoseEstimator().estimate(ratio_face())
        assert pose.pitch == pytest.approx(0.0, abs=1e-4)

    def test_roll_from_eye_line(self, ratio_face):
        pose = RatioPoseEstimator().estimate(ratio_face(right_eye_y=0.7))
        assert pose.roll == pytest.approx(45.0, abs=1e-3)

    def test_coincident_points_no_division_error(self):
        pose = RatioPoseEstimator().estimate(face_landmarks(fill=(0.5, 0.5, 0.0)))
        assert pose == PoseEstimate(0.0, 0.0, 0.0)

    def test_epsilon_bounds_ratio(self):
        """Nose on the left eye corner: ratio is right/(right + ε), not exactly 1."""
        lms = face_landmarks({
            1: (0.4, 0.5, 0.0),
            33: (0.4, 0.5, 0.0),
            263: (0.6, 0.5, 0.0),
        })
        pose = RatioPoseEstimator().estimate(lms)
        right = 0.2
        assert pose.yaw == pytest.approx(-right / (right + 0.001) * 45.0, abs=1e-3)

    def test_estimators_disagree(self, depth_face):
        lms = depth_face(ear_dz=0.2)
        assert DepthPoseEstimator().estimate(lms) != RatioPoseEstimator().estimate(lms)


class TestGetEstimator:
    def test_by_name(self):
        assert isinstance(get_estimator("depth"), DepthPoseEstimator)
        assert isinstance(get_estimator("ratio"), RatioPoseEstimator)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown pose estimator"):
            get_estimator("solvepnp")


class TestMalformedLandmarks:
    @pytest.mark.parametrize("estimator", [DepthPoseEstimator(), RatioPoseEstimator()])
    @pytest.mark.parametrize("bad", [np.zeros(7), np.zeros(3), np.zeros((468, 1))])
    def test_zero_pose(self, estimator, bad):
        assert estimator.estimate(bad) == PoseEstimate()

    def test_visibility_column_ignored(self, depth_face):
        lms = depth_face(ear_dz=0.2)
        with_visibility = np.hstack([lms, np.ones((len(lms), 1), dtype=np.float32)])
        estimator = DepthPoseEstimator()
        assert estimator.estimate(with_visibility) == estimator.estimate(lms)


class TestSinglePrecision:
    def test_ratio_yaw_matches_float32_arithmetic(self, ratio_face):
        f32 = np.float32
        left = abs(f32(0.45) - f32(0.35))
        right = abs(f32(0.65) - f32(0.45))
        expected = float((left - right) / (left + right + f32(0.001)) * f32(45.0))

        pose = RatioPoseEstimator().estimate(ratio_face(nose_x=0.45))
        assert pose.yaw == expected

    def test_depth_yaw_matches_float32_arithmetic(self, depth_face):
        f32 = np.float32
        lms = depth_face(ear_dz=0.2)
        radians = np.arctan2(lms[234, 2] - lms[454, 2], lms[234, 0] - lms[454, 0])
        expected = float(radians * f32(180.0) / f32(math.pi))

        assert DepthPoseEstimator().estimate(lms).yaw == expected
