"""Tests for landmark normalization and frame types."""

from types import SimpleNamespace

import numpy as np
import pytest

from smartface.testing import make_frame
from smartface.types import (
    NUM_FACE_LANDMARKS,
    Frame,
    Landmark,
    PoseEstimate,
    as_landmark_array,
    is_face_landmark_set,
    landmark_at,
    pixel_format_of,
)


class TestAsLandmarkArray:
    def test_array_passthrough(self):
        arr = np.random.default_rng(0).random((468, 3))
        out = as_landmark_array(arr)
        assert out.shape == (468, 3)
        assert out.dtype == np.float32

    def test_objects(self):
        objs = [SimpleNamespace(x=0.1, y=0.2, z=0.3), SimpleNamespace(x=0.4, y=0.5, z=0.6)]
        out = as_landmark_array(objs)
        np.testing.assert_allclose(out, [[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]], rtol=1e-6)

    def test_landmark_list_wrapper(self):
        """NormalizedLandmarkList-style container with a .landmark field."""
        wrapper = SimpleNamespace(landmark=[SimpleNamespace(x=0.1, y=0.2, z=0.0)])
        assert as_landmark_array(wrapper).shape == (1, 3)

    def test_namedtuples(self):
        out = as_landmark_array([Landmark(0.1, 0.2, 0.3)])
        assert out.shape == (1, 3)

    def test_two_columns_pad_z(self):
        out = as_landmark_array(np.array([[0.1, 0.2], [0.3, 0.4]]))
        assert out.shape == (2, 3)
        assert np.all(out[:, 2] == 0.0)

    def test_empty(self):
        assert as_landmark_array(None).shape == (0, 3)
        assert as_landmark_array([]).shape == (0, 3)
        assert as_landmark_array(np.zeros((0, 3))).shape == (0, 3)

    @pytest.mark.parametrize("bad", [np.zeros(5), np.zeros((5, 1)), np.zeros((2, 3, 3))])
    def test_bad_shape_raises(self, bad):
        with pytest.raises(ValueError):
            as_landmark_array(bad)

    @pytest.mark.parametrize("bad", [np.zeros(5), np.zeros((5, 1)), [(0.1, 0.2), (0.3,)], [1.0, 2.0]])
    def test_lenient_degrades_to_empty(self, bad):
        assert as_landmark_array(bad, strict=False).shape == (0, 3)

    def test_extra_columns_dropped(self):
        """Visibility/presence columns past z are ignored."""
        arr = np.hstack([np.full((468, 3), 0.5), np.ones((468, 1))])
        out = as_landmark_array(arr)
        assert out.shape == (468, 3)
        assert np.all(out == 0.5)


class TestLandmarkSet:
    def test_face_set_size(self):
        assert NUM_FACE_LANDMARKS == 468
        assert is_face_landmark_set(np.zeros((468, 3)))
        assert is_face_landmark_set(np.zeros((478, 3)))
        assert not is_face_landmark_set(np.zeros((467, 3)))

    def test_landmark_at_bounds(self):
        lms = np.array([[0.1, 0.2, 0.3]], dtype=np.float32)
        assert landmark_at(lms, 0).x == pytest.approx(0.1)
        assert landmark_at(lms, 1) is None
        assert landmark_at(lms, -1) is None


class TestPoseEstimate:
    def test_default_zero(self):
        assert PoseEstimate() == PoseEstimate(0.0, 0.0, 0.0)


class TestFrame:
    def test_explicit_color_format(self):
        frame = Frame(data=np.zeros((4, 4, 3), dtype=np.uint8), color_format="SBGR")
        assert frame.pixel_format == "SBGR"

    def test_bgr_pixel_format(self):
        assert pixel_format_of(np.zeros((4, 4, 3), dtype=np.uint8), bgr=True) == "SBGR"
        assert pixel_format_of(np.zeros((4, 4, 4), dtype=np.uint8), bgr=True) == "SBGRA"
        assert pixel_format_of(np.zeros((4, 4), dtype=np.uint8), bgr=True) == "GRAY8"

    def test_dimensions(self):
        frame = make_frame(320, 240)
        assert frame.width == 320
        assert frame.height == 240
        assert frame.pixel_format == "SRGB"

    @pytest.mark.parametrize("shape,dtype,expected", [
        ((4, 4), np.uint8, "GRAY8"),
        ((4, 4, 3), np.uint8, "SRGB"),
        ((4, 4, 4), np.uint8, "SRGBA"),
        ((4, 4), np.uint16, "GRAY16"),
        ((4, 4, 1), np.float32, "VEC32F1"),
    ])
    def test_pixel_format(self, shape, dtype, expected):
        assert pixel_format_of(np.zeros(shape, dtype=dtype)) == expected
