"""Tests for the displacement map filter."""

import pytest
import numpy as np

from dispmap.core import (
    Component,
    DimensionMismatch,
    InvalidArgument,
    OpaqueImage,
    TranslucentImage,
    displace,
    displacement_field,
)


def _solid_map(rows, cols, bgr):
    data = np.zeros((rows, cols, 3), dtype=np.uint8)
    data[...] = bgr
    return data


class TestDisplace:
    @pytest.fixture
    def rng(self):
        return np.random.default_rng(7)

    @pytest.fixture
    def target(self, rng):
        return rng.integers(0, 256, size=(6, 9, 4), dtype=np.uint8)

    def test_output_shape(self, rng, target):
        map_ = rng.integers(0, 256, size=(6, 9, 3), dtype=np.uint8)

        out = displace(map_, target, 2, 1, 40, -25)

        assert isinstance(out, TranslucentImage)
        assert out.shape == target.shape
        assert out.data.dtype == np.uint8

    def test_zero_scale_is_identity(self, rng, target):
        map_ = rng.integers(0, 256, size=(6, 9, 3), dtype=np.uint8)

        out = displace(map_, target, 0, 2, 0, 0)

        assert np.array_equal(np.asarray(out), target)

    def test_mid_gray_map_is_identity(self, rng):
        map_ = _solid_map(2, 2, (128, 128, 128))
        target = rng.integers(0, 256, size=(2, 2, 4), dtype=np.uint8)

        out = displace(map_, target, Component.RED, Component.RED, 20, 20)

        assert np.array_equal(np.asarray(out), target)

    def test_shift_by_one_row(self, target):
        # (192 - 128) * 4 / 256 == 1 along rows, green stays centred
        map_ = _solid_map(6, 9, (192, 128, 0))

        out = displace(map_, target, Component.BLUE, Component.GREEN, 4, 4)

        expected = np.concatenate([target[1:], target[-1:]], axis=0)
        assert np.array_equal(np.asarray(out), expected)

    def test_shift_by_one_column(self, target):
        map_ = _solid_map(6, 9, (128, 192, 0))

        out = displace(map_, target, Component.BLUE, Component.GREEN, 4, 4)

        expected = np.concatenate([target[:, 1:], target[:, -1:]], axis=1)
        assert np.array_equal(np.asarray(out), expected)

    def test_clamp_high_reads_last_row(self, target):
        map_ = _solid_map(6, 9, (255, 128, 0))

        out = np.asarray(displace(map_, target, 0, 1, 512, 512))

        for x in range(6):
            assert np.array_equal(out[x], target[-1])

    def test_clamp_low_reads_first_column(self, target):
        map_ = _solid_map(6, 9, (128, 0, 0))

        out = np.asarray(displace(map_, target, 0, 1, 512, 512))

        for y in range(9):
            assert np.array_equal(out[:, y], target[:, 0])

    def test_division_truncates_toward_zero(self, target):
        # (0 - 128) * 1 / 256 == -0.5, which truncates to 0 rather than -1
        map_ = _solid_map(6, 9, (0, 0, 0))

        out = displace(map_, target, 0, 1, 1, 1)

        assert np.array_equal(np.asarray(out), target)

    def test_alpha_copied_verbatim(self):
        target = np.zeros((3, 3, 4), dtype=np.uint8)
        target[2, 2] = (10, 20, 30, 77)
        map_ = _solid_map(3, 3, (255, 255, 255))

        out = np.asarray(displace(map_, target, 0, 1, 512, 512))

        assert (out == (10, 20, 30, 77)).all()

    def test_workers_match_single_thread(self, rng):
        map_ = rng.integers(0, 256, size=(37, 23, 3), dtype=np.uint8)
        target = rng.integers(0, 256, size=(37, 23, 4), dtype=np.uint8)

        single = displace(map_, target, 2, 0, 50, -70)
        banded = displace(map_, target, 2, 0, 50, -70, workers=4)

        assert np.array_equal(np.asarray(single), np.asarray(banded))

    def test_inputs_not_mutated(self, rng, target):
        map_ = rng.integers(0, 256, size=(6, 9, 3), dtype=np.uint8)
        map_copy, target_copy = map_.copy(), target.copy()

        out = displace(map_, target, 1, 2, 90, 90)

        assert np.array_equal(map_, map_copy)
        assert np.array_equal(target, target_copy)
        assert not np.shares_memory(np.asarray(out), target)

    def test_accepts_rasters(self, rng, target):
        map_ = OpaqueImage(rng.integers(0, 256, size=(6, 9, 3), dtype=np.uint8))

        out = displace(map_, TranslucentImage(target), 1, 1, 0, 0)

        assert np.array_equal(np.asarray(out), target)

    def test_empty_image(self):
        out = displace(np.zeros((0, 0, 3), np.uint8), np.zeros((0, 0, 4), np.uint8), 0, 0, 10, 10)

        assert out.shape == (0, 0, 4)


class TestDisplaceErrors:
    @pytest.fixture
    def images(self):
        return np.zeros((4, 4, 3), np.uint8), np.zeros((4, 4, 4), np.uint8)

    @pytest.mark.parametrize("cx,cy", [(-1, 0), (0, 3), (3, 3), (True, 0), (1.0, 1)])
    def test_invalid_component(self, images, cx, cy):
        map_, target = images

        with pytest.raises(InvalidArgument):
            displace(map_, target, cx, cy, 20, 20)

    def test_invalid_scale(self, images):
        map_, target = images

        with pytest.raises(InvalidArgument):
            displace(map_, target, 0, 0, 2.5, 20)

    def test_size_mismatch(self):
        with pytest.raises(DimensionMismatch):
            displace(np.zeros((4, 4, 3), np.uint8), np.zeros((4, 5, 4), np.uint8), 0, 0, 20, 20)

    def test_target_needs_alpha(self):
        with pytest.raises(DimensionMismatch):
            displace(np.zeros((4, 4, 3), np.uint8), np.zeros((4, 4, 3), np.uint8), 0, 0, 20, 20)

    def test_target_needs_uint8(self):
        with pytest.raises(DimensionMismatch):
            displace(np.zeros((4, 4, 3), np.uint8), np.zeros((4, 4, 4), np.float32), 0, 0, 20, 20)

    def test_component_checked_before_dimensions(self):
        with pytest.raises(InvalidArgument):
            displace(np.zeros((4, 4, 3), np.uint8), np.zeros((2, 2, 4), np.uint8), 5, 0, 20, 20)

    def test_invalid_workers(self, images):
        map_, target = images

        with pytest.raises(InvalidArgument):
            displace(map_, target, 0, 0, 20, 20, workers=0)


class TestDisplacementField:
    def test_field_shape_and_range(self):
        rng = np.random.default_rng(3)
        map_ = rng.integers(0, 256, size=(5, 8, 3), dtype=np.uint8)

        dx, dy = displacement_field(map_, 0, 2, 300, -300)

        assert dx.shape == (5, 8)
        assert dy.shape == (5, 8)
        assert dx.min() >= 0 and dx.max() <= 4
        assert dy.min() >= 0 and dy.max() <= 7

    def test_negative_offset(self):
        # (0 - 128) * 3 / 256 == -1.5 -> -1
        map_ = _solid_map(3, 4, (0, 128, 128))

        dx, dy = displacement_field(map_, 0, 1, 3, 3)

        assert dx.tolist() == [[0] * 4, [0] * 4, [1] * 4]
        assert dy.tolist() == [[0, 1, 2, 3]] * 3
