"""Tests for size and circularity filtering."""

import math

import numpy as np
import pytest

from classification import allowed_radius, blob_centroid, classify_blobs, is_round_blob
from conftest import blank_grid, draw_disk
from detection import detect_blobs
from processing import segment_grid


def line(n, y=0):
    return [(x, y) for x in range(n)]


def square(w, h):
    return [(x, y) for y in range(h) for x in range(w)]


class TestGeometry:

    def test_centroid_is_mean_of_coordinates(self):
        assert blob_centroid([(0, 0), (2, 0), (1, 3)]) == pytest.approx((1.0, 1.0))

    def test_allowed_radius_uses_area_over_pi(self):
        assert allowed_radius(10) == pytest.approx(10 / math.pi * 1.5)
        assert allowed_radius(10, radius_tolerance=1.0) == pytest.approx(10 / math.pi)


class TestSizeBounds:

    def test_two_pixels_are_too_small(self):
        assert not is_round_blob([(0, 0), (1, 0)])

    def test_three_pixels_are_enough(self):
        assert is_round_blob([(0, 0), (1, 0), (0, 1)])

    def test_upper_bound_is_inclusive(self):
        assert is_round_blob(square(100, 100))
        assert not is_round_blob(square(100, 101))

    def test_custom_bounds(self):
        blob = square(3, 3)
        assert not is_round_blob(blob, min_pixels=10)
        assert not is_round_blob(blob, max_pixels=8)


class TestCircularity:

    def test_short_line_is_accepted(self):
        assert is_round_blob(line(22))

    @pytest.mark.parametrize("n", [23, 40, 500])
    def test_long_line_is_rejected(self, n):
        assert not is_round_blob(line(n))

    def test_tolerance_tightens_acceptance(self):
        assert not is_round_blob(line(22), radius_tolerance=1.0)


class TestMask:

    @pytest.mark.parametrize("radius", [1, 2, 5, 20, 50])
    def test_disk_is_fully_stamped(self, radius):
        size = 2 * radius + 11
        gray = blank_grid(size, size)
        disk = draw_disk(gray, size // 2, size // 2, radius, value=40)
        mask = segment_grid(gray)
        assert np.all(mask[disk] == 255)
        assert np.all(mask[~disk] == 0)

    def test_isolated_pixel_never_reaches_mask(self):
        gray = blank_grid(9, 9)
        gray[4, 4] = 0
        assert not segment_grid(gray).any()

    def test_only_accepted_blobs_are_stamped(self, dotted_image):
        blobs = detect_blobs(dotted_image)
        mask = classify_blobs(blobs, 64, 48)
        assert mask.shape == (48, 64)
        assert mask.dtype == np.uint8
        assert set(np.unique(mask).tolist()) == {0, 255}
        # The stroke on row 30 is too elongated.
        assert not mask[30].any()
        assert mask[12, 12] == 255
        assert mask[40, 60] == 0

    def test_empty_blob_list_gives_blank_mask(self):
        mask = classify_blobs([], 5, 4)
        assert mask.shape == (4, 5)
        assert not mask.any()
