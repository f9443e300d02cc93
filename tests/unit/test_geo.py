"""Tests for distance and snapping helpers."""

import pytest

from street_geometry.errors import GeometryComputationError
from street_geometry.utils.geo import haversine_m, round_coordinate, snap_to_line


def test_haversine_one_degree_of_latitude():
    assert haversine_m((23.32, 42.0), (23.32, 43.0)) == pytest.approx(111195, rel=1e-3)


def test_haversine_is_symmetric_and_zero_on_identity():
    a, b = (23.3219, 42.6977), (23.3301, 42.6961)
    assert haversine_m(a, b) == pytest.approx(haversine_m(b, a))
    assert haversine_m(a, a) == 0


def test_round_coordinate():
    assert round_coordinate(23.32191234567) == 23.321912


class TestSnapToLine:
    LINE = [(23.300, 42.69), (23.301, 42.69), (23.302, 42.69)]

    def test_projects_onto_segment(self):
        snap = snap_to_line(self.LINE, (23.3015, 42.6901))

        assert snap.index == 1
        assert snap.position == pytest.approx((23.3015, 42.69))
        assert snap.distance_m == pytest.approx(11.1, abs=0.2)

    def test_shared_vertex_snaps_to_earlier_segment(self):
        snap = snap_to_line(self.LINE, (23.301, 42.69))

        assert snap.index == 0
        assert snap.distance_m == pytest.approx(0)

    def test_beyond_the_end_clamps_to_last_vertex(self):
        snap = snap_to_line(self.LINE, (23.305, 42.69))

        assert snap.index == 1
        assert snap.position == pytest.approx((23.302, 42.69))

    def test_requires_two_points(self):
        with pytest.raises(GeometryComputationError):
            snap_to_line([(23.3, 42.69)], (23.3, 42.69))
