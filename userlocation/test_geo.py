import pytest

from userlocation.geo import BoundingRect, Coordinate, haversine_meters


class TestHaversine:

    CASES = [
        ("same_point", (0.0, 0.0), (0.0, 0.0), 0.0),
        ("equator_0.0003", (0.0, 0.0), (0.0, 0.0003), 33.36),
        ("equator_0.0006", (0.0, 0.0), (0.0, 0.0006), 66.72),
        ("one_degree_lat", (10.0, 20.0), (11.0, 20.0), 111194.93),
        ("antipodal", (0.0, 0.0), (0.0, 180.0), 20015086.80),
    ]

    @pytest.mark.parametrize("name,a,b,expected", CASES)
    def test_distance(self, name, a, b, expected):
        assert haversine_meters(*a, *b) == pytest.approx(expected, abs=0.05), f"Failed on {name}"

    def test_symmetric(self):
        a = Coordinate(37.3318, -122.0312)
        b = Coordinate(40.7128, -74.0060)
        assert a.distance_to(b) == pytest.approx(b.distance_to(a))


class TestCoordinate:

    def test_equality_by_value(self):
        assert Coordinate(1.5, 2.5) == Coordinate(1.5, 2.5)
        assert len({Coordinate(1.5, 2.5), Coordinate(1.5, 2.5)}) == 1

    def test_immutable(self):
        coord = Coordinate(1.0, 2.0)
        with pytest.raises(AttributeError):
            coord.latitude = 3.0


class TestBoundingRect:

    def test_around_points(self):
        rect = BoundingRect.around([Coordinate(1, 5), Coordinate(-2, 3), Coordinate(0, 7)])
        assert rect == BoundingRect(-2, 3, 1, 7)
        assert rect.center == Coordinate(-0.5, 5.0)

    def test_union(self):
        a = BoundingRect(0, 0, 1, 1)
        b = BoundingRect(-1, 0.5, 0.5, 3)
        union = BoundingRect.union([a, b])
        assert union == BoundingRect(-1, 0, 1, 3)
        assert union.contains(Coordinate(0.9, 2.9))
        assert not union.contains(Coordinate(2.0, 0.0))

    def test_empty_inputs_raise(self):
        with pytest.raises(ValueError, match="coords cannot be empty"):
            BoundingRect.around([])
        with pytest.raises(ValueError, match="rects cannot be empty"):
            BoundingRect.union([])
