import pytest

from waystop.core.exceptions import ReverseGeocodingError
from waystop.models.location import Point
from waystop.models.stops import Stop
from waystop.repositories.base import BaseReverseGeocoder
from waystop.services.speed_limits import SpeedLimitResolver
from waystop.services.stops import StopGenerator
from tests.conftest import StaticSpeedResolver, meridian_path


def _coords(stops):
    return [(s.lat, s.lon) for s in stops]


class FailingGeocoder(BaseReverseGeocoder):
    async def reverse_geocode(self, location: Point) -> str:
        raise ReverseGeocodingError("service unavailable")


@pytest.mark.asyncio
@pytest.mark.parametrize("path", [[], meridian_path(10.0)])
async def test_short_path_yields_no_stops(stop_generator, speed_resolver, path):
    stops = await stop_generator.generate_stops(path, [Point(latitude=10.0, longitude=0.0)])
    assert stops == []
    assert speed_resolver.calls == []


@pytest.mark.asyncio
async def test_highway_stop_placed_at_segment_start(stop_generator):
    # ~69 mile segments exceed the 60 mph default on every step
    stops = await stop_generator.generate_stops(meridian_path(0.0, 1.0, 2.0), [])

    assert _coords(stops) == [("0.00", "0.00"), ("1.00", "0.00")]
    assert all(s.duration == "1:00" for s in stops)
    assert all(s.location == "Highway Stop" for s in stops)
    assert all(s.fuel == "Not Available" for s in stops)


@pytest.mark.parametrize("point, expected", [
    (Point(latitude=41.125, longitude=-87.625), ("41.13", "-87.63")),
    (Point(latitude=1.005, longitude=-0.0), ("1.00", "0.00")),
    (Point(latitude=-0.001, longitude=0.004), ("-0.00", "0.00")),
])
def test_stop_coordinates_round_ties_away_from_zero(point, expected):
    assert _coords([Stop.highway(point), Stop.user(point)]) == [expected, expected]


@pytest.mark.asyncio
async def test_no_highway_stop_below_threshold(stop_generator, speed_resolver):
    # 0.8 degrees is ~55 miles, below one hour at 60 mph
    stops = await stop_generator.generate_stops(meridian_path(0.0, 0.4, 0.8), [])
    assert stops == []
    assert speed_resolver.calls == []


@pytest.mark.asyncio
async def test_user_stop_emitted_at_waypoint_coordinates(stop_generator):
    path = meridian_path(0.0, 0.01)
    waypoint = Point(latitude=0.005, longitude=0.0)

    stops = await stop_generator.generate_stops(path, [waypoint])

    assert stops == [
        Stop(duration="User Stop", lat="0.01", lon="0.00", location="User Provided Stop", fuel="Available")
    ]


@pytest.mark.asyncio
async def test_highway_stop_precedes_user_stop_at_same_point(stop_generator):
    stops = await stop_generator.generate_stops(
        meridian_path(0.0, 1.0), [Point(latitude=0.01, longitude=0.01)]
    )
    assert [s.location for s in stops] == ["Highway Stop", "User Provided Stop"]
    assert _coords(stops) == [("0.00", "0.00"), ("0.01", "0.01")]


@pytest.mark.asyncio
async def test_new_speed_only_applies_to_following_hour():
    resolver = StaticSpeedResolver([100.0])
    generator = StopGenerator(speed_resolver=resolver)

    stops = await generator.generate_stops(meridian_path(0.0, 1.0, 2.0, 3.0), [])

    # First stop uses the initial 60 mph; the next needs 100 miles (two segments)
    assert _coords(stops) == [("0.00", "0.00"), ("2.00", "0.00")]
    assert [p.latitude for p in resolver.calls] == [0.0, 2.0]


@pytest.mark.asyncio
async def test_thresholds_follow_resolved_speed():
    # 0.1 degree steps are ~6.91 miles each
    latitudes = [round(i * 0.1, 1) for i in range(25)]
    resolver = StaticSpeedResolver([70.0])
    generator = StopGenerator(speed_resolver=resolver)

    stops = await generator.generate_stops(meridian_path(*latitudes), [])

    # 9 segments reach 60 miles; after that 11 segments are needed to reach 70
    assert _coords(stops) == [("0.80", "0.00"), ("1.90", "0.00")]


@pytest.mark.asyncio
async def test_user_stop_resets_accumulator(stop_generator, speed_resolver):
    # Without the reset at 0.4 the walk would reach ~83 miles by the last point
    path = meridian_path(0.0, 0.4, 0.8, 1.2)
    stops = await stop_generator.generate_stops(path, [Point(latitude=0.4, longitude=0.0)])

    assert [s.location for s in stops] == ["User Provided Stop"]
    assert speed_resolver.calls == []


@pytest.mark.asyncio
async def test_colocated_waypoints_all_match_same_point(stop_generator):
    waypoints = [
        Point(latitude=0.01, longitude=0.0),
        Point(latitude=0.02, longitude=0.03),
        Point(latitude=0.5, longitude=0.0),
    ]
    stops = await stop_generator.generate_stops(meridian_path(0.0, 0.1, 0.5, 0.6), waypoints)

    assert _coords(stops) == [("0.01", "0.00"), ("0.02", "0.03"), ("0.50", "0.00")]


@pytest.mark.asyncio
async def test_tolerance_is_per_axis_and_exclusive(stop_generator):
    path = meridian_path(0.0, 0.1)
    # Within 0.05 of latitude but not of longitude
    stops = await stop_generator.generate_stops(path, [Point(latitude=0.0, longitude=0.06)])
    assert stops == []


@pytest.mark.asyncio
async def test_unreached_waypoint_is_omitted(stop_generator):
    stops = await stop_generator.generate_stops(
        meridian_path(0.0, 0.1, 0.2),
        [Point(latitude=0.1, longitude=0.0), Point(latitude=5.0, longitude=5.0)],
    )
    assert _coords(stops) == [("0.10", "0.00")]


@pytest.mark.asyncio
async def test_out_of_order_waypoint_blocks_later_ones(stop_generator):
    stops = await stop_generator.generate_stops(
        meridian_path(0.0, 0.1, 0.2),
        [Point(latitude=5.0, longitude=5.0), Point(latitude=0.1, longitude=0.0)],
    )
    assert stops == []


@pytest.mark.asyncio
async def test_last_path_point_is_never_checked(stop_generator):
    stops = await stop_generator.generate_stops(
        meridian_path(0.0, 0.1), [Point(latitude=0.1, longitude=0.0)]
    )
    assert stops == []


@pytest.mark.asyncio
async def test_each_waypoint_emitted_at_most_once(stop_generator):
    # The path lingers near the waypoint for several points
    path = meridian_path(0.0, 0.01, 0.02, 0.03, 0.04)
    stops = await stop_generator.generate_stops(path, [Point(latitude=0.0, longitude=0.0)])
    assert len(stops) == 1


@pytest.mark.asyncio
async def test_generation_is_repeatable():
    path = meridian_path(*[round(i * 0.3, 1) for i in range(20)])
    waypoints = [Point(latitude=0.9, longitude=0.0), Point(latitude=3.0, longitude=0.01)]

    first = await StopGenerator(StaticSpeedResolver([70.0, 65.0])).generate_stops(path, waypoints)
    second = await StopGenerator(StaticSpeedResolver([70.0, 65.0])).generate_stops(path, waypoints)

    assert first == second
    assert len(first) > 2


@pytest.mark.asyncio
async def test_failing_geocoder_falls_back_to_default_speed():
    path = meridian_path(*[round(i * 0.5, 1) for i in range(12)])
    degraded = SpeedLimitResolver(geocoder=FailingGeocoder(), speed_limits={"Texas": 85.0})

    degraded_stops = await StopGenerator(degraded).generate_stops(path, [])
    default_stops = await StopGenerator(StaticSpeedResolver([60.0])).generate_stops(path, [])

    assert degraded_stops == default_stops
    assert degraded_stops


@pytest.mark.asyncio
async def test_stops_follow_path_order():
    path = meridian_path(*[round(i * 0.25, 2) for i in range(30)])
    waypoints = [Point(latitude=1.0, longitude=0.0), Point(latitude=4.0, longitude=0.0)]

    stops = await StopGenerator(StaticSpeedResolver([60.0])).generate_stops(path, waypoints)

    latitudes = [float(s.lat) for s in stops]
    assert latitudes == sorted(latitudes)
