import pytest

from errors import EmptyRouteError, ParseError
from gpx_codec import from_gpx, to_gpx

ROUTE = [
    (59.3293, 18.0686),
    (59.33012345678, 18.07123456789),
    (59.3311, 18.0735),
    (59.3325, 18.0701),
]
WAYPOINTS = [(59.3293, 18.0686), (59.3325, 18.0701)]


def _flatten(points):
    return [value for point in points for value in point]


def test_round_trip_route_and_waypoints():
    data = from_gpx(to_gpx(ROUTE, WAYPOINTS))
    assert _flatten(data.route) == pytest.approx(_flatten(ROUTE))
    assert _flatten(data.markers) == pytest.approx(_flatten(WAYPOINTS))
    assert data.name == "Planned route"


def test_round_trip_without_waypoints():
    data = from_gpx(to_gpx(ROUTE))
    assert _flatten(data.route) == pytest.approx(_flatten(ROUTE))
    assert data.markers == []


def test_encoded_document_structure():
    xml = to_gpx(ROUTE, WAYPOINTS, name="Morgonrunda", laps=3)
    assert 'version="1.1"' in xml
    assert "http://www.topografix.com/GPX/1/1" in xml
    assert xml.count("<wpt ") == 2
    assert xml.count("<rtept ") == 2
    assert "WP 1" in xml and "WP 2" in xml
    assert xml.count("<trkseg>") == 3
    assert xml.count("<trkpt ") == 3 * len(ROUTE)


def test_laps_below_one_are_clamped():
    xml = to_gpx(ROUTE, laps=0)
    assert xml.count("<trkseg>") == 1


def test_name_is_escaped():
    xml = to_gpx(ROUTE, name='A & B <"C">')
    assert "&amp;" in xml
    assert "<\"C\">" not in xml
    assert from_gpx(xml).name == 'A & B <"C">'


def test_malformed_xml_raises_parse_error():
    with pytest.raises(ParseError):
        from_gpx("<gpx><trk><trkseg><trkpt lat='1' lon='2'></trkseg></gpx")


def test_route_falls_back_to_rtept_when_no_track():
    xml = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <wpt lat="10.0" lon="20.0"><name>Pin</name></wpt>
  <rte>
    <rtept lat="1.0" lon="2.0"/>
    <rtept lat="1.5" lon="2.5"/>
    <rtept lat="2.0" lon="3.0"/>
  </rte>
</gpx>"""
    data = from_gpx(xml)
    assert data.route == [(1.0, 2.0), (1.5, 2.5), (2.0, 3.0)]
    assert data.markers == [(1.0, 2.0), (1.5, 2.5), (2.0, 3.0)]


def test_markers_fall_back_to_wpt():
    xml = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <wpt lat="5.0" lon="6.0"/>
  <wpt lat="7.0" lon="8.0"/>
  <trk><trkseg>
    <trkpt lat="1.0" lon="2.0"/>
    <trkpt lat="3.0" lon="4.0"/>
  </trkseg></trk>
</gpx>"""
    data = from_gpx(xml)
    assert data.route == [(1.0, 2.0), (3.0, 4.0)]
    assert data.markers == [(5.0, 6.0), (7.0, 8.0)]


def test_gpx_10_dialect():
    xml = """<?xml version="1.0"?>
<gpx version="1.0" creator="old" xmlns="http://www.topografix.com/GPX/1/0">
  <trk><name>Gammal</name><trkseg>
    <trkpt lat="59.0" lon="18.0"><ele>12</ele></trkpt>
    <trkpt lat="59.1" lon="18.1"><ele>15</ele></trkpt>
  </trkseg></trk>
</gpx>"""
    data = from_gpx(xml)
    assert data.route == [(59.0, 18.0), (59.1, 18.1)]
    assert data.name == "Gammal"


def test_non_finite_points_are_dropped():
    xml = """<gpx version="1.1" creator="t" xmlns="http://www.topografix.com/GPX/1/1">
  <trk><trkseg>
    <trkpt lat="1.0" lon="2.0"/>
    <trkpt lat="NaN" lon="2.5"/>
    <trkpt lat="3.0" lon="4.0"/>
  </trkseg></trk>
</gpx>"""
    assert from_gpx(xml).route == [(1.0, 2.0), (3.0, 4.0)]


def test_single_point_raises_empty_route():
    xml = """<gpx version="1.1" creator="t" xmlns="http://www.topografix.com/GPX/1/1">
  <trk><trkseg><trkpt lat="1.0" lon="2.0"/></trkseg></trk>
</gpx>"""
    with pytest.raises(EmptyRouteError):
        from_gpx(xml)
