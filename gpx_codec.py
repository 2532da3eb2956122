"""
GPX-export och -import av rutter

Rutten skrivs som <trk>, användarens punkter som både <wpt> och <rte>.
"""

import math
from typing import Iterable, List, Optional, Sequence

import gpxpy
import gpxpy.gpx

from config import DEFAULT_ROUTE_NAME
from errors import EmptyRouteError, ParseError
from logging_config import get_logger
from models import GpxData, LatLng

logger = get_logger(__name__)

CREATOR = "RoutePlanner"


def _waypoint_name(index: int) -> str:
    return f"WP {index + 1}"


def to_gpx(
    route: Sequence[LatLng],
    markers: Optional[Sequence[LatLng]] = None,
    name: str = DEFAULT_ROUTE_NAME,
    laps: int = 1
) -> str:
    """
    Skapa GPX-fil från rutt och planeringspunkter

    Args:
        route: Ruttens polylinje (lat, lon)
        markers: Användarens punkter (lat, lon) i ordning
        name: Namn på rutten
        laps: Antal gånger samma <trkseg> upprepas

    Returns:
        GPX 1.1 som sträng
    """
    markers = list(markers or [])
    laps = max(1, int(laps))

    gpx = gpxpy.gpx.GPX()
    gpx.creator = CREATOR

    # Fristående punkter, många appar visar dem som nålar
    for idx, (lat, lon) in enumerate(markers):
        gpx.waypoints.append(gpxpy.gpx.GPXWaypoint(lat, lon, name=_waypoint_name(idx)))

    # Planeringspunkterna i ordning
    if markers:
        gpx_route = gpxpy.gpx.GPXRoute(name=name)
        for idx, (lat, lon) in enumerate(markers):
            gpx_route.points.append(gpxpy.gpx.GPXRoutePoint(lat, lon, name=_waypoint_name(idx)))
        gpx.routes.append(gpx_route)

    gpx_track = gpxpy.gpx.GPXTrack(name=name)
    gpx.tracks.append(gpx_track)

    for _ in range(laps):
        gpx_segment = gpxpy.gpx.GPXTrackSegment()
        for lat, lon in route:
            gpx_segment.points.append(gpxpy.gpx.GPXTrackPoint(lat, lon))
        gpx_track.segments.append(gpx_segment)

    return gpx.to_xml(version="1.1")


def _finite_points(points: Iterable) -> List[LatLng]:
    result = []
    for point in points:
        lat, lon = point.latitude, point.longitude
        if lat is None or lon is None:
            continue
        if math.isfinite(lat) and math.isfinite(lon):
            result.append((lat, lon))
    return result


def from_gpx(gpx_text: str) -> GpxData:
    """
    Tolka GPX till polylinje och planeringspunkter

    Rutten tas från <trkpt> och faller tillbaka på <rtept> om spår saknas.
    Punkterna tas från <rtept> och faller tillbaka på <wpt>.

    Args:
        gpx_text: GPX-dokumentet som text

    Returns:
        GpxData

    Raises:
        ParseError: Dokumentet är inte giltig GPX-XML
        EmptyRouteError: Färre än två användbara punkter
    """
    try:
        gpx = gpxpy.parse(gpx_text)
    except (gpxpy.gpx.GPXException, ValueError) as e:
        logger.warning(f"Ogiltig GPX: {e}")
        raise ParseError(f"Ogiltig GPX-XML: {e}") from e

    track_points = [
        point
        for track in gpx.tracks
        for segment in track.segments
        for point in segment.points
    ]
    route_points = [point for gpx_route in gpx.routes for point in gpx_route.points]

    route = _finite_points(track_points if track_points else route_points)
    if len(route) < 2:
        raise EmptyRouteError("Inga användbara ruttpunkter i GPX-filen")

    markers = _finite_points(route_points if route_points else gpx.waypoints)

    name = None
    if gpx.tracks and gpx.tracks[0].name:
        name = gpx.tracks[0].name

    logger.debug(f"GPX tolkad: {len(route)} ruttpunkter, {len(markers)} planeringspunkter")
    return GpxData(route=route, markers=markers, name=name)
