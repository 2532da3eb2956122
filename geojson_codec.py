"""
GeoJSON-kodning av rutter för rutt-API:t

Rutten blir en LineString i providerordning, planeringspunkterna följer med
under properties.waypoints.
"""

import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

from errors import ParseError
from models import LatLng


def latlngs_to_geojson(
    route: Sequence[LatLng],
    waypoints: Optional[Sequence[LatLng]] = None
) -> Dict[str, Any]:
    """
    Konvertera rutt (lat, lon) till en GeoJSON LineString

    Args:
        route: Ruttens polylinje i kartordning
        waypoints: Planeringspunkter i kartordning

    Returns:
        LineString-dict; properties utelämnas om inga punkter ges
    """
    geometry = {
        "type": "LineString",
        "coordinates": [[lon, lat] for lat, lon in route],
    }
    if waypoints is not None:
        geometry["properties"] = {
            "waypoints": [[lon, lat] for lat, lon in waypoints]
        }
    return geometry


def geojson_to_latlngs(geometry: Dict[str, Any]) -> Tuple[List[LatLng], Optional[List[LatLng]]]:
    """
    Konvertera en LineString tillbaka till kartordning

    Args:
        geometry: LineString-dict från latlngs_to_geojson

    Returns:
        (rutt, planeringspunkter eller None)

    Raises:
        ParseError: Geometrin har fel form
    """
    try:
        if geometry.get("type") != "LineString":
            raise ParseError(f"Förväntade LineString, fick {geometry.get('type')!r}")

        route = [_to_latlng(position) for position in geometry["coordinates"]]

        waypoints = None
        properties = geometry.get("properties") or {}
        if properties.get("waypoints") is not None:
            waypoints = [_to_latlng(position) for position in properties["waypoints"]]
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ParseError(f"Ogiltig GeoJSON-geometri: {e}") from e

    return route, waypoints


def _to_latlng(position: Sequence[Any]) -> LatLng:
    """[lon, lat, ...] till (lat, lon); kräver ändliga tal"""
    if isinstance(position, str) or len(position) < 2:
        raise ValueError(f"ogiltig position {position!r}")
    lon, lat = float(position[0]), float(position[1])
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise ValueError(f"ogiltig position {position!r}")
    return lat, lon
