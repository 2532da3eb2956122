"""
Geometrifunktioner: avstånd, polylinjelängd och kilometermarkeringar

Alla koordinater här är i kartordning (lat, lon).
"""

import math
from typing import List, Optional, Sequence

from config import EARTH_RADIUS_M, KM_MARKER_SPACING
from models import KmMarker, LatLng


def distance(a: LatLng, b: LatLng) -> float:
    """
    Storcirkelavstånd mellan två punkter (Haversine formula)

    Args:
        a: Första punkten (lat, lon)
        b: Andra punkten (lat, lon)

    Returns:
        Avstånd i meter
    """
    lat1, lon1 = math.radians(a[0]), math.radians(a[1])
    lat2, lon2 = math.radians(b[0]), math.radians(b[1])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # min() skyddar mot avrundning strax över 1 för antipodala punkter
    c = 2 * math.asin(min(1.0, math.sqrt(h)))

    return EARTH_RADIUS_M * c


def polyline_length(points: Sequence[LatLng]) -> float:
    """
    Total längd av en polylinje

    Args:
        points: Punkter i kartordning

    Returns:
        Längd i meter, 0 för färre än två punkter
    """
    total = 0.0
    for i in range(1, len(points)):
        total += distance(points[i - 1], points[i])
    return total


def interpolate(a: LatLng, b: LatLng, t: float) -> LatLng:
    """Linjär interpolation mellan a och b, t i [0, 1]"""
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def point_at_distance(points: Sequence[LatLng], meters: float) -> Optional[LatLng]:
    """
    Hitta punkten som ligger ett visst avstånd längs polylinjen

    Args:
        points: Punkter i kartordning
        meters: Avstånd från start

    Returns:
        Interpolerad punkt, sista punkten om avståndet är längre än linjen,
        eller None för en tom linje
    """
    if not points:
        return None
    if meters <= 0:
        return tuple(points[0])

    cum = 0.0
    for i in range(1, len(points)):
        seg = distance(points[i - 1], points[i])
        if seg > 0 and cum + seg >= meters:
            return interpolate(points[i - 1], points[i], (meters - cum) / seg)
        cum += seg

    return tuple(points[-1])


def kilometer_markers(points: Sequence[LatLng], total_meters: Optional[float] = None) -> List[KmMarker]:
    """
    Beräkna kilometermarkeringar längs en polylinje

    Args:
        points: Punkter i kartordning
        total_meters: Providerns rapporterade distans, går före lokalt summerad längd

    Returns:
        Markeringar i ordning, högst floor(total / 1000) stycken
    """
    if not points:
        return []

    total = total_meters if total_meters is not None else polyline_length(points)
    km_count = int(math.floor(total / KM_MARKER_SPACING))
    if km_count < 1:
        return []

    markers = []
    cum = 0.0
    next_mark = KM_MARKER_SPACING
    k = 1

    for i in range(1, len(points)):
        if k > km_count:
            break
        a, b = points[i - 1], points[i]
        seg = distance(a, b)
        if seg <= 0:
            continue

        while cum + seg >= next_mark and k <= km_count:
            t = min(1.0, max(0.0, (next_mark - cum) / seg))
            markers.append(KmMarker(label=f"{k} km", position=interpolate(a, b, t)))
            k += 1
            next_mark += KM_MARKER_SPACING

        cum += seg

    return markers
