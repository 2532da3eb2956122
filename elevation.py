"""
Höjdstatistik via Open-Elevation

Höjden är alltid best effort: alla fel blir None i stället för undantag.
"""

import math
from typing import List, Optional, Sequence

import requests

from config import ELEVATION_BASE_URL, ELEVATION_MAX_POINTS, ELEVATION_TIMEOUT
from logging_config import get_logger
from models import ElevationStats, LatLng

logger = get_logger(__name__)


def downsample(points: Sequence[LatLng], max_points: int = ELEVATION_MAX_POINTS) -> List[LatLng]:
    """
    Glesa ut en polylinje till högst max_points punkter

    Tar var ceil(n / max_points):e punkt och tar alltid med sista punkten.
    """
    if len(points) <= max_points:
        return list(points)

    step = math.ceil(len(points) / max_points)
    sampled = list(points[::step])
    if (len(points) - 1) % step != 0:
        # Sista punkten ersätter sista urvalet om taket redan är nått
        if len(sampled) < max_points:
            sampled.append(points[-1])
        else:
            sampled[-1] = points[-1]
    return sampled


def elevation_gain_loss(elevations: Sequence[float]) -> Optional[ElevationStats]:
    """
    Summera höjdökning och höjdförlust

    Args:
        elevations: Höjdvärden i ordning

    Returns:
        ElevationStats avrundat till hela meter, None för färre än två värden
    """
    if len(elevations) < 2:
        return None

    gain = 0.0
    loss = 0.0
    for i in range(1, len(elevations)):
        diff = elevations[i] - elevations[i - 1]
        if diff > 0:
            gain += diff
        else:
            loss -= diff

    return ElevationStats(gain=round(gain), loss=round(loss))


class ElevationEstimator:
    """Hämtar höjddata för en rutt från Open-Elevation"""

    def __init__(self, base_url: str = ELEVATION_BASE_URL, http=None, timeout: int = ELEVATION_TIMEOUT):
        self.base_url = base_url
        self.http = http or requests.Session()
        self.timeout = timeout

    def fetch_elevations(self, points: Sequence[LatLng]) -> List[float]:
        """Hämta höjd för varje punkt i en enda förfrågan"""
        locations = "|".join(f"{lat},{lon}" for lat, lon in points)
        response = self.http.get(
            f"{self.base_url}/lookup",
            params={"locations": locations},
            timeout=self.timeout
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"oväntat svarsformat: {type(data).__name__}")

        results = data.get("results") or []
        if not isinstance(results, list) or not all(isinstance(r, dict) for r in results):
            raise ValueError("oväntat format på results")

        elevations = [float(result["elevation"]) for result in results]
        if not all(math.isfinite(e) for e in elevations):
            raise ValueError("ogiltiga höjdvärden")
        return elevations

    def estimate(self, latlngs: Sequence[LatLng]) -> Optional[ElevationStats]:
        """
        Beräkna höjdökning och höjdförlust för en rutt

        Args:
            latlngs: Ruttens polylinje (lat, lon), godtyckligt lång

        Returns:
            ElevationStats eller None om höjddata saknas
        """
        if len(latlngs) < 2:
            return None

        sampled = downsample(latlngs)
        try:
            elevations = self.fetch_elevations(sampled)
        except (requests.RequestException, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Höjddata ej tillgänglig: {e}")
            return None

        stats = elevation_gain_loss(elevations)
        if stats is None:
            logger.info("För få höjdvärden i svaret")
        return stats
