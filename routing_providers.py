"""
Routing-providers: OSRM (bas), OpenRouteService och GraphHopper (premium)

Alla providers tar emot och returnerar koordinater i providerordning (lon, lat).
"""

import math
from typing import Callable, List, Optional, Sequence

import requests

from config import (
    OSRM_BASE_URL,
    ORS_BASE_URL,
    GRAPHHOPPER_BASE_URL,
    OSRM_PROFILE,
    ORS_PROFILES,
    GRAPHHOPPER_PROFILES,
    DEFAULT_PROFILE,
    REQUEST_TIMEOUT
)
from errors import ProviderError, ProviderRouteError
from logging_config import get_logger
from models import LonLat, RouteResult

logger = get_logger(__name__)


class RoutingProvider:
    """Basklass för routing-providers"""

    name = "base"
    requires_key = False

    def __init__(self, base_url: str, http=None, timeout: int = REQUEST_TIMEOUT):
        self.base_url = base_url
        self.http = http or requests.Session()
        self.timeout = timeout

    def get_route(self, coordinates: Sequence[LonLat], api_key: Optional[str] = None) -> RouteResult:
        raise NotImplementedError

    def _send(self, method: str, url: str, **kwargs) -> dict:
        """
        Skicka en förfrågan och returnera JSON-svaret

        Raises:
            ProviderAuthError / ProviderRateLimitError / ProviderRouteError
        """
        try:
            response = self.http.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ProviderRouteError(self.name, f"nätverksfel: {e}") from e

        if response.status_code != 200:
            raise ProviderError.from_status(self.name, response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderRouteError(self.name, "svaret är inte JSON") from e

        if not isinstance(data, dict):
            raise ProviderRouteError(self.name, "oväntat svarsformat")
        return data

    def _parse(self, parser: Callable[[dict], RouteResult], data: dict) -> RouteResult:
        """Kör en svarsparser; ett svar med fel form blir ProviderRouteError"""
        try:
            return parser(data)
        except (AttributeError, KeyError, TypeError, IndexError) as e:
            raise ProviderRouteError(self.name, f"oväntat svarsformat: {e!r}") from e

    def _to_result(self, coordinates, distance, duration=None) -> RouteResult:
        try:
            geometry = [(float(c[0]), float(c[1])) for c in coordinates]
            distance = float(distance)
            duration = float(duration) if duration is not None else None
        except (TypeError, ValueError, IndexError) as e:
            raise ProviderRouteError(self.name, f"trasig geometri: {e}") from e

        if not all(math.isfinite(v) for point in geometry for v in point):
            raise ProviderRouteError(self.name, "geometrin innehåller ogiltiga tal")
        if not math.isfinite(distance) or (duration is not None and not math.isfinite(duration)):
            raise ProviderRouteError(self.name, "ogiltig distans eller tid")

        if len(geometry) < 2:
            raise ProviderRouteError(self.name, "geometrin har färre än två punkter")

        return RouteResult(
            geometry=geometry,
            distance=distance,
            duration=duration,
            provider=self.name
        )


class OSRMProvider(RoutingProvider):
    """OSRM - kräver ingen nyckel, används som bas och reserv"""

    name = "osrm"

    def __init__(self, base_url: str = OSRM_BASE_URL, profile: str = OSRM_PROFILE, http=None,
                 timeout: int = REQUEST_TIMEOUT):
        super().__init__(base_url, http, timeout)
        self.profile = profile

    def get_route(self, coordinates: Sequence[LonLat], api_key: Optional[str] = None) -> RouteResult:
        """Hämta rutt från OSRM"""
        path = ";".join(f"{lon},{lat}" for lon, lat in coordinates)
        url = f"{self.base_url}/route/v1/{self.profile}/{path}"
        data = self._send(
            "GET",
            url,
            params={"overview": "full", "geometries": "geojson", "steps": "false"}
        )
        return self._parse(self._parse_osrm_response, data)

    def _parse_osrm_response(self, data: dict) -> RouteResult:
        """Parsa OSRM-respons till RouteResult"""
        if data.get("code", "Ok") != "Ok":
            raise ProviderRouteError(self.name, data.get("message", data.get("code")))

        routes = data.get("routes") or []
        if not routes:
            raise ProviderRouteError(self.name, "ingen rutt")

        route = routes[0]
        return self._to_result(
            (route.get("geometry") or {}).get("coordinates") or [],
            route.get("distance", 0),
            route.get("duration")
        )


class OpenRouteServiceProvider(RoutingProvider):
    """OpenRouteService routing provider"""

    name = "ors"
    requires_key = True

    def __init__(self, base_url: str = ORS_BASE_URL, profile: str = DEFAULT_PROFILE, http=None,
                 timeout: int = REQUEST_TIMEOUT):
        super().__init__(base_url, http, timeout)
        self.profile = profile

    def get_route(self, coordinates: Sequence[LonLat], api_key: Optional[str] = None) -> RouteResult:
        """Hämta rutt från OpenRouteService"""
        if not api_key:
            raise ProviderRouteError(self.name, "API-nyckel saknas")

        ors_profile = ORS_PROFILES.get(self.profile, ORS_PROFILES[DEFAULT_PROFILE])
        url = f"{self.base_url}/v2/directions/{ors_profile}/geojson"
        headers = {
            "Authorization": api_key,
            "Content-Type": "application/json"
        }
        body = {"coordinates": [[lon, lat] for lon, lat in coordinates]}

        data = self._send("POST", url, json=body, headers=headers)
        return self._parse(self._parse_ors_response, data)

    def _parse_ors_response(self, data: dict) -> RouteResult:
        """Parsa ORS-respons till RouteResult"""
        features = data.get("features") or []
        if not features:
            raise ProviderRouteError(self.name, "ingen rutt")

        feature = features[0]
        coordinates = (feature.get("geometry") or {}).get("coordinates") or []
        summary = (feature.get("properties") or {}).get("summary") or {}

        return self._to_result(coordinates, summary.get("distance", 0), summary.get("duration"))


class GraphHopperProvider(RoutingProvider):
    """GraphHopper routing provider"""

    name = "graphhopper"
    requires_key = True

    def __init__(self, base_url: str = GRAPHHOPPER_BASE_URL, profile: str = DEFAULT_PROFILE, http=None,
                 timeout: int = REQUEST_TIMEOUT):
        super().__init__(base_url, http, timeout)
        self.profile = profile

    def get_route(self, coordinates: Sequence[LonLat], api_key: Optional[str] = None) -> RouteResult:
        """Hämta rutt från GraphHopper"""
        if not api_key:
            raise ProviderRouteError(self.name, "API-nyckel saknas")

        # GraphHopper vill ha "lat,lon" per punkt
        points: List[str] = [f"{lat},{lon}" for lon, lat in coordinates]
        params = {
            "key": api_key,
            "point": points,
            "profile": GRAPHHOPPER_PROFILES.get(self.profile, GRAPHHOPPER_PROFILES[DEFAULT_PROFILE]),
            "points_encoded": "false",
            "instructions": "false"
        }

        data = self._send("GET", f"{self.base_url}/route", params=params)
        return self._parse(self._parse_graphhopper_response, data)

    def _parse_graphhopper_response(self, data: dict) -> RouteResult:
        """Parsa GraphHopper-respons till RouteResult"""
        paths = data.get("paths") or []
        if not paths:
            raise ProviderRouteError(self.name, "ingen rutt")

        path = paths[0]
        coordinates = (path.get("points") or {}).get("coordinates") or []

        # GraphHopper ger tid i millisekunder
        time_ms = path.get("time")
        duration = time_ms / 1000 if isinstance(time_ms, (int, float)) else None

        return self._to_result(coordinates, path.get("distance", 0), duration)
