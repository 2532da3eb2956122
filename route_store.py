"""
Klient för rutt-API:t (spara, lista, hämta, uppdatera, ta bort)

Geometrin skickas som GeoJSON LineString med planeringspunkterna under
properties.waypoints, se geojson_codec. Svar som innehåller geometri får
även nycklarna route och waypoints i kartordning (lat, lon).
"""

from typing import Any, Dict, Optional, Sequence

import requests

from config import REQUEST_TIMEOUT, ROUTE_API_BASE_URL
from errors import RouteStoreError
from geojson_codec import geojson_to_latlngs, latlngs_to_geojson
from logging_config import get_logger
from models import LatLng

logger = get_logger(__name__)


def decode_route(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Avkoda geometrin i en sparad rutt

    Args:
        data: Rutt från API:t

    Returns:
        Samma dict med route och waypoints tillagda om geometry finns

    Raises:
        ParseError: Geometrin har fel form
    """
    geometry = data.get("geometry")
    if geometry is not None:
        data["route"], data["waypoints"] = geojson_to_latlngs(geometry)
    return data


def _decode_listing(data: Dict[str, Any]) -> Dict[str, Any]:
    for item in data.get("routes") or []:
        decode_route(item)
    return data


class RouteStoreClient:
    """Talar med rutt-API:t över HTTP"""

    def __init__(self, base_url: str = ROUTE_API_BASE_URL, token: Optional[str] = None, http=None,
                 timeout: int = REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.http = http or requests.Session()
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, errors: Dict[int, str], default_error: str, **kwargs):
        try:
            response = self.http.request(
                method,
                f"{self.base_url}{path}",
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} misslyckades: {e}")
            raise RouteStoreError(default_error) from e

        if not response.ok:
            message = errors.get(response.status_code)
            if message is None:
                try:
                    message = response.json().get("detail") or default_error
                except (ValueError, AttributeError):
                    message = default_error
            logger.warning(f"{method} {path} -> HTTP {response.status_code}: {message}")
            raise RouteStoreError(message, response.status_code)

        return response

    def create_route(
        self,
        name: str,
        route: Sequence[LatLng],
        waypoints: Optional[Sequence[LatLng]] = None,
        distance_m: Optional[float] = None,
        description: Optional[str] = None,
        is_public: bool = False,
        **metadata: Any
    ) -> Dict[str, Any]:
        """
        Spara en rutt

        Args:
            name: Ruttens namn
            route: Polylinje (lat, lon)
            waypoints: Planeringspunkter (lat, lon)
            distance_m: Distans i meter
            description: Beskrivning
            is_public: Synlig i utforska-listan
            **metadata: Övriga fält, t.ex. city och country

        Returns:
            Den sparade rutten som dict
        """
        payload = {
            "name": name,
            "description": description,
            "is_public": is_public,
            "geometry": latlngs_to_geojson(route, waypoints),
            "distance_m": distance_m,
        }
        payload.update(metadata)
        response = self._request(
            "POST", "/routes", {401: "Logga in för att spara rutter"}, "Kunde inte spara rutten",
            json=payload
        )
        return decode_route(response.json())

    def get_my_routes(self, limit: int = 50, offset: int = 0) -> Dict[str, Any]:
        response = self._request(
            "GET", "/routes/me", {401: "Logga in för att se dina rutter"}, "Kunde inte hämta rutter",
            params={"limit": limit, "offset": offset}
        )
        return _decode_listing(response.json())

    def explore_routes(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        city: Optional[str] = None,
        country: Optional[str] = None,
        min_distance_km: Optional[float] = None,
        max_distance_km: Optional[float] = None
    ) -> Dict[str, Any]:
        """Lista publika rutter, filter som inte anges skickas inte"""
        params = {
            "limit": limit,
            "offset": offset,
            "city": city,
            "country": country,
            "min_distance_km": min_distance_km,
            "max_distance_km": max_distance_km,
        }
        params = {k: v for k, v in params.items() if v is not None}
        response = self._request("GET", "/routes/explore", {}, "Kunde inte hämta publika rutter", params=params)
        return _decode_listing(response.json())

    def get_route(self, route_id: str) -> Dict[str, Any]:
        response = self._request(
            "GET", f"/routes/{route_id}",
            {403: "Åtkomst nekad", 404: "Rutten finns inte"},
            "Kunde inte hämta rutten"
        )
        return decode_route(response.json())

    def update_route(self, route_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        response = self._request(
            "PUT", f"/routes/{route_id}",
            {401: "Logga in", 404: "Rutten finns inte"},
            "Kunde inte uppdatera rutten",
            json=data
        )
        return decode_route(response.json())

    def delete_route(self, route_id: str) -> None:
        self._request(
            "DELETE", f"/routes/{route_id}",
            {401: "Logga in", 404: "Rutten finns inte"},
            "Kunde inte ta bort rutten"
        )
        logger.info(f"Rutt {route_id} borttagen")
