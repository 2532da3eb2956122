"""
Ruttsession: äger planeringspunkter, markörer och den senast beräknade rutten

Punkterna lagras i providerordning (lon, lat). Varje ändring startar en ny
omräkning; ett svar från en äldre omräkning kastas när det kommer fram.
"""

import asyncio
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence, Union

from config import DEFAULT_ROUTE_NAME
from elevation import ElevationEstimator
from errors import EmptyRouteError, RoutingFailed
from geojson_codec import geojson_to_latlngs, latlngs_to_geojson
from geometry import kilometer_markers, polyline_length
from gpx_codec import from_gpx, to_gpx
from logging_config import get_logger
from models import KmMarker, LatLng, LonLat, RouteStats, RouteUpdate
from routing import RoutingGateway
from utils import compute_stats, parse_pace

logger = get_logger(__name__)

Listener = Callable[[RouteUpdate], None]


@dataclass
class Marker:
    """Kartmarkör kopplad till en planeringspunkt via index"""
    id: int


class RouteSession:
    """
    Håller tillståndet för en planerad rutt

    Args:
        gateway: RoutingGateway som beräknar rutter
        elevation: ElevationEstimator, eller None för att hoppa över höjddata
        pace: Tempo som "5:30" eller sekunder per km
        weight_kg: Kroppsvikt för kaloriberäkning
        loop: Stäng rutten tillbaka till första punkten
    """

    def __init__(
        self,
        gateway: RoutingGateway,
        elevation: Optional[ElevationEstimator] = None,
        pace: Union[str, float, None] = None,
        weight_kg: Optional[float] = None,
        loop: bool = False
    ):
        self.gateway = gateway
        self.elevation = elevation
        self.loop = loop
        self.pace: Optional[float] = None
        self.weight_kg: Optional[float] = None

        self.waypoints: List[LonLat] = []
        self.markers: List[Marker] = []

        self.polyline: List[LatLng] = []
        self.distance: float = 0.0
        self.km_markers: List[KmMarker] = []
        self.stats: Optional[RouteStats] = None
        self.error: Optional[str] = None
        self.provider: Optional[str] = None

        self._generation = 0
        self._next_marker_id = 1
        self._listeners: List[Listener] = []
        self._elevation_task: Optional[asyncio.Task] = None

        self._set_pace_value(pace)
        self._set_weight_value(weight_kg)

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Registrera en lyssnare som får en RouteUpdate efter varje omräkning"""
        self._listeners.append(listener)

    def snapshot(self) -> RouteUpdate:
        return RouteUpdate(
            polyline=list(self.polyline) if self.polyline else None,
            stats=replace(self.stats) if self.stats is not None else None,
            km_markers=list(self.km_markers),
            error=self.error,
            provider=self.provider
        )

    def _emit(self) -> RouteUpdate:
        update = self.snapshot()
        for listener in list(self._listeners):
            listener(update)
        return update

    def marker_labels(self) -> List[str]:
        """Etiketter för markörerna, 1-baserade efter position"""
        return [str(i + 1) for i in range(len(self.markers))]

    def waypoint_latlngs(self) -> List[LatLng]:
        return [(lat, lon) for lon, lat in self.waypoints]

    async def wait_for_elevation(self) -> None:
        """Vänta in en pågående höjdhämtning"""
        if self._elevation_task is not None:
            await self._elevation_task

    # ------------------------------------------------------------------
    # Ändringar av punkter
    # ------------------------------------------------------------------

    def _new_marker(self) -> Marker:
        marker = Marker(id=self._next_marker_id)
        self._next_marker_id += 1
        return marker

    def _check_markers(self) -> None:
        if len(self.markers) != len(self.waypoints):
            raise RuntimeError(
                f"{len(self.markers)} markörer men {len(self.waypoints)} punkter"
            )

    async def add_waypoint(self, lat: float, lon: float) -> Optional[RouteUpdate]:
        """Lägg till en punkt sist i rutten och räkna om"""
        self.waypoints.append((lon, lat))
        self.markers.append(self._new_marker())
        self._check_markers()
        return await self.recompute()

    async def move_waypoint(self, index: int, lat: float, lon: float) -> Optional[RouteUpdate]:
        """Ersätt punkten på ett index (dra i markören) och räkna om"""
        if not 0 <= index < len(self.waypoints):
            raise IndexError(f"Ingen punkt på index {index}")
        self.waypoints[index] = (lon, lat)
        return await self.recompute()

    async def undo_last_waypoint(self) -> Optional[RouteUpdate]:
        """Ta bort sista punkten, gör ingenting om listan är tom"""
        if not self.waypoints:
            return self.snapshot()
        self.waypoints.pop()
        self.markers.pop()
        self._check_markers()
        return await self.recompute()

    async def reverse(self) -> Optional[RouteUpdate]:
        """Vänd ordningen på punkter och markörer tillsammans"""
        if len(self.waypoints) < 2:
            return self.snapshot()
        self.waypoints.reverse()
        self.markers.reverse()
        self._check_markers()
        return await self.recompute()

    def clear_all(self) -> RouteUpdate:
        """Töm punkter, markörer, rutt och statistik"""
        self._generation += 1
        self.waypoints = []
        self.markers = []
        self._clear_route()
        self.error = None
        return self._emit()

    async def set_loop(self, loop: bool) -> Optional[RouteUpdate]:
        """Slå på/av rundslinga; indata till routingen ändras så allt räknas om"""
        if bool(loop) == self.loop:
            return self.snapshot()
        self.loop = bool(loop)
        return await self.recompute()

    # ------------------------------------------------------------------
    # Tempo och vikt påverkar bara ETA och kalorier
    # ------------------------------------------------------------------

    def _set_pace_value(self, pace: Union[str, float, None]) -> None:
        if isinstance(pace, str):
            parsed = parse_pace(pace)
            if parsed is None and pace.strip():
                logger.warning(f"Ogiltigt tempo {pace!r}, ignoreras")
            self.pace = parsed
        elif pace is not None and pace > 0:
            self.pace = float(pace)
        else:
            self.pace = None

    def _set_weight_value(self, weight_kg: Optional[float]) -> None:
        self.weight_kg = float(weight_kg) if weight_kg and weight_kg > 0 else None

    def set_pace(self, pace: Union[str, float, None]) -> RouteUpdate:
        self._set_pace_value(pace)
        return self._refresh_stats()

    def set_weight(self, weight_kg: Optional[float]) -> RouteUpdate:
        self._set_weight_value(weight_kg)
        return self._refresh_stats()

    def _refresh_stats(self) -> RouteUpdate:
        if self.stats is not None:
            self.stats = compute_stats(
                self.distance,
                self.pace,
                self.weight_kg,
                elevation_gain=self.stats.elevation_gain,
                elevation_loss=self.stats.elevation_loss,
                elevation_pending=self.stats.elevation_pending
            )
        return self._emit()

    # ------------------------------------------------------------------
    # Omräkning
    # ------------------------------------------------------------------

    def _clear_route(self) -> None:
        self.polyline = []
        self.distance = 0.0
        self.km_markers = []
        self.stats = None
        self.provider = None

    def _routing_coordinates(self) -> List[LonLat]:
        coords = list(self.waypoints)
        if self.loop:
            coords.append(self.waypoints[0])
        return coords

    async def recompute(self) -> Optional[RouteUpdate]:
        """
        Räkna om rutten från aktuella punkter

        Returns:
            RouteUpdate, eller None om en nyare ändring hann före
        """
        self._generation += 1
        generation = self._generation

        # Inget från den förra rutten får synas medan den nya hämtas
        self._clear_route()
        self.error = None

        if len(self.waypoints) < 2:
            return self._emit()

        coords = self._routing_coordinates()
        try:
            result = await asyncio.to_thread(self.gateway.get_route, coords)
        except RoutingFailed as e:
            if generation != self._generation:
                logger.debug("Inaktuellt routingfel ignoreras")
                return None
            self.error = str(e)
            return self._emit()

        if generation != self._generation:
            logger.debug(f"Kastar inaktuell rutt (generation {generation}, nu {self._generation})")
            return None

        latlngs = [(lat, lon) for lon, lat in result.geometry]
        self.provider = result.provider
        self._apply_route(latlngs, result.distance or polyline_length(latlngs), generation)
        logger.info(f"Rutt beräknad via {result.provider}: {self.distance / 1000:.2f} km")
        return self._emit()

    def _apply_route(
        self,
        latlngs: List[LatLng],
        distance: float,
        generation: int,
        elevation_gain: Optional[float] = None,
        elevation_loss: Optional[float] = None
    ) -> None:
        self.polyline = latlngs
        self.distance = distance
        self.km_markers = kilometer_markers(latlngs, distance)

        has_elevation = elevation_gain is not None and elevation_loss is not None
        pending = not has_elevation and self.elevation is not None
        self.stats = compute_stats(
            distance,
            self.pace,
            self.weight_kg,
            elevation_gain=elevation_gain if has_elevation else None,
            elevation_loss=elevation_loss if has_elevation else None,
            elevation_pending=pending
        )

        if pending:
            self._elevation_task = asyncio.create_task(self._fetch_elevation(generation, latlngs))

    async def _fetch_elevation(self, generation: int, latlngs: List[LatLng]) -> None:
        elev = None
        try:
            elev = await asyncio.to_thread(self.elevation.estimate, latlngs)
        finally:
            # Väntande-flaggan släpps även om estimatorn kastar
            if generation != self._generation or self.stats is None:
                logger.debug("Kastar inaktuell höjddata")
            else:
                self.stats.elevation_pending = False
                if elev is not None:
                    self.stats.elevation_gain = elev.gain
                    self.stats.elevation_loss = elev.loss
                self._emit()

    # ------------------------------------------------------------------
    # Import och export
    # ------------------------------------------------------------------

    async def load_route_from_external_data(
        self,
        polyline: Sequence[LatLng],
        waypoints: Sequence[LatLng],
        distance_m: float,
        elevation_gain: Optional[float] = None,
        elevation_loss: Optional[float] = None
    ) -> RouteUpdate:
        """
        Ersätt hela tillståndet med en redan beräknad rutt

        Routingen anropas inte; kilometermarkeringar räknas om från polylinjen.

        Raises:
            EmptyRouteError: Polylinjen har färre än två punkter, tillståndet lämnas orört
        """
        if len(polyline) < 2:
            raise EmptyRouteError("Rutten har färre än två punkter")

        self._generation += 1
        generation = self._generation

        self.waypoints = [(lon, lat) for lat, lon in waypoints]
        self.markers = [self._new_marker() for _ in self.waypoints]
        self._check_markers()

        self._clear_route()
        self.error = None
        self._apply_route(
            [tuple(p) for p in polyline],
            distance_m,
            generation,
            elevation_gain=elevation_gain,
            elevation_loss=elevation_loss
        )
        return self._emit()

    async def import_gpx(self, gpx_text: str) -> RouteUpdate:
        """
        Läs in en GPX-fil som aktuell rutt

        Raises:
            ParseError / EmptyRouteError: Tillståndet lämnas orört
        """
        data = from_gpx(gpx_text)
        logger.info(f"GPX inläst: {len(data.route)} punkter")
        return await self.load_route_from_external_data(
            data.route, data.markers, polyline_length(data.route)
        )

    def export_gpx(self, name: str = DEFAULT_ROUTE_NAME, laps: int = 1) -> str:
        if not self.polyline:
            raise EmptyRouteError("Ingen rutt att exportera")
        return to_gpx(self.polyline, self.waypoint_latlngs(), name=name, laps=laps)

    def to_geojson(self) -> dict:
        if not self.polyline:
            raise EmptyRouteError("Ingen rutt att spara")
        return latlngs_to_geojson(self.polyline, self.waypoint_latlngs())

    async def load_geojson(
        self,
        geometry: dict,
        distance_m: Optional[float] = None,
        elevation_gain: Optional[float] = None,
        elevation_loss: Optional[float] = None
    ) -> RouteUpdate:
        """Läs in en sparad rutt från rutt-API:ts geometri"""
        route, waypoints = geojson_to_latlngs(geometry)
        if len(route) < 2:
            raise EmptyRouteError("Den sparade rutten har färre än två punkter")
        if distance_m is None:
            distance_m = polyline_length(route)
        return await self.load_route_from_external_data(
            route, waypoints or [], distance_m, elevation_gain, elevation_loss
        )
