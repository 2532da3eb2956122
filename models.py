"""
Datamodeller för löparruttplaneraren
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# (lat, lon) - kartordning
LatLng = Tuple[float, float]
# (lon, lat) - providerordning
LonLat = Tuple[float, float]


@dataclass
class RouteResult:
    """Svar från en routing-provider"""
    geometry: List[LonLat]
    distance: float  # meter
    duration: Optional[float] = None  # sekunder
    provider: str = "osrm"  # Vilket API som användes


@dataclass
class KmMarker:
    """Kilometermarkering längs rutten"""
    label: str
    position: LatLng


@dataclass
class ElevationStats:
    gain: float
    loss: float


@dataclass
class RouteStats:
    """Härledd statistik för en rutt"""
    distance: float  # meter
    elevation_gain: Optional[float] = None
    elevation_loss: Optional[float] = None
    eta_seconds: Optional[float] = None
    calories: Optional[float] = None
    elevation_pending: bool = False


@dataclass
class GpxData:
    """Resultat av GPX-tolkning"""
    route: List[LatLng]
    markers: List[LatLng]
    name: Optional[str] = None


@dataclass
class ProviderState:
    """Tillstånd för en premium-provider"""
    name: str
    degraded: bool = False


@dataclass
class RouteUpdate:
    """Det som sessionen skickar till presentationslagret efter en omräkning"""
    polyline: Optional[List[LatLng]] = None
    stats: Optional[RouteStats] = None
    km_markers: List[KmMarker] = field(default_factory=list)
    error: Optional[str] = None
    provider: Optional[str] = None
