"""
Huvudsaklig routing-modul som väljer provider och faller tillbaka på OSRM
"""

from typing import Dict, Iterable, Optional, Sequence, Tuple

from config import BASELINE_PROVIDER
from credentials import CredentialStore
from errors import (
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
    RoutingFailed
)
from logging_config import get_logger
from models import LonLat, ProviderState, RouteResult
from routing_providers import OSRMProvider, RoutingProvider

logger = get_logger(__name__)


def select_provider(requested: Optional[str], credential_present: bool, degraded: bool) -> str:
    """
    Välj provider för ett anrop

    Args:
        requested: Premium-provider som användaren valt, eller None
        credential_present: Om det finns en nyckel för den
        degraded: Om providern har markerats som nedgraderad

    Returns:
        Namnet på premium-providern, eller BASELINE_PROVIDER
    """
    if requested and requested != BASELINE_PROVIDER and credential_present and not degraded:
        return requested
    return BASELINE_PROVIDER


class RoutingGateway:
    """
    Koordinerar bas- och premium-providers

    Varje premium-provider är Available tills den svarar med 401/403/429,
    då blir den Degraded. En ny nyckel gör den Available igen.
    """

    def __init__(
        self,
        baseline: Optional[RoutingProvider] = None,
        premium: Iterable[RoutingProvider] = (),
        credentials: Optional[CredentialStore] = None,
        selected: Optional[str] = None
    ):
        self.baseline = baseline or OSRMProvider()
        self.premium: Dict[str, RoutingProvider] = {p.name: p for p in premium}
        self.states: Dict[str, ProviderState] = {
            name: ProviderState(name=name) for name in self.premium
        }
        self.credentials = credentials or CredentialStore()
        self.credentials.subscribe(self._on_credential_changed)
        self.selected = None
        self.select(selected)

    def select(self, name: Optional[str]) -> None:
        """Välj premium-provider (None eller "osrm" betyder bara basprovidern)"""
        if name in (None, BASELINE_PROVIDER):
            self.selected = None
            return
        if name not in self.premium:
            raise ValueError(f"Okänd provider: {name}")
        self.selected = name

    def set_credential(self, provider: str, key: Optional[str]) -> None:
        self.credentials.set(provider, key)

    def is_degraded(self, provider: str) -> bool:
        state = self.states.get(provider)
        return bool(state and state.degraded)

    def _on_credential_changed(self, provider: str, key: Optional[str]) -> None:
        state = self.states.get(provider)
        if state and state.degraded:
            logger.info(f"{provider} är tillgänglig igen efter ny nyckel")
            state.degraded = False

    def availability(self, provider: str) -> Tuple[bool, str]:
        """
        Beskriv om en premium-provider kan användas

        Returns:
            (tillgänglig, förklarande text för gränssnittet)
        """
        has_key = self.credentials.has(provider)
        if not has_key:
            return False, f"Ange en nyckel för att aktivera {provider}."
        if self.is_degraded(provider):
            return False, f"{provider} är tillfälligt avstängd (kvot/nyckelfel), använder OSRM."
        return True, f"{provider} aktiverad."

    def current_provider(self) -> str:
        requested = self.selected
        return select_provider(
            requested,
            self.credentials.has(requested) if requested else False,
            self.is_degraded(requested) if requested else False
        )

    def get_route(self, coordinates: Sequence[LonLat]) -> RouteResult:
        """
        Hämta rutt genom koordinaterna (lon, lat)

        Args:
            coordinates: Minst två koordinater i providerordning

        Returns:
            RouteResult med geometri i providerordning

        Raises:
            RoutingFailed: Basprovidern misslyckades
        """
        if len(coordinates) < 2:
            raise ValueError("Minst två koordinater krävs för att beräkna en rutt.")

        choice = self.current_provider()
        if choice != BASELINE_PROVIDER:
            provider = self.premium[choice]
            try:
                return provider.get_route(coordinates, api_key=self.credentials.get(choice))
            except (ProviderAuthError, ProviderRateLimitError) as e:
                self.states[choice].degraded = True
                logger.warning(f"{choice} nedgraderad ({e}), faller tillbaka på OSRM")
            except ProviderError as e:
                logger.warning(f"{choice} misslyckades ({e}), faller tillbaka på OSRM")

        try:
            return self.baseline.get_route(coordinates)
        except ProviderError as e:
            logger.error(f"Basprovidern misslyckades: {e}")
            raise RoutingFailed(f"Kunde inte beräkna rutt: {e}", cause=e) from e
