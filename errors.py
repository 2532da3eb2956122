"""
Felhierarki för ruttmotorn
"""

from typing import Optional

from config import AUTH_ERROR_STATUSES, RATE_LIMIT_STATUSES


class RoutePlannerError(Exception):
    """Basklass för alla fel i ruttplaneraren"""
    pass


class ProviderError(RoutePlannerError):
    """Fel från en routing-provider"""

    def __init__(self, provider: str, message: str, status: Optional[int] = None):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.status = status

    @staticmethod
    def from_status(provider: str, status: int) -> "ProviderError":
        """Välj felklass utifrån HTTP-status"""
        if status in AUTH_ERROR_STATUSES:
            return ProviderAuthError(provider, f"HTTP {status}", status)
        if status in RATE_LIMIT_STATUSES:
            return ProviderRateLimitError(provider, f"HTTP {status}", status)
        return ProviderRouteError(provider, f"HTTP {status}", status)


class ProviderAuthError(ProviderError):
    """Nyckeln avvisades (401/403)"""
    pass


class ProviderRateLimitError(ProviderError):
    """Kvoten är slut (429)"""
    pass


class ProviderRouteError(ProviderError):
    """Nätverksfel, trasigt svar eller ingen rutt"""
    pass


class RoutingFailed(RoutePlannerError):
    """Även basprovidern misslyckades"""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class CodecError(RoutePlannerError):
    pass


class ParseError(CodecError):
    """Filen kunde inte tolkas"""
    pass


class EmptyRouteError(CodecError):
    """Färre än två användbara punkter"""
    pass


class RouteStoreError(RoutePlannerError):
    """Fel från rutt-API:t"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
