"""
Lagring av API-nycklar för premium-providers
"""

from typing import Callable, Dict, List, Mapping, Optional

import streamlit as st
from streamlit.errors import StreamlitAPIException

from config import SECRET_NAMES
from logging_config import get_logger

logger = get_logger(__name__)

Listener = Callable[[str, Optional[str]], None]


class CredentialStore:
    """Nyckel/värde-lager som meddelar lyssnare när en nyckel ändras"""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._keys: Dict[str, str] = {}
        self._listeners: List[Listener] = []
        for provider, key in (initial or {}).items():
            if key and key.strip():
                self._keys[provider] = key.strip()

    @classmethod
    def from_secrets(cls) -> "CredentialStore":
        """Läs nycklar från st.secrets (ORS_API_KEY, GRAPHHOPPER_API_KEY)"""
        initial = {}
        try:
            for provider, secret_name in SECRET_NAMES.items():
                if secret_name in st.secrets:
                    initial[provider] = st.secrets[secret_name]
        except (FileNotFoundError, StreamlitAPIException):
            logger.info("Ingen secrets.toml hittades, startar utan API-nycklar")
        return cls(initial)

    def get(self, provider: str) -> Optional[str]:
        return self._keys.get(provider)

    def has(self, provider: str) -> bool:
        return bool(self._keys.get(provider))

    def set(self, provider: str, key: Optional[str]) -> None:
        """Spara en ny nyckel (eller ta bort den med None/tom sträng)"""
        key = (key or "").strip() or None
        if key is None:
            self._keys.pop(provider, None)
        else:
            self._keys[provider] = key

        logger.info(f"Ny API-nyckel för {provider}" if key else f"API-nyckel för {provider} borttagen")
        for listener in list(self._listeners):
            listener(provider, key)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)
