"""Fejkade nätverksobjekt för testerna"""

import threading
from typing import List, Optional

import requests

from errors import ProviderError, RoutingFailed
from models import RouteResult


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, json_error: bool = False):
        self.status_code = status_code
        self.payload = payload
        self.json_error = json_error

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self.json_error:
            raise ValueError("not json")
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class FakeHttp:
    """Ersätter requests.Session; svarar med förberedda svar i tur och ordning"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        return self.request("GET", url, **kwargs)


class FakeProvider:
    """Routing-provider som returnerar eller kastar det den blivit tillsagd"""

    def __init__(self, name: str, outcomes: Optional[List] = None, requires_key: bool = True):
        self.name = name
        self.requires_key = requires_key
        self.outcomes = list(outcomes or [])
        self.calls = []

    def get_route(self, coordinates, api_key=None):
        self.calls.append({"coordinates": list(coordinates), "api_key": api_key})
        outcome = self.outcomes.pop(0) if self.outcomes else None
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            return RouteResult(geometry=list(coordinates), distance=1234.0, provider=self.name)
        return outcome


class FakeGateway:
    """
    Gateway som ekar koordinaterna som geometri

    distance sätts till antal koordinater * 1000 om inget annat anges.
    block_on: antal koordinater vars anrop ska vänta på release.
    """

    def __init__(self, distance: Optional[float] = None, fail: bool = False,
                 block_on: Optional[int] = None):
        self.distance = distance
        self.fail = fail
        self.block_on = block_on
        self.release = threading.Event()
        self.calls = []

    def get_route(self, coordinates):
        self.calls.append(list(coordinates))
        if self.block_on is not None and len(coordinates) == self.block_on:
            self.release.wait(5)
        if self.fail:
            raise RoutingFailed("Kunde inte beräkna rutt", cause=ProviderError("osrm", "nere"))
        distance = self.distance if self.distance is not None else len(coordinates) * 1000.0
        return RouteResult(geometry=list(coordinates), distance=distance, provider="osrm")


class FakeEstimator:
    """Höjdestimator; svaret kan väljas per antal punkter och ett anrop kan blockeras"""

    def __init__(self, result=None, by_length=None, block_on: Optional[int] = None):
        self.result = result
        self.by_length = by_length or {}
        self.block_on = block_on
        self.release = threading.Event()
        self.calls = []

    def estimate(self, latlngs):
        self.calls.append(list(latlngs))
        if self.block_on is not None and len(latlngs) == self.block_on:
            self.release.wait(5)
        return self.by_length.get(len(latlngs), self.result)
