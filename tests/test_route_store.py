import pytest
import requests

from errors import ParseError, RouteStoreError
from route_store import RouteStoreClient

from fakes import FakeHttp, FakeResponse

ROUTE = [(51.5, -0.1), (51.51, -0.11)]


def test_create_route_sends_geojson_and_token():
    http = FakeHttp(FakeResponse(201, {"id": "r1", "name": "Lunch"}))
    client = RouteStoreClient(base_url="http://api.test/", token="tok", http=http)

    saved = client.create_route("Lunch", ROUTE, waypoints=[ROUTE[0]], distance_m=1300, is_public=True,
                                city="London")

    assert saved["id"] == "r1"
    call = http.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://api.test/routes"
    assert call["headers"]["Authorization"] == "Bearer tok"
    assert call["json"]["geometry"] == {
        "type": "LineString",
        "coordinates": [[-0.1, 51.5], [-0.11, 51.51]],
        "properties": {"waypoints": [[-0.1, 51.5]]},
    }
    assert call["json"]["city"] == "London"
    assert call["json"]["is_public"] is True


def test_anonymous_requests_have_no_auth_header():
    http = FakeHttp(FakeResponse(200, {"routes": [], "total": 0}))
    RouteStoreClient(base_url="http://api.test", http=http).explore_routes(city="Paris", min_distance_km=5)

    call = http.calls[0]
    assert "Authorization" not in call["headers"]
    assert call["params"] == {"city": "Paris", "min_distance_km": 5}


def test_create_route_requires_sign_in():
    http = FakeHttp(FakeResponse(401, {}))
    with pytest.raises(RouteStoreError) as excinfo:
        RouteStoreClient(http=http).create_route("x", ROUTE)
    assert excinfo.value.status == 401
    assert "Logga in" in str(excinfo.value)


def test_server_detail_is_used_when_status_is_unmapped():
    http = FakeHttp(FakeResponse(422, {"detail": "Namnet är för långt"}))
    with pytest.raises(RouteStoreError, match="Namnet är för långt"):
        RouteStoreClient(http=http).create_route("x" * 500, ROUTE)


@pytest.mark.parametrize("status,message", [(403, "Åtkomst nekad"), (404, "Rutten finns inte")])
def test_get_route_errors(status, message):
    http = FakeHttp(FakeResponse(status, {}))
    with pytest.raises(RouteStoreError, match=message):
        RouteStoreClient(http=http).get_route("abc")


def test_my_routes_paging():
    http = FakeHttp(FakeResponse(200, {"routes": [{"id": "a"}], "total": 1}))
    result = RouteStoreClient(base_url="http://api.test", token="t", http=http).get_my_routes(limit=10, offset=20)
    assert result["total"] == 1
    assert http.calls[0]["url"] == "http://api.test/routes/me"
    assert http.calls[0]["params"] == {"limit": 10, "offset": 20}


def test_update_and_delete():
    http = FakeHttp(FakeResponse(200, {"id": "a", "name": "Ny"}), FakeResponse(204, None))
    client = RouteStoreClient(base_url="http://api.test", token="t", http=http)

    assert client.update_route("a", {"name": "Ny"})["name"] == "Ny"
    client.delete_route("a")

    assert [c["method"] for c in http.calls] == ["PUT", "DELETE"]
    assert http.calls[1]["url"] == "http://api.test/routes/a"


def test_network_error():
    http = FakeHttp(requests.ConnectionError("nere"))
    with pytest.raises(RouteStoreError):
        RouteStoreClient(http=http).delete_route("a")


def test_explore_keeps_zero_filters():
    http = FakeHttp(FakeResponse(200, {"routes": [], "total": 0}))
    RouteStoreClient(base_url="http://api.test", http=http).explore_routes(offset=0, min_distance_km=0, city="")

    assert http.calls[0]["params"] == {"offset": 0, "min_distance_km": 0, "city": ""}


def test_get_route_decodes_geometry():
    geometry = {
        "type": "LineString",
        "coordinates": [[-0.1, 51.5], [-0.11, 51.51]],
        "properties": {"waypoints": [[-0.1, 51.5]]},
    }
    http = FakeHttp(FakeResponse(200, {"id": "a", "geometry": geometry}))
    saved = RouteStoreClient(http=http).get_route("a")

    assert saved["route"] == ROUTE
    assert saved["waypoints"] == [ROUTE[0]]
    assert saved["geometry"] == geometry


def test_route_listing_decodes_each_geometry():
    payload = {
        "routes": [
            {"id": "a", "geometry": {"type": "LineString", "coordinates": [[-0.1, 51.5], [-0.11, 51.51]]}},
            {"id": "b"},
        ],
        "total": 2,
    }
    http = FakeHttp(FakeResponse(200, payload))
    result = RouteStoreClient(http=http, token="t").get_my_routes()

    assert result["routes"][0]["route"] == ROUTE
    assert result["routes"][0]["waypoints"] is None
    assert "route" not in result["routes"][1]


def test_broken_stored_geometry_raises_parse_error():
    http = FakeHttp(FakeResponse(200, {"id": "a", "geometry": {"type": "LineString", "coordinates": [["x", "y"]]}}))
    with pytest.raises(ParseError):
        RouteStoreClient(http=http).get_route("a")
