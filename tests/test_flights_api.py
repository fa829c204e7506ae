import json
from xml.etree import ElementTree

from fastapi.testclient import TestClient

from main import create_app


def _flights(response):
    root = ElementTree.fromstring(response.text)
    assert root.tag == "flights"
    return [
        {child.tag: child.text for child in flight}
        for flight in root.findall("flight")
    ]


def test_airtime_filter_without_date(scenario_client):
    response = scenario_client.get("/", params={"airtime_min": "75"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/xml; charset=utf-8"
    assert response.headers["x-total-records"] == "1"
    assert response.headers["x-returned-records"] == "1"
    assert _flights(response) == [{"air_time": "100", "distance": "200"}]


def test_date_flag_includes_dates(scenario_client):
    response = scenario_client.get("/?date=true")

    assert response.status_code == 200
    assert response.headers["x-total-records"] == "2"
    assert response.headers["x-returned-records"] == "2"
    assert _flights(response) == [
        {"air_time": "100", "distance": "200", "date": "2020-01-01"},
        {"air_time": "50", "distance": "90", "date": "2020-01-02"},
    ]


def test_date_flag_is_case_sensitive(scenario_client):
    response = scenario_client.get("/?date=True")

    assert all("date" not in flight for flight in _flights(response))


def test_response_is_capped_in_file_order(write_flights, make_client):
    path = write_flights([{"AIR_TIME": i, "DISTANCE": i} for i in range(1500)])

    response = make_client(path).get("/")

    assert response.headers["x-total-records"] == "1500"
    assert response.headers["x-returned-records"] == "1000"
    assert [f["air_time"] for f in _flights(response)] == [str(i) for i in range(1000)]


def test_malformed_line_is_a_server_error(write_flights, make_client):
    path = write_flights([{"AIR_TIME": 1, "DISTANCE": 2}, "{oops"])

    response = make_client(path).get("/")

    assert response.status_code == 500
    assert response.json()["detail"].startswith("Failed to process data:")
    assert "x-returned-records" not in response.headers


def test_invalid_threshold_is_ignored(scenario_client):
    unfiltered = scenario_client.get("/")
    response = scenario_client.get("/?airtime_min=abc")

    assert response.status_code == 200
    assert response.text == unfiltered.text
    assert response.headers["x-total-records"] == "2"


def test_unreadable_file_is_a_server_error(write_flights):
    path = write_flights([{"AIR_TIME": 1}])
    client = TestClient(create_app(path))
    path.unlink()

    response = client.get("/")

    assert response.status_code == 500
    assert response.json()["detail"].startswith("Failed to read data file:")


def test_render_failure_is_a_server_error(write_flights, make_client):
    path = write_flights([{"AIR_TIME": {"bad key": 1}, "DISTANCE": 2}])

    response = make_client(path).get("/")

    assert response.status_code == 500
    assert response.json()["detail"].startswith("Failed to process data:")


def test_dataset_changes_are_picked_up(write_flights, make_client):
    path = write_flights([{"AIR_TIME": 1, "DISTANCE": 1}])
    client = make_client(path)
    assert client.get("/").headers["x-total-records"] == "1"

    path.write_text(
        "\n".join(json.dumps({"AIR_TIME": i, "DISTANCE": i}) for i in range(3)),
        encoding="utf-8",
    )

    assert client.get("/").headers["x-total-records"] == "3"


def test_empty_result(scenario_client):
    response = scenario_client.get("/?airtime_min=1000")

    assert response.status_code == 200
    assert response.text == "<flights />"
    assert response.headers["x-total-records"] == "0"
    assert response.headers["x-returned-records"] == "0"


def test_cors_headers(scenario_client):
    response = scenario_client.get("/", headers={"Origin": "http://example.com"})

    assert response.headers["access-control-allow-origin"] == "*"


def test_options_returns_no_content(scenario_client):
    response = scenario_client.options("/")

    assert response.status_code == 204
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
    assert response.headers["access-control-allow-headers"] == "Content-Type"


def test_other_methods_not_allowed(scenario_client):
    assert scenario_client.post("/").status_code == 405
    assert scenario_client.delete("/").status_code == 405


def test_health(scenario_client):
    response = scenario_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_surrogate_value_is_a_render_failure(write_flights, make_client):
    path = write_flights(['{"AIR_TIME": 1, "DISTANCE": "\\ud800"}'])

    response = make_client(path).get("/")

    assert response.status_code == 500
    assert response.json()["detail"].startswith("Failed to process data:")


def test_deeply_nested_line_is_a_parse_failure(write_flights, make_client):
    path = write_flights(["[" * 100000])

    response = make_client(path).get("/")

    assert response.status_code == 500
    assert response.json()["detail"].startswith("Failed to process data:")


def test_cors_headers_on_every_response(write_flights, make_client):
    client = make_client(write_flights(["{oops"]))

    for response in (client.get("/"), client.post("/"), client.get("/health")):
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type"


def test_preflight_request(scenario_client):
    response = scenario_client.options(
        "/",
        headers={"Origin": "http://example.com", "Access-Control-Request-Method": "GET"},
    )

    assert response.status_code == 204
    assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
