"""Pytest configuration and fixtures."""

import json

import pytest
from fastapi.testclient import TestClient

from main import create_app


SCENARIO_FLIGHTS = [
    {"AIR_TIME": 100, "DISTANCE": 200, "FL_DATE": "2020-01-01"},
    {"AIR_TIME": 50, "DISTANCE": 90, "FL_DATE": "2020-01-02"},
]


@pytest.fixture
def write_flights(tmp_path):
    """Write records (dicts or raw strings) as one line each; return the path."""

    def _write(records, name="flights.json", trailer="\n"):
        lines = [r if isinstance(r, str) else json.dumps(r) for r in records]
        path = tmp_path / name
        path.write_text("\n".join(lines) + trailer, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_client():
    """Build a TestClient for an app serving the given dataset file."""

    def _make(input_path):
        return TestClient(create_app(input_path))

    return _make


@pytest.fixture
def scenario_client(write_flights, make_client):
    return make_client(write_flights(SCENARIO_FLIGHTS))
