"""
API tests for the Flowsheet Compounds web application.

This module tests:
1. Compound search and export endpoints
2. Toggle endpoint and stream consistency
3. Stream creation endpoint
4. Error responses

Author: Flowsheet Compounds Development Team
"""

import inspect
import os
import sys

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from fastapi.testclient import TestClient

from flowsheet_compounds import main
from flowsheet_compounds.chemdata import get_catalog
from flowsheet_compounds.filtering import filter_catalog
from flowsheet_compounds.flowsheet import Phase

client = TestClient(main.app)


class LockedPhase(Phase):
    def add_compound(self, entry):
        raise RuntimeError("phase is locked")


@pytest.fixture(autouse=True)
def fresh_editor(monkeypatch):
    """Give every test its own flowsheet with two streams."""
    editor = main.build_editor(catalog_path="", stream_names=["Feed", "Product"])
    monkeypatch.setattr(main, "editor", editor)
    return editor


class TestCompoundEndpoints:
    """Test compound search endpoints."""

    def test_list_compounds(self):
        """Test GET /api/compounds"""
        response = client.get("/api/compounds")
        assert response.status_code == 200

        data = response.json()
        assert data["query"] == ""
        assert data["available"] == len(get_catalog())
        assert data["count"] == len(get_catalog())
        names = [item["name"] for item in data["items"]]
        assert names == sorted(names)
        assert not any(item["is_selected"] for item in data["items"])

    def test_search_compounds(self):
        """Test GET /api/compounds?query="""
        response = client.get("/api/compounds", params={"query": "me"})
        assert response.status_code == 200

        data = response.json()
        expected = [e.name for e in filter_catalog(get_catalog(), "me")]
        assert [item["name"] for item in data["items"]] == expected
        assert "Methanol" in expected

    def test_compound_detail(self):
        """Test GET /api/compounds/{name} (case-insensitive)"""
        response = client.get("/api/compounds/water")
        assert response.status_code == 200

        data = response.json()
        assert data["name"] == "Water"
        assert data["cas_number"] == "7732-18-5"
        assert data["is_selected"] is False

    def test_compound_detail_not_found(self):
        response = client.get("/api/compounds/Unobtainium")
        assert response.status_code == 404

    def test_export_csv(self):
        """Test GET /api/compounds/export.csv"""
        client.post("/api/compounds/Water/toggle")
        response = client.get("/api/compounds/export.csv", params={"query": "water"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")

        lines = response.text.strip().splitlines()
        assert lines[0] == "Added,Compound,Formula,CAS Number,Database"
        assert lines[1] == "True,Water,H2O,7732-18-5,DWSIM"


class TestToggleEndpoint:
    """Test POST /api/compounds/{name}/toggle"""

    def test_toggle_round_trip(self, fresh_editor):
        response = client.post("/api/compounds/Methanol/toggle")
        assert response.status_code == 200
        assert response.json() == {
            "name": "Methanol",
            "selected": True,
            "selected_compounds": ["Methanol"],
        }

        streams = client.get("/api/streams").json()
        assert [s["name"] for s in streams] == ["Feed", "Product"]
        for stream in streams:
            assert all(names == ["Methanol"] for names in stream["phases"].values())

        items = client.get("/api/compounds").json()["items"]
        assert items[0]["name"] == "Methanol"
        assert items[0]["is_selected"] is True

        response = client.post("/api/compounds/Methanol/toggle")
        assert response.json()["selected"] is False
        for stream in client.get("/api/streams").json():
            assert all(names == [] for names in stream["phases"].values())
        assert fresh_editor.flowsheet.is_consistent()

    def test_toggle_unknown(self):
        response = client.post("/api/compounds/Unobtainium/toggle")
        assert response.status_code == 404
        assert client.get("/api/selection").json() == {"selected_compounds": [], "count": 0}

    def test_toggle_propagation_failure(self, fresh_editor):
        feed = fresh_editor.flowsheet.simulation_objects["Feed"]
        feed.phases["Vapor"] = LockedPhase(name="Vapor")

        response = client.post("/api/compounds/Water/toggle")
        assert response.status_code == 500
        assert "Feed/Vapor" in response.json()["detail"]

    def test_selection(self):
        client.post("/api/compounds/Water/toggle")
        client.post("/api/compounds/Ethanol/toggle")
        data = client.get("/api/selection").json()
        assert data == {"selected_compounds": ["Ethanol", "Water"], "count": 2}


class TestStreamEndpoints:
    """Test stream endpoints."""

    def test_create_stream_with_selection(self):
        client.post("/api/compounds/Water/toggle")
        response = client.post("/api/streams", json={"name": "Recycle", "phases": ["Vapor", "Liquid1"]})
        assert response.status_code == 200
        assert response.json() == {
            "name": "Recycle",
            "phases": {"Vapor": ["Water"], "Liquid1": ["Water"]},
        }

    def test_create_stream_default_phases(self):
        response = client.post("/api/streams", json={"name": "Recycle"})
        assert response.status_code == 200
        assert "Mixture" in response.json()["phases"]

    def test_create_duplicate_stream(self):
        response = client.post("/api/streams", json={"name": "Feed"})
        assert response.status_code == 400

    def test_create_stream_without_phases(self):
        response = client.post("/api/streams", json={"name": "Empty", "phases": []})
        assert response.status_code == 400


class TestHandlerDispatch:
    """Handlers that touch the editor run on the worker thread pool."""

    @pytest.mark.parametrize("handler", [
        "list_compounds",
        "export_compounds",
        "get_compound_detail",
        "toggle_compound",
        "get_selection",
        "list_streams",
        "create_stream",
    ])
    def test_handler_is_sync(self, handler):
        assert not inspect.iscoroutinefunction(getattr(main, handler))
