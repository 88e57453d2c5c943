"""Integration tests for the REST API."""

import pytest
from fastapi.testclient import TestClient

from techtree.api.app import create_app


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


def _create(client, **config):
    defaults = {"num_agents": 20, "p_innovation": 0.1, "ticks_to_run": 10, "random_seed": 42}
    defaults.update(config)
    resp = client.post("/api/simulation/sessions", json={"config": defaults})
    assert resp.status_code == 200
    return resp.json()["id"]


class TestHealthCheck:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestSessionLifecycle:
    def test_create_session_defaults(self, client):
        resp = client.post("/api/simulation/sessions", json={})
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "created"
        assert data["current_tick"] == 0
        assert data["num_agents"] == 100
        assert data["latest"] is None

    def test_create_session_from_preset(self, client):
        resp = client.post("/api/simulation/sessions", json={"preset": "recombinant"})
        assert resp.status_code == 200
        assert resp.json()["config"]["recombination_enabled"] is True

    def test_unknown_preset(self, client):
        resp = client.post("/api/simulation/sessions", json={"preset": "nope"})
        assert resp.status_code == 400

    def test_invalid_config(self, client):
        resp = client.post("/api/simulation/sessions", json={"config": {"p_innovation": 3.0}})
        assert resp.status_code == 422
        assert "p_innovation" in resp.json()["detail"]

    @pytest.mark.parametrize("config", [
        {"p_innovation": "0.5"},
        {"network_externality_factor": "NaN"},
        {"ticks_to_run": "ten"},
    ])
    def test_wrongly_typed_config(self, client, config):
        resp = client.post("/api/simulation/sessions", json={"config": config})
        assert resp.status_code == 422

    def test_unknown_config_key(self, client):
        resp = client.post("/api/simulation/sessions", json={"config": {"agents": 3}})
        assert resp.status_code == 422

    def test_list_and_get(self, client):
        sid = _create(client)
        assert any(s["id"] == sid for s in client.get("/api/simulation/sessions").json())
        assert client.get(f"/api/simulation/sessions/{sid}").json()["id"] == sid

    def test_missing_session(self, client):
        assert client.get("/api/simulation/sessions/nope").status_code == 404
        assert client.post("/api/simulation/sessions/nope/step", json={"n": 1}).status_code == 404

    def test_step(self, client):
        sid = _create(client)
        resp = client.post(f"/api/simulation/sessions/{sid}/step", json={"n": 3})
        data = resp.json()
        assert data["current_tick"] == 3
        assert data["status"] == "running"
        assert data["latest"]["tick"] == 3

    def test_run_to_completion(self, client):
        sid = _create(client)
        data = client.post(f"/api/simulation/sessions/{sid}/run", json={}).json()
        assert data["current_tick"] == 10
        assert data["status"] == "completed"

    def test_pause(self, client):
        sid = _create(client, pause_at_tick=4)
        data = client.post(f"/api/simulation/sessions/{sid}/run", json={}).json()
        assert data["current_tick"] == 4
        assert data["status"] == "paused"

    def test_reset(self, client):
        sid = _create(client)
        client.post(f"/api/simulation/sessions/{sid}/step", json={"n": 2})
        data = client.post(f"/api/simulation/sessions/{sid}/reset").json()
        assert data["current_tick"] == 0
        assert data["status"] == "created"

    def test_delete(self, client):
        sid = _create(client)
        assert client.delete(f"/api/simulation/sessions/{sid}").json() == {"deleted": True}
        assert client.get(f"/api/simulation/sessions/{sid}").status_code == 404


class TestMetricsEndpoints:
    def test_ticks(self, client):
        sid = _create(client)
        client.post(f"/api/simulation/sessions/{sid}/step", json={"n": 5})
        ticks = client.get(f"/api/metrics/{sid}/ticks").json()
        assert [t["tick"] for t in ticks] == [1, 2, 3, 4, 5]
        assert sum(ticks[-1]["agents_per_technology"]) == 20

    def test_time_series(self, client):
        sid = _create(client)
        client.post(f"/api/simulation/sessions/{sid}/step", json={"n": 4})
        data = client.get(f"/api/metrics/{sid}/time-series/transition_size").json()
        assert data["ticks"] == [1, 2, 3, 4]
        assert len(data["values"]) == 4

    def test_unknown_field(self, client):
        sid = _create(client)
        resp = client.get(f"/api/metrics/{sid}/time-series/bogus")
        assert resp.status_code == 400

    def test_summary(self, client):
        sid = _create(client)
        client.post(f"/api/simulation/sessions/{sid}/run", json={})
        data = client.get(f"/api/metrics/{sid}/summary").json()
        assert data["total_ticks"] == 10
        assert data["total_transitions"] >= 1


class TestNetworkEndpoints:
    def test_graph(self, client):
        sid = _create(client, p_innovation=0.3)
        client.post(f"/api/simulation/sessions/{sid}/step", json={"n": 3})
        data = client.get(f"/api/network/{sid}/graph").json()
        assert data["stats"]["technology_count"] == len(data["nodes"])
        assert data["stats"]["edge_count"] == len(data["edges"])
        assert len(data["nodes"]) > 1

    def test_populated_only(self, client):
        sid = _create(client, p_innovation=0.3)
        client.post(f"/api/simulation/sessions/{sid}/step", json={"n": 3})
        data = client.get(f"/api/network/{sid}/graph", params={"populated_only": True}).json()
        assert all(n["adopter_count"] > 0 for n in data["nodes"])

    def test_distances(self, client):
        sid = _create(client)
        data = client.get(f"/api/network/{sid}/distances/0").json()
        assert data["distances"] == [0]
        assert client.get(f"/api/network/{sid}/distances/9").status_code == 404


class TestExperimentEndpoints:
    def test_presets(self, client):
        names = [p["name"] for p in client.get("/api/experiments/presets").json()]
        assert "baseline" in names

    def test_unknown_preset(self, client):
        assert client.get("/api/experiments/presets/nope").status_code == 400
