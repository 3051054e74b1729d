"""
API tests - real routes against a repository in a temp directory.
"""

import math

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api import register_routes
from db import TaskRepository


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.delenv("ROADMAPPER_MAX_DEPTH", raising=False)
    monkeypatch.delenv("ROADMAPPER_MIN_SIZE", raising=False)
    app = FastAPI()
    register_routes(app, None, TaskRepository(tmp_path))
    with TestClient(app) as c:
        yield c


def _create(client, **fields):
    r = client.post("/api/tasks", json=fields)
    assert r.status_code == 200, r.text
    return r.json()["task"]


class TestTasks:
    def test_create_and_get(self, client):
        task = _create(client, title="Plan trip", description="book flights")
        assert task["id"]
        assert task["status"] == "Not Started"
        r = client.get(f"/api/tasks/{task['id']}")
        assert r.status_code == 200
        assert r.json()["task"]["title"] == "Plan trip"

    def test_create_validation(self, client):
        assert client.post("/api/tasks", json={"title": "x", "status": "Done"}).status_code == 422
        r = client.post("/api/tasks", json={"title": "x", "parentId": "missing"})
        assert r.status_code == 400
        assert "Unknown parent" in r.json()["error"]

    def test_duplicate_id(self, client):
        _create(client, id="t1", title="One")
        assert client.post("/api/tasks", json={"id": "t1", "title": "Again"}).status_code == 409

    def test_update_children_delete(self, client):
        _create(client, id="root", title="Root")
        _create(client, id="a", title="A", parentId="root")
        r = client.put("/api/tasks/a", json={"status": "Completed"})
        assert r.json()["task"]["status"] == "Completed"
        assert r.json()["task"]["parentId"] == "root"
        assert [t["id"] for t in client.get("/api/tasks/root/children").json()["tasks"]] == ["a"]
        r = client.delete("/api/tasks/root")
        assert sorted(r.json()["removed"]) == ["a", "root"]
        assert client.get("/api/tasks").json()["tasks"] == []

    def test_not_found(self, client):
        assert client.get("/api/tasks/nope").status_code == 404
        assert client.put("/api/tasks/nope", json={"title": "x"}).status_code == 404
        assert client.delete("/api/tasks/nope").status_code == 404
        assert client.get("/api/tasks/nope/children").status_code == 404

    def test_export_import(self, client):
        _create(client, id="a", title="A")
        exported = client.get("/api/tasks/export").json()
        client.delete("/api/tasks")
        r = client.post("/api/tasks/import", json=exported)
        assert r.json() == {"success": True, "count": 1}
        assert client.post("/api/tasks/import", json=[{"id": "b"}]).status_code == 400


class TestTree:
    def test_tree_layout(self, client):
        _create(client, id="root", title="Root")
        for cid in ("a", "b", "c"):
            _create(client, id=cid, title=cid.upper(), parentId="root")
        body = client.get("/api/tree/root").json()
        tree = body["tree"]
        assert tree["position"] == {"x": 0.0, "y": 2.0, "z": 0.0}
        assert [c["id"] for c in tree["children"]] == ["a", "b", "c"]
        second = tree["children"][1]["position"]
        assert second["x"] == pytest.approx(math.cos(2 * math.pi / 3) * 0.6)
        assert second["y"] == pytest.approx(1.5)
        assert len(body["visual"]["edges"]) == 3
        assert set(body["visual"]["nodes"]) == {"root", "a", "b", "c"}

    def test_tree_respects_settings(self, client):
        _create(client, id="n0", title="N0")
        for i in range(1, 4):
            _create(client, id=f"n{i}", title=f"N{i}", parentId=f"n{i - 1}")
        assert client.post("/api/settings", json={"maxDepth": 1}).status_code == 200
        body = client.get("/api/tree/n0").json()
        assert set(body["visual"]["nodes"]) == {"n0", "n1"}
        assert client.get("/api/settings").json()["effective"]["maxDepth"] == 1

    def test_tree_not_found(self, client):
        assert client.get("/api/tree/nope").status_code == 404


class TestDecompose:
    def test_suggest_without_commit(self, client):
        _create(client, id="login", title="Build login", description="implement the login form and create the session API")
        body = client.post("/api/decompose/login").json()
        assert body["strategy"] == "core-components"
        assert [s["title"] for s in body["subtasks"]] == [
            "Research & Planning",
            "Core Implementation",
            "Testing & Validation",
            "Documentation",
        ]
        assert body["committed"] is False
        assert client.get("/api/tasks/login/children").json()["tasks"] == []

    def test_commit_persists_stubs(self, client):
        _create(client, id="t", title="Vague")
        body = client.post("/api/decompose/t?commit=true").json()
        assert [s["title"] for s in body["subtasks"]] == ["Phase 1", "Phase 2"]
        children = client.get("/api/tasks/t/children").json()["tasks"]
        assert [c["title"] for c in children] == ["Phase 1", "Phase 2"]
        assert all(c["description"] == "Part of: Vague" for c in children)

    def test_not_found(self, client):
        assert client.post("/api/decompose/nope").status_code == 404
