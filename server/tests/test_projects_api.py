"""Tests for the project CRUD API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from models.conversation import Conversation
from models.project import Project, Prompt


@pytest.fixture
def app(db):
    from main import app as _app
    from database import get_db

    def _override_get_db():
        try:
            yield db
        finally:
            pass

    _app.dependency_overrides[get_db] = _override_get_db
    yield _app
    _app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_client(client, token):
    client.headers["Authorization"] = f"Bearer {token}"
    return client


@pytest.fixture
def other_project(db, other_user):
    p = Project(user_id=other_user.id, name="Someone Else's Bot")
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


class TestProjectAPI:
    def test_list_projects_empty(self, auth_client):
        resp = auth_client.get("/api/projects")
        assert resp.status_code == 200
        assert resp.json() == {"projects": [], "total": 0}

    def test_list_projects_only_own(self, auth_client, project, other_project):
        resp = auth_client.get("/api/projects")
        assert resp.status_code == 200
        data = resp.json()
        assert data["total"] == 1
        assert [p["id"] for p in data["projects"]] == [project.id]

    def test_list_projects_newest_first(self, auth_client, db, user):
        for name in ("first", "second", "third"):
            db.add(Project(user_id=user.id, name=name))
            db.commit()

        resp = auth_client.get("/api/projects")
        assert [p["name"] for p in resp.json()["projects"]] == ["third", "second", "first"]

    def test_list_projects_pagination(self, auth_client, db, user):
        for i in range(5):
            db.add(Project(user_id=user.id, name=f"p{i}"))
        db.commit()

        resp = auth_client.get("/api/projects", params={"limit": 2, "offset": 1})
        data = resp.json()
        assert data["total"] == 5
        assert len(data["projects"]) == 2

    def test_create_project(self, auth_client, user):
        resp = auth_client.post(
            "/api/projects",
            json={"name": "Tutor", "description": "Math tutor", "model": "anthropic/claude-3-haiku"},
        )
        assert resp.status_code == 201
        data = resp.json()["project"]
        assert data["name"] == "Tutor"
        assert data["description"] == "Math tutor"
        assert data["model"] == "anthropic/claude-3-haiku"
        assert data["user_id"] == user.id

    def test_create_project_defaults(self, auth_client):
        resp = auth_client.post("/api/projects", json={"name": "Minimal"})
        assert resp.status_code == 201
        data = resp.json()["project"]
        assert data["description"] == ""
        assert data["model"] == "openai/gpt-3.5-turbo"

    def test_create_project_without_name(self, auth_client, db):
        resp = auth_client.post("/api/projects", json={"description": "no name"})
        assert resp.status_code == 400
        assert "name" in resp.json()["detail"]
        assert db.query(Project).count() == 0

    def test_create_project_empty_name(self, auth_client):
        resp = auth_client.post("/api/projects", json={"name": ""})
        assert resp.status_code == 400

    def test_get_project(self, auth_client, project):
        resp = auth_client.get(f"/api/projects/{project.id}")
        assert resp.status_code == 200
        assert set(resp.json()) == {"project"}
        assert resp.json()["project"]["name"] == "Support Bot"

    def test_get_project_not_found(self, auth_client):
        resp = auth_client.get("/api/projects/9999")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Project not found."

    def test_update_project_partial(self, auth_client, project):
        resp = auth_client.put(f"/api/projects/{project.id}", json={"name": "Renamed"})
        assert resp.status_code == 200
        data = resp.json()["project"]
        assert data["name"] == "Renamed"
        assert data["description"] == "Answers support questions"
        assert data["model"] == "openai/gpt-3.5-turbo"

    def test_update_project_clears_description(self, auth_client, project):
        resp = auth_client.put(f"/api/projects/{project.id}", json={"description": ""})
        assert resp.status_code == 200
        assert resp.json()["project"]["description"] == ""
        assert resp.json()["project"]["name"] == "Support Bot"

    def test_update_project_not_found(self, auth_client):
        resp = auth_client.put("/api/projects/9999", json={"name": "x"})
        assert resp.status_code == 404

    def test_delete_project(self, auth_client, db, project):
        resp = auth_client.delete(f"/api/projects/{project.id}")
        assert resp.status_code == 204
        assert db.query(Project).filter(Project.id == project.id).first() is None

    def test_delete_project_removes_prompts(self, auth_client, db, project, prompt):
        db.add(Prompt(project_id=project.id, name="Greeting", content="Hi!", type="assistant"))
        db.commit()
        project_id = project.id

        resp = auth_client.delete(f"/api/projects/{project_id}")
        assert resp.status_code == 204
        assert db.query(Prompt).filter(Prompt.project_id == project_id).count() == 0
        assert auth_client.get(f"/api/prompts/project/{project_id}").status_code == 404

    def test_delete_project_keeps_other_projects_prompts(self, auth_client, db, user, project, prompt):
        sibling = Project(user_id=user.id, name="Sibling")
        db.add(sibling)
        db.flush()
        db.add(Prompt(project_id=sibling.id, name="Keep", content="keep me"))
        db.commit()

        auth_client.delete(f"/api/projects/{project.id}")
        assert db.query(Prompt).filter(Prompt.project_id == sibling.id).count() == 1

    def test_delete_project_removes_conversations(self, auth_client, db, user, project):
        db.add(Conversation(project_id=project.id, user_id=user.id, messages=[{"role": "user", "content": "hi"}]))
        db.commit()
        project_id = project.id

        auth_client.delete(f"/api/projects/{project_id}")
        assert db.query(Conversation).filter(Conversation.project_id == project_id).count() == 0

    def test_delete_project_not_found(self, auth_client):
        resp = auth_client.delete("/api/projects/9999")
        assert resp.status_code == 404


class TestProjectIsolation:
    """Another user's project behaves exactly like a missing one."""

    def test_cannot_read(self, auth_client, other_project):
        resp = auth_client.get(f"/api/projects/{other_project.id}")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Project not found."

    def test_cannot_update(self, auth_client, db, other_project):
        resp = auth_client.put(f"/api/projects/{other_project.id}", json={"name": "Hijacked"})
        assert resp.status_code == 404
        db.refresh(other_project)
        assert other_project.name == "Someone Else's Bot"

    def test_cannot_delete(self, auth_client, db, other_project):
        resp = auth_client.delete(f"/api/projects/{other_project.id}")
        assert resp.status_code == 404
        assert db.query(Project).filter(Project.id == other_project.id).count() == 1
