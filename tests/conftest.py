import pytest
from fastapi.testclient import TestClient

OWNER_PASSWORD = "lab-owner-pass"


@pytest.fixture
def database_dir(tmp_path, monkeypatch):
    """Point DATABASE_DIR at a fresh temporary directory."""
    db_dir = tmp_path / "database"
    monkeypatch.setenv("DATABASE_DIR", str(db_dir))
    monkeypatch.delenv("RESET_DATABASE", raising=False)
    return db_dir


@pytest.fixture
def client(database_dir, monkeypatch):
    monkeypatch.setenv("OWNER_PASSWORD", OWNER_PASSWORD)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_MODEL", raising=False)
    monkeypatch.delenv("LAB_NAME", raising=False)

    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def owner_headers(client):
    response = client.post("/auth/owner", json={"password": OWNER_PASSWORD})
    assert response.status_code == 200
    return {"X-Session-Token": response.json()["token"]}
