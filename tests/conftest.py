import pytest


@pytest.fixture
def spec_data():
    """Actor spec document used across tests."""
    return {
        "name": "web",
        "description": "Web frontend",
        "image": "registry.example.com/amp/web",
        "repository": "https://example.com/r.git",
        "reference": "main",
        "path": "svc/.amp.toml",
        "commit": "8f3c2a1",
        "environments": {"A": "1", "B": "2"},
        "partners": [
            {"name": "db", "repository": "https://example.com/db.git", "reference": "v1"},
        ],
        "services": [
            {
                "kind": "http",
                "ports": [
                    {"port": 8080, "protocol": "TCP", "expose": True},
                    {"port": 9090, "expose": False},
                ],
            },
        ],
        "build": {"dockerfile": "Dockerfile"},
    }


@pytest.fixture(autouse=True)
def amp_home(monkeypatch, tmp_path):
    """Isolate every test from the user's real config."""
    home = tmp_path / "amp_home"
    monkeypatch.setenv("AMP_HOME", str(home))
    monkeypatch.delenv("AMP_LOG_LEVEL", raising=False)
    return home
