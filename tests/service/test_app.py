"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi not installed", allow_module_level=True)

from docmeta.service import create_app


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_extract_endpoint_reports_modules_and_failures(client: TestClient, source_tree) -> None:
    root = source_tree.write(
        {
            "served_mod.py": '"""Served."""\n\ndef ping():\n    """Reply."""\n',
            "failing_served_mod.py": "raise RuntimeError('boom')\n",
        }
    )

    response = client.post("/extract", json={"paths": [str(root)]})

    assert response.status_code == 200
    data = response.json()
    assert [module["name"] for module in data["modules"]] == ["served_mod"]
    assert data["modules"][0]["publics"][0]["doc"] == "Reply."
    assert data["failures"] == [
        {"module": "failing_served_mod", "error": "RuntimeError: boom"}
    ]


def test_extract_endpoint_applies_exclude(client: TestClient, source_tree) -> None:
    root: Path = source_tree.write({"kept_served.py": "", "skipped_served.py": ""})

    response = client.post(
        "/extract",
        json={"paths": [str(root)], "exclude": ["skipped_*"]},
    )

    assert response.status_code == 200
    assert [module["name"] for module in response.json()["modules"]] == ["kept_served"]


def test_unknown_type_checker_is_bad_request(client: TestClient, source_tree) -> None:
    response = client.post(
        "/extract",
        json={"paths": [str(source_tree.root)], "type_checker": "does-not-exist"},
    )

    assert response.status_code == 400
    assert "does-not-exist" in response.json()["detail"]
