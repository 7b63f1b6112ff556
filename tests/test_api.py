"""Tests for the proctor-groups FastAPI application.

- `GET /health` reports status, environment and package version.
- `POST /groups/resolve` returns every serialization for a snapshot, with
  hold-out / forced options applied the same way as in the CLI.
"""

from __future__ import annotations

from typing import Any, Final

import pytest
from fastapi.testclient import TestClient

from proctor_groups import __version__ as PKG_VERSION
from proctor_groups.api.app import create_app
from proctor_groups.core.contracts import ProctorResult

ALLOWED_ENVS: Final[set[str]] = {"dev", "test", "prod"}


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def snapshot_payload(proctor_result: ProctorResult) -> dict[str, Any]:
    return proctor_result.to_wire()


def test_health_endpoint_contract(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200

    data = resp.json()
    assert data["status"] == "ok"
    assert data["environment"] in ALLOWED_ENVS
    assert data["version"] == PKG_VERSION


def test_resolve_without_overrides(client: TestClient, snapshot_payload: dict[str, Any]) -> None:
    resp = client.post(
        "/groups/resolve",
        json={
            "snapshot": snapshot_payload,
            "requested_tests": [
                {"name": "notexist", "fallback_value": 42},
                {"name": "bgtst", "fallback_value": 43},
            ],
        },
    )
    assert resp.status_code == 200, resp.text

    data = resp.json()
    assert data["logging_string"].startswith("abtst1,bgtst0,")
    assert data["javascript_config"]["bgtst"] == 0
    assert data["requested_config"] == [[42, None], [0, "controlPayload"]]
    assert data["proctor_result"]["matrixVersion"] == "0"


def test_resolve_with_holdout(client: TestClient, snapshot_payload: dict[str, Any]) -> None:
    resp = client.post(
        "/groups/resolve",
        json={"snapshot": snapshot_payload, "holdout_test": "holdout_tst", "holdout_value": 2},
    )
    assert resp.status_code == 200, resp.text

    data = resp.json()
    assert data["logging_string"] == (
        "holdout_tst2,no_definition_tst2,#A1:holdout_tst2,#A5:no_definition_tst2"
    )
    assert data["javascript_config"] == {"holdout_tst": 2, "no_definition_tst": 2}
    assert data["proctor_result"]["buckets"]["bgtst"]["value"] == -1
    assert data["requested_config"] == []


def test_resolve_rejects_invalid_snapshot(client: TestClient) -> None:
    resp = client.post(
        "/groups/resolve",
        json={"snapshot": {"buckets": {"bgtst": {"name": "control", "value": "zero"}}}},
    )
    assert resp.status_code == 422
