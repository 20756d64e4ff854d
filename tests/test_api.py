from __future__ import annotations

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from cluster_sizer.api.schema import (
    ClusterTopologyModel,
    EstimateRequest,
    NodeTemplateModel,
    ResourcesModel,
    SizeRequest,
)
from cluster_sizer.api.server import _resolve_cluster, app
from cluster_sizer.types import GI_B


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _small_cluster() -> dict:
    return {
        "description": "small nodes",
        "worker_node_count": 3,
        "worker_node": {"resources": {"memory": 16 * GI_B, "cpus": 4}},
    }


def test_presets(client):
    resp = client.get("/presets")
    assert resp.status_code == 200
    data = resp.json()
    assert "hyperconverged" in data["clusters"]
    assert data["instance_types"]["u1.medium"]["guest"]["cpus"] == 8


def test_estimate_preset(client):
    resp = client.post("/estimate", json={"cluster_preset": "hyperconverged"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["resources"]["available_to_workloads"]["cpus"] == 398
    assert data["resources"]["available_to_workloads"]["memory"] == 703 * GI_B
    assert data["reasoning"][-1] == "The use of ODF benefits from larger buffers."


def test_estimate_inline_cluster(client):
    cluster = {
        "worker_node_count": 3,
        "cpu_over_commit_ratio": 0.0,
        "worker_node": {"resources": {"memory": 256 * GI_B, "cpus": 128}},
    }
    resp = client.post("/estimate", json={"cluster": cluster})
    assert resp.status_code == 200
    assert resp.json()["resources"]["available_to_workloads"]["cpus"] == 360


def test_fit_with_vm_count(client):
    resp = client.post(
        "/fit",
        json={"cluster_preset": "hyperconverged", "instance_type_preset": "u1.medium", "vm_count": 100},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["count"] == 44
    assert data["binding"] == "cpus"
    assert data["satisfies"] is False
    assert data["headroom"]["cpus"] == 398 - 900


def test_fit_degenerate_instance(client):
    resp = client.post(
        "/fit",
        json={
            "cluster_preset": "hyperconverged",
            "instance_type": {"name": "empty", "guest": {"memory": 0, "cpus": 0}},
        },
    )
    assert resp.status_code == 400


def test_size(client):
    resp = client.post(
        "/size",
        json={"cluster_preset": "hyperconverged", "instance_type_preset": "u1.medium", "target_count": 100},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["cluster"]["worker_node_count"] == 7
    assert data["cluster"]["schedulable_control_plane"] is False
    assert data["fit"]["count"] >= 100
    assert data["fit"]["satisfies"] is True


def test_size_infeasible(client):
    resp = client.post(
        "/size",
        json={"cluster": _small_cluster(), "instance_type_preset": "u1.medium", "target_count": 1},
    )
    assert resp.status_code == 422
    assert resp.json()["detail"]["best_count"] == 0


def test_size_unknown_policy(client):
    resp = client.post(
        "/size",
        json={
            "cluster_preset": "hyperconverged",
            "instance_type_preset": "u1.medium",
            "target_count": 1,
            "control_plane_policy": "sometimes",
        },
    )
    assert resp.status_code == 400


def test_unknown_preset(client):
    resp = client.post("/estimate", json={"cluster_preset": "nope"})
    assert resp.status_code == 404


def test_missing_cluster(client):
    assert client.post("/estimate", json={}).status_code == 400


def test_invalid_topology(client):
    cluster = _small_cluster()
    cluster["worker_node_count"] = 0
    assert client.post("/estimate", json={"cluster": cluster}).status_code == 400


# ---------------------------------------------------------------------------
# Negative resources are a client error
# ---------------------------------------------------------------------------


def test_estimate_negative_memory(client):
    cluster = _small_cluster()
    cluster["worker_node"]["resources"]["memory"] = -1
    assert client.post("/estimate", json={"cluster": cluster}).status_code == 422


def test_fit_negative_guest_memory(client):
    resp = client.post(
        "/fit",
        json={
            "cluster_preset": "hyperconverged",
            "instance_type": {"name": "bad", "guest": {"memory": -5, "cpus": 1}},
        },
    )
    assert resp.status_code == 422


def test_size_negative_extra_dimension(client):
    cluster = _small_cluster()
    cluster["worker_node"]["resources"]["storage"] = -1
    resp = client.post(
        "/size",
        json={"cluster": cluster, "instance_type_preset": "u1.medium", "target_count": 1},
    )
    assert resp.status_code == 422


def test_resolve_cluster_maps_value_error_to_400():
    # модель собрана без валидации, ошибку ловит уже ResourceVector
    resources = ResourcesModel.model_construct(memory=-1, cpus=4)
    req = EstimateRequest(
        cluster=ClusterTopologyModel(worker_node=NodeTemplateModel(resources=resources))
    )
    with pytest.raises(HTTPException) as exc:
        _resolve_cluster(req)
    assert exc.value.status_code == 400
    assert "Negative quantity" in exc.value.detail


def test_size_request_has_no_vm_count():
    assert "vm_count" not in SizeRequest.model_fields
    assert "instance_type_preset" in SizeRequest.model_fields
