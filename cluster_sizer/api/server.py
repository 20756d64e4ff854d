# cluster_sizer/api/server.py
from __future__ import annotations

import logging
from typing import Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .. import presets
from ..config import load_settings
from ..errors import SizerError
from ..model.entities import ClusterCapacityEstimate, ClusterTopology, InstanceType, Workload
from ..model.resources import ResourceVector
from ..sim.capacity import estimate
from ..sim.packing import fit, headroom, satisfies
from ..sim.result import Infeasible
from ..sim.sizing import get_policy, size_for
from ..topology.io import (
    estimate_to_dict,
    infeasible_to_dict,
    instance_type_from_dict,
    instance_type_to_dict,
    topology_from_dict,
    topology_to_dict,
)
from .schema import (
    ClusterTopologyModel,
    EstimateRequest,
    EstimateResponse,
    FitRequest,
    FitResponse,
    InstanceTypeModel,
    PresetsResponse,
    ResourcesModel,
    SizeRequest,
    SizeResponse,
)

app = FastAPI(title="cluster-sizer")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

log = logging.getLogger("uvicorn")

SETTINGS = load_settings()

# --- Helpers ---


def _resolve_cluster(req: EstimateRequest) -> ClusterTopology:
    if req.cluster is not None:
        try:
            return topology_from_dict(req.cluster.model_dump())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    if req.cluster_preset:
        try:
            return presets.get_cluster(req.cluster_preset)
        except KeyError as e:
            raise HTTPException(status_code=404, detail=e.args[0])
    raise HTTPException(status_code=400, detail="Either cluster or cluster_preset is required")


def _resolve_instance_type(req: Union[FitRequest, SizeRequest]) -> InstanceType:
    if req.instance_type is not None:
        try:
            return instance_type_from_dict(req.instance_type.model_dump())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    if req.instance_type_preset:
        try:
            return presets.get_instance_type(req.instance_type_preset)
        except KeyError as e:
            raise HTTPException(status_code=404, detail=e.args[0])
    raise HTTPException(
        status_code=400, detail="Either instance_type or instance_type_preset is required"
    )


def _estimate(cluster: ClusterTopology) -> ClusterCapacityEstimate:
    try:
        return estimate(cluster, SETTINGS)
    except SizerError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _fit_response(
    available: ResourceVector, instance_type: InstanceType, vm_count: int | None = None
) -> FitResponse:
    try:
        result = fit(available, instance_type)
    except SizerError as e:
        raise HTTPException(status_code=400, detail=str(e))

    resp = FitResponse(
        count=result.count,
        binding=result.binding,
        available_to_workloads=ResourcesModel(**available.as_dict()),
    )
    if vm_count is not None:
        w = Workload(instance_type=instance_type, vm_count=vm_count)
        resp.satisfies = satisfies(available, w)
        resp.headroom = headroom(available, w)
    return resp


def _estimate_response(e: ClusterCapacityEstimate) -> EstimateResponse:
    return EstimateResponse(**estimate_to_dict(e))


# --- Endpoints ---


@app.get("/presets", response_model=PresetsResponse)
def list_presets() -> PresetsResponse:
    return PresetsResponse(
        clusters={
            name: ClusterTopologyModel(**topology_to_dict(t))
            for name, t in presets.CLUSTERS.items()
        },
        instance_types={
            name: InstanceTypeModel(**instance_type_to_dict(it))
            for name, it in presets.INSTANCE_TYPES.items()
        },
    )


@app.post("/estimate", response_model=EstimateResponse)
def estimate_endpoint(req: EstimateRequest) -> EstimateResponse:
    cluster = _resolve_cluster(req)
    return _estimate_response(_estimate(cluster))


@app.post("/fit", response_model=FitResponse)
def fit_endpoint(req: FitRequest) -> FitResponse:
    cluster = _resolve_cluster(req)
    instance_type = _resolve_instance_type(req)
    est = _estimate(cluster)
    return _fit_response(est.available_to_workloads, instance_type, req.vm_count)


@app.post("/size", response_model=SizeResponse)
def size_endpoint(req: SizeRequest) -> SizeResponse:
    template = _resolve_cluster(req)
    instance_type = _resolve_instance_type(req)

    try:
        policy = get_policy(req.control_plane_policy) if req.control_plane_policy else None
        result = size_for(req.target_count, instance_type, template, SETTINGS, policy=policy)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if isinstance(result, Infeasible):
        log.info("Sizing request infeasible: %s", result)
        raise HTTPException(status_code=422, detail=infeasible_to_dict(result))

    est = _estimate(result)
    return SizeResponse(
        cluster=ClusterTopologyModel(**topology_to_dict(result)),
        estimate=_estimate_response(est),
        fit=_fit_response(est.available_to_workloads, instance_type, req.target_count),
    )
