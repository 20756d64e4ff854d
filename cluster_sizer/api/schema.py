# cluster_sizer/api/schema.py
from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

Number = Union[int, float]


class ResourcesModel(BaseModel):
    # дополнительные измерения (storage и т.п.) пропускаем как есть
    model_config = ConfigDict(extra="allow")

    memory: Number = Field(0, ge=0)
    cpus: Number = Field(0, ge=0)

    @model_validator(mode="after")
    def _extra_dimensions_non_negative(self) -> "ResourcesModel":
        for dim, qty in (self.model_extra or {}).items():
            if not isinstance(qty, (int, float)) or isinstance(qty, bool):
                raise ValueError(f"Dimension {dim!r} must be a number, got {qty!r}")
            if qty < 0:
                raise ValueError(f"Negative quantity for dimension {dim!r}: {qty}")
        return self


class NodeTemplateModel(BaseModel):
    description: str = "Worker node"
    resources: ResourcesModel


class ClusterTopologyModel(BaseModel):
    description: str = ""
    schedulable_control_plane: bool = False
    control_plane_node_count: int = 3
    worker_node_count: int = 1
    worker_node: NodeTemplateModel
    cpu_over_commit_ratio: float = 0.0
    hyperconverged: bool = False
    odf: bool = False


class InstanceTypeModel(BaseModel):
    name: str
    guest: ResourcesModel
    consumed_by_system: ResourcesModel = Field(default_factory=ResourcesModel)
    reserved_for_overhead: ResourcesModel = Field(default_factory=ResourcesModel)


class EstimateResourcesModel(BaseModel):
    consumed_by_system: ResourcesModel
    reserved_for_overhead: ResourcesModel
    available_to_workloads: ResourcesModel


class EstimateResponse(BaseModel):
    resources: EstimateResourcesModel
    reasoning: List[str]


class EstimateRequest(BaseModel):
    """Либо cluster целиком, либо имя пресета."""
    cluster: Optional[ClusterTopologyModel] = None
    cluster_preset: Optional[str] = None


class FitRequest(EstimateRequest):
    instance_type: Optional[InstanceTypeModel] = None
    instance_type_preset: Optional[str] = None
    # если задан, дополнительно отвечаем "влезает ли" и запас по ресурсам
    vm_count: Optional[int] = Field(None, ge=0)


class FitResponse(BaseModel):
    count: int
    binding: str
    available_to_workloads: ResourcesModel
    satisfies: Optional[bool] = None
    headroom: Optional[Dict[str, Number]] = None


class SizeRequest(EstimateRequest):
    instance_type: Optional[InstanceTypeModel] = None
    instance_type_preset: Optional[str] = None
    target_count: int = Field(..., ge=0)
    control_plane_policy: Optional[str] = None


class SizeResponse(BaseModel):
    cluster: ClusterTopologyModel
    estimate: EstimateResponse
    fit: FitResponse


class PresetsResponse(BaseModel):
    clusters: Dict[str, ClusterTopologyModel]
    instance_types: Dict[str, InstanceTypeModel]
