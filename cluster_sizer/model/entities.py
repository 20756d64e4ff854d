# cluster_sizer/model/entities.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from ..errors import InvalidTopology
from .resources import ResourceVector


@dataclass(frozen=True)
class NodeTemplate:
    description: str
    resources: ResourceVector


@dataclass(frozen=True)
class ClusterTopology:
    """
    Описание кластера: однородный пул worker-нод плюс control plane.

    Control plane ноды используют тот же шаблон, что и worker-ы, и дают
    ёмкость только при schedulable_control_plane=True.
    hyperconverged, odf: флаги для набора правил (sim/reasoning.py).
    """
    description: str
    worker_node: NodeTemplate
    worker_node_count: int
    control_plane_node_count: int = 3
    schedulable_control_plane: bool = False
    cpu_over_commit_ratio: float = 0.0

    hyperconverged: bool = False
    odf: bool = False

    def validate(self) -> "ClusterTopology":
        if self.worker_node_count < 1:
            raise InvalidTopology(
                f"worker_node_count must be >= 1, got {self.worker_node_count}"
            )
        if self.control_plane_node_count < 0:
            raise InvalidTopology(
                f"control_plane_node_count must be >= 0, got {self.control_plane_node_count}"
            )
        if self.cpu_over_commit_ratio < 0:
            raise InvalidTopology(
                f"cpu_over_commit_ratio must be >= 0, got {self.cpu_over_commit_ratio}"
            )
        return self

    @property
    def capacity_node_count(self) -> int:
        """Ноды, на которых могут работать workload-ы."""
        if self.schedulable_control_plane:
            return self.worker_node_count + self.control_plane_node_count
        return self.worker_node_count


@dataclass(frozen=True)
class InstanceType:
    name: str
    guest: ResourceVector
    consumed_by_system: ResourceVector = field(default_factory=ResourceVector.zero)
    reserved_for_overhead: ResourceVector = field(default_factory=ResourceVector.zero)

    @property
    def footprint(self) -> ResourceVector:
        """guest + consumed_by_system + reserved_for_overhead на один инстанс."""
        return self.guest + self.consumed_by_system + self.reserved_for_overhead


@dataclass(frozen=True)
class Workload:
    instance_type: InstanceType
    vm_count: int

    def __post_init__(self) -> None:
        if self.vm_count < 0:
            raise ValueError(f"vm_count must be >= 0, got {self.vm_count}")

    def required_resources(self) -> ResourceVector:
        return self.instance_type.footprint.scale(self.vm_count)


@dataclass(frozen=True)
class ClusterCapacityEstimate:
    consumed_by_system: ResourceVector
    reserved_for_overhead: ResourceVector
    available_to_workloads: ResourceVector
    # порядок = порядок вычисления правил
    reasoning: Tuple[str, ...] = ()
