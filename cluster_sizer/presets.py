# cluster_sizer/presets.py
from __future__ import annotations

from typing import Dict

from .model.entities import ClusterTopology, InstanceType, NodeTemplate
from .model.resources import ResourceVector
from .types import GI_B, MI_B

WORKER_NODE = NodeTemplate(
    description="Worker node",
    resources=ResourceVector.of(memory=256 * GI_B, cpus=128),
)

# Базовые топологии для демо и API
CLUSTERS: Dict[str, ClusterTopology] = {
    "hyperconverged": ClusterTopology(
        description="HyperConverged cluster with ODF",
        worker_node=WORKER_NODE,
        worker_node_count=3,
        control_plane_node_count=3,
        schedulable_control_plane=False,
        cpu_over_commit_ratio=0.1,
        hyperconverged=True,
        odf=True,
    ),
    "compute": ClusterTopology(
        description="Compute-only cluster",
        worker_node=WORKER_NODE,
        worker_node_count=3,
        control_plane_node_count=3,
        schedulable_control_plane=False,
        cpu_over_commit_ratio=0.1,
    ),
}

# virt-launcher + qemu на каждую VM
_VM_SYSTEM_TAX = ResourceVector.of(memory=200 * MI_B, cpus=1)

INSTANCE_TYPES: Dict[str, InstanceType] = {
    "u1.medium": InstanceType(
        name="u1.medium",
        guest=ResourceVector.of(memory=4 * GI_B, cpus=8),
        consumed_by_system=_VM_SYSTEM_TAX,
        reserved_for_overhead=ResourceVector.zero(),
    ),
}


def get_cluster(name: str) -> ClusterTopology:
    try:
        return CLUSTERS[name]
    except KeyError:
        raise KeyError(f"Unknown cluster preset {name!r}, expected one of {sorted(CLUSTERS)}") from None


def get_instance_type(name: str) -> InstanceType:
    try:
        return INSTANCE_TYPES[name]
    except KeyError:
        raise KeyError(
            f"Unknown instance type {name!r}, expected one of {sorted(INSTANCE_TYPES)}"
        ) from None
