# cluster_sizer/topology/io.py
from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from ..model.entities import (
    ClusterCapacityEstimate,
    ClusterTopology,
    InstanceType,
    NodeTemplate,
    Workload,
)
from ..model.resources import ResourceVector
from ..sim.result import FitResult, Infeasible

# Имена полей являются контрактом для внешних инструментов (resources.memory,
# available_to_workloads, reasoning ...), менять их нельзя.


def resources_to_dict(r: ResourceVector) -> Dict[str, Any]:
    return r.as_dict()


def resources_from_dict(data: Mapping[str, Any] | None) -> ResourceVector:
    return ResourceVector.from_mapping(dict(data or {}))


def topology_to_dict(t: ClusterTopology) -> Dict[str, Any]:
    return {
        "description": t.description,
        "schedulable_control_plane": t.schedulable_control_plane,
        "control_plane_node_count": int(t.control_plane_node_count),
        "worker_node_count": int(t.worker_node_count),
        "worker_node": {
            "description": t.worker_node.description,
            "resources": resources_to_dict(t.worker_node.resources),
        },
        "cpu_over_commit_ratio": float(t.cpu_over_commit_ratio),
        "hyperconverged": t.hyperconverged,
        "odf": t.odf,
    }


def topology_from_dict(data: Mapping[str, Any]) -> ClusterTopology:
    node = data.get("worker_node") or {}
    return ClusterTopology(
        description=data.get("description", ""),
        worker_node=NodeTemplate(
            description=node.get("description", "Worker node"),
            resources=resources_from_dict(node.get("resources")),
        ),
        worker_node_count=int(data.get("worker_node_count", 1)),
        control_plane_node_count=int(data.get("control_plane_node_count", 3)),
        schedulable_control_plane=bool(data.get("schedulable_control_plane", False)),
        cpu_over_commit_ratio=float(data.get("cpu_over_commit_ratio", 0.0)),
        hyperconverged=bool(data.get("hyperconverged", False)),
        odf=bool(data.get("odf", False)),
    )


def instance_type_to_dict(it: InstanceType) -> Dict[str, Any]:
    return {
        "name": it.name,
        "guest": resources_to_dict(it.guest),
        "consumed_by_system": resources_to_dict(it.consumed_by_system),
        "reserved_for_overhead": resources_to_dict(it.reserved_for_overhead),
    }


def instance_type_from_dict(data: Mapping[str, Any]) -> InstanceType:
    return InstanceType(
        name=data.get("name", "custom"),
        guest=resources_from_dict(data.get("guest")),
        consumed_by_system=resources_from_dict(data.get("consumed_by_system")),
        reserved_for_overhead=resources_from_dict(data.get("reserved_for_overhead")),
    )


def workload_to_dict(w: Workload) -> Dict[str, Any]:
    return {
        "vm_count": int(w.vm_count),
        "instance_type": instance_type_to_dict(w.instance_type),
    }


def estimate_to_dict(e: ClusterCapacityEstimate) -> Dict[str, Any]:
    return {
        "resources": {
            "consumed_by_system": resources_to_dict(e.consumed_by_system),
            "reserved_for_overhead": resources_to_dict(e.reserved_for_overhead),
            "available_to_workloads": resources_to_dict(e.available_to_workloads),
        },
        "reasoning": list(e.reasoning),
    }


def fit_to_dict(f: FitResult) -> Dict[str, Any]:
    return {"count": f.count, "binding": f.binding}


def infeasible_to_dict(i: Infeasible) -> Dict[str, Any]:
    return asdict(i)


def load_topology_from_file(path: Union[str, Path]) -> ClusterTopology:
    with open(path, "r", encoding="utf-8") as f:
        return topology_from_dict(json.load(f))


def save_topology_to_file(t: ClusterTopology, path: Union[str, Path]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(topology_to_dict(t), f, indent=2, sort_keys=True)


def load_instance_type_from_file(path: Union[str, Path]) -> InstanceType:
    with open(path, "r", encoding="utf-8") as f:
        return instance_type_from_dict(json.load(f))
