# cluster_sizer/sim/sizing.py
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict, Optional, Sequence, Tuple, Union

from ..config import DEFAULT_SETTINGS, SizerSettings
from ..errors import DegenerateInstance
from ..model.entities import ClusterTopology, InstanceType
from .capacity import estimate
from .packing import fit
from .result import Infeasible

log = logging.getLogger(__name__)

# Policy: template -> candidate schedulable_control_plane values, most preferred first.
ControlPlanePolicy = Callable[[ClusterTopology], Sequence[bool]]


def workers_first(template: ClusterTopology) -> Sequence[bool]:
    """Dedicated control plane unless the worker bound cannot reach the target."""
    if template.control_plane_node_count == 0:
        return (False,)
    return (False, True)


def never_schedulable(template: ClusterTopology) -> Sequence[bool]:
    return (False,)


def always_schedulable(template: ClusterTopology) -> Sequence[bool]:
    if template.control_plane_node_count == 0:
        return (False,)
    return (True,)


POLICIES: Dict[str, ControlPlanePolicy] = {
    "workers_first": workers_first,
    "never": never_schedulable,
    "always": always_schedulable,
}


def get_policy(name: str) -> ControlPlanePolicy:
    try:
        return POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown control plane policy {name!r}, expected one of {sorted(POLICIES)}"
        ) from None


def _fit_count(
    topology: ClusterTopology,
    instance_type: InstanceType,
    settings: SizerSettings,
) -> int:
    available = estimate(topology, settings).available_to_workloads
    return fit(available, instance_type).count


def _min_worker_count(
    template: ClusterTopology,
    instance_type: InstanceType,
    target_count: int,
    settings: SizerSettings,
) -> Tuple[Optional[int], int]:
    """
    Smallest worker count in [1, max_worker_nodes] hosting target_count instances.

    Returns (workers, count_at_bound); workers is None when even the bound
    falls short. fit count is non-decreasing in worker count, so binary search.
    """
    bound = settings.max_worker_nodes
    count_at_bound = _fit_count(
        replace(template, worker_node_count=bound), instance_type, settings
    )
    if count_at_bound < target_count:
        return None, count_at_bound

    lo, hi = 1, bound
    while lo < hi:
        mid = (lo + hi) // 2
        count = _fit_count(replace(template, worker_node_count=mid), instance_type, settings)
        log.debug(
            "size_for: %d workers (schedulable cp=%s) -> %d x %s",
            mid, template.schedulable_control_plane, count, instance_type.name,
        )
        if count >= target_count:
            hi = mid
        else:
            lo = mid + 1
    return lo, count_at_bound


def size_for(
    target_count: int,
    instance_type: InstanceType,
    template: ClusterTopology,
    settings: SizerSettings = DEFAULT_SETTINGS,
    policy: Optional[ControlPlanePolicy] = None,
) -> Union[ClusterTopology, Infeasible]:
    """
    Minimal topology derived from template that hosts target_count instances.

    Only worker_node_count and schedulable_control_plane change. The search is
    capped at settings.max_worker_nodes; past that an Infeasible value is
    returned. DegenerateInstance / InvalidTopology are raised.
    """
    if target_count < 0:
        raise ValueError(f"target_count must be >= 0, got {target_count}")
    if instance_type.footprint.is_zero():
        raise DegenerateInstance(instance_type.name)
    # worker_node_count шаблона не важен, перебираем его сами
    replace(template, worker_node_count=1).validate()

    choose = policy or get_policy(settings.control_plane_policy)

    best_count = 0
    for schedulable in choose(template):
        candidate = replace(template, schedulable_control_plane=schedulable)
        workers, count_at_bound = _min_worker_count(
            candidate, instance_type, target_count, settings
        )
        best_count = max(best_count, count_at_bound)
        if workers is not None:
            log.info(
                "Sized %d x %s: %d workers, schedulable control plane=%s",
                target_count, instance_type.name, workers, schedulable,
            )
            return replace(candidate, worker_node_count=workers)

    log.warning(
        "Cannot host %d x %s within %d workers (best %d)",
        target_count, instance_type.name, settings.max_worker_nodes, best_count,
    )
    return Infeasible(
        target_count=target_count,
        instance_type=instance_type.name,
        max_worker_nodes=settings.max_worker_nodes,
        best_count=best_count,
        reason="instance footprint exceeds the capacity reachable within the worker node bound",
    )
