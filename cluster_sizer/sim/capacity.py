# cluster_sizer/sim/capacity.py
from __future__ import annotations

import logging
from typing import Sequence

from ..config import DEFAULT_SETTINGS, SizerSettings
from ..model.entities import ClusterCapacityEstimate, ClusterTopology
from .overcommit import compute_overhead
from .reasoning import RULES, Rule, evaluate_rules

log = logging.getLogger(__name__)


def estimate(
    topology: ClusterTopology,
    settings: SizerSettings = DEFAULT_SETTINGS,
    rules: Sequence[Rule] = RULES,
) -> ClusterCapacityEstimate:
    """
    Capacity of a cluster that is left for workloads.

    available = (raw - consumed_by_system) - reserved_for_overhead, each
    subtraction clamped at zero per dimension. Raises InvalidTopology.
    """
    topology.validate()

    outcome = evaluate_rules(topology, rules)
    overhead = compute_overhead(topology, outcome, settings)

    available = (
        overhead.raw_capacity
        - overhead.consumed_by_system
        - overhead.reserved_for_overhead
    )

    log.debug(
        "Estimated %r: %d capacity nodes, raw=%s available=%s rules=%s",
        topology.description,
        overhead.capacity_node_count,
        overhead.raw_capacity,
        available,
        ",".join(outcome.matched) or "-",
    )

    return ClusterCapacityEstimate(
        consumed_by_system=overhead.consumed_by_system,
        reserved_for_overhead=overhead.reserved_for_overhead,
        available_to_workloads=available,
        reasoning=outcome.reasons,
    )
