# cluster_sizer/sim/overcommit.py
from __future__ import annotations

import math
from dataclasses import dataclass

from ..config import DEFAULT_SETTINGS, SizerSettings
from ..model.entities import ClusterTopology
from ..model.resources import Quantity, ResourceVector
from ..types import CPUS
from .reasoning import RuleOutcome


@dataclass(frozen=True)
class ClusterOverhead:
    """
    Ресурсы кластера до вычета и то, что из них вычитается.

    raw_capacity уже включает оверкоммит CPU.
    """
    capacity_node_count: int
    raw_capacity: ResourceVector
    consumed_by_system: ResourceVector
    reserved_for_overhead: ResourceVector


def overcommitted_cpus(cpus: Quantity, over_commit_ratio: float) -> Quantity:
    """
    cpus + cpus * ratio, прибавка округляется вниз до целого ядра.

    Сами cpus не округляем: при ratio = 0 дробные ядра остаются как есть.
    Прибавку округляем до 6 знаков перед floor, чтобы 384 * 0.1 = 38.400000000000006
    и 100 * 0.15 = 15.000000000000002 давали 38 и 15.
    """
    if over_commit_ratio == 0:
        return cpus
    return cpus + math.floor(round(cpus * over_commit_ratio, 6))


def raw_capacity(topology: ClusterTopology) -> ResourceVector:
    """Ресурсы всех нод с ёмкостью; оверкоммит только для CPU, не для памяти."""
    total = topology.worker_node.resources.scale(topology.capacity_node_count)
    return total.with_quantity(
        CPUS, overcommitted_cpus(total[CPUS], topology.cpu_over_commit_ratio)
    )


def compute_overhead(
    topology: ClusterTopology,
    outcome: RuleOutcome,
    settings: SizerSettings = DEFAULT_SETTINGS,
) -> ClusterOverhead:
    nodes = topology.capacity_node_count
    per_node_tax = settings.system_tax_per_node + outcome.consumed_per_node

    return ClusterOverhead(
        capacity_node_count=nodes,
        raw_capacity=raw_capacity(topology),
        consumed_by_system=per_node_tax.scale(nodes),
        reserved_for_overhead=settings.base_reserved + outcome.reserved,
    )
