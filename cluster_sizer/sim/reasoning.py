# cluster_sizer/sim/reasoning.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple

from ..model.entities import ClusterTopology
from ..model.resources import ResourceVector
from ..types import GI_B


@dataclass(frozen=True)
class Rule:
    """
    Эвристика: предикат по флагам топологии -> пояснение + числовой эффект.

    consumed_per_node добавляется к системному налогу каждой ноды с ёмкостью,
    reserved к резерву на весь кластер. Правило без эффекта только пишет
    пояснение в reasoning.
    """
    name: str
    applies: Callable[[ClusterTopology], bool]
    reason: str
    consumed_per_node: ResourceVector = field(default_factory=ResourceVector.zero)
    reserved: ResourceVector = field(default_factory=ResourceVector.zero)


# Порядок важен: в таком порядке пояснения попадают в оценку.
RULES: Tuple[Rule, ...] = (
    # Эффект на ёмкость: число нод с ёмкостью, считается в overcommit.py.
    Rule(
        name="schedulable-control-plane",
        applies=lambda t: t.schedulable_control_plane,
        reason="More capacity due to schedulable control plane nodes",
    ),
    # Базовый налог на ноду уже снят на hyperconverged кластере.
    Rule(
        name="hyperconverged",
        applies=lambda t: t.hyperconverged,
        reason="HyperConverged clusters have an increased amount of system resource consumption.",
    ),
    # avg(sum by (instance) (node_memory_SReclaimable_bytes + node_memory_KReclaimable_bytes))
    Rule(
        name="odf",
        applies=lambda t: t.odf,
        reason="The use of ODF benefits from larger buffers.",
        reserved=ResourceVector.of(memory=5 * GI_B),
    ),
)


@dataclass(frozen=True)
class RuleOutcome:
    reasons: Tuple[str, ...]
    consumed_per_node: ResourceVector
    reserved: ResourceVector
    matched: Tuple[str, ...] = ()


def evaluate_rules(
    topology: ClusterTopology,
    rules: Sequence[Rule] = RULES,
) -> RuleOutcome:
    """Прогоняет все правила по порядку и суммирует эффекты сработавших."""
    reasons: List[str] = []
    matched: List[str] = []
    consumed = ResourceVector.zero()
    reserved = ResourceVector.zero()

    for rule in rules:
        if not rule.applies(topology):
            continue
        matched.append(rule.name)
        reasons.append(rule.reason)
        consumed = consumed + rule.consumed_per_node
        reserved = reserved + rule.reserved

    return RuleOutcome(
        reasons=tuple(reasons),
        consumed_per_node=consumed,
        reserved=reserved,
        matched=tuple(matched),
    )
