# cluster_sizer/sim/packing.py
from __future__ import annotations

from typing import Dict

from ..errors import DegenerateInstance
from ..model.entities import InstanceType, Workload
from ..model.resources import Quantity, ResourceVector, ratio
from .result import FitResult


def fit(available: ResourceVector, instance_type: InstanceType) -> FitResult:
    """
    Сколько инстансов instance_type влезает в available.

    По каждому измерению с ненулевым footprint считаем floor(available / footprint),
    берём минимум. При равенстве побеждает измерение, идущее раньше в
    каноническом порядке (memory, cpus, ...): ratio() отдаёт их в этом порядке.
    """
    footprint = instance_type.footprint
    if footprint.is_zero():
        raise DegenerateInstance(instance_type.name)

    # нулевой footprint по измерению его не ограничивает
    candidates = [
        (int(count), dim)
        for dim, count in ratio(footprint, available).items()
        if footprint[dim] > 0
    ]
    # min() отдаёт первый из равных, то есть более раннее каноническое измерение
    count, binding = min(candidates, key=lambda c: c[0])
    return FitResult(count=count, binding=binding)


def satisfies(available: ResourceVector, workload: Workload) -> bool:
    return workload.vm_count <= fit(available, workload.instance_type).count


def headroom(available: ResourceVector, workload: Workload) -> Dict[str, Quantity]:
    """available - required по измерениям, со знаком (отрицательное = не хватает)."""
    return available.delta(workload.required_resources())
