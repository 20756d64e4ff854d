from __future__ import annotations

import pytest

from cluster_sizer.errors import DegenerateInstance
from cluster_sizer.model.entities import InstanceType, Workload
from cluster_sizer.model.resources import ResourceVector
from cluster_sizer.sim.capacity import estimate
from cluster_sizer.sim.packing import fit, headroom, satisfies
from cluster_sizer.types import GI_B, MI_B


def test_cpu_binding_from_sample(u1_medium):
    available = ResourceVector.of(memory=703 * GI_B, cpus=360)
    result = fit(available, u1_medium)
    assert result.count == 40
    assert result.binding == "cpus"
    assert str(result) == "40 constrained by cpus"

    # memory alone would allow more instances
    memory_only = InstanceType("mem", guest=ResourceVector.of(memory=4 * GI_B + 200 * MI_B))
    assert fit(available, memory_only).count > 40


def test_fit_on_hyperconverged_estimate(hc_cluster, u1_medium):
    available = estimate(hc_cluster).available_to_workloads
    result = fit(available, u1_medium)
    assert result.count == 398 // 9
    assert result.binding == "cpus"


def test_memory_binding():
    it = InstanceType("big-mem", guest=ResourceVector.of(memory=64 * GI_B, cpus=1))
    result = fit(ResourceVector.of(memory=256 * GI_B, cpus=100), it)
    assert result.count == 4
    assert result.binding == "memory"


def test_tie_prefers_memory():
    it = InstanceType("even", guest=ResourceVector.of(memory=1, cpus=1))
    result = fit(ResourceVector.of(memory=10, cpus=10), it)
    assert result.count == 10
    assert result.binding == "memory"


def test_zero_footprint_dimension_is_ignored():
    it = InstanceType("no-cpu", guest=ResourceVector.of(memory=GI_B))
    result = fit(ResourceVector.of(memory=5 * GI_B, cpus=0), it)
    assert result.count == 5
    assert result.binding == "memory"


def test_extra_dimension_can_bind():
    it = InstanceType("disk-heavy", guest=ResourceVector.of(memory=1, cpus=1, storage=100))
    result = fit(ResourceVector.of(memory=1000, cpus=1000, storage=250), it)
    assert result.count == 2
    assert result.binding == "storage"


def test_dimension_missing_from_available_binds_at_zero():
    it = InstanceType("disk-heavy", guest=ResourceVector.of(memory=1, cpus=1, storage=100))
    result = fit(ResourceVector.of(memory=1000, cpus=1000), it)
    assert result.count == 0
    assert result.binding == "storage"


def test_degenerate_instance_raises():
    with pytest.raises(DegenerateInstance):
        fit(ResourceVector.of(memory=GI_B, cpus=4), InstanceType("empty", ResourceVector.zero()))


def test_fit_is_monotonic_in_available(u1_medium):
    for memory_gib in (0, 50, 500):
        previous = 0
        for cpus in range(0, 200, 7):
            count = fit(ResourceVector.of(memory=memory_gib * GI_B, cpus=cpus), u1_medium).count
            assert count >= previous
            previous = count
    previous = 0
    for memory_gib in range(0, 600, 25):
        count = fit(ResourceVector.of(memory=memory_gib * GI_B, cpus=180), u1_medium).count
        assert count >= previous
        previous = count


def test_satisfies(u1_medium):
    available = ResourceVector.of(memory=703 * GI_B, cpus=360)
    assert satisfies(available, Workload(u1_medium, vm_count=40))
    assert not satisfies(available, Workload(u1_medium, vm_count=41))
    assert satisfies(available, Workload(u1_medium, vm_count=0))


def test_headroom_is_signed(u1_medium):
    available = ResourceVector.of(memory=703 * GI_B, cpus=360)
    delta = headroom(available, Workload(u1_medium, vm_count=100))
    assert delta["cpus"] == 360 - 900
    assert delta["memory"] == (703 * 1024 - 100 * 4296) * MI_B


def test_required_resources_use_full_footprint(u1_medium):
    w = Workload(u1_medium, vm_count=2)
    assert w.required_resources() == ResourceVector.of(memory=2 * 4296 * MI_B, cpus=18)


def test_negative_vm_count_rejected(u1_medium):
    with pytest.raises(ValueError):
        Workload(u1_medium, vm_count=-1)
