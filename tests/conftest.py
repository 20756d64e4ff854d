from __future__ import annotations

import pytest

from cluster_sizer import presets
from cluster_sizer.model.entities import ClusterTopology, InstanceType, NodeTemplate
from cluster_sizer.model.resources import ResourceVector
from cluster_sizer.types import GI_B, MI_B


@pytest.fixture
def worker_node() -> NodeTemplate:
    return NodeTemplate(
        description="Worker node",
        resources=ResourceVector.of(memory=274877906944, cpus=128),
    )


@pytest.fixture
def plain_cluster(worker_node) -> ClusterTopology:
    """3 workers, 10% CPU over-commit, no feature flags."""
    return ClusterTopology(
        description="plain",
        worker_node=worker_node,
        worker_node_count=3,
        control_plane_node_count=3,
        cpu_over_commit_ratio=0.1,
    )


@pytest.fixture
def hc_cluster() -> ClusterTopology:
    return presets.get_cluster("hyperconverged")


@pytest.fixture
def u1_medium() -> InstanceType:
    return InstanceType(
        name="u1.medium",
        guest=ResourceVector.of(memory=4 * GI_B, cpus=8),
        consumed_by_system=ResourceVector.of(memory=200 * MI_B, cpus=1),
    )
