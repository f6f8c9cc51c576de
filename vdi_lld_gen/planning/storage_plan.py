"""Ceph storage layout built from already generated servers.

No addresses are drawn here; clusters reference servers by hostname.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..catalog import (
    DESKTOP_HDD_POOL,
    DESKTOP_SSD_POOL,
    FUNC_VM_POOLS,
    NODE_CAPACITY_TB,
    REDUNDANCY,
    PoolTemplate,
)
from ..constants import CAPACITY_PENDING_TEXT, CEPH_MIN_NODES
from ..types import (
    PlanParams,
    ServerInfo,
    ServerRole,
    StorageCluster,
    StoragePool,
    StorageSecurity,
    StorageSummary,
)

logger = logging.getLogger(__name__)

DESKTOP_CLUSTER_NAME = "CEPH_CLUSTER01"
MANAGEMENT_CLUSTER_NAME = "CEPH_MNG"

LARGE_DEPLOYMENT_USERS = 10000
RAID1_EC_SUGGESTION_NODES = 6


@dataclass(frozen=True)
class StoragePlan:
    clusters: Tuple[StorageCluster, ...]
    summary: StorageSummary
    warnings: Tuple[str, ...]
    recommendations: Tuple[str, ...]


def _pools(templates: Sequence[PoolTemplate], security: StorageSecurity) -> List[StoragePool]:
    return [StoragePool(t.pool, t.use, security.value, t.type) for t in templates]


def func_vm_pools(security: StorageSecurity) -> List[StoragePool]:
    return _pools(FUNC_VM_POOLS, security)


def desktop_pools(security: StorageSecurity, has_hdd: bool = True) -> List[StoragePool]:
    templates = [DESKTOP_SSD_POOL]
    if has_hdd:
        templates.append(DESKTOP_HDD_POOL)
    return _pools(templates, security)


def _hostnames(servers: Sequence[ServerInfo], role: ServerRole) -> Tuple[str, ...]:
    return tuple(s.hostname for s in servers if s.role is role)


def _cluster(name: str, nodes: Tuple[str, ...], pools: List[StoragePool]) -> StorageCluster:
    return StorageCluster(
        name=name,
        node_count=len(nodes),
        nodes=nodes,
        pools=tuple(pools),
        total_capacity=CAPACITY_PENDING_TEXT,
        usable_capacity=CAPACITY_PENDING_TEXT,
        redundancy="",
    )


def generate_ceph_clusters(params: PlanParams, servers: Sequence[ServerInfo]) -> List[StorageCluster]:
    security = params.storage_security
    if params.is_fusion_node and params.is_mng_as_fusion:
        return [
            _cluster(MANAGEMENT_CLUSTER_NAME, _hostnames(servers, ServerRole.MANAGEMENT), func_vm_pools(security)),
            _cluster(
                DESKTOP_CLUSTER_NAME,
                _hostnames(servers, ServerRole.FUSION),
                desktop_pools(security, params.has_hdd),
            ),
        ]
    role = ServerRole.FUSION if params.is_fusion_node else ServerRole.STORAGE
    pools = func_vm_pools(security) + desktop_pools(security, params.has_hdd)
    return [_cluster(DESKTOP_CLUSTER_NAME, _hostnames(servers, role), pools)]


def _format_tb(value: float) -> str:
    return f"{value:.1f}TB"


def _capacity_tb(node_count: int, security: StorageSecurity) -> Tuple[int, float]:
    total = node_count * NODE_CAPACITY_TB
    return total, total * REDUNDANCY[security].usable_ratio


def apply_capacity(cluster: StorageCluster, security: StorageSecurity) -> StorageCluster:
    total, usable = _capacity_tb(cluster.node_count, security)
    return StorageCluster(
        name=cluster.name,
        node_count=cluster.node_count,
        nodes=cluster.nodes,
        pools=cluster.pools,
        total_capacity=f"{total}TB",
        usable_capacity=_format_tb(usable),
        redundancy=REDUNDANCY[security].label,
    )


def summarize(clusters: Sequence[StorageCluster], security: StorageSecurity) -> StorageSummary:
    total_nodes = sum(c.node_count for c in clusters)
    total, usable = 0, 0.0
    for c in clusters:
        t, u = _capacity_tb(c.node_count, security)
        total += t
        # Per-cluster usable figures are rounded before summing.
        usable += round(u, 1)
    return StorageSummary(
        total_clusters=len(clusters),
        total_nodes=total_nodes,
        total_capacity=f"{total}TB",
        total_usable_capacity=_format_tb(usable),
        redundancy_strategy=security.value,
    )


def storage_warnings(params: PlanParams) -> List[str]:
    warnings: List[str] = []
    if not params.is_fusion_node:
        if params.count_stor < CEPH_MIN_NODES:
            warnings.append(f"A Ceph cluster should have at least {CEPH_MIN_NODES} storage nodes for high availability")
        return warnings
    if params.is_mng_as_fusion and params.count_mng < 2:
        warnings.append("When management servers join storage, at least 2 management servers are recommended")
    if params.count_fusion < CEPH_MIN_NODES:
        warnings.append(
            f"A hyper-converged cluster should have at least {CEPH_MIN_NODES} nodes for high availability"
        )
    return warnings


def storage_recommendations(params: PlanParams, summary: StorageSummary) -> List[str]:
    recs: List[str] = []
    if params.user_count > LARGE_DEPLOYMENT_USERS:
        recs.append("Large user count: erasure coding improves storage efficiency")
        recs.append("Configure an SSD cache to improve performance")
    if params.storage_security is StorageSecurity.RAID1 and summary.total_nodes > RAID1_EC_SUGGESTION_NODES:
        recs.append("With this many nodes, consider erasure coding to raise storage utilization")
    recs.append("Monitor storage performance and capacity usage regularly")
    recs.append("Configure redundant links on the storage networks")
    return recs


def generate_storage_plan(params: PlanParams, servers: Sequence[ServerInfo]) -> StoragePlan:
    security = params.storage_security
    clusters = [apply_capacity(c, security) for c in generate_ceph_clusters(params, servers)]
    summary = summarize(clusters, security)
    logger.debug(
        "storage plan: %d clusters, %d nodes, %s usable",
        summary.total_clusters,
        summary.total_nodes,
        summary.total_usable_capacity,
    )
    return StoragePlan(
        clusters=tuple(clusters),
        summary=summary,
        warnings=tuple(storage_warnings(params)),
        recommendations=tuple(storage_recommendations(params, summary)),
    )
