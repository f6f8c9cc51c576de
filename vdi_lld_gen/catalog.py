"""Static lookup tables consumed by the generators.

Every table here is plain data keyed by the enums in `types`; nothing in this
module draws addresses.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, FrozenSet, Mapping, Tuple

from .constants import NOT_APPLICABLE_TEXT, SPEC_PENDING_TEXT, Plane
from .types import NetworkScene, ServerRole, ServerSpecs, StorageSecurity


@dataclass(frozen=True)
class SceneRole:
    name: str
    management: bool = False
    business: bool = False
    cag_address: bool = False
    floating: bool = False


def _isolated_ops_via_management_roles() -> Tuple[SceneRole, ...]:
    return (
        SceneRole("daisyseed01", management=True, business=True),
        SceneRole("paas-controller-tcf1", management=True),
        SceneRole("paas-controller-tcf2", management=True),
        SceneRole("paas-controller-tcf3", management=True),
        SceneRole("TCF_FLOAT01", management=True, floating=True),
        SceneRole("TCF_FLOAT02", management=True, floating=True),
        SceneRole("TCF_SLB", management=True, business=True, floating=True),
        SceneRole("UAS01", management=True, business=True),
        SceneRole("UAS02", management=True, business=True),
        SceneRole("UAS03", management=True, business=True),
        SceneRole("UAS_FLOAT01", management=True, business=True, floating=True),
    )


def _isolated_ops_via_business_roles() -> Tuple[SceneRole, ...]:
    return (
        SceneRole("daisyseed01", management=True, business=True),
        SceneRole("paas-controller-tcf1", business=True),
        SceneRole("paas-controller-tcf2", business=True),
        SceneRole("paas-controller-tcf3", business=True),
        SceneRole("TCF_FLOAT01", business=True, floating=True),
        SceneRole("TCF_FLOAT02", business=True, floating=True),
        SceneRole("TCF_SLB", management=True, business=True, floating=True),
        SceneRole("UAS01", management=True, business=True),
        SceneRole("UAS02", management=True, business=True),
        SceneRole("UAS03", management=True, business=True),
        SceneRole("UAS_FLOAT01", management=True, business=True, floating=True),
    )


# The combined scene shares the management-access role layout; its business
# flags are ignored because the business plane is merged into management.
SCENE_ROLES: Dict[NetworkScene, Tuple[SceneRole, ...]] = {
    NetworkScene.COMBINED: _isolated_ops_via_management_roles(),
    NetworkScene.ISOLATED_OPS_VIA_MANAGEMENT: _isolated_ops_via_management_roles(),
    NetworkScene.ISOLATED_OPS_VIA_BUSINESS: _isolated_ops_via_business_roles(),
    NetworkScene.TRIPLE_ISOLATED: _isolated_ops_via_business_roles(),
}

SCENE_LABELS: Dict[NetworkScene, str] = {
    NetworkScene.COMBINED: "管理网和业务网合一场景",
    NetworkScene.ISOLATED_OPS_VIA_MANAGEMENT: "管理网和业务网隔离场景_运维通过管理网访问",
    NetworkScene.ISOLATED_OPS_VIA_BUSINESS: "管理网和业务网隔离场景_运维通过业务网访问",
    NetworkScene.TRIPLE_ISOLATED: "三网隔离场景",
}


def scene_roles(scene: NetworkScene) -> Tuple[SceneRole, ...]:
    return SCENE_ROLES[scene]


# Planes each server role draws from; draw order always follows PLANE_ORDER.
SERVER_ROLE_PLANES: Dict[ServerRole, FrozenSet[Plane]] = {
    ServerRole.MANAGEMENT: frozenset(
        {Plane.MANAGEMENT, Plane.BUSINESS, Plane.STORAGE_PUBLIC, Plane.STORAGE_CLUSTER}
    ),
    ServerRole.FUSION: frozenset(
        {Plane.MANAGEMENT, Plane.BUSINESS, Plane.STORAGE_PUBLIC, Plane.STORAGE_CLUSTER}
    ),
    ServerRole.COMPUTE: frozenset({Plane.MANAGEMENT, Plane.BUSINESS, Plane.STORAGE_PUBLIC}),
    ServerRole.STORAGE: frozenset({Plane.MANAGEMENT, Plane.STORAGE_PUBLIC, Plane.STORAGE_CLUSTER}),
    ServerRole.MANAGEMENT_FLOAT: frozenset(
        {Plane.MANAGEMENT, Plane.BUSINESS, Plane.STORAGE_PUBLIC, Plane.STORAGE_CLUSTER}
    ),
    ServerRole.CEPH_MANAGEMENT_FLOAT: frozenset(
        {Plane.MANAGEMENT, Plane.STORAGE_PUBLIC, Plane.STORAGE_CLUSTER}
    ),
}

_PENDING_SPECS = ServerSpecs(SPEC_PENDING_TEXT, SPEC_PENDING_TEXT, SPEC_PENDING_TEXT, SPEC_PENDING_TEXT)

SERVER_SPECS: Dict[ServerRole, ServerSpecs] = {
    ServerRole.MANAGEMENT: ServerSpecs("16C", "32G", "500G SSD", "4*10GE"),
    ServerRole.COMPUTE: ServerSpecs("32C", "128G", "500G SSD", "4*10GE"),
    ServerRole.FUSION: ServerSpecs("32C", "128G", "500G SSD + 4*2T HDD", "4*10GE"),
    ServerRole.STORAGE: ServerSpecs("16C", "64G", "500G SSD + 8*2T HDD", "4*10GE"),
}


def server_specs(role: ServerRole) -> ServerSpecs:
    return SERVER_SPECS.get(role, _PENDING_SPECS)


# VM sizing. Tiers are (max_user_count, spec); the last tier has no bound.
DAISYSEED_SPEC = "4C8G100G"
TCF_SPEC_TIERS: Tuple[Tuple[int | None, str], ...] = (
    (10000, "24C48G, 600G+100G"),
    (None, "32C64G, 600G+100G"),
)
UAS_SPEC_TIERS: Tuple[Tuple[int | None, str], ...] = (
    (5000, "4C6G, 100G"),
    (10000, "6C8G, 100G"),
    (None, "8C16G, 100G"),
)
CAG_VM_SPEC = "4C16G, 150G"
INSIGHT_VM_SPEC = "8C16G200G"
ZXOPS_VM_SPEC = "8C16G200G"
SMALL_VM_SPEC = "4C8G100G"
DOWNLOAD_VM_SPEC = "4C8G500G"
FLOATING_VM_SPEC = NOT_APPLICABLE_TEXT


def tiered_spec(tiers: Tuple[Tuple[int | None, str], ...], user_count: int) -> str:
    for bound, spec in tiers:
        if bound is None or user_count <= bound:
            return spec
    return tiers[-1][1]


def base_vm_spec(role: SceneRole, user_count: int) -> str:
    if role.name == "daisyseed01":
        return DAISYSEED_SPEC
    if role.floating:
        return FLOATING_VM_SPEC
    if role.name.startswith("paas-controller-tcf"):
        return tiered_spec(TCF_SPEC_TIERS, user_count)
    if role.name in ("UAS01", "UAS02", "UAS03"):
        return tiered_spec(UAS_SPEC_TIERS, user_count)
    return SMALL_VM_SPEC


# Storage pools
@dataclass(frozen=True)
class PoolTemplate:
    pool: str
    use: str
    type: str


FUNC_VM_POOLS: Tuple[PoolTemplate, ...] = (
    PoolTemplate("SSDPOOL_FUNCVM01", "Function VM storage", "SSD"),
    PoolTemplate("SSDPOOL_FUNCVM02", "Function VM storage", "SSD"),
)
DESKTOP_SSD_POOL = PoolTemplate("SSDPOOL_DESKTOP01", "User system disk storage", "SSD")
DESKTOP_HDD_POOL = PoolTemplate("HDDPOOL_DESKTOP01", "User data disk storage", "HDD")

NODE_CAPACITY_TB = 8


@dataclass(frozen=True)
class RedundancyPolicy:
    usable_ratio: float
    label: str


REDUNDANCY: Mapping[StorageSecurity, RedundancyPolicy] = {
    StorageSecurity.RAID1: RedundancyPolicy(0.5, "2 replicas"),
    StorageSecurity.RAID5: RedundancyPolicy(0.75, "3 replicas"),
    StorageSecurity.EC: RedundancyPolicy(0.67, "4+2 erasure coding"),
}
