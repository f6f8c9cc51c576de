from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from .constants import (
    IP_TO_BE_PROVIDED_TEXT,
    NOT_APPLICABLE_TEXT,
    HOST_UNASSIGNED_TEXT,
    PLANE_ORDER,
    Plane,
)


class SlotKind(str, Enum):
    CONCRETE = "concrete"
    NOT_APPLICABLE = "not_applicable"
    PENDING = "pending"


@dataclass(frozen=True)
class AddressSlot:
    """One address field of an entity.

    Either a concrete address drawn from a pool, the not-applicable marker
    (the entity's role excludes the plane) or the pending marker (the pool was
    empty, exhausted or the plane unknown). Only `display()` turns the markers
    into the legacy strings shown in rendered documents.
    """

    kind: SlotKind
    address: Optional[str] = None

    @classmethod
    def concrete(cls, address: str) -> "AddressSlot":
        return cls(SlotKind.CONCRETE, address)

    @property
    def is_concrete(self) -> bool:
        return self.kind is SlotKind.CONCRETE

    @property
    def is_pending(self) -> bool:
        return self.kind is SlotKind.PENDING

    def display(self) -> str:
        if self.kind is SlotKind.CONCRETE:
            return self.address or ""
        if self.kind is SlotKind.PENDING:
            return IP_TO_BE_PROVIDED_TEXT
        return NOT_APPLICABLE_TEXT


AddressSlot.NOT_APPLICABLE = AddressSlot(SlotKind.NOT_APPLICABLE)  # type: ignore[attr-defined]
AddressSlot.PENDING = AddressSlot(SlotKind.PENDING)  # type: ignore[attr-defined]


class NetworkScene(str, Enum):
    COMBINED = "combined"
    ISOLATED_OPS_VIA_MANAGEMENT = "isolated-ops-via-management"
    ISOLATED_OPS_VIA_BUSINESS = "isolated-ops-via-business"
    TRIPLE_ISOLATED = "triple-isolated"


class InsightDeployType(str, Enum):
    NONE = "none"
    STANDALONE = "standalone"
    HA = "ha"


class DownloadType(str, Enum):
    NONE = "none"
    SINGLE = "single"
    CLUSTER = "cluster"


class StorageSecurity(str, Enum):
    RAID1 = "raid1"
    RAID5 = "raid5"
    EC = "ec"


class ServerRole(str, Enum):
    MANAGEMENT = "Management server"
    COMPUTE = "Compute server"
    FUSION = "Hyper-converged server"
    STORAGE = "Storage server"
    MANAGEMENT_FLOAT = "Management node floating IP"
    CEPH_MANAGEMENT_FLOAT = "Ceph management floating IP"


@dataclass(frozen=True)
class PlanParams:
    prefix_mng: str = "VMC"
    prefix_fusion: str = "ZXVE"
    prefix_stor: str = "STG"
    prefix_cag: str = "CAG"
    user_count: int = 100
    scene: NetworkScene = NetworkScene.COMBINED
    insight_deploy_type: InsightDeployType = InsightDeployType.NONE
    download_type: DownloadType = DownloadType.NONE
    storage_security: StorageSecurity = StorageSecurity.RAID1
    count_mng: int = 1
    count_fusion: int = 0
    count_calc: int = 0
    count_stor: int = 0
    count_cag: int = 0
    is_net_combined: bool = True
    is_dual_node: bool = False
    is_ceph_dual: bool = False
    is_fusion_node: bool = True
    is_mng_as_fusion: bool = False
    align_float_ip: bool = False
    is_zxops: bool = False
    deploy_terminal_mgmt: bool = False
    deploy_cag_portal: bool = False
    deploy_dem: bool = False
    has_hdd: bool = True
    mng_ip_range: str = ""
    biz_ip_range: str = ""
    pub_ip_range: str = ""
    clu_ip_range: str = ""


@dataclass(frozen=True)
class ServerSpecs:
    cpu: str
    memory: str
    storage: str
    network: str


@dataclass(frozen=True)
class ServerInfo:
    hostname: str
    role: ServerRole
    mng_ip: AddressSlot
    biz_ip: AddressSlot
    pub_ip: AddressSlot
    clu_ip: AddressSlot
    specs: ServerSpecs
    is_floating: bool = False

    def slots(self) -> Dict[Plane, AddressSlot]:
        return dict(zip(PLANE_ORDER, (self.mng_ip, self.biz_ip, self.pub_ip, self.clu_ip)))


@dataclass(frozen=True)
class VmInfo:
    name: str
    vm_type: str
    purpose: str
    mng_ip: AddressSlot
    biz_ip: AddressSlot
    cag_ip: AddressSlot
    spec: str
    host_server: str = HOST_UNASSIGNED_TEXT
    is_floating: bool = False

    def slots(self) -> Tuple[AddressSlot, ...]:
        return (self.mng_ip, self.biz_ip, self.cag_ip)


@dataclass(frozen=True)
class StoragePool:
    pool: str
    use: str
    replica: str
    type: str


@dataclass(frozen=True)
class StorageCluster:
    name: str
    node_count: int
    nodes: Tuple[str, ...]
    pools: Tuple[StoragePool, ...]
    total_capacity: str
    usable_capacity: str
    redundancy: str


@dataclass(frozen=True)
class StorageSummary:
    total_clusters: int
    total_nodes: int
    total_capacity: str
    total_usable_capacity: str
    redundancy_strategy: str


@dataclass(frozen=True)
class Usage:
    total: int
    used: int
    remaining: int


@dataclass(frozen=True)
class UsageDetail:
    name: str
    pool: Tuple[str, ...]
    usage: Usage
    utilization: float


@dataclass(frozen=True)
class UsageReport:
    summary: Mapping[Plane, Usage]
    details: Mapping[Plane, UsageDetail]
    warnings: Tuple[str, ...]


@dataclass(frozen=True)
class RequirementPair:
    server: int = 0
    vm: int = 0

    @property
    def total(self) -> int:
        return self.server + self.vm


@dataclass(frozen=True)
class IpRequirements:
    server: Dict[Plane, int]
    vm: Dict[Plane, int]

    @property
    def total(self) -> Dict[Plane, int]:
        return {p: self.server.get(p, 0) + self.vm.get(p, 0) for p in PLANE_ORDER}

    def by_plane(self) -> Dict[Plane, RequirementPair]:
        return {p: RequirementPair(self.server.get(p, 0), self.vm.get(p, 0)) for p in PLANE_ORDER}


@dataclass(frozen=True)
class Plan:
    servers: Tuple[ServerInfo, ...]
    vms: Tuple[VmInfo, ...]
    storage_clusters: Tuple[StorageCluster, ...]
    usage_by_plane: Mapping[Plane, Usage]
    warnings: Tuple[str, ...]
    requirements: IpRequirements
    usage_report: UsageReport
    storage_summary: Optional[StorageSummary] = None
    recommendations: Tuple[str, ...] = ()
    stages: Tuple[str, ...] = ()
    params: Optional[PlanParams] = None


@dataclass(frozen=True)
class PlanError:
    message: str
    code: str
    details: Tuple[str, ...] = field(default_factory=tuple)
