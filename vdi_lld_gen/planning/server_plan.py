"""Physical server generation.

Servers are produced in a fixed stage order (management, then either
hyper-converged or compute followed by storage) and each server draws its
addresses in plane order: management, business, storage-public,
storage-cluster. Which planes a role draws from is the static
`SERVER_ROLE_PLANES` table, never the remaining supply.
"""
from __future__ import annotations
import logging
from typing import Callable, FrozenSet, List, Optional, Tuple

from ..catalog import SERVER_ROLE_PLANES, server_specs
from ..constants import PLANE_ORDER, Plane
from ..types import AddressSlot, PlanParams, ServerInfo, ServerRole
from ..utils.allocators import IpManager

logger = logging.getLogger(__name__)

_STORAGE_PLANES = frozenset({Plane.STORAGE_PUBLIC, Plane.STORAGE_CLUSTER})

# Floating addresses follow the second management server.
FLOAT_AFTER_MANAGEMENT_INDEX = 2


def server_name(prefix: str, idx: int) -> str:
    if idx == 0:
        return prefix
    return f"{prefix}{idx:02d}"


def role_planes(role: ServerRole, params: PlanParams) -> FrozenSet[Plane]:
    planes = SERVER_ROLE_PLANES[role]
    if params.is_net_combined:
        planes = planes - {Plane.BUSINESS}
    if role in (ServerRole.MANAGEMENT_FLOAT, ServerRole.CEPH_MANAGEMENT_FLOAT) and not params.align_float_ip:
        planes = planes - _STORAGE_PLANES
    return planes


def build_server(
    hostname: str,
    role: ServerRole,
    params: PlanParams,
    ip_manager: IpManager,
) -> ServerInfo:
    planes = role_planes(role, params)
    slots: List[AddressSlot] = []
    for plane in PLANE_ORDER:
        if plane in planes:
            slots.append(ip_manager.get_next_address(plane))
        else:
            slots.append(AddressSlot.NOT_APPLICABLE)
    mng, biz, pub, clu = slots
    return ServerInfo(
        hostname=hostname,
        role=role,
        mng_ip=mng,
        biz_ip=biz,
        pub_ip=pub,
        clu_ip=clu,
        specs=server_specs(role),
        is_floating=role in (ServerRole.MANAGEMENT_FLOAT, ServerRole.CEPH_MANAGEMENT_FLOAT),
    )


def generate_floating_servers(params: PlanParams, ip_manager: IpManager) -> List[ServerInfo]:
    """Management (and optionally Ceph management) floating address entries."""
    if not params.is_dual_node:
        return []
    servers = [
        build_server(ServerRole.MANAGEMENT_FLOAT.value, ServerRole.MANAGEMENT_FLOAT, params, ip_manager)
    ]
    if params.is_ceph_dual:
        servers.append(
            build_server(
                ServerRole.CEPH_MANAGEMENT_FLOAT.value,
                ServerRole.CEPH_MANAGEMENT_FLOAT,
                params,
                ip_manager,
            )
        )
    return servers


def generate_management_servers(params: PlanParams, ip_manager: IpManager) -> List[ServerInfo]:
    servers: List[ServerInfo] = []
    for i in range(1, params.count_mng + 1):
        hostname = server_name(params.prefix_mng, i)
        servers.append(build_server(hostname, ServerRole.MANAGEMENT, params, ip_manager))
        if i == FLOAT_AFTER_MANAGEMENT_INDEX:
            servers.extend(generate_floating_servers(params, ip_manager))
    return servers


def _generate_numbered(
    role: ServerRole,
    count: int,
    prefix: str,
    params: PlanParams,
    ip_manager: IpManager,
) -> List[ServerInfo]:
    return [
        build_server(server_name(prefix, i), role, params, ip_manager)
        for i in range(1, count + 1)
    ]


def generate_fusion_servers(params: PlanParams, ip_manager: IpManager) -> List[ServerInfo]:
    return _generate_numbered(ServerRole.FUSION, params.count_fusion, params.prefix_fusion, params, ip_manager)


def generate_compute_servers(params: PlanParams, ip_manager: IpManager) -> List[ServerInfo]:
    return _generate_numbered(ServerRole.COMPUTE, params.count_calc, params.prefix_fusion, params, ip_manager)


def generate_storage_servers(params: PlanParams, ip_manager: IpManager) -> List[ServerInfo]:
    return _generate_numbered(ServerRole.STORAGE, params.count_stor, params.prefix_stor, params, ip_manager)


ServerStage = Tuple[str, Callable[[PlanParams, IpManager], List[ServerInfo]]]


def server_stages(params: PlanParams) -> Tuple[ServerStage, ...]:
    """Ordered server generation stages for the given topology."""
    if params.is_fusion_node:
        return (
            ("management", generate_management_servers),
            ("fusion", generate_fusion_servers),
        )
    return (
        ("management", generate_management_servers),
        ("compute", generate_compute_servers),
        ("storage", generate_storage_servers),
    )


def generate_all_servers(
    params: PlanParams,
    ip_manager: IpManager,
    stage_log: Optional[List[str]] = None,
) -> List[ServerInfo]:
    servers: List[ServerInfo] = []
    for name, stage in server_stages(params):
        produced = stage(params, ip_manager)
        logger.debug("server stage %s produced %d entries", name, len(produced))
        if stage_log is not None:
            stage_log.append(f"servers.{name}")
        servers.extend(produced)
    return servers
