from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Tuple

from ..catalog import scene_roles
from ..constants import PLANE_ORDER, Plane
from ..types import IpRequirements, PlanParams, ServerRole
from .server_plan import FLOAT_AFTER_MANAGEMENT_INDEX, role_planes
from .vm_plan import cag_address_plane, optional_vm_templates

logger = logging.getLogger(__name__)


def _zero() -> Dict[Plane, int]:
    return {plane: 0 for plane in PLANE_ORDER}


def server_role_counts(params: PlanParams) -> List[Tuple[ServerRole, int]]:
    """(role, count) pairs for every server entity the generators will emit."""
    counts: List[Tuple[ServerRole, int]] = [(ServerRole.MANAGEMENT, max(0, params.count_mng))]
    if params.is_dual_node and params.count_mng >= FLOAT_AFTER_MANAGEMENT_INDEX:
        counts.append((ServerRole.MANAGEMENT_FLOAT, 1))
        if params.is_ceph_dual:
            counts.append((ServerRole.CEPH_MANAGEMENT_FLOAT, 1))
    if params.is_fusion_node:
        counts.append((ServerRole.FUSION, max(0, params.count_fusion)))
    else:
        counts.append((ServerRole.COMPUTE, max(0, params.count_calc)))
        counts.append((ServerRole.STORAGE, max(0, params.count_stor)))
    return counts


def estimate_server_requirements(params: PlanParams) -> Dict[Plane, int]:
    needed = _zero()
    for role, count in server_role_counts(params):
        for plane in role_planes(role, params):
            needed[plane] += count
    return needed


def _add(needed: Dict[Plane, int], planes: Iterable[Plane], count: int = 1) -> None:
    for plane in planes:
        needed[plane] += count


def estimate_vm_requirements(params: PlanParams) -> Dict[Plane, int]:
    needed = _zero()
    combined = params.is_net_combined
    cag_plane = cag_address_plane(params)

    for role in scene_roles(params.scene):
        if role.management:
            needed[Plane.MANAGEMENT] += 1
        if role.business and not combined:
            needed[Plane.BUSINESS] += 1
        if role.cag_address:
            needed[cag_plane] += 1

    # Each CAG gateway takes two addresses from its access plane.
    needed[cag_plane] += 2 * max(0, params.count_cag)

    per_vm = (Plane.MANAGEMENT,) if combined else (Plane.MANAGEMENT, Plane.BUSINESS)
    _add(needed, per_vm, len(optional_vm_templates(params)))
    return needed


def estimate_requirements(params: PlanParams) -> IpRequirements:
    """Per-plane address demand of a full generation run.

    Computed from the parameters and static tables only; it matches the number
    of draws the generators perform, floating and CAG addresses included.
    """
    reqs = IpRequirements(
        server=estimate_server_requirements(params),
        vm=estimate_vm_requirements(params),
    )
    logger.debug("Estimated address requirements: %s", {p.value: n for p, n in reqs.total.items()})
    return reqs
