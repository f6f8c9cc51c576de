"""Virtual machine generation.

VMs are produced after all physical servers: the scene's base roles in table
order, then CAG gateways, then the optional components switched on by the
parameters. A VM draws its management address first, then business, then
its CAG access address.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..catalog import (
    CAG_VM_SPEC,
    DOWNLOAD_VM_SPEC,
    FLOATING_VM_SPEC,
    INSIGHT_VM_SPEC,
    SMALL_VM_SPEC,
    ZXOPS_VM_SPEC,
    SceneRole,
    base_vm_spec,
    scene_roles,
)
from ..constants import Plane
from ..types import AddressSlot, DownloadType, InsightDeployType, PlanParams, VmInfo
from ..utils.allocators import IpManager

logger = logging.getLogger(__name__)

BASE_VM_TYPE = "Function VM"
BASE_VM_PURPOSE = "Platform core service"
CAG_VM_TYPE = "CAG VM"
CAG_VM_PURPOSE = "CAG access gateway"


@dataclass(frozen=True)
class VmTemplate:
    """An optional component VM; it always takes a management address and a
    business address unless the networks are combined."""

    name: str
    vm_type: str
    purpose: str
    spec: str
    floating: bool = False


def _numbered(prefix: str, idx: int) -> str:
    return f"{prefix}{idx:02d}"


def insight_templates(params: PlanParams) -> List[VmTemplate]:
    kind = params.insight_deploy_type
    if kind is InsightDeployType.NONE:
        return []
    count = 2 if kind is InsightDeployType.HA else 1
    templates = [
        VmTemplate(_numbered("Insight", i), "Insight VM", "Operations monitoring platform", INSIGHT_VM_SPEC)
        for i in range(1, count + 1)
    ]
    if kind is InsightDeployType.HA:
        templates.append(
            VmTemplate(
                "Insight_FLOAT01",
                "Insight VM",
                "Operations monitoring platform floating IP",
                FLOATING_VM_SPEC,
                floating=True,
            )
        )
    return templates


def download_templates(params: PlanParams) -> List[VmTemplate]:
    if params.download_type is DownloadType.NONE:
        return []
    count = 2 if params.download_type is DownloadType.CLUSTER else 1
    return [
        VmTemplate(_numbered("Download", i), "Download server VM", "Software download service", DOWNLOAD_VM_SPEC)
        for i in range(1, count + 1)
    ]


def optional_vm_templates(params: PlanParams) -> List[VmTemplate]:
    """Optional component VMs in generation order."""
    templates = insight_templates(params)
    if params.is_zxops:
        templates.append(VmTemplate("ZXOPS01", "ZXOPS VM", "Operations management platform", ZXOPS_VM_SPEC))
    if params.deploy_terminal_mgmt:
        templates.append(
            VmTemplate("TerminalMgmt01", "Terminal management VM", "Terminal device management", SMALL_VM_SPEC)
        )
    if params.deploy_cag_portal:
        templates.append(VmTemplate("CAGPortal01", "CAG portal VM", "CAG management portal", SMALL_VM_SPEC))
    if params.deploy_dem:
        templates.append(VmTemplate("DEM01", "DEM VM", "Desktop experience monitoring", SMALL_VM_SPEC))
    templates.extend(download_templates(params))
    return templates


def cag_address_plane(params: PlanParams) -> Plane:
    """CAG access addresses come from management when combined, else business."""
    return Plane.MANAGEMENT if params.is_net_combined else Plane.BUSINESS


def _draw(ip_manager: IpManager, plane: Plane, wanted: bool) -> AddressSlot:
    if not wanted:
        return AddressSlot.NOT_APPLICABLE
    return ip_manager.get_next_address(plane)


def build_base_vm(role: SceneRole, params: PlanParams, ip_manager: IpManager) -> VmInfo:
    mng = _draw(ip_manager, Plane.MANAGEMENT, role.management)
    biz = _draw(ip_manager, Plane.BUSINESS, role.business and not params.is_net_combined)
    cag = _draw(ip_manager, cag_address_plane(params), role.cag_address)
    return VmInfo(
        name=role.name,
        vm_type=BASE_VM_TYPE,
        purpose=BASE_VM_PURPOSE,
        mng_ip=mng,
        biz_ip=biz,
        cag_ip=cag,
        spec=base_vm_spec(role, params.user_count),
        is_floating=role.floating,
    )


def generate_base_vms(params: PlanParams, ip_manager: IpManager) -> List[VmInfo]:
    return [build_base_vm(role, params, ip_manager) for role in scene_roles(params.scene)]


def generate_cag_vms(params: PlanParams, ip_manager: IpManager) -> List[VmInfo]:
    vms: List[VmInfo] = []
    prefix = params.prefix_cag or "CAG"
    for i in range(1, max(0, params.count_cag) + 1):
        if params.is_net_combined:
            mng = ip_manager.get_next_address(Plane.MANAGEMENT)
            biz = AddressSlot.NOT_APPLICABLE
            cag = ip_manager.get_next_address(Plane.MANAGEMENT)
        else:
            # Isolated networks: gateways live on the business plane only.
            mng = AddressSlot.NOT_APPLICABLE
            biz = ip_manager.get_next_address(Plane.BUSINESS)
            cag = ip_manager.get_next_address(Plane.BUSINESS)
        vms.append(
            VmInfo(
                name=_numbered(prefix, i),
                vm_type=CAG_VM_TYPE,
                purpose=CAG_VM_PURPOSE,
                mng_ip=mng,
                biz_ip=biz,
                cag_ip=cag,
                spec=CAG_VM_SPEC,
            )
        )
    return vms


def build_template_vm(template: VmTemplate, params: PlanParams, ip_manager: IpManager) -> VmInfo:
    mng = ip_manager.get_next_address(Plane.MANAGEMENT)
    biz = _draw(ip_manager, Plane.BUSINESS, not params.is_net_combined)
    return VmInfo(
        name=template.name,
        vm_type=template.vm_type,
        purpose=template.purpose,
        mng_ip=mng,
        biz_ip=biz,
        cag_ip=AddressSlot.NOT_APPLICABLE,
        spec=template.spec,
        is_floating=template.floating,
    )


def generate_optional_vms(params: PlanParams, ip_manager: IpManager) -> List[VmInfo]:
    return [build_template_vm(t, params, ip_manager) for t in optional_vm_templates(params)]


VmStage = Tuple[str, Callable[[PlanParams, IpManager], List[VmInfo]]]

VM_STAGES: Tuple[VmStage, ...] = (
    ("base", generate_base_vms),
    ("cag", generate_cag_vms),
    ("optional", generate_optional_vms),
)


def generate_all_vms(
    params: PlanParams,
    ip_manager: IpManager,
    stage_log: Optional[List[str]] = None,
) -> List[VmInfo]:
    vms: List[VmInfo] = []
    for name, stage in VM_STAGES:
        produced = stage(params, ip_manager)
        logger.debug("vm stage %s produced %d entries", name, len(produced))
        if stage_log is not None:
            stage_log.append(f"vms.{name}")
        vms.extend(produced)
    return vms
