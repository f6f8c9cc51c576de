"""Small, shared constants used across vdi_lld_gen.

Keep this module dependency-free to avoid import cycles.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict


class Plane(str, Enum):
    MANAGEMENT = "management"
    BUSINESS = "business"
    STORAGE_PUBLIC = "storagePublic"
    STORAGE_CLUSTER = "storageCluster"


# Allocation order of planes within a single entity.
PLANE_ORDER = (
    Plane.MANAGEMENT,
    Plane.BUSINESS,
    Plane.STORAGE_PUBLIC,
    Plane.STORAGE_CLUSTER,
)

PLANE_DISPLAY_NAMES: Dict[Plane, str] = {
    Plane.MANAGEMENT: "Management network",
    Plane.BUSINESS: "Business network",
    Plane.STORAGE_PUBLIC: "Storage public network",
    Plane.STORAGE_CLUSTER: "Storage cluster network",
}

# Legacy display strings understood by the spreadsheet renderer.
NOT_APPLICABLE_TEXT = "不涉及"
IP_TO_BE_PROVIDED_TEXT = "待提供IP"
HOST_UNASSIGNED_TEXT = "待分配"
SPEC_PENDING_TEXT = "待定"
CAPACITY_PENDING_TEXT = "待计算"

# Usage report thresholds
HIGH_UTILIZATION_RATIO = 0.9
LOW_REMAINING_THRESHOLD = 5

# Error codes carried by PlanError
INVALID_PARAMS = "INVALID_PARAMS"
IP_VALIDATION_ERROR = "IP_VALIDATION_ERROR"
GENERATION_ERROR = "GENERATION_ERROR"

# Ceph minimum node count
CEPH_MIN_NODES = 3
MAX_USER_COUNT = 50000

DEFAULT_PARAMS: Dict[str, Any] = {
    "prefix_mng": "VMC",
    "prefix_fusion": "ZXVE",
    "prefix_stor": "STG",
    "prefix_cag": "CAG",
    "user_count": 100,
    "scene": "combined",
    "insight_deploy_type": "none",
    "download_type": "none",
    "storage_security": "raid1",
    "count_mng": 1,
    "count_fusion": 0,
    "count_calc": 0,
    "count_stor": 0,
    "count_cag": 0,
    "is_net_combined": True,
    "is_dual_node": False,
    "is_ceph_dual": False,
    "is_fusion_node": True,
    "is_mng_as_fusion": False,
    "align_float_ip": False,
    "is_zxops": False,
    "deploy_terminal_mgmt": False,
    "deploy_cag_portal": False,
    "deploy_dem": False,
    "has_hdd": True,
    "mng_ip_range": "",
    "biz_ip_range": "",
    "pub_ip_range": "",
    "clu_ip_range": "",
}
