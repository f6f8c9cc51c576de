from __future__ import annotations
from typing import List, Sequence

from ..constants import CEPH_MIN_NODES, INVALID_PARAMS, MAX_USER_COUNT
from ..types import InsightDeployType, NetworkScene, PlanParams

# Above this user count Insight must be deployed highly available.
INSIGHT_HA_USER_THRESHOLD = 5000


class ConstraintViolation(Exception):
    def __init__(self, messages: Sequence[str], code: str = INVALID_PARAMS):
        self.messages = list(messages)
        self.code = code
        super().__init__("\n".join(self.messages))


def validate_options(params: PlanParams) -> List[str]:
    """Cross-field consistency of the feature switches."""
    messages: List[str] = []
    if params.insight_deploy_type is InsightDeployType.NONE and params.deploy_terminal_mgmt:
        messages.append("Terminal management is only planned together with Insight; disable terminal management")
    combined_scene = params.scene is NetworkScene.COMBINED
    if not params.is_net_combined and combined_scene:
        messages.append("Separate management and business networks cannot use the combined network scene")
    if params.is_net_combined and not combined_scene:
        messages.append("Combined management and business networks require the combined network scene")
    if params.is_ceph_dual and not params.is_dual_node:
        messages.append("Ceph management dual node requires management dual node")
    if params.user_count > INSIGHT_HA_USER_THRESHOLD and params.insight_deploy_type is InsightDeployType.STANDALONE:
        messages.append(
            f"Insight must be deployed highly available when user count exceeds {INSIGHT_HA_USER_THRESHOLD}"
        )
    if not params.is_fusion_node and params.is_mng_as_fusion:
        messages.append("Management servers cannot act as hyper-converged nodes when compute and storage are separated")
    return messages


def validate_server_counts(params: PlanParams) -> List[str]:
    messages: List[str] = []
    if params.is_dual_node and params.count_mng < 2:
        messages.append("Management dual node requires at least 2 management servers")
    if not params.is_dual_node and params.count_mng < 1:
        messages.append("At least 1 management server is required")

    if params.is_fusion_node:
        if params.count_calc > 0:
            messages.append("Hyper-converged mode must not configure separate compute servers")
        if params.is_mng_as_fusion:
            if params.count_fusion + params.count_mng < CEPH_MIN_NODES:
                messages.append(
                    "Hyper-converged and management servers together must number at least "
                    f"{CEPH_MIN_NODES} (Ceph minimum)"
                )
        elif params.count_fusion < CEPH_MIN_NODES:
            messages.append(f"Hyper-converged mode requires at least {CEPH_MIN_NODES} hyper-converged servers (Ceph minimum)")
    else:
        if params.count_calc < 0:
            messages.append("Compute server count cannot be negative")
        if params.count_stor < CEPH_MIN_NODES:
            messages.append(f"Separated mode requires at least {CEPH_MIN_NODES} storage servers (Ceph minimum)")
        if params.count_fusion > 0:
            messages.append("Separated mode must not configure hyper-converged servers")

    if params.count_cag < 0:
        messages.append("CAG count cannot be negative")
    return messages


def validate_user_count(params: PlanParams) -> List[str]:
    if 0 < params.user_count <= MAX_USER_COUNT:
        return []
    return [f"User count must be between 1 and {MAX_USER_COUNT}, got {params.user_count}"]


def validate_params(params: PlanParams) -> List[str]:
    """All violated parameter rules, in rule order. Empty when the bag is usable."""
    return validate_options(params) + validate_server_counts(params) + validate_user_count(params)


def enforce_params(params: PlanParams) -> None:
    messages = validate_params(params)
    if messages:
        raise ConstraintViolation(messages)
