"""Plan orchestrator.

Single entry point shared by the CLI and any embedding service: parameters go
in, a finished `Plan` or a `PlanError` comes out. Nothing raises past
`generate_plan`.
"""
from __future__ import annotations
import logging
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from ..constants import GENERATION_ERROR, INVALID_PARAMS, IP_VALIDATION_ERROR
from ..parsers.params import merge_with_defaults
from ..types import Plan, PlanError, PlanParams, ServerInfo, UsageReport, VmInfo
from ..utils.allocators import IpManager
from .constraints import ConstraintViolation, enforce_params
from .requirements import estimate_requirements
from .server_plan import generate_all_servers
from .storage_plan import StoragePlan, generate_storage_plan
from .vm_plan import generate_all_vms

logger = logging.getLogger(__name__)


class _PlanBuilder:
    """Mutable accumulator threaded through the generation stages."""

    def __init__(self, params: PlanParams, ip_manager: IpManager):
        self.params = params
        self.ip_manager = ip_manager
        self.servers: List[ServerInfo] = []
        self.vms: List[VmInfo] = []
        self.storage: Optional[StoragePlan] = None
        self.stages: List[str] = []


def _servers_stage(b: _PlanBuilder) -> None:
    b.servers = generate_all_servers(b.params, b.ip_manager, b.stages)


def _vms_stage(b: _PlanBuilder) -> None:
    b.vms = generate_all_vms(b.params, b.ip_manager, b.stages)


def _storage_stage(b: _PlanBuilder) -> None:
    b.storage = generate_storage_plan(b.params, b.servers)


# Stage order fixes the draw order: servers exhaust their share of each pool
# before any VM draws.
PLAN_STAGES: Tuple[Tuple[str, Callable[[_PlanBuilder], None]], ...] = (
    ("servers", _servers_stage),
    ("vms", _vms_stage),
    ("storage", _storage_stage),
)


def _frozen_report(report: UsageReport) -> UsageReport:
    return UsageReport(
        summary=MappingProxyType(dict(report.summary)),
        details=MappingProxyType(dict(report.details)),
        warnings=tuple(report.warnings),
    )


def _prepare_params(raw: Union[Mapping[str, Any], PlanParams, None]) -> PlanParams:
    if isinstance(raw, PlanParams):
        return raw
    try:
        return merge_with_defaults(raw)
    except ValueError as e:
        raise ConstraintViolation([str(e)]) from e


def _build_plan(raw: Union[Mapping[str, Any], PlanParams, None]) -> Union[Plan, PlanError]:
    params = _prepare_params(raw)
    enforce_params(params)

    requirements = estimate_requirements(params)
    ip_manager = IpManager.from_params(params)
    if ip_manager.has_validation_errors():
        errors = ip_manager.get_validation_errors()
        logger.warning("Address range validation failed: %s", "; ".join(errors))
        return PlanError(
            message="Address range validation failed:\n" + "\n".join(errors),
            code=IP_VALIDATION_ERROR,
            details=tuple(errors),
        )

    sufficiency = ip_manager.check_sufficiency(requirements.by_plane())
    for w in sufficiency:
        logger.info("%s", w)

    builder = _PlanBuilder(params, ip_manager)
    for name, stage in PLAN_STAGES:
        logger.debug("running stage %s", name)
        stage(builder)
        builder.stages.append(name)
    if builder.storage is None:
        raise RuntimeError("storage stage produced no storage plan")

    report = _frozen_report(ip_manager.generate_usage_report())
    warnings = list(sufficiency) + list(report.warnings) + list(builder.storage.warnings)
    plan = Plan(
        servers=tuple(builder.servers),
        vms=tuple(builder.vms),
        storage_clusters=builder.storage.clusters,
        usage_by_plane=report.summary,
        warnings=tuple(warnings),
        requirements=requirements,
        usage_report=report,
        storage_summary=builder.storage.summary,
        recommendations=builder.storage.recommendations,
        stages=tuple(builder.stages),
        params=params,
    )
    logger.info(
        "Generated plan: %d servers, %d VMs, %d storage clusters, %d warnings",
        len(plan.servers),
        len(plan.vms),
        len(plan.storage_clusters),
        len(plan.warnings),
    )
    return plan


def generate_plan(raw: Union[Mapping[str, Any], PlanParams, None]) -> Union[Plan, PlanError]:
    """Run one planning pass.

    Accepts a raw parameter mapping (snake_case or legacy camelCase keys) or a
    ready `PlanParams`. Returns a `PlanError` with code INVALID_PARAMS,
    IP_VALIDATION_ERROR or GENERATION_ERROR instead of raising.
    """
    try:
        return _build_plan(raw)
    except ConstraintViolation as e:
        logger.warning("Invalid parameters: %s", "; ".join(e.messages))
        return PlanError(message=str(e), code=INVALID_PARAMS, details=tuple(e.messages))
    except Exception as e:
        logger.exception("Plan generation failed")
        return PlanError(message=f"Plan generation failed: {e}", code=GENERATION_ERROR)
