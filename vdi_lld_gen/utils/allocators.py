from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..constants import (
    HIGH_UTILIZATION_RATIO,
    LOW_REMAINING_THRESHOLD,
    PLANE_DISPLAY_NAMES,
    PLANE_ORDER,
    Plane,
)
from ..planning.pool import AddressPool, build_pool
from ..types import AddressSlot, PlanParams, RequirementPair, Usage, UsageDetail, UsageReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationErrorRecord:
    plane: Plane
    raw_errors: Tuple[str, ...]

    def format(self) -> str:
        return f"{PLANE_DISPLAY_NAMES[self.plane]} range errors: {'; '.join(self.raw_errors)}"


def _as_plane(plane: Union[Plane, str]) -> Optional[Plane]:
    if isinstance(plane, Plane):
        return plane
    try:
        return Plane(plane)
    except ValueError:
        return None


class IpManager:
    """Sequential address allocator over the four network planes.

    Each plane owns an immutable pool and one cursor. Every call to
    `get_next_address` advances the plane's cursor by exactly one, even when
    the pool is empty or exhausted, so the cursor always equals the number of
    requests made for that plane. Draws past the end of a pool return the
    pending slot instead of failing.

    One instance serves one planning run; cursors are plain counters with no
    locking, so concurrent runs must each build their own manager.
    """

    def __init__(
        self,
        management_range: Optional[str] = "",
        business_range: Optional[str] = "",
        storage_public_range: Optional[str] = "",
        storage_cluster_range: Optional[str] = "",
        net_combined: bool = False,
    ):
        self.net_combined = bool(net_combined)
        self.pools: Dict[Plane, AddressPool] = {}
        self.validation_records: List[ValidationErrorRecord] = []

        raw_ranges = {
            Plane.MANAGEMENT: management_range,
            Plane.BUSINESS: business_range,
            Plane.STORAGE_PUBLIC: storage_public_range,
            Plane.STORAGE_CLUSTER: storage_cluster_range,
        }
        for plane in PLANE_ORDER:
            if plane is Plane.BUSINESS and self.net_combined:
                # Business traffic rides the management plane; any supplied
                # business text is ignored without being parsed.
                self.pools[plane] = AddressPool.empty(plane)
                continue
            pool, errors = build_pool(plane, raw_ranges[plane])
            self.pools[plane] = pool
            if errors:
                self.validation_records.append(ValidationErrorRecord(plane, tuple(errors)))
            logger.debug("%s pool holds %d addresses", plane.value, len(pool))

        self._cursors: Dict[Plane, int] = {plane: 0 for plane in PLANE_ORDER}

    @classmethod
    def from_params(cls, params: PlanParams) -> "IpManager":
        return cls(
            params.mng_ip_range,
            params.biz_ip_range,
            params.pub_ip_range,
            params.clu_ip_range,
            net_combined=params.is_net_combined,
        )

    # --- validation channel -------------------------------------------------
    def has_validation_errors(self) -> bool:
        return bool(self.validation_records)

    def get_validation_errors(self) -> List[str]:
        return [rec.format() for rec in self.validation_records]

    # --- allocation -------------------------------------------------------
    def cursor(self, plane: Union[Plane, str]) -> int:
        p = _as_plane(plane)
        return self._cursors[p] if p is not None else 0

    def get_next_address(self, plane: Union[Plane, str]) -> AddressSlot:
        p = _as_plane(plane)
        if p is None:
            logger.debug("Address requested for unknown plane %r", plane)
            return AddressSlot.PENDING
        index = self._cursors[p]
        self._cursors[p] = index + 1
        address = self.pools[p].at(index)
        if address is None:
            return AddressSlot.PENDING
        return AddressSlot.concrete(address)

    def allocate_many(self, plane: Union[Plane, str], count: int) -> List[AddressSlot]:
        return [self.get_next_address(plane) for _ in range(max(0, int(count)))]

    def peek_range(self, plane: Union[Plane, str], start: int, count: int) -> List[str]:
        """Read pool entries [start, start+count) without moving the cursor."""
        p = _as_plane(plane)
        if p is None:
            return []
        addresses = self.pools[p].addresses
        if start < 0 or start >= len(addresses):
            return []
        return list(addresses[start:start + max(0, count)])

    def reset_counter(self, plane: Union[Plane, str]) -> None:
        p = _as_plane(plane)
        if p is not None:
            self._cursors[p] = 0

    def reset_all_counters(self) -> None:
        for plane in self._cursors:
            self._cursors[plane] = 0

    # --- accounting -------------------------------------------------------
    def get_usage(self, plane: Union[Plane, str]) -> Usage:
        p = _as_plane(plane)
        if p is None:
            return Usage(total=0, used=0, remaining=0)
        total = len(self.pools[p])
        used = self._cursors[p]
        return Usage(total=total, used=used, remaining=total - used)

    def get_all_usage(self) -> Dict[Plane, Usage]:
        return {plane: self.get_usage(plane) for plane in PLANE_ORDER}

    @staticmethod
    def display_name(plane: Union[Plane, str]) -> str:
        p = _as_plane(plane)
        if p is None:
            return str(plane)
        return PLANE_DISPLAY_NAMES[p]

    def check_sufficiency(self, requirements: Mapping[Any, Any]) -> List[str]:
        """Compare required counts against pool sizes and describe each shortfall.

        A requirement is either a plain count or a server/vm pair (mapping with
        ``server``/``vm`` keys or a RequirementPair) that is summed.
        """
        warnings: List[str] = []
        for key, requirement in (requirements or {}).items():
            plane = _as_plane(key)
            if plane is None:
                continue
            needed = _requirement_total(requirement)
            if needed is None:
                logger.debug("Unreadable requirement for %s: %r", plane.value, requirement)
                continue
            available = len(self.pools[plane])
            if needed > available:
                warnings.append(
                    f"{self.display_name(plane)} has insufficient addresses: "
                    f"{needed} required, {available} available"
                )
        return warnings

    def generate_usage_report(self) -> UsageReport:
        summary: Dict[Plane, Usage] = {}
        details: Dict[Plane, UsageDetail] = {}
        warnings: List[str] = []
        for plane in PLANE_ORDER:
            usage = self.get_usage(plane)
            name = self.display_name(plane)
            utilization = 0.0
            if usage.total > 0:
                utilization = float(f"{usage.used / usage.total * 100:.1f}")
            summary[plane] = usage
            details[plane] = UsageDetail(
                name=name,
                pool=self.pools[plane].addresses,
                usage=usage,
                utilization=utilization,
            )
            if usage.total > 0:
                if usage.used / usage.total > HIGH_UTILIZATION_RATIO:
                    warnings.append(f"{name} utilization is high: {utilization:.1f}%")
                if usage.remaining < LOW_REMAINING_THRESHOLD:
                    warnings.append(f"{name} has few addresses remaining: {usage.remaining}")
        return UsageReport(summary=summary, details=details, warnings=tuple(warnings))


def _requirement_total(requirement: Any) -> Optional[int]:
    if isinstance(requirement, RequirementPair):
        return requirement.total
    if isinstance(requirement, Mapping):
        try:
            return int(requirement.get("server", 0) or 0) + int(requirement.get("vm", 0) or 0)
        except (TypeError, ValueError):
            return None
    if isinstance(requirement, bool):
        return None
    try:
        return int(requirement)
    except (TypeError, ValueError):
        return None
