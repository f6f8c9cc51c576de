from __future__ import annotations

from collections import Counter
from typing import List

from ..types import Plan


def validate_plan(plan: Plan) -> List[str]:
    """Validate internal consistency of a generated plan.

    Returns a list of human-readable issues. Empty list means OK.

    Invariants checked:
    - The plan has at least one server, one VM and one storage cluster.
    - Every concrete address appears on exactly one address field across all
      servers and VMs.
    """
    issues: List[str] = []
    if not plan.servers:
        issues.append("Plan contains no servers")
    if not plan.vms:
        issues.append("Plan contains no VMs")
    if not plan.storage_clusters:
        issues.append("Plan contains no storage clusters")

    seen: Counter = Counter()
    for server in plan.servers:
        for slot in server.slots().values():
            if slot.is_concrete:
                seen[slot.address] += 1
    for vm in plan.vms:
        for slot in vm.slots():
            if slot.is_concrete:
                seen[slot.address] += 1
    for address, count in sorted(seen.items()):
        if count > 1:
            issues.append(f"Address {address} is assigned {count} times")
    return issues
