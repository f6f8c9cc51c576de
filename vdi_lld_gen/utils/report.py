"""Rendering boundary: the only place address slots become display strings."""
from __future__ import annotations
import os
from typing import Any, Dict, List

from ..constants import PLANE_ORDER
from ..parsers.params import params_to_dict
from ..types import Plan, ServerInfo, StorageCluster, VmInfo


def server_to_dict(server: ServerInfo) -> Dict[str, Any]:
    return {
        "hostname": server.hostname,
        "role": server.role.value,
        "mngIp": server.mng_ip.display(),
        "bizIp": server.biz_ip.display(),
        "pubIp": server.pub_ip.display(),
        "cluIp": server.clu_ip.display(),
        "specs": {
            "cpu": server.specs.cpu,
            "memory": server.specs.memory,
            "storage": server.specs.storage,
            "network": server.specs.network,
        },
        "isFloating": server.is_floating,
    }


def vm_to_dict(vm: VmInfo) -> Dict[str, Any]:
    return {
        "name": vm.name,
        "type": vm.vm_type,
        "purpose": vm.purpose,
        "mngIp": vm.mng_ip.display(),
        "bizIp": vm.biz_ip.display(),
        "cagIp": vm.cag_ip.display(),
        "spec": vm.spec,
        "hostServer": vm.host_server,
        "isFloating": vm.is_floating,
    }


def cluster_to_dict(cluster: StorageCluster) -> Dict[str, Any]:
    return {
        "name": cluster.name,
        "nodeCount": cluster.node_count,
        "nodes": list(cluster.nodes),
        "pools": [
            {"pool": p.pool, "use": p.use, "replica": p.replica, "type": p.type}
            for p in cluster.pools
        ],
        "totalCapacity": cluster.total_capacity,
        "usableCapacity": cluster.usable_capacity,
        "redundancy": cluster.redundancy,
    }


def plan_to_dict(plan: Plan) -> Dict[str, Any]:
    """Serializable view of a plan using the legacy key names and sentinels."""
    usage = {
        plane.value: {
            "total": plan.usage_by_plane[plane].total,
            "used": plan.usage_by_plane[plane].used,
            "remaining": plan.usage_by_plane[plane].remaining,
            "utilization": plan.usage_report.details[plane].utilization,
        }
        for plane in PLANE_ORDER
    }
    requirements = {
        plane.value: {"server": pair.server, "vm": pair.vm, "total": pair.total}
        for plane, pair in plan.requirements.by_plane().items()
    }
    out: Dict[str, Any] = {
        "servers": [server_to_dict(s) for s in plan.servers],
        "vms": [vm_to_dict(v) for v in plan.vms],
        "storageClusters": [cluster_to_dict(c) for c in plan.storage_clusters],
        "usageByPlane": usage,
        "requirements": requirements,
        "warnings": list(plan.warnings),
        "recommendations": list(plan.recommendations),
        "stages": list(plan.stages),
    }
    if plan.storage_summary is not None:
        s = plan.storage_summary
        out["storageSummary"] = {
            "totalClusters": s.total_clusters,
            "totalNodes": s.total_nodes,
            "totalCapacity": s.total_capacity,
            "totalUsableCapacity": s.total_usable_capacity,
            "redundancyStrategy": s.redundancy_strategy,
        }
    if plan.params is not None:
        out["params"] = params_to_dict(plan.params)
    return out


def _table(headers: List[str], rows: List[List[str]]) -> List[str]:
    lines = ["| " + " | ".join(headers) + " |", "|" + "---|" * len(headers)]
    for row in rows:
        lines.append("| " + " | ".join(str(c) for c in row) + " |")
    return lines


def write_report(out_path: str, plan: Plan, title: str = "VDI Low-Level Design") -> str:
    """Write a Markdown report of the plan and return its path."""
    data = plan_to_dict(plan)
    lines: List[str] = []
    lines.append(f"# {title}")
    lines.append("")
    lines.append("## Summary")
    lines.append(f"- Servers: {len(plan.servers)}  |  VMs: {len(plan.vms)}  |  Storage clusters: {len(plan.storage_clusters)}")
    if plan.params is not None:
        lines.append(f"- Scene: {plan.params.scene.value}")
        lines.append(f"- Users: {plan.params.user_count}")
    lines.append("")

    lines.append("## Servers")
    lines.extend(_table(
        ["Hostname", "Role", "Management", "Business", "Storage public", "Storage cluster"],
        [[s["hostname"], s["role"], s["mngIp"], s["bizIp"], s["pubIp"], s["cluIp"]] for s in data["servers"]],
    ))
    lines.append("")

    lines.append("## Virtual Machines")
    lines.extend(_table(
        ["Name", "Type", "Management", "Business", "CAG", "Spec", "Host"],
        [[v["name"], v["type"], v["mngIp"], v["bizIp"], v["cagIp"], v["spec"], v["hostServer"]] for v in data["vms"]],
    ))
    lines.append("")

    lines.append("## Storage")
    for c in data["storageClusters"]:
        lines.append(f"### {c['name']}")
        lines.append(f"- Nodes ({c['nodeCount']}): {', '.join(c['nodes']) or '-'}")
        lines.append(f"- Capacity: {c['totalCapacity']} raw, {c['usableCapacity']} usable ({c['redundancy']})")
        for p in c["pools"]:
            lines.append(f"- Pool {p['pool']}: {p['use']} [{p['type']}, {p['replica']}]")
    if "storageSummary" in data:
        s = data["storageSummary"]
        lines.append(
            f"- Total: {s['totalNodes']} nodes, {s['totalCapacity']} raw, {s['totalUsableCapacity']} usable"
        )
    lines.append("")

    lines.append("## Address Usage")
    lines.extend(_table(
        ["Plane", "Total", "Used", "Remaining", "Utilization %"],
        [
            [plan.usage_report.details[p].name, u["total"], u["used"], u["remaining"], u["utilization"]]
            for p, u in zip(PLANE_ORDER, data["usageByPlane"].values())
        ],
    ))
    lines.append("")

    if plan.warnings:
        lines.append("## Warnings")
        for w in plan.warnings:
            lines.append(f"- {w}")
        lines.append("")
    if plan.recommendations:
        lines.append("## Recommendations")
        for r in plan.recommendations:
            lines.append(f"- {r}")
        lines.append("")

    parent = os.path.dirname(os.path.abspath(out_path))
    os.makedirs(parent, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))
    return out_path
