from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from .constants import PLANE_ORDER
from .parsers.params import ParamsFileError, load_params_file, merge_with_defaults
from .planning.orchestrator import generate_plan
from .planning.plan_validation import validate_plan
from .types import PlanError
from .utils.allocators import IpManager
from .utils.report import plan_to_dict, write_report

logger = logging.getLogger(__name__)


def _check_ranges(raw: Dict[str, Any]) -> int:
    """Validate only the four range fields and print per-plane counts."""
    try:
        params = merge_with_defaults(raw)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1
    manager = IpManager.from_params(params)
    summary = {
        "planes": {plane.value: len(manager.pools[plane]) for plane in PLANE_ORDER},
        "errors": manager.get_validation_errors(),
    }
    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 1 if manager.has_validation_errors() else 0


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Generate a VDI low-level design address plan")
    ap.add_argument("--params", required=True, help="Path to YAML/JSON deployment parameter file")
    ap.add_argument("--plan-output", help="Path to write the full plan JSON")
    ap.add_argument("--report", help="Path to write a Markdown report")
    ap.add_argument("--check-ranges", action="store_true", help="Only validate the address range fields and exit")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    try:
        raw = load_params_file(args.params)
    except ParamsFileError as e:
        logger.error("%s", e)
        return 2

    if args.check_ranges:
        return _check_ranges(raw)

    result = generate_plan(raw)
    if isinstance(result, PlanError):
        print(f"[{result.code}] {result.message}", file=sys.stderr)
        return 1

    for issue in validate_plan(result):
        logger.warning("Plan check: %s", issue)

    data = plan_to_dict(result)
    if args.plan_output:
        out_path = os.path.abspath(args.plan_output)
        os.makedirs(os.path.dirname(out_path), exist_ok=True)
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        logger.info("Wrote plan to %s", out_path)
    if args.report:
        write_report(args.report, result)
        logger.info("Wrote report to %s", args.report)

    summary = {
        "servers": len(result.servers),
        "vms": len(result.vms),
        "storage_clusters": len(result.storage_clusters),
        "usage": data["usageByPlane"],
        "warnings": list(result.warnings),
    }
    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
