"""Deployment parameter loading and defaulting.

The parameter bag arrives either as a mapping from the form collector (legacy
camelCase keys such as ``countMng`` or ``mngIpRange``) or as a YAML/JSON file
on disk. Both are normalized onto `PlanParams`.
"""
from __future__ import annotations
import dataclasses
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple, Type

import yaml

from ..catalog import SCENE_LABELS
from ..constants import DEFAULT_PARAMS
from ..types import (
    DownloadType,
    InsightDeployType,
    NetworkScene,
    PlanParams,
    StorageSecurity,
)

logger = logging.getLogger(__name__)


class ParamsFileError(ValueError):
    pass


# Legacy form field names -> PlanParams field names
KEY_ALIASES: Dict[str, str] = {
    "prefixMng": "prefix_mng",
    "prefixFusion": "prefix_fusion",
    "prefixStor": "prefix_stor",
    "prefixCAG": "prefix_cag",
    "userCount": "user_count",
    "insightDeployType": "insight_deploy_type",
    "downloadType": "download_type",
    "storageSecurity": "storage_security",
    "countMng": "count_mng",
    "countFusion": "count_fusion",
    "countCalc": "count_calc",
    "countStor": "count_stor",
    "countCAG": "count_cag",
    "isNetCombined": "is_net_combined",
    "isDualNode": "is_dual_node",
    "isCephDual": "is_ceph_dual",
    "isFusionNode": "is_fusion_node",
    "isMngAsFusion": "is_mng_as_fusion",
    "alignFloatIp": "align_float_ip",
    "isZXOPS": "is_zxops",
    "deployTerminalMgmt": "deploy_terminal_mgmt",
    "deployCAGPortal": "deploy_cag_portal",
    "deployDEM": "deploy_dem",
    "hasHdd": "has_hdd",
    "mngIpRange": "mng_ip_range",
    "bizIpRange": "biz_ip_range",
    "pubIpRange": "pub_ip_range",
    "cluIpRange": "clu_ip_range",
}

# Legacy display labels accepted for enumerated choices
ENUM_LABELS: Dict[Type[Enum], Dict[str, Enum]] = {
    NetworkScene: {label: scene for scene, label in SCENE_LABELS.items()},
    InsightDeployType: {
        "否": InsightDeployType.NONE,
        "非高可用部署": InsightDeployType.STANDALONE,
        "高可用部署": InsightDeployType.HA,
    },
    DownloadType: {
        "否": DownloadType.NONE,
        "单机": DownloadType.SINGLE,
        "集群": DownloadType.CLUSTER,
    },
    StorageSecurity: {},
}

_ENUM_FIELDS: Dict[str, Type[Enum]] = {
    "scene": NetworkScene,
    "insight_deploy_type": InsightDeployType,
    "download_type": DownloadType,
    "storage_security": StorageSecurity,
}

_FIELD_TYPES: Dict[str, Any] = {f.name: f.type for f in dataclasses.fields(PlanParams)}


class InvalidChoice(ValueError):
    def __init__(self, field_name: str, value: Any, allowed: Tuple[str, ...]):
        self.field_name = field_name
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Invalid value {value!r} for {field_name}; expected one of: {', '.join(allowed)}"
        )


def coerce_enum(field_name: str, value: Any) -> Enum:
    enum_cls = _ENUM_FIELDS[field_name]
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    labels = ENUM_LABELS.get(enum_cls, {})
    if text in labels:
        return labels[text]
    try:
        return enum_cls(text.lower())
    except ValueError:
        allowed = tuple(m.value for m in enum_cls) + tuple(labels)
        raise InvalidChoice(field_name, value, allowed) from None


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on", "y")
    return bool(value)


def _coerce_int(field_name: str, value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{field_name} must be an integer, got {value!r}")
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        try:
            as_float = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"{field_name} must be an integer, got {value!r}") from None
        if not as_float.is_integer():
            raise ValueError(f"{field_name} must be an integer, got {value!r}")
        return int(as_float)


def _coerce_field(name: str, value: Any) -> Any:
    if name in _ENUM_FIELDS:
        return coerce_enum(name, value)
    field_type = _FIELD_TYPES[name]
    if field_type == "bool":
        return _coerce_bool(value)
    if field_type == "int":
        return _coerce_int(name, value)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        # YAML sequences of range specifications
        return ";".join(str(v).strip() for v in value if v is not None)
    return str(value)


def normalize_keys(raw: Mapping[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Split a raw bag into (known fields keyed by PlanParams name, unknown extras)."""
    known: Dict[str, Any] = {}
    extras: Dict[str, Any] = {}
    for key, value in (raw or {}).items():
        name = KEY_ALIASES.get(key, key)
        if name in _FIELD_TYPES:
            known[name] = value
        else:
            extras[key] = value
    if extras:
        logger.debug("Ignoring unknown parameter keys: %s", sorted(extras))
    return known, extras


def merge_with_defaults(raw: Mapping[str, Any] | None) -> PlanParams:
    """Overlay supplied parameters onto the built-in defaults.

    Raises ValueError (InvalidChoice for enumerations) for values that cannot
    be coerced to the field's type.
    """
    known, _ = normalize_keys(raw or {})
    merged = dict(DEFAULT_PARAMS)
    merged.update(known)
    values = {name: _coerce_field(name, value) for name, value in merged.items() if name in _FIELD_TYPES}
    return PlanParams(**values)


def params_to_dict(params: PlanParams) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for f in dataclasses.fields(params):
        value = getattr(params, f.name)
        out[f.name] = value.value if isinstance(value, Enum) else value
    return out


def load_params_file(path: str | Path) -> Dict[str, Any]:
    """Read a YAML (or JSON) parameter file; the top level must be a mapping."""
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ParamsFileError(f"Cannot read parameter file {p}: {e}") from e
    except yaml.YAMLError as e:
        raise ParamsFileError(f"Cannot parse parameter file {p}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParamsFileError(f"Parameter file {p} must contain a mapping at the top level")
    return data
