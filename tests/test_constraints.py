import pytest

from vdi_lld_gen.types import InsightDeployType, NetworkScene, PlanParams
from vdi_lld_gen.planning.constraints import (
    ConstraintViolation,
    enforce_params,
    validate_params,
)


def test_defaults_with_three_fusion_servers_are_valid():
    assert validate_params(PlanParams(count_fusion=3)) == []


def test_default_bag_fails_ceph_minimum():
    msgs = validate_params(PlanParams())
    assert len(msgs) == 1
    assert "Ceph minimum" in msgs[0]


def test_scene_and_network_flag_must_agree():
    msgs = validate_params(PlanParams(count_fusion=3, is_net_combined=False))
    assert any("cannot use the combined network scene" in m for m in msgs)
    msgs = validate_params(PlanParams(count_fusion=3, scene=NetworkScene.TRIPLE_ISOLATED))
    assert any("require the combined network scene" in m for m in msgs)


def test_option_dependencies():
    msgs = validate_params(PlanParams(count_fusion=3, deploy_terminal_mgmt=True, is_ceph_dual=True))
    assert any("Terminal management" in m for m in msgs)
    assert any("Ceph management dual node" in m for m in msgs)


def test_large_user_count_requires_ha_insight():
    params = PlanParams(count_fusion=3, user_count=6000, insight_deploy_type=InsightDeployType.STANDALONE)
    assert any("highly available" in m for m in validate_params(params))
    ok = PlanParams(count_fusion=3, user_count=6000, insight_deploy_type=InsightDeployType.HA)
    assert validate_params(ok) == []


def test_server_count_rules():
    assert any("at least 2 management" in m for m in validate_params(PlanParams(count_fusion=3, is_dual_node=True)))
    assert any("At least 1 management" in m for m in validate_params(PlanParams(count_fusion=3, count_mng=0)))
    assert any("compute servers" in m for m in validate_params(PlanParams(count_fusion=3, count_calc=1)))
    # management servers count toward the Ceph minimum when they act as fusion nodes
    assert validate_params(PlanParams(count_mng=2, count_fusion=1, is_mng_as_fusion=True)) == []


def test_separated_mode_rules():
    params = PlanParams(is_fusion_node=False, count_fusion=1, count_stor=2, is_mng_as_fusion=True)
    msgs = validate_params(params)
    assert any("storage servers" in m for m in msgs)
    assert any("hyper-converged servers" in m for m in msgs)
    assert any("cannot act as hyper-converged" in m for m in msgs)


def test_user_count_bounds():
    assert validate_params(PlanParams(count_fusion=3, user_count=0))
    assert validate_params(PlanParams(count_fusion=3, user_count=50001))
    assert validate_params(PlanParams(count_fusion=3, user_count=50000)) == []


def test_enforce_raises_with_all_messages():
    with pytest.raises(ConstraintViolation) as exc:
        enforce_params(PlanParams(count_mng=0, user_count=0))
    assert exc.value.code == "INVALID_PARAMS"
    assert len(exc.value.messages) == 3
    assert str(exc.value) == "\n".join(exc.value.messages)
