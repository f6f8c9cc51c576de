from vdi_lld_gen.constants import Plane
from vdi_lld_gen.types import (
    AddressSlot,
    DownloadType,
    InsightDeployType,
    NetworkScene,
    PlanParams,
)
from vdi_lld_gen.planning.vm_plan import (
    generate_all_vms,
    generate_base_vms,
    generate_cag_vms,
    optional_vm_templates,
)
from vdi_lld_gen.utils.allocators import IpManager


def test_base_vms_follow_scene_table_order():
    params = PlanParams(mng_ip_range="10.0.0.0/24")
    vms = generate_base_vms(params, IpManager.from_params(params))
    assert [v.name for v in vms][:2] == ["daisyseed01", "paas-controller-tcf1"]
    assert vms[-1].name == "UAS_FLOAT01"
    assert all(v.biz_ip is AddressSlot.NOT_APPLICABLE for v in vms)
    assert all(v.host_server == "待分配" for v in vms)


def test_business_access_scene_keeps_tcf_off_management():
    params = PlanParams(
        scene=NetworkScene.TRIPLE_ISOLATED,
        is_net_combined=False,
        mng_ip_range="10.0.0.0/24",
        biz_ip_range="10.1.0.0/24",
    )
    vms = generate_base_vms(params, IpManager.from_params(params))
    tcf = [v for v in vms if v.name.startswith("paas-controller-tcf")]
    assert len(tcf) == 3
    assert all(v.mng_ip is AddressSlot.NOT_APPLICABLE and v.biz_ip.is_concrete for v in tcf)


def test_vm_spec_tiers_follow_user_count():
    small = PlanParams(user_count=100)
    large = PlanParams(user_count=20000)
    ipm = IpManager()
    by_name = {v.name: v.spec for v in generate_base_vms(small, ipm)}
    assert by_name["paas-controller-tcf1"] == "24C48G, 600G+100G"
    assert by_name["UAS01"] == "4C6G, 100G"
    assert by_name["TCF_FLOAT01"] == "不涉及"
    by_name = {v.name: v.spec for v in generate_base_vms(large, ipm)}
    assert by_name["paas-controller-tcf1"] == "32C64G, 600G+100G"
    assert by_name["UAS01"] == "8C16G, 100G"


def test_cag_vms_combined_draw_two_management_addresses():
    params = PlanParams(count_cag=2, mng_ip_range="10.0.0.1-10.0.0.10")
    ipm = IpManager.from_params(params)
    vms = generate_cag_vms(params, ipm)
    assert [v.name for v in vms] == ["CAG01", "CAG02"]
    assert [v.mng_ip.address for v in vms] == ["10.0.0.1", "10.0.0.3"]
    assert [v.cag_ip.address for v in vms] == ["10.0.0.2", "10.0.0.4"]
    assert ipm.cursor(Plane.MANAGEMENT) == 4


def test_cag_vms_isolated_use_business_only():
    params = PlanParams(
        scene=NetworkScene.ISOLATED_OPS_VIA_BUSINESS,
        is_net_combined=False,
        count_cag=1,
        biz_ip_range="10.1.0.1-10.1.0.5",
    )
    ipm = IpManager.from_params(params)
    (vm,) = generate_cag_vms(params, ipm)
    assert vm.mng_ip is AddressSlot.NOT_APPLICABLE
    assert (vm.biz_ip.address, vm.cag_ip.address) == ("10.1.0.1", "10.1.0.2")
    assert ipm.cursor(Plane.MANAGEMENT) == 0


def test_optional_templates_order_and_counts():
    params = PlanParams(
        insight_deploy_type=InsightDeployType.HA,
        download_type=DownloadType.CLUSTER,
        is_zxops=True,
        deploy_terminal_mgmt=True,
        deploy_cag_portal=True,
        deploy_dem=True,
    )
    names = [t.name for t in optional_vm_templates(params)]
    assert names == [
        "Insight01",
        "Insight02",
        "Insight_FLOAT01",
        "ZXOPS01",
        "TerminalMgmt01",
        "CAGPortal01",
        "DEM01",
        "Download01",
        "Download02",
    ]
    assert [t.name for t in optional_vm_templates(PlanParams())] == []


def test_generate_all_vms_records_stages():
    params = PlanParams(insight_deploy_type=InsightDeployType.STANDALONE)
    log = []
    vms = generate_all_vms(params, IpManager(), log)
    assert log == ["vms.base", "vms.cag", "vms.optional"]
    assert vms[-1].name == "Insight01"
    assert vms[-1].mng_ip is AddressSlot.PENDING
