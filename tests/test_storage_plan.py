from vdi_lld_gen.types import PlanParams, StorageSecurity
from vdi_lld_gen.planning.server_plan import generate_all_servers
from vdi_lld_gen.planning.storage_plan import (
    DESKTOP_CLUSTER_NAME,
    MANAGEMENT_CLUSTER_NAME,
    generate_storage_plan,
)
from vdi_lld_gen.utils.allocators import IpManager


def _plan(params):
    servers = generate_all_servers(params, IpManager.from_params(params))
    return generate_storage_plan(params, servers)


def test_fusion_cluster_holds_function_and_desktop_pools():
    plan = _plan(PlanParams(count_fusion=3))
    (cluster,) = plan.clusters
    assert cluster.name == DESKTOP_CLUSTER_NAME
    assert cluster.nodes == ("ZXVE01", "ZXVE02", "ZXVE03")
    assert [p.pool for p in cluster.pools] == [
        "SSDPOOL_FUNCVM01",
        "SSDPOOL_FUNCVM02",
        "SSDPOOL_DESKTOP01",
        "HDDPOOL_DESKTOP01",
    ]
    assert all(p.replica == "raid1" for p in cluster.pools)
    assert cluster.total_capacity == "24TB"
    assert cluster.usable_capacity == "12.0TB"
    assert cluster.redundancy == "2 replicas"


def test_management_as_fusion_splits_clusters():
    params = PlanParams(count_mng=2, count_fusion=2, is_mng_as_fusion=True, has_hdd=False)
    plan = _plan(params)
    assert [c.name for c in plan.clusters] == [MANAGEMENT_CLUSTER_NAME, DESKTOP_CLUSTER_NAME]
    mng, desktop = plan.clusters
    assert mng.nodes == ("VMC01", "VMC02")
    assert [p.pool for p in desktop.pools] == ["SSDPOOL_DESKTOP01"]
    assert plan.summary.total_nodes == 4
    assert plan.summary.total_capacity == "32TB"


def test_separated_mode_uses_storage_servers_and_ec_ratio():
    params = PlanParams(
        is_fusion_node=False,
        count_calc=2,
        count_stor=3,
        storage_security=StorageSecurity.EC,
    )
    plan = _plan(params)
    (cluster,) = plan.clusters
    assert cluster.nodes == ("STG01", "STG02", "STG03")
    assert cluster.usable_capacity == "16.1TB"
    assert cluster.redundancy == "4+2 erasure coding"
    assert plan.summary.redundancy_strategy == "ec"


def test_warnings_and_recommendations():
    plan = _plan(PlanParams(count_fusion=2, user_count=20000))
    assert any("at least 3 nodes" in w for w in plan.warnings)
    assert plan.recommendations[0].startswith("Large user count")
    assert plan.recommendations[-1] == "Configure redundant links on the storage networks"

    plan = _plan(PlanParams(count_fusion=8))
    assert plan.warnings == ()
    assert any("consider erasure coding" in r for r in plan.recommendations)
