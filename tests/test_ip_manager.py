from vdi_lld_gen.constants import Plane
from vdi_lld_gen.types import AddressSlot, RequirementPair
from vdi_lld_gen.utils.allocators import IpManager


def _manager(mng="10.0.0.1-10.0.0.3", biz="", pub="", clu="", combined=False):
    return IpManager(mng, biz, pub, clu, net_combined=combined)


def test_sequential_draw_then_pending_after_exhaustion():
    m = _manager()
    slots = [m.get_next_address(Plane.MANAGEMENT) for _ in range(5)]
    assert [s.display() for s in slots[:3]] == ["10.0.0.1", "10.0.0.2", "10.0.0.3"]
    assert slots[3] == AddressSlot.PENDING
    assert slots[4] == AddressSlot.PENDING
    assert m.cursor(Plane.MANAGEMENT) == 5
    usage = m.get_usage(Plane.MANAGEMENT)
    assert (usage.total, usage.used, usage.remaining) == (3, 5, -2)


def test_empty_pool_still_advances_cursor():
    m = _manager(mng="")
    for expected in range(1, 4):
        assert m.get_next_address("management") is AddressSlot.PENDING
        assert m.cursor(Plane.MANAGEMENT) == expected
    assert not m.has_validation_errors()


def test_unknown_plane_returns_pending_without_cursor():
    m = _manager()
    assert m.get_next_address("backup") is AddressSlot.PENDING
    assert all(m.cursor(p) == 0 for p in Plane)
    assert m.get_usage("backup").total == 0


def test_combined_mode_ignores_business_text():
    m = _manager(biz="definitely not an address", combined=True)
    assert len(m.pools[Plane.BUSINESS]) == 0
    assert not m.has_validation_errors()
    assert m.get_next_address(Plane.BUSINESS) is AddressSlot.PENDING


def test_validation_errors_are_per_plane():
    m = _manager(mng="10.0.0.1;oops", pub="10.1.0.9-10.1.0.1")
    errors = m.get_validation_errors()
    assert len(errors) == 2
    assert errors[0].startswith("Management network range errors:")
    assert errors[1].startswith("Storage public network range errors:")
    assert len(m.pools[Plane.MANAGEMENT]) == 1


def test_allocate_many_composes_with_cursor():
    m = _manager()
    first = m.get_next_address(Plane.MANAGEMENT)
    rest = m.allocate_many(Plane.MANAGEMENT, 4)
    assert first.address == "10.0.0.1"
    assert len(rest) == 4
    assert [s.address for s in rest[:2]] == ["10.0.0.2", "10.0.0.3"]
    assert m.cursor(Plane.MANAGEMENT) == 5


def test_peek_and_reset():
    m = _manager()
    assert m.peek_range(Plane.MANAGEMENT, 1, 5) == ["10.0.0.2", "10.0.0.3"]
    assert m.peek_range(Plane.MANAGEMENT, 9, 1) == []
    m.allocate_many(Plane.MANAGEMENT, 2)
    m.reset_counter(Plane.MANAGEMENT)
    assert m.cursor(Plane.MANAGEMENT) == 0
    m.allocate_many(Plane.STORAGE_PUBLIC, 2)
    m.reset_all_counters()
    assert m.cursor(Plane.STORAGE_PUBLIC) == 0


def test_identical_managers_draw_identical_sequences():
    a = _manager(mng="10.0.0.0/29", clu="172.16.0.1-5")
    b = _manager(mng="10.0.0.0/29", clu="172.16.0.1-5")
    order = [Plane.MANAGEMENT, Plane.STORAGE_CLUSTER, Plane.MANAGEMENT, "bogus", Plane.STORAGE_CLUSTER]
    assert [a.get_next_address(p) for p in order] == [b.get_next_address(p) for p in order]


def test_check_sufficiency_accepts_counts_and_pairs():
    m = _manager()
    warnings = m.check_sufficiency({
        Plane.MANAGEMENT: RequirementPair(server=2, vm=2),
        "storagePublic": {"server": 1, "vm": 0},
        Plane.STORAGE_CLUSTER: 0,
        "unknown": 5,
        Plane.BUSINESS: "not a number",
    })
    assert warnings == [
        "Management network has insufficient addresses: 4 required, 3 available",
        "Storage public network has insufficient addresses: 1 required, 0 available",
    ]


def test_usage_report_warnings_can_both_fire():
    m = _manager(mng="10.0.0.1-10.0.0.10")
    m.allocate_many(Plane.MANAGEMENT, 10)
    report = m.generate_usage_report()
    detail = report.details[Plane.MANAGEMENT]
    assert detail.utilization == 100.0
    assert "Management network utilization is high: 100.0%" in report.warnings
    assert "Management network has few addresses remaining: 0" in report.warnings


def test_usage_report_rounds_to_one_decimal_and_skips_empty_pools():
    m = _manager(mng="10.0.0.0/24")
    m.allocate_many(Plane.MANAGEMENT, 1)
    report = m.generate_usage_report()
    assert report.details[Plane.MANAGEMENT].utilization == 0.4
    assert report.details[Plane.BUSINESS].utilization == 0.0
    assert report.warnings == ()
