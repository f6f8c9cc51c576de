import logging

import pytest

from vdi_lld_gen.parsers.ip_ranges import (
    InvalidCidr,
    InvalidRangeFormat,
    ReversedRange,
    UnrecognizedSpecification,
    address_to_int,
    expand_range,
    int_to_address,
    is_address_in_range,
    is_valid_address,
    parse_dash_range,
    parse_list,
    parse_specification,
    split_specifications,
    validate_list,
)


def test_is_valid_address_rejects_leading_zeros_and_large_octets():
    assert is_valid_address("192.168.1.1")
    assert is_valid_address("0.0.0.0")
    assert not is_valid_address("192.168.01.1")
    assert not is_valid_address("256.1.1.1")
    assert not is_valid_address("1.2.3")
    assert not is_valid_address("a.b.c.d")


def test_address_integer_conversion_is_unsigned_above_128():
    assert address_to_int("128.0.0.0") == 2 ** 31
    assert int_to_address(2 ** 31) == "128.0.0.0"
    assert address_to_int("255.255.255.255") == 2 ** 32 - 1
    with pytest.raises(ValueError):
        int_to_address(2 ** 32)


def test_expand_range_crosses_sign_boundary():
    assert expand_range("127.255.255.254", "128.0.0.1") == [
        "127.255.255.254",
        "127.255.255.255",
        "128.0.0.0",
        "128.0.0.1",
    ]


def test_expand_range_reversed_is_empty_with_warning(caplog):
    caplog.set_level(logging.WARNING)
    assert expand_range("10.0.0.5", "10.0.0.1") == []
    assert "Reversed" in caplog.text


def test_shorthand_dash_range_reuses_start_prefix():
    assert parse_specification("10.0.0.1-3") == ["10.0.0.1", "10.0.0.2", "10.0.0.3"]


def test_cidr_excludes_network_and_broadcast():
    addrs = parse_specification("192.168.10.0/30")
    assert addrs == ["192.168.10.1", "192.168.10.2"]
    assert parse_specification("192.168.10.0/24")[0] == "192.168.10.1"
    assert len(parse_specification("192.168.10.0/24")) == 254
    assert parse_specification("10.0.0.1/32") == []


def test_strict_errors_are_specific():
    with pytest.raises(ReversedRange):
        parse_specification("10.0.0.9-10.0.0.1", strict=True)
    with pytest.raises(InvalidCidr):
        parse_specification("10.0.0.0/33", strict=True)
    with pytest.raises(InvalidRangeFormat):
        parse_specification("10.0.0.1-10.0.0.x", strict=True)
    with pytest.raises(UnrecognizedSpecification):
        parse_specification("hello", strict=True)


def test_non_strict_specification_never_raises():
    assert parse_specification("garbage") == []
    assert parse_specification("10.0.0.9-10.0.0.1") == []


def test_mixed_separators_give_five_segments():
    text = "10.0.0.1;10.0.0.2，10.0.0.3\n10.0.0.4\t10.0.0.5"
    assert split_specifications(text) == [
        "10.0.0.1",
        "10.0.0.2",
        "10.0.0.3",
        "10.0.0.4",
        "10.0.0.5",
    ]
    assert len(parse_list(text)) == 5


def test_full_width_semicolon_and_repeated_separators():
    assert split_specifications(";;10.0.0.1 ；  10.0.0.2,,") == ["10.0.0.1", "10.0.0.2"]
    assert split_specifications("") == []
    assert split_specifications(None) == []


def test_parse_list_keeps_good_segments_when_one_fails():
    result = parse_list("10.0.0.1-2;bogus;10.0.1.0/30", collect_errors=True)
    assert result.addresses == ["10.0.0.1", "10.0.0.2", "10.0.1.1", "10.0.1.2"]
    assert len(result.errors) == 1
    assert "bogus" in result.errors[0]


def test_empty_yield_segment_is_reported():
    result = validate_list("10.0.0.1/32")
    assert result.addresses == []
    assert result.errors == ["Address specification yields no usable addresses: 10.0.0.1/32"]


def test_validate_list_reports_each_duplicate_once():
    result = validate_list("192.168.1.10-192.168.1.13;192.168.1.10-192.168.1.12")
    assert len(result.addresses) == 7
    dup_errors = [e for e in result.errors if e.startswith("Duplicate address")]
    assert len(dup_errors) == 3
    for addr in ("192.168.1.10", "192.168.1.11", "192.168.1.12"):
        assert any(addr in e for e in dup_errors)


def test_is_address_in_range_inclusive():
    assert is_address_in_range("10.0.0.1", "10.0.0.1", "10.0.0.5")
    assert is_address_in_range("10.0.0.5", "10.0.0.1", "10.0.0.5")
    assert not is_address_in_range("10.0.0.6", "10.0.0.1", "10.0.0.5")


def test_non_ascii_prefix_length_is_a_collected_cidr_error():
    assert parse_specification("10.0.0.0/²") == []
    with pytest.raises(InvalidCidr):
        parse_specification("10.0.0.0/²", strict=True)
    assert parse_list("10.0.0.1;10.0.0.0/²") == ["10.0.0.1"]
    result = validate_list("10.0.0.1;10.0.0.0/²")
    assert result.addresses == ["10.0.0.1"]
    assert len(result.errors) == 1
    assert "10.0.0.0/²" in result.errors[0]


def test_reversed_range_error_names_both_endpoints():
    result = validate_list("10.0.0.9-10.0.0.1")
    assert result.addresses == []
    assert len(result.errors) == 1
    assert "10.0.0.9" in result.errors[0]
    assert "10.0.0.1" in result.errors[0]


@pytest.mark.parametrize("prefix_len", [16, 20, 24, 28, 29, 30])
def test_cidr_host_count(prefix_len):
    addrs = parse_specification(f"10.0.0.0/{prefix_len}")
    assert len(addrs) == 2 ** (32 - prefix_len) - 2
    assert addrs[0] == "10.0.0.1"


@pytest.mark.parametrize("spec", ["10.0.0.0/31", "10.0.0.0/32"])
def test_point_to_point_blocks_yield_nothing(spec):
    assert parse_specification(spec) == []
    assert validate_list(spec).errors == [f"Address specification yields no usable addresses: {spec}"]


@pytest.mark.parametrize(
    "start, end",
    [
        ("192.168.1.1", "192.168.1.1"),
        ("192.168.1.250", "192.168.2.5"),
        ("127.255.255.250", "128.0.0.3"),
        ("10.0.0.0", "10.0.3.255"),
    ],
)
def test_dash_range_is_inclusive(start, end):
    addrs = parse_dash_range(f"{start}-{end}")
    assert len(addrs) == address_to_int(end) - address_to_int(start) + 1
    assert addrs[0] == start
    assert addrs[-1] == end
