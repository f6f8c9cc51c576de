"""Address range specification parsing.

Accepted notations for a single specification:

- ``192.168.1.10``                   single address
- ``192.168.1.10-192.168.1.20``      dash range
- ``192.168.1.10-20``                shorthand dash range (last octet only)
- ``192.168.1.0/24``                 CIDR block, usable hosts only

A raw field may hold several specifications separated by any mix of ASCII or
full-width commas and semicolons, whitespace, tabs and newlines.

Two layers are exposed. The plain functions (`parse_specification`,
`parse_list`) never raise: a bad segment logs a warning and contributes no
addresses. The diagnostic layer (`strict=True`, `parse_list(collect_errors=
True)`, `validate_list`) reports every problem as a message instead.
"""
from __future__ import annotations
import ipaddress
import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

_OCTET_RE = re.compile(r"^(0|[1-9][0-9]{0,2})$")
_SEPARATOR_RE = re.compile(r"[,\s]+")
_PREFIX_LEN_RE = re.compile(r"[0-9]{1,2}")
_MAX_ADDRESS = (1 << 32) - 1


class IpRangeError(ValueError):
    """Base class for range specification errors."""

    def __init__(self, text: str, message: Optional[str] = None):
        self.text = text
        super().__init__(message or text)


class MalformedAddress(IpRangeError):
    def __init__(self, text: str):
        super().__init__(text, f"Malformed address: {text}")


class InvalidRangeFormat(IpRangeError):
    def __init__(self, text: str, reason: str = ""):
        self.reason = reason
        detail = f" ({reason})" if reason else ""
        super().__init__(text, f"Invalid address range: {text}{detail}")


class ReversedRange(IpRangeError):
    def __init__(self, text: str, start: str, end: str):
        self.start = start
        self.end = end
        super().__init__(
            text,
            f"Reversed address range: start address {start} is greater than end address {end}",
        )


class InvalidCidr(IpRangeError):
    def __init__(self, text: str, reason: str = ""):
        self.reason = reason
        detail = f" ({reason})" if reason else ""
        super().__init__(text, f"Invalid CIDR block: {text}{detail}")


class UnrecognizedSpecification(IpRangeError):
    def __init__(self, text: str):
        super().__init__(text, f"Unrecognized address format: {text}")


@dataclass
class ParseResult:
    addresses: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def is_valid_address(text: str) -> bool:
    parts = text.split(".")
    if len(parts) != 4:
        return False
    for part in parts:
        if not _OCTET_RE.match(part) or int(part) > 255:
            return False
    return True


def parse_address(text: str) -> str:
    """Return `text` if it is a dotted-quad address, else raise MalformedAddress.

    Octets must be decimal 0-255 without leading zeros ("01" is rejected even
    though it is numerically in range).
    """
    if not isinstance(text, str) or not is_valid_address(text):
        raise MalformedAddress(str(text))
    return text


def address_to_int(text: str) -> int:
    """Unsigned 32-bit value of an address (no sign wraparound above 128.0.0.0)."""
    return int(ipaddress.IPv4Address(parse_address(text)))


def int_to_address(value: int) -> str:
    if value < 0 or value > _MAX_ADDRESS:
        raise ValueError(f"address integer out of range: {value}")
    return str(ipaddress.IPv4Address(value))


def is_address_in_range(address: str, start: str, end: str) -> bool:
    value = address_to_int(address)
    return address_to_int(start) <= value <= address_to_int(end)


def expand_range(start: str, end: str) -> List[str]:
    """Expand two endpoints into every address between them, inclusive.

    A reversed or malformed pair yields an empty list and a warning.
    """
    try:
        start_int = address_to_int(start)
        end_int = address_to_int(end)
    except MalformedAddress as e:
        logger.warning("Cannot expand range %s-%s: %s", start, end, e)
        return []
    if start_int > end_int:
        logger.warning(
            "Reversed address range: start %s is greater than end %s; range will be empty",
            start, end,
        )
        return []
    return [int_to_address(n) for n in range(start_int, end_int + 1)]


def split_dash_range(text: str) -> Tuple[str, str]:
    """Split a dash range into full endpoints, expanding the shorthand form."""
    start, sep, end = text.partition("-")
    start = start.strip()
    end = end.strip()
    if not sep or not start or not end:
        raise InvalidRangeFormat(text, "expected start-end")
    if end.count(".") < 3:
        start_parts = start.split(".")
        if len(start_parts) != 4:
            raise InvalidRangeFormat(text, f"invalid start address {start}")
        end = ".".join(start_parts[:3] + [end])
    if not is_valid_address(start):
        raise InvalidRangeFormat(text, f"invalid start address {start}")
    if not is_valid_address(end):
        raise InvalidRangeFormat(text, f"invalid end address {end}")
    return start, end


def parse_dash_range(text: str, strict: bool = False) -> List[str]:
    start, end = split_dash_range(text)
    if strict and address_to_int(start) > address_to_int(end):
        raise ReversedRange(text, start, end)
    return expand_range(start, end)


def parse_cidr_block(text: str) -> List[str]:
    """Usable host addresses of a CIDR block.

    Network and broadcast addresses are excluded, so /31 and /32 yield nothing.
    """
    base, sep, length_text = text.partition("/")
    base = base.strip()
    length_text = length_text.strip()
    if not sep or not _PREFIX_LEN_RE.fullmatch(length_text):
        raise InvalidCidr(text, "prefix length must be an integer")
    prefix_len = int(length_text)
    if prefix_len < 0 or prefix_len > 32:
        raise InvalidCidr(text, "prefix length must be between 0 and 32")
    if not is_valid_address(base):
        raise InvalidCidr(text, f"invalid base address {base}")
    net = ipaddress.IPv4Network(f"{base}/{prefix_len}", strict=False)
    first = int(net.network_address) + 1
    last = int(net.broadcast_address) - 1
    return [int_to_address(n) for n in range(first, last + 1)]


def parse_specification(text: str, strict: bool = False) -> List[str]:
    """Expand one specification (CIDR, dash range or single address).

    In the default mode every failure is logged and yields an empty list. With
    `strict` the specific IpRangeError is raised instead.
    """
    seg = (text or "").strip()
    try:
        if "/" in seg:
            return parse_cidr_block(seg)
        if "-" in seg:
            return parse_dash_range(seg, strict=strict)
        if is_valid_address(seg):
            return [seg]
        raise UnrecognizedSpecification(seg)
    except IpRangeError as e:
        if strict:
            raise
        logger.warning("Ignoring address specification %r: %s", seg, e)
        return []


def normalize_separators(text: str) -> str:
    normalized = text.replace("；", ";").replace("，", ",")
    normalized = _SEPARATOR_RE.sub(";", normalized)
    normalized = re.sub(r";+", ";", normalized)
    return normalized.strip(";")


def split_specifications(text: Optional[str]) -> List[str]:
    if not text or not isinstance(text, str):
        return []
    normalized = normalize_separators(text)
    if not normalized:
        return []
    return [seg.strip() for seg in normalized.split(";") if seg.strip()]


def _segment_error(seg: str) -> Tuple[List[str], Optional[str]]:
    try:
        addresses = parse_specification(seg, strict=True)
    except IpRangeError as e:
        return [], str(e)
    if not addresses:
        return [], f"Address specification yields no usable addresses: {seg}"
    return addresses, None


def parse_list(text: Optional[str], collect_errors: bool = False) -> Union[List[str], ParseResult]:
    """Parse a free-text field holding any number of specifications.

    Each segment is parsed on its own; one malformed segment never stops the
    rest. With `collect_errors` a ParseResult with one message per failing
    segment is returned instead of the bare address list.
    """
    segments = split_specifications(text)
    if not collect_errors:
        addresses: List[str] = []
        for seg in segments:
            addresses.extend(parse_specification(seg))
        return addresses

    return _collect(segments)


def _collect(segments: List[str]) -> ParseResult:
    result = ParseResult()
    for seg in segments:
        addresses, error = _segment_error(seg)
        if error:
            result.errors.append(error)
        else:
            result.addresses.extend(addresses)
    return result


def find_duplicates(addresses: List[str]) -> List[str]:
    """One message per distinct address that occurs more than once, in first-seen order."""
    counts = Counter(addresses)
    return [
        f"Duplicate address: {addr} occurs {n} times; check for overlapping ranges"
        for addr, n in counts.items()
        if n > 1
    ]


def validate_list(text: Optional[str]) -> ParseResult:
    result = _collect(split_specifications(text))
    result.errors.extend(find_duplicates(result.addresses))
    return result
