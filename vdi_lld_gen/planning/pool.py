from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..constants import Plane
from ..parsers.ip_ranges import validate_list


@dataclass(frozen=True)
class AddressPool:
    """Ordered, immutable addresses of one plane, built once per planning run."""

    plane: Plane
    addresses: Tuple[str, ...] = ()

    @classmethod
    def empty(cls, plane: Plane) -> "AddressPool":
        return cls(plane, ())

    def __len__(self) -> int:
        return len(self.addresses)

    def at(self, index: int) -> Optional[str]:
        if 0 <= index < len(self.addresses):
            return self.addresses[index]
        return None


def build_pool(plane: Plane, text: Optional[str]) -> Tuple[AddressPool, List[str]]:
    """Parse a raw range field into a pool plus its diagnostic messages.

    Addresses from valid segments are kept even when other segments fail.
    """
    result = validate_list(text)
    return AddressPool(plane, tuple(result.addresses)), list(result.errors)
