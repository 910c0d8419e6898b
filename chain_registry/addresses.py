"""Address helpers shared by the registry and the migration tooling."""

import re

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
PLACEHOLDER_ADDRESS = "TODO"

_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


def is_well_formed(address: str) -> bool:
    return bool(address) and _ADDRESS_PATTERN.match(address) is not None


def is_unusable(address: str) -> bool:
    """True for empty, placeholder and zero addresses."""

    if not address or address.strip() == PLACEHOLDER_ADDRESS:
        return True
    return address.lower() == ZERO_ADDRESS


def same_address(left: str, right: str) -> bool:
    # Checksum casing is not significant.
    return left.lower() == right.lower()
