"""Read-only lookup of per-endpoint chain facts."""

from typing import Dict, Optional, Tuple

from .addresses import is_unusable, is_well_formed
from .models import (
    ContractPoint,
    EnforcedOption,
    Endpoint,
    LookupSource,
    ProfileSet,
    Resolved,
)

DEFAULT_CONFIRMATIONS = 15


class ConfigurationError(ValueError):
    """Raised when static configuration is missing or malformed."""


class ChainRegistry:
    """Pure lookups over one profile set; never mutates."""

    def __init__(self, profile_set: ProfileSet) -> None:
        _validate_profile_set(profile_set)
        self._profile_set = profile_set
        self._endpoints: Dict[int, Endpoint] = {item.eid: item for item in profile_set.endpoints}
        self._confirmations = dict(profile_set.confirmations)
        self._required = dict(profile_set.required_validators)
        self._enforced = dict(profile_set.enforced_options)
        self._owners = dict(profile_set.owners)
        self._token_contracts = dict(profile_set.token_contracts)

    @property
    def name(self) -> str:
        return self._profile_set.name

    @property
    def profile_set(self) -> ProfileSet:
        return self._profile_set

    @property
    def optional_threshold(self) -> int:
        return self._profile_set.optional_threshold

    @property
    def endpoints(self) -> Tuple[Endpoint, ...]:
        return self._profile_set.endpoints

    @property
    def contracts(self) -> Tuple[ContractPoint, ...]:
        return self._profile_set.contracts

    def endpoint(self, eid: int) -> Endpoint:
        try:
            return self._endpoints[eid]
        except KeyError:
            raise ConfigurationError(
                f"Endpoint {eid} is not registered in profile set {self.name}"
            ) from None

    def required_validators(self, eid: int) -> Tuple[str, ...]:
        self.endpoint(eid)
        return self._required.get(eid, ())

    def optional_validators(self, eid: int) -> Tuple[str, ...]:
        self.endpoint(eid)
        addresses = []
        seen = set()
        for candidate in self._profile_set.validator_pool:
            address = candidate.address_for(eid)
            if address and address.lower() not in seen:
                seen.add(address.lower())
                addresses.append(address)
        return tuple(addresses)

    def resolve_confirmations(self, eid: int) -> Resolved[int]:
        self.endpoint(eid)
        if eid in self._confirmations:
            return Resolved(self._confirmations[eid], LookupSource.OVERRIDE)
        return Resolved(self._profile_set.default_confirmations, LookupSource.DEFAULT)

    def confirmations(self, eid: int) -> int:
        return self.resolve_confirmations(eid).value

    def resolve_enforced_options(self, eid: int) -> Resolved[Tuple[EnforcedOption, ...]]:
        self.endpoint(eid)
        if eid in self._enforced:
            return Resolved(self._enforced[eid], LookupSource.OVERRIDE)
        return Resolved(self._profile_set.default_enforced_options, LookupSource.DEFAULT)

    def enforced_options(self, eid: int) -> Tuple[EnforcedOption, ...]:
        return self.resolve_enforced_options(eid).value

    def owner_address(self, eid: int) -> str:
        self.endpoint(eid)
        address = self._owners.get(eid, "")
        if is_unusable(address):
            raise ConfigurationError(f"Owner address not configured for endpoint {eid}")
        if not is_well_formed(address):
            raise ConfigurationError(
                f"Owner address for endpoint {eid} is malformed: {address!r}"
            )
        return address

    def token_contract(self, eid: int) -> Optional[str]:
        """Name of the token contract deployed on ``eid``, if one is mapped."""
        self.endpoint(eid)
        return self._token_contracts.get(eid) or None


def _validate_profile_set(profile_set: ProfileSet) -> None:
    seen = set()
    for endpoint in profile_set.endpoints:
        if endpoint.eid in seen:
            raise ConfigurationError(f"Duplicate endpoint {endpoint.eid} in {profile_set.name}")
        seen.add(endpoint.eid)

    if profile_set.default_confirmations < 0:
        raise ConfigurationError("Default confirmations must be non-negative.")
    for eid, depth in profile_set.confirmations:
        if eid not in seen:
            raise ConfigurationError(f"Confirmations set for unknown endpoint {eid}")
        if depth < 0:
            raise ConfigurationError(f"Confirmations for endpoint {eid} must be non-negative.")

    for option in profile_set.default_enforced_options:
        _validate_option(option)
    for eid, options in profile_set.enforced_options:
        if eid not in seen:
            raise ConfigurationError(f"Enforced options set for unknown endpoint {eid}")
        for option in options:
            _validate_option(option)

    for candidate in profile_set.validator_pool:
        for eid, address in candidate.addresses:
            # An empty address means the validator does not serve that endpoint.
            if address:
                _validate_validator_address(candidate.name, eid, address)
    for eid, addresses in profile_set.required_validators:
        if eid not in seen:
            raise ConfigurationError(f"Required validators set for unknown endpoint {eid}")
        for address in addresses:
            _validate_validator_address("required", eid, address)

    for contract in profile_set.contracts:
        if contract.eid not in seen:
            raise ConfigurationError(
                f"Contract {contract.contract_name} bound to unknown endpoint {contract.eid}"
            )


def _validate_validator_address(name: str, eid: int, address: str) -> None:
    if is_unusable(address) or not is_well_formed(address):
        raise ConfigurationError(
            f"Validator {name} address for endpoint {eid} is not usable: {address!r}"
        )


def _validate_option(option: EnforcedOption) -> None:
    if option.gas <= 0:
        raise ConfigurationError(f"Enforced option gas must be positive (msg_type {option.msg_type}).")
    if option.value < 0:
        raise ConfigurationError(f"Enforced option value must be non-negative (msg_type {option.msg_type}).")
