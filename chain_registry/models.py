"""Domain models for the static chain registry."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


class ExecutorOptionType(Enum):
    LZ_RECEIVE = 1
    NATIVE_DROP = 2
    LZ_COMPOSE = 3
    ORDERED_EXECUTION = 4


class LookupSource(Enum):
    OVERRIDE = "OVERRIDE"
    DEFAULT = "DEFAULT"


@dataclass(frozen=True)
class Resolved(Generic[T]):
    """A looked-up value tagged with where it came from."""

    value: T
    source: LookupSource

    @property
    def is_default(self) -> bool:
        return self.source == LookupSource.DEFAULT


@dataclass(frozen=True)
class Endpoint:
    eid: int
    name: str


@dataclass(frozen=True)
class EnforcedOption:
    msg_type: int
    option_type: ExecutorOptionType
    gas: int
    value: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "msg_type": self.msg_type,
            "option_type": self.option_type.name,
            "gas": self.gas,
            "value": self.value,
        }


@dataclass(frozen=True)
class ValidatorCandidate:
    """A named validator with one address per endpoint it serves."""

    name: str
    addresses: Tuple[Tuple[int, str], ...]

    def address_for(self, eid: int) -> Optional[str]:
        for candidate_eid, address in self.addresses:
            if candidate_eid == eid and address:
                return address
        return None


@dataclass(frozen=True)
class ContractPoint:
    """A contract identity bound to one endpoint."""

    eid: int
    contract_name: str

    def to_dict(self) -> Dict[str, object]:
        return {"eid": self.eid, "contract_name": self.contract_name}


@dataclass(frozen=True)
class ProfileSet:
    """Every per-endpoint fact for one network family (testnet, mainnet...)."""

    name: str
    endpoints: Tuple[Endpoint, ...]
    validator_pool: Tuple[ValidatorCandidate, ...]
    optional_threshold: int
    default_confirmations: int
    default_enforced_options: Tuple[EnforcedOption, ...]
    confirmations: Tuple[Tuple[int, int], ...] = ()
    required_validators: Tuple[Tuple[int, Tuple[str, ...]], ...] = ()
    enforced_options: Tuple[Tuple[int, Tuple[EnforcedOption, ...]], ...] = ()
    owners: Tuple[Tuple[int, str], ...] = ()
    contracts: Tuple[ContractPoint, ...] = ()
    token_contracts: Tuple[Tuple[int, str], ...] = ()


@dataclass(frozen=True)
class SecurityStackConfig:
    required_validators: Tuple[str, ...]
    optional_validators: Tuple[str, ...]
    optional_threshold: int
    confirmations: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "confirmations": self.confirmations,
            "required_validators": list(self.required_validators),
            "optional_validators": list(self.optional_validators),
            "optional_threshold": self.optional_threshold,
        }
