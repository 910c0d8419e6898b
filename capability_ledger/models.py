"""Capability ledger models for targets, operations and settlements."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from chain_registry.models import Endpoint

DEFAULT_ADMIN_ROLE = "0x" + "00" * 32


class CapabilityKind(Enum):
    ADMIN_ROLE = "ADMIN_ROLE"
    OWNERSHIP = "OWNERSHIP"


class OperationKind(Enum):
    GRANT = "GRANT"
    REVOKE = "REVOKE"
    TRANSFER_OWNERSHIP = "TRANSFER_OWNERSHIP"


class SettlementStatus(Enum):
    SETTLED = "SETTLED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class CapabilityTarget:
    """One contract capability whose control is being migrated."""

    kind: CapabilityKind
    endpoint: Endpoint
    contract_address: str
    capability_id: Optional[str] = None
    proxy_address: Optional[str] = None

    def describe(self) -> str:
        if self.kind == CapabilityKind.ADMIN_ROLE:
            return (
                f"role {self.capability_id} on {self.contract_address} "
                f"({self.endpoint.name})"
            )
        return f"ownership of {self.contract_address} ({self.endpoint.name})"

    def to_dict(self) -> Dict[str, object]:
        return {
            "kind": self.kind.value,
            "eid": self.endpoint.eid,
            "endpoint": self.endpoint.name,
            "contract_address": self.contract_address,
            "capability_id": self.capability_id,
            "proxy_address": self.proxy_address,
        }


@dataclass(frozen=True)
class OperationHandle:
    operation_id: str
    kind: OperationKind
    holder: str
    capability_id: Optional[str] = None


@dataclass(frozen=True)
class Settlement:
    operation_id: str
    status: SettlementStatus
    gas_used: int = 0
    notes: Tuple[str, ...] = ()

    @property
    def settled(self) -> bool:
        return self.status == SettlementStatus.SETTLED
