"""Contract-state interface consumed by the migration tooling."""

from typing import Protocol

from .models import OperationHandle, Settlement


class LedgerError(RuntimeError):
    """Raised when a ledger operation cannot be submitted."""


class SettlementTimeout(LedgerError, TimeoutError):
    """Raised when a submitted operation does not settle in time."""


class CapabilityLedger(Protocol):
    def has_capability(self, capability_id: str, holder: str) -> bool:
        ...

    def current_owner(self) -> str:
        ...

    def proxy_admin_of(self, proxy_address: str) -> str:
        ...

    def grant(self, capability_id: str, holder: str) -> OperationHandle:
        ...

    def revoke(self, capability_id: str, holder: str) -> OperationHandle:
        ...

    def transfer_ownership(self, holder: str) -> OperationHandle:
        ...

    def await_settlement(self, handle: OperationHandle, timeout: float) -> Settlement:
        ...
