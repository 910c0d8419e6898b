"""In-memory capability ledger for rehearsals and dry runs."""

from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from chain_registry.addresses import ZERO_ADDRESS, same_address

from .ledger import LedgerError, SettlementTimeout
from .models import OperationHandle, OperationKind, Settlement, SettlementStatus


class Fault(Enum):
    REJECT = "REJECT"  # submission raises
    REVERT = "REVERT"  # settles as failed
    TIMEOUT = "TIMEOUT"  # never settles
    UNOBSERVED = "UNOBSERVED"  # settles but state does not change


_DEFAULT_GAS_USED = 21_000


class InMemoryLedger:
    """Holds role and ownership state for a single contract.

    Mutations are applied when the operation settles, not when it is
    submitted. Faults queued with ``inject_fault`` apply to the next
    operation of the given kind.
    """

    def __init__(
        self,
        owner: str = ZERO_ADDRESS,
        roles: Optional[Mapping[str, Iterable[str]]] = None,
        proxy_admins: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._owner = owner
        self._roles: Dict[str, List[str]] = {
            role: list(holders) for role, holders in (roles or {}).items()
        }
        self._proxy_admins: Dict[str, str] = {
            proxy.lower(): admin for proxy, admin in (proxy_admins or {}).items()
        }
        self._faults: Dict[OperationKind, List[Fault]] = {}
        self._pending: Dict[str, Tuple[OperationHandle, Optional[Fault]]] = {}
        self._submitted: List[OperationHandle] = []

    @property
    def submitted(self) -> Tuple[OperationHandle, ...]:
        return tuple(self._submitted)

    def inject_fault(self, kind: OperationKind, fault: Fault) -> None:
        self._faults.setdefault(kind, []).append(fault)

    def has_capability(self, capability_id: str, holder: str) -> bool:
        return any(same_address(item, holder) for item in self._roles.get(capability_id, ()))

    def current_owner(self) -> str:
        return self._owner

    def proxy_admin_of(self, proxy_address: str) -> str:
        return self._proxy_admins.get(proxy_address.lower(), ZERO_ADDRESS)

    def grant(self, capability_id: str, holder: str) -> OperationHandle:
        return self._submit(OperationKind.GRANT, holder, capability_id)

    def revoke(self, capability_id: str, holder: str) -> OperationHandle:
        return self._submit(OperationKind.REVOKE, holder, capability_id)

    def transfer_ownership(self, holder: str) -> OperationHandle:
        return self._submit(OperationKind.TRANSFER_OWNERSHIP, holder)

    def await_settlement(self, handle: OperationHandle, timeout: float) -> Settlement:
        if handle.operation_id not in self._pending:
            raise LedgerError(f"Unknown or already settled operation {handle.operation_id}")
        _, fault = self._pending[handle.operation_id]

        if fault == Fault.TIMEOUT:
            raise SettlementTimeout(
                f"Operation {handle.operation_id} did not settle within {timeout:g}s"
            )

        del self._pending[handle.operation_id]

        if fault == Fault.REVERT:
            return Settlement(
                operation_id=handle.operation_id,
                status=SettlementStatus.FAILED,
                gas_used=_DEFAULT_GAS_USED,
                notes=("Operation reverted.",),
            )

        notes: Tuple[str, ...] = ()
        if fault == Fault.UNOBSERVED:
            notes = ("Settled without a state change.",)
        else:
            self._apply(handle)
            self._on_settled(handle)

        return Settlement(
            operation_id=handle.operation_id,
            status=SettlementStatus.SETTLED,
            gas_used=_DEFAULT_GAS_USED,
            notes=notes,
        )

    def snapshot(self) -> Dict[str, object]:
        return {
            "owner": self._owner,
            "roles": {role: list(holders) for role, holders in sorted(self._roles.items())},
            "proxy_admins": dict(sorted(self._proxy_admins.items())),
        }

    def _on_settled(self, handle: OperationHandle) -> None:
        """Hook for subclasses that persist state."""

    def _submit(
        self, kind: OperationKind, holder: str, capability_id: Optional[str] = None
    ) -> OperationHandle:
        fault = self._next_fault(kind)
        if fault == Fault.REJECT:
            raise LedgerError(f"{kind.value} for {holder} rejected at submission")
        handle = OperationHandle(
            operation_id=f"op-{len(self._submitted) + 1:04d}",
            kind=kind,
            holder=holder,
            capability_id=capability_id,
        )
        self._submitted.append(handle)
        self._pending[handle.operation_id] = (handle, fault)
        return handle

    def _next_fault(self, kind: OperationKind) -> Optional[Fault]:
        queued = self._faults.get(kind)
        if not queued:
            return None
        return queued.pop(0)

    def _apply(self, handle: OperationHandle) -> None:
        if handle.kind == OperationKind.TRANSFER_OWNERSHIP:
            self._owner = handle.holder
            return

        holders = self._roles.setdefault(handle.capability_id or "", [])
        present = [item for item in holders if same_address(item, handle.holder)]
        if handle.kind == OperationKind.GRANT and not present:
            holders.append(handle.holder)
        elif handle.kind == OperationKind.REVOKE:
            for item in present:
                holders.remove(item)
