from .ledger import CapabilityLedger, LedgerError, SettlementTimeout
from .models import (
    DEFAULT_ADMIN_ROLE,
    CapabilityKind,
    CapabilityTarget,
    OperationHandle,
    OperationKind,
    Settlement,
    SettlementStatus,
)
from .simulator import Fault, InMemoryLedger
from .store import FileLedger

__all__ = [
    "CapabilityKind",
    "CapabilityLedger",
    "CapabilityTarget",
    "DEFAULT_ADMIN_ROLE",
    "Fault",
    "FileLedger",
    "InMemoryLedger",
    "LedgerError",
    "OperationHandle",
    "OperationKind",
    "Settlement",
    "SettlementStatus",
    "SettlementTimeout",
]
