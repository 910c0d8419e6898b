"""Idempotent role grants for the bridge adapter (minter, burner...)."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

from capability_ledger.ledger import CapabilityLedger, LedgerError
from chain_registry.addresses import is_unusable, is_well_formed
from chain_registry.registry import ConfigurationError

from .gate import ConfirmationGate
from .modes import Approval, RunMode
from .orchestrator import DEFAULT_SETTLEMENT_TIMEOUT

logger = logging.getLogger(__name__)


class RoleGrantStatus(Enum):
    ALREADY_GRANTED = "ALREADY_GRANTED"
    GRANTED = "GRANTED"
    DRY_RUN_HALTED = "DRY_RUN_HALTED"
    ABORTED = "ABORTED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class RoleGrantResult:
    role_name: str
    role_id: str
    holder: str
    status: RoleGrantStatus
    detail: str

    @property
    def ok(self) -> bool:
        return self.status in {RoleGrantStatus.ALREADY_GRANTED, RoleGrantStatus.GRANTED}


def ensure_role_grants(
    ledger: CapabilityLedger,
    holder: str,
    roles: Sequence[Tuple[str, str]],
    gate: ConfirmationGate,
    mode: RunMode = RunMode.DRY_RUN,
    settlement_timeout: float = DEFAULT_SETTLEMENT_TIMEOUT,
) -> Tuple[RoleGrantResult, ...]:
    """Grant each ``(name, role_id)`` to ``holder`` unless it already has it.

    Stops at the first declined or failed grant. A dry run reports every
    missing role without submitting anything.
    """

    if is_unusable(holder) or not is_well_formed(holder):
        raise ConfigurationError(f"Role holder address is not usable: {holder!r}")

    results = []
    for role_name, role_id in roles:
        result = _ensure_role(ledger, holder, role_name, role_id, gate, mode, settlement_timeout)
        results.append(result)
        if result.status in {RoleGrantStatus.ABORTED, RoleGrantStatus.FAILED}:
            break
    return tuple(results)


def _ensure_role(
    ledger: CapabilityLedger,
    holder: str,
    role_name: str,
    role_id: str,
    gate: ConfirmationGate,
    mode: RunMode,
    settlement_timeout: float,
) -> RoleGrantResult:
    def result(status: RoleGrantStatus, detail: str) -> RoleGrantResult:
        log = logger.error if status == RoleGrantStatus.FAILED else logger.info
        log("%s %s: %s", role_name, status.value, detail)
        return RoleGrantResult(role_name, role_id, holder, status, detail)

    if ledger.has_capability(role_id, holder):
        return result(RoleGrantStatus.ALREADY_GRANTED, f"{holder} already has role {role_name}")

    description = f"Grant role {role_name} to {holder}"
    if mode == RunMode.DRY_RUN:
        return result(RoleGrantStatus.DRY_RUN_HALTED, f"Dry run; would {description.lower()}")
    if gate.approve(description) != Approval.PROCEED:
        return result(RoleGrantStatus.ABORTED, f"Approval declined: {description}")

    try:
        handle = ledger.grant(role_id, holder)
        settlement = ledger.await_settlement(handle, settlement_timeout)
    except LedgerError as exc:
        return result(RoleGrantStatus.FAILED, f"Grant of {role_name} failed: {exc}")
    if not settlement.settled:
        return result(RoleGrantStatus.FAILED, f"Grant {handle.operation_id} of {role_name} failed to settle")
    if not ledger.has_capability(role_id, holder):
        return result(
            RoleGrantStatus.FAILED,
            f"Grant {handle.operation_id} settled but {holder} still lacks role {role_name}",
        )
    return result(RoleGrantStatus.GRANTED, f"Grant {handle.operation_id} of {role_name} settled")
