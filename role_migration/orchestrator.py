"""Migrates an admin role or contract ownership from the operating signer.

The orchestrator is a small state machine. Every ledger-mutating step is
preceded by an approval gate, every submitted operation is awaited until it
settles, and the signer's capability is only renounced after the final
holder's capability has been read back from the ledger twice: once after the
grant settles and again right before the renounce is submitted.

Each run starts from ``Phase.START`` and re-derives its position from the
ledger, so re-running after any terminal phase is safe.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from capability_ledger.ledger import CapabilityLedger, LedgerError
from capability_ledger.models import CapabilityKind, CapabilityTarget, OperationHandle
from chain_registry.addresses import is_unusable, is_well_formed, same_address
from chain_registry.registry import ConfigurationError

from .gate import ConfirmationGate
from .modes import Approval, Observation, Phase, RunMode, Transition

logger = logging.getLogger(__name__)

DEFAULT_SETTLEMENT_TIMEOUT = 300.0


class MigrationError(RuntimeError):
    """Base for conditions that end a run in a non-success terminal phase."""

    def __init__(self, message: str, terminal: Phase) -> None:
        super().__init__(message)
        self.terminal = terminal


class PreconditionError(MigrationError):
    """Raised when a holder lacks a capability the next step depends on."""


class OperationFailure(MigrationError):
    """Raised when a submitted ledger operation fails or does not settle."""


class UserAbort(MigrationError):
    """Raised when the approval gate declines a step."""


@dataclass
class MigrationRun:
    target: CapabilityTarget
    signer: str
    final_holder: str
    mode: RunMode
    phase: Phase = Phase.START
    transitions: List[Transition] = field(default_factory=list)
    observations: List[Observation] = field(default_factory=list)
    mutations: int = 0
    pending_action: Optional[str] = None

    def observe(self, subject: str, value: object) -> None:
        self.observations.append(Observation(phase=self.phase, subject=subject, value=str(value)))


@dataclass(frozen=True)
class Holdings:
    signer: bool
    final_holder: bool
    owner: Optional[str] = None


@dataclass(frozen=True)
class MigrationReport:
    target: CapabilityTarget
    signer: str
    final_holder: str
    mode: RunMode
    outcome: Phase
    transitions: Tuple[Transition, ...]
    observations: Tuple[Observation, ...]
    mutations: int
    detail: str
    pending_action: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome.is_success()

    def raise_for_outcome(self) -> None:
        if self.outcome.is_success() or self.outcome == Phase.DRY_RUN_HALTED:
            return
        if self.outcome == Phase.ABORTED:
            raise UserAbort(self.detail, self.outcome)
        if self.outcome == Phase.FATAL_TX_FAILED:
            raise OperationFailure(self.detail, self.outcome)
        raise PreconditionError(self.detail, self.outcome)

    def to_dict(self) -> Dict[str, object]:
        return {
            "target": self.target.to_dict(),
            "signer": self.signer,
            "final_holder": self.final_holder,
            "mode": self.mode.value,
            "outcome": self.outcome.value,
            "succeeded": self.succeeded,
            "detail": self.detail,
            "pending_action": self.pending_action,
            "mutations": self.mutations,
            "transitions": [
                {"from": item.source.value, "to": item.target.value, "reason": item.reason}
                for item in self.transitions
            ],
            "observations": [
                {"phase": item.phase.value, "subject": item.subject, "value": item.value}
                for item in self.observations
            ],
        }


class RoleMigrationOrchestrator:
    """Moves one capability from the operating signer to its final holder."""

    def __init__(
        self,
        ledger: CapabilityLedger,
        gate: ConfirmationGate,
        mode: RunMode = RunMode.DRY_RUN,
        settlement_timeout: float = DEFAULT_SETTLEMENT_TIMEOUT,
    ) -> None:
        if settlement_timeout <= 0:
            raise ConfigurationError("Settlement timeout must be positive.")
        self._ledger = ledger
        self._gate = gate
        self._mode = mode
        self._settlement_timeout = settlement_timeout
        self._handlers: Dict[Phase, Callable[[MigrationRun], Tuple[Phase, str]]] = {
            Phase.START: self._start,
            Phase.VERIFY_SIGNER_HOLDS: self._verify_signer_holds,
            Phase.AWAIT_APPROVAL_GRANT: self._await_grant_approval,
            Phase.GRANTING: self._grant,
            Phase.VERIFY_GRANTED: self._verify_granted,
            Phase.VERIFY_SIGNER_STILL_HOLDS: self._verify_signer_still_holds,
            Phase.AWAIT_APPROVAL_RENOUNCE: self._await_renounce_approval,
            Phase.RENOUNCING: self._renounce,
        }

    @property
    def mode(self) -> RunMode:
        return self._mode

    def run(self, target: CapabilityTarget, signer: str, final_holder: str) -> MigrationReport:
        _validate_inputs(target, signer, final_holder)

        run = MigrationRun(
            target=target,
            signer=signer,
            final_holder=final_holder,
            mode=self._mode,
        )
        logger.info(
            "Migrating %s from %s to %s (%s)",
            target.describe(),
            signer,
            final_holder,
            self._mode.value,
        )

        try:
            self._check_proxy_binding(run)
            while not run.phase.is_terminal():
                next_phase, reason = self._handlers[run.phase](run)
                self._advance(run, next_phase, reason)
        except MigrationError as exc:
            self._advance(run, exc.terminal, str(exc))

        return MigrationReport(
            target=target,
            signer=signer,
            final_holder=final_holder,
            mode=self._mode,
            outcome=run.phase,
            transitions=tuple(run.transitions),
            observations=tuple(run.observations),
            mutations=run.mutations,
            detail=run.transitions[-1].reason,
            pending_action=run.pending_action,
        )

    def _start(self, run: MigrationRun) -> Tuple[Phase, str]:
        holdings = self._read_holdings(run)
        if holdings.final_holder and holdings.signer:
            # Interrupted after the grant settled; only the renounce is left.
            return (
                Phase.VERIFY_SIGNER_STILL_HOLDS,
                f"Final holder {run.final_holder} already holds the capability; "
                "resuming at the renounce check",
            )
        if holdings.final_holder:
            return (
                Phase.ALREADY_MIGRATED,
                f"Final holder {run.final_holder} already holds {run.target.describe()}",
            )
        return Phase.VERIFY_SIGNER_HOLDS, f"Final holder {run.final_holder} does not hold the capability"

    def _verify_signer_holds(self, run: MigrationRun) -> Tuple[Phase, str]:
        holdings = self._read_holdings(run)
        if not holdings.signer:
            raise PreconditionError(
                f"Signer {run.signer} does not hold {run.target.describe()}"
                + _owner_suffix(holdings),
                Phase.FATAL_NOT_HOLDER,
            )
        return Phase.AWAIT_APPROVAL_GRANT, f"Signer {run.signer} holds the capability"

    def _await_grant_approval(self, run: MigrationRun) -> Tuple[Phase, str]:
        description = self._grant_description(run)
        return self._approval(run, description, Phase.GRANTING)

    def _grant(self, run: MigrationRun) -> Tuple[Phase, str]:
        target = run.target
        if target.kind == CapabilityKind.ADMIN_ROLE:
            handle = self._submit_and_settle(
                run, lambda: self._ledger.grant(target.capability_id, run.final_holder)
            )
        else:
            handle = self._submit_and_settle(
                run, lambda: self._ledger.transfer_ownership(run.final_holder)
            )
        return Phase.VERIFY_GRANTED, f"Grant {handle.operation_id} settled"

    def _verify_granted(self, run: MigrationRun) -> Tuple[Phase, str]:
        holdings = self._read_holdings(run)
        if not holdings.final_holder:
            raise PreconditionError(
                f"Grant settled but final holder {run.final_holder} still lacks "
                f"{run.target.describe()}" + _owner_suffix(holdings),
                Phase.FATAL_GRANT_NOT_OBSERVED,
            )
        return Phase.VERIFY_SIGNER_STILL_HOLDS, f"Final holder {run.final_holder} holds the capability"

    def _verify_signer_still_holds(self, run: MigrationRun) -> Tuple[Phase, str]:
        holdings = self._read_holdings(run)
        if not holdings.signer:
            return Phase.DONE_NO_RENOUNCE, f"Signer {run.signer} no longer holds the capability"
        return Phase.AWAIT_APPROVAL_RENOUNCE, f"Signer {run.signer} still holds the capability"

    def _await_renounce_approval(self, run: MigrationRun) -> Tuple[Phase, str]:
        description = (
            f"Renounce {run.target.describe()} held by signer {run.signer}; "
            f"final holder {run.final_holder} keeps it"
        )
        next_phase, reason = self._approval(run, description, Phase.RENOUNCING)
        if next_phase != Phase.RENOUNCING:
            return next_phase, reason

        holdings = self._read_holdings(run)
        if not holdings.final_holder:
            raise PreconditionError(
                f"Final holder {run.final_holder} is not confirmed to hold "
                f"{run.target.describe()}; refusing to renounce",
                Phase.FATAL_PRECONDITION,
            )
        return next_phase, reason

    def _renounce(self, run: MigrationRun) -> Tuple[Phase, str]:
        target = run.target
        if target.kind != CapabilityKind.ADMIN_ROLE:
            raise PreconditionError(
                f"{target.describe()} is exclusive and cannot be renounced separately",
                Phase.FATAL_PRECONDITION,
            )
        handle = self._submit_and_settle(
            run, lambda: self._ledger.revoke(target.capability_id, run.signer)
        )
        return Phase.DONE, f"Renounce {handle.operation_id} settled"

    def _approval(self, run: MigrationRun, description: str, next_phase: Phase) -> Tuple[Phase, str]:
        if self._mode == RunMode.DRY_RUN:
            run.pending_action = description
            return Phase.DRY_RUN_HALTED, f"Dry run; would request approval to: {description}"
        if self._gate.approve(description) != Approval.PROCEED:
            raise UserAbort(f"Approval declined: {description}", Phase.ABORTED)
        return next_phase, f"Approved: {description}"

    def _submit_and_settle(
        self, run: MigrationRun, submit: Callable[[], OperationHandle]
    ) -> OperationHandle:
        try:
            handle = submit()
        except LedgerError as exc:
            raise OperationFailure(f"Submission failed: {exc}", Phase.FATAL_TX_FAILED) from exc

        run.mutations += 1
        run.observe("submitted", handle.operation_id)
        logger.info("Submitted %s %s for %s", handle.kind.value, handle.operation_id, handle.holder)

        # A submitted operation is always awaited; there is no cancellation.
        try:
            settlement = self._ledger.await_settlement(handle, self._settlement_timeout)
        except LedgerError as exc:
            raise OperationFailure(
                f"{handle.kind.value} {handle.operation_id} did not settle: {exc}",
                Phase.FATAL_TX_FAILED,
            ) from exc

        run.observe("settlement", settlement.status.value)
        if not settlement.settled:
            raise OperationFailure(
                f"{handle.kind.value} {handle.operation_id} failed to settle",
                Phase.FATAL_TX_FAILED,
            )
        return handle

    def _read_holdings(self, run: MigrationRun) -> Holdings:
        try:
            return self._observe_holdings(run)
        except LedgerError as exc:
            raise PreconditionError(
                f"Ledger read failed during {run.phase.value}: {exc}",
                Phase.FATAL_PRECONDITION,
            ) from exc

    def _observe_holdings(self, run: MigrationRun) -> Holdings:
        target = run.target
        if target.kind == CapabilityKind.ADMIN_ROLE:
            signer = self._ledger.has_capability(target.capability_id, run.signer)
            final_holder = self._ledger.has_capability(target.capability_id, run.final_holder)
            run.observe(f"has_capability({run.signer})", signer)
            run.observe(f"has_capability({run.final_holder})", final_holder)
            return Holdings(signer=signer, final_holder=final_holder)

        owner = self._ledger.current_owner()
        run.observe("current_owner", owner)
        return Holdings(
            signer=same_address(owner, run.signer),
            final_holder=same_address(owner, run.final_holder),
            owner=owner,
        )

    def _check_proxy_binding(self, run: MigrationRun) -> None:
        target = run.target
        if target.kind != CapabilityKind.OWNERSHIP or not target.proxy_address:
            return
        try:
            admin = self._ledger.proxy_admin_of(target.proxy_address)
        except LedgerError as exc:
            raise PreconditionError(
                f"Ledger read failed for proxy {target.proxy_address}: {exc}",
                Phase.FATAL_PRECONDITION,
            ) from exc
        run.observe(f"proxy_admin_of({target.proxy_address})", admin)
        if not same_address(admin, target.contract_address):
            raise PreconditionError(
                f"Proxy {target.proxy_address} is administered by {admin}, "
                f"not by {target.contract_address}",
                Phase.FATAL_PRECONDITION,
            )

    def _grant_description(self, run: MigrationRun) -> str:
        target = run.target
        if target.kind == CapabilityKind.ADMIN_ROLE:
            return (
                f"Grant {target.describe()} to {run.final_holder} "
                f"from signer {run.signer}"
            )
        return f"Transfer {target.describe()} from signer {run.signer} to {run.final_holder}"

    def _advance(self, run: MigrationRun, next_phase: Phase, reason: str) -> None:
        run.transitions.append(Transition(source=run.phase, target=next_phase, reason=reason))
        run.phase = next_phase
        if next_phase.is_fatal():
            logger.error("%s: %s", next_phase.value, reason)
        elif next_phase == Phase.DRY_RUN_HALTED:
            logger.warning("%s: %s", next_phase.value, reason)
        else:
            logger.info("%s: %s", next_phase.value, reason)


def _validate_inputs(target: CapabilityTarget, signer: str, final_holder: str) -> None:
    for label, address in (("Signer", signer), ("Final holder", final_holder)):
        if is_unusable(address) or not is_well_formed(address):
            raise ConfigurationError(f"{label} address is not usable: {address!r}")
    if not is_well_formed(target.contract_address):
        raise ConfigurationError(f"Contract address is malformed: {target.contract_address!r}")
    if same_address(signer, final_holder):
        raise ConfigurationError(
            "Intended owner address is the same as signer address, cannot transfer roles"
        )
    if target.kind == CapabilityKind.ADMIN_ROLE and not target.capability_id:
        raise ConfigurationError("Admin role migrations require a role identifier.")
    if target.proxy_address and not is_well_formed(target.proxy_address):
        raise ConfigurationError(f"Proxy address is malformed: {target.proxy_address!r}")


def _owner_suffix(holdings: Holdings) -> str:
    if holdings.owner is None:
        return ""
    return f" (current owner {holdings.owner})"
