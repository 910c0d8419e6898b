"""Run modes and phases of a role migration."""

from dataclasses import dataclass
from enum import Enum


class RunMode(Enum):
    DRY_RUN = "DRY_RUN"
    EXECUTE = "EXECUTE"


class Phase(Enum):
    START = "START"
    VERIFY_SIGNER_HOLDS = "VERIFY_SIGNER_HOLDS"
    AWAIT_APPROVAL_GRANT = "AWAIT_APPROVAL_GRANT"
    GRANTING = "GRANTING"
    VERIFY_GRANTED = "VERIFY_GRANTED"
    VERIFY_SIGNER_STILL_HOLDS = "VERIFY_SIGNER_STILL_HOLDS"
    AWAIT_APPROVAL_RENOUNCE = "AWAIT_APPROVAL_RENOUNCE"
    RENOUNCING = "RENOUNCING"

    ALREADY_MIGRATED = "ALREADY_MIGRATED"
    DONE = "DONE"
    DONE_NO_RENOUNCE = "DONE_NO_RENOUNCE"

    ABORTED = "ABORTED"
    DRY_RUN_HALTED = "DRY_RUN_HALTED"

    FATAL_NOT_HOLDER = "FATAL_NOT_HOLDER"
    FATAL_TX_FAILED = "FATAL_TX_FAILED"
    FATAL_GRANT_NOT_OBSERVED = "FATAL_GRANT_NOT_OBSERVED"
    FATAL_PRECONDITION = "FATAL_PRECONDITION"

    def is_terminal(self) -> bool:
        return self in _SUCCESS or self in _STOPPED or self.is_fatal()

    def is_success(self) -> bool:
        return self in _SUCCESS

    def is_fatal(self) -> bool:
        return self.value.startswith("FATAL_")

    def is_clean_stop(self) -> bool:
        """Stopped by the operator or by dry-run mode rather than by a failure."""
        return self in _STOPPED


_SUCCESS = frozenset({Phase.ALREADY_MIGRATED, Phase.DONE, Phase.DONE_NO_RENOUNCE})
_STOPPED = frozenset({Phase.ABORTED, Phase.DRY_RUN_HALTED})


class Approval(Enum):
    PROCEED = "PROCEED"
    ABORT = "ABORT"


@dataclass(frozen=True)
class Transition:
    source: Phase
    target: Phase
    reason: str


@dataclass(frozen=True)
class Observation:
    phase: Phase
    subject: str
    value: str
