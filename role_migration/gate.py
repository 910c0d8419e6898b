"""Approval gates consulted before every irreversible ledger step."""

from typing import Callable, Iterable, List, Optional, Protocol

from .modes import Approval


class ConfirmationGate(Protocol):
    def approve(self, description: str) -> Approval:
        ...


class StaticGate:
    """Gives the same answer to every request; records what was asked."""

    def __init__(self, proceed: bool) -> None:
        self._decision = Approval.PROCEED if proceed else Approval.ABORT
        self.requests: List[str] = []

    def approve(self, description: str) -> Approval:
        self.requests.append(description)
        return self._decision


class ScriptedGate:
    """Answers requests from a fixed script; aborts once the script runs out."""

    def __init__(self, decisions: Iterable[bool]) -> None:
        self._decisions = list(decisions)
        self.requests: List[str] = []

    def approve(self, description: str) -> Approval:
        self.requests.append(description)
        if not self._decisions:
            return Approval.ABORT
        return Approval.PROCEED if self._decisions.pop(0) else Approval.ABORT


class PromptGate:
    """Asks the operator on the terminal."""

    def __init__(self, input_fn: Optional[Callable[[str], str]] = None) -> None:
        self._input = input_fn or input

    def approve(self, description: str) -> Approval:
        response = self._input(f"{description} [y/N]: ")
        if response.strip().lower() in {"y", "yes"}:
            return Approval.PROCEED
        return Approval.ABORT
