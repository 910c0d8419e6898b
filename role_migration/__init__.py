from .gate import ConfirmationGate, PromptGate, ScriptedGate, StaticGate
from .grants import RoleGrantResult, RoleGrantStatus, ensure_role_grants
from .modes import Approval, Observation, Phase, RunMode, Transition
from .orchestrator import (
    DEFAULT_SETTLEMENT_TIMEOUT,
    MigrationError,
    MigrationReport,
    MigrationRun,
    OperationFailure,
    PreconditionError,
    RoleMigrationOrchestrator,
    UserAbort,
)

__all__ = [
    "Approval",
    "ConfirmationGate",
    "DEFAULT_SETTLEMENT_TIMEOUT",
    "MigrationError",
    "MigrationReport",
    "MigrationRun",
    "Observation",
    "OperationFailure",
    "Phase",
    "PreconditionError",
    "PromptGate",
    "RoleGrantResult",
    "RoleGrantStatus",
    "RoleMigrationOrchestrator",
    "RunMode",
    "ScriptedGate",
    "StaticGate",
    "Transition",
    "UserAbort",
    "ensure_role_grants",
]
