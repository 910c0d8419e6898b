"""JSON-backed capability ledger for operator rehearsals."""

import json
import logging
from pathlib import Path

from chain_registry.addresses import ZERO_ADDRESS

from .models import OperationHandle
from .simulator import InMemoryLedger

logger = logging.getLogger(__name__)


class FileLedger(InMemoryLedger):
    """Persists contract state to a JSON file after every settled operation.

    File layout::

        {"owner": "0x...", "roles": {"<role id>": ["0x..."]},
         "proxy_admins": {"<proxy>": "<proxy admin>"}}
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        data = self._read()
        super().__init__(
            owner=data.get("owner") or ZERO_ADDRESS,
            roles=data.get("roles", {}),
            proxy_admins=data.get("proxy_admins", {}),
        )

    @property
    def path(self) -> Path:
        return self._path

    def _on_settled(self, handle: OperationHandle) -> None:
        self._path.write_text(json.dumps(self.snapshot(), indent=2))
        logger.debug("Persisted ledger state to %s after %s", self._path, handle.operation_id)

    def _read(self) -> dict:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text())
        if not isinstance(data, dict):
            raise ValueError(f"Ledger state file {self._path} must hold a JSON object.")
        return data
