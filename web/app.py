"""Local-first FastAPI shell for topology review and migration previews."""

from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from capability_ledger.ledger import LedgerError
from capability_ledger.models import DEFAULT_ADMIN_ROLE, CapabilityKind, CapabilityTarget
from capability_ledger.simulator import InMemoryLedger
from chain_registry.addresses import ZERO_ADDRESS
from chain_registry.profiles import get_profile_set, profile_set_names
from chain_registry.registry import ChainRegistry, ConfigurationError
from connection_matrix.generator import build_topology
from role_migration.gate import StaticGate
from role_migration.modes import RunMode
from role_migration.orchestrator import RoleMigrationOrchestrator

app = FastAPI(title="Bridge Ops", description="Local-first topology and migration shell")


class LedgerStateInput(BaseModel):
    owner: str = ZERO_ADDRESS
    roles: Dict[str, List[str]] = {}
    proxy_admins: Dict[str, str] = {}


class MigrationPreviewRequest(BaseModel):
    network: str
    eid: int
    kind: str
    contract_address: str
    signer: str
    final_holder: Optional[str] = None
    role: Optional[str] = None
    proxy_address: Optional[str] = None
    ledger: LedgerStateInput


@app.middleware("http")
async def _local_only(request: Request, call_next):
    client = request.client
    if client is not None:
        host = client.host
        if host not in {"127.0.0.1", "::1", "testclient"}:
            return JSONResponse({"error": "Remote access disabled."}, status_code=403)
    return await call_next(request)


async def _handle_errors(request: Request, exc: Exception):
    return JSONResponse({"error": str(exc)}, status_code=400)


for _exc_class in (
    ConfigurationError,
    LedgerError,
    ValueError,
    KeyError,
):
    app.add_exception_handler(_exc_class, _handle_errors)


@app.get("/api/networks")
async def list_networks():
    return {"networks": list(profile_set_names())}


@app.get("/api/networks/{network}/endpoints")
async def list_endpoints(network: str):
    registry = _registry(network)
    endpoints = []
    for endpoint in registry.endpoints:
        confirmations = registry.resolve_confirmations(endpoint.eid)
        options = registry.resolve_enforced_options(endpoint.eid)
        endpoints.append(
            {
                "eid": endpoint.eid,
                "name": endpoint.name,
                "confirmations": confirmations.value,
                "confirmations_source": confirmations.source.value,
                "enforced_options": [option.to_dict() for option in options.value],
                "enforced_options_source": options.source.value,
                "optional_validators": list(registry.optional_validators(endpoint.eid)),
                "required_validators": list(registry.required_validators(endpoint.eid)),
                "token_contract": registry.token_contract(endpoint.eid),
            }
        )
    return {"network": registry.name, "endpoints": endpoints}


@app.get("/api/networks/{network}/topology")
async def topology(network: str):
    return build_topology(_registry(network)).to_dict()


@app.post("/api/migrations/preview")
async def preview_migration(payload: MigrationPreviewRequest):
    registry = _registry(payload.network)
    kind = _parse_kind(payload.kind)
    target = CapabilityTarget(
        kind=kind,
        endpoint=registry.endpoint(payload.eid),
        contract_address=payload.contract_address,
        capability_id=(payload.role or DEFAULT_ADMIN_ROLE) if kind == CapabilityKind.ADMIN_ROLE else None,
        proxy_address=payload.proxy_address,
    )
    ledger = InMemoryLedger(
        owner=payload.ledger.owner,
        roles=payload.ledger.roles,
        proxy_admins=payload.ledger.proxy_admins,
    )
    # Previews never mutate: dry-run mode stops before the first approval.
    orchestrator = RoleMigrationOrchestrator(
        ledger=ledger,
        gate=StaticGate(proceed=False),
        mode=RunMode.DRY_RUN,
    )
    final_holder = payload.final_holder or registry.owner_address(payload.eid)
    report = orchestrator.run(target, signer=payload.signer, final_holder=final_holder)
    return report.to_dict()


def _registry(network: str) -> ChainRegistry:
    try:
        return ChainRegistry(get_profile_set(network))
    except ConfigurationError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def _parse_kind(value: str) -> CapabilityKind:
    normalized = value.strip().upper().replace("-", "_")
    for kind in CapabilityKind:
        if kind.value == normalized:
            return kind
    raise ValueError(f"Unsupported capability kind: {value}")
