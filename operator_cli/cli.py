"""Operator CLI for bridge topology configuration and role migration."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from capability_ledger.ledger import LedgerError
from capability_ledger.models import DEFAULT_ADMIN_ROLE, CapabilityKind, CapabilityTarget
from capability_ledger.store import FileLedger
from chain_registry.loader import load_profile_set
from chain_registry.profiles import get_profile_set, profile_set_names
from chain_registry.registry import ChainRegistry, ConfigurationError
from connection_matrix.generator import build_topology
from role_migration.gate import ConfirmationGate, PromptGate, StaticGate
from role_migration.grants import RoleGrantStatus, ensure_role_grants
from role_migration.modes import Phase, RunMode
from role_migration.orchestrator import DEFAULT_SETTLEMENT_TIMEOUT, RoleMigrationOrchestrator

EXIT_OK = 0
EXIT_ABORTED = 1
EXIT_FAILED = 2


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="bridge-ops")
    parser.add_argument("--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    registry_parser = subparsers.add_parser("registry")
    registry_sub = registry_parser.add_subparsers(dest="registry_command", required=True)
    registry_show = registry_sub.add_parser("show")
    _add_profile_args(registry_show)
    registry_show.set_defaults(func=_registry_show)

    topology_parser = subparsers.add_parser("topology")
    topology_sub = topology_parser.add_subparsers(dest="topology_command", required=True)
    topology_generate = topology_sub.add_parser("generate")
    _add_profile_args(topology_generate)
    topology_generate.add_argument("--output")
    topology_generate.set_defaults(func=_topology_generate)

    migrate_parser = subparsers.add_parser("migrate")
    migrate_sub = migrate_parser.add_subparsers(dest="migrate_command", required=True)
    migrate_admin = migrate_sub.add_parser("admin-role")
    _add_migration_args(migrate_admin)
    migrate_admin.add_argument("--role", default=DEFAULT_ADMIN_ROLE)
    migrate_admin.set_defaults(func=_migrate, kind=CapabilityKind.ADMIN_ROLE)
    migrate_ownership = migrate_sub.add_parser("ownership")
    _add_migration_args(migrate_ownership)
    migrate_ownership.add_argument("--proxy")
    migrate_ownership.set_defaults(func=_migrate, kind=CapabilityKind.OWNERSHIP)

    grant_parser = subparsers.add_parser("grant-roles")
    grant_parser.add_argument("--ledger", required=True)
    grant_parser.add_argument("--holder", required=True)
    grant_parser.add_argument("--role", action="append", required=True)
    _add_mode_args(grant_parser)
    grant_parser.set_defaults(func=_grant_roles)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        return args.func(args)
    except (ConfigurationError, LedgerError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_FAILED


def _registry_show(args: argparse.Namespace) -> int:
    registry = _load_registry(args)
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
                "required_validators": list(registry.required_validators(endpoint.eid)),
                "optional_validators": list(registry.optional_validators(endpoint.eid)),
                "optional_threshold": registry.optional_threshold,
                "owner": registry.owner_address(endpoint.eid),
                "token_contract": registry.token_contract(endpoint.eid),
            }
        )
    print(json.dumps({"network": registry.name, "endpoints": endpoints}, indent=2))
    return EXIT_OK


def _topology_generate(args: argparse.Namespace) -> int:
    registry = _load_registry(args)
    document = build_topology(registry)
    output = json.dumps(document.to_dict(), indent=2)
    if args.output:
        Path(args.output).write_text(output)
    else:
        print(output)
    return EXIT_OK


def _migrate(args: argparse.Namespace) -> int:
    registry = _load_registry(args)
    endpoint = registry.endpoint(args.eid)
    final_holder = args.final_holder or registry.owner_address(args.eid)
    target = CapabilityTarget(
        kind=args.kind,
        endpoint=endpoint,
        contract_address=args.contract,
        capability_id=getattr(args, "role", None),
        proxy_address=getattr(args, "proxy", None),
    )
    orchestrator = RoleMigrationOrchestrator(
        ledger=FileLedger(Path(args.ledger)),
        gate=_build_gate(args),
        mode=_parse_mode(args.mode),
        settlement_timeout=args.timeout,
    )
    report = orchestrator.run(target, signer=args.signer, final_holder=final_holder)
    print(json.dumps(report.to_dict(), indent=2))
    return _exit_code(report.outcome)


def _grant_roles(args: argparse.Namespace) -> int:
    roles = _parse_roles(args.role)
    results = ensure_role_grants(
        ledger=FileLedger(Path(args.ledger)),
        holder=args.holder,
        roles=roles,
        gate=_build_gate(args),
        mode=_parse_mode(args.mode),
        settlement_timeout=args.timeout,
    )
    print(
        json.dumps(
            {
                "holder": args.holder,
                "results": [
                    {"role": item.role_name, "status": item.status.value, "detail": item.detail}
                    for item in results
                ],
            },
            indent=2,
        )
    )
    statuses = {item.status for item in results}
    if RoleGrantStatus.FAILED in statuses:
        return EXIT_FAILED
    if RoleGrantStatus.ABORTED in statuses:
        return EXIT_ABORTED
    return EXIT_OK


def _add_profile_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--network", choices=profile_set_names())
    group.add_argument("--profile")


def _add_mode_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--mode", choices=("dry-run", "execute"), default="dry-run")
    parser.add_argument("--yes", action="store_true")
    parser.add_argument("--timeout", type=float, default=DEFAULT_SETTLEMENT_TIMEOUT)


def _add_migration_args(parser: argparse.ArgumentParser) -> None:
    _add_profile_args(parser)
    _add_mode_args(parser)
    parser.add_argument("--ledger", required=True)
    parser.add_argument("--eid", required=True, type=int)
    parser.add_argument("--contract", required=True)
    parser.add_argument("--signer", required=True)
    parser.add_argument("--final-holder")


def _load_registry(args: argparse.Namespace) -> ChainRegistry:
    if args.profile:
        return ChainRegistry(load_profile_set(Path(args.profile)))
    return ChainRegistry(get_profile_set(args.network))


def _build_gate(args: argparse.Namespace) -> ConfirmationGate:
    if args.yes:
        return StaticGate(proceed=True)
    return PromptGate()


def _parse_mode(value: str) -> RunMode:
    normalized = value.strip().lower().replace("_", "-")
    if normalized == "dry-run":
        return RunMode.DRY_RUN
    if normalized == "execute":
        return RunMode.EXECUTE
    raise ValueError(f"Unsupported run mode: {value}")


def _parse_roles(values: List[str]) -> Tuple[Tuple[str, str], ...]:
    roles = []
    for raw in values:
        if "=" not in raw:
            raise ValueError("Role must be formatted as NAME=ROLE_ID.")
        name, role_id = raw.split("=", 1)
        if not name or not role_id:
            raise ValueError("Role name and identifier are required.")
        roles.append((name, role_id))
    return tuple(roles)


def _exit_code(outcome: Phase) -> int:
    if outcome == Phase.ABORTED:
        return EXIT_ABORTED
    if outcome.is_success() or outcome.is_clean_stop():
        return EXIT_OK
    return EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
