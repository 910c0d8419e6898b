"""Smoke tests for the operator CLI."""

import json
import sys
import tempfile
import unittest
from contextlib import contextmanager, redirect_stderr, redirect_stdout
from io import StringIO
from pathlib import Path

from capability_ledger.models import DEFAULT_ADMIN_ROLE
from operator_cli.cli import EXIT_ABORTED, EXIT_FAILED, EXIT_OK, _exit_code, main
from role_migration.modes import Phase

SIGNER = "0x" + "5a" * 20
MAINNET_OWNER = "0xfA633B67b1d9371eBa32cf3476F275D75C75ce77"
TOKEN = "0x" + "70" * 20


class OperatorCliSmokeTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tempdir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tempdir.cleanup)
        self.ledger_path = Path(self._tempdir.name) / "ledger.json"

    def _run(self, args):
        buf = StringIO()
        with redirect_stdout(buf), redirect_stderr(StringIO()):
            code = main(args)
        return code, buf.getvalue()

    def _write_ledger(self, state) -> None:
        self.ledger_path.write_text(json.dumps(state))

    def _migrate_admin(self, *extra):
        return self._run(
            [
                "migrate",
                "admin-role",
                "--network",
                "mainnet",
                "--ledger",
                str(self.ledger_path),
                "--eid",
                "30101",
                "--contract",
                TOKEN,
                "--signer",
                SIGNER,
                *extra,
            ]
        )

    def test_registry_show_outputs_json(self) -> None:
        code, output = self._run(["registry", "show", "--network", "testnet"])
        self.assertEqual(code, EXIT_OK)
        payload = json.loads(output)
        self.assertEqual(payload["network"], "testnet")
        sepolia = payload["endpoints"][0]
        self.assertEqual(sepolia["confirmations"], 2)
        self.assertEqual(sepolia["confirmations_source"], "OVERRIDE")
        self.assertEqual(sepolia["enforced_options_source"], "DEFAULT")
        self.assertEqual(sepolia["token_contract"], "WXRPToken")

    def test_topology_generate_writes_file(self) -> None:
        output_path = Path(self._tempdir.name) / "topology.json"
        code, _ = self._run(["topology", "generate", "--network", "mainnet", "--output", str(output_path)])
        self.assertEqual(code, EXIT_OK)
        payload = json.loads(output_path.read_text())
        self.assertEqual(len(payload["connections"]), 2)
        self.assertEqual(payload["contracts"][0]["config"]["owner"], MAINNET_OWNER)

    def test_unreadable_profile_is_an_error(self) -> None:
        code, _ = self._run(["topology", "generate", "--profile", str(self.ledger_path)])
        self.assertEqual(code, EXIT_FAILED)

    def test_migrate_defaults_to_dry_run(self) -> None:
        self._write_ledger({"roles": {DEFAULT_ADMIN_ROLE: [SIGNER]}})

        code, output = self._migrate_admin()

        self.assertEqual(code, EXIT_OK)
        payload = json.loads(output)
        self.assertEqual(payload["outcome"], "DRY_RUN_HALTED")
        self.assertEqual(payload["mutations"], 0)
        state = json.loads(self.ledger_path.read_text())
        self.assertEqual(state["roles"][DEFAULT_ADMIN_ROLE], [SIGNER])

    def test_migrate_execute_with_yes(self) -> None:
        self._write_ledger({"roles": {DEFAULT_ADMIN_ROLE: [SIGNER]}})

        code, output = self._migrate_admin("--mode", "execute", "--yes")

        self.assertEqual(code, EXIT_OK)
        self.assertEqual(json.loads(output)["outcome"], "DONE")
        state = json.loads(self.ledger_path.read_text())
        self.assertEqual(state["roles"][DEFAULT_ADMIN_ROLE], [MAINNET_OWNER])

    def test_migrate_prompt_decline_aborts(self) -> None:
        self._write_ledger({"roles": {DEFAULT_ADMIN_ROLE: [SIGNER]}})

        with _redirect_stdin(StringIO("n\n")):
            code, output = self._migrate_admin("--mode", "execute")

        self.assertEqual(code, EXIT_ABORTED)
        self.assertIn('"outcome": "ABORTED"', output)

    def test_migrate_signer_without_role_fails(self) -> None:
        self._write_ledger({"roles": {DEFAULT_ADMIN_ROLE: []}})
        code, output = self._migrate_admin("--mode", "execute", "--yes")
        self.assertEqual(code, EXIT_FAILED)
        self.assertIn("FATAL_NOT_HOLDER", output)

    def test_migrate_signer_equal_to_owner_is_rejected(self) -> None:
        self._write_ledger({"roles": {DEFAULT_ADMIN_ROLE: [SIGNER]}})
        code, output = self._migrate_admin("--final-holder", SIGNER)
        self.assertEqual(code, EXIT_FAILED)
        self.assertEqual(output, "")

    def test_migrate_ownership(self) -> None:
        self._write_ledger({"owner": SIGNER})

        code, output = self._run(
            [
                "migrate",
                "ownership",
                "--network",
                "mainnet",
                "--ledger",
                str(self.ledger_path),
                "--eid",
                "30367",
                "--contract",
                TOKEN,
                "--signer",
                SIGNER,
                "--mode",
                "execute",
                "--yes",
            ]
        )

        self.assertEqual(code, EXIT_OK)
        self.assertEqual(json.loads(output)["outcome"], "DONE_NO_RENOUNCE")
        self.assertEqual(json.loads(self.ledger_path.read_text())["owner"], MAINNET_OWNER)

    def test_grant_roles(self) -> None:
        minter = "0x" + "01" * 32
        self._write_ledger({})
        args = [
            "grant-roles",
            "--ledger",
            str(self.ledger_path),
            "--holder",
            SIGNER,
            "--role",
            f"MINTER_ROLE={minter}",
            "--mode",
            "execute",
            "--yes",
        ]

        code, output = self._run(args)
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(json.loads(output)["results"][0]["status"], "GRANTED")

        code, output = self._run(args)
        self.assertEqual(json.loads(output)["results"][0]["status"], "ALREADY_GRANTED")

    def test_grant_roles_rejects_malformed_role(self) -> None:
        code, _ = self._run(
            ["grant-roles", "--ledger", str(self.ledger_path), "--holder", SIGNER, "--role", "MINTER"]
        )
        self.assertEqual(code, EXIT_FAILED)

    def test_grant_roles_rejects_burn_address_holder(self) -> None:
        self._write_ledger({})
        code, _ = self._run(
            [
                "grant-roles",
                "--ledger",
                str(self.ledger_path),
                "--holder",
                "0x" + "00" * 20,
                "--role",
                "MINTER_ROLE=0x" + "01" * 32,
                "--mode",
                "execute",
                "--yes",
            ]
        )
        self.assertEqual(code, EXIT_FAILED)
        self.assertEqual(json.loads(self.ledger_path.read_text()), {})


class ExitCodeTests(unittest.TestCase):
    def test_every_terminal_phase_maps_to_an_exit_code(self) -> None:
        expected = {
            Phase.ALREADY_MIGRATED: EXIT_OK,
            Phase.DONE: EXIT_OK,
            Phase.DONE_NO_RENOUNCE: EXIT_OK,
            Phase.DRY_RUN_HALTED: EXIT_OK,
            Phase.ABORTED: EXIT_ABORTED,
            Phase.FATAL_NOT_HOLDER: EXIT_FAILED,
            Phase.FATAL_TX_FAILED: EXIT_FAILED,
            Phase.FATAL_GRANT_NOT_OBSERVED: EXIT_FAILED,
            Phase.FATAL_PRECONDITION: EXIT_FAILED,
        }
        terminals = [phase for phase in Phase if phase.is_terminal()]
        self.assertEqual(set(terminals), set(expected))
        for phase in terminals:
            with self.subTest(phase=phase):
                self.assertEqual(_exit_code(phase), expected[phase])


@contextmanager
def _redirect_stdin(stream):
    original = sys.stdin
    try:
        sys.stdin = stream
        yield
    finally:
        sys.stdin = original


if __name__ == "__main__":
    unittest.main()
