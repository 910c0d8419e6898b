"""Unit tests for connection matrix generation."""

import json
import unittest

from chain_registry.models import (
    ContractPoint,
    EnforcedOption,
    Endpoint,
    ExecutorOptionType,
    ProfileSet,
    ValidatorCandidate,
)
from chain_registry.profiles import MAINNET, TESTNET
from chain_registry.registry import ChainRegistry, ConfigurationError
from connection_matrix.generator import build_topology, generate_connections

A, B, C = 101, 102, 103
OWNER = "0xfA633B67b1d9371eBa32cf3476F275D75C75ce77"
A_OPTIONS = (EnforcedOption(1, ExecutorOptionType.LZ_RECEIVE, 150_000),)
B_OPTIONS = (
    EnforcedOption(1, ExecutorOptionType.LZ_RECEIVE, 90_000),
    EnforcedOption(2, ExecutorOptionType.LZ_RECEIVE, 90_000),
)


def _addr(tag: str) -> str:
    return "0x" + tag * 20


def _profile_set(threshold: int = 2, **overrides) -> ProfileSet:
    fields = dict(
        name="scenario",
        endpoints=(Endpoint(A, "alpha"), Endpoint(B, "beta"), Endpoint(C, "gamma")),
        validator_pool=(
            ValidatorCandidate("ONE", ((A, _addr("a1")), (B, _addr("b1")), (C, _addr("c1")))),
            ValidatorCandidate("TWO", ((A, _addr("a2")), (B, _addr("b2")), (C, _addr("c2")))),
            ValidatorCandidate("THREE", ((B, _addr("b3")),)),
            ValidatorCandidate("FOUR", ((A, _addr("a4")),)),
        ),
        optional_threshold=threshold,
        default_confirmations=15,
        default_enforced_options=A_OPTIONS,
        confirmations=((A, 15), (B, 1), (C, 5)),
        enforced_options=((A, A_OPTIONS), (B, B_OPTIONS)),
        owners=((A, OWNER), (B, OWNER), (C, OWNER)),
        contracts=(ContractPoint(A, "Adapter"), ContractPoint(B, "Adapter")),
    )
    fields.update(overrides)
    return ProfileSet(**fields)


class GenerateConnectionsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = ChainRegistry(_profile_set())
        self.points = (ContractPoint(A, "Adapter"), ContractPoint(B, "Adapter"))

    def test_two_endpoint_scenario(self) -> None:
        edges = generate_connections(self.registry, self.points)
        self.assertEqual(len(edges), 2)

        a_to_b, b_to_a = edges
        self.assertEqual((a_to_b.source.eid, a_to_b.destination.eid), (A, B))
        self.assertEqual((b_to_a.source.eid, b_to_a.destination.eid), (B, A))

        self.assertEqual(a_to_b.send_config.confirmations, 15)
        self.assertEqual(b_to_a.send_config.confirmations, 1)
        self.assertEqual(a_to_b.send_config.optional_validators, (_addr("a1"), _addr("a2"), _addr("a4")))
        self.assertEqual(a_to_b.send_config.optional_threshold, 2)

    def test_receive_path_uses_destination_depth_and_source_validators(self) -> None:
        a_to_b, _ = generate_connections(self.registry, self.points)
        self.assertEqual(a_to_b.receive_config.confirmations, 1)
        self.assertEqual(
            a_to_b.receive_config.optional_validators,
            a_to_b.send_config.optional_validators,
        )
        self.assertEqual(
            a_to_b.receive_config.required_validators,
            a_to_b.send_config.required_validators,
        )

    def test_enforced_options_come_from_destination(self) -> None:
        a_to_b, b_to_a = generate_connections(self.registry, self.points)
        self.assertEqual(a_to_b.enforced_options, B_OPTIONS)
        self.assertEqual(b_to_a.enforced_options, A_OPTIONS)

    def test_edge_count_and_no_self_pairs(self) -> None:
        points = (
            ContractPoint(A, "Adapter"),
            ContractPoint(B, "Adapter"),
            ContractPoint(C, "Adapter"),
        )
        edges = generate_connections(self.registry, points)
        self.assertEqual(len(edges), 3 * 2)
        self.assertTrue(all(edge.source.eid != edge.destination.eid for edge in edges))
        self.assertEqual(
            [(edge.source.eid, edge.destination.eid) for edge in edges],
            [(A, B), (A, C), (B, A), (B, C), (C, A), (C, B)],
        )

    def test_generation_is_stable(self) -> None:
        first = generate_connections(self.registry, self.points)
        second = generate_connections(self.registry, self.points)
        self.assertEqual(first, second)
        self.assertEqual(
            json.dumps([edge.to_dict() for edge in first]),
            json.dumps([edge.to_dict() for edge in second]),
        )

    def test_single_endpoint_yields_no_edges(self) -> None:
        self.assertEqual(generate_connections(self.registry, self.points[:1]), ())

    def test_threshold_above_pool_fails_eagerly(self) -> None:
        pool = (
            ValidatorCandidate("ONE", ((A, _addr("a1")), (B, _addr("b1")))),
            ValidatorCandidate("TWO", ((B, _addr("b2")),)),
        )
        registry = ChainRegistry(_profile_set(validator_pool=pool))
        with self.assertRaises(ConfigurationError):
            generate_connections(registry, self.points)

    def test_duplicate_endpoint_rejected(self) -> None:
        points = (ContractPoint(A, "Adapter"), ContractPoint(A, "Other"))
        with self.assertRaises(ConfigurationError):
            generate_connections(self.registry, points)

    def test_unknown_endpoint_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            generate_connections(self.registry, (ContractPoint(A, "Adapter"), ContractPoint(999, "Adapter")))


class BuildTopologyTests(unittest.TestCase):
    def test_topology_document_uses_registry_contracts(self) -> None:
        document = build_topology(ChainRegistry(_profile_set()))
        payload = document.to_dict()

        self.assertEqual(payload["network"], "scenario")
        self.assertEqual(len(payload["contracts"]), 2)
        self.assertEqual(payload["contracts"][0]["config"], {"owner": OWNER, "delegate": OWNER})
        self.assertEqual(len(payload["connections"]), 2)
        uln = payload["connections"][0]["config"]["send_config"]["uln_config"]
        self.assertEqual(uln["confirmations"], 15)
        json.dumps(payload)

    def test_unconfigured_owner_fails_closed(self) -> None:
        registry = ChainRegistry(_profile_set(owners=((A, OWNER), (B, "TODO"))))
        with self.assertRaises(ConfigurationError):
            build_topology(registry)

    def test_built_in_profiles_generate(self) -> None:
        for profile_set in (TESTNET, MAINNET):
            document = build_topology(ChainRegistry(profile_set))
            self.assertEqual(len(document.connections), 2)
            self.assertEqual(len(document.contracts), 2)


if __name__ == "__main__":
    unittest.main()
