"""Deterministic connection matrix builder with eager validation."""

from typing import Iterable, Optional, Sequence, Tuple

from chain_registry.models import ContractPoint
from chain_registry.registry import ChainRegistry, ConfigurationError
from chain_registry.selector import ValidatorSetSelector

from .models import ConnectionEdge, ContractConfig, TopologyDocument


def generate_connections(
    registry: ChainRegistry, contracts: Sequence[ContractPoint]
) -> Tuple[ConnectionEdge, ...]:
    """Build one edge per ordered pair of contracts, self-pairs excluded.

    Edges come out in nested input order: outer loop over sources, inner loop
    over destinations. The receive path pairs the destination's confirmation
    depth with the source's validator set.
    """

    points = tuple(contracts)
    _validate_points(registry, points)
    selector = ValidatorSetSelector(registry)

    edges = []
    for i, source in enumerate(points):
        for j, destination in enumerate(points):
            if i == j:
                continue
            edges.append(_build_edge(registry, selector, source, destination))
    return tuple(edges)


def build_topology(
    registry: ChainRegistry, contracts: Optional[Iterable[ContractPoint]] = None
) -> TopologyDocument:
    points = tuple(contracts) if contracts is not None else registry.contracts
    connections = generate_connections(registry, points)
    configs = []
    for point in points:
        owner = registry.owner_address(point.eid)
        configs.append(ContractConfig(point=point, owner=owner, delegate=owner))
    return TopologyDocument(
        network=registry.name,
        contracts=tuple(configs),
        connections=connections,
    )


def _build_edge(
    registry: ChainRegistry,
    selector: ValidatorSetSelector,
    source: ContractPoint,
    destination: ContractPoint,
) -> ConnectionEdge:
    send_config = selector.security_stack(source.eid, registry.confirmations(source.eid))
    receive_config = selector.security_stack(source.eid, registry.confirmations(destination.eid))
    return ConnectionEdge(
        source=source,
        destination=destination,
        enforced_options=registry.enforced_options(destination.eid),
        send_config=send_config,
        receive_config=receive_config,
    )


def _validate_points(registry: ChainRegistry, points: Tuple[ContractPoint, ...]) -> None:
    seen = set()
    for point in points:
        registry.endpoint(point.eid)
        if not point.contract_name:
            raise ConfigurationError(f"Contract name missing for endpoint {point.eid}")
        if point.eid in seen:
            raise ConfigurationError(f"Endpoint {point.eid} appears more than once")
        seen.add(point.eid)
