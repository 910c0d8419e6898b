"""Connection matrix records published to the topology tooling."""

from dataclasses import dataclass
from typing import Dict, Tuple

from chain_registry.models import ContractPoint, EnforcedOption, SecurityStackConfig


@dataclass(frozen=True)
class ConnectionEdge:
    source: ContractPoint
    destination: ContractPoint
    enforced_options: Tuple[EnforcedOption, ...]
    send_config: SecurityStackConfig
    receive_config: SecurityStackConfig

    def to_dict(self) -> Dict[str, object]:
        return {
            "from": self.source.to_dict(),
            "to": self.destination.to_dict(),
            "config": {
                "enforced_options": [option.to_dict() for option in self.enforced_options],
                "send_config": {"uln_config": self.send_config.to_dict()},
                "receive_config": {"uln_config": self.receive_config.to_dict()},
            },
        }


@dataclass(frozen=True)
class ContractConfig:
    point: ContractPoint
    owner: str
    delegate: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "contract": self.point.to_dict(),
            "config": {"owner": self.owner, "delegate": self.delegate},
        }


@dataclass(frozen=True)
class TopologyDocument:
    network: str
    contracts: Tuple[ContractConfig, ...]
    connections: Tuple[ConnectionEdge, ...]

    def to_dict(self) -> Dict[str, object]:
        return {
            "network": self.network,
            "contracts": [contract.to_dict() for contract in self.contracts],
            "connections": [edge.to_dict() for edge in self.connections],
        }
