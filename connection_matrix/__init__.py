from .generator import build_topology, generate_connections
from .models import ConnectionEdge, ContractConfig, TopologyDocument

__all__ = [
    "ConnectionEdge",
    "ContractConfig",
    "TopologyDocument",
    "build_topology",
    "generate_connections",
]
