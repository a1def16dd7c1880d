"""
Network Registry - Central store for the logical networks and their nodes
"""

import os
from typing import Dict, List, Optional

from lnsim.ir.network import (
    BitcoinNode,
    BitcoinPorts,
    CLightningNode,
    CommonNode,
    EclairNode,
    LndNode,
    LndPorts,
    Network,
    NetworkNodes,
    RestPorts,
    Status,
)

LIGHTNING_NAMES = [
    "alice", "bob", "carol", "dave", "erin", "frank", "grace",
    "heidi", "ivan", "judy", "mike", "niaj", "oscar", "peggy",
]

DEFAULT_VERSIONS = {
    "LND": "0.10.0-beta",
    "c-lightning": "0.8.2",
    "eclair": "0.4",
    "bitcoind": "0.20.0",
}

BASE_PORTS = {
    "LND": {"rest": 8081, "grpc": 10001},
    "c-lightning": {"rest": 8181},
    "eclair": {"rest": 8281},
    "bitcoind": {"rpc": 18443},
}

DEFAULT_BASE_PATH = os.path.join(os.path.expanduser("~"), ".lnsim", "networks")


def lightning_name(index: int) -> str:
    if index < len(LIGHTNING_NAMES):
        return LIGHTNING_NAMES[index]
    return f"{LIGHTNING_NAMES[index % len(LIGHTNING_NAMES)]}{index // len(LIGHTNING_NAMES) + 1}"


def create_network(
    id: int,
    name: str,
    lnd_nodes: int = 1,
    clightning_nodes: int = 1,
    eclair_nodes: int = 1,
    bitcoind_nodes: int = 1,
    status: Status = Status.STOPPED,
    base_path: str = DEFAULT_BASE_PATH,
) -> Network:
    """
    Build a new network with the requested node counts.

    Lightning nodes are named alice, bob, carol, ... in the order
    LND, c-lightning, eclair and are all bound to backend1.
    """
    lightning_total = lnd_nodes + clightning_nodes + eclair_nodes
    if lightning_total and bitcoind_nodes < 1:
        raise ValueError("at least one bitcoin node is required for lightning nodes")

    path = os.path.join(base_path, str(id))
    nodes = NetworkNodes()

    for i in range(bitcoind_nodes):
        nodes.bitcoin.append(
            BitcoinNode(
                id=i,
                name=f"backend{i + 1}",
                version=DEFAULT_VERSIONS["bitcoind"],
                status=status,
                ports=BitcoinPorts(rpc=BASE_PORTS["bitcoind"]["rpc"] + i),
            )
        )

    backend = nodes.bitcoin[0].name if nodes.bitcoin else ""
    index = 0

    for i in range(lnd_nodes):
        node_name = lightning_name(index)
        volume = os.path.join(path, "volumes", "lnd", node_name)
        nodes.lightning.append(
            LndNode(
                id=index,
                name=node_name,
                version=DEFAULT_VERSIONS["LND"],
                status=status,
                backend_name=backend,
                tls_path=os.path.join(volume, "tls.cert"),
                macaroon_path=os.path.join(
                    volume, "data", "chain", "bitcoin", "regtest", "admin.macaroon"
                ),
                ports=LndPorts(
                    rest=BASE_PORTS["LND"]["rest"] + i,
                    grpc=BASE_PORTS["LND"]["grpc"] + i,
                ),
            )
        )
        index += 1

    for i in range(clightning_nodes):
        node_name = lightning_name(index)
        volume = os.path.join(path, "volumes", "c-lightning", node_name)
        nodes.lightning.append(
            CLightningNode(
                id=index,
                name=node_name,
                version=DEFAULT_VERSIONS["c-lightning"],
                status=status,
                backend_name=backend,
                macaroon_path=os.path.join(volume, "rest-api", "access.macaroon"),
                ports=RestPorts(rest=BASE_PORTS["c-lightning"]["rest"] + i),
            )
        )
        index += 1

    for i in range(eclair_nodes):
        nodes.lightning.append(
            EclairNode(
                id=index,
                name=lightning_name(index),
                version=DEFAULT_VERSIONS["eclair"],
                status=status,
                backend_name=backend,
                ports=RestPorts(rest=BASE_PORTS["eclair"]["rest"] + i),
            )
        )
        index += 1

    return Network(id=id, name=name, path=path, nodes=nodes)


class NetworkRegistry:
    """
    Ordered collection of networks.

    Holds data only; every cross-entity rule lives in the topology
    and lifecycle operations that mutate these networks.
    """

    def __init__(self, networks: Optional[List[Network]] = None):
        self.networks: List[Network] = list(networks or [])

    def __len__(self) -> int:
        return len(self.networks)

    def __iter__(self):
        return iter(self.networks)

    def get(self, network_id: int) -> Optional[Network]:
        for network in self.networks:
            if network.id == network_id:
                return network
        return None

    def add(self, network: Network) -> None:
        """Register a network, replacing any existing one with the same id"""
        for i, existing in enumerate(self.networks):
            if existing.id == network.id:
                self.networks[i] = network
                return
        self.networks.append(network)

    def remove(self, network_id: int) -> Optional[Network]:
        network = self.get(network_id)
        if network is not None:
            self.networks.remove(network)
        return network

    def next_id(self) -> int:
        return max((n.id for n in self.networks), default=0) + 1

    def find_node(self, network_id: int, name: str) -> Optional[CommonNode]:
        network = self.get(network_id)
        if network is None:
            return None
        return network.find_node(name)

    def get_summary(self) -> List[Dict]:
        return [
            {
                "id": n.id,
                "name": n.name,
                "status": n.status.value,
                "bitcoin": len(n.nodes.bitcoin),
                "lightning": len(n.nodes.lightning),
            }
            for n in self.networks
        ]
