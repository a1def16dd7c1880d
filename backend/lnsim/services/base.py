from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from lnsim.ir.network import BitcoinNode, CommonNode, LightningNode, Network


class DockerService(ABC):
    """Creates, starts and stops the containers behind a network"""

    @abstractmethod
    def start(self, network: Network) -> None:
        pass

    @abstractmethod
    def stop(self, network: Network) -> None:
        pass

    @abstractmethod
    def change_backend(self, network: Network, node: LightningNode, backend: BitcoinNode) -> None:
        """Rebind a lightning node's container to another bitcoin node"""
        pass


class ReadinessProbe(ABC):
    @abstractmethod
    def wait_until_online(self, network: Network, node: CommonNode) -> None:
        """Return once the node answers; raise ConnectivityError otherwise"""
        pass


class LightningService(ABC):
    @abstractmethod
    def open_channel(
        self,
        network: Network,
        from_node: LightningNode,
        to_node: LightningNode,
        capacity: int,
        push_amount: int = 0,
    ) -> str:
        """Open a channel and return its channel point"""
        pass

    @abstractmethod
    def create_invoice(self, network: Network, node: LightningNode, amount: int, memo: str = "") -> str:
        """Return a BOLT 11 payment request"""
        pass

    @abstractmethod
    def pay_invoice(self, network: Network, node: LightningNode, invoice: str) -> None:
        pass


class BitcoindService(ABC):
    @abstractmethod
    def send_funds(self, network: Network, node: BitcoinNode, to_address: str, amount: float) -> str:
        """Send coins on-chain and return the transaction id"""
        pass


@dataclass
class StoreInjections:
    docker: Optional[DockerService] = None
    probe: Optional[ReadinessProbe] = None
    lightning: Optional[LightningService] = None
    bitcoind: Optional[BitcoindService] = None
