from lnsim.registry.network_registry import (
    NetworkRegistry,
    create_network,
    lightning_name,
)

__all__ = ["NetworkRegistry", "create_network", "lightning_name"]
