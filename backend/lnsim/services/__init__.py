from lnsim.services.base import (
    BitcoindService,
    DockerService,
    LightningService,
    ReadinessProbe,
    StoreInjections,
)
from lnsim.services.connection_info import connection_info
from lnsim.services.http_probe import HttpReadinessProbe

__all__ = [
    "BitcoindService",
    "DockerService",
    "LightningService",
    "ReadinessProbe",
    "StoreInjections",
    "connection_info",
    "HttpReadinessProbe",
]
