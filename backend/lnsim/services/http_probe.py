import time

import requests

from lnsim import config
from lnsim.ir.errors import ConnectivityError
from lnsim.ir.network import CommonNode, Network
from lnsim.services.base import ReadinessProbe
from lnsim.services.connection_info import probe_url


class HttpReadinessProbe(ReadinessProbe):
    """
    Treats a node as online as soon as its RPC/REST port answers any
    HTTP request, whatever the status code.
    """

    def __init__(
        self,
        timeout: float = config.PROBE_TIMEOUT,
        retries: int = config.PROBE_RETRIES,
        delay: float = config.PROBE_DELAY,
    ):
        self.timeout = timeout
        self.retries = retries
        self.delay = delay

    def wait_until_online(self, network: Network, node: CommonNode) -> None:
        url = probe_url(node)
        last_error = None

        for attempt in range(self.retries):
            try:
                # daemons serve self-signed certificates
                requests.get(url, timeout=self.timeout, verify=False)
                return
            except requests.RequestException as e:
                last_error = e
                print(f"[PROBE] {node.name} not online yet ({attempt + 1}/{self.retries})")
                if attempt + 1 < self.retries:
                    time.sleep(self.delay)

        raise ConnectivityError(f"{node.name} did not come online: {last_error}")
