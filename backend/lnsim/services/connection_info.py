from typing import Dict

from lnsim.ir.network import CLightningNode, EclairNode, LightningNode, LndNode

LOCALHOST = "127.0.0.1"


def connection_info(node: LightningNode) -> Dict[str, str]:
    """
    Everything a wallet needs to talk to a lightning node from the host.
    """
    if isinstance(node, LndNode):
        return {
            "grpcUrl": f"{LOCALHOST}:{node.ports.grpc}",
            "restUrl": f"https://{LOCALHOST}:{node.ports.rest}",
            "tlsCert": node.tls_path,
            "adminMacaroon": node.macaroon_path,
        }
    elif isinstance(node, CLightningNode):
        return {
            "restUrl": f"http://{LOCALHOST}:{node.ports.rest}",
            "adminMacaroon": node.macaroon_path,
        }
    elif isinstance(node, EclairNode):
        return {
            "restUrl": f"http://{LOCALHOST}:{node.ports.rest}",
            "basicAuthUser": "",
            "basicAuthPassword": "eclairpw",
        }

    raise ValueError(f"Unknown lightning implementation '{getattr(node, 'implementation', None)}'")


def probe_url(node) -> str:
    """URL whose answer means the daemon is accepting connections"""
    if node.type == "bitcoin":
        return f"http://{LOCALHOST}:{node.ports.rpc}"
    return connection_info(node)["restUrl"]
