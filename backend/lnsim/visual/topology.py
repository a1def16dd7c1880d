"""
Topology operations on a network chart.

Every function here is total: asking to remove or change something that
is not there is a logged no-op, never an exception. Functions that touch
several entities (remove_node) finish all of their edits or none of them.
Callers are expected to hold the store lock for the chart being edited.
"""

import math
from typing import Dict, List, Optional

from lnsim import config
from lnsim.ir.chart import Chart, ChartLink, EntityRef, LinkEndpoint, LinkKind, Position
from lnsim.ir.network import CommonNode, LightningNode, Network
from lnsim.visual.chart_style import LINK_LABELS, LINK_PORTS


def link_id(from_node: str, to_node: str, kind: LinkKind) -> str:
    if kind == "backend":
        return f"{from_node}-{to_node}"
    return f"{from_node}-{to_node}-{kind}"


# =========================================================
# LINKS
# =========================================================

def add_link(
    chart: Chart,
    from_node: str,
    to_node: str,
    kind: LinkKind,
    from_port: Optional[str] = None,
    to_port: Optional[str] = None,
    properties: Optional[Dict] = None,
) -> Optional[str]:
    """
    Add a link between two chart nodes and return its id.

    Asking for a link that already exists returns the existing id.
    Returns None when an endpoint is not on the chart.
    """
    for node_id in (from_node, to_node):
        if node_id not in chart.nodes:
            print(f"[TOPOLOGY] add_link ignored, unknown node '{node_id}'")
            return None

    new_id = link_id(from_node, to_node, kind)
    if new_id in chart.links:
        return new_id

    default_from, default_to = LINK_PORTS[kind]
    chart.links[new_id] = ChartLink(
        id=new_id,
        from_=LinkEndpoint(node_id=from_node, port_id=from_port or default_from),
        to=LinkEndpoint(node_id=to_node, port_id=to_port or default_to),
        kind=kind,
        properties={"label": LINK_LABELS[kind], **(properties or {})},
    )
    return new_id


def remove_link(chart: Chart, link_id: str) -> bool:
    if link_id not in chart.links:
        return False

    del chart.links[link_id]
    _clear_refs(chart, nodes=set(), links={link_id})
    return True


# =========================================================
# NODES
# =========================================================

def remove_node(chart: Chart, network: Network, node_id: str) -> bool:
    """
    Remove a node from the network and the chart, with every link and
    channel touching it.

    Lightning nodes bound to a removed bitcoin node are moved to the first
    remaining bitcoin node on the chart. A bitcoin node still backing
    lightning nodes cannot be removed when no such replacement exists.
    """
    node = network.find_node(node_id)
    if node is None and node_id not in chart.nodes:
        return False

    dependents: List[LightningNode] = []
    new_backend = None
    if node is not None and node.type == "bitcoin":
        dependents = [n for n in network.nodes.lightning if n.backend_name == node_id]
        # a replacement must already be on the chart to carry the backend links
        remaining = [
            b for b in network.nodes.bitcoin
            if b.name != node_id and b.name in chart.nodes
        ]
        if dependents and not remaining:
            print(f"[TOPOLOGY] Refusing to remove '{node_id}', no other backend on the chart")
            return False
        if remaining:
            new_backend = remaining[0].name

    doomed_links = {lid for lid, link in chart.links.items() if link.touches(node_id)}

    # ---- apply ----
    if node is not None:
        if node.type == "bitcoin":
            network.nodes.bitcoin = [n for n in network.nodes.bitcoin if n.name != node_id]
        else:
            network.nodes.lightning = [n for n in network.nodes.lightning if n.name != node_id]
        network.channels = [
            c for c in network.channels
            if c.from_node != node_id and c.to_node != node_id
        ]

    chart.nodes.pop(node_id, None)
    for lid in doomed_links:
        del chart.links[lid]

    for ln in dependents:
        ln.backend_name = new_backend
        add_link(chart, ln.name, new_backend, "backend")

    _clear_refs(chart, nodes={node_id}, links=doomed_links)

    print(f"[TOPOLOGY] Removed node '{node_id}' and {len(doomed_links)} link(s)")
    return True


def move_node(chart: Chart, node_id: str, position: Position) -> bool:
    node = chart.nodes.get(node_id)
    if node is None:
        return False
    node.position = Position(x=position.x, y=position.y)
    return True


def sync_node_status(chart: Chart, node: CommonNode) -> bool:
    """Mirror a node's status onto its chart node"""
    chart_node = chart.nodes.get(node.name)
    if chart_node is None:
        return False
    chart_node.properties["status"] = node.status.value
    return True


# =========================================================
# SELECTION
# =========================================================

def set_selected(chart: Chart, ref: Optional[EntityRef]) -> None:
    chart.selected = ref


def set_hovered(chart: Chart, ref: Optional[EntityRef]) -> None:
    chart.hovered = ref


def _clear_refs(chart: Chart, nodes: set, links: set) -> None:
    def _dead(ref: Optional[EntityRef]) -> bool:
        if ref is None:
            return False
        if ref.type == "node":
            return ref.id in nodes
        return ref.id in links

    if _dead(chart.selected):
        chart.selected = None
    if _dead(chart.hovered):
        chart.hovered = None


# =========================================================
# VIEWPORT
# =========================================================

def zoom(chart: Chart, delta: float) -> float:
    if not math.isfinite(delta):
        print(f"[TOPOLOGY] Ignoring zoom delta {delta}")
        return chart.scale
    scale = round(chart.scale + delta, 1)
    chart.scale = min(max(scale, config.MIN_SCALE), config.MAX_SCALE)
    return chart.scale


def zoom_in(chart: Chart) -> float:
    return zoom(chart, config.ZOOM_STEP)


def zoom_out(chart: Chart) -> float:
    return zoom(chart, -config.ZOOM_STEP)


def reset_zoom(chart: Chart) -> float:
    chart.scale = 1.0
    return chart.scale


def can_reset_zoom(chart: Chart) -> bool:
    """The reset control is disabled exactly when the chart is at 1.0"""
    return chart.scale != 1.0


def set_offset(chart: Chart, offset: Position) -> None:
    chart.offset = Position(x=offset.x, y=offset.y)
