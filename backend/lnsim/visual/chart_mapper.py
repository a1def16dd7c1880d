from lnsim import config
from lnsim.ir.chart import Chart, ChartNode, Port, Position, Size
from lnsim.ir.network import BitcoinNode, CommonNode, LightningNode, Network
from lnsim.visual.chart_style import CHART_STYLE
from lnsim.visual.topology import add_link


def grid_position(index: int, row_y: int) -> Position:
    return Position(x=config.LEFT_MARGIN + index * config.NODE_SPACING, y=row_y)


def create_chart_node(node: CommonNode, position: Position) -> ChartNode:
    style = CHART_STYLE[node.type]
    return ChartNode(
        id=node.name,
        type=node.type,
        position=position,
        size=Size(**style["size"]),
        ports={
            port_id: Port(id=port_id, type=port_type)
            for port_id, port_type in style["ports"].items()
        },
        properties={
            "status": node.status.value,
            "implementation": node.implementation,
            "version": node.version,
        },
    )


def create_lightning_chart_node(node: LightningNode, index: int) -> ChartNode:
    return create_chart_node(node, grid_position(index, config.LIGHTNING_ROW_Y))


def create_bitcoin_chart_node(node: BitcoinNode, index: int) -> ChartNode:
    return create_chart_node(node, grid_position(index, config.BITCOIN_ROW_Y))


def init_chart_from_network(network: Network) -> Chart:
    """
    Build the chart for a freshly created network.
    Lightning nodes sit on the top row, bitcoin nodes on the bottom row,
    both in network order, and each lightning node gets one backend link.
    Identical networks always produce identical charts.
    """
    chart = Chart()

    # -------------------------
    # NODES
    # -------------------------
    for index, node in enumerate(network.nodes.lightning):
        chart.nodes[node.name] = create_lightning_chart_node(node, index)

    for index, node in enumerate(network.nodes.bitcoin):
        chart.nodes[node.name] = create_bitcoin_chart_node(node, index)

    # -------------------------
    # BACKEND CONNECTIONS
    # -------------------------
    for node in network.nodes.lightning:
        if add_link(chart, node.name, node.backend_name, "backend") is None:
            print(f"[TOPOLOGY] No backend '{node.backend_name}' for '{node.name}'")

    return chart
