# Chart module
# Keeps the visual graph of each network in step with its logical definition

from lnsim.visual.chart_style import CHART_STYLE, LINK_LABELS, LINK_PORTS
from lnsim.visual.chart_mapper import init_chart_from_network
from lnsim.visual.topology import (
    add_link,
    can_reset_zoom,
    link_id,
    move_node,
    remove_link,
    remove_node,
    reset_zoom,
    set_hovered,
    set_offset,
    set_selected,
    sync_node_status,
    zoom,
    zoom_in,
    zoom_out,
)

__all__ = [
    "CHART_STYLE",
    "LINK_LABELS",
    "LINK_PORTS",
    "init_chart_from_network",
    "add_link",
    "can_reset_zoom",
    "link_id",
    "move_node",
    "remove_link",
    "remove_node",
    "reset_zoom",
    "set_hovered",
    "set_offset",
    "set_selected",
    "sync_node_status",
    "zoom",
    "zoom_in",
    "zoom_out",
]
