"""Chart derivation and topology operations"""

from lnsim import config
from lnsim.ir.chart import EntityRef, Position
from lnsim.ir.network import Channel, Status
from lnsim.registry import create_network
from lnsim.visual import (
    add_link,
    can_reset_zoom,
    init_chart_from_network,
    move_node,
    remove_link,
    remove_node,
    reset_zoom,
    set_hovered,
    set_selected,
    sync_node_status,
    zoom,
    zoom_in,
    zoom_out,
)


def make_network(**counts):
    counts = {"lnd_nodes": 2, "clightning_nodes": 0, "eclair_nodes": 0, **counts}
    return create_network(1, "test network", **counts)


def make_chart(**counts):
    network = make_network(**counts)
    return network, init_chart_from_network(network)


# =========================================================
# INIT
# =========================================================

def test_init_creates_one_backend_link_per_lightning_node():
    network, chart = make_chart()

    assert set(chart.nodes) == {"alice", "bob", "backend1"}
    assert set(chart.links) == {"alice-backend1", "bob-backend1"}

    link = chart.links["alice-backend1"]
    assert link.kind == "backend"
    assert link.from_.node_id == "alice"
    assert link.to.node_id == "backend1"
    assert link.from_.port_id == "backend"
    assert link.to.port_id == "backend"


def test_init_lays_out_rows():
    network, chart = make_chart()

    assert chart.nodes["alice"].position == Position(x=config.LEFT_MARGIN, y=config.LIGHTNING_ROW_Y)
    assert chart.nodes["bob"].position == Position(
        x=config.LEFT_MARGIN + config.NODE_SPACING, y=config.LIGHTNING_ROW_Y
    )
    assert chart.nodes["backend1"].position == Position(x=config.LEFT_MARGIN, y=config.BITCOIN_ROW_Y)
    assert chart.nodes["alice"].properties["status"] == "Stopped"
    assert chart.nodes["alice"].properties["implementation"] == "LND"


def test_init_is_deterministic():
    first = init_chart_from_network(make_network())
    second = init_chart_from_network(make_network())
    assert first == second


def test_init_default_network():
    chart = init_chart_from_network(create_network(1, "default"))
    assert set(chart.links) == {"alice-backend1", "bob-backend1", "carol-backend1"}


# =========================================================
# LINKS
# =========================================================

def test_add_link_is_idempotent():
    network, chart = make_chart()

    first = add_link(chart, "alice", "bob", "pending-channel")
    second = add_link(chart, "alice", "bob", "pending-channel")

    assert first == second == "alice-bob-pending-channel"
    assert len(chart.links) == 3


def test_add_link_with_unknown_endpoint_does_nothing():
    network, chart = make_chart()
    assert add_link(chart, "alice", "ghost", "pending-channel") is None
    assert len(chart.links) == 2


def test_remove_missing_link_is_noop():
    network, chart = make_chart()
    before = chart.model_copy(deep=True)

    assert remove_link(chart, "nope") is False
    assert chart == before


def test_remove_link_clears_selection():
    network, chart = make_chart()
    set_selected(chart, EntityRef(type="link", id="alice-backend1"))

    assert remove_link(chart, "alice-backend1")
    assert chart.selected is None


# =========================================================
# NODES
# =========================================================

def test_remove_lightning_node_keeps_the_rest():
    network, chart = make_chart()

    assert remove_node(chart, network, "alice")

    assert set(chart.links) == {"bob-backend1"}
    assert "alice" not in chart.nodes
    assert "backend1" in chart.nodes
    assert [n.name for n in network.nodes.lightning] == ["bob"]
    assert [n.name for n in network.nodes.bitcoin] == ["backend1"]


def test_remove_node_leaves_no_link_touching_it():
    network, chart = make_chart()
    add_link(chart, "alice", "bob", "open-channel")
    add_link(chart, "bob", "alice", "pending-channel")

    remove_node(chart, network, "alice")

    assert not any(link.touches("alice") for link in chart.links.values())


def test_remove_node_clears_refs_to_node_and_its_links():
    network, chart = make_chart()
    set_selected(chart, EntityRef(type="node", id="alice"))
    set_hovered(chart, EntityRef(type="link", id="alice-backend1"))

    remove_node(chart, network, "alice")

    assert chart.selected is None
    assert chart.hovered is None


def test_remove_node_keeps_unrelated_refs():
    network, chart = make_chart()
    set_selected(chart, EntityRef(type="node", id="bob"))

    remove_node(chart, network, "alice")

    assert chart.selected == EntityRef(type="node", id="bob")


def test_remove_node_drops_its_channels():
    network, chart = make_chart()
    network.channels.append(Channel(id="c1", from_node="alice", to_node="bob", capacity=100000))

    remove_node(chart, network, "bob")

    assert network.channels == []


def test_remove_unknown_node_is_noop():
    network, chart = make_chart()
    before = chart.model_copy(deep=True)

    assert remove_node(chart, network, "ghost") is False
    assert chart == before


def test_only_backend_cannot_be_removed():
    network, chart = make_chart()
    before = chart.model_copy(deep=True)

    assert remove_node(chart, network, "backend1") is False
    assert chart == before
    assert network.find_bitcoin("backend1") is not None


def test_removing_a_backend_rebinds_dependents():
    network, chart = make_chart(bitcoind_nodes=2)

    assert remove_node(chart, network, "backend1")

    assert network.find_lightning("alice").backend_name == "backend2"
    assert network.find_lightning("bob").backend_name == "backend2"
    assert set(chart.links) == {"alice-backend2", "bob-backend2"}


def test_move_node():
    network, chart = make_chart()

    assert move_node(chart, "alice", Position(x=12.5, y=-4))
    assert chart.nodes["alice"].position == Position(x=12.5, y=-4)
    assert move_node(chart, "ghost", Position(x=1, y=1)) is False


def test_sync_node_status_mirrors_into_chart():
    network, chart = make_chart()
    node = network.find_node("bob")
    node.status = Status.STARTING

    assert sync_node_status(chart, node)
    assert chart.nodes["bob"].properties["status"] == "Starting"


# =========================================================
# ZOOM
# =========================================================

def test_zoom_in_reset_zoom_out():
    network, chart = make_chart()
    assert chart.scale == 1.0
    assert not can_reset_zoom(chart)

    assert zoom_in(chart) == 1.1
    assert can_reset_zoom(chart)

    assert reset_zoom(chart) == 1.0
    assert not can_reset_zoom(chart)

    assert zoom_out(chart) == 0.9


def test_zoom_steps_accumulate_linearly():
    network, chart = make_chart()
    for _ in range(10):
        zoom(chart, 0.1)
    assert chart.scale == 2.0

    for _ in range(10):
        zoom(chart, -0.1)
    assert chart.scale == 1.0


def test_zoom_is_clamped():
    network, chart = make_chart()
    assert zoom(chart, 50) == config.MAX_SCALE
    assert zoom(chart, -50) == config.MIN_SCALE


def test_non_finite_zoom_is_ignored():
    network, chart = make_chart()
    zoom(chart, 0.1)

    assert zoom(chart, float("nan")) == 1.1
    assert zoom(chart, float("inf")) == 1.1
    assert chart.scale == 1.1


def test_backend_replacement_must_be_on_the_chart():
    network, chart = make_chart(bitcoind_nodes=2)
    del chart.nodes["backend2"]
    before = chart.model_copy(deep=True)

    assert remove_node(chart, network, "backend1") is False

    assert chart == before
    assert network.find_lightning("alice").backend_name == "backend1"


def test_backend_replacement_skips_nodes_off_the_chart():
    network, chart = make_chart(bitcoind_nodes=3)
    del chart.nodes["backend2"]

    assert remove_node(chart, network, "backend1")

    assert network.find_lightning("alice").backend_name == "backend3"
    assert {"alice-backend3", "bob-backend3"} <= set(chart.links)
