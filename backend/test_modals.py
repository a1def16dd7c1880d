"""Workflow modal state and the pending-link compensation on cancel"""

from lnsim.modals import WORKFLOWS, ModalsModel
from lnsim.registry import create_network
from lnsim.visual import add_link, init_chart_from_network


def make_modals():
    network = create_network(1, "test network", lnd_nodes=2, clightning_nodes=0, eclair_nodes=0)
    chart = init_chart_from_network(network)
    return ModalsModel(get_chart=lambda: chart), chart


def test_everything_starts_hidden():
    modals, _ = make_modals()
    assert modals.to_dict() == {name: {"visible": False} for name in WORKFLOWS}


def test_show_open_channel_with_destination_only():
    modals, _ = make_modals()

    modals.show_open_channel(to="bob")

    assert modals.open_channel.to_dict() == {"visible": True, "to": "bob"}


def test_show_accepts_field_alias_and_merges():
    modals, _ = make_modals()

    modals.show_open_channel(**{"from": "alice"})
    modals.show_open_channel(to="bob")

    assert modals.open_channel.to_dict() == {"visible": True, "from": "alice", "to": "bob"}
    assert modals.open_channel.payload.from_node == "alice"


def test_hide_open_channel_removes_pending_link():
    modals, chart = make_modals()
    link_id = add_link(chart, "alice", "bob", "pending-channel")
    modals.show_open_channel(**{"from": "alice", "to": "bob", "link_id": link_id})

    modals.hide_open_channel()

    assert link_id not in chart.links
    assert modals.open_channel.to_dict() == {"visible": False}


def test_hide_open_channel_without_link_leaves_chart():
    modals, chart = make_modals()
    before = chart.model_copy(deep=True)
    modals.show_open_channel(to="bob")

    modals.hide_open_channel()

    assert chart == before
    assert not modals.open_channel.visible


def test_hide_change_backend_removes_pending_link():
    modals, chart = make_modals()
    link_id = add_link(chart, "alice", "backend1", "pending-backend")
    modals.show_change_backend(ln_name="alice", backend_name="backend1", link_id=link_id)

    modals.hide_change_backend()

    assert link_id not in chart.links
    assert "alice-backend1" in chart.links


def test_hide_with_already_removed_link_is_harmless():
    modals, chart = make_modals()
    modals.show_open_channel(link_id="alice-bob-pending-channel")

    modals.hide_open_channel()

    assert set(chart.links) == {"alice-backend1", "bob-backend1"}


def test_other_workflows_never_touch_the_chart():
    modals, chart = make_modals()
    before = chart.model_copy(deep=True)

    modals.show_create_invoice(node_name="alice", amount=1000)
    modals.show_pay_invoice(node_name="bob")
    modals.show_advanced_options(node_name="alice", command="lnd --noseedbackup")
    modals.show_send_on_chain(backend_name="backend1", to_address="bcrt1qxyz", amount=0.5)
    modals.show_image_updates()

    for name in ("create_invoice", "pay_invoice", "advanced_options", "send_on_chain", "image_updates"):
        assert modals.get(name).visible
        modals.hide(name)
        assert modals.get(name).to_dict() == {"visible": False}

    assert chart == before


def test_update_does_not_reopen_hidden_workflow():
    modals, _ = make_modals()
    assert modals.pay_invoice.update(error="late failure") is False
    assert not modals.pay_invoice.visible


def test_reshow_after_hide_starts_clean():
    modals, _ = make_modals()
    modals.show_create_invoice(node_name="alice", invoice="lnbcrt1")
    modals.hide_create_invoice()

    modals.show_create_invoice(node_name="bob")

    assert modals.create_invoice.to_dict() == {"visible": True, "node_name": "bob"}


def test_show_drag_then_cancel_scenario():
    modals, chart = make_modals()

    modals.show_open_channel(to="bob")
    assert modals.open_channel.to_dict() == {"visible": True, "to": "bob"}

    link_id = add_link(chart, "alice", "bob", "pending-channel")
    modals.show_open_channel(**{"from": "alice", "link_id": link_id})
    assert modals.open_channel.payload.link_id == link_id

    modals.hide_open_channel()

    assert link_id not in chart.links
    assert modals.open_channel.to_dict() == {"visible": False}
