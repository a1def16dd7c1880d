"""
Workflow confirmations.

A confirmation runs in three steps:

1. prepare   - under the store lock, snapshot the workflow payload and
               resolve the nodes it names
2. execute   - outside the lock, hand the work to an external service
3. finalize  - under the lock again, check the workflow is still the one
               that was snapshotted (still visible, same payload, pending
               link still on the chart) and only then record the result

Failures in steps 1 and 2 are shown on the workflow payload as `error`;
the workflow stays visible and keeps its pending link so the user can
retry. A workflow cancelled while step 2 was running is never revived.
"""

from typing import Any, Callable, Dict, Optional

from lnsim.ir.errors import SubmissionError
from lnsim.ir.network import Channel
from lnsim.modals.workflows import WorkflowState
from lnsim.visual.topology import add_link, link_id, remove_link


def _still_current(store, state: WorkflowState, snapshot, network_id: int, chart) -> bool:
    if store.charts.get(network_id) is not chart or store.get_network(network_id) is None:
        return False
    if state.payload is None:
        return False
    if state.payload.model_dump(exclude={"error"}) != snapshot.model_dump(exclude={"error"}):
        return False
    link = getattr(snapshot, "link_id", None)
    if link and link not in chart.links:
        return False
    return True


def run_confirmation(
    store,
    name: str,
    prepare: Callable[[Any, Any], Dict[str, Any]],
    execute: Callable[..., Any],
    finalize: Callable[[Any, Any, Any, Any], bool],
) -> bool:
    """
    prepare(network, payload) -> kwargs for execute, or raise SubmissionError
    finalize(network, chart, payload, result) -> True to hide the workflow
    """
    state = store.modals.get(name)

    with store.lock:
        network_id = store.active_id
        network = store.active_network
        chart = store.active_chart
        if state.payload is None or network is None or chart is None:
            print(f"[MODALS] {name} confirmation ignored, nothing to confirm")
            return False
        snapshot = state.payload.model_copy()
        link = getattr(snapshot, "link_id", None)
        if link and link not in chart.links:
            print(f"[MODALS] {name} confirmation discarded, link '{link}' is gone")
            return False
        state.update(error=None)
        try:
            kwargs = prepare(network.model_copy(deep=True), snapshot)
        except SubmissionError as e:
            state.update(error=str(e))
            return False

    try:
        result = execute(**kwargs)
    except Exception as e:
        print(f"[MODALS] {name} failed: {e}")
        with store.lock:
            if _still_current(store, state, snapshot, network_id, chart):
                state.update(error=str(e))
        return False

    with store.lock:
        if not _still_current(store, state, snapshot, network_id, chart):
            print(f"[MODALS] {name} result discarded, workflow was cancelled")
            return False
        if finalize(network, chart, state.payload, result):
            # the pending link was consumed by finalize, nothing to compensate
            state.hide()

    store.save()
    return True


def _require(value, message: str):
    if value is None or value == "":
        raise SubmissionError(message)
    return value


def _service(store, attr: str, label: str):
    service = getattr(store.injections, attr)
    if service is None:
        raise SubmissionError(f"No {label} service available")
    return service


# =========================================================
# OPEN CHANNEL
# =========================================================

def confirm_open_channel(store, capacity: int, push_amount: int = 0) -> bool:
    def prepare(network, payload):
        _service(store, "lightning", "lightning")
        from_node = network.find_lightning(_require(payload.from_node, "Source node is required"))
        to_node = network.find_lightning(_require(payload.to, "Destination node is required"))
        if from_node is None or to_node is None:
            raise SubmissionError("Both channel endpoints must be lightning nodes")
        if from_node.name == to_node.name:
            raise SubmissionError("Cannot open a channel to the same node")
        if capacity <= 0:
            raise SubmissionError("Capacity must be greater than zero")
        if push_amount < 0 or push_amount >= capacity:
            raise SubmissionError("Push amount must be less than the capacity")
        return {
            "network": network,
            "from_node": from_node,
            "to_node": to_node,
            "capacity": capacity,
            "push_amount": push_amount,
        }

    def finalize(network, chart, payload, channel_point):
        if payload.link_id:
            remove_link(chart, payload.link_id)
        if not (network.find_lightning(payload.from_node) and network.find_lightning(payload.to)):
            # an endpoint was removed while the channel was opening
            return True
        durable = add_link(
            chart,
            payload.from_node,
            payload.to,
            "open-channel",
            properties={"channelPoint": channel_point, "capacity": capacity},
        )
        network.channels.append(
            Channel(
                id=channel_point or durable,
                from_node=payload.from_node,
                to_node=payload.to,
                capacity=capacity,
                push_amount=push_amount,
            )
        )
        return True

    return run_confirmation(
        store,
        "open_channel",
        prepare,
        lambda **kw: store.injections.lightning.open_channel(**kw),
        finalize,
    )


# =========================================================
# CHANGE BACKEND
# =========================================================

def confirm_change_backend(store) -> bool:
    def prepare(network, payload):
        _service(store, "docker", "docker")
        node = network.find_lightning(_require(payload.ln_name, "Lightning node is required"))
        backend = network.find_bitcoin(_require(payload.backend_name, "Bitcoin node is required"))
        if node is None:
            raise SubmissionError(f"Lightning node '{payload.ln_name}' does not exist")
        if backend is None:
            raise SubmissionError(f"Bitcoin node '{payload.backend_name}' does not exist")
        if node.backend_name == backend.name:
            raise SubmissionError(f"{node.name} is already connected to {backend.name}")
        return {"network": network, "node": node, "backend": backend}

    def finalize(network, chart, payload, _):
        if payload.link_id:
            remove_link(chart, payload.link_id)
        node = network.find_lightning(payload.ln_name)
        if node is None or network.find_bitcoin(payload.backend_name) is None:
            return True
        remove_link(chart, link_id(node.name, node.backend_name, "backend"))
        node.backend_name = payload.backend_name
        add_link(chart, node.name, node.backend_name, "backend")
        return True

    return run_confirmation(
        store,
        "change_backend",
        prepare,
        lambda **kw: store.injections.docker.change_backend(**kw),
        finalize,
    )


# =========================================================
# INVOICES
# =========================================================

def confirm_create_invoice(store, amount: Optional[int] = None, memo: str = "") -> bool:
    def prepare(network, payload):
        _service(store, "lightning", "lightning")
        node = network.find_lightning(_require(payload.node_name, "Node is required"))
        if node is None:
            raise SubmissionError(f"Lightning node '{payload.node_name}' does not exist")
        value = amount if amount is not None else payload.amount
        if not value or value <= 0:
            raise SubmissionError("Amount must be greater than zero")
        return {"network": network, "node": node, "amount": value, "memo": memo}

    def finalize(network, chart, payload, invoice):
        # stays open so the invoice can be copied
        store.modals.create_invoice.update(
            invoice=invoice,
            amount=amount if amount is not None else payload.amount,
        )
        return False

    return run_confirmation(
        store,
        "create_invoice",
        prepare,
        lambda **kw: store.injections.lightning.create_invoice(**kw),
        finalize,
    )


def confirm_pay_invoice(store, invoice: str) -> bool:
    def prepare(network, payload):
        _service(store, "lightning", "lightning")
        node = network.find_lightning(_require(payload.node_name, "Node is required"))
        if node is None:
            raise SubmissionError(f"Lightning node '{payload.node_name}' does not exist")
        return {"network": network, "node": node, "invoice": _require(invoice, "Invoice is required")}

    return run_confirmation(
        store,
        "pay_invoice",
        prepare,
        lambda **kw: store.injections.lightning.pay_invoice(**kw),
        lambda network, chart, payload, result: True,
    )


# =========================================================
# ON-CHAIN
# =========================================================

def confirm_send_on_chain(store, to_address: Optional[str] = None, amount: Optional[float] = None) -> bool:
    def prepare(network, payload):
        _service(store, "bitcoind", "bitcoin")
        node = network.find_bitcoin(_require(payload.backend_name, "Bitcoin node is required"))
        if node is None:
            raise SubmissionError(f"Bitcoin node '{payload.backend_name}' does not exist")
        address = _require(to_address or payload.to_address, "Address is required")
        value = amount if amount is not None else payload.amount
        if not value or value <= 0:
            raise SubmissionError("Amount must be greater than zero")
        return {"network": network, "node": node, "to_address": address, "amount": value}

    return run_confirmation(
        store,
        "send_on_chain",
        prepare,
        lambda **kw: store.injections.bitcoind.send_funds(**kw),
        lambda network, chart, payload, txid: True,
    )


# =========================================================
# ADVANCED OPTIONS
# =========================================================

def confirm_advanced_options(store, command: Optional[str] = None) -> bool:
    """Store the docker startup command on the node; no daemon involved"""
    def prepare(network, payload):
        node = network.find_node(_require(payload.node_name, "Node is required"))
        if node is None:
            raise SubmissionError(f"Node '{payload.node_name}' does not exist")
        return {}

    def finalize(network, chart, payload, _):
        node = network.find_node(payload.node_name)
        if node is not None:
            node.docker.command = command if command is not None else (payload.command or "")
        return True

    return run_confirmation(store, "advanced_options", prepare, lambda: None, finalize)
