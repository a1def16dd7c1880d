from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError as PydanticValidationError

from lnsim.api.serializers import serialize, serialize_chart, serialize_network
from lnsim.ir.chart import Position
from lnsim.modals import (
    confirm_advanced_options,
    confirm_change_backend,
    confirm_create_invoice,
    confirm_open_channel,
    confirm_pay_invoice,
    confirm_send_on_chain,
)
from lnsim.schemas import (
    AddLinkRequest,
    ConfirmWorkflowRequest,
    CreateNetworkRequest,
    EntityRefRequest,
    PositionRequest,
    ProbeResultRequest,
    ShowWorkflowRequest,
    StatusRequest,
    ZoomRequest,
)
from lnsim.services.connection_info import connection_info
from lnsim.store import DesignerStore

router = APIRouter()


def get_store(request: Request) -> DesignerStore:
    return request.app.state.store


def _network(store: DesignerStore, network_id: int):
    network = store.get_network(network_id)
    if network is None:
        raise HTTPException(status_code=404, detail=f"Network {network_id} not found")
    return network


def _chart(store: DesignerStore, network_id: int):
    network = _network(store, network_id)
    return network, store.get_chart(network_id)


def _workflow(store: DesignerStore, name: str):
    state = store.modals.get(name)
    if state is None:
        raise HTTPException(status_code=404, detail=f"Workflow '{name}' not found")
    return state


# =========================================================
# NETWORKS
# =========================================================

@router.get("/networks")
def list_networks(store: DesignerStore = Depends(get_store)):
    with store.lock:
        return {
            "networks": [serialize_network(n) for n in store.networks],
            "summary": store.registry.get_summary(),
            "active_id": store.active_id,
        }


@router.post("/networks")
def create_network(request: CreateNetworkRequest, store: DesignerStore = Depends(get_store)):
    try:
        network = store.create_network(
            request.name,
            lnd_nodes=request.lnd_nodes,
            clightning_nodes=request.clightning_nodes,
            eclair_nodes=request.eclair_nodes,
            bitcoind_nodes=request.bitcoind_nodes,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    print(f"[API] Created network {network.id} '{network.name}'")
    return {"status": "success", "network": serialize_network(network)}


@router.get("/networks/{network_id}")
def get_network(network_id: int, store: DesignerStore = Depends(get_store)):
    with store.lock:
        return serialize_network(_network(store, network_id))


@router.delete("/networks/{network_id}")
def delete_network(network_id: int, store: DesignerStore = Depends(get_store)):
    if not store.remove_network(network_id):
        raise HTTPException(status_code=404, detail=f"Network {network_id} not found")
    return {"status": "success"}


@router.post("/networks/{network_id}/activate")
def activate_network(network_id: int, store: DesignerStore = Depends(get_store)):
    _network(store, network_id)
    store.set_active(network_id)
    return {"status": "success", "active_id": store.active_id}


@router.post("/networks/{network_id}/start")
def start_network(network_id: int, store: DesignerStore = Depends(get_store)):
    _network(store, network_id)
    ok = store.start_network(network_id)
    with store.lock:
        network = _network(store, network_id)
        return {"status": "success" if ok else "error", "network": serialize_network(network)}


@router.post("/networks/{network_id}/stop")
def stop_network(network_id: int, store: DesignerStore = Depends(get_store)):
    _network(store, network_id)
    ok = store.stop_network(network_id)
    with store.lock:
        network = _network(store, network_id)
        return {"status": "success" if ok else "error", "network": serialize_network(network)}


# =========================================================
# NODES
# =========================================================

@router.post("/networks/{network_id}/nodes/{node_name}/status")
def set_node_status(
    network_id: int,
    node_name: str,
    request: StatusRequest,
    store: DesignerStore = Depends(get_store),
):
    _network(store, network_id)
    result = store.set_node_status(network_id, node_name, request.status, request.error_msg)
    if not result.is_valid:
        raise HTTPException(status_code=409, detail=result.messages)
    return {"status": "success"}


@router.post("/networks/{network_id}/nodes/{node_name}/probe")
def report_probe(
    network_id: int,
    node_name: str,
    request: ProbeResultRequest,
    store: DesignerStore = Depends(get_store),
):
    _network(store, network_id)
    result = store.on_probe_result(network_id, node_name, request.online, request.error_msg)
    return {"status": "success" if result.is_valid else "rejected", "result": serialize(result)}


@router.get("/networks/{network_id}/nodes/{node_name}/connection")
def get_connection_info(network_id: int, node_name: str, store: DesignerStore = Depends(get_store)):
    with store.lock:
        node = _network(store, network_id).find_lightning(node_name)
        if node is None:
            raise HTTPException(status_code=404, detail=f"Lightning node '{node_name}' not found")
        return connection_info(node)


@router.delete("/networks/{network_id}/nodes/{node_name}")
def remove_node(network_id: int, node_name: str, store: DesignerStore = Depends(get_store)):
    _network(store, network_id)
    return {"removed": store.remove_node(network_id, node_name)}


@router.put("/networks/{network_id}/nodes/{node_name}/position")
def move_node(
    network_id: int,
    node_name: str,
    request: PositionRequest,
    store: DesignerStore = Depends(get_store),
):
    _network(store, network_id)
    return {"moved": store.move_node(network_id, node_name, Position(x=request.x, y=request.y))}


# =========================================================
# CHART
# =========================================================

@router.get("/networks/{network_id}/chart")
def get_chart(network_id: int, store: DesignerStore = Depends(get_store)):
    with store.lock:
        network, chart = _chart(store, network_id)
        return serialize_chart(chart, network)


@router.post("/networks/{network_id}/links")
def add_link(network_id: int, request: AddLinkRequest, store: DesignerStore = Depends(get_store)):
    _network(store, network_id)
    link_id = store.add_link(
        network_id,
        request.from_node,
        request.to,
        request.kind,
        from_port=request.from_port,
        to_port=request.to_port,
    )
    if link_id is None:
        raise HTTPException(status_code=400, detail="Both endpoints must be on the chart")
    return {"status": "success", "link_id": link_id}


@router.delete("/networks/{network_id}/links/{link_id}")
def remove_link(network_id: int, link_id: str, store: DesignerStore = Depends(get_store)):
    _network(store, network_id)
    return {"removed": store.remove_link(network_id, link_id)}


@router.put("/networks/{network_id}/selected")
def set_selected(network_id: int, request: EntityRefRequest, store: DesignerStore = Depends(get_store)):
    _network(store, network_id)
    store.set_selected(network_id, request.ref)
    return {"status": "success"}


@router.put("/networks/{network_id}/hovered")
def set_hovered(network_id: int, request: EntityRefRequest, store: DesignerStore = Depends(get_store)):
    _network(store, network_id)
    store.set_hovered(network_id, request.ref)
    return {"status": "success"}


@router.put("/networks/{network_id}/offset")
def set_offset(network_id: int, request: PositionRequest, store: DesignerStore = Depends(get_store)):
    _network(store, network_id)
    store.set_offset(network_id, Position(x=request.x, y=request.y))
    return {"status": "success"}


@router.post("/networks/{network_id}/zoom")
def zoom(network_id: int, request: ZoomRequest, store: DesignerStore = Depends(get_store)):
    _network(store, network_id)
    scale = store.zoom(network_id, request.delta)
    return {"scale": scale, "can_reset_zoom": scale != 1.0}


@router.post("/networks/{network_id}/zoom/reset")
def reset_zoom(network_id: int, store: DesignerStore = Depends(get_store)):
    _network(store, network_id)
    return {"scale": store.reset_zoom(network_id), "can_reset_zoom": False}


# =========================================================
# WORKFLOWS
# =========================================================

# name -> (injected service it needs, confirm handler)
CONFIRMATIONS = {
    "open_channel": (
        "lightning",
        lambda store, r: confirm_open_channel(store, r.capacity or 0, r.push_amount),
    ),
    "change_backend": (
        "docker",
        lambda store, r: confirm_change_backend(store),
    ),
    "create_invoice": (
        "lightning",
        lambda store, r: confirm_create_invoice(
            store, int(r.amount) if r.amount is not None else None, r.memo
        ),
    ),
    "pay_invoice": (
        "lightning",
        lambda store, r: confirm_pay_invoice(store, r.invoice or ""),
    ),
    "send_on_chain": (
        "bitcoind",
        lambda store, r: confirm_send_on_chain(store, r.to_address, r.amount),
    ),
    "advanced_options": (
        None,
        lambda store, r: confirm_advanced_options(store, r.command),
    ),
}


@router.get("/modals")
def get_modals(store: DesignerStore = Depends(get_store)):
    with store.lock:
        return store.modals.to_dict()


@router.post("/modals/{name}/show")
def show_workflow(name: str, request: ShowWorkflowRequest, store: DesignerStore = Depends(get_store)):
    _workflow(store, name)
    try:
        store.show_workflow(name, **request.payload)
    except PydanticValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    with store.lock:
        return store.modals.get(name).to_dict()


@router.post("/modals/{name}/hide")
def hide_workflow(name: str, store: DesignerStore = Depends(get_store)):
    _workflow(store, name)
    store.hide_workflow(name)
    return {"visible": False}


@router.post("/modals/{name}/confirm")
def confirm_workflow(
    name: str,
    request: ConfirmWorkflowRequest,
    store: DesignerStore = Depends(get_store),
):
    state = _workflow(store, name)
    if name not in CONFIRMATIONS:
        raise HTTPException(status_code=400, detail=f"Workflow '{name}' has nothing to confirm")

    service, handler = CONFIRMATIONS[name]
    if service and getattr(store.injections, service) is None:
        raise HTTPException(status_code=501, detail=f"No {service} service configured")

    confirmed = handler(store, request)
    with store.lock:
        return {"confirmed": confirmed, "modal": state.to_dict()}

