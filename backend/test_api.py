"""HTTP surface, exercised with FastAPI's TestClient"""

from fastapi.testclient import TestClient

from lnsim.main import create_app
from lnsim.services import LightningService, StoreInjections
from lnsim.store import DesignerStore


class FakeLightning(LightningService):
    def open_channel(self, network, from_node, to_node, capacity, push_amount=0):
        return "beef:1"

    def create_invoice(self, network, node, amount, memo=""):
        return "lnbcrt1fake"

    def pay_invoice(self, network, node, invoice):
        pass


def make_client(**injections):
    store = DesignerStore(injections=StoreInjections(**injections))
    return TestClient(create_app(store)), store


def create_network(client, **body):
    response = client.post("/networks", json={"name": "test network", **body})
    assert response.status_code == 200
    return response.json()["network"]


def test_create_and_list_networks():
    client, _ = make_client()

    network = create_network(client)

    assert network["id"] == 1
    assert network["status"] == "Stopped"
    assert [n["name"] for n in network["nodes"]["lightning"]] == ["alice", "bob", "carol"]

    listing = client.get("/networks").json()
    assert listing["summary"][0]["lightning"] == 3
    assert listing["active_id"] is None


def test_unknown_network_is_404():
    client, _ = make_client()
    assert client.get("/networks/9").status_code == 404
    assert client.get("/networks/9/chart").status_code == 404
    assert client.delete("/networks/9").status_code == 404


def test_create_network_without_backend_is_400():
    client, _ = make_client()
    response = client.post("/networks", json={"name": "broken", "bitcoind_nodes": 0})
    assert response.status_code == 400


def test_chart_payload():
    client, _ = make_client()
    create_network(client)

    chart = client.get("/networks/1/chart").json()

    assert set(chart["links"]) == {"alice-backend1", "bob-backend1", "carol-backend1"}
    assert chart["links"]["alice-backend1"]["from"]["node_id"] == "alice"
    assert chart["can_reset_zoom"] is False
    assert chart["validation"]["is_valid"] is True


def test_zoom_and_reset():
    client, _ = make_client()
    create_network(client)

    assert client.post("/networks/1/zoom", json={"delta": 0.1}).json() == {
        "scale": 1.1,
        "can_reset_zoom": True,
    }
    assert client.post("/networks/1/zoom/reset").json()["scale"] == 1.0
    assert client.post("/networks/1/zoom", json={"delta": -0.1}).json()["scale"] == 0.9


def test_links_and_nodes():
    client, store = make_client()
    create_network(client)

    response = client.post("/networks/1/links", json={"from": "alice", "to": "bob", "kind": "pending-channel"})
    assert response.json()["link_id"] == "alice-bob-pending-channel"

    response = client.post("/networks/1/links", json={"from": "alice", "to": "ghost"})
    assert response.status_code == 400

    assert client.delete("/networks/1/links/alice-bob-pending-channel").json() == {"removed": True}
    assert client.delete("/networks/1/links/alice-bob-pending-channel").json() == {"removed": False}

    assert client.delete("/networks/1/nodes/alice").json() == {"removed": True}
    chart = client.get("/networks/1/chart").json()
    assert "alice" not in chart["nodes"]
    assert set(chart["links"]) == {"bob-backend1", "carol-backend1"}

    assert client.delete("/networks/1/nodes/backend1").json() == {"removed": False}


def test_selection_and_position():
    client, store = make_client()
    create_network(client)

    client.put("/networks/1/selected", json={"ref": {"type": "node", "id": "bob"}})
    client.put("/networks/1/nodes/bob/position", json={"x": 5, "y": 6})
    client.put("/networks/1/offset", json={"x": -100, "y": 20})

    chart = client.get("/networks/1/chart").json()
    assert chart["selected"] == {"type": "node", "id": "bob"}
    assert chart["nodes"]["bob"]["position"] == {"x": 5.0, "y": 6.0}
    assert chart["offset"] == {"x": -100.0, "y": 20.0}

    client.put("/networks/1/selected", json={"ref": None})
    assert store.get_chart(1).selected is None


def test_node_status():
    client, _ = make_client()
    create_network(client)

    assert client.post("/networks/1/nodes/alice/status", json={"status": "Started"}).status_code == 409

    response = client.post("/networks/1/nodes/alice/status", json={"status": "Starting"})
    assert response.status_code == 200
    assert client.get("/networks/1").json()["status"] == "Starting"

    response = client.post("/networks/1/nodes/alice/probe", json={"online": False, "error_msg": "refused"})
    assert response.json()["status"] == "success"
    alice = client.get("/networks/1").json()["nodes"]["lightning"][0]
    assert alice["status"] == "Error"
    assert alice["error_msg"] == "refused"


def test_connection_info():
    client, _ = make_client()
    create_network(client)

    assert client.get("/networks/1/nodes/bob/connection").json()["restUrl"] == "http://127.0.0.1:8181"
    assert client.get("/networks/1/nodes/backend1/connection").status_code == 404


def test_modals_show_and_hide():
    client, _ = make_client()
    create_network(client)
    client.post("/networks/1/activate")

    response = client.post("/modals/open_channel/show", json={"payload": {"to": "bob"}})
    assert response.json() == {"visible": True, "to": "bob"}

    client.post("/networks/1/links", json={"from": "alice", "to": "bob", "kind": "pending-channel"})
    client.post("/modals/open_channel/show", json={"payload": {"link_id": "alice-bob-pending-channel"}})
    client.post("/modals/open_channel/hide")

    assert client.get("/modals").json()["open_channel"] == {"visible": False}
    assert "alice-bob-pending-channel" not in client.get("/networks/1/chart").json()["links"]


def test_unknown_workflow_is_404():
    client, _ = make_client()
    assert client.post("/modals/nope/show", json={}).status_code == 404
    assert client.post("/modals/nope/confirm", json={}).status_code == 404


def test_confirm_without_executor_is_501():
    client, _ = make_client()
    create_network(client)
    client.post("/networks/1/activate")
    client.post("/modals/change_backend/show", json={"payload": {"ln_name": "alice", "backend_name": "backend1"}})

    assert client.post("/modals/change_backend/confirm", json={}).status_code == 501


def test_confirm_open_channel():
    client, store = make_client(lightning=FakeLightning())
    create_network(client)
    client.post("/networks/1/activate")
    client.post("/networks/1/links", json={"from": "alice", "to": "bob", "kind": "pending-channel"})
    client.post(
        "/modals/open_channel/show",
        json={"payload": {"from": "alice", "to": "bob", "link_id": "alice-bob-pending-channel"}},
    )

    response = client.post("/modals/open_channel/confirm", json={"capacity": 100000})

    assert response.json() == {"confirmed": True, "modal": {"visible": False}}
    links = client.get("/networks/1/chart").json()["links"]
    assert "alice-bob-open-channel" in links
    assert "alice-bob-pending-channel" not in links
    assert store.get_network(1).channels[0].id == "beef:1"
