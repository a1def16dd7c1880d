"""
DesignerStore - the process-wide state container.

Holds every network, its chart and the workflow modals. All mutations go
through the methods below; each one runs under the store lock so no two
structural edits interleave, and persists the result when a repository
is attached.
"""

import threading
from typing import Dict, List, Optional

from lnsim.ir.chart import Chart, EntityRef, NetworksFile, Position
from lnsim.ir.errors import ConnectivityError
from lnsim.ir.network import CommonNode, Network, Status
from lnsim.ir.validation import ValidationResult
from lnsim.lifecycle.status import apply_transition
from lnsim.modals.workflows import ModalsModel
from lnsim.registry.network_registry import NetworkRegistry, create_network as build_network
from lnsim.services.base import StoreInjections
from lnsim.validation.chart_fixer import validate_and_fix_chart
from lnsim.visual import topology
from lnsim.visual.chart_mapper import init_chart_from_network


class DesignerStore:
    def __init__(self, injections: Optional[StoreInjections] = None, repository=None):
        self.registry = NetworkRegistry()
        self.charts: Dict[int, Chart] = {}
        self.active_id: Optional[int] = None
        self.injections = injections or StoreInjections()
        self.repository = repository
        self.modals = ModalsModel(get_chart=lambda: self.active_chart)
        self.lock = threading.RLock()

    # =========================================================
    # READ ACCESS
    # =========================================================

    @property
    def networks(self) -> List[Network]:
        return self.registry.networks

    def get_network(self, network_id: int) -> Optional[Network]:
        return self.registry.get(network_id)

    def get_chart(self, network_id: int) -> Optional[Chart]:
        return self.charts.get(network_id)

    @property
    def active_network(self) -> Optional[Network]:
        if self.active_id is None:
            return None
        return self.registry.get(self.active_id)

    @property
    def active_chart(self) -> Optional[Chart]:
        if self.active_id is None:
            return None
        return self.charts.get(self.active_id)

    def to_file(self) -> NetworksFile:
        return NetworksFile(
            networks=[n.model_copy(deep=True) for n in self.registry.networks],
            charts={k: c.model_copy(deep=True) for k, c in self.charts.items()},
        )

    # =========================================================
    # PERSISTENCE
    # =========================================================

    def load(self) -> None:
        """Replace the in-memory state with what the repository holds"""
        if self.repository is None:
            return

        data = self.repository.load()
        with self.lock:
            self.registry = NetworkRegistry(data.networks)
            self.charts = {}
            for network in data.networks:
                topology_check = network.validate_topology()
                if not topology_check.is_valid:
                    print(f"[STORE] Network {network.id} is inconsistent: {topology_check.messages}")
                chart = data.charts.get(network.id)
                if chart is None:
                    chart = init_chart_from_network(network)
                else:
                    chart, validation, fix = validate_and_fix_chart(chart, network)
                    if fix.changes_made:
                        print(f"[STORE] Repaired chart {network.id}: {fix.changes_made}")
                self.charts[network.id] = chart
            if self.active_id not in self.charts:
                self.active_id = None

        print(f"[STORE] Loaded {len(self.registry)} network(s)")

    def save(self) -> None:
        if self.repository is None:
            return
        # held across the write so saves land in mutation order
        with self.lock:
            self.repository.save(self.to_file())

    # =========================================================
    # NETWORKS
    # =========================================================

    def add_network(self, network: Network) -> Chart:
        """Register a network and derive its chart"""
        result = network.validate_topology()
        if not result.is_valid:
            raise ValueError(f"Invalid network '{network.name}': {'; '.join(result.messages)}")

        with self.lock:
            chart = init_chart_from_network(network)
            self.registry.add(network)
            self.charts[network.id] = chart
        self.save()
        return chart

    def create_network(self, name: str, **counts) -> Network:
        with self.lock:
            network = build_network(self.registry.next_id(), name, **counts)
            self.add_network(network)
        return network

    def remove_network(self, network_id: int) -> bool:
        with self.lock:
            if self.active_id == network_id:
                self._release_pending_links()
                self.active_id = None
            network = self.registry.remove(network_id)
            self.charts.pop(network_id, None)
        if network is None:
            return False
        self.save()
        return True

    def set_active(self, network_id: Optional[int]) -> bool:
        """
        Choose the network whose chart the workflows act on.
        Workflows holding a pending link on the previous chart are cancelled.
        """
        with self.lock:
            if network_id is not None and network_id not in self.charts:
                return False
            if network_id == self.active_id:
                return True
            released = self._release_pending_links()
            self.active_id = network_id
        if released:
            self.save()
        return True

    def _release_pending_links(self) -> bool:
        released = False
        for name, state in self.modals.workflows.items():
            if state.pending_link and state.payload is not None:
                released = released or bool(state.payload.link_id)
                self.modals.hide(name)
        return released

    # =========================================================
    # TOPOLOGY
    # =========================================================

    def add_link(self, network_id: int, from_node: str, to_node: str, kind: str, **ports) -> Optional[str]:
        with self.lock:
            chart = self.charts.get(network_id)
            if chart is None:
                return None
            link_id = topology.add_link(chart, from_node, to_node, kind, **ports)
        if link_id:
            self.save()
        return link_id

    def remove_link(self, network_id: int, link_id: str) -> bool:
        with self.lock:
            chart = self.charts.get(network_id)
            removed = chart is not None and topology.remove_link(chart, link_id)
        if removed:
            self.save()
        return removed

    def remove_node(self, network_id: int, node_id: str) -> bool:
        with self.lock:
            chart = self.charts.get(network_id)
            network = self.registry.get(network_id)
            removed = (
                chart is not None
                and network is not None
                and topology.remove_node(chart, network, node_id)
            )
        if removed:
            self.save()
        return removed

    def move_node(self, network_id: int, node_id: str, position: Position) -> bool:
        with self.lock:
            chart = self.charts.get(network_id)
            moved = chart is not None and topology.move_node(chart, node_id, position)
        if moved:
            self.save()
        return moved

    def set_selected(self, network_id: int, ref: Optional[EntityRef]) -> None:
        with self.lock:
            chart = self.charts.get(network_id)
            if chart is None:
                return
            topology.set_selected(chart, ref)
        self.save()

    def set_hovered(self, network_id: int, ref: Optional[EntityRef]) -> None:
        # hover is transient, not worth a save
        with self.lock:
            chart = self.charts.get(network_id)
            if chart is not None:
                topology.set_hovered(chart, ref)

    def set_offset(self, network_id: int, offset: Position) -> bool:
        with self.lock:
            chart = self.charts.get(network_id)
            if chart is None:
                return False
            topology.set_offset(chart, offset)
        self.save()
        return True

    def zoom(self, network_id: int, delta: float) -> Optional[float]:
        with self.lock:
            chart = self.charts.get(network_id)
            if chart is None:
                return None
            scale = topology.zoom(chart, delta)
        self.save()
        return scale

    def reset_zoom(self, network_id: int) -> Optional[float]:
        with self.lock:
            chart = self.charts.get(network_id)
            if chart is None:
                return None
            scale = topology.reset_zoom(chart)
        self.save()
        return scale

    # =========================================================
    # LIFECYCLE
    # =========================================================

    def set_node_status(
        self,
        network_id: int,
        node_name: str,
        status: Status,
        error_msg: Optional[str] = None,
    ) -> ValidationResult:
        with self.lock:
            network = self.registry.get(network_id)
            node = network.find_node(node_name) if network else None
            if node is None:
                # late completion for a node that was removed meanwhile
                print(f"[LIFECYCLE] Ignoring status for unknown node '{node_name}'")
                return ValidationResult.success()
            result = self._transition(network_id, node, status, error_msg)
        if result.is_valid:
            self.save()
        return result

    def on_probe_result(
        self,
        network_id: int,
        node_name: str,
        online: bool,
        error_msg: Optional[str] = None,
    ) -> ValidationResult:
        target = Status.STARTED if online else Status.ERROR
        return self.set_node_status(network_id, node_name, target, error_msg)

    def _transition(self, network_id: int, node: CommonNode, status: Status, error_msg=None):
        result = apply_transition(node, status, error_msg)
        chart = self.charts.get(network_id)
        if result.is_valid and chart is not None:
            topology.sync_node_status(chart, node)
        return result

    def _set_all(self, network_id: int, status: Status, error_msg=None) -> List[str]:
        with self.lock:
            network = self.registry.get(network_id)
            if network is None:
                return []
            names = []
            for node in network.all_nodes():
                if self._transition(network_id, node, status, error_msg).is_valid:
                    names.append(node.name)
            return names

    def start_network(self, network_id: int) -> bool:
        """
        Start every container of a network and wait for each node to come
        online. Failures end up on the nodes as Error, never raised.
        """
        with self.lock:
            network = self.registry.get(network_id)
            if network is None:
                return False
            starting = self._set_all(network_id, Status.STARTING)
            view = network.model_copy(deep=True)
        self.save()

        docker = self.injections.docker
        try:
            if docker is None:
                raise ConnectivityError("No docker service available")
            docker.start(view)
        except Exception as e:
            print(f"[LIFECYCLE] Failed to start network {network_id}: {e}")
            self._set_all(network_id, Status.ERROR, str(e))
            self.save()
            return False

        probe = self.injections.probe
        ok = True
        for node in view.all_nodes():
            if node.name not in starting:
                continue
            if probe is None:
                self.on_probe_result(network_id, node.name, True)
                continue
            try:
                probe.wait_until_online(view, node)
                self.on_probe_result(network_id, node.name, True)
            except Exception as e:
                ok = False
                self.on_probe_result(network_id, node.name, False, str(e))
        return ok

    def stop_network(self, network_id: int) -> bool:
        with self.lock:
            network = self.registry.get(network_id)
            if network is None:
                return False
            self._set_all(network_id, Status.STOPPING)
            view = network.model_copy(deep=True)
        self.save()

        docker = self.injections.docker
        try:
            if docker is None:
                raise ConnectivityError("No docker service available")
            docker.stop(view)
        except Exception as e:
            print(f"[LIFECYCLE] Failed to stop network {network_id}: {e}")
            self._set_all(network_id, Status.ERROR, str(e))
            self.save()
            return False

        self._set_all(network_id, Status.STOPPED)
        self.save()
        return True

    # =========================================================
    # WORKFLOWS
    # =========================================================

    def show_workflow(self, name: str, **fields):
        with self.lock:
            return self.modals.show(name, **fields)

    def hide_workflow(self, name: str) -> None:
        with self.lock:
            state = self.modals.get(name)
            had_link = bool(
                state.pending_link and state.payload is not None and state.payload.link_id
            )
            self.modals.hide(name)
        if had_link:
            self.save()
