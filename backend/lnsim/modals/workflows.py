"""
Workflow modal state.

Each workflow is either hidden (no payload) or visible with a typed
payload, so a visible workflow always has a payload to work with and a
hidden one never carries stale fields. OpenChannel and ChangeBackend may
point at a pending chart link; hiding them removes that link.
"""

from typing import Any, Callable, Dict, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from lnsim.ir.chart import Chart
from lnsim.visual.topology import remove_link


# ---- Payloads ----

class OpenChannelPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_node: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    link_id: Optional[str] = None
    error: Optional[str] = None


class ChangeBackendPayload(BaseModel):
    ln_name: Optional[str] = None
    backend_name: Optional[str] = None
    link_id: Optional[str] = None
    error: Optional[str] = None


class CreateInvoicePayload(BaseModel):
    node_name: Optional[str] = None
    invoice: Optional[str] = None
    amount: Optional[int] = None
    error: Optional[str] = None


class PayInvoicePayload(BaseModel):
    node_name: Optional[str] = None
    error: Optional[str] = None


class AdvancedOptionsPayload(BaseModel):
    node_name: Optional[str] = None
    command: Optional[str] = None
    default_command: Optional[str] = None
    error: Optional[str] = None


class ImageUpdatesPayload(BaseModel):
    error: Optional[str] = None


class SendOnChainPayload(BaseModel):
    backend_name: Optional[str] = None
    to_address: Optional[str] = None
    amount: Optional[float] = None
    error: Optional[str] = None


P = TypeVar("P", bound=BaseModel)


class WorkflowState(Generic[P]):
    def __init__(self, name: str, payload_type: Type[P], pending_link: bool = False):
        self.name = name
        self.payload_type = payload_type
        self.pending_link = pending_link
        self.payload: Optional[P] = None

    @property
    def visible(self) -> bool:
        return self.payload is not None

    def show(self, **fields) -> P:
        """Make the workflow visible and merge the given fields into its payload"""
        current = self.payload.model_dump() if self.payload is not None else {}
        self.payload = self.payload_type.model_validate({**current, **self._by_name(fields)})
        return self.payload

    def update(self, **fields) -> bool:
        """Merge fields into a visible workflow; hidden workflows stay hidden"""
        if self.payload is None:
            return False
        self.show(**fields)
        return True

    def hide(self) -> Optional[P]:
        payload, self.payload = self.payload, None
        return payload

    def to_dict(self) -> Dict[str, Any]:
        if self.payload is None:
            return {"visible": False}
        return {
            "visible": True,
            **self.payload.model_dump(by_alias=True, exclude_none=True),
        }

    def _by_name(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        # accept both field names and aliases ("from")
        aliases = {
            f.alias: name
            for name, f in self.payload_type.model_fields.items()
            if f.alias
        }
        return {aliases.get(k, k): v for k, v in fields.items()}


WORKFLOWS = {
    "open_channel": (OpenChannelPayload, True),
    "change_backend": (ChangeBackendPayload, True),
    "create_invoice": (CreateInvoicePayload, False),
    "pay_invoice": (PayInvoicePayload, False),
    "advanced_options": (AdvancedOptionsPayload, False),
    "image_updates": (ImageUpdatesPayload, False),
    "send_on_chain": (SendOnChainPayload, False),
}


class ModalsModel:
    """
    All workflow states for the designer.

    get_chart returns the chart the workflows act on (the active one);
    it is only consulted when a pending link has to be removed.
    """

    def __init__(self, get_chart: Callable[[], Optional[Chart]]):
        self.get_chart = get_chart
        self.workflows: Dict[str, WorkflowState] = {
            name: WorkflowState(name, payload_type, pending_link)
            for name, (payload_type, pending_link) in WORKFLOWS.items()
        }

    def get(self, name: str) -> Optional[WorkflowState]:
        return self.workflows.get(name)

    def show(self, name: str, **fields):
        return self.workflows[name].show(**fields)

    def hide(self, name: str) -> None:
        state = self.workflows[name]
        payload = state.payload

        if state.pending_link and payload is not None and payload.link_id:
            chart = self.get_chart()
            if chart is not None and remove_link(chart, payload.link_id):
                print(f"[MODALS] {name} cancelled, removed pending link '{payload.link_id}'")

        state.hide()

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {name: state.to_dict() for name, state in self.workflows.items()}

    # ---- named accessors ----

    @property
    def open_channel(self) -> WorkflowState[OpenChannelPayload]:
        return self.workflows["open_channel"]

    @property
    def change_backend(self) -> WorkflowState[ChangeBackendPayload]:
        return self.workflows["change_backend"]

    @property
    def create_invoice(self) -> WorkflowState[CreateInvoicePayload]:
        return self.workflows["create_invoice"]

    @property
    def pay_invoice(self) -> WorkflowState[PayInvoicePayload]:
        return self.workflows["pay_invoice"]

    @property
    def advanced_options(self) -> WorkflowState[AdvancedOptionsPayload]:
        return self.workflows["advanced_options"]

    @property
    def image_updates(self) -> WorkflowState[ImageUpdatesPayload]:
        return self.workflows["image_updates"]

    @property
    def send_on_chain(self) -> WorkflowState[SendOnChainPayload]:
        return self.workflows["send_on_chain"]

    def show_open_channel(self, **fields) -> OpenChannelPayload:
        return self.show("open_channel", **fields)

    def hide_open_channel(self) -> None:
        self.hide("open_channel")

    def show_change_backend(self, **fields) -> ChangeBackendPayload:
        return self.show("change_backend", **fields)

    def hide_change_backend(self) -> None:
        self.hide("change_backend")

    def show_create_invoice(self, **fields) -> CreateInvoicePayload:
        return self.show("create_invoice", **fields)

    def hide_create_invoice(self) -> None:
        self.hide("create_invoice")

    def show_pay_invoice(self, **fields) -> PayInvoicePayload:
        return self.show("pay_invoice", **fields)

    def hide_pay_invoice(self) -> None:
        self.hide("pay_invoice")

    def show_advanced_options(self, **fields) -> AdvancedOptionsPayload:
        return self.show("advanced_options", **fields)

    def hide_advanced_options(self) -> None:
        self.hide("advanced_options")

    def show_image_updates(self) -> ImageUpdatesPayload:
        return self.show("image_updates")

    def hide_image_updates(self) -> None:
        self.hide("image_updates")

    def show_send_on_chain(self, **fields) -> SendOnChainPayload:
        return self.show("send_on_chain", **fields)

    def hide_send_on_chain(self) -> None:
        self.hide("send_on_chain")
