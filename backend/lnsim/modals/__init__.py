from lnsim.modals.workflows import (
    WORKFLOWS,
    AdvancedOptionsPayload,
    ChangeBackendPayload,
    CreateInvoicePayload,
    ImageUpdatesPayload,
    ModalsModel,
    OpenChannelPayload,
    PayInvoicePayload,
    SendOnChainPayload,
    WorkflowState,
)
from lnsim.modals.confirm import (
    confirm_advanced_options,
    confirm_change_backend,
    confirm_create_invoice,
    confirm_open_channel,
    confirm_pay_invoice,
    confirm_send_on_chain,
)

__all__ = [
    "WORKFLOWS",
    "AdvancedOptionsPayload",
    "ChangeBackendPayload",
    "CreateInvoicePayload",
    "ImageUpdatesPayload",
    "ModalsModel",
    "OpenChannelPayload",
    "PayInvoicePayload",
    "SendOnChainPayload",
    "WorkflowState",
    "confirm_advanced_options",
    "confirm_change_backend",
    "confirm_create_invoice",
    "confirm_open_channel",
    "confirm_pay_invoice",
    "confirm_send_on_chain",
]
