from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any

from lnsim.ir.chart import EntityRef, LinkKind
from lnsim.ir.network import Status


class CreateNetworkRequest(BaseModel):
    name: str
    lnd_nodes: int = Field(default=1, ge=0)
    clightning_nodes: int = Field(default=1, ge=0)
    eclair_nodes: int = Field(default=1, ge=0)
    bitcoind_nodes: int = Field(default=1, ge=0)


class AddLinkRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_node: str = Field(alias="from")
    to: str
    kind: LinkKind = "backend"
    from_port: Optional[str] = None
    to_port: Optional[str] = None


class StatusRequest(BaseModel):
    status: Status
    error_msg: Optional[str] = None


class ProbeResultRequest(BaseModel):
    online: bool
    error_msg: Optional[str] = None


class ZoomRequest(BaseModel):
    delta: float


class EntityRefRequest(BaseModel):
    """`ref: null` clears the selection / hover"""
    ref: Optional[EntityRef] = None


class PositionRequest(BaseModel):
    x: float
    y: float


class ShowWorkflowRequest(BaseModel):
    payload: Dict[str, Any] = {}  # e.g. {"from": "alice", "link_id": "..."}


class ConfirmWorkflowRequest(BaseModel):
    """Inputs entered in the modal; each workflow reads the ones it needs"""
    capacity: Optional[int] = None
    push_amount: int = 0
    amount: Optional[float] = None
    memo: str = ""
    invoice: Optional[str] = None
    to_address: Optional[str] = None
    command: Optional[str] = None
