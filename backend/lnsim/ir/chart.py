from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .network import Network

LinkKind = Literal["backend", "pending-backend", "pending-channel", "open-channel"]


class Position(BaseModel):
    x: float = 0
    y: float = 0


class Size(BaseModel):
    width: float
    height: float


class Port(BaseModel):
    id: str
    type: str  # input | output | left | right


class ChartNode(BaseModel):
    id: str
    type: Literal["bitcoin", "lightning"]
    position: Position = Field(default_factory=Position)
    size: Size
    ports: Dict[str, Port] = Field(default_factory=dict)
    properties: Dict[str, Any] = Field(default_factory=dict)


class LinkEndpoint(BaseModel):
    node_id: str
    port_id: str


class ChartLink(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    from_: LinkEndpoint = Field(alias="from")
    to: LinkEndpoint
    kind: LinkKind
    properties: Dict[str, Any] = Field(default_factory=dict)

    def touches(self, node_id: str) -> bool:
        return self.from_.node_id == node_id or self.to.node_id == node_id


class EntityRef(BaseModel):
    type: Literal["node", "link"]
    id: str


class Chart(BaseModel):
    nodes: Dict[str, ChartNode] = Field(default_factory=dict)
    links: Dict[str, ChartLink] = Field(default_factory=dict)
    selected: Optional[EntityRef] = None
    hovered: Optional[EntityRef] = None
    scale: float = 1.0
    offset: Position = Field(default_factory=Position)


class NetworksFile(BaseModel):
    """Everything persisted between runs: networks in order, charts by network id."""
    networks: List[Network] = Field(default_factory=list)
    charts: Dict[int, Chart] = Field(default_factory=dict)
