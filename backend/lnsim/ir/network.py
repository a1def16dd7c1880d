from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, computed_field

from .errors import ValidationError
from .validation import ValidationResult


class Status(str, Enum):
    STARTING = "Starting"
    STARTED = "Started"
    STOPPING = "Stopping"
    STOPPED = "Stopped"
    ERROR = "Error"


class DockerConfig(BaseModel):
    image: str = ""     # empty means the default image for the implementation
    command: str = ""   # empty means the default startup command


# ---- Nodes ----

class CommonNode(BaseModel):
    id: int
    name: str
    version: str
    status: Status = Status.STOPPED
    error_msg: Optional[str] = None
    docker: DockerConfig = Field(default_factory=DockerConfig)


class BitcoinPorts(BaseModel):
    rpc: int


class BitcoinNode(CommonNode):
    type: Literal["bitcoin"] = "bitcoin"
    implementation: Literal["bitcoind", "btcd"] = "bitcoind"
    ports: BitcoinPorts


class LndPorts(BaseModel):
    rest: int
    grpc: int


class RestPorts(BaseModel):
    rest: int


class LightningNode(CommonNode):
    type: Literal["lightning"] = "lightning"
    backend_name: str


class LndNode(LightningNode):
    implementation: Literal["LND"] = "LND"
    tls_path: str = ""
    macaroon_path: str = ""
    ports: LndPorts


class CLightningNode(LightningNode):
    implementation: Literal["c-lightning"] = "c-lightning"
    macaroon_path: str = ""
    ports: RestPorts


class EclairNode(LightningNode):
    implementation: Literal["eclair"] = "eclair"
    ports: RestPorts


AnyLightningNode = Annotated[
    Union[LndNode, CLightningNode, EclairNode],
    Field(discriminator="implementation"),
]


class NetworkNodes(BaseModel):
    bitcoin: List[BitcoinNode] = Field(default_factory=list)
    lightning: List[AnyLightningNode] = Field(default_factory=list)


# ---- Channels ----

class Channel(BaseModel):
    id: str
    from_node: str
    to_node: str
    capacity: int
    push_amount: int = 0
    status: Literal["pending", "open"] = "pending"


# ---- Root ----

class Network(BaseModel):
    id: int
    name: str
    path: str
    nodes: NetworkNodes = Field(default_factory=NetworkNodes)
    channels: List[Channel] = Field(default_factory=list)

    @computed_field
    @property
    def status(self) -> Status:
        # imported lazily, lifecycle depends on this module
        from lnsim.lifecycle.status import aggregate_status
        return aggregate_status(self)

    def all_nodes(self) -> List[CommonNode]:
        return [*self.nodes.bitcoin, *self.nodes.lightning]

    def find_node(self, name: str) -> Optional[CommonNode]:
        for node in self.all_nodes():
            if node.name == name:
                return node
        return None

    def find_bitcoin(self, name: str) -> Optional[BitcoinNode]:
        return next((n for n in self.nodes.bitcoin if n.name == name), None)

    def find_lightning(self, name: str) -> Optional[LightningNode]:
        return next((n for n in self.nodes.lightning if n.name == name), None)

    def validate_topology(self) -> ValidationResult:
        errors = []

        seen: set[str] = set()
        for node in self.all_nodes():
            if node.name in seen:
                errors.append(
                    ValidationError(
                        level="network",
                        message="duplicate node name",
                        object_id=node.name,
                    )
                )
            seen.add(node.name)

        backend_names = {n.name for n in self.nodes.bitcoin}
        for ln in self.nodes.lightning:
            if ln.backend_name not in backend_names:
                errors.append(
                    ValidationError(
                        level="network",
                        message=f"backend '{ln.backend_name}' not found",
                        object_id=ln.name,
                    )
                )

        if errors:
            return ValidationResult.failure(errors)

        return ValidationResult.success()
