from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel

from lnsim.ir.chart import Chart
from lnsim.ir.network import Network
from lnsim.validation import validate_chart
from lnsim.visual.topology import can_reset_zoom


PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def serialize(obj: Any):
    """
    Turn models, dataclasses and enums into JSON-compatible structures.
    Pydantic models are dumped with their aliases ("from").
    """

    if isinstance(obj, Enum):
        return obj.value

    if isinstance(obj, PRIMITIVE_TYPES):
        return obj

    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True)

    if isinstance(obj, (list, tuple)):
        return [serialize(item) for item in obj]

    if isinstance(obj, dict):
        return {k: serialize(v) for k, v in obj.items()}

    if is_dataclass(obj):
        return {f.name: serialize(getattr(obj, f.name)) for f in fields(obj)}

    return str(obj)


def serialize_network(network: Network) -> dict:
    return serialize(network)


def serialize_chart(chart: Chart, network: Network) -> dict:
    validation = validate_chart(chart, network)
    return {
        **serialize(chart),
        "can_reset_zoom": can_reset_zoom(chart),
        "validation": {**validation.to_dict(), "summary": validation.get_summary()},
    }
