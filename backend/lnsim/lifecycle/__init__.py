from lnsim.lifecycle.status import (
    LEGAL_TRANSITIONS,
    aggregate_status,
    apply_transition,
    can_transition,
)

__all__ = [
    "LEGAL_TRANSITIONS",
    "aggregate_status",
    "apply_transition",
    "can_transition",
]
