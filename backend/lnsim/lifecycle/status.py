"""
Node status transitions and the network-level status policy.

A node moves along:

    Stopped -> Starting -> Started -> Stopping -> Stopped
                  |
                  +-> Error -> Starting (retry)

and any state may drop to Error when something unexpected happens.
Applying the status a node already has is accepted and changes nothing,
so late or duplicated completions from probes are harmless.
"""

from typing import Optional

from lnsim.ir.errors import ValidationError
from lnsim.ir.network import CommonNode, Network, Status
from lnsim.ir.validation import ValidationResult

LEGAL_TRANSITIONS = {
    Status.STOPPED: {Status.STARTING},
    Status.STARTING: {Status.STARTED},
    Status.STARTED: {Status.STOPPING},
    Status.STOPPING: {Status.STOPPED},
    Status.ERROR: {Status.STARTING},
}

DEFAULT_ERROR_MSG = "Unknown error"


def can_transition(current: Status, target: Status) -> bool:
    if current == target or target == Status.ERROR:
        return True
    return target in LEGAL_TRANSITIONS.get(current, set())


def apply_transition(
    node: CommonNode,
    target: Status,
    error_msg: Optional[str] = None,
) -> ValidationResult:
    if node.status == target:
        return ValidationResult.success()

    if not can_transition(node.status, target):
        print(
            f"[LIFECYCLE] Rejected {node.name}: "
            f"{node.status.value} -> {target.value}"
        )
        return ValidationResult.failure([
            ValidationError(
                level="lifecycle",
                message=f"illegal transition {node.status.value} -> {target.value}",
                object_id=node.name,
            )
        ])

    node.status = target
    if target == Status.ERROR:
        node.error_msg = error_msg or DEFAULT_ERROR_MSG
    else:
        node.error_msg = None

    return ValidationResult.success()


def aggregate_status(network: Network) -> Status:
    statuses = [node.status for node in network.all_nodes()]

    if not statuses:
        return Status.STOPPED

    # highest precedence first
    for status in (Status.ERROR, Status.STARTING, Status.STOPPING):
        if status in statuses:
            return status

    if all(s == Status.STARTED for s in statuses):
        return Status.STARTED

    return Status.STOPPED
