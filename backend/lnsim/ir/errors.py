from dataclasses import dataclass


@dataclass
class ValidationError:
    level: str
    message: str
    object_id: str


class LnsimError(Exception):
    """Base class for failures raised by external collaborators."""


class ConnectivityError(LnsimError):
    """A daemon probe or RPC call failed or timed out."""


class SubmissionError(LnsimError):
    """A workflow executor could not perform the confirmed action."""
