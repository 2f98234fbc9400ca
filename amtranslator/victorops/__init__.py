"""VictorOps package: REST payload models and the HTTPS client."""

from amtranslator.victorops.client import DispatchOutcome, VictorOpsClient
from amtranslator.victorops.models import MessageType, VictorOpsAlert, VictorOpsResponse

__all__ = [
    "DispatchOutcome",
    "MessageType",
    "VictorOpsAlert",
    "VictorOpsClient",
    "VictorOpsResponse",
]
