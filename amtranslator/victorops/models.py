"""VictorOps REST alert-ingestion payloads.

See the generic REST endpoint documentation: only ``message_type`` is
required; every other field is omitted from the wire form when unset so
that VictorOps applies its own defaults.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class MessageType(str, Enum):
    """Kinds of message accepted by VictorOps.

    ``CRITICAL`` raises an incident, ``WARNING`` may raise one depending
    on the VictorOps settings, ``INFO`` only lands on the timeline and
    ``RECOVERY`` resolves the incident for an entity.
    """

    INFO = "INFO"
    WARNING = "WARNING"
    ACKNOWLEDGEMENT = "ACKNOWLEDGEMENT"
    CRITICAL = "CRITICAL"
    RECOVERY = "RECOVERY"

    @classmethod
    def parse(cls, value: str) -> Optional["MessageType"]:
        """Return the member named by *value* (case-insensitive) or ``None``."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class VictorOpsAlert(BaseModel):
    """Body of one POST to the alert-ingestion endpoint.

    Attributes:
        message_type: Kind of message.
        entity_id: Identifies the monitored entity across messages.
        timestamp: Time the message was generated (seconds since epoch).
        state_start_time: When the entity entered its current state.
        state_message: Free-form status information.
        monitoring_tool: Name of the monitoring system.
        entity_display_name: Human-readable entity name.
        ack_msg: Acknowledgement comment.
        ack_author: User that acknowledged the incident.
    """

    message_type: MessageType
    entity_id: Optional[str] = None
    timestamp: Optional[int] = None
    state_start_time: Optional[int] = None
    state_message: Optional[str] = None
    monitoring_tool: Optional[str] = None
    entity_display_name: Optional[str] = None
    ack_msg: Optional[str] = None
    ack_author: Optional[str] = None

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready dict with unset fields dropped."""
        return self.model_dump(mode="json", exclude_none=True)


class VictorOpsResponse(BaseModel):
    """JSON envelope returned by the alert-ingestion endpoint.

    Attributes:
        result: ``"success"`` or ``"failure"``.
        entity_id: The entity id sent, or the one VictorOps assigned.
        message: Error message, if any.
    """

    result: str = ""
    entity_id: str = ""
    message: Optional[str] = None

    model_config = {"frozen": True}
