"""Alertmanager → VictorOps translation.

A *firing* notification becomes one VictorOps message per alert, sent
one after the other; the first failed dispatch aborts the rest and is
reported for the whole notification, even though earlier alerts may
already have been delivered.  A *resolved* notification becomes a single
``RECOVERY`` message for the group.

Label and annotation maps are rendered in key order so that the state
message is reproducible.
"""

import dataclasses
import logging
import time
from typing import Callable, Optional

from amtranslator.alertmanager.models import FIRING, RESOLVED, InboundAlert, InboundMessage
from amtranslator.config import get_settings
from amtranslator.errors import MalformedInput, TranslationError, UnknownStatus
from amtranslator.translators.credentials import RoutingCredentials
from amtranslator.victorops.client import DispatchOutcome, VictorOpsClient
from amtranslator.victorops.models import MessageType, VictorOpsAlert

logger = logging.getLogger(__name__)

#: Alert label that overrides the message type of a firing alert.
MESSAGE_TYPE_LABEL = "victorops_message_type"
DEFAULT_MESSAGE_TYPE = MessageType.CRITICAL
DEFAULT_MONITORING_TOOL = "Prometheus Alertmanager"
RECOVERY_MESSAGE = "Entity recovered"


def message_type_for(alert: InboundAlert) -> MessageType:
    """Pick the VictorOps message type for a firing alert.

    Args:
        alert: The firing alert.

    Returns:
        The type named by the ``victorops_message_type`` label, or
        ``CRITICAL`` when the label is missing, empty or not a known type.
    """
    override = alert.labels.get(MESSAGE_TYPE_LABEL, "")
    if not override:
        return DEFAULT_MESSAGE_TYPE
    parsed = MessageType.parse(override)
    if parsed is None:
        logger.warning(
            "Ignoring unknown %s label value %r, using %s",
            MESSAGE_TYPE_LABEL,
            override,
            DEFAULT_MESSAGE_TYPE.value,
        )
        return DEFAULT_MESSAGE_TYPE
    return parsed


def build_state_message(alert: InboundAlert, external_url: str) -> str:
    """Combine annotations, labels and source links into one text block."""
    lines = [f"{key}: {alert.annotations[key]}" for key in sorted(alert.annotations)]
    lines += [f"{key}: {alert.labels[key]}" for key in sorted(alert.labels)]
    lines.append(f"Prometheus: {alert.generator_url}")
    lines.append(f"Alertmanager: {external_url}")
    return "\n".join(lines)


class VictorOpsTranslator:
    """Turns Alertmanager notifications into VictorOps dispatches.

    Args:
        client: Dispatcher used to deliver each message.
        monitoring_tool: Value sent as ``monitoring_tool``.
        clock: Returns the current time in seconds since the epoch.
    """

    def __init__(
        self,
        client: VictorOpsClient,
        monitoring_tool: str = DEFAULT_MONITORING_TOOL,
        clock: Callable[[], float] = time.time,
    ):
        self.client = client
        self.monitoring_tool = monitoring_tool
        self.clock = clock

    def translate(
        self, message: InboundMessage, credentials: RoutingCredentials
    ) -> list[DispatchOutcome]:
        """Translate and deliver one notification.

        Args:
            message: The decoded Alertmanager webhook.
            credentials: Routing credentials for this request.

        Returns:
            One outcome per dispatch, in send order.

        Raises:
            MalformedInput: ``alerts`` is ``null``.
            UnknownStatus: The status is neither firing nor resolved.
            TranslationError: A dispatch failed; ``alert_index`` tells
                which alert of a firing notification it was.
        """
        if message.alerts is None:
            raise MalformedInput("Missing fields in request body")

        if message.status == FIRING:
            return self._fire(message, credentials)
        if message.status == RESOLVED:
            return [self._resolve(message, credentials)]

        logger.error("Unknown Alertmanager status: %s", message.status)
        raise UnknownStatus(message.status)

    def build_alert(self, message: InboundMessage, alert: InboundAlert) -> VictorOpsAlert:
        """Build the VictorOps message for one firing alert."""
        return VictorOpsAlert(
            message_type=message_type_for(alert),
            entity_id=message.entity_id,
            timestamp=int(self.clock()),
            state_start_time=alert.start_epoch(),
            state_message=build_state_message(alert, message.external_url),
            monitoring_tool=self.monitoring_tool,
            entity_display_name=message.display_name,
        )

    def build_recovery(self, message: InboundMessage) -> VictorOpsAlert:
        """Build the group-level RECOVERY message for a resolved notification."""
        return VictorOpsAlert(
            message_type=MessageType.RECOVERY,
            entity_id=message.entity_id,
            timestamp=int(self.clock()),
            state_message=RECOVERY_MESSAGE,
            monitoring_tool=self.monitoring_tool,
            entity_display_name=message.display_name,
        )

    def _fire(
        self, message: InboundMessage, credentials: RoutingCredentials
    ) -> list[DispatchOutcome]:
        outcomes: list[DispatchOutcome] = []
        for index, alert in enumerate(message.alerts):
            try:
                outcome = self.client.send(self.build_alert(message, alert), credentials)
            except TranslationError as exc:
                exc.alert_index = index
                logger.error(
                    "Dispatch of alert %d/%d for group %s failed, %d already delivered",
                    index + 1,
                    len(message.alerts),
                    message.entity_id,
                    len(outcomes),
                )
                raise
            outcomes.append(dataclasses.replace(outcome, alert_index=index))
        logger.info(
            "Forwarded %d firing alert(s) for group %s", len(outcomes), message.entity_id
        )
        return outcomes

    def _resolve(
        self, message: InboundMessage, credentials: RoutingCredentials
    ) -> DispatchOutcome:
        outcome = self.client.send(self.build_recovery(message), credentials, strict=True)
        logger.info("Forwarded recovery for group %s", message.entity_id)
        return outcome


def translator_from_settings(client: Optional[VictorOpsClient] = None) -> VictorOpsTranslator:
    """Build a translator configured from the application settings."""
    cfg = get_settings()
    return VictorOpsTranslator(
        client or VictorOpsClient.from_settings(),
        monitoring_tool=cfg.monitoring_tool,
    )
