"""HTTPS client for the VictorOps generic REST alert-ingestion endpoint.

One :meth:`VictorOpsClient.send` call is one dispatch: the alert is
serialised, POSTed to the route addressed by the request credentials and
the response envelope is decoded and checked.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from amtranslator.config import get_settings
from amtranslator.errors import (
    DispatchError,
    DownstreamRejected,
    EncodingError,
    ResponseDecodeError,
)
from amtranslator.translators.credentials import RoutingCredentials, mask
from amtranslator.victorops.models import MessageType, VictorOpsAlert, VictorOpsResponse

logger = logging.getLogger(__name__)

ALERT_PATH = "/integrations/generic/20131114/alert"


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of one accepted dispatch.

    Attributes:
        entity_id: Entity id echoed by VictorOps, falling back to the one
            sent when the response could not be decoded.
        message_type: Kind of message that was sent.
        status_code: HTTP status returned by VictorOps.
        response: Decoded response envelope, ``None`` if undecodable.
        warning: Description of a tolerated response-decode failure.
        alert_index: Position of the originating alert, ``None`` for a
            group-level recovery notice.
    """

    entity_id: Optional[str]
    message_type: MessageType
    status_code: int
    response: Optional[VictorOpsResponse] = None
    warning: Optional[str] = None
    alert_index: Optional[int] = None


class VictorOpsClient:
    """Sends :class:`VictorOpsAlert` messages to VictorOps.

    Args:
        base_url: Scheme and host of the VictorOps API.
        timeout: Per-request timeout in seconds.
        verify: Whether TLS certificates are verified.
        transport: Optional ``httpx`` transport, used by tests to fake the
            remote end.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        verify: bool = True,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.verify = verify
        self._transport = transport

    @classmethod
    def from_settings(cls) -> "VictorOpsClient":
        """Build a client from the application settings."""
        cfg = get_settings()
        return cls(cfg.victorops_url, timeout=cfg.request_timeout, verify=cfg.verify_tls)

    def alert_url(self, credentials: RoutingCredentials) -> str:
        """Return the ingestion URL for *credentials*.

        The result embeds both keys and must not be logged.
        """
        return "/".join(
            (
                self.base_url + ALERT_PATH,
                quote(credentials.api_key, safe=""),
                quote(credentials.routing_key, safe=""),
            )
        )

    def send(
        self,
        alert: VictorOpsAlert,
        credentials: RoutingCredentials,
        strict: bool = False,
    ) -> DispatchOutcome:
        """POST *alert* to VictorOps and check the response.

        Args:
            alert: The message to deliver.
            credentials: API and routing key addressing the route.
            strict: When ``True`` an undecodable response body fails the
                dispatch. Otherwise the failure is logged, reported in
                :attr:`DispatchOutcome.warning` and the status code alone
                decides the outcome.

        Returns:
            The outcome of an accepted dispatch.

        Raises:
            EncodingError: The alert could not be serialised.
            DispatchError: The request did not reach VictorOps or its
                response could not be read.
            ResponseDecodeError: *strict* is set and the body is not a
                VictorOps response envelope.
            DownstreamRejected: VictorOps answered with a non-2xx status.
        """
        try:
            body = json.dumps(alert.to_wire())
        except (TypeError, ValueError) as exc:
            logger.error("Failed to encode VictorOps alert: %s", exc)
            raise EncodingError(f"Failed to encode VictorOps alert: {exc}") from exc

        route = f"{mask(credentials.api_key)}/{mask(credentials.routing_key)}"
        logger.debug(
            "Posting %s alert for entity %s to route %s",
            alert.message_type.value,
            alert.entity_id,
            route,
        )

        try:
            with httpx.Client(
                timeout=self.timeout, verify=self.verify, transport=self._transport
            ) as client:
                resp = client.post(
                    self.alert_url(credentials),
                    content=body,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.RequestError as exc:
            # Covers transport failures, undecodable content encodings and
            # redirect loops. httpx error text can contain the request URL.
            logger.error(
                "Failed post to VictorOps REST api (route %s): %s", route, type(exc).__name__
            )
            raise DispatchError(
                f"Failed post to VictorOps REST api: {type(exc).__name__}"
            ) from exc

        response: Optional[VictorOpsResponse] = None
        warning: Optional[str] = None
        try:
            response = VictorOpsResponse.model_validate_json(resp.content)
        except ValidationError as exc:
            warning = f"Could not decode VictorOps response body: {exc.errors()[0]['msg']}"
            logger.error("%s (status %d)", warning, resp.status_code)
            if strict:
                raise ResponseDecodeError(warning) from exc

        if not resp.is_success:
            message = (response.message or "") if response else ""
            logger.error("Unexpected status code %d from VictorOps: %s", resp.status_code, message)
            raise DownstreamRejected(resp.status_code, message)

        logger.info(
            "VictorOps accepted %s alert for entity %s (status %d)",
            alert.message_type.value,
            alert.entity_id,
            resp.status_code,
        )
        return DispatchOutcome(
            entity_id=response.entity_id if response and response.entity_id else alert.entity_id,
            message_type=alert.message_type,
            status_code=resp.status_code,
            response=response,
            warning=warning,
        )
