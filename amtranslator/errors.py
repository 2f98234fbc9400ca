"""Translation failures and the HTTP status each one maps to.

Every error raised while handling a webhook derives from
:class:`TranslationError`.  The endpoint adapter turns them into an
``HTTPException`` using :attr:`TranslationError.status_code`, so the
original caller can tell a bad inbound request (4xx) from a local
encoding problem (500) and a downstream failure (502).
"""

from typing import Optional


class TranslationError(Exception):
    """Base class for all errors surfaced to the webhook caller.

    Attributes:
        status_code: HTTP status returned to the original caller.
        alert_index: Position of the alert being dispatched when the
            error occurred, or ``None`` when no single alert applies.
    """

    status_code = 500

    def __init__(self, message: str, alert_index: Optional[int] = None):
        super().__init__(message)
        self.alert_index = alert_index

    def __str__(self) -> str:
        message = super().__str__()
        if self.alert_index is not None:
            return f"alert {self.alert_index}: {message}"
        return message


class MalformedInput(TranslationError):
    """The inbound webhook body is not a usable Alertmanager message."""

    status_code = 400


class MissingCredentials(TranslationError):
    """``api_key`` or ``routing_key`` is absent from the query string."""

    status_code = 400


class UnknownStatus(TranslationError):
    """The webhook status is neither ``firing`` nor ``resolved``."""

    status_code = 400

    def __init__(self, status: str):
        super().__init__(f"Unknown Alertmanager status: {status}")
        self.status = status


class EncodingError(TranslationError):
    """An outbound message could not be serialised."""

    status_code = 500


class DispatchError(TranslationError):
    """The POST to VictorOps failed at the transport level."""

    status_code = 502


class ResponseDecodeError(TranslationError):
    """The VictorOps response body could not be decoded."""

    status_code = 502


class DownstreamRejected(TranslationError):
    """VictorOps answered with a non-2xx status.

    Attributes:
        downstream_status: HTTP status returned by VictorOps.
        downstream_message: The ``message`` field of the response body,
            empty when the body could not be decoded.
    """

    status_code = 502

    def __init__(
        self,
        downstream_status: int,
        downstream_message: str = "",
        alert_index: Optional[int] = None,
    ):
        super().__init__(
            f"Unexpected status code {downstream_status} from VictorOps: {downstream_message}",
            alert_index=alert_index,
        )
        self.downstream_status = downstream_status
        self.downstream_message = downstream_message
