"""API router for the Alertmanager → VictorOps translation endpoint.

Endpoints
---------
* ``POST /victorops?api_key=...&routing_key=...``: translate an
  Alertmanager webhook and forward it to VictorOps.

Failures are reported with the status code of the matching
:mod:`amtranslator.errors` class: 400 for an unusable inbound request,
500 for a local encoding failure and 502 when VictorOps could not be
reached or rejected the alert.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ValidationError

from amtranslator.alertmanager.models import InboundMessage
from amtranslator.errors import MalformedInput, TranslationError
from amtranslator.translators.credentials import extract_credentials
from amtranslator.translators.victorops import VictorOpsTranslator, translator_from_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["victorops"])


# ---------------------------------------------------------------------------
# Response schema
# ---------------------------------------------------------------------------


class TranslationResponse(BaseModel):
    """Summary returned after every alert was accepted by VictorOps.

    Attributes:
        status: Always ``"ok"``.
        dispatched: Number of messages delivered.
        entity_id: Entity id of the alert group, if known.
        warnings: Tolerated problems, e.g. undecodable VictorOps replies.
    """

    status: str = "ok"
    dispatched: int
    entity_id: Optional[str] = None
    warnings: list[str] = []


def get_translator() -> VictorOpsTranslator:
    """FastAPI dependency yielding a settings-configured translator."""
    return translator_from_settings()


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("", response_model=TranslationResponse)
async def api_victorops(
    request: Request,
    translator: VictorOpsTranslator = Depends(get_translator),
):
    """Translate one Alertmanager notification into VictorOps alerts."""
    # The query string carries the routing credentials; log the path only.
    logger.debug("Received VictorOps translation request: %s", request.url.path)

    try:
        message = _decode(await request.body())
        credentials = extract_credentials(request.query_params)
        outcomes = await run_in_threadpool(translator.translate, message, credentials)
    except TranslationError as exc:
        logger.error("VictorOps translation failed (%d): %s", exc.status_code, exc)
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc

    return TranslationResponse(
        dispatched=len(outcomes),
        entity_id=message.entity_id,
        warnings=[o.warning for o in outcomes if o.warning],
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _decode(body: bytes) -> InboundMessage:
    """Parse and validate an Alertmanager webhook body.

    Args:
        body: Raw request body.

    Returns:
        The decoded message, guaranteed to carry an alert list.

    Raises:
        MalformedInput: The body is not valid JSON, does not match the
            webhook schema or has a ``null`` alert list.
    """
    try:
        message = InboundMessage.model_validate_json(body)
    except ValidationError as exc:
        raise MalformedInput(f"Could not decode Alertmanager request body: {exc}") from exc
    if message.alerts is None:
        raise MalformedInput("Missing fields in request body")
    return message
