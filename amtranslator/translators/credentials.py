"""Per-request VictorOps routing credentials taken from the query string."""

from dataclasses import dataclass
from typing import Mapping

from amtranslator.errors import MissingCredentials

API_KEY_PARAM = "api_key"
ROUTING_KEY_PARAM = "routing_key"


def mask(secret: str) -> str:
    """Return *secret* reduced to a short prefix, safe for log output."""
    if len(secret) <= 4:
        return "***"
    return f"{secret[:4]}***"


@dataclass(frozen=True)
class RoutingCredentials:
    """The REST API key and routing key addressing one VictorOps route.

    Both values end up in the outbound URL path, so ``repr`` only shows
    masked versions.
    """

    api_key: str
    routing_key: str

    def __repr__(self) -> str:
        return (
            f"RoutingCredentials(api_key={mask(self.api_key)!r}, "
            f"routing_key={mask(self.routing_key)!r})"
        )


def _first(params: Mapping[str, str], name: str) -> str:
    """Return the first value of *name*, honouring multi-value mappings."""
    getlist = getattr(params, "getlist", None)
    if getlist is not None:
        values = getlist(name)
        return values[0] if values else ""
    return params.get(name) or ""


def extract_credentials(params: Mapping[str, str]) -> RoutingCredentials:
    """Pull ``api_key`` and ``routing_key`` out of request query parameters.

    Args:
        params: Query parameters; a Starlette ``QueryParams`` or any plain
            mapping.

    Returns:
        The credentials for this request.

    Raises:
        MissingCredentials: If either parameter is absent or empty.
    """
    api_key = _first(params, API_KEY_PARAM)
    routing_key = _first(params, ROUTING_KEY_PARAM)
    if not api_key or not routing_key:
        raise MissingCredentials(
            f"requires query parameters '{API_KEY_PARAM}' and '{ROUTING_KEY_PARAM}'"
        )
    return RoutingCredentials(api_key=api_key, routing_key=routing_key)
