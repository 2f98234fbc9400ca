"""FastAPI application entry point.

Builds the route table, assembles the app from it and configures
logging when the server starts.
"""

import logging
from contextlib import asynccontextmanager
from types import MappingProxyType
from typing import Mapping, Optional

from fastapi import APIRouter, FastAPI

from amtranslator import __version__
from amtranslator.api import victorops
from amtranslator.config import get_settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Route table
# ---------------------------------------------------------------------------


def build_routes() -> Mapping[str, APIRouter]:
    """Return the read-only table of translator path → router."""
    return MappingProxyType({"/victorops": victorops.router})


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle handler."""
    cfg = get_settings()
    logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")
    # httpx logs every request URL at INFO; ours embed the routing keys.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logger.info(
        "am-rest-translator v%s starting up, routes: %s",
        __version__,
        ", ".join(app.state.routes),
    )
    yield
    logger.info("am-rest-translator shut down")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------


def create_app(routes: Optional[Mapping[str, APIRouter]] = None) -> FastAPI:
    """Assemble the FastAPI application.

    Args:
        routes: Path prefix → router table. Defaults to
            :func:`build_routes`.

    Returns:
        The configured application.
    """
    routes = build_routes() if routes is None else routes
    application = FastAPI(
        title="am-rest-translator",
        version=__version__,
        description="Translates Alertmanager webhooks into REST alert APIs.",
        lifespan=lifespan,
    )
    application.state.routes = routes
    for prefix, router in routes.items():
        application.include_router(router, prefix=prefix)

    @application.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return application


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the application via Uvicorn when invoked as ``python -m amtranslator.main``."""
    import uvicorn

    cfg = get_settings()
    uvicorn.run(
        "amtranslator.main:app",
        host=cfg.host,
        port=cfg.port,
        log_level=cfg.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
