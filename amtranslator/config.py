"""Application configuration via environment variables and defaults."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Global configuration loaded from environment / ``.env`` file.

    Attributes:
        victorops_url: Base URL of the VictorOps REST alert-ingestion
            service. The integration path and routing credentials are
            appended per request.
        request_timeout: Timeout in seconds for each outbound POST.
        verify_tls: Whether outbound TLS certificates are verified.
        monitoring_tool: Value sent as ``monitoring_tool`` on every
            outbound message.
        log_level: Python logging level name.
        host: Bind address for the Uvicorn server.
        port: Bind port for the Uvicorn server.
    """

    victorops_url: str = "https://alert.victorops.com"
    request_timeout: float = 10.0
    verify_tls: bool = True
    monitoring_tool: str = "Prometheus Alertmanager"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 80

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "AMTRANSLATOR_",
    }


def get_settings() -> Settings:
    """Return a cached :class:`Settings` instance.

    The instance is constructed once and reused for the lifetime of the
    process.
    """
    return _settings


_settings = Settings()
