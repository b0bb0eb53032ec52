"""Configuration model for the websocket bridge server."""

from __future__ import annotations

from dataclasses import dataclass

WEBSOCKET_PATH = "/ws"
HEALTHZ_PATH = "/healthz"


class ServerConfigurationError(Exception):
    """Raised when UI server configuration is invalid."""


@dataclass(frozen=True)
class UIServerConfig:
    """Validated bridge server configuration derived from app settings."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765

    def __post_init__(self) -> None:
        if not self.host.strip():
            raise ServerConfigurationError("UI_SERVER_HOST cannot be empty")

        if not 1 <= self.port <= 65535:
            raise ServerConfigurationError(
                f"UI_SERVER_PORT must be in [1, 65535], got: {self.port}"
            )

    @property
    def websocket_path(self) -> str:
        return WEBSOCKET_PATH

    @classmethod
    def from_settings(cls, settings) -> "UIServerConfig":
        return cls(
            enabled=bool(settings.enabled),
            host=settings.host,
            port=settings.port,
        )
