"""Environment-driven configuration for the Slack MCP gateway."""

from __future__ import annotations

import os
from dataclasses import dataclass

SLACK_BOT_TOKEN_ENV = "SLACK_BOT_TOKEN"
SLACK_TEAM_ID_ENV = "SLACK_TEAM_ID"

DEFAULT_PORT = 3000
DEFAULT_KEEP_ALIVE_TIMEOUT_S = 65


class ConfigurationError(RuntimeError):
    """A required setting is absent from the environment."""


@dataclass(frozen=True)
class SlackCredentials:
    bot_token: str
    team_id: str


def _required_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigurationError(f"Missing {name} env var")
    return value


def load_slack_credentials() -> SlackCredentials:
    """Read the Slack credentials; called once per tool invocation."""
    return SlackCredentials(
        bot_token=_required_env(SLACK_BOT_TOKEN_ENV),
        team_id=_required_env(SLACK_TEAM_ID_ENV),
    )


def credential_presence() -> dict[str, bool]:
    """Report which credentials are set without exposing their values."""
    return {
        "hasSlackBotToken": bool(os.getenv(SLACK_BOT_TOKEN_ENV)),
        "hasSlackTeamId": bool(os.getenv(SLACK_TEAM_ID_ENV)),
    }


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name, "")
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or default


@dataclass(frozen=True)
class GatewayConfig:
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    cors_origins: tuple[str, ...] = ("*",)
    json_response: bool = False
    keep_alive_timeout: int = DEFAULT_KEEP_ALIVE_TIMEOUT_S
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Build the HTTP server configuration from ``SLACK_MCP_*`` variables."""
        port_value = os.getenv("PORT", str(DEFAULT_PORT))
        try:
            port = int(port_value)
        except ValueError as e:
            raise ConfigurationError(f"PORT must be an integer, got {port_value!r}") from e
        return cls(
            host=os.getenv("SLACK_MCP_HOST", "0.0.0.0"),
            port=port,
            cors_origins=tuple(_env_list("SLACK_MCP_CORS_ORIGINS", ["*"])),
            json_response=_env_flag("SLACK_MCP_JSON_RESPONSE"),
            log_level=os.getenv("SLACK_MCP_LOG_LEVEL", "INFO").upper(),
        )
