import os
from unittest.mock import patch

import pytest

from slack_gateway.config import (
    ConfigurationError,
    GatewayConfig,
    credential_presence,
    load_slack_credentials,
)


def test_load_credentials_from_env() -> None:
    env = {"SLACK_BOT_TOKEN": "xoxb-1", "SLACK_TEAM_ID": "T1"}
    with patch.dict(os.environ, env, clear=True):
        credentials = load_slack_credentials()

    assert credentials.bot_token == "xoxb-1"
    assert credentials.team_id == "T1"


@pytest.mark.parametrize(
    ("env", "missing"),
    [
        ({}, "SLACK_BOT_TOKEN"),
        ({"SLACK_BOT_TOKEN": "xoxb-1"}, "SLACK_TEAM_ID"),
        ({"SLACK_BOT_TOKEN": "", "SLACK_TEAM_ID": "T1"}, "SLACK_BOT_TOKEN"),
    ],
)
def test_missing_credentials(env: dict[str, str], missing: str) -> None:
    with patch.dict(os.environ, env, clear=True):
        with pytest.raises(ConfigurationError, match=f"Missing {missing} env var"):
            load_slack_credentials()


def test_credential_presence_never_exposes_values() -> None:
    with patch.dict(os.environ, {"SLACK_BOT_TOKEN": "xoxb-secret"}, clear=True):
        presence = credential_presence()

    assert presence == {"hasSlackBotToken": True, "hasSlackTeamId": False}
    assert "xoxb-secret" not in repr(presence)


def test_gateway_config_defaults() -> None:
    with patch.dict(os.environ, {}, clear=True):
        config = GatewayConfig.from_env()

    assert config == GatewayConfig()
    assert config.port == 3000
    assert config.keep_alive_timeout == 65


def test_gateway_config_from_env() -> None:
    env = {
        "PORT": "8080",
        "SLACK_MCP_HOST": "127.0.0.1",
        "SLACK_MCP_CORS_ORIGINS": "https://a.example, https://b.example",
        "SLACK_MCP_JSON_RESPONSE": "yes",
        "SLACK_MCP_LOG_LEVEL": "debug",
    }
    with patch.dict(os.environ, env, clear=True):
        config = GatewayConfig.from_env()

    assert config.port == 8080
    assert config.host == "127.0.0.1"
    assert config.cors_origins == ("https://a.example", "https://b.example")
    assert config.json_response is True
    assert config.log_level == "DEBUG"


def test_bad_port_is_a_configuration_error() -> None:
    with patch.dict(os.environ, {"PORT": "http"}, clear=True):
        with pytest.raises(ConfigurationError, match="PORT"):
            GatewayConfig.from_env()
