"""Tool dispatch for the Slack MCP Gateway.

Every invocation resolves the tool, loads credentials, validates arguments,
performs the tool's Slack call(s) and returns exactly one ``ToolResult``.
"""

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from slack_gateway.config import ConfigurationError, SlackCredentials, load_slack_credentials
from slack_gateway.mcp_gateway.tool_specs import TOOL_SPECS, tool_method_name
from slack_gateway.mcp_gateway.tools import TOOL_MODULES, SlackTools
from slack_gateway.mcp_gateway.validation import (
    ArgumentValidator,
    InvalidArgumentError,
    MissingArgumentError,
)

_dispatch_log = logging.getLogger("slack_gateway.mcp_gateway.dispatcher")

ClientFactory = Callable[[str], AsyncWebClient]
CredentialsLoader = Callable[[], SlackCredentials]

UNKNOWN_TOOL = "UNKNOWN_TOOL"
CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
MISSING_ARGUMENT = "MISSING_ARGUMENT"
INVALID_ARGUMENT = "INVALID_ARGUMENT"
SLACK_API_ERROR = "SLACK_API_ERROR"
EXECUTION_ERROR = "EXECUTION_ERROR"


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one tool invocation: a payload, or an error message."""

    success: bool
    content: Any = None
    error: str | None = None
    error_code: str | None = None
    tool: str | None = None

    @classmethod
    def ok(cls, content: Any, tool: str | None = None) -> "ToolResult":
        return cls(success=True, content=content, tool=tool)

    @classmethod
    def failure(cls, message: str, code: str, tool: str | None = None) -> "ToolResult":
        return cls(success=False, error=message, error_code=code, tool=tool)


@dataclass(frozen=True)
class ToolHandler:
    """Schema, validator and implementing method for one catalog entry."""

    name: str
    spec: dict[str, Any]
    module: type[SlackTools]
    method_name: str
    validator: ArgumentValidator = field(compare=False)

    async def invoke(self, client: AsyncWebClient, team_id: str, arguments: dict[str, Any]) -> Any:
        method = getattr(self.module(client, team_id), self.method_name)
        return await method(**arguments)


def _tool_methods(module: type[SlackTools]) -> list[str]:
    return [
        name
        for name, member in vars(module).items()
        if not name.startswith("_") and inspect.iscoroutinefunction(member)
    ]


def build_tool_handlers(
    specs: list[dict[str, Any]] | None = None,
    modules: tuple[type[SlackTools], ...] | None = None,
) -> dict[str, ToolHandler]:
    """Pair every tool spec with its implementing method.

    Raises ``RuntimeError`` if a spec has no method, or a tool-module method
    is missing from the catalog, so a mismatch fails at startup.
    """
    specs = TOOL_SPECS if specs is None else specs
    modules = TOOL_MODULES if modules is None else modules

    owners: dict[str, type[SlackTools]] = {}
    for module in modules:
        for method_name in _tool_methods(module):
            if method_name in owners:
                raise RuntimeError(
                    f"Tool method {method_name} defined by both "
                    f"{owners[method_name].__name__} and {module.__name__}"
                )
            owners[method_name] = module

    handlers: dict[str, ToolHandler] = {}
    for spec in specs:
        name = str(spec["name"])
        method_name = tool_method_name(name)
        module = owners.get(method_name)
        if module is None:
            raise RuntimeError(f"No handler implements tool {name}")
        input_schema: dict[str, Any] = spec.get("input_schema", {})
        handlers[name] = ToolHandler(
            name=name,
            spec=spec,
            module=module,
            method_name=method_name,
            validator=ArgumentValidator(input_schema),
        )

    claimed = {handler.method_name for handler in handlers.values()}
    unclaimed = sorted(set(owners) - claimed)
    if unclaimed:
        raise RuntimeError(f"Tool methods without a catalog entry: {', '.join(unclaimed)}")
    return handlers


def slack_error_message(error: SlackApiError) -> str:
    response = error.response
    error_code = response.get("error") if response is not None else None
    if error_code:
        return f"An API error occurred: {error_code}"
    return str(error)


def _default_client_factory(token: str) -> AsyncWebClient:
    return AsyncWebClient(token=token)


class ToolDispatcher:
    """Maps tool names to Slack calls and wraps every outcome in a ToolResult."""

    def __init__(
        self,
        client_factory: ClientFactory | None = None,
        credentials_loader: CredentialsLoader | None = None,
        handlers: dict[str, ToolHandler] | None = None,
    ) -> None:
        self._client_factory = client_factory or _default_client_factory
        self._credentials_loader = credentials_loader or load_slack_credentials
        self._handlers = handlers if handlers is not None else build_tool_handlers()

    @property
    def tool_names(self) -> list[str]:
        return list(self._handlers.keys())

    @property
    def specs(self) -> list[dict[str, Any]]:
        return [handler.spec for handler in self._handlers.values()]

    async def dispatch(
        self,
        name: str,
        arguments: dict[str, Any] | None,
        session_id: str | None = None,
    ) -> ToolResult:
        handler = self._handlers.get(name)
        if handler is None:
            return ToolResult.failure(f"Unknown tool: {name}", UNKNOWN_TOOL, tool=name)

        _dispatch_log.info(
            "tool_call tool=%s session_id=%s",
            name,
            session_id or "(none)",
            extra={"tool": name, "session_id": session_id},
        )
        try:
            credentials = self._credentials_loader()
            validated = handler.validator.validate(arguments)
            client = self._client_factory(credentials.bot_token)
            payload = await handler.invoke(client, credentials.team_id, validated)
        except ConfigurationError as e:
            return ToolResult.failure(str(e), CONFIGURATION_ERROR, tool=name)
        except MissingArgumentError as e:
            return ToolResult.failure(str(e), MISSING_ARGUMENT, tool=name)
        except InvalidArgumentError as e:
            return ToolResult.failure(str(e), INVALID_ARGUMENT, tool=name)
        except SlackApiError as e:
            message = slack_error_message(e)
            _dispatch_log.info(
                "tool_slack_error tool=%s session_id=%s error=%s",
                name,
                session_id or "(none)",
                message,
                extra={"tool": name, "session_id": session_id, "error": message},
            )
            return ToolResult.failure(message, SLACK_API_ERROR, tool=name)
        except Exception as e:
            _dispatch_log.warning(
                "tool_error tool=%s session_id=%s error=%s",
                name,
                session_id or "(none)",
                str(e),
                extra={"tool": name, "session_id": session_id, "error": str(e)},
            )
            return ToolResult.failure(str(e) or type(e).__name__, EXECUTION_ERROR, tool=name)

        return ToolResult.ok(payload, tool=name)
