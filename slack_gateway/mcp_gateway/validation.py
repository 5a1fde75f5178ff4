"""Tool argument validation for the Slack MCP Gateway."""

from typing import Any, cast


class ToolArgumentError(ValueError):
    """Base class for argument problems detected before any Slack call."""


class MissingArgumentError(ToolArgumentError):
    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        noun = "argument" if len(missing) == 1 else "arguments"
        super().__init__(f"Missing required {noun}: {', '.join(missing)}")


class InvalidArgumentError(ToolArgumentError):
    pass


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


class ArgumentValidator:
    """Validates tool arguments against a tool's input schema.

    Required names must be present and non-empty; integers are coerced and
    clamped to the schema's ``minimum``/``maximum``; absent optionals take
    the schema default. Names outside the schema are dropped.
    """

    def __init__(self, input_schema: dict[str, Any]) -> None:
        self.properties = cast(dict[str, dict[str, Any]], input_schema.get("properties", {}))
        self.required = list(cast(list[str], input_schema.get("required", [])))

    def validate(self, arguments: dict[str, Any] | None) -> dict[str, Any]:
        args = arguments or {}
        missing = [name for name in self.required if _is_missing(args.get(name))]
        if missing:
            raise MissingArgumentError(missing)

        validated: dict[str, Any] = {}
        for name, config in self.properties.items():
            value = args.get(name)
            if _is_missing(value) or (config.get("type") == "integer" and value == 0):
                if "default" in config:
                    validated[name] = config["default"]
                elif name not in self.required:
                    validated[name] = None
                continue
            validated[name] = self._coerce(name, value, config)
        return validated

    @staticmethod
    def _coerce(name: str, value: Any, config: dict[str, Any]) -> Any:
        value_type = config.get("type")
        if value_type == "integer":
            return ArgumentValidator._coerce_integer(name, value, config)
        if value_type == "boolean":
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.lower() in {"true", "false"}:
                return value.lower() == "true"
            raise InvalidArgumentError(f"Invalid argument: {name} must be a boolean")
        if value_type == "array":
            if isinstance(value, str):
                return [item.strip() for item in value.split(",") if item.strip()]
            if not isinstance(value, list):
                raise InvalidArgumentError(f"Invalid argument: {name} must be an array")
            return [str(item) for item in cast(list[Any], value)]
        if value_type == "string":
            allowed = config.get("enum")
            text = str(value)
            if allowed and text not in allowed:
                raise InvalidArgumentError(
                    f"Invalid argument: {name} must be one of {', '.join(allowed)}"
                )
            return text
        return value

    @staticmethod
    def _coerce_integer(name: str, value: Any, config: dict[str, Any]) -> int:
        if isinstance(value, bool):
            raise InvalidArgumentError(f"Invalid argument: {name} must be an integer")
        try:
            number = int(value)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Invalid argument: {name} must be an integer") from e
        if "minimum" in config:
            number = max(number, int(config["minimum"]))
        if "maximum" in config:
            number = min(number, int(config["maximum"]))
        return number
