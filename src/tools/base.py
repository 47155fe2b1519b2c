"""Base Tool class, ToolResult, and ToolRegistry (the tool gateway)."""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ValidationError

from src.core.logger import SupplyLogger, logger as default_logger
from src.core.tool_call import input_schema


class UnknownToolError(KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown tool: {self.name}"


@dataclass
class ToolResult:
    """Output payload of one tool call, plus whether the transport should flag it as an error."""

    payload: dict[str, Any] = field(default_factory=dict)
    is_error: bool = False

    @classmethod
    def ok(cls, payload: dict[str, Any]) -> "ToolResult":
        return cls(payload=payload)

    @classmethod
    def fail(cls, error: str) -> "ToolResult":
        return cls(payload={"success": False, "error": error}, is_error=True)

    @property
    def text(self) -> str:
        return json.dumps(self.payload, indent=2, ensure_ascii=False)


def _format_validation_error(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "arguments"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "Invalid arguments: " + "; ".join(parts)


class Tool(ABC):
    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        pass

    @property
    @abstractmethod
    def arguments_model(self) -> type[BaseModel]:
        pass

    @abstractmethod
    async def execute(self, arguments: BaseModel) -> ToolResult:
        pass

    def get_schema(self) -> dict[str, Any]:
        return input_schema(self.arguments_model)

    def parse_arguments(self, arguments: dict[str, Any] | None) -> BaseModel:
        return self.arguments_model.model_validate(arguments or {})


class ToolRegistry:
    def __init__(self, log: SupplyLogger | None = None):
        self._tools: dict[str, Tool] = {}
        self._log = log or default_logger

    def register(self, tool: Tool) -> None:
        if not isinstance(tool, Tool):
            raise TypeError(f"Expected Tool instance, got {type(tool)}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def list_tools(self) -> list[Tool]:
        return list(self._tools.values())

    def get_tools_list(self) -> str:
        if not self._tools:
            return "- None yet"
        return "\n".join(f"- {t.name}: {t.description}" for t in self._tools.values())

    def resolve(self, name: str) -> Tool:
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)
        return tool

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        """Run one call. Never raises: every failure becomes an error-flagged ToolResult."""
        self._log.tool_execute(name, arguments or {})
        try:
            tool = self.resolve(name)
            parsed = tool.parse_arguments(arguments)
            result = await tool.execute(parsed)
        except UnknownToolError as e:
            result = ToolResult.fail(str(e))
        except ValidationError as e:
            result = ToolResult.fail(_format_validation_error(e))
        except Exception as e:
            self._log.exception(f"Tool execution failed: {name}")
            result = ToolResult.fail(str(e) or type(e).__name__)
        self._log.tool_result(
            name,
            len(result.text),
            not result.is_error,
            error_reason=result.payload.get("error") if result.is_error else None,
        )
        return result
