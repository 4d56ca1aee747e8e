"""Registry that maps tool names to handlers and renders agent envelopes.

Handlers receive validated keyword arguments and return a JSON-serializable
dict. The registry turns that dict into the envelope the agent runtime
consumes, and turns PaplaApiError / FileOutputError into error envelopes.
Every other exception propagates to the caller.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from papla.base import FileOutputError, PaplaApiError, PaplaError

logger = logging.getLogger(__name__)


class ToolNotFoundError(PaplaError, LookupError):
    """Exception raised when calling a tool that is not registered."""
    pass


class ToolArgumentError(PaplaError, ValueError):
    """Exception raised when tool arguments do not match the tool's schema."""
    pass


@dataclass
class ToolParam:
    """A string argument accepted by a tool."""

    name: str
    description: str
    required: bool = True
    min_length: Optional[int] = None
    max_length: Optional[int] = None

    def validate(self, value: Any) -> None:
        """
        Check a supplied value against this parameter.

        Raises:
            ToolArgumentError: If the value is not a string or its length is out of range
        """
        if not isinstance(value, str):
            raise ToolArgumentError(
                f"Argument '{self.name}' must be a string, got {type(value).__name__}"
            )
        if self.min_length is not None and len(value) < self.min_length:
            raise ToolArgumentError(
                f"Argument '{self.name}' must be at least {self.min_length} characters"
            )
        if self.max_length is not None and len(value) > self.max_length:
            raise ToolArgumentError(
                f"Argument '{self.name}' must be at most {self.max_length} characters"
            )

    def to_schema(self) -> Dict[str, Any]:
        schema = {"type": "string", "description": self.description}
        if self.min_length is not None:
            schema["minLength"] = self.min_length
        if self.max_length is not None:
            schema["maxLength"] = self.max_length
        return schema


@dataclass
class Tool:
    name: str
    description: str
    handler: Callable[..., Dict[str, Any]]
    params: List[ToolParam] = field(default_factory=list)

    def validate(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate arguments and return the ones to pass to the handler.

        Raises:
            ToolArgumentError: On missing, unknown or invalid arguments
        """
        known = {param.name: param for param in self.params}
        unknown = sorted(set(arguments) - set(known))
        if unknown:
            raise ToolArgumentError(
                f"Unknown argument(s) for {self.name}: {', '.join(unknown)}"
            )

        validated = {}
        for param in self.params:
            value = arguments.get(param.name)
            if value is None:
                if param.required:
                    raise ToolArgumentError(f"Missing required argument '{param.name}' for {self.name}")
                continue
            param.validate(value)
            validated[param.name] = value
        return validated

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": {
                "type": "object",
                "properties": {param.name: param.to_schema() for param in self.params},
                "required": [param.name for param in self.params if param.required],
            },
        }


def text_envelope(result: Dict[str, Any], is_error: bool = False) -> Dict[str, Any]:
    """Wrap a result dict as a single JSON text content block."""
    envelope = {
        "content": [{"type": "text", "text": json.dumps(result, indent=2)}],
    }
    if is_error:
        envelope["isError"] = True
    return envelope


def error_envelope(error: PaplaError) -> Dict[str, Any]:
    """Render a normalized error as a non-fatal tool failure."""
    result = {"success": False, "error": str(error)}
    if isinstance(error, PaplaApiError):
        result["code"] = error.status_code
    elif isinstance(error, FileOutputError):
        result["path"] = error.path
    return text_envelope(result, is_error=True)


class ToolRegistry:
    """Named tools available to the agent runtime."""

    def __init__(self):
        self._tools: Dict[str, Tool] = {}

    def register(
        self,
        name: str,
        description: str,
        handler: Callable[..., Dict[str, Any]],
        params: Optional[List[ToolParam]] = None
    ) -> Tool:
        """
        Register a tool.

        Raises:
            ValueError: If a tool with this name is already registered
        """
        if name in self._tools:
            raise ValueError(f"Tool '{name}' is already registered")

        tool = Tool(name=name, description=description, handler=handler, params=list(params or []))
        self._tools[name] = tool
        return tool

    def tool(self, name: str, description: str, params: Optional[List[ToolParam]] = None):
        """Decorator form of register()."""
        def decorator(handler):
            self.register(name, description, handler, params)
            return handler
        return decorator

    def get(self, name: str) -> Tool:
        if name not in self._tools:
            available = ', '.join(self.list_tools())
            raise ToolNotFoundError(f"Tool '{name}' is not registered. Available tools: {available}")
        return self._tools[name]

    def list_tools(self) -> List[str]:
        return list(self._tools.keys())

    def describe(self) -> List[Dict[str, Any]]:
        return [tool.describe() for tool in self._tools.values()]

    def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Validate arguments, run the tool and render its envelope.

        Args:
            name: Registered tool name
            arguments: Tool arguments by name

        Returns:
            Envelope dict with 'content' and, on normalized failures, 'isError'

        Raises:
            ToolNotFoundError: If the tool is not registered
            ToolArgumentError: If the arguments do not match the tool's schema
        """
        tool = self.get(name)
        validated = tool.validate(arguments or {})

        logger.debug("Calling tool %s with %s", name, sorted(validated))
        try:
            result = tool.handler(**validated)
        except (PaplaApiError, FileOutputError) as e:
            logger.warning("Tool %s failed: %s", name, e)
            return error_envelope(e)

        return text_envelope(result)
