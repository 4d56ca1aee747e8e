"""Agent-facing tools built on the Papla client.

Each tool module registers its handlers on a ToolRegistry. Use
create_tool_registry() to get a registry with every tool.
"""

from papla.client import PaplaClient
from papla.config import ServerConfig
from papla.tools.history import register_history_tools
from papla.tools.registry import (
    Tool,
    ToolArgumentError,
    ToolNotFoundError,
    ToolParam,
    ToolRegistry,
    error_envelope,
    text_envelope,
)
from papla.tools.text_to_speech import register_tts_tools
from papla.tools.voices import register_voice_tools


def create_tool_registry(client: PaplaClient, config: ServerConfig) -> ToolRegistry:
    """
    Build a registry with all Papla tools.

    Args:
        client: Client used by every tool
        config: Supplies the output directory for audio tools

    Returns:
        Populated ToolRegistry
    """
    registry = ToolRegistry()
    register_tts_tools(registry, client, config)
    register_voice_tools(registry, client)
    register_history_tools(registry, client, config)
    return registry


__all__ = [
    'Tool',
    'ToolArgumentError',
    'ToolNotFoundError',
    'ToolParam',
    'ToolRegistry',
    'create_tool_registry',
    'error_envelope',
    'register_history_tools',
    'register_tts_tools',
    'register_voice_tools',
    'text_envelope',
]
