"""Papla Media text-to-speech tools for agent runtimes.

This package wraps the Papla Media HTTP API in a small client, decides
where generated audio is written, and exposes every operation as a named
tool that returns an agent-facing envelope.

Basic usage:
    from papla import PaplaClient, load_config, create_tool_registry

    # Configuration from environment variables / config file
    config = load_config()
    client = PaplaClient(config.api_key, config.api_base_url)

    # Call the API directly
    audio_bytes = client.text_to_speech("voice-123", "Hello world")

    # Or through the tool layer
    registry = create_tool_registry(client, config)
    envelope = registry.call("papla_tts", {"text": "Hello world", "voice_id": "voice-123"})
"""

from papla.base import (
    PaplaError,
    PaplaConfigurationError,
    PaplaResponseError,
    PaplaApiError,
    FileOutputError,
)
from papla.client import PaplaClient, DEFAULT_BASE_URL
from papla.config import ServerConfig, ConfigLoader, load_config
from papla.file_output import resolve_output_path, write_audio_file
from papla.models import Voice, HistoryItem
from papla.tools import ToolRegistry, create_tool_registry

__all__ = [
    # Errors
    'PaplaError',
    'PaplaConfigurationError',
    'PaplaResponseError',
    'PaplaApiError',
    'FileOutputError',
    # Client
    'PaplaClient',
    'DEFAULT_BASE_URL',
    # Configuration
    'ServerConfig',
    'ConfigLoader',
    'load_config',
    # Output
    'resolve_output_path',
    'write_audio_file',
    # Models
    'Voice',
    'HistoryItem',
    # Tools
    'ToolRegistry',
    'create_tool_registry',
]

__version__ = '0.1.0'
