"""Speech generation tool."""

from papla.client import PaplaClient
from papla.config import ServerConfig
from papla.file_output import resolve_output_path, write_audio_file
from papla.tools.registry import ToolParam, ToolRegistry

MAX_TEXT_LENGTH = 5000


def register_tts_tools(registry: ToolRegistry, client: PaplaClient, config: ServerConfig) -> None:
    """Register papla_tts."""

    @registry.tool(
        "papla_tts",
        "Generate speech audio from text using Papla Media TTS",
        [
            ToolParam("text", "Text to convert to speech", min_length=1, max_length=MAX_TEXT_LENGTH),
            ToolParam("voice_id", "Voice ID to use for generation"),
            ToolParam("output_path", "Output file path (auto-generated if omitted)", required=False),
        ],
    )
    def papla_tts(text, voice_id, output_path=None):
        file_path = resolve_output_path(config.output_dir, output_path, "tts")

        audio_data = client.text_to_speech(voice_id, text)
        write_audio_file(file_path, audio_data)

        return {
            "success": True,
            "file_path": file_path,
            "voice_id": voice_id,
            "text_length": len(text),
        }
