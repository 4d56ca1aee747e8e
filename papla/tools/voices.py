"""Voice management tools."""

from papla.client import PaplaClient
from papla.tools.registry import ToolParam, ToolRegistry


def register_voice_tools(registry: ToolRegistry, client: PaplaClient) -> None:
    """Register the list/get/add/edit/delete voice tools."""

    @registry.tool("papla_list_voices", "Get all available voices for text-to-speech")
    def papla_list_voices():
        voices = [voice.to_dict() for voice in client.list_voices()]
        return {"voices": voices, "total": len(voices)}

    @registry.tool(
        "papla_get_voice",
        "Get details about a specific voice",
        [ToolParam("voice_id", "The voice ID to retrieve")],
    )
    def papla_get_voice(voice_id):
        return {"voice": client.get_voice(voice_id).to_dict()}

    @registry.tool(
        "papla_add_voice",
        "Create a voice clone from an audio sample (minimum 10 seconds)",
        [
            ToolParam("name", "Name for the new voice", min_length=1),
            ToolParam("audio_file_path", "Path to audio file for cloning"),
            ToolParam("description", "Description of the voice", required=False),
        ],
    )
    def papla_add_voice(name, audio_file_path, description=None):
        voice = client.add_voice(name, audio_file_path, description)
        return {"success": True, "voice": voice.to_dict()}

    @registry.tool(
        "papla_edit_voice",
        "Update a voice name or description",
        [
            ToolParam("voice_id", "The voice ID to edit"),
            ToolParam("name", "New name for the voice", required=False),
            ToolParam("description", "New description", required=False),
        ],
    )
    def papla_edit_voice(voice_id, name=None, description=None):
        # Empty strings mean "leave unchanged"
        voice = client.edit_voice(voice_id, name=name or None, description=description or None)
        return {"success": True, "voice": voice.to_dict()}

    @registry.tool(
        "papla_delete_voice",
        "Delete a voice clone (cannot delete premade voices)",
        [ToolParam("voice_id", "The voice ID to delete")],
    )
    def papla_delete_voice(voice_id):
        client.delete_voice(voice_id)
        return {"success": True, "voice_id": voice_id}
