"""Generation history tools."""

from papla.client import PaplaClient
from papla.config import ServerConfig
from papla.file_output import resolve_output_path, write_audio_file
from papla.tools.registry import ToolParam, ToolRegistry


def register_history_tools(registry: ToolRegistry, client: PaplaClient, config: ServerConfig) -> None:
    """Register the list/get/download/delete history tools."""

    @registry.tool("papla_list_history", "Get all previously generated audio items")
    def papla_list_history():
        items = [item.to_dict() for item in client.list_history()]
        return {"items": items, "total": len(items)}

    @registry.tool(
        "papla_get_history",
        "Get details about a specific history item",
        [ToolParam("history_item_id", "The history item ID to retrieve")],
    )
    def papla_get_history(history_item_id):
        return {"item": client.get_history(history_item_id).to_dict()}

    @registry.tool(
        "papla_download_history_audio",
        "Download audio from a previous generation",
        [
            ToolParam("history_item_id", "The history item ID"),
            ToolParam("output_path", "Output file path (auto-generated if omitted)", required=False),
        ],
    )
    def papla_download_history_audio(history_item_id, output_path=None):
        file_path = resolve_output_path(config.output_dir, output_path, "history")

        audio_data = client.get_history_audio(history_item_id)
        write_audio_file(file_path, audio_data)

        return {"success": True, "file_path": file_path, "history_item_id": history_item_id}

    @registry.tool(
        "papla_delete_history",
        "Delete a history item and its audio",
        [ToolParam("history_item_id", "The history item ID to delete")],
    )
    def papla_delete_history(history_item_id):
        client.delete_history(history_item_id)
        return {"success": True, "history_item_id": history_item_id}
