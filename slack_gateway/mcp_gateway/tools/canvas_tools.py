"""Canvas tools for the Slack MCP Gateway."""

from typing import Any

from slack_gateway.mcp_gateway.tools.helpers import SlackTools, response_payload
from slack_gateway.mcp_gateway.validation import InvalidArgumentError


def _markdown_document(markdown: str) -> dict[str, str]:
    return {"type": "markdown", "markdown": markdown}


class CanvasTools(SlackTools):
    """Standalone canvas create/read/edit/delete and access control."""

    async def create_canvas(self, title: str, markdown: str | None = None) -> Any:
        document_content = _markdown_document(markdown) if markdown else None
        response = await self.client.canvases_create(
            title=title, document_content=document_content
        )
        return response_payload(response)

    async def get_canvas(self, canvas_id: str) -> Any:
        """Canvases are files; ``files.info`` returns their metadata and content."""
        response = await self.client.files_info(file=canvas_id)
        return response_payload(response)

    async def edit_canvas(
        self, canvas_id: str, markdown: str, operation: str = "insert_at_end"
    ) -> Any:
        changes = [{"operation": operation, "document_content": _markdown_document(markdown)}]
        response = await self.client.canvases_edit(canvas_id=canvas_id, changes=changes)
        return response_payload(response)

    async def set_canvas_access(
        self,
        canvas_id: str,
        access_level: str,
        channel_ids: list[str] | None = None,
        user_ids: list[str] | None = None,
    ) -> Any:
        if not channel_ids and not user_ids:
            raise InvalidArgumentError("Provide channel_ids or user_ids to grant canvas access")
        response = await self.client.canvases_access_set(
            canvas_id=canvas_id,
            access_level=access_level,
            channel_ids=channel_ids,
            user_ids=user_ids,
        )
        return response_payload(response)

    async def delete_canvas(self, canvas_id: str) -> Any:
        response = await self.client.canvases_delete(canvas_id=canvas_id)
        return response_payload(response)
