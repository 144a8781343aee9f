from typing import List

from mcp.types import TextContent

from relation_mcp import RELATION_TOOLS
from .api_utils import RelationClient, run_tool


async def get_labels(client: RelationClient, message_box_id: str) -> List[TextContent]:
    """
    List the labels defined in a message box.

    Args:
        message_box_id: Message box ID (required)
    """
    return await run_tool(client, RELATION_TOOLS['get_labels'], {'message_box_id': message_box_id})
