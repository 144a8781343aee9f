from typing import List

from mcp.types import TextContent

from relation_mcp import RELATION_TOOLS
from .api_utils import RelationClient, run_tool


async def get_message_boxes(client: RelationClient) -> List[TextContent]:
    """List the message boxes (inboxes) the token can access."""
    return await run_tool(client, RELATION_TOOLS['get_message_boxes'], {})
