from typing import List

from mcp.types import TextContent

from relation_mcp import RELATION_TOOLS
from .api_utils import RelationClient, run_tool


async def get_users(client: RelationClient) -> List[TextContent]:
    """List the users of the account."""
    return await run_tool(client, RELATION_TOOLS['get_users'], {})
