from typing import List

from mcp.types import TextContent

from relation_mcp import RELATION_TOOLS
from .api_utils import RelationClient, run_tool


async def get_customers(client: RelationClient) -> List[TextContent]:
    """
    List the address books (customer groups) that hold the account's customers.

    Returns:
        Envelope with the customer groups, or {"error": ...} if the call failed
    """
    return await run_tool(client, RELATION_TOOLS['get_customers'], {})
