from typing import List, Optional

from mcp.types import TextContent

from relation_mcp import RELATION_TOOLS
from .api_utils import RelationClient, run_tool


async def search_templates(
    client: RelationClient,
    message_box_id: str,
    query: Optional[str] = None,
    tags: Optional[List[str]] = None,
    per_page: Optional[int] = None,
    page: Optional[int] = None,
) -> List[TextContent]:
    """
    Search reply templates of a message box.

    Args:
        message_box_id: Message box ID (required)
        query: Free-text search query
        tags: Template tags, sent as tags[]
        per_page: Results per page
        page: Page number
    """
    return await run_tool(client, RELATION_TOOLS['search_templates'], {
        'message_box_id': message_box_id,
        'query': query,
        'tags': tags,
        'per_page': per_page,
        'page': page,
    })
