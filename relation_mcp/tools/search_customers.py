from typing import List, Optional

from mcp.types import TextContent

from relation_mcp import RELATION_TOOLS
from .api_utils import RelationClient, run_tool


async def search_customers(
    client: RelationClient,
    customer_group_id: str,
    customer_ids: Optional[List[int]] = None,
    gender_cds: Optional[List[int]] = None,
    system_id1s: Optional[List[str]] = None,
    default_assignees: Optional[List[str]] = None,
    emails: Optional[List[str]] = None,
    tels: Optional[List[str]] = None,
    badge_ids: Optional[List[int]] = None,
    per_page: Optional[int] = None,
    page: Optional[int] = None,
) -> List[TextContent]:
    """
    Search customers of one address book.

    Every filter is sent as a query parameter; list filters are repeated
    (customer_ids[]=1&customer_ids[]=2). Emails and phone numbers match partially.

    Args:
        customer_group_id: Address book ID (required)
        customer_ids: Customer IDs
        gender_cds: Gender codes (1: male, 2: female, 9: unknown)
        system_id1s: Customer codes
        default_assignees: Mention names of the assigned users
        emails: Email addresses
        tels: Phone numbers
        badge_ids: Badge IDs
        per_page: Results per page (1-50)
        page: Page number (1 or more)
    """
    return await run_tool(client, RELATION_TOOLS['search_customers'], {
        'customer_group_id': customer_group_id,
        'customer_ids': customer_ids,
        'gender_cds': gender_cds,
        'system_id1s': system_id1s,
        'default_assignees': default_assignees,
        'emails': emails,
        'tels': tels,
        'badge_ids': badge_ids,
        'per_page': per_page,
        'page': page,
    })
