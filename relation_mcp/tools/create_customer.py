from typing import List, Optional

from mcp.types import TextContent

from relation_mcp import RELATION_TOOLS
from relation_mcp.models import Address
from .api_utils import RelationClient, run_tool


async def create_customer(
    client: RelationClient,
    customer_group_id: str,
    last_name: str,
    first_name: Optional[str] = None,
    last_name_kana: Optional[str] = None,
    first_name_kana: Optional[str] = None,
    company_name: Optional[str] = None,
    memo: Optional[str] = None,
    gender_cd: Optional[int] = None,
    birthday: Optional[str] = None,
    system_id1: Optional[str] = None,
    default_assignee: Optional[str] = None,
    emails: Optional[List[str]] = None,
    tels: Optional[List[str]] = None,
    badge_ids: Optional[List[int]] = None,
    address: Optional[Address] = None,
) -> List[TextContent]:
    """
    Register a new customer in an address book.

    Unlike the search tools, a failed call is raised to the caller instead of
    being turned into an error envelope (unless RELATION_ERROR_POLICY says otherwise).

    Args:
        customer_group_id: Address book ID (required, goes into the URL)
        last_name: Family name (required)
        first_name: Given name
        last_name_kana: Family name in kana
        first_name_kana: Given name in kana
        company_name: Company name
        memo: Free-form note
        gender_cd: Gender code (1: male, 2: female, 9: unknown)
        birthday: Birthday as YYYY-MM-DD
        system_id1: Customer code
        default_assignee: Mention name of the assigned user
        emails: Email addresses
        tels: Phone numbers
        badge_ids: Badge IDs
        address: Postal address; unset parts are left out

    Returns:
        Envelope with the created customer
    """
    return await run_tool(client, RELATION_TOOLS['create_customer'], {
        'customer_group_id': customer_group_id,
        'last_name': last_name,
        'first_name': first_name,
        'last_name_kana': last_name_kana,
        'first_name_kana': first_name_kana,
        'company_name': company_name,
        'memo': memo,
        'gender_cd': gender_cd,
        'birthday': birthday,
        'system_id1': system_id1,
        'default_assignee': default_assignee,
        'emails': emails,
        'tels': tels,
        'badge_ids': badge_ids,
        'address': address,
    })
