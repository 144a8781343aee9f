from typing import List, Optional

from mcp.types import TextContent

from relation_mcp import RELATION_TOOLS
from .api_utils import RelationClient, run_tool


async def search_tickets(
    client: RelationClient,
    message_box_id: str,
    ticket_ids: Optional[List[int]] = None,
    statuses: Optional[List[str]] = None,
    subject_query: Optional[str] = None,
    body_query: Optional[str] = None,
    channel_ids: Optional[List[int]] = None,
    assignee_ids: Optional[List[int]] = None,
    is_snoozed: Optional[bool] = None,
    ticket_number_query: Optional[str] = None,
    customer_ids: Optional[List[int]] = None,
    snooze_expire_from: Optional[str] = None,
    snooze_expire_to: Optional[str] = None,
    created_from: Optional[str] = None,
    created_to: Optional[str] = None,
    last_updated_from: Optional[str] = None,
    last_updated_to: Optional[str] = None,
    label_ids: Optional[List[int]] = None,
    pending_reason_ids: Optional[List[int]] = None,
    per_page: Optional[int] = None,
    page: Optional[int] = None,
) -> List[TextContent]:
    """
    Search tickets of a message box. The filters are POSTed as a JSON body.

    The API calls the status filter ``status_cds``; ``statuses`` is renamed on the way out.
    All date filters are ISO 8601 strings.
    """
    return await run_tool(client, RELATION_TOOLS['search_tickets'], {
        'message_box_id': message_box_id,
        'ticket_ids': ticket_ids,
        'statuses': statuses,
        'subject_query': subject_query,
        'body_query': body_query,
        'channel_ids': channel_ids,
        'assignee_ids': assignee_ids,
        'is_snoozed': is_snoozed,
        'ticket_number_query': ticket_number_query,
        'customer_ids': customer_ids,
        'snooze_expire_from': snooze_expire_from,
        'snooze_expire_to': snooze_expire_to,
        'created_from': created_from,
        'created_to': created_to,
        'last_updated_from': last_updated_from,
        'last_updated_to': last_updated_to,
        'label_ids': label_ids,
        'pending_reason_ids': pending_reason_ids,
        'per_page': per_page,
        'page': page,
    })
