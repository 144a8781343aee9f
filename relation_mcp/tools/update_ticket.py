from typing import List, Optional

from mcp.types import TextContent

from relation_mcp import RELATION_TOOLS
from relation_mcp.models import TicketStatus
from .api_utils import RelationClient, run_tool


async def update_ticket(
    client: RelationClient,
    message_box_id: str,
    ticket_id: int,
    status: Optional[TicketStatus] = None,
    subject: Optional[str] = None,
    assignee_id: Optional[int] = None,
    is_snoozed: Optional[bool] = None,
    snooze_expire_at: Optional[str] = None,
    snooze_notification_user_names: Optional[List[str]] = None,
    pending_reason_id: Optional[int] = None,
    label_ids: Optional[List[int]] = None,
) -> List[TextContent]:
    """
    Update a ticket. Only the fields that are passed are changed.

    Args:
        message_box_id: Message box ID (required)
        ticket_id: Ticket ID (required)
        status: 'open', 'pending' or 'closed'
        subject: New subject
        assignee_id: Assigned user ID
        is_snoozed: Snooze the ticket
        snooze_expire_at: When the snooze ends (ISO 8601)
        snooze_notification_user_names: Mention names notified when the snooze ends
        pending_reason_id: Pending reason ID
        label_ids: Label IDs (replaces the current labels)
    """
    return await run_tool(client, RELATION_TOOLS['update_ticket'], {
        'message_box_id': message_box_id,
        'ticket_id': ticket_id,
        'status': status,
        'subject': subject,
        'assignee_id': assignee_id,
        'is_snoozed': is_snoozed,
        'snooze_expire_at': snooze_expire_at,
        'snooze_notification_user_names': snooze_notification_user_names,
        'pending_reason_id': pending_reason_id,
        'label_ids': label_ids,
    })
