from typing import List, Optional

from mcp.types import TextContent

from relation_mcp import RELATION_TOOLS
from .api_utils import RelationClient, run_tool


async def send_email(
    client: RelationClient,
    message_box_id: str,
    customer_id: int,
    mail_account_id: int,
    to: List[str],
    subject: str,
    body: str,
    cc: Optional[List[str]] = None,
    bcc: Optional[List[str]] = None,
    reply_to: Optional[str] = None,
) -> List[TextContent]:
    """
    Send an email to a customer from a message box.

    Args:
        message_box_id: Message box ID (required)
        customer_id: Recipient customer ID (required)
        mail_account_id: Sending mail account ID (required)
        to: Recipient addresses (required)
        subject: Subject line (required)
        body: Message body (required)
        cc: CC addresses
        bcc: BCC addresses
        reply_to: Reply-To address

    Returns:
        Envelope with the created mail, or {"error": "Failed to send email"}
    """
    return await run_tool(client, RELATION_TOOLS['send_email'], {
        'message_box_id': message_box_id,
        'customer_id': customer_id,
        'mail_account_id': mail_account_id,
        'to': to,
        'cc': cc,
        'bcc': bcc,
        'subject': subject,
        'body': body,
        'reply_to': reply_to,
    })
