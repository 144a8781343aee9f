"""
MCP Server for the Relation API using FastMCP
Run with: relation-mcp   (or python -m relation_mcp.server.mcp_server)

The server speaks MCP over stdin/stdout, so nothing may be printed to stdout;
all diagnostics go through logging to stderr.
"""
import logging
from typing import Annotated, List, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent
from pydantic import Field

from relation_mcp import RELATION_TOOLS, __version__
from relation_mcp.models import Address, TicketStatus
from relation_mcp.tools.api_utils import RelationClient
from relation_mcp.tools.create_customer import create_customer
from relation_mcp.tools.get_customers import get_customers
from relation_mcp.tools.get_labels import get_labels
from relation_mcp.tools.get_message_boxes import get_message_boxes
from relation_mcp.tools.get_users import get_users
from relation_mcp.tools.search_customers import search_customers
from relation_mcp.tools.search_templates import search_templates
from relation_mcp.tools.search_tickets import search_tickets
from relation_mcp.tools.send_email import send_email
from relation_mcp.tools.update_ticket import update_ticket
from relation_mcp.utils import load_config

logger = logging.getLogger(__name__)


class MCPErrorFilter(logging.Filter):
    """Filter out known harmless stdio shutdown errors."""

    harmless_patterns = (
        'ClosedResourceError',
        'BrokenResourceError',
        'BrokenPipeError',
        'CancelledError',
        'Cancelled via cancel scope',
        'EndOfStream',
    )

    def filter(self, record):
        message = record.getMessage()
        if any(pattern in message for pattern in self.harmless_patterns):
            return False

        if record.exc_info and record.exc_info[0]:
            exc_name = record.exc_info[0].__name__
            if any(pattern in exc_name for pattern in self.harmless_patterns):
                return False

        return True


for logger_name in ('mcp', 'mcp.server', 'mcp.server.stdio', 'anyio'):
    logging.getLogger(logger_name).addFilter(MCPErrorFilter())

relation_config = load_config()
relation_client = RelationClient(relation_config)

mcp = FastMCP(
    "Relation API Server",
    instructions=(
        "Tools for the Relation customer support platform: customers, tickets, "
        "reply templates, outgoing mail, labels, users and message boxes."
    ),
    log_level=relation_config.log_level,
)

MessageBoxId = Annotated[str, Field(description="Message box (inbox) ID")]
CustomerGroupId = Annotated[str, Field(description="Address book (customer group) ID")]
Page = Annotated[Optional[int], Field(description="Page number (1 or more)")]


def _describe(name: str) -> str:
    return RELATION_TOOLS[name].description


# Each tool delegates to relation_mcp.tools.<name>; FastMCP builds the input
# schema from the signature and validates arguments before the body runs.

@mcp.tool(name="get_customers", description=_describe("get_customers"), structured_output=False)
async def get_customers_tool() -> List[TextContent]:
    """List the address books (customer groups) of the account."""
    return await get_customers(relation_client)


@mcp.tool(name="search_customers", description=_describe("search_customers"), structured_output=False)
async def search_customers_tool(
    customer_group_id: CustomerGroupId,
    customer_ids: Annotated[Optional[List[int]], Field(description="Customer IDs")] = None,
    gender_cds: Annotated[Optional[List[int]], Field(description="Gender codes (1: male, 2: female, 9: unknown)")] = None,
    system_id1s: Annotated[Optional[List[str]], Field(description="Customer codes")] = None,
    default_assignees: Annotated[Optional[List[str]], Field(description="Mention names of the assigned users")] = None,
    emails: Annotated[Optional[List[str]], Field(description="Email addresses (partial match)")] = None,
    tels: Annotated[Optional[List[str]], Field(description="Phone numbers (partial match)")] = None,
    badge_ids: Annotated[Optional[List[int]], Field(description="Badge IDs")] = None,
    per_page: Annotated[Optional[int], Field(description="Results per page (1-50)")] = None,
    page: Page = None,
) -> List[TextContent]:
    """Search customers of an address book.

    Args:
        customer_group_id: Address book ID (required)
        customer_ids: Customer IDs; every list filter is sent as repeated name[] entries
        per_page: Results per page (1-50)
        page: Page number
    """
    return await search_customers(
        relation_client,
        customer_group_id,
        customer_ids=customer_ids,
        gender_cds=gender_cds,
        system_id1s=system_id1s,
        default_assignees=default_assignees,
        emails=emails,
        tels=tels,
        badge_ids=badge_ids,
        per_page=per_page,
        page=page,
    )


@mcp.tool(name="create_customer", description=_describe("create_customer"), structured_output=False)
async def create_customer_tool(
    customer_group_id: CustomerGroupId,
    last_name: Annotated[str, Field(description="Family name")],
    first_name: Annotated[Optional[str], Field(description="Given name")] = None,
    last_name_kana: Annotated[Optional[str], Field(description="Family name (kana)")] = None,
    first_name_kana: Annotated[Optional[str], Field(description="Given name (kana)")] = None,
    company_name: Annotated[Optional[str], Field(description="Company name")] = None,
    memo: Annotated[Optional[str], Field(description="Memo")] = None,
    gender_cd: Annotated[Optional[int], Field(description="Gender code (1: male, 2: female, 9: unknown)")] = None,
    birthday: Annotated[Optional[str], Field(description="Birthday (YYYY-MM-DD)")] = None,
    system_id1: Annotated[Optional[str], Field(description="Customer code")] = None,
    default_assignee: Annotated[Optional[str], Field(description="Mention name of the assigned user")] = None,
    emails: Annotated[Optional[List[str]], Field(description="Email addresses")] = None,
    tels: Annotated[Optional[List[str]], Field(description="Phone numbers")] = None,
    badge_ids: Annotated[Optional[List[int]], Field(description="Badge IDs")] = None,
    address: Annotated[Optional[Address], Field(description="Postal address")] = None,
) -> List[TextContent]:
    """Register a customer in an address book. Failures are raised to the host.

    Args:
        customer_group_id: Address book ID (required)
        last_name: Family name (required)
        address: Postal address; unset parts are left out
    """
    return await create_customer(
        relation_client,
        customer_group_id,
        last_name,
        first_name=first_name,
        last_name_kana=last_name_kana,
        first_name_kana=first_name_kana,
        company_name=company_name,
        memo=memo,
        gender_cd=gender_cd,
        birthday=birthday,
        system_id1=system_id1,
        default_assignee=default_assignee,
        emails=emails,
        tels=tels,
        badge_ids=badge_ids,
        address=address,
    )


@mcp.tool(name="search_tickets", description=_describe("search_tickets"), structured_output=False)
async def search_tickets_tool(
    message_box_id: MessageBoxId,
    ticket_ids: Annotated[Optional[List[int]], Field(description="Ticket IDs")] = None,
    statuses: Annotated[Optional[List[str]], Field(description="Statuses (open, pending, closed)")] = None,
    subject_query: Annotated[Optional[str], Field(description="Search query for the subject")] = None,
    body_query: Annotated[Optional[str], Field(description="Search query for the body")] = None,
    channel_ids: Annotated[Optional[List[int]], Field(description="Channel IDs")] = None,
    assignee_ids: Annotated[Optional[List[int]], Field(description="Assigned user IDs")] = None,
    is_snoozed: Annotated[Optional[bool], Field(description="Only snoozed (true) or not snoozed (false) tickets")] = None,
    ticket_number_query: Annotated[Optional[str], Field(description="Search query for the ticket number")] = None,
    customer_ids: Annotated[Optional[List[int]], Field(description="Customer IDs")] = None,
    snooze_expire_from: Annotated[Optional[str], Field(description="Snooze expiry from (ISO 8601)")] = None,
    snooze_expire_to: Annotated[Optional[str], Field(description="Snooze expiry to (ISO 8601)")] = None,
    created_from: Annotated[Optional[str], Field(description="Created from (ISO 8601)")] = None,
    created_to: Annotated[Optional[str], Field(description="Created to (ISO 8601)")] = None,
    last_updated_from: Annotated[Optional[str], Field(description="Last updated from (ISO 8601)")] = None,
    last_updated_to: Annotated[Optional[str], Field(description="Last updated to (ISO 8601)")] = None,
    label_ids: Annotated[Optional[List[int]], Field(description="Label IDs")] = None,
    pending_reason_ids: Annotated[Optional[List[int]], Field(description="Pending reason IDs")] = None,
    per_page: Annotated[Optional[int], Field(description="Results per page (1-100)")] = None,
    page: Page = None,
) -> List[TextContent]:
    """Search tickets of a message box.

    Args:
        message_box_id: Message box ID (required)
        statuses: Ticket statuses, sent to the API as status_cds
        created_from: Start of the creation date range (ISO 8601); the other date filters work the same way
    """
    return await search_tickets(
        relation_client,
        message_box_id,
        ticket_ids=ticket_ids,
        statuses=statuses,
        subject_query=subject_query,
        body_query=body_query,
        channel_ids=channel_ids,
        assignee_ids=assignee_ids,
        is_snoozed=is_snoozed,
        ticket_number_query=ticket_number_query,
        customer_ids=customer_ids,
        snooze_expire_from=snooze_expire_from,
        snooze_expire_to=snooze_expire_to,
        created_from=created_from,
        created_to=created_to,
        last_updated_from=last_updated_from,
        last_updated_to=last_updated_to,
        label_ids=label_ids,
        pending_reason_ids=pending_reason_ids,
        per_page=per_page,
        page=page,
    )


@mcp.tool(name="search_templates", description=_describe("search_templates"), structured_output=False)
async def search_templates_tool(
    message_box_id: MessageBoxId,
    query: Annotated[Optional[str], Field(description="Search query")] = None,
    tags: Annotated[Optional[List[str]], Field(description="Template tags")] = None,
    per_page: Annotated[Optional[int], Field(description="Results per page")] = None,
    page: Page = None,
) -> List[TextContent]:
    """Search reply templates of a message box.

    Args:
        message_box_id: Message box ID (required)
        query: Free-text search query
        tags: Template tags
    """
    return await search_templates(
        relation_client, message_box_id, query=query, tags=tags, per_page=per_page, page=page,
    )


@mcp.tool(name="send_email", description=_describe("send_email"), structured_output=False)
async def send_email_tool(
    message_box_id: MessageBoxId,
    customer_id: Annotated[int, Field(description="Customer ID")],
    mail_account_id: Annotated[int, Field(description="Sending mail account ID")],
    to: Annotated[List[str], Field(description="Recipient email addresses")],
    subject: Annotated[str, Field(description="Subject")],
    body: Annotated[str, Field(description="Body")],
    cc: Annotated[Optional[List[str]], Field(description="CC email addresses")] = None,
    bcc: Annotated[Optional[List[str]], Field(description="BCC email addresses")] = None,
    reply_to: Annotated[Optional[str], Field(description="Reply-To email address")] = None,
) -> List[TextContent]:
    """Send an email to a customer from a message box.

    Args:
        message_box_id: Message box ID (required)
        customer_id: Recipient customer ID (required)
        mail_account_id: Sending mail account ID (required)
        to: Recipient addresses (required)
        subject: Subject line (required)
        body: Message body (required)
    """
    return await send_email(
        relation_client,
        message_box_id,
        customer_id,
        mail_account_id,
        to,
        subject,
        body,
        cc=cc,
        bcc=bcc,
        reply_to=reply_to,
    )


@mcp.tool(name="update_ticket", description=_describe("update_ticket"), structured_output=False)
async def update_ticket_tool(
    message_box_id: MessageBoxId,
    ticket_id: Annotated[int, Field(description="Ticket ID")],
    status: Annotated[Optional[TicketStatus], Field(description="Status")] = None,
    subject: Annotated[Optional[str], Field(description="Subject")] = None,
    assignee_id: Annotated[Optional[int], Field(description="Assigned user ID")] = None,
    is_snoozed: Annotated[Optional[bool], Field(description="Whether the ticket is snoozed")] = None,
    snooze_expire_at: Annotated[Optional[str], Field(description="Snooze expiry (ISO 8601)")] = None,
    snooze_notification_user_names: Annotated[
        Optional[List[str]], Field(description="Mention names notified when the snooze ends")
    ] = None,
    pending_reason_id: Annotated[Optional[int], Field(description="Pending reason ID")] = None,
    label_ids: Annotated[Optional[List[int]], Field(description="Label IDs")] = None,
) -> List[TextContent]:
    """Update a ticket; only the passed fields change.

    Args:
        message_box_id: Message box ID (required)
        ticket_id: Ticket ID (required)
        status: open, pending or closed
    """
    return await update_ticket(
        relation_client,
        message_box_id,
        ticket_id,
        status=status,
        subject=subject,
        assignee_id=assignee_id,
        is_snoozed=is_snoozed,
        snooze_expire_at=snooze_expire_at,
        snooze_notification_user_names=snooze_notification_user_names,
        pending_reason_id=pending_reason_id,
        label_ids=label_ids,
    )


@mcp.tool(name="get_labels", description=_describe("get_labels"), structured_output=False)
async def get_labels_tool(message_box_id: MessageBoxId) -> List[TextContent]:
    """List the labels of a message box.

    Args:
        message_box_id: Message box ID (required)
    """
    return await get_labels(relation_client, message_box_id)


@mcp.tool(name="get_users", description=_describe("get_users"), structured_output=False)
async def get_users_tool() -> List[TextContent]:
    """List the users of the account."""
    return await get_users(relation_client)


@mcp.tool(name="get_message_boxes", description=_describe("get_message_boxes"), structured_output=False)
async def get_message_boxes_tool() -> List[TextContent]:
    """List the message boxes (inboxes) of the account."""
    return await get_message_boxes(relation_client)


def main():
    """Entry point for the Relation MCP server (stdio transport)."""
    logger.info(
        "Starting Relation MCP server %s for %s (%d tools)",
        __version__, relation_config.base_url, len(RELATION_TOOLS),
    )
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
