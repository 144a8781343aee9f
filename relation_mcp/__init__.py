"""
Relation MCP: Relation API (customer support platform) exposed as MCP tools.
"""
from relation_mcp.tools.api_utils import ErrorPolicy, ToolSpec

__version__ = "1.0.0"

# Define the tools that will be exposed via MCP and how each one maps onto the API
_TOOL_SPECS = [
    ToolSpec(
        name="get_customers",
        description="List the address books (customer groups) of the account",
        method="GET",
        path="/customer_groups",
        error_message="Failed to get customers",
    ),
    ToolSpec(
        name="search_customers",
        description="Search customers in an address book",
        method="GET",
        path="/customer_groups/{customer_group_id}/customers/search",
        params_in="query",
        error_message="Failed to search customers",
    ),
    ToolSpec(
        name="create_customer",
        description="Register a new customer in an address book",
        method="POST",
        path="/customer_groups/{customer_group_id}/customers/create",
        params_in="body",
        error_message="Failed to create customer",
        error_policy=ErrorPolicy.RAISE,
    ),
    ToolSpec(
        name="search_tickets",
        description="Search tickets in a message box",
        method="POST",
        path="/{message_box_id}/tickets/search",
        params_in="body",
        rename={"statuses": "status_cds"},
        error_message="Failed to search tickets",
    ),
    ToolSpec(
        name="search_templates",
        description="Search reply templates in a message box",
        method="GET",
        path="/{message_box_id}/templates/search",
        params_in="query",
        error_message="Failed to search templates",
    ),
    ToolSpec(
        name="send_email",
        description="Send an email from a message box",
        method="POST",
        path="/{message_box_id}/mails/create",
        params_in="body",
        error_message="Failed to send email",
    ),
    ToolSpec(
        name="update_ticket",
        description="Update the status, assignee, labels or snooze of a ticket",
        method="PATCH",
        path="/{message_box_id}/tickets/{ticket_id}",
        params_in="body",
        error_message="Failed to update ticket",
    ),
    ToolSpec(
        name="get_labels",
        description="List the labels of a message box",
        method="GET",
        path="/{message_box_id}/labels",
        error_message="Failed to get labels",
    ),
    ToolSpec(
        name="get_users",
        description="List the users of the account",
        method="GET",
        path="/users",
        error_message="Failed to get users",
    ),
    ToolSpec(
        name="get_message_boxes",
        description="List the message boxes (inboxes) of the account",
        method="GET",
        path="/message_boxes",
        error_message="Failed to get message boxes",
    ),
]

RELATION_TOOLS = {spec.name: spec for spec in _TOOL_SPECS}

__all__ = ['RELATION_TOOLS', 'ErrorPolicy', 'ToolSpec', '__version__']
