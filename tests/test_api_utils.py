"""Tests for the request builder, the Relation API client and the envelope formatter."""

from __future__ import annotations

import json

import httpx
import pytest

from conftest import envelope_payload
from relation_mcp import RELATION_TOOLS
from relation_mcp.exceptions import InvalidInputError, RemoteApiError, RemoteTransportError
from relation_mcp.models import Address, TicketStatus
from relation_mcp.tools.api_utils import (
    ErrorPolicy,
    ToolSpec,
    build_query,
    build_request,
    format_response,
    resolve_policy,
    run_tool,
)
from relation_mcp.utils import RelationConfig


class TestBuildQuery:
    def test_lists_become_repeated_bracket_keys(self):
        assert build_query({"customer_ids": [1, 2]}) == [("customer_ids[]", "1"), ("customer_ids[]", "2")]

    def test_scalars_and_none(self):
        assert build_query({"page": 2, "query": "refund", "tags": None}) == [("page", "2"), ("query", "refund")]

    def test_booleans_are_lowercase(self):
        assert build_query({"is_snoozed": True}) == [("is_snoozed", "true")]

    def test_empty_list_adds_nothing(self):
        assert build_query({"tags": []}) == []

    def test_empty_scalars_are_dropped(self):
        assert build_query({"query": "", "per_page": 0, "page": 0, "customer_ids": [0]}) == [("customer_ids[]", "0")]


class TestToolSpec:
    def test_path_fields(self):
        assert RELATION_TOOLS["update_ticket"].path_fields == ["message_box_id", "ticket_id"]
        assert RELATION_TOOLS["get_users"].path_fields == []

    def test_rejects_unknown_method(self):
        with pytest.raises(ValueError):
            ToolSpec(name="x", description="x", method="DELETE", path="/x")

    def test_rejects_unknown_location(self):
        with pytest.raises(ValueError):
            ToolSpec(name="x", description="x", method="GET", path="/x", params_in="header")


class TestBuildRequest:
    def test_search_tickets_renames_statuses(self):
        req = build_request(RELATION_TOOLS["search_tickets"], {"message_box_id": "5", "statuses": ["open", "pending"]})
        assert req.method == "POST"
        assert req.endpoint == "/5/tickets/search"
        assert req.body == {"status_cds": ["open", "pending"]}
        assert req.params is None

    def test_optional_fields_are_omitted(self):
        req = build_request(
            RELATION_TOOLS["send_email"],
            {"message_box_id": "3", "customer_id": 1, "mail_account_id": 2, "to": ["a@example.com"],
             "subject": "Hi", "body": "Hello", "cc": None, "bcc": None, "reply_to": None},
        )
        assert req.body == {"customer_id": 1, "mail_account_id": 2, "to": ["a@example.com"], "subject": "Hi", "body": "Hello"}

    def test_query_routing(self):
        req = build_request(RELATION_TOOLS["search_customers"], {"customer_group_id": "9", "customer_ids": [1, 2], "page": None})
        assert req.endpoint == "/customer_groups/9/customers/search"
        assert req.params == [("customer_ids[]", "1"), ("customer_ids[]", "2")]
        assert req.body is None

    def test_no_query_when_nothing_given(self):
        req = build_request(RELATION_TOOLS["search_templates"], {"message_box_id": "3"})
        assert req.params is None

    def test_body_tool_without_fields_sends_empty_object(self):
        req = build_request(RELATION_TOOLS["search_tickets"], {"message_box_id": "5"})
        assert req.body == {}

    def test_nested_model_drops_unset_fields(self):
        req = build_request(
            RELATION_TOOLS["create_customer"],
            {"customer_group_id": "1", "last_name": "Sato", "address": Address(prefecture="Tokyo")},
        )
        assert req.body == {"last_name": "Sato", "address": {"prefecture": "Tokyo"}}

    def test_enum_values_are_sent_as_strings(self):
        req = build_request(RELATION_TOOLS["update_ticket"], {"message_box_id": "1", "ticket_id": 7, "status": TicketStatus.CLOSED})
        assert req.endpoint == "/1/tickets/7"
        assert req.body == {"status": "closed"}

    def test_path_values_are_url_encoded(self):
        req = build_request(RELATION_TOOLS["get_labels"], {"message_box_id": "a/b c"})
        assert req.endpoint == "/a%2Fb%20c/labels"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_path_field(self, value):
        with pytest.raises(InvalidInputError, match="message_box_id"):
            build_request(RELATION_TOOLS["get_labels"], {"message_box_id": value})


class TestFormatResponse:
    @pytest.mark.parametrize("value", [
        {"customers": [{"id": 1, "last_name": "佐藤"}]},
        [1, 2, 3],
        None,
        "text",
        {"error": "Failed to search customers"},
    ])
    def test_lossless(self, value):
        assert envelope_payload(format_response(value)) == value

    def test_pretty_printed(self):
        assert format_response({"a": 1})[0].text == '{\n  "a": 1\n}'


class TestRelationClient:
    @pytest.mark.asyncio
    async def test_url_and_headers(self, make_client):
        client, api = make_client(json_body={"users": []})
        result = await client.call("/users")

        assert result == {"users": []}
        assert str(api.last.url) == "https://acme.relationapp.jp/api/v2/users"
        assert api.last.method == "GET"
        assert api.last.headers["Authorization"] == "Bearer secret-token"
        assert api.last.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_body_only_for_write_methods(self, make_client):
        client, api = make_client()
        await client.call("/users", "GET", body={"ignored": True})
        assert api.last.content == b""

        await client.call("/1/tickets/2", "PATCH", body={"subject": "x"})
        assert json.loads(api.last.content) == {"subject": "x"}

    @pytest.mark.asyncio
    async def test_repeated_array_query(self, make_client):
        client, api = make_client()
        await client.call("/customer_groups/9/customers/search", params=[("customer_ids[]", "1"), ("customer_ids[]", "2")])

        assert api.last.url.path == "/api/v2/customer_groups/9/customers/search"
        assert api.last.url.params.get_list("customer_ids[]") == ["1", "2"]

    @pytest.mark.asyncio
    async def test_timeout_reaches_request(self, make_client):
        client, api = make_client(RelationConfig(subdomain="acme", token="t", timeout=12.5))
        await client.call("/users")
        assert api.last.extensions["timeout"] == {"connect": 12.5, "read": 12.5, "write": 12.5, "pool": 12.5}

    @pytest.mark.asyncio
    async def test_disabled_timeout(self, make_client):
        client, api = make_client(RelationConfig(subdomain="acme", token="t", timeout=None))
        await client.call("/users")
        assert api.last.extensions["timeout"] == {"connect": None, "read": None, "write": None, "pool": None}

    @pytest.mark.asyncio
    async def test_no_content(self, make_client):
        client, _ = make_client(status=204)
        assert await client.call("/1/tickets/2", "PATCH", body={}) is None

    @pytest.mark.asyncio
    async def test_error_status_keeps_raw_text(self, make_client):
        client, _ = make_client(status=404, text="not found")
        with pytest.raises(RemoteApiError) as excinfo:
            await client.call("/users")
        assert excinfo.value.status_code == 404
        assert excinfo.value.body == "not found"

    @pytest.mark.asyncio
    async def test_network_failure(self, make_client):
        client, _ = make_client(error=httpx.ConnectError("connection refused"))
        with pytest.raises(RemoteTransportError, match="connection refused"):
            await client.call("/users")

    @pytest.mark.asyncio
    async def test_non_json_success_body(self, make_client):
        client, _ = make_client(status=200, text="<html>")
        with pytest.raises(RemoteApiError):
            await client.call("/users")

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, make_client, caplog):
        client, _ = make_client(status=500, text="boom")
        with pytest.raises(RemoteApiError):
            await client.call("/users")
        assert "Error calling Relation API" in caplog.text


class TestErrorPolicy:
    def test_observed_uses_tool_policy(self, config):
        assert resolve_policy(RELATION_TOOLS["create_customer"], config) is ErrorPolicy.RAISE
        assert resolve_policy(RELATION_TOOLS["search_customers"], config) is ErrorPolicy.SOFT

    @pytest.mark.parametrize("policy", ["soft", "raise"])
    def test_uniform_override(self, policy):
        cfg = RelationConfig(subdomain="acme", token="t", error_policy=policy)
        for spec in RELATION_TOOLS.values():
            assert resolve_policy(spec, cfg) is ErrorPolicy(policy)

    @pytest.mark.asyncio
    async def test_invalid_input_is_never_softened(self, make_client):
        client, api = make_client()
        with pytest.raises(InvalidInputError):
            await run_tool(client, RELATION_TOOLS["get_labels"], {})
        assert api.requests == []
