"""
Shared plumbing for the Relation API tools.

Every tool is described by a ToolSpec (see relation_mcp.RELATION_TOOLS). The
helpers here turn a spec plus the caller's arguments into one HTTP request,
send it with RelationClient and wrap the JSON result for MCP.
"""
import json
import logging
import string
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import quote

import httpx
from mcp.types import TextContent
from pydantic import BaseModel

from relation_mcp.exceptions import (
    InvalidInputError,
    RelationMCPError,
    RemoteApiError,
    RemoteTransportError,
)
from relation_mcp.utils import RelationConfig

logger = logging.getLogger(__name__)

BODY_METHODS = ("POST", "PUT", "PATCH")
SUPPORTED_METHODS = ("GET",) + BODY_METHODS


class ErrorPolicy(str, Enum):
    """What a tool does when the Relation API call fails."""
    SOFT = "soft"    # answer with {"error": "<message>"}
    RAISE = "raise"  # let the failure reach the MCP host


@dataclass(frozen=True)
class ToolSpec:
    """
    Declarative description of one Relation API tool.

    Args:
        name: Tool name exposed over MCP
        description: One-line description shown to the host
        method: HTTP verb
        path: Endpoint template, e.g. "/{message_box_id}/labels"
        params_in: Where non-path arguments go: "query" or "body"
        rename: Argument name -> wire name
        error_message: Message used by the soft error envelope
        error_policy: Observed behaviour on failure
    """
    name: str
    description: str
    method: str
    path: str
    params_in: str = "query"
    rename: Mapping[str, str] = field(default_factory=dict)
    error_message: str = "Request failed"
    error_policy: ErrorPolicy = ErrorPolicy.SOFT

    def __post_init__(self):
        if self.method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method for {self.name}: {self.method}")
        if self.params_in not in ("query", "body"):
            raise ValueError(f"params_in must be 'query' or 'body', got {self.params_in!r}")

    @property
    def path_fields(self) -> List[str]:
        return [name for _, name, _, _ in string.Formatter().parse(self.path) if name]


def _to_wire(value: Any) -> Any:
    """Convert pydantic models and enums into plain JSON values, dropping unset keys."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _to_wire(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_to_wire(v) for v in value]
    return value


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(params: Mapping[str, Any]) -> List[Tuple[str, str]]:
    """
    Encode arguments as query pairs; list values become repeated ``name[]`` entries.

    Empty scalars (0, "", False) are left out like unset ones; the Relation
    search endpoints treat them as "no filter".

    >>> build_query({"customer_ids": [1, 2], "page": 3, "per_page": 0})
    [('customer_ids[]', '1'), ('customer_ids[]', '2'), ('page', '3')]
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        if not value:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((f"{key}[]", _query_value(item)) for item in value)
        else:
            pairs.append((key, _query_value(value)))
    return pairs


@dataclass(frozen=True)
class PreparedRequest:
    method: str
    endpoint: str
    params: Optional[List[Tuple[str, str]]] = None
    body: Optional[Dict[str, Any]] = None


def build_request(spec: ToolSpec, arguments: Mapping[str, Any]) -> PreparedRequest:
    """
    Route validated arguments into path, query string or JSON body.

    Arguments whose value is None are treated as absent and never sent.

    Raises:
        InvalidInputError: a path argument is missing or empty
    """
    remaining = {k: v for k, v in arguments.items() if v is not None}

    path_values = {}
    for name in spec.path_fields:
        value = remaining.pop(name, None)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidInputError(f"{spec.name}: '{name}' is required")
        path_values[name] = quote(str(value), safe="")
    endpoint = spec.path.format(**path_values)

    wire = {spec.rename.get(k, k): _to_wire(v) for k, v in remaining.items()}

    if spec.params_in == "body":
        return PreparedRequest(spec.method, endpoint, body=wire)
    return PreparedRequest(spec.method, endpoint, params=build_query(wire) or None)


class RelationClient:
    """
    Thin async client for the Relation REST API (v2).

    One httpx client is opened per call, so instances hold no connection
    state and can be shared by concurrent tool invocations.
    """

    def __init__(self, config: RelationConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.token}",
            "Content-Type": "application/json",
        }

    async def call(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
        params: Optional[List[Tuple[str, str]]] = None,
    ) -> Any:
        """
        Send one request to the Relation API.

        Args:
            endpoint: Path relative to the API base URL, e.g. "/users"
            method: GET, POST, PUT or PATCH
            body: JSON payload, only attached for POST/PUT/PATCH
            params: Query pairs (already expanded for arrays)

        Returns:
            Parsed JSON, or None when the API answers 204 No Content

        Raises:
            RemoteApiError: the API answered with a non-2xx status
            RemoteTransportError: the request never got an HTTP answer
        """
        json_body = body if method in BODY_METHODS else None

        try:
            async with httpx.AsyncClient(
                base_url=self.config.base_url,
                headers=self.headers,
                timeout=self.config.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, endpoint, params=params, json=json_body)
        except httpx.RequestError as e:
            logger.error("Error calling Relation API: %s %s: %s", method, endpoint, e)
            raise RemoteTransportError(f"{method} {endpoint} failed: {e}") from e

        if not response.is_success:
            error = RemoteApiError(response.status_code, response.text)
            logger.error("Error calling Relation API: %s %s: %s", method, endpoint, error)
            raise error

        if response.status_code == 204:
            return None

        try:
            return response.json()
        except ValueError:
            logger.error("Relation API returned a non-JSON body for %s %s", method, endpoint)
            raise RemoteApiError(response.status_code, response.text)

    async def send(self, request: PreparedRequest) -> Any:
        return await self.call(request.endpoint, request.method, body=request.body, params=request.params)


def format_response(data: Any) -> List[TextContent]:
    """Wrap any JSON-serialisable value as a single pretty-printed text block."""
    return [TextContent(type="text", text=json.dumps(data, indent=2, ensure_ascii=False))]


def resolve_policy(spec: ToolSpec, config: RelationConfig) -> ErrorPolicy:
    if config.error_policy == "observed":
        return spec.error_policy
    return ErrorPolicy(config.error_policy)


async def run_tool(client: RelationClient, spec: ToolSpec, arguments: Mapping[str, Any]) -> List[TextContent]:
    """
    Execute one tool: build the request, call the API, format the answer.

    InvalidInputError always propagates. API and network failures follow the
    tool's error policy.
    """
    request = build_request(spec, arguments)

    try:
        result = await client.send(request)
    except RelationMCPError as e:
        logger.error("Error in %s: %s", spec.name, e)
        if resolve_policy(spec, client.config) is ErrorPolicy.RAISE:
            raise
        return format_response({"error": spec.error_message})

    return format_response(result)
