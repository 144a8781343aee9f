"""Shared fixtures: a RelationClient wired to an in-memory httpx transport."""

from __future__ import annotations

import json
from typing import Any, Callable, List, Optional

import httpx
import pytest

from relation_mcp.tools.api_utils import RelationClient
from relation_mcp.utils import RelationConfig


class ApiRecorder:
    """Fake Relation API: records every request and answers with a canned response."""

    def __init__(self, status: int = 200, json_body: Any = None, text: Optional[str] = None, error: Optional[Exception] = None):
        self.status = status
        self.json_body = {"ok": True} if json_body is None else json_body
        self.text = text
        self.error = error
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.status == 204:
            return httpx.Response(204)
        if self.text is not None:
            return httpx.Response(self.status, text=self.text)
        return httpx.Response(self.status, json=self.json_body)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture()
def config() -> RelationConfig:
    return RelationConfig(subdomain="acme", token="secret-token")


@pytest.fixture()
def make_client(config: RelationConfig) -> Callable[..., tuple[RelationClient, ApiRecorder]]:
    """Factory returning (client, recorder); keyword args configure the fake response."""

    def factory(cfg: Optional[RelationConfig] = None, **response: Any) -> tuple[RelationClient, ApiRecorder]:
        recorder = ApiRecorder(**response)
        client = RelationClient(cfg or config, transport=httpx.MockTransport(recorder))
        return client, recorder

    return factory


def envelope_payload(envelope) -> Any:
    """Decode the JSON carried by a single-block envelope."""
    assert len(envelope) == 1
    assert envelope[0].type == "text"
    return json.loads(envelope[0].text)
