"""
Errors raised while talking to the Relation API
"""


class RelationMCPError(Exception):
    """Base class for all errors raised by relation_mcp."""


class ConfigError(RelationMCPError):
    """Raised when an environment setting cannot be used."""


class InvalidInputError(RelationMCPError):
    """Raised when tool arguments are missing or malformed; no request is sent."""


class RemoteApiError(RelationMCPError):
    """Non-2xx response from the Relation API. The body is kept as raw text."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API request failed with status {status_code}: {body}")


class RemoteTransportError(RelationMCPError):
    """Network-level failure (DNS, refused connection, timeout)."""
