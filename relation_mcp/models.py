from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class TicketStatus(str, Enum):
    OPEN = "open"
    PENDING = "pending"
    CLOSED = "closed"


class Address(BaseModel):
    """Postal address attached to a customer record."""
    postal_code: Optional[str] = Field(default=None, description="Postal code")
    prefecture: Optional[str] = Field(default=None, description="Prefecture")
    address1: Optional[str] = Field(default=None, description="Address line 1")
    address2: Optional[str] = Field(default=None, description="Address line 2")
