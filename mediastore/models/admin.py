"""Administration records stored by the admin gateways."""

import json
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from mediastore.utils import new_id, utc_now


class ParameterType(str, Enum):
    """Groups of configuration parameters."""

    SYSTEM = "system"
    CONTENT = "content"
    ORDER = "order"
    SOCIAL = "social"


class DeliveryStatus(str, Enum):
    """Delivery state of an email."""

    NEW = "NEW"
    SENT = "SENT"
    DELIVERED = "DELIVERED"
    BOUNCED = "BOUNCED"
    FAILED = "FAILED"


class Parameter(BaseModel):
    """A named configuration value."""

    id: str = Field(default_factory=new_id, max_length=36)
    created_date: datetime = Field(default_factory=utc_now)
    updated_date: datetime | None = None
    type: ParameterType
    name: str = Field(..., min_length=1, max_length=30)
    value: str = Field(default="")

    @property
    def int_value(self) -> int:
        return int(self.value)

    @property
    def bool_value(self) -> bool:
        return self.value.lower() in ("true", "1", "yes", "on")


class Email(BaseModel):
    """An outgoing email and its delivery state.

    The sender, body, recipients and error are persisted together as a JSON
    attributes document.
    """

    id: str = Field(default_factory=new_id, max_length=36)
    created_date: datetime = Field(default_factory=utc_now)
    updated_date: datetime | None = None
    subject: str = Field(default="", max_length=128)
    sender: str = ""
    body: str = ""
    recipients: list[str] = Field(default_factory=list)
    provider: str | None = None
    message_id: str | None = None
    status: DeliveryStatus = DeliveryStatus.NEW
    error_message: str = ""

    @field_validator("recipients")
    @classmethod
    def validate_recipients(cls, v: list[str]) -> list[str]:
        """Strip recipients and drop blanks."""
        return [recipient.strip() for recipient in v if recipient and recipient.strip()]

    def attributes(self) -> dict[str, Any]:
        return {
            "from": self.sender,
            "body": self.body,
            "recipients": self.recipients,
            "error-message": self.error_message,
        }

    def attributes_json(self) -> str:
        return json.dumps(self.attributes())

    def set_attributes(self, attributes: str | dict[str, Any]) -> None:
        """Populate the JSON-backed fields from an attributes document."""
        if isinstance(attributes, str):
            attributes = json.loads(attributes) if attributes else {}
        self.sender = attributes.get("from", "")
        self.body = attributes.get("body", "")
        self.recipients = list(attributes.get("recipients", []))
        self.error_message = attributes.get("error-message", "")
