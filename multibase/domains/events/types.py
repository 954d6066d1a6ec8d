"""Event domain types.

``Properties`` is a closed JSON value type: strings, finite numbers, booleans,
None and nested lists/mappings of the same. Anything else is rejected when
the event is constructed, so serialization can never fail later.
"""

import math
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, JsonValue, field_validator

Properties = dict[str, JsonValue]


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Format ``moment`` (default: now) as UTC ``yyyy-MM-dd HH:mm:ss.SSS``."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M:%S.") + f"{moment.microsecond // 1000:03d}"


def ensure_finite(value: Any, path: str = "properties") -> None:
    """Raise ValueError if ``value`` contains NaN or an infinity at any depth."""
    # JSON has no NaN or Infinity and httpx refuses to encode them
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"non-finite number {value!r} at {path}")
    if isinstance(value, dict):
        for key, item in value.items():
            ensure_finite(item, f"{path}.{key}")
    elif isinstance(value, list):
        for index, item in enumerate(value):
            ensure_finite(item, f"{path}[{index}]")


class Event(BaseModel):
    """A tracked event, timestamped when it is created."""

    model_config = ConfigDict(frozen=True)

    name: str
    properties: Optional[Properties] = None
    timestamp: str = Field(default_factory=format_timestamp)

    @field_validator("properties")
    @classmethod
    def _reject_non_finite(cls, value: Optional[Properties]) -> Optional[Properties]:
        if value is not None:
            ensure_finite(value)
        return value

    def to_payload(self) -> dict[str, Any]:
        """Wire shape ``{event, properties?, timestamp}``."""
        payload: dict[str, Any] = {"event": self.name}
        if self.properties is not None:
            payload["properties"] = self.properties
        payload["timestamp"] = self.timestamp
        return payload


class Identify(BaseModel):
    """Associates the current identity with a normalized wallet address."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(..., min_length=1)
    properties: Optional[Properties] = None

    @field_validator("properties")
    @classmethod
    def _reject_non_finite(cls, value: Optional[Properties]) -> Optional[Properties]:
        if value is not None:
            ensure_finite(value)
        return value

    def to_payload(self) -> dict[str, Any]:
        """Wire shape ``{address, properties?}``."""
        payload: dict[str, Any] = {"address": self.address}
        if self.properties is not None:
            payload["properties"] = self.properties
        return payload
