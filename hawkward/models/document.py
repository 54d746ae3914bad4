"""
Core Data Models for Hawkward

The Document is the single persisted aggregate. It is split into five
named stores; only ``accounts`` has a canonical record shape; the other
stores hold client-owned sub-documents that are preserved verbatim.

Models serialize with camelCase keys because that is what the browser
client reads and writes.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class StoreName(str, Enum):
    """The five top-level stores of the Document."""
    ACCOUNTS = "accounts"
    PROFILE = "profile"
    TIMELINE = "timeline"
    GOALS = "goals"
    SETTINGS = "settings"

    @property
    def is_keyed(self) -> bool:
        """Keyed stores accept a sub-key and merge the value under it."""
        return self in (StoreName.PROFILE, StoreName.TIMELINE)


# Account limits
MAX_PAYMENT = 1_000_000_000
MAX_SAFE_INTEGER = 2**53 - 1


class Account(BaseModel):
    """
    A financial commitment (subscription, bill, membership...).

    Instances are produced by ``normalize_account``; the field limits
    below mirror the clamping applied there.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    # 0 means "not assigned yet"; saves replace it with the next free id
    id: int = Field(default=0, ge=0, le=MAX_SAFE_INTEGER)
    name: str = Field(default="", max_length=100)
    category: str = Field(default="", max_length=100)
    type: str = Field(default="expense", max_length=20)
    monthly_payment: float = Field(default=0.0, ge=0, le=MAX_PAYMENT)
    annual_payment: float = Field(default=0.0, ge=0, le=MAX_PAYMENT)
    has_reminder: str = Field(default="No", max_length=10)
    status: str = Field(default="Active", max_length=30)
    priority: str = Field(default="Important", max_length=30)
    owner_id: Optional[str] = Field(default=None, max_length=100)


class Document(BaseModel):
    """
    The whole persisted state.

    All five stores are always present with the right container type.
    """
    accounts: list[Account] = Field(default_factory=list)
    profile: dict[str, Any] = Field(default_factory=dict)
    timeline: dict[str, Any] = Field(default_factory=dict)
    goals: list[Any] = Field(default_factory=list)
    settings: dict[str, Any] = Field(default_factory=dict)

    def to_json_dict(self) -> dict[str, Any]:
        """Convert to the on-disk / wire representation."""
        return self.model_dump(mode="json", by_alias=True)

    def get_store(self, store: StoreName) -> Any:
        """JSON-ready value of one store."""
        return self.to_json_dict()[store.value]


def empty_document() -> dict[str, Any]:
    """Default content written when no document exists yet."""
    return Document().to_json_dict()
