"""
Lineage Record Model

A Record is one accepted operation: the fingerprint the client presented,
the fingerprint it rotated from (empty if none), the operation name and the
UTC epoch second the ledger observed it.
"""

import math
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


def to_epoch_seconds(value: datetime) -> int:
    """Convert a datetime to whole UTC epoch seconds.

    Naive datetimes are taken to already be UTC. Fractional seconds are
    truncated.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return math.floor(value.astimezone(timezone.utc).timestamp())


class Record(BaseModel):
    """A single immutable operation record."""

    model_config = ConfigDict(frozen=True)

    subject: str = Field(..., min_length=1, description="Fingerprint at the time of the operation")
    previous: str = Field(default="", description="Previous fingerprint, empty if never rotated")
    operation: str = Field(..., description="Name of the operation the client performed")
    observed_at: int = Field(..., description="UTC epoch seconds when the ledger received it")

    @field_validator("observed_at", mode="before")
    @classmethod
    def coerce_datetime(cls, v):
        if isinstance(v, datetime):
            return to_epoch_seconds(v)
        return v

    @property
    def has_previous(self) -> bool:
        return self.previous != ""
