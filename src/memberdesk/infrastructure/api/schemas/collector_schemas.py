"""Pydantic schemas for collector endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CreateCollectorRequest(BaseModel):
    """Request body for creating a collector."""

    name: str = Field(..., min_length=1, max_length=255, description="Collector name")
    prefix: str = Field(..., min_length=1, max_length=8, description="Letter prefix, e.g. TM")
    number: str = Field(..., min_length=1, max_length=8, description="Collector number, e.g. 01")
    member_number: str | None = Field(
        None, max_length=32, description="Member acting as this collector"
    )


class CollectorResponse(BaseModel):
    """A single collector."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    prefix: str
    number: str
    member_number: str | None = None
    active: bool
    created_at: datetime | None = None


class CollectorListResponse(BaseModel):
    items: list[CollectorResponse]
    total: int
