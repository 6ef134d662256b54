"""Location search API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import LocationType
from app.schemas.search import SearchMetaResponse


class LocationRefResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: LocationType


class LeaderRefResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    names: str
    role: str


class LocationSearchItemResponse(BaseModel):
    """One location hit with its parent, leader and size."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: LocationType
    description: str
    population: int | None = Field(
        default=None, description="Registered members (houses and isibos only)"
    )
    parent_location: LocationRefResponse | None = None
    leader: LeaderRefResponse | None = None
    children_count: int
    relevance_score: int
    created_at: datetime
    updated_at: datetime | None = None


class LocationSearchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    items: list[LocationSearchItemResponse]
    meta: SearchMetaResponse
