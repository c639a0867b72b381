"""Meet-up and portal status models"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from bookclub.models.common import Category, NonEmptyStr, reject_null


class MeetupCreateRequest(BaseModel):
    title: NonEmptyStr
    description: Optional[str] = None
    venue_name: NonEmptyStr
    address: NonEmptyStr
    city: str = "Lagos"
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    google_maps_url: Optional[str] = None
    event_date: datetime
    end_time: Optional[datetime] = None
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = Field(default=None, ge=1900)
    image_url: Optional[str] = None
    is_published: bool = False


class MeetupUpdateRequest(BaseModel):
    id: NonEmptyStr
    title: Optional[str] = None
    description: Optional[str] = None
    venue_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    google_maps_url: Optional[str] = None
    event_date: Optional[datetime] = None
    end_time: Optional[datetime] = None
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = Field(default=None, ge=1900)
    image_url: Optional[str] = None
    is_published: Optional[bool] = None

    @field_validator(
        "title", "venue_name", "address", "city", "event_date", "month", "year", "is_published",
        mode="before",
    )
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class PortalStatusUpdateRequest(BaseModel):
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=1900)
    category: Category
    is_suggestion_open: Optional[bool] = None
    is_voting_open: Optional[bool] = None
