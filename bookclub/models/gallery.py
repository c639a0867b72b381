"""Gallery models"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from bookclub.models.common import NonEmptyStr, reject_null


class GalleryCreateRequest(BaseModel):
    type: Literal["image", "video"]
    url: NonEmptyStr
    title: NonEmptyStr
    description: Optional[str] = None
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=1900)
    order_index: Optional[int] = None


class GalleryUpdateRequest(BaseModel):
    id: NonEmptyStr
    type: Optional[Literal["image", "video"]] = None
    url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = Field(default=None, ge=1900)
    order_index: Optional[int] = None

    @field_validator("type", "url", "title", "month", "year", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)
