"""Book and suggestion models"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from bookclub.models.common import Category, NonEmptyStr, reject_null


class BookCreateRequest(BaseModel):
    title: NonEmptyStr
    author: NonEmptyStr
    synopsis: Optional[str] = None
    image_url: Optional[str] = None
    category: Category
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=1900)
    is_selected: bool = False


class BookUpdateRequest(BaseModel):
    id: NonEmptyStr
    title: Optional[str] = None
    author: Optional[str] = None
    synopsis: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[Category] = None
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = Field(default=None, ge=1900)
    is_selected: Optional[bool] = None

    @field_validator("title", "author", "category", "month", "year", "is_selected", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class SuggestionCreateRequest(BaseModel):
    title: NonEmptyStr
    author: NonEmptyStr
    synopsis: NonEmptyStr
    image_url: Optional[str] = None
    category: Category
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=1900)


class VoteCreateRequest(BaseModel):
    suggestion_id: NonEmptyStr
