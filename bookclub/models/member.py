"""Member (public roster) models"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookclub.models.common import NonEmptyStr, reject_null


class MemberCreateRequest(BaseModel):
    name: NonEmptyStr
    role: Optional[str] = None
    bio: Optional[str] = None
    image_url: Optional[str] = None
    social_links: Dict[str, str] = {}
    order_index: Optional[int] = None
    is_visible: bool = True


class MemberUpdateRequest(BaseModel):
    id: NonEmptyStr
    name: Optional[str] = None
    role: Optional[str] = None
    bio: Optional[str] = None
    image_url: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None
    order_index: Optional[int] = None
    is_visible: Optional[bool] = None

    @field_validator("name", "social_links", "is_visible", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class MemberProfileUpdateRequest(BaseModel):
    """Self-service edit; role and is_visible are applied for admins only"""
    model_config = ConfigDict(populate_by_name=True)

    member_id: NonEmptyStr = Field(alias="memberId")
    name: Optional[str] = None
    bio: Optional[str] = None
    image_url: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None
    role: Optional[str] = None
    is_visible: Optional[bool] = None

    @field_validator("name", "social_links", "is_visible", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class MemberLinkRequest(BaseModel):
    """Link a profile to an existing member, or create one when member_id is empty"""
    model_config = ConfigDict(populate_by_name=True)

    profile_id: NonEmptyStr = Field(alias="profileId")
    member_id: Optional[str] = Field(default=None, alias="memberId")
