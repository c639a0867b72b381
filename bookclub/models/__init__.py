"""Models package - Pydantic models for API request/response"""

from bookclub.models.profile import (
    LoginRequest,
    UserCreateRequest,
    UserUpdateRequest,
    ProfileResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
)
from bookclub.models.member import (
    MemberCreateRequest,
    MemberUpdateRequest,
    MemberProfileUpdateRequest,
    MemberLinkRequest,
)
from bookclub.models.book import (
    BookCreateRequest,
    BookUpdateRequest,
    SuggestionCreateRequest,
    VoteCreateRequest,
)
from bookclub.models.gallery import GalleryCreateRequest, GalleryUpdateRequest
from bookclub.models.meetup import (
    MeetupCreateRequest,
    MeetupUpdateRequest,
    PortalStatusUpdateRequest,
)

__all__ = [
    # Profile
    "LoginRequest",
    "UserCreateRequest",
    "UserUpdateRequest",
    "ProfileResponse",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    # Member
    "MemberCreateRequest",
    "MemberUpdateRequest",
    "MemberProfileUpdateRequest",
    "MemberLinkRequest",
    # Book
    "BookCreateRequest",
    "BookUpdateRequest",
    "SuggestionCreateRequest",
    "VoteCreateRequest",
    # Gallery
    "GalleryCreateRequest",
    "GalleryUpdateRequest",
    # Meetup
    "MeetupCreateRequest",
    "MeetupUpdateRequest",
    "PortalStatusUpdateRequest",
]
