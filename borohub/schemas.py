"""
Request Bodies

Pydantic models for every JSON body the API accepts. Field names follow
the wire format (camelCase); Python code reads the snake_case attributes.
Validation failures are reported as 400 by the handler in errors.py.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from borohub.utils.validators import is_valid_handle, is_valid_url


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# Auth

class InitializeAccountRequest(CamelModel):
    full_name: str = Field(..., alias="fullName", min_length=1)
    handle: str = Field(..., min_length=1)
    email_address: EmailStr = Field(..., alias="emailAddress")
    # bcrypt only looks at the first 72 bytes
    plain_password: str = Field(..., alias="plainPassword", min_length=1, max_length=72)
    about_me: str | None = Field(None, alias="aboutMe", max_length=500)
    location: str | None = None
    hobby: str | None = None
    avatar: str = ""
    cover_image: str = Field("", alias="coverImage")

    @field_validator("full_name", "handle")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("handle")
    @classmethod
    def check_handle(cls, value: str) -> str:
        if not is_valid_handle(value):
            raise ValueError("handle must be 3-30 letters, digits, '_' or '.'")
        return value


class AccessAccountRequest(CamelModel):
    email_address: str | None = Field(None, alias="emailAddress")
    handle: str | None = None
    plain_password: str | None = Field(None, alias="plainPassword")


# Members

class UpdateMemberRequest(CamelModel):
    full_name: str | None = Field(None, alias="fullName", min_length=1)
    handle: str | None = None
    about_me: str | None = Field(None, alias="aboutMe", max_length=500)
    location: str | None = None
    hobby: str | None = None

    @field_validator("handle")
    @classmethod
    def check_handle(cls, value: str | None) -> str | None:
        if value is not None and not is_valid_handle(value.strip()):
            raise ValueError("handle must be 3-30 letters, digits, '_' or '.'")
        return value.strip() if value is not None else None


class FollowRequest(CamelModel):
    follower_id: int = Field(..., alias="followerId")


class RestrictRequest(CamelModel):
    restricted_user_id: int = Field(..., alias="restrictedUserId")


# Content

class CreatePostRequest(CamelModel):
    member_id: int = Field(..., alias="memberId")
    content: str
    media: list[str] = Field(default_factory=list, max_length=10)

    @field_validator("media")
    @classmethod
    def check_media(cls, value: list[str]) -> list[str]:
        for url in value:
            if not is_valid_url(url):
                raise ValueError(f"invalid media URL: {url}")
        return value


class UpdatePostRequest(CamelModel):
    content: str | None = None
    media: list[str] | None = Field(None, max_length=10)

    @field_validator("media")
    @classmethod
    def check_media(cls, value: list[str] | None) -> list[str] | None:
        for url in value or []:
            if not is_valid_url(url):
                raise ValueError(f"invalid media URL: {url}")
        return value


class MemberActionRequest(CamelModel):
    """Body of like/unlike/delete calls: who is acting."""
    member_id: int = Field(..., alias="memberId")


# Comments

class CreateCommentRequest(CamelModel):
    post_id: int = Field(..., alias="postId")
    member_id: int = Field(..., alias="memberId")
    input: str


class UpdateCommentRequest(CamelModel):
    input: str


class CreateReplyRequest(CamelModel):
    comment_id: int = Field(..., alias="commentId")
    member_id: int = Field(..., alias="memberId")
    input: str


# Chat

class CreateChatRequest(CamelModel):
    participants_id: list[int] = Field(..., alias="participantsId")


class CreateChatEntryRequest(CamelModel):
    content: str
    reply_to: int | None = Field(None, alias="replyTo")
