"""
Content Routes

- POST /api/content/create-content: JSON post with media URLs
- POST /api/content/create-content-images/{memberId}: multipart post with
  up to 10 uploaded images
- PUT /api/content/update-content/{postId}
- GET /api/content/get-content/{memberId}: a member's posts, newest first
- PUT /api/content/like-content/{postId} / unlike-content/{postId}
- DELETE /api/content/delete-content/{postId}
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from borohub.database import get_db
from borohub.dependencies import ensure_self_or_admin, get_current_member
from borohub.errors import BoroHubError
from borohub.models import Member
from borohub.schemas import CreatePostRequest, MemberActionRequest, UpdatePostRequest
from borohub.services import content
from borohub.services.media import save_uploads
from borohub.services.members import load_member
from borohub.utils.serializers import serialize_member, serialize_post, success_response

router = APIRouter(prefix="/api/content", tags=["content"])

MAX_MEDIA_FILES = 10


@router.post("/create-content")
async def create_content(
    body: CreatePostRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, body.member_id, "create content")
    post = await content.create_post(db, body.member_id, body.content, body.media)
    post_data = serialize_post(post)
    member = await load_member(db, body.member_id)
    return success_response(
        {
            "message": "Post created successfully!",
            "post": post_data,
            "member": serialize_member(member, private=True),
        },
        201,
    )


@router.post("/create-content-images/{member_id}")
async def create_content_with_images(
    member_id: int,
    content_text: str = Form(..., alias="content"),
    media: list[UploadFile] | None = File(None),
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a post from a multipart form.

    The uploaded files are stored first; their URLs become the post's media
    in upload order.
    """
    ensure_self_or_admin(current, member_id, "create content")
    media = media or []
    if len(media) > MAX_MEDIA_FILES:
        raise BoroHubError(f"At most {MAX_MEDIA_FILES} media files are allowed", 400)
    if not content_text.strip():
        raise BoroHubError("Post content is required", 400)

    await load_member(db, member_id)
    urls = await save_uploads(media, "media")
    post = await content.create_post(db, member_id, content_text, urls)
    return success_response({"message": "Post created successfully!", "post": serialize_post(post)}, 201)


@router.put("/update-content/{post_id}")
async def update_content(
    post_id: int,
    body: UpdatePostRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    post = await content.update_post(db, post_id, current, body.content, body.media)
    return success_response({"message": "Content updated successfully!", "post": serialize_post(post)})


@router.get("/get-content/{member_id}")
async def get_content(member_id: int, db: AsyncSession = Depends(get_db)):
    posts = await content.list_member_posts(db, member_id)
    return success_response({
        "message": "Posts retrieved successfully!",
        "posts": [serialize_post(p) for p in posts],
    })


@router.put("/like-content/{post_id}")
async def like_content(
    post_id: int,
    body: MemberActionRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, body.member_id, "like content")
    post = await content.like_post(db, post_id, body.member_id)
    return success_response({"message": "Post liked successfully!", "post": serialize_post(post)})


@router.put("/unlike-content/{post_id}")
async def unlike_content(
    post_id: int,
    body: MemberActionRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, body.member_id, "unlike content")
    post = await content.unlike_post(db, post_id, body.member_id)
    return success_response({"message": "Post unliked successfully!", "post": serialize_post(post)})


@router.delete("/delete-content/{post_id}")
async def delete_content(
    post_id: int,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    post = await content.delete_post(db, post_id, current)
    return success_response({"message": "Content deleted successfully!", "post": serialize_post(post)})
