"""
Chat Routes

All routes act as the logged-in member.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from borohub.database import get_db
from borohub.dependencies import get_current_member
from borohub.models import Member
from borohub.schemas import CreateChatEntryRequest, CreateChatRequest
from borohub.services import chat as chat_service
from borohub.utils.serializers import serialize_chat, serialize_chat_entry, success_response

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("/create-chat")
async def create_chat(
    body: CreateChatRequest,
    member: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    chat = await chat_service.create_chat(db, member, body.participants_id)
    return success_response({"message": "Chat created successfully!", "chat": serialize_chat(chat)}, 201)


@router.post("/create-chat-entry/{chat_id}")
async def create_chat_entry(
    chat_id: int,
    body: CreateChatEntryRequest,
    member: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    entry = await chat_service.create_chat_entry(db, chat_id, member, body.content, body.reply_to)
    return success_response(
        {"message": "Chat entry (message) created successfully!", "chatEntry": serialize_chat_entry(entry)},
        201,
    )


@router.get("/get-chat/{chat_id}")
async def get_chat(
    chat_id: int,
    member: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    chat = await chat_service.get_chat(db, chat_id, member)
    return success_response({"message": "Chat retrieved successfully!", "chat": serialize_chat(chat)})


@router.delete("/delete-chat/{chat_id}")
async def delete_chat(
    chat_id: int,
    member: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    await chat_service.delete_chat(db, chat_id, member)
    return success_response({"message": "Chat deleted successfully."})
