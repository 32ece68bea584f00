"""
Chat Service

Direct conversations between members.

- create_chat: the creator is always one of the participants
- create_chat_entry: only participants can post; replyTo must point at an
  entry of the same chat
- get_chat: participants (and admins) can read a chat
- delete_chat: participants can delete a chat with all its entries
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from borohub.errors import BoroHubError
from borohub.models import Chat, ChatEntry, Member

logger = logging.getLogger(__name__)


def chat_options():
    return (
        selectinload(Chat.participants),
        selectinload(Chat.messages).selectinload(ChatEntry.sender),
    )


async def load_chat(db: AsyncSession, chat_id: int, message: str = "Chat cannot be found") -> Chat:
    result = await db.execute(
        select(Chat)
        .options(*chat_options())
        .filter(Chat.id == chat_id)
    )
    chat = result.scalars().first()
    if not chat:
        raise BoroHubError(message, 404)
    return chat


def _is_participant(chat: Chat, member: Member) -> bool:
    return any(p.id == member.id for p in chat.participants)


async def create_chat(db: AsyncSession, creator: Member, participant_ids: list[int]) -> Chat:
    """
    Start a chat between the creator and participant_ids.

    Raises:
        BoroHubError: 400 no participants, 404 a participant does not exist
    """
    if not participant_ids:
        raise BoroHubError("Chat must have at least one participant", 400)

    ids = set(participant_ids)
    ids.add(creator.id)

    result = await db.execute(select(Member).filter(Member.id.in_(ids)))
    members = {m.id: m for m in result.scalars().all()}
    for participant_id in sorted(ids):
        if participant_id not in members:
            raise BoroHubError(f"Participant with ID {participant_id} not found", 404)

    chat = Chat(creator_id=creator.id, participants=[members[i] for i in sorted(ids)])
    db.add(chat)
    await db.commit()

    logger.info(f"Member {creator.id} created chat {chat.id} with {sorted(ids)}")
    return await load_chat(db, chat.id)


async def create_chat_entry(
    db: AsyncSession,
    chat_id: int,
    sender: Member,
    content: str,
    reply_to: int | None = None
) -> ChatEntry:
    """
    Post a message in a chat.

    Raises:
        BoroHubError: 404 unknown chat or replyTo entry,
                      403 sender is not a participant, 400 blank content
    """
    chat = await load_chat(db, chat_id, "Chat does not exist")

    if not _is_participant(chat, sender):
        raise BoroHubError("You are not a member of this chat", 403)

    content = (content or "").strip()
    if not content:
        raise BoroHubError("Message content is required", 400)

    if reply_to is not None and not any(e.id == reply_to for e in chat.messages):
        raise BoroHubError("The message you are replying to does not exist in this chat", 404)

    entry = ChatEntry(sender_id=sender.id, content=content, reply_to_id=reply_to)
    chat.messages.append(entry)
    await db.commit()

    result = await db.execute(
        select(ChatEntry)
        .options(selectinload(ChatEntry.sender))
        .filter(ChatEntry.id == entry.id)
    )
    return result.scalars().first()


async def get_chat(db: AsyncSession, chat_id: int, viewer: Member) -> Chat:
    chat = await load_chat(db, chat_id)
    if not _is_participant(chat, viewer) and not viewer.is_admin:
        raise BoroHubError("You are not a member of this chat", 403)
    return chat


async def delete_chat(db: AsyncSession, chat_id: int, member: Member):
    """
    Delete a chat and its entries.

    Raises:
        BoroHubError: 404 unknown chat, 403 not a participant
    """
    chat = await load_chat(db, chat_id, "Chat not found or already deleted.")

    if not _is_participant(chat, member):
        raise BoroHubError("You are not authorized to delete this chat.", 403)

    # Entries are removed through the delete-orphan cascade on Chat.messages
    for entry in chat.messages:
        entry.reply_to_id = None
    await db.flush()
    await db.delete(chat)
    await db.commit()

    logger.info(f"Chat {chat_id} deleted by member {member.id}")
