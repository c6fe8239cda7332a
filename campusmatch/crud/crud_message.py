from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from campusmatch.crud.base import CRUDBase
from campusmatch.models.message import Message
from campusmatch.schemas.message import MessageCreate
from campusmatch.utils.dates import utcnow

logger = logging.getLogger(__name__)


class CRUDMessage(CRUDBase[Message, MessageCreate]):
    async def create_delivered(
        self, db: AsyncSession, *, obj_in: MessageCreate, match_id: int, sender_id: int, receiver_id: int
    ) -> Message:
        """Stores a message; delivery to the other participant is immediate."""
        now = utcnow()
        return await self.create(
            db,
            obj_in=obj_in,
            extra={
                "match_id": match_id,
                "sender_id": sender_id,
                "receiver_id": receiver_id,
                "is_delivered": True,
                "delivered_at": now,
                "is_read": False,
                "read_at": None,
                "created_at": now,
            },
        )

    async def get_page_for_match(
        self, db: AsyncSession, *, match_id: int, skip: int = 0, limit: int = 50
    ) -> List[Message]:
        """Newest-first page of a match's messages, returned oldest-first."""
        statement = (
            select(Message)
            .where(Message.match_id == match_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .offset(skip)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(statement)
        return list(reversed(result.scalars().all()))

    async def get_latest_for_match(self, db: AsyncSession, *, match_id: int) -> Optional[Message]:
        statement = (
            select(Message)
            .where(Message.match_id == match_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(1)
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def mark_read(self, db: AsyncSession, *, match_id: int, receiver_id: int) -> int:
        """Marks every unread message addressed to ``receiver_id`` as read."""
        statement = (
            update(Message)
            .where(
                Message.match_id == match_id,
                Message.receiver_id == receiver_id,
                Message.is_read.is_(False),
            )
            .values(is_read=True, read_at=utcnow())
        )
        result = await db.execute(statement)
        logger.debug(f"Marked {result.rowcount} messages read in match {match_id} for user {receiver_id}")
        return result.rowcount

    async def count_unread(self, db: AsyncSession, *, receiver_id: int) -> int:
        statement = select(func.count(Message.id)).where(
            Message.receiver_id == receiver_id, Message.is_read.is_(False)
        )
        result = await db.execute(statement)
        return result.scalar_one()


message = CRUDMessage(Message)
