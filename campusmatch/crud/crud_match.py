from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete, or_, and_
from sqlalchemy.orm import selectinload
from typing import List, Optional
import logging

from campusmatch.models.match import Match, MatchEntry
from campusmatch.models.user import User
from campusmatch.utils.dates import utcnow

logger = logging.getLogger(__name__)

# Loads both users (with photos) and the last message for MatchRead
MATCH_DETAIL_OPTIONS = [
    selectinload(Match.user_low).selectinload(User.photos),
    selectinload(Match.user_high).selectinload(User.photos),
    selectinload(Match.last_message),
]


async def get_match_by_id(
    db: AsyncSession, *, match_id: int, with_details: bool = False, for_update: bool = False
) -> Optional[Match]:
    statement = select(Match).where(Match.id == match_id)
    if with_details:
        # Rows already in the session may lack the relationships
        statement = statement.options(*MATCH_DETAIL_OPTIONS).execution_options(populate_existing=True)
    if for_update:
        statement = statement.with_for_update()
    result = await db.execute(statement)
    return result.scalar_one_or_none()


async def get_match_for_pair(db: AsyncSession, *, user1_id: int, user2_id: int) -> Optional[Match]:
    """The single match row of an unordered pair, active or retired."""
    low, high = Match.normalize_pair(user1_id, user2_id)
    result = await db.execute(
        select(Match).where(Match.user_low_id == low, Match.user_high_id == high)
    )
    return result.scalar_one_or_none()


async def get_active_matches_for_user(db: AsyncSession, *, user_id: int) -> List[Match]:
    logger.debug(f"Fetching active matches for user ID: {user_id}")
    statement = (
        select(Match)
        .where(
            or_(Match.user_low_id == user_id, Match.user_high_id == user_id),
            Match.is_active.is_(True),
        )
        .options(*MATCH_DETAIL_OPTIONS)
        .order_by(Match.last_message_at.desc(), Match.id.desc())
        .execution_options(populate_existing=True)
    )
    result = await db.execute(statement)
    matches = result.scalars().all()
    logger.debug(f"Found {len(matches)} active matches for user ID: {user_id}")
    return matches


async def activate_match_for_pair(db: AsyncSession, *, user1_id: int, user2_id: int) -> tuple[Match, bool]:
    """Returns the pair's match, creating or reactivating it as needed.

    The second element tells whether the pair went from unmatched to matched
    in this call. A retired row is reused because the pair is unique.
    """
    match = await get_match_for_pair(db, user1_id=user1_id, user2_id=user2_id)
    now = utcnow()
    if match is None:
        match = Match.for_pair(
            user1_id, user2_id, matched_at=now, last_message_id=None, last_message_at=now, is_active=True
        )
        db.add(match)
        await db.flush()
        logger.info(f"Created match {match.id} between users {match.user_low_id} and {match.user_high_id}")
        return match, True
    if match.is_active:
        return match, False
    match.is_active = True
    match.matched_at = now
    await db.flush()
    logger.info(f"Reactivated match {match.id} between users {match.user_low_id} and {match.user_high_id}")
    return match, True


async def add_match_entries(db: AsyncSession, *, match: Match) -> None:
    """Mirrors ``match`` into both users' match lists (idempotent)."""
    for user_id, other_id in ((match.user_low_id, match.user_high_id), (match.user_high_id, match.user_low_id)):
        entry = await db.get(MatchEntry, (user_id, other_id))
        if entry is None:
            db.add(MatchEntry(user_id=user_id, matched_user_id=other_id, match_id=match.id, matched_at=match.matched_at))
        else:
            entry.match_id = match.id
            entry.matched_at = match.matched_at
    await db.flush()


async def remove_match_entries(db: AsyncSession, *, match: Match) -> int:
    low, high = match.user_ids
    result = await db.execute(
        delete(MatchEntry).where(
            or_(
                and_(MatchEntry.user_id == low, MatchEntry.matched_user_id == high),
                and_(MatchEntry.user_id == high, MatchEntry.matched_user_id == low),
            )
        )
    )
    return result.rowcount


async def retire_match(db: AsyncSession, *, match: Match) -> None:
    """Hides the match from both users; the row itself is kept."""
    match.is_active = False
    await remove_match_entries(db, match=match)
    await db.flush()
    logger.info(f"Retired match {match.id} between users {match.user_low_id} and {match.user_high_id}")
