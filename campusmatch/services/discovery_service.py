import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from campusmatch import crud, models, schemas
from campusmatch.core.config import settings
from campusmatch.core.errors import ValidationError
from campusmatch.utils.geo import haversine_km

logger = logging.getLogger(__name__)


def filter_by_distance(
    user: models.User, candidates: Sequence[models.User]
) -> List[Tuple[models.User, Optional[float]]]:
    """Drops candidates farther than the user's ``max_distance``.

    Candidates that never shared a location are kept and get no distance.
    The requester's own coordinates are used as stored.
    """
    kept = []
    for candidate in candidates:
        if not candidate.has_location:
            kept.append((candidate, None))
            continue
        distance = haversine_km(user.latitude, user.longitude, candidate.latitude, candidate.longitude)
        if distance <= user.max_distance:
            kept.append((candidate, distance))
    return kept


async def discover(
    db: AsyncSession, *, user: models.User, page: int = 1, limit: Optional[int] = None
) -> schemas.DiscoveryPage:
    """
    Returns one page of potential matches for ``user``.

    The page is cut in the database before the distance filter runs, so a
    page can hold fewer than ``limit`` candidates even when later pages are
    not empty.
    """
    limit = limit or settings.DISCOVERY_PAGE_SIZE
    if page < 1:
        raise ValidationError("Page must be 1 or greater.")
    if limit < 1 or limit > settings.DISCOVERY_MAX_PAGE_SIZE:
        raise ValidationError(f"Limit must be between 1 and {settings.DISCOVERY_MAX_PAGE_SIZE}.")

    candidates = await crud.crud_user.get_discovery_candidates(
        db, user=user, skip=(page - 1) * limit, limit=limit
    )
    nearby = filter_by_distance(user, candidates)
    logger.debug(
        f"Discovery for user {user.id} page {page}: {len(candidates)} candidates, {len(nearby)} within range"
    )
    items = [
        schemas.DiscoveryCandidate(user=schemas.UserPublic.from_user(candidate), distance_km=distance)
        for candidate, distance in nearby
    ]
    return schemas.DiscoveryPage(candidates=items, count=len(items), page=page, limit=limit)
