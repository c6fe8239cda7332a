from sqlalchemy.ext.asyncio import AsyncSession
import logging

from campusmatch import crud, models, schemas
from campusmatch.core.errors import DuplicateActionError, NotFoundError
from campusmatch.db.unit_of_work import run_in_transaction

logger = logging.getLogger(__name__)


async def _get_user_with_photos(db: AsyncSession, user_id: int) -> models.User:
    user = await crud.crud_user.get_user_by_id(
        db, user_id=user_id, options=crud.crud_user.USER_PUBLIC_OPTIONS
    )
    if not user:
        raise NotFoundError("User not found.")
    return user


def _photos_of(user: models.User) -> schemas.PhotosResponse:
    return schemas.PhotosResponse(photos=[schemas.Photo.model_validate(photo) for photo in user.photos])


async def get_profile(db: AsyncSession, user_id: int) -> schemas.UserDetail:
    user = await _get_user_with_photos(db, user_id)
    return schemas.UserDetail.from_user(user)


async def update_profile(
    db: AsyncSession, user_id: int, profile_in: schemas.ProfileUpdate
) -> schemas.UserDetail:
    """
    Applies a partial profile update. Only the fields present in the request
    are changed; location is merged coordinate by coordinate.
    """
    update_data = profile_in.model_dump(exclude_unset=True, exclude={"location"})

    async def work() -> models.User:
        user = await _get_user_with_photos(db, user_id)
        for field, value in update_data.items():
            if value is not None:
                setattr(user, field, value)
        if profile_in.location is not None:
            location = profile_in.location.model_dump(exclude_unset=True, exclude_none=True)
            for field, value in location.items():
                setattr(user, field, value)
        await db.flush()
        return user

    user = await run_in_transaction(db, work, operation=f"update profile of user {user_id}")
    logger.info(f"Updated profile fields {sorted(profile_in.model_fields_set)} for user {user_id}")
    return schemas.UserDetail.from_user(user)


async def update_preferences(
    db: AsyncSession, user_id: int, preferences_in: schemas.PreferencesUpdate
) -> schemas.PreferencesResponse:
    async def work() -> models.User:
        user = await _get_user_with_photos(db, user_id)
        if preferences_in.age_range is not None:
            user.age_min = preferences_in.age_range.min
            user.age_max = preferences_in.age_range.max
        if preferences_in.max_distance is not None:
            user.max_distance = preferences_in.max_distance
        if preferences_in.interested_in is not None:
            user.interested_in = preferences_in.interested_in
        await db.flush()
        return user

    user = await run_in_transaction(db, work, operation=f"update preferences of user {user_id}")
    logger.info(f"Updated preferences for user {user_id}")
    return schemas.PreferencesResponse(
        preferences=schemas.Preferences(
            age_range=schemas.AgeRange(min=user.age_min, max=user.age_max),
            max_distance=user.max_distance,
        ),
        interested_in=user.interested_in,
    )


# --- Photos ---

async def add_photo(db: AsyncSession, user_id: int, url: str) -> schemas.PhotosResponse:
    """Appends a photo; the first photo a user adds becomes the main one."""
    async def work() -> models.User:
        user = await _get_user_with_photos(db, user_id)
        if any(photo.url == url for photo in user.photos):
            raise DuplicateActionError("This photo has already been added.")
        position = max((photo.position for photo in user.photos), default=-1) + 1
        user.photos.append(models.UserPhoto(url=url, is_main=not user.photos, position=position))
        await db.flush()
        return user

    user = await run_in_transaction(db, work, operation=f"add photo for user {user_id}")
    logger.info(f"User {user_id} added photo {url}")
    return _photos_of(user)


async def set_main_photo(db: AsyncSession, user_id: int, url: str) -> schemas.PhotosResponse:
    async def work() -> models.User:
        user = await _get_user_with_photos(db, user_id)
        target = next((photo for photo in user.photos if photo.url == url), None)
        if target is None:
            raise NotFoundError("Photo not found.")
        for photo in user.photos:
            photo.is_main = photo is target
        await db.flush()
        return user

    user = await run_in_transaction(db, work, operation=f"set main photo for user {user_id}")
    return _photos_of(user)


async def delete_photo(db: AsyncSession, user_id: int, url: str) -> schemas.PhotosResponse:
    """Removes a photo by URL. Unknown URLs leave the photos unchanged."""
    async def work() -> models.User:
        user = await _get_user_with_photos(db, user_id)
        for photo in [photo for photo in user.photos if photo.url == url]:
            user.photos.remove(photo)
        if user.photos and not any(photo.is_main for photo in user.photos):
            user.photos[0].is_main = True
        await db.flush()
        return user

    user = await run_in_transaction(db, work, operation=f"delete photo for user {user_id}")
    logger.info(f"User {user_id} deleted photo {url}")
    return _photos_of(user)
