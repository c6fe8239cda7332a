from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from campusmatch import models, schemas, services
from campusmatch.dependencies import get_current_active_user, get_db

router = APIRouter()


@router.get("/profile", response_model=schemas.UserDetail)
async def read_current_user_profile(
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    """
    Get current user's full profile and preferences.
    """
    return await services.user_service.get_profile(db, current_user.id)


@router.put("/profile", response_model=schemas.UserDetail)
async def update_current_user_profile(
    profile_in: schemas.ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    """
    Update the profile of the currently authenticated user. Absent fields are left unchanged.
    """
    return await services.user_service.update_profile(db, current_user.id, profile_in)


@router.put("/preferences", response_model=schemas.PreferencesResponse)
async def update_current_user_preferences(
    preferences_in: schemas.PreferencesUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    return await services.user_service.update_preferences(db, current_user.id, preferences_in)


@router.post("/photos", response_model=schemas.PhotosResponse)
async def add_photo(
    photo_in: schemas.PhotoRequest,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    """
    Add an already uploaded photo to the profile. The first photo becomes the main one.
    """
    return await services.user_service.add_photo(db, current_user.id, photo_in.url)


@router.put("/photos/main", response_model=schemas.PhotosResponse)
async def set_main_photo(
    photo_in: schemas.PhotoRequest,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    return await services.user_service.set_main_photo(db, current_user.id, photo_in.url)


@router.delete("/photos", response_model=schemas.PhotosResponse)
async def delete_photo(
    photo_in: schemas.PhotoRequest,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    return await services.user_service.delete_photo(db, current_user.id, photo_in.url)


@router.get("/discover", response_model=schemas.DiscoveryPage)
async def discover_users(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    """
    Potential matches for the current user. Age, gender and swipe filters run in
    the database; the distance limit is applied to the fetched page.
    """
    return await services.discovery_service.discover(db, user=current_user, page=page, limit=limit)
