import pytest
from sqlalchemy import func, select

from campusmatch import crud, models
from campusmatch.core.errors import DuplicateActionError
from campusmatch.models import Gender, InterestedIn
from campusmatch.schemas import UserCreate
from campusmatch.services import auth_service

from conftest import TEST_PASSWORD


def _registration(email: str) -> UserCreate:
    return UserCreate(
        email=email, password=TEST_PASSWORD, name="Ananya Singh", age=20,
        gender=Gender.FEMALE, interested_in=InterestedIn.MALE,
    )


async def _users_with_email(db, email: str) -> int:
    return await db.scalar(select(func.count(models.User.id)).where(models.User.email == email))


async def test_register_then_authenticate(db):
    registered = await auth_service.register(db, _registration("Ananya@Campus.example.com"))

    assert registered.user.email == "ananya@campus.example.com"
    assert registered.token_type == "bearer"

    logged_in = await auth_service.authenticate(db, "ananya@campus.example.com", TEST_PASSWORD)
    assert logged_in.user.id == registered.user.id
    assert logged_in.user.is_online is True
    assert await auth_service.authenticate(db, "ananya@campus.example.com", "wrong") is None


async def test_register_duplicate_email(db):
    await auth_service.register(db, _registration("ananya@campus.example.com"))

    with pytest.raises(DuplicateActionError):
        await auth_service.register(db, _registration("ANANYA@campus.example.com"))
    assert await _users_with_email(db, "ananya@campus.example.com") == 1


async def test_concurrent_registration_reports_duplicate(db, session_factory, monkeypatch):
    get_user_by_email = crud.crud_user.get_user_by_email
    lookups = []

    async def racing_lookup(session, **kwargs):
        lookups.append(1)
        if len(lookups) == 1:
            # The other request commits the same email after this check passed
            async with session_factory() as other:
                other.add(models.User(
                    email="ananya@campus.example.com", hashed_password="x", name="Ananya", age=20,
                    gender=Gender.FEMALE, interested_in=InterestedIn.MALE,
                ))
                await other.commit()
            return None
        return await get_user_by_email(session, **kwargs)

    monkeypatch.setattr(crud.crud_user, "get_user_by_email", racing_lookup)

    with pytest.raises(DuplicateActionError):
        await auth_service.register(db, _registration("ananya@campus.example.com"))
    assert len(lookups) == 2
    assert await _users_with_email(db, "ananya@campus.example.com") == 1
