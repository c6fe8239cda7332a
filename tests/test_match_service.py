import pytest
from sqlalchemy import func, select

from campusmatch import crud
from campusmatch.core.errors import (
    AccessDeniedError, DuplicateActionError, NotFoundError, SelfActionError
)
from campusmatch.models import Gender, Match, MatchEntry, SwipeAction
from campusmatch.services import match_service

from conftest import matched_user_ids, swiped_user_ids


async def _pair(make_user):
    alice = await make_user(name="Alice")
    bob = await make_user(name="Bob", gender=Gender.MALE)
    return alice.id, bob.id


async def _match_count(db) -> int:
    return await db.scalar(select(func.count(Match.id)))


async def test_one_sided_like_is_not_a_match(db, make_user):
    alice_id, bob_id = await _pair(make_user)

    result = await match_service.like(db, actor_id=alice_id, target_id=bob_id)

    assert result.is_match is False
    assert result.match is None
    assert result.message == "Like sent successfully"
    assert await crud.crud_user.has_liked(db, actor_id=alice_id, target_id=bob_id)
    assert await _match_count(db) == 0


async def test_mutual_like_creates_one_match(db, make_user):
    alice_id, bob_id = await _pair(make_user)

    await match_service.like(db, actor_id=alice_id, target_id=bob_id)
    result = await match_service.like(db, actor_id=bob_id, target_id=alice_id)

    assert result.is_match is True
    assert result.message == "It's a match!"
    assert result.match.user.id == alice_id
    assert result.match.user.profile.name == "Alice"
    assert result.match.is_active is True
    assert result.match.last_message is None
    assert await _match_count(db) == 1
    assert await matched_user_ids(db, alice_id) == {bob_id}
    assert await matched_user_ids(db, bob_id) == {alice_id}


async def test_like_self_is_rejected(db, make_user):
    alice = await make_user()
    with pytest.raises(SelfActionError):
        await match_service.like(db, actor_id=alice.id, target_id=alice.id)


async def test_like_unknown_user(db, make_user):
    alice = await make_user()
    alice_id = alice.id
    with pytest.raises(NotFoundError):
        await match_service.like(db, actor_id=alice_id, target_id=alice_id + 1000)
    assert await swiped_user_ids(db, actor_id=alice_id) == set()


async def test_duplicate_like_changes_nothing(db, make_user):
    alice_id, bob_id = await _pair(make_user)
    await match_service.like(db, actor_id=alice_id, target_id=bob_id)
    first = await crud.crud_user.get_swipe(db, actor_id=alice_id, target_id=bob_id)
    first_at = first.created_at

    with pytest.raises(DuplicateActionError):
        await match_service.like(db, actor_id=alice_id, target_id=bob_id)

    swipe = await crud.crud_user.get_swipe(db, actor_id=alice_id, target_id=bob_id)
    assert swipe.action == SwipeAction.LIKE
    assert swipe.created_at.replace(tzinfo=None) == first_at.replace(tzinfo=None)


async def test_like_after_dislike_replaces_it(db, make_user):
    alice_id, bob_id = await _pair(make_user)

    await match_service.dislike(db, actor_id=alice_id, target_id=bob_id)
    await match_service.like(db, actor_id=alice_id, target_id=bob_id)

    assert await swiped_user_ids(db, actor_id=alice_id, action=SwipeAction.LIKE) == {bob_id}
    assert await swiped_user_ids(db, actor_id=alice_id, action=SwipeAction.DISLIKE) == set()


async def test_dislike_after_like_replaces_it(db, make_user):
    alice_id, bob_id = await _pair(make_user)

    await match_service.like(db, actor_id=alice_id, target_id=bob_id)
    result = await match_service.dislike(db, actor_id=alice_id, target_id=bob_id)

    assert result.success is True
    assert await swiped_user_ids(db, actor_id=alice_id, action=SwipeAction.LIKE) == set()
    assert await swiped_user_ids(db, actor_id=alice_id, action=SwipeAction.DISLIKE) == {bob_id}


async def test_duplicate_dislike_and_self_dislike(db, make_user):
    alice_id, bob_id = await _pair(make_user)
    await match_service.dislike(db, actor_id=alice_id, target_id=bob_id)

    with pytest.raises(DuplicateActionError):
        await match_service.dislike(db, actor_id=alice_id, target_id=bob_id)
    with pytest.raises(SelfActionError):
        await match_service.dislike(db, actor_id=alice_id, target_id=alice_id)


async def test_dislike_does_not_retire_an_existing_match(db, make_user):
    alice_id, bob_id = await _pair(make_user)
    await match_service.like(db, actor_id=alice_id, target_id=bob_id)
    await match_service.like(db, actor_id=bob_id, target_id=alice_id)

    await match_service.dislike(db, actor_id=alice_id, target_id=bob_id)

    match = await crud.crud_match.get_match_for_pair(db, user1_id=alice_id, user2_id=bob_id)
    assert match.is_active is True


async def test_undo_retires_match_for_both_users(db, make_user):
    alice_id, bob_id = await _pair(make_user)
    await match_service.like(db, actor_id=alice_id, target_id=bob_id)
    await match_service.like(db, actor_id=bob_id, target_id=alice_id)

    result = await match_service.undo(db, actor_id=alice_id, target_id=bob_id)

    assert result.message == "Action undone successfully"
    match = await crud.crud_match.get_match_for_pair(db, user1_id=alice_id, user2_id=bob_id)
    assert match.is_active is False
    assert await matched_user_ids(db, alice_id) == set()
    assert await matched_user_ids(db, bob_id) == set()
    assert not await crud.crud_user.has_liked(db, actor_id=alice_id, target_id=bob_id)
    # The other user's like is kept
    assert await crud.crud_user.has_liked(db, actor_id=bob_id, target_id=alice_id)
    assert (await match_service.list_matches(db, user_id=bob_id)).count == 0


async def test_undo_twice_is_a_no_op(db, make_user):
    alice_id, bob_id = await _pair(make_user)
    await match_service.like(db, actor_id=alice_id, target_id=bob_id)

    await match_service.undo(db, actor_id=alice_id, target_id=bob_id)
    second = await match_service.undo(db, actor_id=alice_id, target_id=bob_id)

    assert second.success is True
    assert second.message == "Nothing to undo"
    assert await swiped_user_ids(db, actor_id=alice_id) == set()


async def test_rematch_reuses_the_retired_match(db, make_user):
    alice_id, bob_id = await _pair(make_user)
    await match_service.like(db, actor_id=alice_id, target_id=bob_id)
    first = await match_service.like(db, actor_id=bob_id, target_id=alice_id)
    await match_service.undo(db, actor_id=alice_id, target_id=bob_id)

    again = await match_service.like(db, actor_id=alice_id, target_id=bob_id)

    assert again.is_match is True
    assert again.match.id == first.match.id
    assert await _match_count(db) == 1
    assert await matched_user_ids(db, alice_id) == {bob_id}
    assert await matched_user_ids(db, bob_id) == {alice_id}


async def test_unmatch_requires_participant(db, make_user):
    alice_id, bob_id = await _pair(make_user)
    carol = await make_user(name="Carol")
    carol_id = carol.id
    await match_service.like(db, actor_id=alice_id, target_id=bob_id)
    result = await match_service.like(db, actor_id=bob_id, target_id=alice_id)
    match_id = result.match.id

    with pytest.raises(AccessDeniedError):
        await match_service.unmatch(db, match_id=match_id, requester_id=carol_id)
    with pytest.raises(NotFoundError):
        await match_service.unmatch(db, match_id=match_id + 1000, requester_id=alice_id)

    await match_service.unmatch(db, match_id=match_id, requester_id=bob_id)

    match = await crud.crud_match.get_match_by_id(db, match_id=match_id)
    assert match.is_active is False
    assert await db.scalar(select(func.count()).select_from(MatchEntry)) == 0
    # Unmatching again is harmless
    await match_service.unmatch(db, match_id=match_id, requester_id=alice_id)


async def test_get_match_checks_access(db, make_user):
    alice_id, bob_id = await _pair(make_user)
    carol = await make_user(name="Carol")
    carol_id = carol.id
    await match_service.like(db, actor_id=alice_id, target_id=bob_id)
    result = await match_service.like(db, actor_id=bob_id, target_id=alice_id)

    detail = await match_service.get_match(db, match_id=result.match.id, user_id=alice_id)
    assert detail.match.user.id == bob_id

    with pytest.raises(AccessDeniedError):
        await match_service.get_match(db, match_id=result.match.id, user_id=carol_id)
    with pytest.raises(NotFoundError):
        await match_service.get_match(db, match_id=9999, user_id=alice_id)


async def test_list_matches_shows_the_other_user(db, make_user):
    alice_id, bob_id = await _pair(make_user)
    carol = await make_user(name="Carol")
    carol_id = carol.id
    for other_id in (bob_id, carol_id):
        await match_service.like(db, actor_id=alice_id, target_id=other_id)
        await match_service.like(db, actor_id=other_id, target_id=alice_id)

    listing = await match_service.list_matches(db, user_id=alice_id)

    assert listing.count == 2
    assert {item.user.id for item in listing.matches} == {bob_id, carol_id}
    # Newest match first
    assert listing.matches[0].user.id == carol_id
    assert (await match_service.list_matches(db, user_id=bob_id)).matches[0].user.id == alice_id
