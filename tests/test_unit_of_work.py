import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from campusmatch import crud
from campusmatch.core.errors import NotFoundError, PersistenceError
from campusmatch.db.unit_of_work import run_in_transaction
from campusmatch.models import Match, SwipeAction
from campusmatch.services import match_service

from conftest import swiped_user_ids


async def test_commits_work_once(db, make_user):
    alice = await make_user()
    bob = await make_user()
    alice_id, bob_id = alice.id, bob.id

    async def work():
        await crud.crud_user.record_swipe(db, actor_id=alice_id, target_id=bob_id, action=SwipeAction.LIKE)
        return "done"

    assert await run_in_transaction(db, work, operation="test like") == "done"
    assert await crud.crud_user.has_liked(db, actor_id=alice_id, target_id=bob_id)


async def test_domain_error_rolls_back_everything(db, make_user):
    alice = await make_user()
    bob = await make_user()
    alice_id, bob_id = alice.id, bob.id

    async def work():
        await crud.crud_user.record_swipe(db, actor_id=alice_id, target_id=bob_id, action=SwipeAction.LIKE)
        raise NotFoundError("gone")

    with pytest.raises(NotFoundError):
        await run_in_transaction(db, work, operation="test like")
    assert await swiped_user_ids(db, actor_id=alice_id) == set()


async def test_integrity_conflict_is_retried():
    calls = []

    class FakeSession:
        rollbacks = 0
        commits = 0

        async def rollback(self):
            self.rollbacks += 1

        async def commit(self):
            self.commits += 1

    session = FakeSession()

    async def work():
        calls.append(len(calls))
        if len(calls) == 1:
            raise IntegrityError("INSERT INTO matches ...", {}, Exception("duplicate pair"))
        return "second try"

    result = await run_in_transaction(session, work, operation="test match", attempts=2)
    assert result == "second try"
    assert calls == [0, 1]
    assert session.rollbacks == 1
    assert session.commits == 1


async def test_persistent_conflict_becomes_persistence_error():
    class FakeSession:
        async def rollback(self):
            pass

        async def commit(self):
            raise AssertionError("must not commit")

    async def work():
        raise IntegrityError("INSERT INTO matches ...", {}, Exception("duplicate pair"))

    with pytest.raises(PersistenceError):
        await run_in_transaction(FakeSession(), work, operation="test match", attempts=2)


async def test_other_database_errors_are_not_retried():
    calls = []

    class FakeSession:
        async def rollback(self):
            pass

        async def commit(self):
            pass

    async def work():
        calls.append(1)
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    with pytest.raises(PersistenceError) as exc_info:
        await run_in_transaction(FakeSession(), work, operation="test send", attempts=3)
    assert exc_info.value.kind == "persistence"
    assert len(calls) == 1


async def test_match_pair_is_unique_in_either_order(db, make_user):
    alice = await make_user()
    bob = await make_user()
    alice_id, bob_id = alice.id, bob.id
    db.add(Match.for_pair(alice_id, bob_id))
    await db.commit()

    db.add(Match.for_pair(bob_id, alice_id))
    with pytest.raises(IntegrityError):
        await db.flush()
    await db.rollback()

    assert await db.scalar(select(func.count(Match.id))) == 1


async def test_match_pair_must_be_stored_ordered(db, make_user):
    alice = await make_user()
    bob = await make_user()
    low, high = sorted((alice.id, bob.id))

    db.add(Match(user_low_id=high, user_high_id=low))
    with pytest.raises(IntegrityError):
        await db.flush()
    await db.rollback()


async def test_like_adopts_match_committed_by_concurrent_request(db, session_factory, make_user, monkeypatch):
    alice = await make_user()
    bob = await make_user()
    alice_id, bob_id = alice.id, bob.id
    await match_service.like(db, actor_id=bob_id, target_id=alice_id)

    lock_users = crud.crud_user.lock_users
    get_match_for_pair = crud.crud_match.get_match_for_pair
    committed = {}
    lookups = []

    async def lock_users_racing(session, **kwargs):
        if not committed:
            # Another request matches the pair after this unit has started
            async with session_factory() as other:
                match = Match.for_pair(alice_id, bob_id, is_active=True)
                other.add(match)
                await other.commit()
                committed["id"] = match.id
        return await lock_users(session, **kwargs)

    async def stale_first_lookup(session, **kwargs):
        lookups.append(1)
        if len(lookups) == 1:
            return None
        return await get_match_for_pair(session, **kwargs)

    monkeypatch.setattr(crud.crud_user, "lock_users", lock_users_racing)
    monkeypatch.setattr(crud.crud_match, "get_match_for_pair", stale_first_lookup)

    result = await match_service.like(db, actor_id=alice_id, target_id=bob_id)

    assert result.is_match is True
    assert result.match.id == committed["id"]
    assert len(lookups) == 2
    assert await db.scalar(select(func.count(Match.id))) == 1
    assert await crud.crud_user.has_liked(db, actor_id=alice_id, target_id=bob_id)
