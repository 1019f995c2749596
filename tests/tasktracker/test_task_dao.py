"""Tests for TaskDAO — CRUD, ordering, name lookup, reseed, unique index."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from tasktracker.core.database import UTCDateTime, name_key
from tasktracker.dao.task_dao import NAME_INDEX, TaskDAO, is_duplicate_name_error

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def dao():
    return TaskDAO()


def _task(name: str, **overrides) -> dict:
    """Helper to build task kwargs with sensible defaults."""
    defaults = {
        "id": str(uuid.uuid4()),
        "name": name,
        "is_done": False,
        "created_date": NOW,
        "updated_time": NOW,
    }
    defaults.update(overrides)
    return defaults


# ── create / get ──────────────────────────────────────────────────────────


class TestCreate:
    async def test_create_and_get(self, dao, session):
        created = await dao.create(session, **_task("Buy milk"))
        fetched = await dao.get_by_id(session, created.id)
        assert fetched is not None
        assert fetched.name == "Buy milk"
        assert fetched.is_done is False

    async def test_timestamps_come_back_as_aware_utc(self, dao, session):
        task = await dao.create(session, **_task("Buy milk"))
        assert task.created_date == NOW
        assert task.created_date.tzinfo is not None
        assert task.updated_time == task.created_date

    async def test_get_missing_returns_none(self, dao, session):
        assert await dao.get_by_id(session, str(uuid.uuid4())) is None

    async def test_duplicate_id_raises(self, dao, session):
        values = _task("first")
        await dao.create(session, **values)
        # Drop the identity map so the clash reaches the database
        session.expunge_all()
        with pytest.raises(IntegrityError):
            await dao.create(session, **_task("second", id=values["id"]))

    async def test_normalized_name_collision_raises(self, dao, session):
        """The unique index compares trimmed, case-folded names."""
        await dao.create(session, **_task("Buy milk"))
        with pytest.raises(IntegrityError) as excinfo:
            await dao.create(session, **_task("BUY MILK"))
        assert is_duplicate_name_error(excinfo.value)

    async def test_non_ascii_case_collision_raises(self, dao, session):
        await dao.create(session, **_task("Ärger"))
        with pytest.raises(IntegrityError) as excinfo:
            await dao.create(session, **_task(" ärger"))
        assert is_duplicate_name_error(excinfo.value)


class TestUTCDateTime:
    def test_naive_rejected(self):
        with pytest.raises(ValueError, match="naive datetime"):
            UTCDateTime().process_bind_param(datetime(2026, 1, 1), None)

    def test_offset_converted_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        stored = UTCDateTime().process_bind_param(datetime(2026, 1, 1, 14, tzinfo=plus_two), None)
        assert stored == datetime(2026, 1, 1, 12)

    def test_result_gets_utc(self):
        loaded = UTCDateTime().process_result_value(datetime(2026, 1, 1, 12), None)
        assert loaded.tzinfo is timezone.utc


@pytest.mark.parametrize(
    ("raw", "key"),
    [("  Buy Milk ", "buy milk"), ("ÄRGER", "ärger"), ("Straße", "strasse"), (None, None)],
)
def test_name_key(raw, key):
    assert name_key(raw) == key


# ── list ──────────────────────────────────────────────────────────────────


class TestListAll:
    async def test_newest_first(self, dao, session):
        await dao.create(session, **_task("old", created_date=NOW - timedelta(hours=1)))
        await dao.create(session, **_task("new", created_date=NOW, updated_time=NOW))
        await dao.create(session, **_task("middle", created_date=NOW - timedelta(minutes=5)))

        names = [t.name for t in await dao.list_all(session)]
        assert names == ["new", "middle", "old"]

    async def test_ties_keep_insertion_order(self, dao, session):
        await dao.bulk_create(session, [_task("a"), _task("b"), _task("c")])
        names = [t.name for t in await dao.list_all(session)]
        assert names == ["a", "b", "c"]

    async def test_empty(self, dao, session):
        assert await dao.list_all(session) == []


# ── update / delete ───────────────────────────────────────────────────────


class TestUpdate:
    async def test_partial_update(self, dao, session):
        task = await dao.create(session, **_task("Buy milk"))
        later = NOW + timedelta(minutes=1)
        updated = await dao.update(session, task.id, name="Buy bread", updated_time=later)
        assert updated.name == "Buy bread"
        assert updated.updated_time == later
        assert updated.created_date == NOW
        assert updated.is_done is False

    async def test_update_missing_returns_none(self, dao, session):
        assert await dao.update(session, str(uuid.uuid4()), is_done=True) is None

    @pytest.mark.parametrize("column", ["id", "created_date"])
    async def test_immutable_columns_rejected(self, dao, session, column):
        task = await dao.create(session, **_task("Buy milk"))
        with pytest.raises(AttributeError, match="immutable"):
            await dao.update(session, task.id, **{column: "x"})

    async def test_unknown_column_rejected(self, dao, session):
        task = await dao.create(session, **_task("Buy milk"))
        with pytest.raises(AttributeError, match="no column"):
            await dao.update(session, task.id, priority=1)


class TestDelete:
    async def test_delete_existing(self, dao, session):
        task = await dao.create(session, **_task("Buy milk"))
        assert await dao.delete(session, task.id) is True
        assert await dao.get_by_id(session, task.id) is None

    async def test_delete_missing(self, dao, session):
        assert await dao.delete(session, str(uuid.uuid4())) is False


# ── exists_by_name ────────────────────────────────────────────────────────


class TestExistsByName:
    async def test_case_and_whitespace_insensitive(self, dao, session):
        await dao.create(session, **_task("Buy milk"))
        assert await dao.exists_by_name(session, "  bUY MILK ") is True

    async def test_non_ascii_case_insensitive(self, dao, session):
        await dao.create(session, **_task("Ärger"))
        assert await dao.exists_by_name(session, "ÄRGER") is True
        assert await dao.exists_by_name(session, "ärger") is True

    async def test_no_match(self, dao, session):
        await dao.create(session, **_task("Buy milk"))
        assert await dao.exists_by_name(session, "Buy bread") is False

    async def test_exclude_id(self, dao, session):
        task = await dao.create(session, **_task("Buy milk"))
        assert await dao.exists_by_name(session, "buy milk", exclude_id=task.id) is False

    async def test_exclude_id_still_sees_other_rows(self, dao, session):
        await dao.create(session, **_task("Buy milk"))
        other = await dao.create(session, **_task("Buy bread"))
        assert await dao.exists_by_name(session, "BUY MILK", exclude_id=other.id) is True


# ── count / clear_and_reseed ──────────────────────────────────────────────


class TestReseed:
    SEED = [
        {"name": "one", "is_done": False},
        {"name": "two", "is_done": False},
        {"name": "three", "is_done": True},
    ]

    async def test_count(self, dao, session):
        assert await dao.count(session) == 0
        await dao.create(session, **_task("Buy milk"))
        assert await dao.count(session) == 1

    async def test_replaces_existing_rows(self, dao, session):
        old = await dao.create(session, **_task("Buy milk"))
        rows = await dao.clear_and_reseed(session, self.SEED)

        assert len(rows) == 3
        assert await dao.count(session) == 3
        assert await dao.get_by_id(session, old.id) is None

    async def test_shared_timestamp_and_fresh_ids(self, dao, session):
        rows = await dao.clear_and_reseed(session, self.SEED, now=NOW)
        assert {r.created_date for r in rows} == {NOW}
        assert {r.updated_time for r in rows} == {NOW}
        assert len({r.id for r in rows}) == 3

    async def test_seed_order_and_done_flags(self, dao, session):
        await dao.clear_and_reseed(session, self.SEED)
        tasks = await dao.list_all(session)
        assert [t.name for t in tasks] == ["one", "two", "three"]
        assert [t.is_done for t in tasks] == [False, False, True]

    async def test_reseed_twice_gives_new_ids(self, dao, session):
        first = {r.id for r in await dao.clear_and_reseed(session, self.SEED)}
        second = {r.id for r in await dao.clear_and_reseed(session, self.SEED)}
        assert first.isdisjoint(second)

    async def test_failed_reseed_keeps_existing_rows(self, dao, session_factory):
        async with session_factory() as sess, sess.begin():
            kept = await dao.create(sess, **_task("Buy milk"))

        colliding = [{"name": "a"}, {"name": " A"}]
        with pytest.raises(IntegrityError) as excinfo:
            async with session_factory() as sess, sess.begin():
                await dao.clear_and_reseed(sess, colliding)
        assert is_duplicate_name_error(excinfo.value)

        async with session_factory() as sess:
            tasks = await dao.list_all(sess)
        assert [(t.id, t.name) for t in tasks] == [(kept.id, "Buy milk")]


def test_is_duplicate_name_error_ignores_other_constraints():
    exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: tasks.id"))
    assert is_duplicate_name_error(exc) is False
    exc = IntegrityError("INSERT", {}, Exception(f"UNIQUE constraint failed: index '{NAME_INDEX}'"))
    assert is_duplicate_name_error(exc) is True
