import uuid
from datetime import datetime, timedelta

import pytest
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import OperationalError
from sqlalchemy.schema import CreateTable

from gamerlink.exceptions.base import NotFoundError, StoreUnavailableError, ValidationError
from gamerlink.models.message import Message


BASE_TIME = datetime(2024, 5, 1, 12, 0, 0)


async def stamp(db_session, message, minutes: int):
    """Pin `created_at` so ordering tests do not depend on the clock."""
    message.created_at = BASE_TIME + timedelta(minutes=minutes)
    await db_session.flush()
    return message


@pytest.mark.asyncio
class TestAppend:

    async def test_append_assigns_id_timestamp_and_unread(self, message_repository, alice, bob):
        message = await message_repository.append(alice.id, bob.id, "gg wp")

        assert isinstance(message.id, int)
        assert message.created_at is not None
        assert message.read is False
        assert (message.from_user_id, message.to_user_id) == (alice.id, bob.id)

    async def test_content_is_stored_verbatim(self, message_repository, alice, bob):
        content = "  spaces, <b>tags</b> and émojis 🎮  "

        message = await message_repository.append(alice.id, bob.id, content)

        assert message.content == content

    async def test_ids_grow_with_insertion_order(self, message_repository, alice, bob):
        first = await message_repository.append(alice.id, bob.id, "1")
        second = await message_repository.append(bob.id, alice.id, "2")

        assert second.id > first.id

    async def test_self_message_rejected(self, message_repository, alice):
        with pytest.raises(ValidationError):
            await message_repository.append(alice.id, alice.id, "hi me")

    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    async def test_blank_content_rejected(self, message_repository, alice, bob, content):
        with pytest.raises(ValidationError) as exc_info:
            await message_repository.append(alice.id, bob.id, content)

        assert exc_info.value.fields == ["content"]

    async def test_unknown_recipient_maps_to_not_found(self, message_repository, alice):
        """The foreign key violation surfaces as NotFoundError, not a raw IntegrityError."""
        with pytest.raises(NotFoundError):
            await message_repository.append(alice.id, uuid.uuid4(), "anyone there?")


@pytest.mark.asyncio
class TestFindBetween:

    async def test_ordered_by_created_at(self, db_session, message_repository, alice, bob):
        late = await stamp(db_session, await message_repository.append(alice.id, bob.id, "late"), 10)
        early = await stamp(db_session, await message_repository.append(bob.id, alice.id, "early"), 1)

        thread = await message_repository.find_between(alice.id, bob.id)

        assert [m.id for m in thread] == [early.id, late.id]

    async def test_equal_timestamps_fall_back_to_id(self, db_session, message_repository, alice, bob):
        a = await stamp(db_session, await message_repository.append(alice.id, bob.id, "a"), 5)
        b = await stamp(db_session, await message_repository.append(bob.id, alice.id, "b"), 5)
        c = await stamp(db_session, await message_repository.append(alice.id, bob.id, "c"), 5)

        thread = await message_repository.find_between(bob.id, alice.id)

        assert [m.id for m in thread] == [a.id, b.id, c.id]

    async def test_symmetric(self, message_repository, alice, bob):
        await message_repository.append(alice.id, bob.id, "one")
        await message_repository.append(bob.id, alice.id, "two")

        ab = await message_repository.find_between(alice.id, bob.id)
        ba = await message_repository.find_between(bob.id, alice.id)

        assert [m.id for m in ab] == [m.id for m in ba]

    async def test_excludes_other_pairs(self, message_repository, alice, bob, carol):
        await message_repository.append(alice.id, bob.id, "for bob")
        await message_repository.append(alice.id, carol.id, "for carol")

        thread = await message_repository.find_between(alice.id, bob.id)

        assert [m.content for m in thread] == ["for bob"]

    async def test_no_messages_is_empty(self, message_repository, alice, bob):
        assert await message_repository.find_between(alice.id, bob.id) == []

    async def test_with_sender_loads_relationship(self, message_repository, alice, bob):
        await message_repository.append(bob.id, alice.id, "hi")

        thread = await message_repository.find_between(alice.id, bob.id, with_sender=True)

        assert thread[0].sender.username == "bob"


@pytest.mark.asyncio
class TestReadState:

    async def test_mark_read_from_only_touches_peer_to_viewer(self, message_repository, alice, bob, carol):
        await message_repository.append(bob.id, alice.id, "1")
        await message_repository.append(bob.id, alice.id, "2")
        await message_repository.append(alice.id, bob.id, "mine")
        await message_repository.append(carol.id, alice.id, "other peer")

        changed = await message_repository.mark_read_from(bob.id, alice.id)

        assert changed == 2
        assert await message_repository.count_unread(alice.id) == 1  # carol's message
        assert await message_repository.count_unread(bob.id) == 1  # alice's message to bob untouched

    async def test_mark_read_from_is_idempotent(self, message_repository, alice, bob):
        await message_repository.append(bob.id, alice.id, "1")

        assert await message_repository.mark_read_from(bob.id, alice.id) == 1
        assert await message_repository.mark_read_from(bob.id, alice.id) == 0

    async def test_mark_read_single_message(self, message_repository, alice, bob):
        message = await message_repository.append(bob.id, alice.id, "1")

        await message_repository.mark_read(message)
        await message_repository.mark_read(message)

        assert message.read is True
        assert await message_repository.count_unread(alice.id) == 0


@pytest.mark.asyncio
class TestDelete:

    async def test_delete_removes_from_thread(self, message_repository, alice, bob):
        keep = await message_repository.append(alice.id, bob.id, "keep")
        drop = await message_repository.append(alice.id, bob.id, "drop")

        await message_repository.delete_by_id(drop.id)

        thread = await message_repository.find_between(alice.id, bob.id)
        assert [m.id for m in thread] == [keep.id]

    async def test_delete_missing_raises_not_found(self, message_repository):
        with pytest.raises(NotFoundError) as exc_info:
            await message_repository.delete_by_id(999_999)

        assert exc_info.value.fields == ["message_id"]

    async def test_delete_twice_fails_the_second_time(self, message_repository, alice, bob):
        message = await message_repository.append(alice.id, bob.id, "once")
        await message_repository.delete_by_id(message.id)

        with pytest.raises(NotFoundError):
            await message_repository.delete_by_id(message.id)


@pytest.mark.asyncio
class TestStoreUnavailable:

    async def test_connection_failure_maps_to_store_unavailable(
        self, message_repository, db_session, alice, bob, monkeypatch
    ):
        """
        Behavior:
            - A connection-level OperationalError surfaces as StoreUnavailableError (503).
            - The query is attempted exactly once; nothing is retried.
        """
        alice_id, bob_id = alice.id, bob.id
        attempts = []

        async def refuse(*args, **kwargs):
            attempts.append(args)
            raise OperationalError("SELECT messages", {}, ConnectionRefusedError("connection refused"))

        monkeypatch.setattr(db_session, "execute", refuse)

        with pytest.raises(StoreUnavailableError) as exc_info:
            await message_repository.find_between(alice_id, bob_id)

        assert exc_info.value.http_status() == 503
        assert exc_info.value.error_code == "store_unavailable"
        assert len(attempts) == 1


class TestCreatedAtDefault:

    def _ddl(self, dialect) -> str:
        return str(CreateTable(Message.__table__).compile(dialect=dialect))

    def test_postgres_uses_statement_clock(self):
        ddl = self._ddl(postgresql.dialect())

        assert "DEFAULT clock_timestamp()" in ddl
        assert "now()" not in ddl

    def test_sqlite_uses_current_timestamp(self):
        assert "DEFAULT CURRENT_TIMESTAMP" in self._ddl(sqlite.dialect())
