"""Unit tests for MessageService."""

import asyncio
from datetime import timedelta

import pytest
from bson import ObjectId

from errors import ForbiddenError, NotFoundError, ValidationError
from schemas.dto.identity import OwnerIdentity
from schemas.models.account import MessageDoc
from services.account_service import AccountService
from services.message_service import MessageService
from shared.datetime_utils import utcnow


@pytest.fixture
def service(account_repository):
    return MessageService(account_repository)


def owner_of(account) -> OwnerIdentity:
    return OwnerIdentity(account_id=str(account.id), username=account.username)


class TestSend:
    async def test_appends_one_message(self, service, seed_account, raw_accounts):
        seed_account()
        before = utcnow()
        message = await service.send("alice", "hi there!!")

        stored = raw_accounts.find_one({"username": "alice"})["messages"]
        assert len(stored) == 1
        assert stored[0]["_id"] == message.id
        assert stored[0]["content"] == "hi there!!"
        assert isinstance(message.id, ObjectId)
        assert before <= message.created_at <= utcnow()

    async def test_appends_in_order(self, service, seed_account, raw_accounts):
        seed_account()
        await service.send("alice", "first")
        await service.send("alice", "second")
        stored = raw_accounts.find_one({"username": "alice"})["messages"]
        assert [m["content"] for m in stored] == ["first", "second"]

    @pytest.mark.parametrize("content", ["", "x" * 301])
    async def test_content_length_checked_before_lookup(self, service, mocker, content):
        spy = mocker.spy(service._accounts, "find_by_username")
        with pytest.raises(ValidationError) as exc_info:
            await service.send("nobody", content)
        assert exc_info.value.field == "content"
        spy.assert_not_called()

    async def test_accepts_boundary_lengths(self, service, seed_account):
        seed_account()
        await service.send("alice", "x")
        await service.send("alice", "x" * 300)

    async def test_not_accepting_is_forbidden(self, service, seed_account, raw_accounts):
        seed_account(is_accepting_message=False)
        with pytest.raises(ForbiddenError):
            await service.send("alice", "hello")
        assert raw_accounts.find_one({"username": "alice"})["messages"] == []

    async def test_unverified_target_looks_missing(self, service, seed_account, raw_accounts):
        seed_account(is_verified=False)
        with pytest.raises(NotFoundError) as exc_info:
            await service.send("alice", "hello")
        assert exc_info.value.message == "User not found"
        assert raw_accounts.find_one({"username": "alice"})["messages"] == []

    async def test_unknown_target(self, service):
        with pytest.raises(NotFoundError):
            await service.send("nobody", "hello")

    async def test_no_append_after_toggle_off(self, service, account_repository, seed_account, raw_accounts):
        seeded = seed_account()
        accounts = AccountService(account_repository)

        sends = [service.send("alice", f"message {i}") for i in range(10)]
        results = await asyncio.gather(
            *sends[:5],
            accounts.set_accepting_messages(owner_of(seeded), False),
            *sends[5:],
            return_exceptions=True,
        )

        delivered = [r for r in results if isinstance(r, MessageDoc)]
        rejected = [r for r in results if isinstance(r, ForbiddenError)]
        assert len(delivered) + len(rejected) == 10
        stored = raw_accounts.find_one({"_id": seeded.id})["messages"]
        assert [m["_id"] for m in stored] == [m.id for m in delivered]

        with pytest.raises(ForbiddenError):
            await service.send("alice", "too late")
        assert len(raw_accounts.find_one({"_id": seeded.id})["messages"]) == len(delivered)


class TestOwnerMessages:
    async def test_list_messages(self, service, seed_account):
        now = utcnow()
        seeded = seed_account(
            messages=[
                MessageDoc(content="old", created_at=now - timedelta(minutes=1)),
                MessageDoc(content="new", created_at=now),
            ]
        )
        messages = await service.list_messages(owner_of(seeded))
        assert [m.content for m in messages] == ["old", "new"]

    async def test_list_messages_unknown_owner(self, service):
        owner = OwnerIdentity(account_id=str(ObjectId()), username="ghost")
        with pytest.raises(NotFoundError):
            await service.list_messages(owner)

    async def test_delete_message(self, service, seed_account, raw_accounts):
        doomed = MessageDoc(content="bye", created_at=utcnow())
        seeded = seed_account(messages=[doomed])

        await service.delete_message(owner_of(seeded), str(doomed.id))
        assert raw_accounts.find_one({"_id": seeded.id})["messages"] == []

        with pytest.raises(NotFoundError):
            await service.delete_message(owner_of(seeded), str(doomed.id))

    async def test_delete_invalid_id(self, service, seed_account):
        seeded = seed_account()
        with pytest.raises(ValidationError) as exc_info:
            await service.delete_message(owner_of(seeded), "not-an-id")
        assert exc_info.value.field == "id"

    async def test_cannot_delete_another_owners_message(self, service, seed_account, raw_accounts):
        theirs = MessageDoc(content="private", created_at=utcnow())
        seed_account(messages=[theirs])
        intruder = seed_account(username="mallory", email="mallory@example.com")

        with pytest.raises(NotFoundError):
            await service.delete_message(owner_of(intruder), str(theirs.id))
        assert len(raw_accounts.find_one({"username": "alice"})["messages"]) == 1
