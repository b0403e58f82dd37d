"""Concurrency tests for the in-memory user store."""

import asyncio

import pytest

from usercore.core.errors import UserAlreadyExistsError
from usercore.entities.core.user import (
    CreateUserRequest,
    InMemoryUserRepository,
    UpdateUserRequest,
    User,
)


class TestInMemoryUserRepository:
    """Test InMemoryUserRepository under concurrent callers."""

    @pytest.mark.asyncio
    async def test_racing_creates_same_email(self, memory_repository: InMemoryUserRepository):
        """Exactly one racing create succeeds; the rest see a conflict."""
        request = CreateUserRequest(email="race@x.com", name="Racer")

        results = await asyncio.gather(
            *(memory_repository.create(request) for _ in range(20)),
            return_exceptions=True,
        )

        assert sum(isinstance(r, User) for r in results) == 1
        assert sum(isinstance(r, UserAlreadyExistsError) for r in results) == 19
        assert await memory_repository.count() == 1

    @pytest.mark.asyncio
    async def test_creates_wait_for_the_write_lock(self, memory_repository: InMemoryUserRepository):
        """Queued creates make no progress while another writer holds the lock."""
        request = CreateUserRequest(email="race@x.com", name="Racer")

        await memory_repository._lock.acquire_write()
        try:
            pending = [asyncio.create_task(memory_repository.create(request)) for _ in range(5)]
            lookup = asyncio.create_task(memory_repository.find_by_email("race@x.com"))
            for _ in range(5):
                await asyncio.sleep(0)

            assert not any(task.done() for task in pending)
            assert not lookup.done()
            assert memory_repository._users == {}
        finally:
            memory_repository._lock.release_write()

        results = await asyncio.gather(*pending, return_exceptions=True)

        assert sum(isinstance(r, User) for r in results) == 1
        assert sum(isinstance(r, UserAlreadyExistsError) for r in results) == 4
        found = await lookup
        assert found is not None and found.email == "race@x.com"

    @pytest.mark.asyncio
    async def test_racing_updates_to_same_email(self, memory_repository: InMemoryUserRepository):
        users = [
            await memory_repository.create(CreateUserRequest(email=f"u{i}@x.com", name="U"))
            for i in range(5)
        ]

        results = await asyncio.gather(
            *(
                memory_repository.update(u.id, UpdateUserRequest(email="shared@x.com"))
                for u in users
            ),
            return_exceptions=True,
        )

        assert sum(isinstance(r, User) for r in results) == 1
        emails = [u.email for u in await memory_repository.find_all()]
        assert emails.count("shared@x.com") == 1
        assert len(set(emails)) == len(emails)

    @pytest.mark.asyncio
    async def test_mixed_workload_keeps_emails_unique(self, memory_repository: InMemoryUserRepository):
        async def worker(n: int):
            for i in range(10):
                email = f"user{(n + i) % 7}@x.com"
                try:
                    user = await memory_repository.create(CreateUserRequest(email=email, name="W"))
                except UserAlreadyExistsError:
                    await memory_repository.find_all()
                    continue
                if i % 3 == 0:
                    await memory_repository.delete(user.id)
                await asyncio.sleep(0)

        await asyncio.gather(*(worker(n) for n in range(8)))

        users = await memory_repository.find_all()
        emails = [u.email for u in users]
        assert len(set(emails)) == len(emails)
        for email in emails:
            assert await memory_repository.exists_by_email(email)

    @pytest.mark.asyncio
    async def test_find_all_preserves_insertion_order(self, memory_repository: InMemoryUserRepository):
        created = [
            await memory_repository.create(CreateUserRequest(email=f"u{i}@x.com", name="U"))
            for i in range(5)
        ]

        users = await memory_repository.find_all()

        assert [u.id for u in users] == [u.id for u in created]

    @pytest.mark.asyncio
    async def test_snapshot_is_detached(self, memory_repository: InMemoryUserRepository):
        await memory_repository.create(CreateUserRequest(email="a@x.com", name="Alice"))
        snapshot = await memory_repository.find_all()

        await memory_repository.create(CreateUserRequest(email="b@x.com", name="Bob"))
        snapshot[0].name = "Changed"

        assert len(snapshot) == 1
        assert (await memory_repository.find_by_email("a@x.com")).name == "Alice"

    @pytest.mark.asyncio
    async def test_lock_released_after_rejection(self, memory_repository: InMemoryUserRepository):
        await memory_repository.create(CreateUserRequest(email="a@x.com", name="Alice"))

        with pytest.raises(UserAlreadyExistsError):
            await memory_repository.create(CreateUserRequest(email="a@x.com", name="Again"))

        lock = memory_repository._lock
        assert not lock.writer_active
        assert lock.readers == 0
        assert await asyncio.wait_for(memory_repository.count(), timeout=1) == 1
