"""Storage contract tests, run against every UserRepository backend."""

import pytest

from usercore.core.errors import UserAlreadyExistsError, UserNotFoundError
from usercore.entities.core.user import (
    CreateUserRequest,
    UpdateUserRequest,
    User,
    UserRepository,
)


async def _create(repository: UserRepository, email: str, name: str = "Someone") -> User:
    return await repository.create(CreateUserRequest(email=email, name=name))


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, repository: UserRepository):
        user = await _create(repository, "a@x.com", "Alice")

        assert user.id
        assert user.email == "a@x.com"
        assert user.name == "Alice"
        assert user.created_at == user.updated_at

    @pytest.mark.asyncio
    async def test_create_then_fetch_round_trips(self, repository: UserRepository):
        user = await _create(repository, "a@x.com", "Alice")

        fetched = await repository.find_by_id(user.id)

        assert fetched == user

    @pytest.mark.asyncio
    async def test_create_duplicate_email(self, repository: UserRepository):
        await _create(repository, "a@x.com", "Alice")

        with pytest.raises(UserAlreadyExistsError) as exc_info:
            await _create(repository, "a@x.com", "Impostor")

        assert exc_info.value.email == "a@x.com"
        users = await repository.find_all()
        assert [(u.email, u.name) for u in users] == [("a@x.com", "Alice")]

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, repository: UserRepository):
        users = [await _create(repository, f"u{i}@x.com") for i in range(5)]

        assert len({u.id for u in users}) == 5


class TestLookups:
    @pytest.mark.asyncio
    async def test_find_by_id_missing(self, repository: UserRepository):
        assert await repository.find_by_id("missing-id") is None

    @pytest.mark.asyncio
    async def test_find_by_email(self, repository: UserRepository):
        user = await _create(repository, "a@x.com")

        assert await repository.find_by_email("a@x.com") == user
        assert await repository.find_by_email("b@x.com") is None

    @pytest.mark.asyncio
    async def test_exists_by_email(self, repository: UserRepository):
        await _create(repository, "a@x.com")

        assert await repository.exists_by_email("a@x.com") is True
        assert await repository.exists_by_email("b@x.com") is False

    @pytest.mark.asyncio
    async def test_find_all_is_stable(self, repository: UserRepository):
        for i in range(3):
            await _create(repository, f"u{i}@x.com")

        first = await repository.find_all()
        second = await repository.find_all()

        assert len(first) == 3
        assert [u.id for u in first] == [u.id for u in second]

    @pytest.mark.asyncio
    async def test_returned_values_are_copies(self, repository: UserRepository):
        user = await _create(repository, "a@x.com", "Alice")

        user.name = "Mallory"
        fetched = await repository.find_by_id(user.id)
        fetched.email = "mallory@x.com"

        stored = await repository.find_by_id(user.id)
        assert stored.name == "Alice"
        assert stored.email == "a@x.com"


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_name_only(self, repository: UserRepository):
        user = await _create(repository, "a@x.com", "Alice")

        updated = await repository.update(user.id, UpdateUserRequest(name="Alicia"))

        assert updated.email == "a@x.com"
        assert updated.name == "Alicia"
        assert updated.created_at == user.created_at
        assert updated.updated_at > user.updated_at
        assert await repository.find_by_id(user.id) == updated

    @pytest.mark.asyncio
    async def test_update_email_moves_uniqueness(self, repository: UserRepository):
        user = await _create(repository, "a@x.com")

        await repository.update(user.id, UpdateUserRequest(email="b@x.com"))

        assert await repository.exists_by_email("a@x.com") is False
        assert (await repository.find_by_email("b@x.com")).id == user.id
        # The released address can be claimed again
        await _create(repository, "a@x.com")

    @pytest.mark.asyncio
    async def test_update_to_own_email(self, repository: UserRepository):
        user = await _create(repository, "a@x.com")

        updated = await repository.update(user.id, UpdateUserRequest(email="a@x.com"))

        assert updated.email == "a@x.com"
        assert updated.updated_at > user.updated_at

    @pytest.mark.asyncio
    async def test_update_to_taken_email(self, repository: UserRepository):
        alice = await _create(repository, "a@x.com", "Alice")
        await _create(repository, "b@x.com", "Bob")

        with pytest.raises(UserAlreadyExistsError) as exc_info:
            await repository.update(
                alice.id, UpdateUserRequest(email="b@x.com", name="Changed")
            )

        assert exc_info.value.email == "b@x.com"
        assert await repository.find_by_id(alice.id) == alice

    @pytest.mark.asyncio
    async def test_update_missing_user(self, repository: UserRepository):
        with pytest.raises(UserNotFoundError) as exc_info:
            await repository.update("missing-id", UpdateUserRequest(name="X"))

        assert exc_info.value.user_id == "missing-id"

    @pytest.mark.asyncio
    async def test_updated_at_strictly_increases(self, repository: UserRepository):
        user = await _create(repository, "a@x.com")
        stamps = [user.updated_at]

        for i in range(5):
            updated = await repository.update(user.id, UpdateUserRequest(name=f"N{i}"))
            stamps.append(updated.updated_at)

        assert all(a < b for a, b in zip(stamps, stamps[1:]))


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete(self, repository: UserRepository):
        user = await _create(repository, "a@x.com")

        await repository.delete(user.id)

        assert await repository.find_by_id(user.id) is None
        assert await repository.exists_by_email("a@x.com") is False
        assert await repository.find_all() == []

    @pytest.mark.asyncio
    async def test_delete_twice(self, repository: UserRepository):
        user = await _create(repository, "a@x.com")
        await repository.delete(user.id)

        with pytest.raises(UserNotFoundError) as exc_info:
            await repository.delete(user.id)

        assert exc_info.value.user_id == user.id
