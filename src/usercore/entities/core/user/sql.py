"""Relational user storage built on SQLModel."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import anyio
from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from usercore.core.errors import (
    StorageError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from usercore.entities.core.user.entity import (
    CreateUserRequest,
    UpdateUserRequest,
    User,
)
from usercore.entities.core.user.repository import UserRepository
from usercore.entities.core.user.table import UserTable

if TYPE_CHECKING:
    from usercore.core.services.database.db_session import DbSessionService


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without a zone
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class SqlUserRepository(UserRepository):
    """Durable storage backend.

    Uniqueness rests on the unique index of ``users.email``: the explicit
    lookup gives the common case a clean error, and an ``IntegrityError`` at
    commit time (two writers racing past the lookup) is translated to the same
    :class:`UserAlreadyExistsError`.

    Sessions are synchronous, so every operation runs in a worker thread and
    the event loop keeps serving other tasks while the database waits on a lock.
    """

    def __init__(self, db: DbSessionService) -> None:
        self._db = db

    async def create(self, request: CreateUserRequest) -> User:
        return await anyio.to_thread.run_sync(self._create, request)

    async def find_by_id(self, user_id: str) -> User | None:
        return await anyio.to_thread.run_sync(self._find_by_id, user_id)

    async def find_by_email(self, email: str) -> User | None:
        return await anyio.to_thread.run_sync(self._find_by_email, email)

    async def find_all(self) -> list[User]:
        return await anyio.to_thread.run_sync(self._find_all)

    async def update(self, user_id: str, request: UpdateUserRequest) -> User:
        return await anyio.to_thread.run_sync(self._update, user_id, request)

    async def delete(self, user_id: str) -> None:
        await anyio.to_thread.run_sync(self._delete, user_id)

    async def exists_by_email(self, email: str) -> bool:
        return await anyio.to_thread.run_sync(self._exists_by_email, email)

    def _create(self, request: CreateUserRequest) -> User:
        user = User(email=request.email, name=request.name)
        try:
            with self._db.session_scope() as session:
                if self._email_owner(session, request.email) is not None:
                    raise UserAlreadyExistsError(request.email)
                session.add(self._to_row(user))
        except IntegrityError as e:
            logger.debug("Unique constraint rejected email {}: {}", request.email, e)
            raise UserAlreadyExistsError(request.email) from e
        except SQLAlchemyError as e:
            raise self._storage_error("create", e) from e
        return user

    def _find_by_id(self, user_id: str) -> User | None:
        try:
            with self._db.get_session() as session:
                row = session.get(UserTable, user_id)
                return self._to_entity(row) if row is not None else None
        except SQLAlchemyError as e:
            raise self._storage_error("find_by_id", e) from e

    def _find_by_email(self, email: str) -> User | None:
        try:
            with self._db.get_session() as session:
                row = session.exec(
                    select(UserTable).where(UserTable.email == email)
                ).first()
                return self._to_entity(row) if row is not None else None
        except SQLAlchemyError as e:
            raise self._storage_error("find_by_email", e) from e

    def _find_all(self) -> list[User]:
        try:
            with self._db.get_session() as session:
                rows = session.exec(
                    select(UserTable).order_by(UserTable.created_at, UserTable.id)
                ).all()
                return [self._to_entity(row) for row in rows]
        except SQLAlchemyError as e:
            raise self._storage_error("find_all", e) from e

    def _update(self, user_id: str, request: UpdateUserRequest) -> User:
        try:
            with self._db.session_scope() as session:
                if request.email is not None:
                    owner = self._email_owner(session, request.email)
                    if owner is not None and owner != user_id:
                        raise UserAlreadyExistsError(request.email)

                row = session.get(UserTable, user_id)
                if row is None:
                    raise UserNotFoundError(user_id)

                user = self._to_entity(row)
                user.apply(request)
                row.email = user.email
                row.name = user.name
                row.updated_at = user.updated_at
                session.add(row)
        except IntegrityError as e:
            raise UserAlreadyExistsError(request.email or "") from e
        except SQLAlchemyError as e:
            raise self._storage_error("update", e) from e
        return user

    def _delete(self, user_id: str) -> None:
        try:
            with self._db.session_scope() as session:
                row = session.get(UserTable, user_id)
                if row is None:
                    raise UserNotFoundError(user_id)
                session.delete(row)
        except SQLAlchemyError as e:
            raise self._storage_error("delete", e) from e

    def _exists_by_email(self, email: str) -> bool:
        try:
            with self._db.get_session() as session:
                count = session.exec(
                    select(func.count())
                    .select_from(UserTable)
                    .where(UserTable.email == email)
                ).one()
                return count > 0
        except SQLAlchemyError as e:
            raise self._storage_error("exists_by_email", e) from e

    @staticmethod
    def _email_owner(session: Session, email: str) -> str | None:
        return session.exec(
            select(UserTable.id).where(UserTable.email == email)
        ).first()

    @staticmethod
    def _to_row(user: User) -> UserTable:
        return UserTable(
            id=user.id,
            email=user.email,
            name=user.name,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    @staticmethod
    def _to_entity(row: UserTable) -> User:
        return User(
            id=row.id,
            email=row.email,
            name=row.name,
            created_at=_as_utc(row.created_at),
            updated_at=_as_utc(row.updated_at),
        )

    @staticmethod
    def _storage_error(operation: str, error: Exception) -> StorageError:
        logger.error("User storage operation {} failed: {}", operation, error)
        return StorageError(f"{operation} failed: {error}")
