from dataclasses import dataclass

from usercore.core.services import DbSessionService, UserService
from usercore.entities.core.user import UserRepository


@dataclass
class ApplicationDependencies:
    user_repository: UserRepository
    user_service: UserService
    database_service: DbSessionService | None = None
