import uuid
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel
from pydantic import Field as PydanticField


def utc_now() -> datetime:
    return datetime.now(UTC)


class Entity(BaseModel):
    """Base entity class with auto-generated UUID identifier."""

    id: str = PydanticField(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
    )

    created_at: datetime = PydanticField(default_factory=utc_now)
    updated_at: datetime = PydanticField(default_factory=utc_now)

    def model_post_init(self, __context) -> None:
        # A freshly built entity has a single creation instant
        if "updated_at" not in self.model_fields_set:
            self.updated_at = self.created_at

    def touch(self) -> None:
        """Advance ``updated_at``; never equal to or behind the previous value."""
        now = utc_now()
        if now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now
