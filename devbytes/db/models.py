"""SQLAlchemy models for the DevBytes playlist cache."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text, TypeDecorator
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from devbytes.domain import Video


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime stored as naive UTC.

    SQLite drops offsets, so values are normalised to UTC on the way in and
    tagged as UTC on the way out.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


class StoredVideo(Base):
    """Cached copy of one playlist entry, keyed by its playback URL."""

    __tablename__ = "videos"

    url: Mapped[str] = mapped_column(String, primary_key=True)
    position: Mapped[int] = mapped_column(Integer, index=True)
    updated: Mapped[datetime] = mapped_column(UTCDateTime)
    title: Mapped[str] = mapped_column(String)
    description: Mapped[str] = mapped_column(Text)
    thumbnail: Mapped[str] = mapped_column(String)

    def as_domain_model(self) -> Video:
        """Convert the row into a domain Video."""
        return Video(
            title=self.title,
            description=self.description,
            url=self.url,
            updated=self.updated,
            thumbnail=self.thumbnail,
        )
