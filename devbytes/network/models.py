"""Pydantic models for the DevBytes playlist wire format."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from devbytes.db.models import StoredVideo
from devbytes.errors import DeserializationError


class NetworkVideo(BaseModel):
    """One video as returned by the playlist endpoint."""

    model_config = ConfigDict(extra="ignore")

    title: str
    description: str
    url: str
    updated: str
    thumbnail: str
    closed_captions: str | None = Field(default=None, alias="closedCaptions")


class NetworkVideoContainer(BaseModel):
    """Top-level playlist payload: ``{"videos": [...]}``."""

    model_config = ConfigDict(extra="ignore")

    videos: list[NetworkVideo]

    def as_database_model(self) -> list[StoredVideo]:
        """Convert the playlist into cache rows.

        Rows keep the playlist order in ``position``. A URL listed more than
        once yields a single row carrying the fields of its last occurrence.

        Raises:
            DeserializationError: If an ``updated`` timestamp is not ISO 8601
        """
        by_url: dict[str, NetworkVideo] = {}
        for video in self.videos:
            by_url[video.url] = video

        return [
            StoredVideo(
                url=video.url,
                position=position,
                updated=_parse_timestamp(video.updated),
                title=video.title,
                description=video.description,
                thumbnail=video.thumbnail,
            )
            for position, video in enumerate(by_url.values())
        ]


def _parse_timestamp(value: str) -> datetime:
    try:
        # Parse ISO 8601 datetime (convert Z to +00:00 for proper parsing)
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise DeserializationError(f"Invalid timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
