"""Domain objects shown to users of the cache."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, computed_field

SHORT_DESCRIPTION_LENGTH = 200


def smart_truncate(text: str, length: int, suffix: str = "...") -> str:
    """Truncate text at a word boundary so it is at most ``length`` characters.

    Args:
        text: The text to shorten
        length: Maximum number of characters kept from ``text``
        suffix: Appended when the text was shortened

    Returns:
        The text unchanged if it already fits, otherwise the longest run of
        whole words that fits followed by ``suffix``
    """
    if len(text) <= length:
        return text
    cut = text[: length + 1].rsplit(" ", 1)[0]
    # A single word longer than the limit gets a hard cut
    if len(cut) > length:
        cut = cut[:length]
    return cut.rstrip() + suffix


class Video(BaseModel):
    """A single DevBytes video."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    url: str
    updated: datetime
    thumbnail: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def short_description(self) -> str:
        """Description shortened for list display."""
        return smart_truncate(self.description, SHORT_DESCRIPTION_LENGTH)
