"""Data models for DoWiki."""

from pydantic import BaseModel


class Page(BaseModel):
    """Represents a wiki page."""

    title: str
    body: bytes = b""
    id: int | None = None
    exists: bool = True

    @property
    def text(self) -> str:
        """Return the body decoded for display."""
        return self.body.decode("utf-8", errors="replace")
