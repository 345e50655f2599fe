"""Error hierarchy for DoWiki."""


class WikiError(Exception):
    """Base for all DoWiki errors."""


class PageNotFoundError(WikiError):
    """Raised when no page is stored under a title."""

    def __init__(self, title: str) -> None:
        super().__init__(f"page not found: {title}")
        self.title = title


class StorageError(WikiError):
    """Raised when the page store fails for a reason other than a missing page."""


class RenderError(WikiError):
    """Raised when a template cannot be loaded or rendered."""
