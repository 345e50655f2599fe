"""Route table for wiki actions.

Every wiki URL has the shape ``/<action>/<title>``. Paths are split into
segments and matched against an enumerated table instead of a regex.
"""

from dataclasses import dataclass
from enum import Enum


class Action(str, Enum):
    """Wiki actions reachable over HTTP."""

    VIEW = "view"
    EDIT = "edit"
    SAVE = "save"


@dataclass(frozen=True)
class Route:
    action: Action
    methods: tuple[str, ...]


@dataclass(frozen=True)
class RouteMatch:
    route: Route
    title: str

    @property
    def action(self) -> Action:
        return self.route.action


ROUTES: dict[Action, Route] = {
    Action.VIEW: Route(Action.VIEW, ("GET", "HEAD")),
    Action.EDIT: Route(Action.EDIT, ("GET", "HEAD")),
    Action.SAVE: Route(Action.SAVE, ("POST",)),
}


def is_valid_title(title: str) -> bool:
    """Titles are non-empty and made of ASCII letters and digits only."""
    return title.isascii() and title.isalnum()


def match_path(path: str) -> RouteMatch | None:
    """Match a request path against the route table.

    Returns None unless the path is exactly ``/<action>/<title>``.
    """
    if not path.startswith("/"):
        return None
    segments = path[1:].split("/")
    if len(segments) != 2:
        return None
    action_name, title = segments
    try:
        action = Action(action_name)
    except ValueError:
        return None
    if not is_valid_title(title):
        return None
    return RouteMatch(route=ROUTES[action], title=title)


def path_for(action: Action, title: str) -> str:
    """Build the URL path for an action on a page."""
    return f"/{action.value}/{title}"
