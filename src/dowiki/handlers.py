"""Request handlers for the view, edit and save actions.

Each handler gets the page store and the renderer passed in explicitly and
carries no state between requests.
"""

import logging

from fastapi import Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response

from dowiki.core.errors import PageNotFoundError, RenderError, StorageError, WikiError
from dowiki.core.models import Page
from dowiki.core.render import PageRenderer
from dowiki.core.routing import Action, path_for
from dowiki.core.storage import Storage

logger = logging.getLogger(__name__)


def render_page(renderer: PageRenderer, name: str, page: Page) -> Response:
    """Render a template, turning render failures into a 500 with the error text."""
    try:
        html = renderer.render(name, page)
    except RenderError as exc:
        logger.error("Rendering %s for %s failed: %s", name, page.title, exc)
        return PlainTextResponse(str(exc), status_code=500)
    return HTMLResponse(html)


async def view_page(
    request: Request, title: str, storage: Storage, renderer: PageRenderer
) -> Response:
    """View a wiki page."""
    try:
        page = await storage.load(title)
    except PageNotFoundError:
        # Page doesn't exist - redirect to edit to create it
        return RedirectResponse(url=path_for(Action.EDIT, title), status_code=302)
    except StorageError as exc:
        # A storage outage looks like a missing page to the reader.
        logger.warning("Loading %s failed, redirecting to edit: %s", title, exc)
        return RedirectResponse(url=path_for(Action.EDIT, title), status_code=302)
    return render_page(renderer, "view", page)


async def edit_page(
    request: Request, title: str, storage: Storage, renderer: PageRenderer
) -> Response:
    """Edit page form."""
    try:
        page = await storage.load(title)
    except WikiError:
        # New page
        page = Page(title=title, exists=False)
    return render_page(renderer, "edit", page)


async def save_page(
    request: Request, title: str, storage: Storage, renderer: PageRenderer
) -> Response:
    """Save page content from the ``body`` form field."""
    form = await request.form()
    body = form.get("body", "")
    if not isinstance(body, str):
        # uploaded files are not page bodies
        body = ""

    try:
        await storage.save(title, body.encode("utf-8"))
    except StorageError as exc:
        logger.error("Saving %s failed: %s", title, exc)
        return PlainTextResponse(str(exc), status_code=500)

    return RedirectResponse(url=path_for(Action.VIEW, title), status_code=302)


HANDLERS = {
    Action.VIEW: view_page,
    Action.EDIT: edit_page,
    Action.SAVE: save_page,
}
