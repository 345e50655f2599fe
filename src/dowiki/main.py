"""DoWiki FastAPI application."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import RedirectResponse, Response
from fastapi.staticfiles import StaticFiles

from dowiki.config import Settings, settings
from dowiki.core.render import PageRenderer
from dowiki.core.routing import Action, match_path, path_for
from dowiki.core.storage import Storage, create_storage
from dowiki.handlers import HANDLERS

logger = logging.getLogger(__name__)

# Every path is matched before its method is checked.
HTTP_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: open the page store before serving, close it after."""
    storage: Storage = app.state.storage
    try:
        await storage.open()
    except Exception:
        logger.critical("Unable to initialize page storage", exc_info=True)
        raise
    logger.info("Up and running!")
    try:
        yield
    finally:
        await storage.close()


def create_app(config: Settings = settings) -> FastAPI:
    """Build the wiki application with its own store and renderer."""
    app = FastAPI(
        title=config.app_title,
        debug=config.debug,
        lifespan=lifespan,
        redirect_slashes=False,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.settings = config
    app.state.storage = create_storage(config)
    app.state.renderer = PageRenderer(
        config.templates_dir,
        template_globals={"app_title": config.app_title, "front_page": config.front_page},
    )

    # Serve files in the stylesheet directory
    app.mount("/css", StaticFiles(directory=str(config.static_dir)), name="css")

    @app.api_route("/", methods=HTTP_METHODS)
    async def index():
        """Redirect to the front page."""
        return RedirectResponse(
            url=path_for(Action.VIEW, config.front_page), status_code=302
        )

    @app.api_route("/{action}/{title}", methods=HTTP_METHODS)
    async def dispatch(request: Request) -> Response:
        """Dispatch ``/<action>/<title>`` through the route table."""
        match = match_path(request.scope["path"])
        if match is None:
            raise HTTPException(status_code=404, detail="Not Found")
        if request.method not in match.route.methods:
            raise HTTPException(
                status_code=405,
                detail="Method Not Allowed",
                headers={"Allow": ", ".join(match.route.methods)},
            )
        handler = HANDLERS[match.action]
        return await handler(
            request, match.title, request.app.state.storage, request.app.state.renderer
        )

    return app


app = create_app()


def main() -> None:
    """Run the wiki server."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting DoWiki on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
