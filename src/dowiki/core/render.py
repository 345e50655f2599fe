"""Template rendering for wiki pages.

Templates are compiled once when the renderer is built and are never
reloaded afterwards.
"""

import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, Template, TemplateError, select_autoescape

from dowiki.core.errors import RenderError
from dowiki.core.models import Page

logger = logging.getLogger(__name__)

TEMPLATE_NAMES = ("view", "edit")


class PageRenderer:
    """Renders pages through a fixed set of compiled templates."""

    def __init__(
        self,
        templates_dir: Path,
        names: tuple[str, ...] = TEMPLATE_NAMES,
        template_globals: dict[str, Any] | None = None,
    ) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
            auto_reload=False,
        )
        if template_globals:
            self.env.globals.update(template_globals)

        self._templates: dict[str, Template] = {}
        self._load_errors: dict[str, str] = {}
        for name in names:
            filename = f"{name}.html"
            try:
                self._templates[name] = self.env.get_template(filename)
            except TemplateError as exc:
                # Kept so every render of this template reports the failure.
                self._load_errors[name] = f"template {filename}: {exc}"
                logger.error("Failed to load template %s: %s", filename, exc)

    def render(self, name: str, page: Page, **context: Any) -> str:
        """Render the named template against a page.

        Raises RenderError if the template did not load or fails to execute.
        """
        template = self._templates.get(name)
        if template is None:
            raise RenderError(self._load_errors.get(name, f"no such template: {name}"))
        try:
            return template.render(page=page, **context)
        except TemplateError as exc:
            raise RenderError(str(exc)) from exc
