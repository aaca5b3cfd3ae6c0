"""Template rendering for generated artifacts.

Templates are Jinja2 files named ``<name>.j2`` in a backend's template
directory. Each backend ships defaults under ``pgschemagen/templates``.
"""

from pathlib import Path
from typing import Protocol

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
)

from pgschemagen.exceptions import RenderError
from pgschemagen.generators.bindings import Bindings
from pgschemagen.naming import (
    to_lower_camel,
    to_upper_camel,
    to_upper_snake,
    underline,
)

__all__ = ["Renderer", "JinjaRenderer", "TEMPLATE_SUFFIX", "default_template_dir"]

TEMPLATE_SUFFIX = ".j2"

BUNDLED_TEMPLATES = Path(__file__).parent / "templates"


def default_template_dir(kind: str) -> Path:
    """Directory of the bundled templates for a generator kind."""
    return BUNDLED_TEMPLATES / kind


class Renderer(Protocol):
    """Renders a named template with typed bindings."""

    def render(self, template_name: str, bindings: Bindings) -> str: ...


class JinjaRenderer:
    """Jinja2-backed renderer for one template directory."""

    def __init__(self, template_dir: Path):
        self.template_dir = template_dir
        self._env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["upper_snake"] = to_upper_snake
        self._env.filters["upper_camel"] = to_upper_camel
        self._env.filters["lower_camel"] = to_lower_camel
        self._env.filters["underline"] = underline

    def render(self, template_name: str, bindings: Bindings) -> str:
        """Render template_name with the bindings' fields as context.

        Raises:
            RenderError: If the template is missing or fails to render.
        """
        filename = template_name + TEMPLATE_SUFFIX
        try:
            template = self._env.get_template(filename)
        except TemplateNotFound as e:
            raise RenderError(
                template_name,
                f"template '{template_name}' not found in {self.template_dir}",
            ) from e
        except TemplateError as e:
            raise RenderError(
                template_name, f"template '{template_name}' is invalid: {e}"
            ) from e

        try:
            return template.render(**bindings.context())
        except TemplateError as e:
            raise RenderError(
                template_name, f"failed to render template '{template_name}': {e}"
            ) from e
