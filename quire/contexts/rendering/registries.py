"""
Markup template registry.

Block text is produced from Jinja2 templates that emit ReportLab paragraph
markup (a small XML dialect: <b>, <font>, <br/>). Autoescaping keeps user text
such as "R&D" or "<5ms" from being read as markup.
"""

from pathlib import Path
from typing import Dict, Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateError,
    TemplateNotFound,
)

from quire.contexts.rendering.exceptions import TemplateRenderError

TEMPLATES_PATH = Path(__file__).resolve().parent / "templates"
TEMPLATE_SUFFIX = ".xml.jinja"


class TemplateRegistry:
    """
    Registry for loading and caching the paragraph markup templates.

    Templates are stored as templates/{name}.xml.jinja.
    """

    def __init__(self, templates_path: Optional[Path] = None):
        """
        Initialize the template registry.

        Args:
            templates_path: Directory holding the templates. Defaults to the
                            packaged rendering/templates/
        """
        self.templates_path = Path(templates_path) if templates_path else TEMPLATES_PATH
        self._cache: Dict[str, Template] = {}

        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_path)),
            autoescape=True,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def get_template(self, name: str) -> Template:
        """
        Get a template by name, loading and caching it if necessary.

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        if name in self._cache:
            return self._cache[name]

        template_file = f"{name}{TEMPLATE_SUFFIX}"
        try:
            template = self.env.get_template(template_file)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Template '{name}' not found at {self.templates_path / template_file}"
            ) from e

        self._cache[name] = template
        return template

    def render(self, template_name: str, **context) -> str:
        """
        Render a template to paragraph markup.

        Raises:
            TemplateRenderError: If rendering fails (e.g. a missing variable)
        """
        template = self.get_template(template_name)
        try:
            return template.render(**context).strip()
        except TemplateError as e:
            raise TemplateRenderError(
                f"Failed to render markup for '{template_name}'",
                template_name=template_name,
                original_error=e,
            ) from e

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()

    def is_cached(self, name: str) -> bool:
        return name in self._cache
