"""
Templating Registries

Centralized registry for loading and caching the Jinja2 templates that build
flattened resume markup and stylesheets.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateNotFound

load_dotenv()
TEMPLATES_PATH = Path(os.getenv("TEMPLATES_PATH", Path(__file__).parent / "template"))


class TemplateRegistry:
    """
    Registry for loading and caching Jinja2 templates for markup generation.

    Section type templates are stored in template/types/{type_name}/template.html.jinja
    and document structure templates in template/structure/{name}.jinja.
    Templates use custom delimiters so the ``{{placeholder}}`` tokens of the
    flattened format pass through Jinja2 untouched:
    - Variable: <<< var >>>
    - Block: <%% block %%>
    - Comment: <# comment #>
    """

    def __init__(self, templates_path: Path = None):
        """
        Initialize the template registry.

        Args:
            templates_path: Base path holding types/ and structure/. Defaults to
                            TEMPLATES_PATH from environment
        """
        if templates_path is None:
            templates_path = TEMPLATES_PATH

        self.templates_path = Path(templates_path)
        self.types_base_path = self.templates_path / "types"
        self._cache: Dict[str, Template] = {}

        # Create Jinja2 environment with custom delimiters to avoid placeholder conflicts
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            # Custom delimiters leave {{token}} and {{#each}} blocks as literal text
            variable_start_string="<<<",
            variable_end_string=">>>",
            block_start_string="<%%",
            block_end_string="%%>",
            comment_start_string="<#",
            comment_end_string="#>",
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

    def _load(self, cache_key: str, template_path: str) -> Template:
        # Check cache first
        if cache_key in self._cache:
            return self._cache[cache_key]

        try:
            template = self.env.get_template(template_path)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Template not found for '{cache_key}' at {self.templates_path / template_path}"
            ) from e

        # Cache and return
        self._cache[cache_key] = template
        return template

    def get_template(self, type_name: str) -> Template:
        """
        Get a section type template, loading and caching it if necessary.

        Args:
            type_name: Name of the type (e.g., 'header', 'field_list')

        Returns:
            Jinja2 Template object

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        return self._load(type_name, f"types/{type_name}/template.html.jinja")

    def get_structure_template(self, name: str) -> Template:
        """
        Get a document structure template (e.g., 'layout.html', 'stylesheet.css').

        Raises:
            TemplateNotFound: If template file doesn't exist
        """
        return self._load(f"structure:{name}", f"structure/{name}.jinja")

    def get_template_path(self, type_name: str) -> Path:
        """
        Get the file path for a type's template.

        Args:
            type_name: Name of the type (e.g., 'header')

        Returns:
            Path to template file
        """
        return self.types_base_path / type_name / "template.html.jinja"

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()

    def is_cached(self, type_name: str) -> bool:
        """
        Check if a template is in the cache.

        Args:
            type_name: Name of the type

        Returns:
            True if cached, False otherwise
        """
        return type_name in self._cache


@lru_cache(maxsize=None)
def default_registry() -> TemplateRegistry:
    """Shared registry for the packaged templates."""
    return TemplateRegistry()
