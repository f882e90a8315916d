"""Jinja2 template rendering for add-in scaffolding.

Provides the TemplateRenderer class which loads templates from the
``addin_scaffold/scaffolder/templates/`` directory.  Files ending in ``.j2``
are rendered with the generation context; every other file is a static asset
copied byte-for-byte.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

TEMPLATE_SUFFIX = ".j2"


def is_rendered(template_key: str) -> bool:
    """Return ``True`` if *template_key* is a Jinja2 template."""
    return template_key.endswith(TEMPLATE_SUFFIX)


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates and reads static assets for scaffolding.

    Markup templates (``*.xml.j2``, ``*.html.j2``) are autoescaped so that
    user supplied values such as the display name cannot break the document.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(
                enabled_extensions=("xml.j2", "html.j2"),
                default_for_string=False,
            ),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    # -- Rendering ---------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"common/manifest.xml.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def materialize(self, template_key: str, context: dict[str, Any]) -> bytes:
        """Produce the bytes for *template_key*.

        ``.j2`` templates are rendered and UTF-8 encoded; static assets are
        returned unchanged.
        """
        if is_rendered(template_key):
            return self.render(template_key, context).encode("utf-8")
        return (self.template_dir / template_key).read_bytes()

    # -- Utility -----------------------------------------------------------

    def exists(self, template_key: str) -> bool:
        """Return ``True`` if the template or asset exists."""
        return (self.template_dir / template_key).is_file()
