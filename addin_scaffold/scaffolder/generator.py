"""Main scaffolding orchestrator.

Takes an ``AddinSettings`` record and generates an Outlook add-in project:
dependency manifests are created or merged, the selected templates are
materialised, and the manifest descriptor is rewritten for the selected
Outlook forms.  Steps run strictly in sequence; a failing step stops the run
and files written by earlier steps stay on disk.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from ..config import GeneratorConfig
from ..utils import print_info, print_warning, run_command
from .descriptor import rewrite_descriptor_file
from .errors import ConfigurationError
from .filesystem import ProjectFileSystem
from .manifest_merge import ManifestMerger
from .models import AddinSettings, Technology
from .selector import (
    DEPENDENCY_MANIFESTS,
    SelectedTemplate,
    descriptor_destination,
    select_templates,
    start_pages,
)
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class GenerationResult(BaseModel):
    """Summary of one generation run."""

    settings: AddinSettings
    project_root: Path
    written: list[str] = Field(default_factory=list, description="Relative paths written")
    merged: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Entries added to pre-existing dependency manifests",
    )
    descriptor_path: str = ""


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class AddinGenerator:
    """Scaffolding orchestrator.

    Given resolved settings, generates into the destination directory:
    - ``package.json``, ``bower.json``, ``tsd.json`` (created or merged)
    - gulp / editor configuration and shared assets
    - the manifest descriptor and its schema
    - read and/or compose form sources for the chosen technology
    """

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        self.config = config or GeneratorConfig()
        self.renderer = TemplateRenderer(self.config.template_dir)
        self.merger = ManifestMerger(self.renderer)

    # -- Public API --------------------------------------------------------

    async def generate(
        self, settings: AddinSettings, destination: str | Path
    ) -> GenerationResult:
        """Generate the add-in project into *destination*.

        Args:
            settings: Resolved settings for this run.
            destination: Project root directory (created if missing).

        Returns:
            A ``GenerationResult`` listing every written path.
        """
        project_root = Path(destination)
        selection = select_templates(
            settings.technology,
            settings.capabilities,
            settings.root_path,
            manifest_filename=settings.manifest_filename,
        )
        missing = [s.source for s in selection if not self.renderer.exists(s.source)]
        if missing:
            raise ConfigurationError(
                f"Templates not found in {self.renderer.template_dir}: {', '.join(missing)}"
            )
        await asyncio.to_thread(project_root.mkdir, parents=True, exist_ok=True)
        fs = ProjectFileSystem(project_root)

        manifests = [s for s in selection if s.destination in DEPENDENCY_MANIFESTS]
        files = [s for s in selection if s.destination not in DEPENDENCY_MANIFESTS]

        result = GenerationResult(settings=settings, project_root=project_root)

        # 1. Create or merge dependency manifests
        for selected in manifests:
            settings, merge = await asyncio.to_thread(
                self.merger.upsert,
                fs,
                selected.destination,
                settings,
                self.build_context(settings),
                template=selected.source,
            )
            if merge.changed:
                result.written.append(selected.destination)
            if merge.added:
                result.merged[selected.destination] = merge.added

        # 2. Materialise templates and assets
        context = self.build_context(settings)
        for selected in files:
            await self._materialize(fs, selected, context)
            result.written.append(selected.destination)

        # 3. Rewrite the descriptor for the selected Outlook forms
        descriptor = descriptor_destination(
            settings.technology, settings.root_path, settings.manifest_filename
        )
        await asyncio.to_thread(
            rewrite_descriptor_file, fs, descriptor, settings.capabilities
        )

        result.settings = settings
        result.descriptor_path = descriptor
        return result

    # -- Context building --------------------------------------------------

    def build_context(self, settings: AddinSettings) -> dict[str, Any]:
        """Build the Jinja2 template context from the settings record."""
        read_form, edit_form = start_pages(
            settings.technology, self.config.dev_server_url, settings.start_page
        )
        return {
            "project_display_name": settings.display_name,
            "project_internal_name": settings.internal_name,
            "root_project_name": settings.package_name,
            "project_id": str(settings.project_id),
            "technology": settings.technology.value,
            "root_path": settings.root_path,
            "start_page_read_form": read_form,
            "start_page_edit_form": edit_form,
            "app_id": settings.auth_client_id or "",
        }

    # -- Internal ----------------------------------------------------------

    async def _materialize(
        self, fs: ProjectFileSystem, selected: SelectedTemplate, context: dict[str, Any]
    ) -> Path:
        data = self.renderer.materialize(selected.source, context)
        return await asyncio.to_thread(fs.write, selected.destination, data)


# ---------------------------------------------------------------------------
# Package installation
# ---------------------------------------------------------------------------


async def install_dependencies(
    project_root: str | Path,
    settings: AddinSettings,
    config: GeneratorConfig | None = None,
    *,
    skip_install: bool = False,
) -> bool:
    """Run the package manager in the generated project.

    Skipped for manifest-only projects and when *skip_install* is set.

    Returns:
        ``True`` if the installer ran and exited with status 0.
    """
    config = config or GeneratorConfig()
    if skip_install or settings.technology is Technology.MANIFEST_ONLY:
        print_info("Skipping package installation")
        return False

    returncode, _stdout, stderr = await run_command(
        config.install_command,
        cwd=project_root,
        timeout=config.install_timeout,
        capture=True,
    )
    if returncode != 0:
        print_warning(
            f"'{' '.join(config.install_command)}' exited with {returncode}: {stderr[:500]}"
        )
        return False
    return True
