"""Shared pytest fixtures for the add-in scaffolder test suite.

Provides reusable fixtures for:
- Temporary project directories
- Resolved settings records for each technology
- Rendered and hand-written manifest descriptors
- Pre-existing dependency manifests
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any, Callable
from uuid import UUID

import pytest

from addin_scaffold.config import ZERO_GUID, GeneratorConfig
from addin_scaffold.scaffolder.answers import resolve
from addin_scaffold.scaffolder.generator import AddinGenerator
from addin_scaffold.scaffolder.models import AddinSettings
from addin_scaffold.scaffolder.templates import TemplateRenderer

FIXED_PROJECT_ID = UUID("6f1c2a43-8a51-4c5e-9b1e-0d7b5c1e2f3a")


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary directory for generated projects (auto-cleanup)."""
    project_dir = tmp_path / "test-project"
    project_dir.mkdir()
    yield project_dir


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def make_settings() -> Callable[..., AddinSettings]:
    """Factory resolving answers with a fixed project id."""

    def _make(
        tech: str = "html",
        forms: list[str] | None = None,
        name: str = "My Office Add-in",
        root_path: str = "current folder",
        **extra: Any,
    ) -> AddinSettings:
        answers: dict[str, Any] = {
            "name": name,
            "tech": tech,
            "root_path": root_path,
            "outlook_form": forms if forms is not None else [
                "mail-read", "mail-compose", "appointment-read", "appointment-compose",
            ],
        }
        if tech == "ng-adal":
            answers.setdefault("app_id", ZERO_GUID)
        answers.update(extra)
        return resolve(answers, project_id=FIXED_PROJECT_ID)

    return _make


@pytest.fixture
def generator() -> AddinGenerator:
    return AddinGenerator(GeneratorConfig())


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------

@pytest.fixture
def rendered_manifest(renderer: TemplateRenderer) -> bytes:
    """The default manifest template rendered for an Angular add-in."""
    context = {
        "project_display_name": "My Office Add-in",
        "project_id": str(FIXED_PROJECT_ID),
        "start_page_read_form": "https://localhost:8443/appread/index.html",
        "start_page_edit_form": "https://localhost:8443/appcompose/index.html",
    }
    return renderer.render("common/manifest.xml.j2", context).encode("utf-8")


@pytest.fixture
def custom_form_manifest() -> bytes:
    """A hand-written manifest with a form type the rewriter does not know."""
    return textwrap.dedent("""\
        <?xml version="1.0" encoding="UTF-8"?>
        <OfficeApp xmlns="http://schemas.microsoft.com/office/appforoffice/1.1"
                   xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
                   xsi:type="MailApp">
          <Id>11111111-2222-3333-4444-555555555555</Id>
          <DisplayName DefaultValue="Custom" />
          <FormSettings>
            <!-- keep me -->
            <Form xsi:type="ItemRead">
              <DesktopSettings><SourceLocation DefaultValue="https://a/read" /></DesktopSettings>
            </Form>
            <Form xsi:type="ItemEdit">
              <DesktopSettings><SourceLocation DefaultValue="https://a/edit" /></DesktopSettings>
            </Form>
            <Form xsi:type="CustomPane">
              <DesktopSettings><SourceLocation DefaultValue="https://a/custom" /></DesktopSettings>
            </Form>
          </FormSettings>
          <Permissions>ReadItem</Permissions>
          <Rule xsi:type="ItemHasKnownEntity" EntityType="Url" />
        </OfficeApp>
    """).encode("utf-8")


# ---------------------------------------------------------------------------
# Existing dependency manifests
# ---------------------------------------------------------------------------

@pytest.fixture
def existing_project(tmp_project_dir: Path) -> Path:
    """A project that already has package.json and bower.json."""
    (tmp_project_dir / "package.json").write_text(
        json.dumps({
            "name": "ProjectName",
            "version": "0.1.0",
            "scripts": {"start": "node server.js"},
            "devDependencies": {"gulp": "^4.0.0"},
        }, indent=2),
        encoding="utf-8",
    )
    (tmp_project_dir / "bower.json").write_text(
        json.dumps({
            "name": "ProjectName",
            "version": "0.1.0",
            "dependencies": {"jquery": "~2.0.0"},
        }, indent=2),
        encoding="utf-8",
    )
    return tmp_project_dir
