"""Idempotent merging of required packages into dependency manifests.

Three manifests are maintained: ``package.json`` (gulp tooling),
``bower.json`` (client libraries) and ``tsd.json`` (TypeScript
definitions).  When a manifest does not exist it is rendered from the
technology template; when it exists, missing entries are added and entries
already present are never touched, whatever their version constraint.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from ..utils import dump_json, parse_json_object, print_info, print_warning
from .answers import parse_technology
from .errors import ConfigurationError, ManifestParseError
from .filesystem import ProjectFileSystem
from .models import AddinSettings, Technology
from .selector import BOWER_JSON, PACKAGE_JSON, TECHNOLOGY_TEMPLATES, TSD_JSON
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Requirement tables
# ---------------------------------------------------------------------------

MANIFEST_SECTIONS: dict[str, str] = {
    PACKAGE_JSON: "devDependencies",
    BOWER_JSON: "dependencies",
    TSD_JSON: "installed",
}

_TSD_COMMIT = "04a025ada3492a22df24ca2d8521c911697721b3"
_OFFICE_TSD_COMMIT = "62eedc3121a5e28c50473d2e4a9cefbcb9c3957f"

_ANGULAR_BOWER: dict[str, Any] = {
    "angular": "~1.4.4",
    "angular-route": "~1.4.4",
    "angular-sanitize": "~1.4.4",
}

_ANGULAR_TSD: dict[str, Any] = {
    "angularjs/angular.d.ts": {"commit": _TSD_COMMIT},
    "angularjs/angular-route.d.ts": {"commit": _TSD_COMMIT},
    "angularjs/angular-sanitize.d.ts": {"commit": _TSD_COMMIT},
}

# Entries every add-in needs, whatever the technology.
BASE_REQUIREMENTS: dict[str, dict[str, Any]] = {
    PACKAGE_JSON: {
        "chalk": "^1.1.1",
        "gulp": "^3.9.0",
        "gulp-webserver": "^0.9.1",
        "minimist": "^1.2.0",
        "xmllint": "git+https://github.com/kripken/xml.js.git",
    },
    BOWER_JSON: {"microsoft.office.js": "*"},
    TSD_JSON: {"office-js/office-js.d.ts": {"commit": _OFFICE_TSD_COMMIT}},
}

TECHNOLOGY_REQUIREMENTS: dict[tuple[str, Technology], dict[str, Any]] = {
    (BOWER_JSON, Technology.HTML): {"jquery": "~1.9.1"},
    (BOWER_JSON, Technology.ANGULAR): dict(_ANGULAR_BOWER),
    (BOWER_JSON, Technology.ANGULAR_ADAL): {**_ANGULAR_BOWER, "adal-angular": "~1.0.5"},
    (TSD_JSON, Technology.HTML): {"jquery/jquery.d.ts": {"commit": _TSD_COMMIT}},
    (TSD_JSON, Technology.ANGULAR): dict(_ANGULAR_TSD),
    # there is no typedef for adal-angular
    (TSD_JSON, Technology.ANGULAR_ADAL): dict(_ANGULAR_TSD),
}


def required_entries(manifest: str, technology: Technology | str) -> dict[str, Any]:
    """Return the ``name -> constraint`` entries *manifest* must declare.

    Raises:
        ConfigurationError: For an unknown manifest or technology, or for
            ``manifest-only`` which has no dependency manifests.
    """
    tech = parse_technology(technology)
    if manifest not in MANIFEST_SECTIONS:
        raise ConfigurationError(f"Unknown dependency manifest: {manifest!r}")
    if tech is Technology.MANIFEST_ONLY:
        raise ConfigurationError("manifest-only projects have no dependency manifests")
    entries = dict(BASE_REQUIREMENTS[manifest])
    entries.update(TECHNOLOGY_REQUIREMENTS.get((manifest, tech), {}))
    return entries


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------

@dataclass
class MergeResult:
    """Outcome of a merge: the resulting document and the keys that were added."""

    document: dict[str, Any]
    added: list[str] = field(default_factory=list)
    created: bool = False

    @property
    def changed(self) -> bool:
        return self.created or bool(self.added)


def merge_entries(
    document: dict[str, Any], section: str, required: dict[str, Any]
) -> MergeResult:
    """Add every entry of *required* missing from ``document[section]``.

    The input is not modified; a deep copy is returned. Keys already present
    keep their value. A missing section is created.

    Raises:
        ConfigurationError: If the section exists but is not a JSON object.
    """
    merged = copy.deepcopy(document)
    entries = merged.get(section)
    if entries is None:
        entries = {}
        merged[section] = entries
    elif not isinstance(entries, dict):
        raise ConfigurationError(
            f"'{section}' must be a JSON object, got {type(entries).__name__}"
        )

    added: list[str] = []
    for name, constraint in required.items():
        if name not in entries:
            entries[name] = copy.deepcopy(constraint)
            added.append(name)
    return MergeResult(document=merged, added=added)


def default_template(manifest: str, technology: Technology | str) -> str:
    """Template key the selector uses for *manifest* and *technology*."""
    tech = parse_technology(technology)
    for entry in TECHNOLOGY_TEMPLATES[tech]:
        if entry.destination == manifest:
            return entry.source
    raise ConfigurationError(f"No {manifest} template for technology {tech.value!r}")


class ManifestMerger:
    """Creates or updates dependency manifests for a generation run."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def merge(
        self,
        existing: dict[str, Any] | None,
        technology: Technology | str,
        manifest: str = BOWER_JSON,
        *,
        template: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> MergeResult:
        """Merge the required entries for *technology* into *existing*.

        Args:
            existing: Parsed manifest, or ``None`` when the file is absent.
            technology: Scaffolding variant.
            manifest: Which manifest (``package.json``, ``bower.json``,
                ``tsd.json``).
            template: Template rendered when *existing* is ``None``; defaults
                to the selector's template for the technology.
            context: Rendering context for the template.

        Returns:
            A ``MergeResult``; ``created`` is set when the template was used.
        """
        required = required_entries(manifest, technology)
        if existing is None:
            key = template or default_template(manifest, technology)
            document = parse_json_object(self.renderer.materialize(key, context or {}), key)
            return MergeResult(document=document, created=True)
        return merge_entries(existing, MANIFEST_SECTIONS[manifest], required)

    def upsert(
        self,
        fs: ProjectFileSystem,
        manifest: str,
        settings: AddinSettings,
        context: dict[str, Any],
        *,
        template: str | None = None,
    ) -> tuple[AddinSettings, MergeResult]:
        """Create or update *manifest* in the project.

        For an existing ``package.json`` the declared project name is
        captured into ``root_project_name`` of the returned settings.

        Returns:
            ``(settings, result)``; *settings* is a new record when the
            project name was captured.

        Raises:
            ManifestParseError: If the existing file is not a JSON object.
        """
        raw = fs.read(manifest)
        existing = None
        if raw is not None:
            try:
                existing = parse_json_object(raw, manifest)
            except ValueError as exc:
                raise ManifestParseError(str(exc), path=manifest) from exc

        if manifest == PACKAGE_JSON and existing is not None and existing.get("name"):
            settings = settings.model_copy(update={"root_project_name": str(existing["name"])})

        result = self.merge(
            existing, settings.technology, manifest, template=template, context=context
        )

        if result.created:
            fs.write(manifest, dump_json(result.document))
        elif result.added:
            print_warning(f"Adding additional packages to {manifest}")
            fs.write(manifest, dump_json(result.document))
        else:
            print_info(f"{manifest} already declares every required package")
        return settings, result
