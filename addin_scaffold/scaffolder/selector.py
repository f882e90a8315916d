"""Template selection for a technology and a set of Outlook forms.

The file fan-out is described by declarative tables of ``TemplateCopy``
entries; ``select_templates`` only decides which tables apply and joins the
destinations under the add-in root path.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath
from typing import NamedTuple

from .answers import parse_capabilities, parse_technology
from .models import Capability, FormAxis, Technology, has_axis


class Anchor(str, Enum):
    """Where a destination path is anchored."""
    ROOT = "root"    # project root, regardless of root_path
    ADDIN = "addin"  # joined under root_path


class TemplateCopy(NamedTuple):
    """One template -> destination mapping in a selection table."""
    source: str
    destination: str
    anchor: Anchor = Anchor.ADDIN


class SelectedTemplate(NamedTuple):
    """A resolved ``(template key, relative destination)`` pair."""
    source: str
    destination: str


# ---------------------------------------------------------------------------
# Selection tables
# ---------------------------------------------------------------------------

DESCRIPTOR_DESTINATION = "{manifest}"

PACKAGE_JSON = "package.json"
BOWER_JSON = "bower.json"
TSD_JSON = "tsd.json"

# Dependency manifests are upserted by the manifest merger rather than copied.
DEPENDENCY_MANIFESTS: tuple[str, ...] = (PACKAGE_JSON, BOWER_JSON, TSD_JSON)


def _dependency_templates(tech: str) -> tuple[TemplateCopy, ...]:
    return (
        TemplateCopy("common/_package.json.j2", PACKAGE_JSON, Anchor.ROOT),
        TemplateCopy(f"{tech}/_bower.json.j2", BOWER_JSON, Anchor.ROOT),
        TemplateCopy(f"{tech}/_tsd.json.j2", TSD_JSON, Anchor.ROOT),
    )


COMMON_TEMPLATES: tuple[TemplateCopy, ...] = (
    TemplateCopy("common/_bowerrc.j2", ".bowerrc", Anchor.ROOT),
    TemplateCopy("common/gulpfile.js", "gulpfile.js", Anchor.ROOT),
    TemplateCopy("common/_jsconfig.json", "jsconfig.json", Anchor.ROOT),
    TemplateCopy("common/_tsconfig.json", "tsconfig.json", Anchor.ROOT),
    TemplateCopy("common/content/Office.css", "content/Office.css"),
    TemplateCopy("common/images/close.png", "images/close.png"),
    TemplateCopy("common/scripts/MicrosoftAjax.js", "scripts/MicrosoftAjax.js"),
)

DESCRIPTOR_TEMPLATES: dict[Technology, TemplateCopy] = {
    Technology.HTML: TemplateCopy("common/manifest.xml.j2", DESCRIPTOR_DESTINATION),
    Technology.ANGULAR: TemplateCopy("common/manifest.xml.j2", DESCRIPTOR_DESTINATION),
    Technology.ANGULAR_ADAL: TemplateCopy("ng-adal/manifest.xml.j2", DESCRIPTOR_DESTINATION),
    Technology.MANIFEST_ONLY: TemplateCopy("common/manifest.xml.j2", DESCRIPTOR_DESTINATION),
}

SCHEMA_TEMPLATE = TemplateCopy("common/manifest.xsd", "manifest.xsd")

TECHNOLOGY_TEMPLATES: dict[Technology, tuple[TemplateCopy, ...]] = {
    tech: _dependency_templates(tech.value)
    + COMMON_TEMPLATES
    + (DESCRIPTOR_TEMPLATES[tech], SCHEMA_TEMPLATE)
    for tech in (Technology.HTML, Technology.ANGULAR, Technology.ANGULAR_ADAL)
}
TECHNOLOGY_TEMPLATES[Technology.MANIFEST_ONLY] = (
    DESCRIPTOR_TEMPLATES[Technology.MANIFEST_ONLY],
)

_FOLDERS: dict[FormAxis, str] = {
    FormAxis.COMPOSE: "appcompose",
    FormAxis.READ: "appread",
}


def _bundle(prefix: str, axis: FormAxis, files: tuple[str, ...]) -> tuple[TemplateCopy, ...]:
    folder = _FOLDERS[axis]
    copies = []
    for name in files:
        destination = name[: -len(".j2")] if name.endswith(".j2") else name
        copies.append(TemplateCopy(f"{prefix}/{folder}/{name}", f"{folder}/{destination}"))
    return tuple(copies)


_HTML_FILES = ("app.css", "app.js", "home/home.html", "home/home.css", "home/home.js")
_NG_FILES = (
    "index.html",
    "app.module.js",
    "app.routes.js",
    "home/home.controller.js",
    "home/home.html",
    "services/data.service.js",
)
_NG_ADAL_FILES = ("index.html", "app.module.js", "app.routes.js")
_NG_SHARED_FILES = ("home/home.controller.js", "home/home.html", "services/data.service.js")

# Azure AD client configuration; app.config.js is rendered with the client id.
AUTH_TEMPLATES: dict[FormAxis, tuple[TemplateCopy, ...]] = {
    axis: _bundle("ng-adal", axis, ("app.adalconfig.js", "app.config.js.j2"))
    for axis in FormAxis
}

FORM_BUNDLES: dict[tuple[Technology, FormAxis], tuple[TemplateCopy, ...]] = {}
for _axis in (FormAxis.COMPOSE, FormAxis.READ):
    FORM_BUNDLES[(Technology.HTML, _axis)] = _bundle("html", _axis, _HTML_FILES)
    FORM_BUNDLES[(Technology.ANGULAR, _axis)] = _bundle("ng", _axis, _NG_FILES)
    FORM_BUNDLES[(Technology.ANGULAR_ADAL, _axis)] = (
        _bundle("ng-adal", _axis, _NG_ADAL_FILES)
        + AUTH_TEMPLATES[_axis]
        + _bundle("ng", _axis, _NG_SHARED_FILES)
    )
del _axis


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

def select_templates(
    technology: Technology | str,
    capabilities: tuple[Capability, ...] | list[Capability | str],
    root_path: str = "",
    *,
    manifest_filename: str = "manifest.xml",
) -> tuple[SelectedTemplate, ...]:
    """Decide which templates to materialise and where.

    Args:
        technology: Scaffolding variant.
        capabilities: Selected Outlook forms.
        root_path: Relative add-in folder; ``""`` is the project root.
        manifest_filename: File name for the descriptor.

    Returns:
        Ordered ``(source, destination)`` pairs. Dependency manifests come
        first, the descriptor precedes the per-form bundles, compose bundle
        before read bundle.

    Raises:
        ConfigurationError: If the technology or a capability is unknown.
    """
    tech = parse_technology(technology)
    selected = parse_capabilities(list(capabilities))

    copies = list(TECHNOLOGY_TEMPLATES[tech])
    if tech is not Technology.MANIFEST_ONLY:
        for axis in (FormAxis.COMPOSE, FormAxis.READ):
            if has_axis(selected, axis):
                copies.extend(FORM_BUNDLES[(tech, axis)])

    return tuple(
        SelectedTemplate(copy.source, _destination(copy, root_path, manifest_filename))
        for copy in copies
    )


def _destination(copy: TemplateCopy, root_path: str, manifest_filename: str) -> str:
    name = manifest_filename if copy.destination == DESCRIPTOR_DESTINATION else copy.destination
    if copy.anchor is Anchor.ROOT or not root_path:
        return name
    return str(PurePosixPath(root_path) / name)


def descriptor_destination(technology: Technology | str, root_path: str, manifest_filename: str) -> str:
    """Relative path of the descriptor for the given selection."""
    tech = parse_technology(technology)
    return _destination(DESCRIPTOR_TEMPLATES[tech], root_path, manifest_filename)


def start_pages(
    technology: Technology | str,
    base_url: str,
    start_page: str | None = None,
) -> tuple[str, str]:
    """Return the ``(read form, edit form)`` source locations for the manifest."""
    tech = parse_technology(technology)
    base = base_url.rstrip("/")
    if tech is Technology.MANIFEST_ONLY:
        return (start_page or "", start_page or "")
    if tech is Technology.HTML:
        return (f"{base}/appread/home/home.html", f"{base}/appcompose/home/home.html")
    return (f"{base}/appread/index.html", f"{base}/appcompose/index.html")
