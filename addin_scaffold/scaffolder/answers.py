"""Resolution of raw user answers into an ``AddinSettings`` record.

The prompt/CLI layer collects answers and hands them over as ``RawAnswers``;
``resolve`` validates them, derives the internal project name, normalises the
root path and assigns a fresh project id.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError, ValidationError
from .models import AddinSettings, Capability, Technology

CURRENT_FOLDER = "current folder"

_UUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


class RawAnswers(BaseModel):
    """Answers as collected by the prompt or CLI layer.

    Field aliases match the option names of the command line.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="My Office Add-in")
    root_path: Optional[str] = Field(default=CURRENT_FOLDER, alias="root-path")
    tech: str = Field(default=Technology.HTML.value)
    outlook_form: list[str] = Field(default_factory=list, alias="outlookForm")
    app_id: Optional[str] = Field(default=None, alias="appId")
    start_page: Optional[str] = Field(default=None, alias="startPage")


# ---------------------------------------------------------------------------
# Derivation helpers
# ---------------------------------------------------------------------------

def derive_internal_name(display_name: str) -> str:
    """Derive the filesystem-safe internal name from a display name.

    Characters other than word characters, whitespace and hyphens become
    spaces, whitespace runs collapse, and the result is lowercased with
    spaces turned into hyphens.

    Disallowed characters act as word separators rather than being stripped,
    so the fragments around an apostrophe stay apart instead of merging.

    Examples::

        derive_internal_name("My  Office-Add!!in") -> "my-office-add-in"
        derive_internal_name("Contoso Mail") -> "contoso-mail"
        derive_internal_name("Don't Panic") -> "don-t-panic"
    """
    cleaned = re.sub(r"[^\w\s-]", " ", display_name)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    return cleaned.lower().replace(" ", "-")


def normalize_root_path(value: Optional[str]) -> str:
    """Normalise the add-in root folder relative to the project root.

    ``"current folder"`` and blank values map to ``""``. Absolute paths and
    paths that climb above the project root are rejected.

    Raises:
        ValidationError: If the path is absolute or escapes the project root.
    """
    if value is None:
        return ""
    raw = value.strip()
    if not raw or raw == CURRENT_FOLDER:
        return ""

    posix = raw.replace("\\", "/")
    if posix.startswith("/") or re.match(r"^[A-Za-z]:", posix):
        raise ValidationError(
            f"Root path must be relative to the project root: {value!r}", field="root_path"
        )

    depth = 0
    for part in PurePosixPath(posix).parts:
        if part == "..":
            depth -= 1
            if depth < 0:
                raise ValidationError(
                    f"Root path escapes the project root: {value!r}", field="root_path"
                )
        elif part != ".":
            depth += 1

    normalized = str(PurePosixPath(posix))
    return "" if normalized == "." else normalized


def parse_technology(value: Technology | str) -> Technology:
    """Coerce *value* to a ``Technology``.

    Raises:
        ConfigurationError: If the value is not a known technology.
    """
    try:
        return Technology(value)
    except ValueError:
        known = ", ".join(t.value for t in Technology)
        raise ConfigurationError(
            f"Unknown technology {value!r} (expected one of: {known})"
        ) from None


def parse_capabilities(values: list[Any] | tuple[Any, ...]) -> tuple[Capability, ...]:
    """Coerce *values* to capabilities, dropping duplicates but keeping order.

    Raises:
        ConfigurationError: If a value is not a known Outlook form.
    """
    result: list[Capability] = []
    for value in values:
        try:
            capability = Capability(value)
        except ValueError:
            known = ", ".join(c.value for c in Capability)
            raise ConfigurationError(
                f"Unknown Outlook form {value!r} (expected one of: {known})"
            ) from None
        if capability not in result:
            result.append(capability)
    return tuple(result)


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

def resolve(raw: RawAnswers | dict[str, Any], project_id: UUID | None = None) -> AddinSettings:
    """Validate raw answers and produce the settings record for one run.

    Args:
        raw: Collected answers, as a model or plain dict.
        project_id: Optional fixed id; a random UUID4 is generated otherwise.

    Returns:
        A frozen ``AddinSettings``.

    Raises:
        ValidationError: If a required answer is missing or malformed.
        ConfigurationError: If the technology or a form value is unknown.
    """
    answers = raw if isinstance(raw, RawAnswers) else RawAnswers.model_validate(raw)

    technology = parse_technology(answers.tech)
    capabilities = parse_capabilities(answers.outlook_form)
    if not capabilities:
        raise ValidationError(
            "Must select at least one Outlook form type", field="outlook_form"
        )

    display_name = re.sub(r"\s+", " ", answers.name).strip()
    internal_name = derive_internal_name(display_name)
    if not internal_name:
        raise ValidationError(
            f"Project name {answers.name!r} does not contain any usable characters",
            field="name",
        )

    start_page = (answers.start_page or "").strip() or None
    if technology is Technology.MANIFEST_ONLY and not start_page:
        raise ValidationError(
            "A start URL is required when generating a manifest only", field="start_page"
        )

    auth_client_id: Optional[str] = None
    if technology is Technology.ANGULAR_ADAL:
        auth_client_id = (answers.app_id or "").strip()
        if not _UUID_RE.match(auth_client_id):
            raise ValidationError(
                f"Azure AD application id must be a GUID, got {answers.app_id!r}",
                field="app_id",
            )

    return AddinSettings(
        display_name=display_name,
        internal_name=internal_name,
        technology=technology,
        capabilities=capabilities,
        root_path=normalize_root_path(answers.root_path),
        project_id=project_id or uuid4(),
        auth_client_id=auth_client_id,
        start_page=start_page,
    )
