"""Pydantic v2 models shared by the scaffolder components.

Defines the technology and Outlook form enumerations and the immutable
``AddinSettings`` record threaded through every generation step.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Technology(str, Enum):
    """Scaffolding variant for the generated add-in."""
    HTML = "html"
    ANGULAR = "ng"
    ANGULAR_ADAL = "ng-adal"
    MANIFEST_ONLY = "manifest-only"


class FormAxis(str, Enum):
    """The two independent capability axes: read forms and compose forms."""
    READ = "read"
    COMPOSE = "compose"


class Capability(str, Enum):
    """An Outlook form the add-in is activated on."""
    MAIL_READ = "mail-read"
    MAIL_COMPOSE = "mail-compose"
    APPOINTMENT_READ = "appointment-read"
    APPOINTMENT_COMPOSE = "appointment-compose"

    @property
    def axis(self) -> FormAxis:
        if self in (Capability.MAIL_READ, Capability.APPOINTMENT_READ):
            return FormAxis.READ
        return FormAxis.COMPOSE

    @property
    def item_type(self) -> str:
        """``ItemType`` attribute of the activation rule (Message / Appointment)."""
        if self in (Capability.MAIL_READ, Capability.MAIL_COMPOSE):
            return "Message"
        return "Appointment"

    @property
    def form_type(self) -> str:
        """``FormType`` attribute of the activation rule (Read / Edit)."""
        return "Read" if self.axis is FormAxis.READ else "Edit"


ALL_CAPABILITIES: tuple[Capability, ...] = tuple(Capability)


def has_axis(capabilities: tuple[Capability, ...] | list[Capability], axis: FormAxis) -> bool:
    """Return ``True`` if any capability in the selection belongs to *axis*."""
    return any(c.axis is axis for c in capabilities)


# ---------------------------------------------------------------------------
# Settings record
# ---------------------------------------------------------------------------

class AddinSettings(BaseModel):
    """Canonical, read-only settings for one generation run.

    Created once by ``resolve`` and never mutated; steps that learn something
    new (e.g. the enclosing npm project name) return an updated copy.
    """

    model_config = ConfigDict(frozen=True)

    display_name: str = Field(..., description="Human readable add-in title")
    internal_name: str = Field(..., min_length=1, description="Filesystem-safe slug")
    technology: Technology
    capabilities: tuple[Capability, ...] = Field(..., min_length=1)
    root_path: str = Field(default="", description="Relative add-in folder, '' = project root")
    project_id: UUID = Field(default_factory=uuid4)
    auth_client_id: Optional[str] = Field(default=None, description="Azure AD application id")
    start_page: Optional[str] = Field(default=None, description="Start URL for manifest-only")
    root_project_name: Optional[str] = Field(
        default=None, description="Name of the enclosing npm project, if any"
    )

    @property
    def manifest_filename(self) -> str:
        return f"manifest-{self.internal_name}.xml"

    @property
    def package_name(self) -> str:
        """Name used in generated dependency manifests."""
        return self.root_project_name or self.internal_name
