"""Add-in scaffolder configuration.

Typed configuration for the generator. Settings use Pydantic v2 models so they
can be validated at construction time and serialised to/from JSON or
environment variables without boiler-plate.
"""

from __future__ import annotations

import os
import shlex
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

ZERO_GUID = "00000000-0000-0000-0000-000000000000"


class GeneratorConfig(BaseModel):
    """Global scaffolder configuration.

    Instances are typically created once by the CLI entry point and then
    passed to ``AddinGenerator`` and the install step.
    """

    dev_server_url: str = Field(
        default="https://localhost:8443",
        description="Base URL the generated gulp web server listens on",
    )
    template_dir: Path | None = Field(
        default=None,
        description="Override for the bundled template directory",
    )
    default_display_name: str = Field(default="My Office Add-in")
    default_auth_client_id: str = Field(default=ZERO_GUID)
    install_command: list[str] = Field(default_factory=lambda: ["npm", "install"])
    install_timeout: int = Field(
        default=600, ge=30, description="Package manager timeout in seconds"
    )

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Parent directories are created.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "GeneratorConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            ADDIN_DEV_SERVER_URL, ADDIN_TEMPLATE_DIR, ADDIN_INSTALL_COMMAND,
            ADDIN_INSTALL_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("ADDIN_DEV_SERVER_URL"):
            kwargs["dev_server_url"] = os.environ["ADDIN_DEV_SERVER_URL"].rstrip("/")
        if os.environ.get("ADDIN_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["ADDIN_TEMPLATE_DIR"])
        if os.environ.get("ADDIN_INSTALL_COMMAND"):
            kwargs["install_command"] = shlex.split(os.environ["ADDIN_INSTALL_COMMAND"])
        if os.environ.get("ADDIN_INSTALL_TIMEOUT"):
            kwargs["install_timeout"] = int(os.environ["ADDIN_INSTALL_TIMEOUT"])
        return cls(**kwargs)
