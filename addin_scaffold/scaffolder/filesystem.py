"""Filesystem collaborator rooted at the target project directory."""

from __future__ import annotations

from pathlib import Path


class ProjectFileSystem:
    """Reads and writes files relative to a project root.

    Errors from the underlying filesystem propagate unchanged.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def path(self, relative: str | Path) -> Path:
        return self.root / relative

    def exists(self, relative: str | Path) -> bool:
        return self.path(relative).is_file()

    def read(self, relative: str | Path) -> bytes | None:
        """Return the file contents, or ``None`` if the file does not exist."""
        target = self.path(relative)
        if not target.is_file():
            return None
        return target.read_bytes()

    def write(self, relative: str | Path, data: bytes) -> Path:
        """Write *data*, creating parent directories. Returns the absolute path."""
        target = self.path(relative)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        return target
