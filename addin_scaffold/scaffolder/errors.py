"""Exception hierarchy raised by the scaffolder core."""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for every fatal scaffolding error."""


class ValidationError(ScaffoldError):
    """Raised when a required answer is missing or malformed.

    Generation is aborted before any file is written.
    """

    def __init__(self, message: str, field: str = "") -> None:
        self.field = field
        super().__init__(message)


class ConfigurationError(ScaffoldError):
    """Raised for an unrecognized technology or capability value."""


class DescriptorParseError(ScaffoldError):
    """Raised when a manifest descriptor does not have the expected structure."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class ManifestParseError(ScaffoldError):
    """Raised when an existing dependency manifest is not a JSON object."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)
