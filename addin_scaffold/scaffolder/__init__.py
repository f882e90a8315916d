"""Add-in scaffolder -- generates Outlook add-in project structures.

Quick usage::

    from addin_scaffold.scaffolder import AddinGenerator, resolve

    settings = resolve({
        "name": "Contoso Mail",
        "tech": "ng",
        "outlookForm": ["mail-read", "mail-compose"],
    })
    result = await AddinGenerator().generate(settings, "/tmp/contoso")
"""

from addin_scaffold.scaffolder.answers import RawAnswers, resolve
from addin_scaffold.scaffolder.descriptor import parse_descriptor, rewrite_descriptor
from addin_scaffold.scaffolder.errors import (
    ConfigurationError,
    DescriptorParseError,
    ManifestParseError,
    ScaffoldError,
    ValidationError,
)
from addin_scaffold.scaffolder.generator import (
    AddinGenerator,
    GenerationResult,
    install_dependencies,
)
from addin_scaffold.scaffolder.manifest_merge import ManifestMerger, merge_entries
from addin_scaffold.scaffolder.models import AddinSettings, Capability, Technology
from addin_scaffold.scaffolder.selector import select_templates
from addin_scaffold.scaffolder.templates import TemplateRenderer

__all__ = [
    "AddinGenerator",
    "AddinSettings",
    "Capability",
    "ConfigurationError",
    "DescriptorParseError",
    "GenerationResult",
    "ManifestMerger",
    "ManifestParseError",
    "RawAnswers",
    "ScaffoldError",
    "Technology",
    "TemplateRenderer",
    "ValidationError",
    "install_dependencies",
    "merge_entries",
    "parse_descriptor",
    "resolve",
    "rewrite_descriptor",
    "select_templates",
]
