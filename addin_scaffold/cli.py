"""Command line entry point for the add-in scaffolder.

Usage::

    addin-scaffold --name "Contoso Mail" --tech ng --outlook-form mail-read,mail-compose
    python -m addin_scaffold.cli --tech manifest-only --start-page https://contoso.com/addin
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path

from addin_scaffold.config import GeneratorConfig
from addin_scaffold.scaffolder import (
    AddinGenerator,
    RawAnswers,
    ScaffoldError,
    install_dependencies,
    resolve,
)
from addin_scaffold.scaffolder.answers import CURRENT_FOLDER
from addin_scaffold.scaffolder.models import ALL_CAPABILITIES, Technology
from addin_scaffold.utils import (
    format_duration,
    print_info,
    print_error,
    print_success,
    print_summary_table,
)


def build_parser(config: GeneratorConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="addin-scaffold",
        description="Outlook add-in scaffolder -- generates a mail add-in project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  addin-scaffold --name 'Contoso Mail' --tech html\n"
            "  addin-scaffold --tech ng --outlook-form mail-read -o ./contoso\n"
            "  addin-scaffold --tech manifest-only --start-page https://contoso.com/\n"
        ),
    )
    parser.add_argument(
        "--name",
        default=config.default_display_name,
        help=f"Title of the add-in (default: {config.default_display_name})",
    )
    parser.add_argument(
        "--root-path",
        default=CURRENT_FOLDER,
        help="Relative path where the add-in should be created (default: project root)",
    )
    parser.add_argument(
        "--tech",
        default=Technology.HTML.value,
        choices=[t.value for t in Technology],
        help="Technology to use for the add-in (default: html)",
    )
    parser.add_argument(
        "--outlook-form",
        default=",".join(c.value for c in ALL_CAPABILITIES),
        help="Comma-separated Outlook forms to support (default: all)",
    )
    parser.add_argument(
        "--app-id",
        default=config.default_auth_client_id,
        help="Application ID as registered in Azure AD (ng-adal only)",
    )
    parser.add_argument(
        "--start-page",
        default=None,
        help="Add-in start URL (manifest-only)",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Skip running the package manager after scaffolding",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Load generator settings from a JSON file instead of the environment",
    )
    parser.add_argument(
        "--save-config",
        default=None,
        help="Write the effective generator settings to a JSON file",
    )
    parser.add_argument(
        "--output", "-o",
        default=".",
        help="Project root directory (default: current directory)",
    )
    return parser


def load_config(argv: list[str] | None = None) -> GeneratorConfig:
    """Load the generator settings named by ``--config``, or from the environment."""
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", default=None)
    known, _rest = pre.parse_known_args(argv)
    if not known.config:
        return GeneratorConfig.from_env()
    try:
        return GeneratorConfig.load(Path(known.config))
    except (OSError, ValueError) as exc:
        print_error(f"Error: cannot load config {known.config}: {exc}")
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``addin-scaffold``."""
    config = load_config(argv)
    args = build_parser(config).parse_args(argv)
    if args.save_config:
        print_info(f"Saved settings to {config.save(Path(args.save_config))}")

    answers = RawAnswers(
        name=args.name,
        root_path=args.root_path,
        tech=args.tech,
        outlook_form=[f.strip() for f in args.outlook_form.split(",") if f.strip()],
        app_id=args.app_id,
        start_page=args.start_page,
    )

    started = time.monotonic()
    try:
        settings = resolve(answers)
        generator = AddinGenerator(config)
        result = asyncio.run(generator.generate(settings, Path(args.output)))
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    print_summary_table(
        {
            "Add-in": result.settings.display_name,
            "Technology": result.settings.technology.value,
            "Outlook forms": ", ".join(c.value for c in result.settings.capabilities),
            "Manifest": result.descriptor_path,
            "Files written": str(len(result.written)),
            "Manifests merged": ", ".join(result.merged) or "none",
        },
        title="Add-in generated",
    )

    asyncio.run(
        install_dependencies(
            result.project_root, result.settings, config, skip_install=args.skip_install
        )
    )
    print_success(f"Done in {format_duration(time.monotonic() - started)}")


if __name__ == "__main__":
    main()
