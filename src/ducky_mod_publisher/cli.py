"""Command-line interface for packaging and publishing mods.

This module provides the ``ducky`` entry point with ``nuget`` and
``steam`` command groups.
"""

import argparse
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from . import __version__
from .config import resolve_nuget_config
from .core.types import ValidationResult
from .errors import DuckyError
from .platforms.nuget import NuGetPublisher
from .platforms.steam.progress import render_progress_bar
from .platforms.steam.supervisor import DEFAULT_TIMEOUT
from .registry import FormatRegistry

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr, at DEBUG level when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )


def print_validation_result(result: ValidationResult) -> None:
    for warning in result.warnings:
        print(f"⚠ {warning}", file=sys.stderr)

    for error in result.errors:
        print(error.format(), file=sys.stderr)
        print(file=sys.stderr)


def make_progress_printer() -> Callable[[int, int], None]:
    """Create a callback that redraws one progress line on stderr."""

    def on_progress(bytes_processed: int, bytes_total: int) -> None:
        end = "\n" if bytes_total and bytes_processed >= bytes_total else ""
        print(f"\r{render_progress_bar(bytes_processed, bytes_total)}", end=end, file=sys.stderr, flush=True)

    return on_progress


def nuget_pack(args: argparse.Namespace) -> int:
    pipeline = FormatRegistry.create_pipeline("nuget", output_dir=args.output)

    print(f"Packing mod: {Path(args.path).resolve()}", file=sys.stderr)
    result = pipeline.run(Path(args.path))

    print(f"Package created: {result.artifact}", file=sys.stderr)
    return 0


def nuget_push(args: argparse.Namespace) -> int:
    config = resolve_nuget_config(api_key=args.api_key, server=args.server, verbose=args.verbose or None)

    if args.pack:
        pipeline = FormatRegistry.create_pipeline("nuget", output_dir=args.output, config=config)
        result = pipeline.run(Path(args.path), push=True)
        print(f"Package created: {result.artifact}", file=sys.stderr)
    else:
        publisher = NuGetPublisher(output_dir=args.output, config=config)
        publisher.push(Path(args.path).resolve())

    print("Package pushed successfully!", file=sys.stderr)
    return 0


def run_validate(format_name: str, args: argparse.Namespace) -> int:
    pipeline = FormatRegistry.create_pipeline(format_name)

    _, result = pipeline.validate(Path(args.path))
    print_validation_result(result)

    if not result.valid:
        print(f"✖ Validation failed with {len(result.errors)} error(s)", file=sys.stderr)
        return 1

    print("✔ Validation passed", file=sys.stderr)
    return 0


def steam_push(args: argparse.Namespace) -> int:
    timeout = args.timeout if args.timeout and args.timeout > 0 else None
    pipeline = FormatRegistry.create_pipeline(
        "steam",
        timeout=timeout,
        on_progress=make_progress_printer(),
        verbose=args.verbose,
    )

    result = pipeline.run(
        Path(args.path),
        update_description=args.update_description,
        changelog=args.changelog,
        skip_tail=args.skip_tail,
    )

    action = "Created" if result.created else "Updated"
    print(f"✔ {action} Workshop item {result.published_file_id}", file=sys.stderr)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ducky",
        description="Package and publish game mods to NuGet and the Steam Workshop",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate and package a mod into ./pkg
  ducky nuget pack ./MyMod

  # Package and push in one step
  ducky nuget push ./MyMod --pack --api-key $NUGET_API_KEY

  # Push an existing package to a private feed
  ducky nuget push pkg/MyMod.1.0.0.nupkg -s https://nuget.example.com/v3/index.json

  # Upload to the Steam Workshop with every localized description
  ducky steam push ./MyMod --update-description --changelog "Fix crash on load"
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    verbose = argparse.ArgumentParser(add_help=False)
    verbose.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")

    groups = parser.add_subparsers(dest="format", metavar="{nuget,steam}")
    groups.required = True

    # nuget
    nuget = groups.add_parser("nuget", help="NuGet package commands")
    nuget_commands = nuget.add_subparsers(dest="command", metavar="{pack,push,validate}")
    nuget_commands.required = True

    pack = nuget_commands.add_parser("pack", parents=[verbose], help="Package a mod into a .nupkg file")
    pack.add_argument("path", help="Path to mod directory")
    pack.add_argument("-o", "--output", type=Path, help="Output directory for the .nupkg file (default: ./pkg)")
    pack.set_defaults(handler=nuget_pack)

    push = nuget_commands.add_parser("push", parents=[verbose], help="Publish a .nupkg file to a NuGet server")
    push.add_argument("path", help="Path to .nupkg file, or mod directory with --pack")
    push.add_argument("-p", "--pack", action="store_true", help="Package the mod before pushing")
    push.add_argument("-s", "--server", help="NuGet server URL")
    push.add_argument("-k", "--api-key", help="NuGet API key")
    push.add_argument("-o", "--output", type=Path, help="Output directory for the .nupkg file (with --pack)")
    push.set_defaults(handler=nuget_push)

    nuget_validate = nuget_commands.add_parser(
        "validate", parents=[verbose], help="Check a mod against the NuGet packaging rules"
    )
    nuget_validate.add_argument("path", help="Path to mod directory")
    nuget_validate.set_defaults(handler=lambda args: run_validate("nuget", args))

    # steam
    steam = groups.add_parser("steam", help="Steam Workshop commands")
    steam_commands = steam.add_subparsers(dest="command", metavar="{push,validate}")
    steam_commands.required = True

    steam_validate = steam_commands.add_parser(
        "validate", parents=[verbose], help="Check a mod against the Workshop upload requirements"
    )
    steam_validate.add_argument("path", help="Path to mod directory")
    steam_validate.set_defaults(handler=lambda args: run_validate("steam", args))

    upload = steam_commands.add_parser("push", parents=[verbose], help="Push a mod to the Steam Workshop")
    upload.add_argument("path", help="Path to mod directory")
    upload.add_argument(
        "--update-description",
        action="store_true",
        help="Update Workshop descriptions from description/*.md files",
    )
    upload.add_argument("--changelog", metavar="NOTE", help="Change note for this update")
    upload.add_argument(
        "--skip-tail",
        action="store_true",
        help="Do not append the submission footer to descriptions and change notes",
    )
    upload.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        metavar="SECONDS",
        help=f"Abort the upload after this many seconds, 0 to wait forever (default: {DEFAULT_TIMEOUT})",
    )
    upload.set_defaults(handler=steam_push)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the ``ducky`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    try:
        return args.handler(args)
    except DuckyError as e:
        logger.debug("Command failed with %s", e.code)
        print(e.format(), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
