"""Basic NuGet packaging example.

This example demonstrates how to:
- Validate a mod directory
- Print warnings and errors with suggestions
- Package the mod into a .nupkg file
"""

import sys
from pathlib import Path

from ducky_mod_publisher import DuckyError, FormatRegistry


def main():
    # Change this to your mod directory
    mod_dir = Path.home() / "Mods" / "MyMod"

    if not mod_dir.exists():
        print(f"Directory not found: {mod_dir}", file=sys.stderr)
        print("Please update the mod_dir variable in this script", file=sys.stderr)
        return

    pipeline = FormatRegistry.create_pipeline("nuget", output_dir=Path("pkg"))

    # Validate first so every problem is shown at once
    prepared, result = pipeline.validate(mod_dir)
    for warning in result.warnings:
        print(f"⚠ {warning}", file=sys.stderr)
    for error in result.errors:
        print(error.format(), file=sys.stderr)

    if not result.valid:
        print(f"\n✖ {len(result.errors)} error(s), nothing packaged", file=sys.stderr)
        return

    print(f"Packing {prepared.metadata.title} v{prepared.metadata.version}", file=sys.stderr)

    try:
        publish_result = pipeline.run(mod_dir)
    except DuckyError as e:
        print(e.format(), file=sys.stderr)
        return

    print(f"\n✓ Package created: {publish_result.artifact}", file=sys.stderr)


if __name__ == "__main__":
    main()
